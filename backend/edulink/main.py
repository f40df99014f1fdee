"""
Point d'entrée principal de l'API EduLink.
Démarrage : uvicorn edulink.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import edulink.models  # noqa: F401, enregistre tous les modèles dans Base.metadata avant les routers
from edulink.config import ConfigurationError, settings
from edulink.routers import academics, auth, courses, dashboard, me, schools, students, teachers, users
from edulink.scheduler import start_scheduler, stop_scheduler
from edulink.services.mutations import MutationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : démarre et arrête le scheduler APScheduler."""
    if settings.ENABLE_SCHEDULER:
        start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="EduLink API",
    description="API du tableau de bord de gestion scolaire (écoles, cours, présences, tâches)",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : autorise le frontend configuré et localhost en développement.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(me.router)
app.include_router(users.router)
app.include_router(schools.router)
app.include_router(academics.router)
app.include_router(teachers.router)
app.include_router(students.router)
app.include_router(courses.router)
app.include_router(dashboard.router)


@app.exception_handler(MutationError)
async def mutation_error_handler(request: Request, exc: MutationError) -> JSONResponse:
    """Écriture refusée ou échouée : message générique et notification « destructive »."""
    return JSONResponse(
        status_code=500,
        content={
            "detail": exc.notification.description,
            "notification": exc.notification.model_dump(),
        },
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Compte de service absent ou invalide : la requête est abandonnée avec un message explicite."""
    logger.error("Erreur de configuration : %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "EduLink API", "version": "0.1.0"}
