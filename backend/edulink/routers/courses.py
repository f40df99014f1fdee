"""
Router du détail d'un cours et de ses onglets : élèves, présences, tâches et notation.

Le détail est visible par tout utilisateur connecté (avec la décision can_manage).
Les onglets exigent le droit de gestion : admin, directeur ou enseignant du cours.
La liste des tâches est aussi lisible par les élèves inscrits au cours.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket
from sqlalchemy.orm import Session

from edulink.database import get_db
from edulink.dependencies import get_current_profile, get_websocket_profile
from edulink.models.course import Course
from edulink.models.task import Task
from edulink.models.user import UserProfile
from edulink.schemas.attendance import AttendanceRecordResponse, AttendanceSheet, AttendanceUpdate
from edulink.schemas.common import MutationResponse, Notification
from edulink.schemas.course import CourseDetailResponse, CourseStudentsResponse
from edulink.schemas.task import (
    GradeUpdate,
    GradingBuffer,
    SubmissionResponse,
    TaskCreate,
    TaskResponse,
    TaskSubmissionsResponse,
    TaskUpdate,
)
from edulink.services import course_service, task_service
from edulink.services.attendance_service import AttendanceRecorder, attendance_path
from edulink.services.change_feed import stream_changes

router = APIRouter(prefix="/api/v1/courses", tags=["Cours"])

COURSE_NOT_FOUND = "Cours introuvable."
TASK_NOT_FOUND = "Tâche introuvable."


def _manageable_course(db: Session, course_id: str, profile: UserProfile) -> Course:
    try:
        course = course_service.require_manageable_course(db, course_id, profile)
    except PermissionError:
        raise HTTPException(status_code=403, detail="Accès restreint : vous ne gérez pas ce cours.")
    if course is None:
        raise HTTPException(status_code=404, detail=COURSE_NOT_FOUND)
    return course


def _readable_course(db: Session, course_id: str, profile: UserProfile) -> Course:
    try:
        course = course_service.require_readable_course(db, course_id, profile)
    except PermissionError:
        raise HTTPException(status_code=403, detail="Accès restreint : vous n'êtes pas inscrit à ce cours.")
    if course is None:
        raise HTTPException(status_code=404, detail=COURSE_NOT_FOUND)
    return course


def _course_task(db: Session, course: Course, task_id: str) -> Task:
    task = task_service.get_task(db, course.id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return task


@router.get("/{course_id}", response_model=CourseDetailResponse, summary="Détail d'un cours")
def get_course(course_id: str, profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    detail = course_service.get_course_detail(db, course_id, profile)
    if detail is None:
        raise HTTPException(status_code=404, detail=COURSE_NOT_FOUND)
    return detail


@router.get("/{course_id}/students", response_model=CourseStudentsResponse, summary="Élèves inscrits")
def list_course_students(course_id: str, profile: UserProfile = Depends(get_current_profile),
                         db: Session = Depends(get_db)):
    course = _manageable_course(db, course_id, profile)
    return course_service.get_course_students(db, course)


# --- Présences ---

@router.get("/{course_id}/attendance", response_model=AttendanceSheet, summary="Feuille de présence du jour")
def get_attendance(
    course_id: str,
    date: Optional[dt.date] = None,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Élèves inscrits avec leur statut pour la date (aujourd'hui par défaut)."""
    course = _manageable_course(db, course_id, profile)
    recorder = AttendanceRecorder(db, has_permission=True)
    recorder.load(course.id, date or dt.date.today())
    return recorder.sheet()


@router.put("/{course_id}/attendance/{student_id}", response_model=MutationResponse[AttendanceRecordResponse],
            summary="Enregistrer la présence d'un élève")
def set_attendance(
    course_id: str,
    student_id: str,
    data: AttendanceUpdate,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Un seul enregistrement par (élève, date) : une nouvelle écriture remplace la précédente."""
    course = _manageable_course(db, course_id, profile)
    recorder = AttendanceRecorder(db, has_permission=True)
    recorder.load(course.id, data.date)
    try:
        record, notification = recorder.set_status(student_id, data.status)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MutationResponse[AttendanceRecordResponse](data=record, notification=notification)


@router.websocket("/{course_id}/attendance/{day}/watch")
async def watch_attendance(websocket: WebSocket, course_id: str, day: dt.date, token: Optional[str] = None,
                           db: Session = Depends(get_db)):
    """Feuille du jour puis chaque présence enregistrée ensuite."""
    viewer = get_websocket_profile(db, token)
    course = course_service.get_course(db, course_id)
    if viewer is None or course is None or not course_service.user_can_manage(viewer, course):
        await websocket.close(code=1008)
        return

    async def snapshot():
        db.expire_all()
        recorder = AttendanceRecorder(db, has_permission=True)
        recorder.load(course_id, day)
        return recorder.sheet().model_dump(mode="json")

    await websocket.accept()
    await stream_changes(websocket, attendance_path(course_id, day), snapshot)


# --- Tâches ---

@router.get("/{course_id}/tasks", response_model=List[TaskResponse], summary="Lister les tâches")
def list_tasks(course_id: str, profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    course = _readable_course(db, course_id, profile)
    return task_service.list_tasks(db, course.id)


@router.post("/{course_id}/tasks", response_model=MutationResponse[TaskResponse], status_code=201,
             summary="Créer une tâche")
def create_task(course_id: str, data: TaskCreate, profile: UserProfile = Depends(get_current_profile),
                db: Session = Depends(get_db)):
    course = _manageable_course(db, course_id, profile)
    task, notification = task_service.create_task(db, course.id, data)
    return MutationResponse[TaskResponse](data=task, notification=notification)


@router.put("/{course_id}/tasks/{task_id}", response_model=MutationResponse[TaskResponse],
            summary="Modifier une tâche")
def update_task(course_id: str, task_id: str, data: TaskUpdate,
                profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    course = _manageable_course(db, course_id, profile)
    try:
        result = task_service.update_task(db, course.id, task_id, data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    task, notification = result
    return MutationResponse[TaskResponse](data=task, notification=notification)


@router.delete("/{course_id}/tasks/{task_id}", response_model=Notification, summary="Supprimer une tâche")
def delete_task(course_id: str, task_id: str, profile: UserProfile = Depends(get_current_profile),
                db: Session = Depends(get_db)):
    course = _manageable_course(db, course_id, profile)
    notification = task_service.delete_task(db, course.id, task_id)
    if notification is None:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return notification


# --- Remises et notation ---

@router.get("/{course_id}/tasks/{task_id}/submissions", response_model=TaskSubmissionsResponse,
            summary="Remises d'une tâche")
def list_submissions(course_id: str, task_id: str, profile: UserProfile = Depends(get_current_profile),
                     db: Session = Depends(get_db)):
    course = _manageable_course(db, course_id, profile)
    task = _course_task(db, course, task_id)
    return task_service.get_task_submissions(db, task)


@router.get("/{course_id}/tasks/{task_id}/grades/{student_id}", response_model=GradingBuffer,
            summary="Ouvrir la notation d'un élève")
def open_grading(course_id: str, task_id: str, student_id: str,
                 profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    course = _manageable_course(db, course_id, profile)
    task = _course_task(db, course, task_id)
    try:
        return task_service.get_grading_buffer(db, task, student_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{course_id}/tasks/{task_id}/grades/{student_id}", response_model=MutationResponse[SubmissionResponse],
            summary="Enregistrer une note")
def save_grade(course_id: str, task_id: str, student_id: str, data: GradeUpdate,
               profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    """Note entre 0 et total_points. Sans remise, une remise « notée sans remise » est créée."""
    course = _manageable_course(db, course_id, profile)
    task = _course_task(db, course, task_id)
    try:
        submission, notification = task_service.save_grade(db, task, student_id, data.score)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MutationResponse[SubmissionResponse](data=submission, notification=notification)
