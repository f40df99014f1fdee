"""
Tests d'intégration API pour le détail d'un cours : accès, présences, tâches et notation.
"""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from starlette.websockets import WebSocketDisconnect

from edulink.models.course import Course
from edulink.models.task import Task
from edulink.schemas.attendance import AttendanceRecordResponse, AttendanceSheet
from edulink.schemas.common import Notification
from edulink.services.attendance_service import attendance_path
from edulink.services.change_feed import change_feed

COURSE = "/api/v1/courses/c-1"


# --- Helpers ---

def make_course(teacher_id="t-1") -> Course:
    return Course(
        id="c-1",
        school_id="school-1",
        subject_name="Matemáticas",
        section_id="sec-1",
        section_name="A",
        grade_name="Primer año",
        teacher_id=teacher_id,
    )


def make_task(course_id="c-1") -> Task:
    return Task(id="task-1", course_id=course_id, title="Ejercicios",
                due_date=datetime(2026, 3, 10, 23, 59), total_points=20)


def stub_db(mock_db, course=None, task=None):
    """db.get selon le modèle demandé."""
    mock_db.get.side_effect = lambda model, key: {Course: course, Task: task}.get(model)


# ============================================================
# Détail et accès
# ============================================================

def test_detail_calcule_can_manage(client, mock_db, login_as):
    stub_db(mock_db, course=make_course("t-1"))
    login_as("teacher", user_id="t-1")

    response = client.get(COURSE)

    assert response.status_code == 200
    assert response.json()["can_manage"] is True
    assert response.json()["course"]["title"] == "Matemáticas - Primer año A"


def test_detail_eleve_sans_gestion(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("student")

    response = client.get(COURSE)

    assert response.status_code == 200
    assert response.json()["can_manage"] is False


def test_detail_cours_introuvable(client, mock_db, login_as):
    stub_db(mock_db)
    login_as("admin")
    assert client.get(COURSE).status_code == 404


@pytest.mark.parametrize("path", ["/students", "/attendance", "/tasks"])
def test_onglets_refuses_a_un_autre_enseignant(client, mock_db, login_as, path):
    """Enseignant d'un autre cours → accès restreint."""
    stub_db(mock_db, course=make_course("t-1"))
    login_as("teacher", user_id="t-2")

    response = client.get(COURSE + path)

    assert response.status_code == 403
    assert "Accès restreint" in response.json()["detail"]


@pytest.mark.parametrize("role", ["student", "parent"])
def test_onglets_refuses_aux_eleves_et_parents(client, mock_db, login_as, role):
    stub_db(mock_db, course=make_course())
    login_as(role)
    assert client.get(COURSE + "/students").status_code == 403


def test_directeur_gere_tous_les_cours(client, mock_db, login_as):
    stub_db(mock_db, course=make_course("t-1"))
    login_as("director")
    with patch("edulink.routers.courses.task_service.list_tasks") as mock:
        mock.return_value = []
        response = client.get(COURSE + "/tasks")

    assert response.status_code == 200


# ============================================================
# Présences
# ============================================================

def test_feuille_de_presence_date_par_defaut(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("admin")
    with patch("edulink.routers.courses.AttendanceRecorder") as recorder_cls:
        recorder = recorder_cls.return_value
        recorder.sheet.return_value = AttendanceSheet(course_id="c-1", date="2026-03-10", state="ready", students=[])
        response = client.get(COURSE + "/attendance")

    assert response.status_code == 200
    course_id, day = recorder.load.call_args.args
    assert course_id == "c-1"
    assert day is not None


def test_enregistrer_presence(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("teacher", user_id="t-1")
    with patch("edulink.routers.courses.AttendanceRecorder") as recorder_cls:
        recorder_cls.return_value.set_status.return_value = (
            AttendanceRecordResponse(id="s-1_2026-03-10", course_id="c-1", student_id="s-1",
                                     student_name="Ana Pérez", date="2026-03-10", status="presente"),
            Notification(title="Présence enregistrée"),
        )
        response = client.put(COURSE + "/attendance/s-1", json={"date": "2026-03-10", "status": "presente"})

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "s-1_2026-03-10"
    recorder_cls.return_value.set_status.assert_called_once_with("s-1", "presente")


def test_enregistrer_presence_statut_invalide(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("admin")
    response = client.put(COURSE + "/attendance/s-1", json={"date": "2026-03-10", "status": "excusado"})
    assert response.status_code == 422


def test_enregistrer_presence_eleve_non_inscrit(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("admin")
    with patch("edulink.routers.courses.AttendanceRecorder") as recorder_cls:
        recorder_cls.return_value.set_status.side_effect = ValueError("Élève introuvable dans ce cours.")
        response = client.put(COURSE + "/attendance/s-9", json={"date": "2026-03-10", "status": "ausente"})

    assert response.status_code == 422


def test_suivi_presences_refuse_sans_droit(client, mock_db):
    stub_db(mock_db, course=make_course("t-1"))
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect(COURSE + "/attendance/2026-03-10/watch?token=invalide") as ws:
            ws.receive_json()
    assert exc.value.code == 1008


def test_suivi_presences_recoit_les_changements(client, mock_db):
    stub_db(mock_db, course=make_course("t-1"))
    teacher = MagicMock(id="t-1", role="teacher")
    sheet = AttendanceSheet(course_id="c-1", date="2026-03-10", state="ready", students=[])

    with patch("edulink.routers.courses.get_websocket_profile", return_value=teacher), \
            patch("edulink.routers.courses.AttendanceRecorder") as recorder_cls:
        recorder_cls.return_value.sheet.return_value = sheet
        with client.websocket_connect(COURSE + "/attendance/2026-03-10/watch?token=tok") as ws:
            assert ws.receive_json()["state"] == "ready"

            change_feed.publish(attendance_path("c-1", datetime(2026, 3, 10).date()),
                                {"student_id": "s-1", "status": "tardanza"})

            assert ws.receive_json() == {"student_id": "s-1", "status": "tardanza"}


# ============================================================
# Tâches
# ============================================================

def test_creer_tache(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("teacher", user_id="t-1")

    response = client.post(COURSE + "/tasks", json={
        "title": "Ejercicios", "due_date": "2026-03-10T23:59:00", "total_points": 20,
    })

    assert response.status_code == 201
    assert response.json()["data"]["course_id"] == "c-1"
    assert response.json()["data"]["total_points"] == 20
    mock_db.add.assert_called_once()


def test_creer_tache_titre_trop_court(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("admin")
    response = client.post(COURSE + "/tasks", json={"title": "Ej", "due_date": "2026-03-10T23:59:00"})
    assert response.status_code == 422


def test_tache_d_un_autre_cours_introuvable(client, mock_db, login_as):
    stub_db(mock_db, course=make_course(), task=make_task(course_id="c-2"))
    login_as("admin")
    assert client.get(COURSE + "/tasks/task-1/submissions").status_code == 404


def test_eleve_inscrit_voit_les_taches(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("student", user_id="s-1")
    with patch("edulink.routers.courses.task_service.list_tasks") as mock:
        task = make_task()
        task.is_group_task = False
        mock.return_value = [task]
        response = client.get(COURSE + "/tasks")

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == ["task-1"]


def test_eleve_non_inscrit_ne_voit_pas_les_taches(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    mock_db.execute.return_value.scalars.return_value.first.return_value = None
    login_as("student", user_id="s-9")

    response = client.get(COURSE + "/tasks")

    assert response.status_code == 403
    assert "Accès restreint" in response.json()["detail"]


def test_eleve_inscrit_ne_cree_pas_de_tache(client, mock_db, login_as):
    stub_db(mock_db, course=make_course())
    login_as("student", user_id="s-1")

    response = client.post(COURSE + "/tasks", json={
        "title": "Ejercicios", "due_date": "2026-03-10T23:59:00", "total_points": 20,
    })

    assert response.status_code == 403
    mock_db.add.assert_not_called()


def test_modifier_tache_echeance_vide(client, mock_db, login_as):
    stub_db(mock_db, course=make_course(), task=make_task())
    login_as("admin")
    with patch("edulink.routers.courses.task_service.update_task") as mock:
        mock.side_effect = ValueError("La date d'échéance est obligatoire.")
        response = client.put(COURSE + "/tasks/task-1", json={"due_date": None})

    assert response.status_code == 422


# ============================================================
# Notation
# ============================================================

@pytest.mark.parametrize("score", ["abc", "", -1, 25])
def test_note_invalide_aucune_ecriture(client, mock_db, login_as, score):
    """Note non numérique ou hors de [0, total_points] → 422 sans écriture."""
    stub_db(mock_db, course=make_course(), task=make_task())
    login_as("teacher", user_id="t-1")

    response = client.put(COURSE + "/tasks/task-1/grades/s-1", json={"score": score})

    assert response.status_code == 422
    mock_db.commit.assert_not_called()


def test_note_sans_remise(client, mock_db, login_as):
    """Sans remise existante : une remise « notée sans remise » est créée."""
    stub_db(mock_db, course=make_course(), task=make_task())
    login_as("teacher", user_id="t-1")

    response = client.put(COURSE + "/tasks/task-1/grades/s-1", json={"score": "18.5"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "graded_without_submission"
    assert data["score"] == 18.5
    assert data["submitted_at"] is None
    mock_db.commit.assert_called_once()


def test_ouvrir_notation(client, mock_db, login_as):
    stub_db(mock_db, course=make_course(), task=make_task())
    login_as("admin")

    response = client.get(COURSE + "/tasks/task-1/grades/s-1")

    assert response.status_code == 200
    assert response.json() == {"student_id": "s-1", "score": ""}


@pytest.mark.parametrize("student_id", ["s-2", "inconnu"])
def test_note_eleve_non_inscrit_introuvable(client, mock_db, login_as, student_id):
    stub_db(mock_db, course=make_course(), task=make_task())
    mock_db.execute.return_value.scalars.return_value.first.return_value = None
    login_as("teacher", user_id="t-1")

    response = client.put(COURSE + f"/tasks/task-1/grades/{student_id}", json={"score": 15})

    assert response.status_code == 404
    assert "non inscrit" in response.json()["detail"]
    mock_db.add.assert_not_called()
    mock_db.commit.assert_not_called()


def test_ouvrir_notation_eleve_non_inscrit(client, mock_db, login_as):
    stub_db(mock_db, course=make_course(), task=make_task())
    mock_db.execute.return_value.scalars.return_value.first.return_value = None
    login_as("admin")

    assert client.get(COURSE + "/tasks/task-1/grades/s-2").status_code == 404
