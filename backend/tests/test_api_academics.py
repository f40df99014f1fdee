"""
Tests d'intégration API pour l'écran Académique.
"""

from unittest.mock import patch

import pytest

from edulink.schemas.academics import SubjectResponse
from edulink.schemas.common import Notification
from edulink.schemas.course import CourseResponse

BASE = "/api/v1/schools/school-1"


def make_course_response() -> CourseResponse:
    return CourseResponse(
        id="c-1",
        school_id="school-1",
        subject_id="sub-1",
        subject_name="Matemáticas",
        section_id="sec-1",
        section_name="A",
        grade_name="Primer año",
        teacher_id="t-1",
        teacher_name="Luis Gómez",
        schedule="Lun 8h-10h",
        title="Matemáticas - Primer año A",
    )


def test_lecture_ouverte_aux_utilisateurs_connectes(client, login_as):
    login_as("student")
    with patch("edulink.routers.academics.academics_service.list_subjects") as mock:
        mock.return_value = [SubjectResponse(id="sub-1", school_id="school-1", name="Matemáticas")]
        response = client.get(f"{BASE}/subjects")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Matemáticas"


def test_lecture_sans_authentification(client):
    response = client.get(f"{BASE}/subjects")
    assert response.status_code == 401


@pytest.mark.parametrize("role", ["teacher", "student", "parent"])
def test_ecriture_refusee(client, login_as, role):
    login_as(role)
    response = client.post(f"{BASE}/subjects", json={"name": "Historia"})
    assert response.status_code == 403


def test_directeur_peut_creer_une_matiere(client, login_as):
    login_as("director")
    with patch("edulink.routers.academics.academics_service.create_subject") as mock:
        mock.return_value = (SubjectResponse(id="sub-2", school_id="school-1", name="Historia"),
                             Notification(title="Matière créée"))
        response = client.post(f"{BASE}/subjects", json={"name": "Historia"})

    assert response.status_code == 201
    assert response.json()["data"]["name"] == "Historia"


def test_creer_matiere_nom_trop_court(client, login_as):
    login_as("admin")
    response = client.post(f"{BASE}/subjects", json={"name": "ab"})
    assert response.status_code == 422


def test_creer_matiere_ecole_introuvable(client, login_as):
    login_as("admin")
    with patch("edulink.routers.academics.academics_service.create_subject") as mock:
        mock.side_effect = LookupError("École introuvable.")
        response = client.post(f"{BASE}/subjects", json={"name": "Historia"})

    assert response.status_code == 404


def test_supprimer_matiere_utilisee(client, login_as):
    login_as("admin")
    with patch("edulink.routers.academics.academics_service.delete_subject") as mock:
        mock.side_effect = ValueError("Impossible de supprimer cette matière : elle est utilisée par des cours.")
        response = client.delete(f"{BASE}/subjects/sub-1")

    assert response.status_code == 409


def test_supprimer_niveau_introuvable(client, login_as):
    login_as("admin")
    with patch("edulink.routers.academics.academics_service.delete_grade_level") as mock:
        mock.return_value = None
        response = client.delete(f"{BASE}/grade-levels/g-x")

    assert response.status_code == 404


def test_creer_section_sans_niveau(client, login_as):
    login_as("admin")
    response = client.post(f"{BASE}/sections", json={"name": "A", "grade_level_id": " "})
    assert response.status_code == 422


def test_assigner_cours(client, login_as):
    login_as("admin")
    with patch("edulink.routers.academics.academics_service.assign_course") as mock:
        mock.return_value = (make_course_response(), Notification(title="Cours assigné"))
        response = client.post(f"{BASE}/sections/sec-1/courses",
                               json={"subject_id": "sub-1", "teacher_id": "t-1", "schedule": "Lun 8h-10h"})

    assert response.status_code == 201
    assert response.json()["data"]["title"] == "Matemáticas - Primer año A"


def test_assigner_cours_enseignant_non_rattache(client, login_as):
    login_as("admin")
    with patch("edulink.routers.academics.academics_service.assign_course") as mock:
        mock.side_effect = ValueError("Cet enseignant n'est pas rattaché à l'école.")
        response = client.post(f"{BASE}/sections/sec-1/courses",
                               json={"subject_id": "sub-1", "teacher_id": "t-9", "schedule": "Lun 8h-10h"})

    assert response.status_code == 422


def test_cours_filtres_par_section(client, login_as):
    login_as("teacher")
    with patch("edulink.routers.academics.academics_service.list_school_courses") as mock:
        mock.return_value = [make_course_response()]
        response = client.get(f"{BASE}/courses?section_id=sec-1")

    assert response.status_code == 200
    assert mock.call_args.args[1:] == ("school-1", "sec-1")


def test_enseignants_de_l_ecole(client, login_as):
    login_as("admin")
    with patch("edulink.routers.academics.school_teachers") as mock:
        mock.return_value = []
        response = client.get(f"{BASE}/teachers")

    assert response.status_code == 200
    assert response.json() == []
