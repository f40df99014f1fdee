"""
Tests d'intégration API pour l'écran Enseignants.
"""

from unittest.mock import patch

from edulink.schemas.common import Notification
from edulink.schemas.teacher import TeacherDetailResponse, TeacherResponse


def make_teacher_response(**kwargs) -> TeacherResponse:
    return TeacherResponse(
        id="t-1",
        first_name=kwargs.get("first_name", "Luis"),
        last_name="Gómez",
        email="luis@edulink.school",
        school_id=kwargs.get("school_id", "school-1"),
        school_name=kwargs.get("school_name", "Colegio Central"),
    )


def test_liste_reservee_admin(client, login_as):
    login_as("director")
    response = client.get("/api/v1/teachers")
    assert response.status_code == 403


def test_liste_enseignants(client, login_as):
    login_as("admin")
    with patch("edulink.routers.teachers.teacher_service.list_teachers") as mock:
        mock.return_value = [make_teacher_response()]
        response = client.get("/api/v1/teachers")

    assert response.status_code == 200
    assert response.json()[0]["school_name"] == "Colegio Central"


def test_detail_enseignant(client, login_as):
    login_as("admin")
    with patch("edulink.routers.teachers.teacher_service.get_teacher_detail") as mock:
        mock.return_value = TeacherDetailResponse(teacher=make_teacher_response(), courses=[])
        response = client.get("/api/v1/teachers/t-1")

    assert response.status_code == 200
    assert response.json()["courses"] == []


def test_detail_enseignant_introuvable(client, login_as):
    login_as("admin")
    with patch("edulink.routers.teachers.teacher_service.get_teacher_detail") as mock:
        mock.return_value = None
        response = client.get("/api/v1/teachers/inconnu")

    assert response.status_code == 404


def test_modifier_enseignant_changement_d_ecole(client, login_as):
    login_as("admin")
    with patch("edulink.routers.teachers.teacher_service.update_teacher") as mock:
        mock.return_value = (
            make_teacher_response(school_id="school-2", school_name="Colegio Norte"),
            Notification(title="Enseignant mis à jour"),
        )
        response = client.put("/api/v1/teachers/t-1",
                              json={"first_name": "Luis", "last_name": "Gómez", "school_id": "school-2"})

    assert response.status_code == 200
    assert response.json()["data"]["school_name"] == "Colegio Norte"


def test_modifier_enseignant_ecole_inactive(client, login_as):
    login_as("admin")
    with patch("edulink.routers.teachers.teacher_service.update_teacher") as mock:
        mock.side_effect = ValueError("École introuvable ou inactive.")
        response = client.put("/api/v1/teachers/t-1",
                              json={"first_name": "Luis", "last_name": "Gómez", "school_id": "school-old"})

    assert response.status_code == 422


def test_modifier_enseignant_prenom_trop_court(client, login_as):
    login_as("admin")
    response = client.put("/api/v1/teachers/t-1",
                          json={"first_name": "L", "last_name": "Gómez", "school_id": "school-1"})
    assert response.status_code == 422
