"""
Tests unitaires pour la décision de gestion (role gate) et la navigation par rôle.
"""

import pytest

from edulink.services.roles import (
    ASSIGNABLE_ROLES,
    Role,
    can_manage,
    can_manage_course,
    menu_for,
    parse_role,
)


# --- can_manage ---

@pytest.mark.parametrize("role", ["admin", "director", Role.ADMIN, Role.DIRECTOR])
def test_can_manage_roles_gestionnaires(role):
    assert can_manage(role, False) is True


@pytest.mark.parametrize("role", ["teacher", "student", "parent"])
def test_can_manage_autres_roles_sans_propriete(role):
    assert can_manage(role, False) is False


@pytest.mark.parametrize("role", ["teacher", "student", "parent", "admin", "director"])
def test_can_manage_proprietaire_toujours_autorise(role):
    assert can_manage(role, True) is True


def test_can_manage_role_inconnu():
    assert can_manage("superuser", False) is False
    assert can_manage(None, False) is False
    assert can_manage("superuser", True) is True


def test_can_manage_course_enseignant_du_cours():
    assert can_manage_course("teacher", "t-1", "t-1") is True


def test_can_manage_course_autre_enseignant():
    assert can_manage_course("teacher", "t-2", "t-1") is False


def test_can_manage_course_uid_vide_jamais_proprietaire():
    assert can_manage_course("teacher", "", "") is False


def test_can_manage_course_directeur():
    assert can_manage_course("director", "d-1", "t-1") is True


# --- parse_role ---

def test_parse_role_valeurs():
    assert parse_role("teacher") is Role.TEACHER
    assert parse_role(Role.PARENT) is Role.PARENT
    assert parse_role("Teacher") is None
    assert parse_role(None) is None


def test_director_non_attribuable():
    assert Role.DIRECTOR not in ASSIGNABLE_ROLES
    assert len(ASSIGNABLE_ROLES) == 4


# --- menu_for ---

def test_menu_admin_complet():
    hrefs = [item.href for item in menu_for("admin")]
    assert len(hrefs) == 9
    assert hrefs[0] == "/dashboard"
    assert "/dashboard/settings" in hrefs


def test_menu_enseignant():
    hrefs = {item.href for item in menu_for("teacher")}
    assert hrefs == {
        "/dashboard",
        "/dashboard/academics",
        "/dashboard/students",
        "/dashboard/grades",
        "/dashboard/communication",
    }


def test_menu_eleve_sans_ecrans_admin():
    hrefs = {item.href for item in menu_for("student")}
    assert "/dashboard/finances" in hrefs
    assert "/dashboard/students" not in hrefs
    assert "/dashboard/schools" not in hrefs


def test_menu_parent():
    hrefs = {item.href for item in menu_for("parent")}
    assert "/dashboard/students" in hrefs
    assert "/dashboard/academics" not in hrefs


def test_menu_role_inconnu_vide():
    assert menu_for("unknown") == []
    assert menu_for(None) == []
