"""
Rôles, décision de gestion (role gate) et navigation par rôle.

can_manage est une commodité d'affichage : la vraie barrière reste côté serveur
(les routers refusent l'écriture en 403), un client peut toujours émettre la requête.
"""

from enum import Enum
from typing import List, NamedTuple, Optional


class Role(str, Enum):
    ADMIN = "admin"
    DIRECTOR = "director"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"


# Rôles attribuables depuis l'écran Utilisateurs
ASSIGNABLE_ROLES = (Role.ADMIN, Role.TEACHER, Role.STUDENT, Role.PARENT)

MANAGER_ROLES = frozenset({Role.ADMIN, Role.DIRECTOR})


def parse_role(value) -> Optional[Role]:
    """Convertit une valeur stockée en Role, None si le rôle est inconnu."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def can_manage(role, is_owner: bool) -> bool:
    """True si le rôle est admin/director, ou si l'utilisateur est propriétaire de la ressource."""
    return parse_role(role) in MANAGER_ROLES or is_owner is True


def can_manage_course(role, user_id: str, course_teacher_id: str) -> bool:
    """Recalculé à chaque requête depuis le profil et le cours courants, jamais mis en cache."""
    return can_manage(role, bool(user_id) and user_id == course_teacher_id)


class NavItem(NamedTuple):
    href: str
    label: str
    icon: str
    roles: tuple


MENU_ITEMS: List[NavItem] = [
    NavItem("/dashboard", "Tableau de bord", "LayoutDashboard",
            (Role.ADMIN, Role.TEACHER, Role.STUDENT, Role.PARENT)),
    NavItem("/dashboard/schools", "Écoles", "School", (Role.ADMIN,)),
    NavItem("/dashboard/academics", "Pédagogie", "BookOpen",
            (Role.ADMIN, Role.TEACHER, Role.STUDENT)),
    NavItem("/dashboard/students", "Élèves", "Users", (Role.ADMIN, Role.TEACHER, Role.PARENT)),
    NavItem("/dashboard/teachers", "Enseignants", "GraduationCap", (Role.ADMIN,)),
    NavItem("/dashboard/grades", "Notes", "ClipboardList",
            (Role.ADMIN, Role.TEACHER, Role.STUDENT, Role.PARENT)),
    NavItem("/dashboard/finances", "Finances", "Banknote", (Role.ADMIN, Role.STUDENT, Role.PARENT)),
    NavItem("/dashboard/communication", "Communication", "MessageSquare",
            (Role.ADMIN, Role.TEACHER, Role.STUDENT, Role.PARENT)),
    NavItem("/dashboard/settings", "Paramètres", "Settings", (Role.ADMIN,)),
]


def menu_for(role) -> List[NavItem]:
    """Entrées de menu visibles pour un rôle, dans l'ordre d'affichage. Rôle inconnu → menu vide."""
    parsed = parse_role(role)
    if parsed is None:
        return []
    return [item for item in MENU_ITEMS if parsed in item.roles]
