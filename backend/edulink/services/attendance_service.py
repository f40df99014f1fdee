"""
Prise de présences d'un cours pour une date.

Cycle de vie d'un AttendanceRecorder :
  idle → loading (inscriptions, profils, présences du jour) → ready
  Tout changement de (cours, date) repasse par loading.

Écriture :
- id déterministe "{student_id}_{date}" + merge → un seul document par (élève, jour),
  la dernière écriture l'emporte (pas de détection de conflit)
- le statut local n'est mis à jour qu'APRÈS confirmation de l'écriture
- en cas d'échec, rien n'est annulé localement : MutationError remonte avec sa notification
"""

import logging
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from edulink.models.attendance import AttendanceRecord
from edulink.models.course import Enrollment
from edulink.models.user import UserProfile
from edulink.schemas.attendance import AttendanceRecordResponse, AttendanceRow, AttendanceSheet
from edulink.schemas.common import Notification
from edulink.services.change_feed import change_feed
from edulink.services.collection_joiner import CollectionJoiner
from edulink.services.mutations import dispatch

logger = logging.getLogger(__name__)

VALID_STATUSES = ("presente", "ausente", "tardanza")


class RecorderState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


def attendance_record_id(student_id: str, day: date) -> str:
    return f"{student_id}_{day.isoformat()}"


def attendance_path(course_id: str, day: date) -> str:
    return f"courses/{course_id}/attendance/{day.isoformat()}"


class AttendanceRecorder:
    def __init__(self, db: Session, has_permission: bool):
        self.db = db
        self.has_permission = has_permission
        self.state = RecorderState.IDLE
        self.course_id: Optional[str] = None
        self.day: Optional[date] = None
        self.students: List[UserProfile] = []
        self.statuses: Dict[str, str] = {}
        self._joiner = CollectionJoiner(db, Enrollment, "course_id", "student_id")
        self._loading_attendance = False

    @property
    def is_loading(self) -> bool:
        """OU logique des lectures en cours (inscriptions/profils et présences)."""
        return self._joiner.is_loading or self._loading_attendance

    def load(self, course_id: str, day: date) -> List[AttendanceRow]:
        """Charge la feuille du jour. Sans effet si (cours, date) n'a pas changé depuis le dernier chargement."""
        if self.state == RecorderState.READY and (course_id, day) == (self.course_id, self.day):
            return self.rows()

        self.state = RecorderState.LOADING
        self.course_id = course_id
        self.day = day
        self.students = []
        self.statuses = {}

        if self.has_permission:
            self.students = self._joiner.load(course_id)
            self.statuses = self._load_statuses(course_id, day)

        self.state = RecorderState.READY
        return self.rows()

    def _load_statuses(self, course_id: str, day: date) -> Dict[str, str]:
        self._loading_attendance = True
        try:
            records = self.db.execute(
                select(AttendanceRecord).where(
                    AttendanceRecord.course_id == course_id,
                    AttendanceRecord.date == day.isoformat(),
                )
            ).scalars().all()
        finally:
            self._loading_attendance = False
        return {r.student_id: r.status for r in records}

    def rows(self) -> List[AttendanceRow]:
        return [
            AttendanceRow(
                student_id=s.id,
                first_name=s.first_name,
                last_name=s.last_name,
                status=self.statuses.get(s.id),
            )
            for s in self.students
        ]

    def sheet(self) -> AttendanceSheet:
        return AttendanceSheet(
            course_id=self.course_id,
            date=self.day.isoformat(),
            state=self.state.value,
            students=self.rows(),
        )

    def set_status(self, student_id: str, status: str) -> Tuple[AttendanceRecordResponse, Notification]:
        """
        Enregistre le statut d'un élève pour la date chargée.
        PermissionError sans droit de gestion, ValueError si la feuille n'est pas prête,
        si l'élève n'est pas résolu ou si le statut est inconnu.
        """
        if not self.has_permission:
            raise PermissionError("Vous n'avez pas les permissions pour prendre les présences de ce cours.")
        if self.state != RecorderState.READY:
            raise ValueError("La feuille de présence n'est pas chargée.")
        if status not in VALID_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {VALID_STATUSES}")

        student = next((s for s in self.students if s.id == student_id), None)
        if student is None:
            raise ValueError("Élève introuvable pour enregistrer la présence.")

        record = AttendanceRecord(
            course_id=self.course_id,
            id=attendance_record_id(student_id, self.day),
            student_id=student.id,
            student_name=f"{student.first_name} {student.last_name}",
            date=self.day.isoformat(),
            status=status,
        )
        response = AttendanceRecordResponse.model_validate(record)

        _, notification = dispatch(
            self.db,
            lambda: self.db.merge(record),
            title="Présence mise à jour",
            description="La présence a été enregistrée.",
            failure_title="Erreur lors de l'enregistrement",
        )

        self.statuses[student_id] = status
        logger.info("Présence enregistrée : %s (cours %s) → %s", response.id, self.course_id, status)
        change_feed.publish(attendance_path(self.course_id, self.day), response.model_dump(mode="json"))
        return response, notification
