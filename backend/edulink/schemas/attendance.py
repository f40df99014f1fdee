"""
Schémas Pydantic pour la prise de présences d'un cours.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre le champ `date` et le type `datetime.date` dans Pydantic v2.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel

AttendanceStatus = Literal["presente", "ausente", "tardanza"]


class AttendanceUpdate(BaseModel):
    """Corps de requête pour enregistrer le statut d'un élève un jour donné."""
    date: dt.date
    status: AttendanceStatus


class AttendanceRecordResponse(BaseModel):
    id: str
    course_id: str
    student_id: str
    student_name: str
    date: str
    status: str

    model_config = {"from_attributes": True}


class AttendanceRow(BaseModel):
    """Élève inscrit avec son statut du jour (None = pas encore pris)."""
    student_id: str
    first_name: str
    last_name: str
    status: Optional[str] = None


class AttendanceSheet(BaseModel):
    course_id: str
    date: str
    state: str
    students: List[AttendanceRow]
