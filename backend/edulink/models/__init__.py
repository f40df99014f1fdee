# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles
# (enrollments.course_id → courses.id, submissions.task_id → tasks.id, ...).

from edulink.models.user import Account, UserProfile  # noqa: F401
from edulink.models.school import GradeLevel, School, SchoolTeacher, Section, Subject  # noqa: F401
from edulink.models.course import Course, Enrollment  # noqa: F401
from edulink.models.attendance import AttendanceRecord  # noqa: F401
from edulink.models.task import Submission, Task  # noqa: F401
