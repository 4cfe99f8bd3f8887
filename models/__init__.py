# models/__init__.py
# Инициализация моделей

from .judge import Judge
from .event import Event
from .submission import Submission, SubmissionScore
from .event_assignment import JudgeEventAssignment, JUDGE_ROLES
from .submission_assignment import JudgeSubmissionAssignment, STATUS_ASSIGNED, STATUS_REVIEWED
from .audit_record import AuditRecord
