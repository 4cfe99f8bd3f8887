# services/stores.py
# Узкие интерфейсы к внешним хранилищам: мероприятия и работы.
# Судейство читает из них данные и дописывает оценки в зеркало работы.

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import wraps
from typing import Dict, Optional, Tuple

from sqlalchemy.exc import OperationalError

from errors import DependencyError, NotFoundError
from extensions import db, begin_write
from models import Event, Submission, SubmissionScore

logger = logging.getLogger(__name__)


def _store_call(f):
    """Недоступное хранилище превращаем в DependencyError."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except OperationalError as e:
            db.session.rollback()
            logger.error('Хранилище недоступно в %s: %s', f.__name__, e)
            raise DependencyError() from e
    return decorated_function


@dataclass(frozen=True)
class RoundDef:
    id: str
    weight: float = 1.0
    # id критерия -> максимальный балл
    criteria: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class EventView:
    id: int
    status: str
    rounds: Tuple[RoundDef, ...] = ()
    criteria: Dict[str, float] = field(default_factory=dict)

    def round_by_id(self, round_id) -> Optional[RoundDef]:
        for rd in self.rounds:
            if rd.id == round_id:
                return rd
        return None


@dataclass(frozen=True)
class ScoreEntry:
    judge_id: int
    score: float
    round_id: Optional[str] = None
    feedback: Optional[str] = None
    criteria: Optional[dict] = None
    submitted_at: Optional[datetime] = None


def _parse_criteria(raw):
    criteria = {}
    for item in raw or []:
        max_score = item.get('max_score', item.get('maxScore', 0))
        criteria[str(item['id'])] = float(max_score)
    return criteria


def _parse_rounds(raw):
    rounds = []
    for item in raw or []:
        # Нулевой или пустой вес считается единичным
        weight = float(item.get('weight') or 1)
        rounds.append(RoundDef(
            id=str(item['id']),
            weight=weight,
            criteria=_parse_criteria(item.get('criteria'))
        ))
    return tuple(rounds)


class EventStore:

    @_store_call
    def get_event(self, event_id) -> EventView:
        event = db.session.get(Event, event_id)
        if event is None:
            raise NotFoundError('Мероприятие не найдено.')
        return EventView(
            id=event.id,
            status=event.status,
            rounds=_parse_rounds(event.rounds),
            criteria=_parse_criteria(event.custom_criteria)
        )


class SubmissionStore:

    @_store_call
    def list_by_event(self, event_id):
        return Submission.query.filter_by(event_id=event_id).order_by(Submission.id).all()

    @_store_call
    def get_by_id(self, submission_id):
        submission = db.session.get(Submission, submission_id)
        if submission is None:
            raise NotFoundError('Работа не найдена.')
        return submission

    @_store_call
    def append_score(self, submission_id, entry: ScoreEntry):
        begin_write()
        row = SubmissionScore(
            submission_id=submission_id,
            judge_id=entry.judge_id,
            round_id=entry.round_id,
            score=entry.score,
            feedback=entry.feedback,
            criteria=entry.criteria,
            submitted_at=entry.submitted_at or datetime.utcnow()
        )
        db.session.add(row)
        db.session.commit()
        return row

    @_store_call
    def list_scores(self, submission_ids):
        """Оценки из зеркала, сгруппированные по работе, в порядке добавления."""
        ids = list(submission_ids)
        grouped = {submission_id: [] for submission_id in ids}
        if not ids:
            return grouped
        rows = SubmissionScore.query.filter(
            SubmissionScore.submission_id.in_(ids)
        ).order_by(SubmissionScore.id).all()
        for row in rows:
            grouped[row.submission_id].append(ScoreEntry(
                judge_id=row.judge_id,
                score=row.score,
                round_id=row.round_id,
                feedback=row.feedback,
                criteria=row.criteria,
                submitted_at=row.submitted_at
            ))
        return grouped


event_store = EventStore()
submission_store = SubmissionStore()
