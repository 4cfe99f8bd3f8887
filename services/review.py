# services/review.py
# Прием рецензий. Переход assigned -> reviewed выполняется одним условным UPDATE,
# поэтому из нескольких одновременных попыток побеждает ровно одна.

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from errors import (DependencyError, ForbiddenError, NotAssignedOrAlreadyReviewed,
                    NotFoundError, ValidationError)
from extensions import db, notifier
from models import Judge
from services import audit, ledger
from services.stores import ScoreEntry, event_store, submission_store

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass
class ReviewOutcome:
    assignment: object
    # False, если запись в зеркало работы не удалась и ждет сверки
    mirrored: bool

    def to_dict(self):
        return {'assignment': self.assignment.to_dict(), 'mirrored': self.mirrored}


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_review(event, score, criteria=None, round_id=None):
    if not _is_number(score) or not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError(f'Оценка должна быть числом от {MIN_SCORE} до {MAX_SCORE}.')

    round_def = None
    if round_id is not None and event.rounds:
        round_def = event.round_by_id(round_id)
        if round_def is None:
            raise ValidationError(f'Неизвестный раунд: {round_id}.')

    if criteria is None:
        return
    if not isinstance(criteria, dict):
        raise ValidationError('Критерии должны передаваться словарем.')

    # Критерии раунда важнее общих критериев мероприятия
    schema = round_def.criteria if round_def is not None and round_def.criteria else event.criteria
    if not schema:
        return
    for key, value in criteria.items():
        if key not in schema:
            raise ValidationError(f'Неизвестный критерий: {key}.')
        if not _is_number(value) or not 0 <= value <= schema[key]:
            raise ValidationError(f'Оценка по критерию {key} вне диапазона 0..{schema[key]:g}.')


def submit_review(judge_id, submission_id, score, feedback=None, criteria=None, round_id=None):
    judge = db.session.get(Judge, judge_id)
    if judge is None:
        raise NotFoundError('Судья не найден.')
    if not judge.is_active:
        raise ForbiddenError('Судья деактивирован.')

    submission = submission_store.get_by_id(submission_id)
    event_id = submission.event_id
    event = event_store.get_event(event_id)
    validate_review(event, score, criteria, round_id)

    reviewed_at = datetime.utcnow()
    matched = ledger.transition_to_reviewed(
        judge_id, submission_id, score, feedback, criteria, round_id, reviewed_at
    )
    if matched != 1:
        db.session.rollback()
        raise NotAssignedOrAlreadyReviewed()
    db.session.commit()
    logger.info('Судья %s оценил работу %s: %s', judge_id, submission_id, score)

    assignment = ledger.get_submission_assignment(judge_id, submission_id)
    mirrored = _mirror_review(submission_id, ScoreEntry(
        judge_id=judge_id,
        score=score,
        round_id=round_id,
        feedback=feedback,
        criteria=criteria,
        submitted_at=reviewed_at
    ))

    audit.record(
        'review_submitted',
        actor_id=judge.user_id,
        event_id=event_id,
        submission_id=submission_id,
        judge_id=judge_id,
        score=score
    )
    notifier.publish(f'submission:{submission_id}', {
        'type': 'review_added',
        'submissionId': submission_id,
        'eventId': event_id,
        'data': {'score': score},
    })
    return ReviewOutcome(assignment=assignment, mirrored=mirrored)


def _mirror_review(submission_id, entry):
    # Вторая запись не транзакционна с первой: реестр уже зафиксирован и главнее
    try:
        submission_store.append_score(submission_id, entry)
    except (DependencyError, SQLAlchemyError):
        db.session.rollback()
        logger.exception('Оценка судьи %s не записана в зеркало работы %s', entry.judge_id, submission_id)
        return False
    return True
