# services/reconciliation.py
# Сверка зеркала оценок с реестром рецензий.
# Реестр - источник истины, зеркало можно в любой момент доиграть заново.

import logging

from models import STATUS_REVIEWED
from services import audit, ledger
from services.stores import ScoreEntry, event_store, submission_store

logger = logging.getLogger(__name__)


def reconcile_mirror(event_id, actor_id=None):
    """Дописывает в зеркало рецензии, которые есть в реестре, но потерялись при записи."""
    event_store.get_event(event_id)
    reviewed = ledger.list_by_event_status(event_id, STATUS_REVIEWED)
    mirrored = submission_store.list_scores({row.submission_id for row in reviewed})

    appended = 0
    for row in reviewed:
        present = {(e.judge_id, e.round_id) for e in mirrored.get(row.submission_id, [])}
        if (row.judge_id, row.round_id) in present:
            continue
        submission_store.append_score(row.submission_id, ScoreEntry(
            judge_id=row.judge_id,
            score=row.score,
            round_id=row.round_id,
            feedback=row.feedback,
            criteria=row.criteria,
            submitted_at=row.reviewed_at
        ))
        appended += 1

    if appended:
        logger.warning('Зеркало оценок мероприятия %s отставало: дописано %s', event_id, appended)
    else:
        logger.info('Зеркало оценок мероприятия %s согласовано', event_id)
    audit.record('mirror_reconciled', actor_id=actor_id, event_id=event_id, appended=appended)
    return appended
