# services/audit.py
# Журнал действий. Сбой записи в журнал не должен ронять основную операцию.

import logging
from sqlalchemy.exc import SQLAlchemyError
from extensions import db, begin_write
from models import AuditRecord

logger = logging.getLogger(__name__)


def record(action, actor_id=None, event_id=None, submission_id=None, **details):
    entry = AuditRecord(
        action=action,
        actor_id=actor_id,
        event_id=event_id,
        submission_id=submission_id,
        details=details
    )
    try:
        begin_write()
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning('Не удалось записать аудит %s: %s', action, e)
        return None
    return entry
