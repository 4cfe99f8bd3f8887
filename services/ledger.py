# services/ledger.py
# Реестр назначений: судья <-> мероприятие и судья <-> работа.
# Единственность пар гарантирует БД (UNIQUE), проверки в коде - лишь оптимизация.

import logging
from datetime import datetime

from sqlalchemy import exists, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from errors import ConflictError
from extensions import db, begin_write
from models import (Judge, JudgeEventAssignment, JudgeSubmissionAssignment,
                    STATUS_ASSIGNED, STATUS_REVIEWED)

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    'sqlite': sqlite_insert,
    'postgresql': pg_insert,
}


# --- Назначения судей на мероприятия ---

def get_event_assignment(judge_id, event_id):
    return JudgeEventAssignment.query.filter_by(judge_id=judge_id, event_id=event_id).first()


def create_event_assignment(judge_id, event_id, role):
    begin_write()
    assignment = JudgeEventAssignment(judge_id=judge_id, event_id=event_id, role=role)
    db.session.add(assignment)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Судья уже назначен на это мероприятие.')
    return assignment


def active_event_assignments(event_id):
    """Активные назначения активных судей на мероприятие."""
    return JudgeEventAssignment.query.join(Judge).filter(
        JudgeEventAssignment.event_id == event_id,
        JudgeEventAssignment.is_active.is_(True),
        Judge.is_active.is_(True)
    ).order_by(JudgeEventAssignment.role, JudgeEventAssignment.assigned_at, JudgeEventAssignment.id).all()


def has_active_event_assignment(judge_id, event_id):
    return db.session.query(
        JudgeEventAssignment.query.join(Judge).filter(
            JudgeEventAssignment.judge_id == judge_id,
            JudgeEventAssignment.event_id == event_id,
            JudgeEventAssignment.is_active.is_(True),
            Judge.is_active.is_(True)
        ).exists()
    ).scalar()


def judge_event_assignments(judge_id):
    return JudgeEventAssignment.query.filter_by(
        judge_id=judge_id, is_active=True
    ).order_by(JudgeEventAssignment.assigned_at.desc(), JudgeEventAssignment.id.desc()).all()


# --- Назначения судей на работы ---

def existing_pairs(event_id, judge_id=None):
    query = db.session.query(
        JudgeSubmissionAssignment.judge_id,
        JudgeSubmissionAssignment.submission_id
    ).filter(JudgeSubmissionAssignment.event_id == event_id)
    if judge_id is not None:
        query = query.filter(JudgeSubmissionAssignment.judge_id == judge_id)
    return {(row.judge_id, row.submission_id) for row in query}


def new_assignment_row(judge_id, submission_id, event_id):
    return {
        'judge_id': judge_id,
        'submission_id': submission_id,
        'event_id': event_id,
        'status': STATUS_ASSIGNED,
        'assigned_at': datetime.utcnow(),
    }


def create_submission_assignments(rows, batch_size=500):
    """
    Создает недостающие строки и возвращает число реально вставленных.

    Строка, которую параллельно уже вставил кто-то другой, молча пропускается:
    INSERT ... ON CONFLICT DO NOTHING на SQLite/PostgreSQL, для прочих БД -
    вставка по одной строке в точке сохранения.
    """
    if not rows:
        return 0

    insert = _UPSERT_INSERTS.get(db.engine.dialect.name)
    if insert is None:
        return _create_row_by_row(rows)

    begin_write()
    created = 0
    try:
        for start in range(0, len(rows), batch_size):
            chunk = rows[start:start + batch_size]
            stmt = insert(JudgeSubmissionAssignment).values(chunk).on_conflict_do_nothing(
                index_elements=['judge_id', 'submission_id']
            )
            created += db.session.execute(stmt).rowcount
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return created


def _create_row_by_row(rows):
    begin_write()
    created = 0
    for row in rows:
        try:
            with db.session.begin_nested():
                db.session.add(JudgeSubmissionAssignment(**row))
            created += 1
        except IntegrityError:
            logger.debug('Назначение судьи %s на работу %s уже существует', row['judge_id'], row['submission_id'])
    db.session.commit()
    return created


def get_submission_assignment(judge_id, submission_id):
    return JudgeSubmissionAssignment.query.filter_by(judge_id=judge_id, submission_id=submission_id).first()


def list_for_judge(judge_id, event_id):
    return JudgeSubmissionAssignment.query.filter_by(
        judge_id=judge_id, event_id=event_id
    ).order_by(JudgeSubmissionAssignment.assigned_at, JudgeSubmissionAssignment.id).all()


def list_by_event_status(event_id, status=None):
    query = JudgeSubmissionAssignment.query.filter_by(event_id=event_id)
    if status is not None:
        query = query.filter_by(status=status)
    return query.order_by(JudgeSubmissionAssignment.submission_id, JudgeSubmissionAssignment.judge_id).all()


def list_reviewed_by_judge(judge_id):
    return JudgeSubmissionAssignment.query.filter_by(
        judge_id=judge_id, status=STATUS_REVIEWED
    ).order_by(JudgeSubmissionAssignment.reviewed_at).all()


def transition_to_reviewed(judge_id, submission_id, score, feedback, criteria, round_id, reviewed_at):
    """
    Единственный условный UPDATE assigned -> reviewed.

    Возвращает число затронутых строк: 1 у победителя гонки, 0 у всех остальных.
    Коммит остается за вызывающим.
    """
    begin_write()
    active_gate = exists().where(
        JudgeEventAssignment.judge_id == JudgeSubmissionAssignment.judge_id,
        JudgeEventAssignment.event_id == JudgeSubmissionAssignment.event_id,
        JudgeEventAssignment.is_active.is_(True)
    )
    stmt = update(JudgeSubmissionAssignment).where(
        JudgeSubmissionAssignment.judge_id == judge_id,
        JudgeSubmissionAssignment.submission_id == submission_id,
        JudgeSubmissionAssignment.status == STATUS_ASSIGNED,
        active_gate
    ).values(
        status=STATUS_REVIEWED,
        score=score,
        feedback=feedback,
        criteria=criteria,
        round_id=round_id,
        reviewed_at=reviewed_at
    ).execution_options(synchronize_session=False)
    return db.session.execute(stmt).rowcount
