# services/coordinator.py
# Раздача работ судьям мероприятия. Все операции идемпотентны:
# повторный вызов создает только недостающие пары (судья, работа).

import logging

from flask import current_app

from errors import (ForbiddenError, NoJudgesAssigned, NoSubmissions,
                    NotFoundError, ValidationError, ConflictError)
from extensions import db, notifier, begin_write
from models import Judge, JUDGE_ROLES
from services import audit, ledger
from services.stores import event_store, submission_store

logger = logging.getLogger(__name__)


def _batch_size():
    return current_app.config.get('FANOUT_BATCH_SIZE', 500)


def assign_judge_to_event(event_id, judge_id, role='Secondary', actor_id=None):
    if role not in JUDGE_ROLES:
        raise ValidationError(f'Неизвестная роль судьи: {role}.')

    event_store.get_event(event_id)
    judge = db.session.get(Judge, judge_id)
    if judge is None:
        raise NotFoundError('Судья не найден.')
    if not judge.is_active:
        raise ValidationError('Судья деактивирован.')

    # Быстрая проверка; настоящую гарантию дает UNIQUE (judge_id, event_id)
    if ledger.get_event_assignment(judge_id, event_id) is not None:
        raise ConflictError('Судья уже назначен на это мероприятие.')

    assignment = ledger.create_event_assignment(judge_id, event_id, role)
    logger.info('Судья %s назначен на мероприятие %s (%s)', judge_id, event_id, role)

    audit.record('judge_assigned', actor_id=actor_id, event_id=event_id, judge_id=judge_id, role=role)
    notifier.publish(f'event:{event_id}', {
        'type': 'judge_assignment',
        'judgeId': judge_id,
        'assignment': {'eventId': event_id, 'role': role},
    })
    return assignment


def remove_judge_from_event(event_id, judge_id, actor_id=None):
    """Снимает судью с мероприятия. Уже созданные назначения на работы не удаляются."""
    assignment = ledger.get_event_assignment(judge_id, event_id)
    if assignment is None or not assignment.is_active:
        raise NotFoundError('Судья не назначен на это мероприятие.')

    begin_write()
    assignment.is_active = False
    db.session.commit()
    logger.info('Судья %s снят с мероприятия %s', judge_id, event_id)
    audit.record('judge_removed', actor_id=actor_id, event_id=event_id, judge_id=judge_id)
    return assignment


def list_event_judges(event_id):
    event_store.get_event(event_id)
    return ledger.active_event_assignments(event_id)


def list_judge_events(judge_id):
    return ledger.judge_event_assignments(judge_id)


def fan_out_assignments(event_id, actor_id=None):
    """
    Назначает каждому активному судье мероприятия каждую работу мероприятия.

    Возвращает число созданных строк. Повторный запуск после частичного сбоя
    безопасен и просто доделывает недостающее.
    """
    event_store.get_event(event_id)

    judge_ids = [a.judge_id for a in ledger.active_event_assignments(event_id)]
    if not judge_ids:
        raise NoJudgesAssigned()

    submissions = submission_store.list_by_event(event_id)
    if not submissions:
        raise NoSubmissions()

    existing = ledger.existing_pairs(event_id)
    missing = [
        ledger.new_assignment_row(judge_id, submission.id, event_id)
        for judge_id in judge_ids
        for submission in submissions
        if (judge_id, submission.id) not in existing
    ]
    created = ledger.create_submission_assignments(missing, batch_size=_batch_size())

    logger.info(
        'Раздача работ мероприятия %s: судей %s, работ %s, создано назначений %s',
        event_id, len(judge_ids), len(submissions), created
    )
    audit.record(
        'submissions_assigned',
        actor_id=actor_id,
        event_id=event_id,
        judges=len(judge_ids),
        submissions=len(submissions),
        created=created
    )
    if created:
        notifier.publish(f'event:{event_id}', {
            'type': 'assignments_created',
            'eventId': event_id,
            'created': created,
        })
    return created


def ensure_assignments_for_judge(event_id, judge_id):
    """Ленивая раздача для одного судьи: создает только его недостающие пары."""
    if not ledger.has_active_event_assignment(judge_id, event_id):
        raise ForbiddenError('Вы не назначены судьей на это мероприятие.')

    submissions = submission_store.list_by_event(event_id)
    existing = ledger.existing_pairs(event_id, judge_id=judge_id)
    missing = [
        ledger.new_assignment_row(judge_id, submission.id, event_id)
        for submission in submissions
        if (judge_id, submission.id) not in existing
    ]
    created = ledger.create_submission_assignments(missing, batch_size=_batch_size())
    if created:
        logger.info('Судье %s автоматически назначено работ мероприятия %s: %s', judge_id, event_id, created)
    return created


def list_assigned_submissions(judge_id, event_id):
    """Только чтение: работы судьи вместе со статусом назначения."""
    rows = ledger.list_for_judge(judge_id, event_id)
    submissions = {s.id: s for s in submission_store.list_by_event(event_id)}
    items = []
    for row in rows:
        submission = submissions.get(row.submission_id)
        if submission is None:
            continue
        item = submission.to_dict()
        item['assignment'] = row.to_dict()
        items.append(item)
    return items


def get_assigned_submissions(judge_id, event_id):
    event_store.get_event(event_id)
    if not ledger.has_active_event_assignment(judge_id, event_id):
        raise ForbiddenError('Вы не назначены судьей на это мероприятие.')

    items = list_assigned_submissions(judge_id, event_id)
    if not items:
        ensure_assignments_for_judge(event_id, judge_id)
        items = list_assigned_submissions(judge_id, event_id)
    return items
