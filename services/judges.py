# services/judges.py
# Профили судей. Судью никогда не удаляем - только деактивируем.

import logging

from sqlalchemy.exc import IntegrityError

from errors import ConflictError, NotFoundError
from extensions import db, begin_write
from models import Judge
from services import audit

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('expertise', 'bio', 'company', 'position', 'years_of_experience')


def designate_judge(user_id, actor_id=None, **profile):
    if Judge.query.filter_by(user_id=user_id).first() is not None:
        raise ConflictError('Пользователь уже является судьей.')

    begin_write()
    judge = Judge(user_id=user_id, expertise=[])
    for name in PROFILE_FIELDS:
        if profile.get(name) is not None:
            setattr(judge, name, profile[name])
    db.session.add(judge)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Пользователь уже является судьей.')

    logger.info('Пользователь %s назначен судьей (id=%s)', user_id, judge.id)
    audit.record('judge_designated', actor_id=actor_id, user_id=user_id, judge_id=judge.id)
    return judge


def get_judge(judge_id):
    judge = db.session.get(Judge, judge_id)
    if judge is None:
        raise NotFoundError('Судья не найден.')
    return judge


def get_judge_by_user(user_id):
    return Judge.query.filter_by(user_id=user_id).first()


def update_profile(judge, **changes):
    begin_write()
    for name in PROFILE_FIELDS:
        if name in changes:
            setattr(judge, name, changes[name])
    db.session.commit()
    return judge


def deactivate_judge(judge_id, actor_id=None):
    judge = get_judge(judge_id)
    if judge.is_active:
        begin_write()
        judge.is_active = False
        db.session.commit()
        logger.info('Судья %s деактивирован', judge_id)
        audit.record('judge_deactivated', actor_id=actor_id, judge_id=judge_id)
    return judge
