# routes/common.py
# Общие декораторы доступа и формат ответа.
# Личность и роль вызывающего уже установлены на входе (в сессии).

from functools import wraps
from flask import session, jsonify

from errors import ForbiddenError, NotFoundError
from services import judges


def role_required(*roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if 'user_id' not in session or session.get('user_role') not in roles:
                raise ForbiddenError('У вас нет прав для доступа к этому ресурсу.')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


organizer_required = role_required('organizer')
judge_required = role_required('judge')


def current_judge(require_active=True):
    judge = judges.get_judge_by_user(session['user_id'])
    if judge is None:
        raise NotFoundError('Профиль судьи не найден.')
    if require_active and not judge.is_active:
        raise ForbiddenError('Судья деактивирован.')
    return judge


def success(data=None, status=200):
    return jsonify({'success': True, 'data': data if data is not None else {}}), status
