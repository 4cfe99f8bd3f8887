# errors.py
# Таксономия ошибок движка судейства и их отображение в JSON-ответ

from flask import jsonify
from sqlalchemy.exc import OperationalError
from extensions import db
import logging

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Базовая ошибка: код для клиента, HTTP-статус и сообщение."""
    code = 'Error'
    status_code = 500

    def __init__(self, message=None, details=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__
        self.details = details

    def to_dict(self):
        payload = {'success': False, 'error': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class NotFoundError(ServiceError):
    """Объект не найден."""
    code = 'NotFound'
    status_code = 404


class ForbiddenError(ServiceError):
    """Нет активного назначения или прав на действие."""
    code = 'Forbidden'
    status_code = 403


class ConflictError(ServiceError):
    """Объект уже существует."""
    code = 'Conflict'
    status_code = 409


class NotAssignedOrAlreadyReviewed(ConflictError):
    """Работа не назначена судье или уже оценена."""
    code = 'NotAssignedOrAlreadyReviewed'


class ValidationError(ServiceError):
    """Некорректные данные запроса."""
    code = 'Validation'
    status_code = 400


class NoJudgesAssigned(ValidationError):
    """На мероприятие не назначено ни одного активного судьи."""
    code = 'NoJudgesAssigned'


class NoSubmissions(ValidationError):
    """У мероприятия нет ни одной работы."""
    code = 'NoSubmissions'


class DependencyError(ServiceError):
    """Хранилище недоступно, повторите запрос позже."""
    code = 'Dependency'
    status_code = 503


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        if error.status_code >= 500:
            logger.error('%s: %s', error.code, error.message)
        else:
            logger.info('%s: %s', error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(OperationalError)
    def handle_operational_error(error):
        logger.exception('Хранилище недоступно')
        db.session.rollback()
        wrapped = DependencyError()
        return jsonify(wrapped.to_dict()), wrapped.status_code
