# schemas.py
# Схемы входящих JSON-запросов (marshmallow)

from flask import request
from marshmallow import Schema, fields, validate, ValidationError as MarshmallowValidationError

from errors import ValidationError
from models import JUDGE_ROLES


class AssignJudgeSchema(Schema):
    judge_id = fields.Integer(required=True, data_key='judgeId')
    event_id = fields.Integer(required=True, data_key='eventId')
    role = fields.String(load_default='Secondary', validate=validate.OneOf(JUDGE_ROLES))


class SubmitReviewSchema(Schema):
    submission_id = fields.Integer(required=True, data_key='submissionId')
    # Диапазон 0..100 проверяет сервис, здесь только тип
    score = fields.Float(required=True, allow_nan=False)
    feedback = fields.String(load_default=None, allow_none=True)
    criteria = fields.Dict(keys=fields.String(), values=fields.Float(allow_nan=False), load_default=None, allow_none=True)
    round_id = fields.String(load_default=None, allow_none=True, data_key='roundId')


class JudgeProfileSchema(Schema):
    expertise = fields.List(fields.String())
    bio = fields.String(allow_none=True)
    company = fields.String(allow_none=True, validate=validate.Length(max=200))
    position = fields.String(allow_none=True, validate=validate.Length(max=200))
    years_of_experience = fields.Integer(allow_none=True, validate=validate.Range(min=0, max=50), data_key='yearsOfExperience')


class DesignateJudgeSchema(JudgeProfileSchema):
    user_id = fields.Integer(required=True, data_key='userId')


def load_body(schema):
    try:
        return schema.load(request.get_json(silent=True) or {})
    except MarshmallowValidationError as err:
        raise ValidationError('Некорректные данные запроса.', details=err.messages)
