# models/event.py
# Мероприятие принадлежит внешней системе, здесь хранится только то, что нужно судейству

from extensions import db
from datetime import datetime

class Event(db.Model):
    __tablename__ = 'events'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(50), nullable=False, default='Published')
    created_by = db.Column(db.Integer, nullable=True)

    # Раунды: [{"id": "r1", "name": "...", "weight": 1, "criteria": [{"id": "ux", "max_score": 10}]}]
    rounds = db.Column(db.JSON, nullable=False, default=list)
    # Критерии на все мероприятие: [{"id": "ux", "name": "...", "max_score": 10}]
    custom_criteria = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Каскадное удаление на уровне ORM: вместе с мероприятием уходят работы
    submissions = db.relationship('Submission', backref='event', lazy=True, cascade="all, delete-orphan")
    judge_assignments = db.relationship('JudgeEventAssignment', backref='event', lazy=True, cascade="all, delete-orphan")
