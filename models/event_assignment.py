# models/event_assignment.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

JUDGE_ROLES = ('Primary', 'Secondary', 'Mentor')


class JudgeEventAssignment(db.Model):
    __tablename__ = 'judge_event_assignments'
    id = db.Column(db.Integer, primary_key=True)
    judge_id = db.Column(db.Integer, db.ForeignKey('judges.id'), nullable=False)

    # При удалении мероприятия назначения удаляются каскадно на уровне БД
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='Secondary')
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    assigned_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        # Один судья - одно назначение на мероприятие
        db.UniqueConstraint('judge_id', 'event_id', name='unique_judge_event'),
        db.Index('ix_judge_event_assignments_event_active', 'event_id', 'is_active'),
        CheckConstraint("role IN ('Primary', 'Secondary', 'Mentor')", name="check_judge_role"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'judgeId': self.judge_id,
            'eventId': self.event_id,
            'role': self.role,
            'isActive': self.is_active,
            'assignedAt': self.assigned_at.isoformat() if self.assigned_at else None,
        }
