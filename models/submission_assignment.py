# models/submission_assignment.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

STATUS_ASSIGNED = 'assigned'
STATUS_REVIEWED = 'reviewed'


class JudgeSubmissionAssignment(db.Model):
    __tablename__ = 'judge_submission_assignments'
    id = db.Column(db.Integer, primary_key=True)
    judge_id = db.Column(db.Integer, db.ForeignKey('judges.id'), nullable=False)
    submission_id = db.Column(db.Integer, db.ForeignKey('submissions.id', ondelete='CASCADE'), nullable=False)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False)

    # Статус двигается только assigned -> reviewed
    status = db.Column(db.String(20), nullable=False, default=STATUS_ASSIGNED)
    score = db.Column(db.Float, nullable=True)
    feedback = db.Column(db.Text, nullable=True)
    criteria = db.Column(db.JSON, nullable=True)
    round_id = db.Column(db.String(64), nullable=True)
    assigned_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    reviewed_at = db.Column(db.DateTime, nullable=True)

    judge = db.relationship('Judge')

    __table_args__ = (
        # Главная гарантия: ровно одна строка на пару (судья, работа)
        db.UniqueConstraint('judge_id', 'submission_id', name='unique_judge_submission'),
        db.Index('ix_judge_submission_assignments_event_status', 'event_id', 'status'),
        db.Index('ix_judge_submission_assignments_judge_event', 'judge_id', 'event_id'),
        CheckConstraint("status IN ('assigned', 'reviewed')", name="check_assignment_status"),
        CheckConstraint("score IS NULL OR score BETWEEN 0 AND 100", name="check_assignment_score"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'judgeId': self.judge_id,
            'submissionId': self.submission_id,
            'eventId': self.event_id,
            'status': self.status,
            'score': self.score,
            'feedback': self.feedback,
            'criteria': self.criteria,
            'roundId': self.round_id,
            'assignedAt': self.assigned_at.isoformat() if self.assigned_at else None,
            'reviewedAt': self.reviewed_at.isoformat() if self.reviewed_at else None,
        }
