# models/submission.py

from extensions import db
from datetime import datetime
from sqlalchemy import UniqueConstraint

class Submission(db.Model):
    __tablename__ = 'submissions'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    team_id = db.Column(db.Integer, nullable=False)
    project_name = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(50), nullable=False, default='Submitted')
    submitted_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Зеркало оценок: только дописываем, порядок - по времени добавления
    scores = db.relationship(
        'SubmissionScore',
        backref='submission',
        lazy=True,
        order_by='SubmissionScore.id',
        cascade="all, delete-orphan"
    )
    assignments = db.relationship('JudgeSubmissionAssignment', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('team_id', 'event_id', name='unique_team_event_submission'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'teamId': self.team_id,
            'projectName': self.project_name,
            'status': self.status,
            'submittedAt': self.submitted_at.isoformat() if self.submitted_at else None,
        }


class SubmissionScore(db.Model):
    __tablename__ = 'submission_scores'

    id = db.Column(db.Integer, primary_key=True)
    submission_id = db.Column(db.Integer, db.ForeignKey('submissions.id', ondelete='CASCADE'), nullable=False, index=True)
    judge_id = db.Column(db.Integer, nullable=False)
    round_id = db.Column(db.String(64), nullable=True)
    score = db.Column(db.Float, nullable=False)
    feedback = db.Column(db.Text, nullable=True)
    criteria = db.Column(db.JSON, nullable=True)
    submitted_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
