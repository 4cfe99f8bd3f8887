# models/judge.py

from extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint

class Judge(db.Model):
    __tablename__ = 'judges'
    id = db.Column(db.Integer, primary_key=True)

    # Ссылка на пользователя во внешней системе учетных записей
    user_id = db.Column(db.Integer, unique=True, nullable=False, index=True)
    expertise = db.Column(db.JSON, nullable=False, default=list)
    bio = db.Column(db.Text, nullable=True)
    company = db.Column(db.String(200), nullable=True)
    position = db.Column(db.String(200), nullable=True)
    years_of_experience = db.Column(db.Integer, nullable=True)

    # Судью не удаляем, только деактивируем
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    event_assignments = db.relationship('JudgeEventAssignment', backref='judge', lazy=True)

    __table_args__ = (
        CheckConstraint("years_of_experience IS NULL OR years_of_experience BETWEEN 0 AND 50", name="check_years_of_experience"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'expertise': list(self.expertise or []),
            'bio': self.bio,
            'company': self.company,
            'position': self.position,
            'yearsOfExperience': self.years_of_experience,
            'isActive': self.is_active,
        }
