# models/audit_record.py

from extensions import db

class AuditRecord(db.Model):
    __tablename__ = 'audit_records'
    id = db.Column(db.Integer, primary_key=True)
    actor_id = db.Column(db.Integer, nullable=True)
    action = db.Column(db.String(100), nullable=False, index=True)
    event_id = db.Column(db.Integer, nullable=True, index=True)
    submission_id = db.Column(db.Integer, nullable=True)
    details = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())
