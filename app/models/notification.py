"""
Model: Notification
Stored per-user messages, read through the notifications API.
"""

from db import db, now_utc
from utils import isoformat


class Notification(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type = db.Column(db.String(30), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.String(1000), nullable=False)
    data_json = db.Column(db.JSON, default=dict)
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=now_utc, index=True)

    __table_args__ = (db.Index("idx_notification_user_read", "user_id", "read"),)

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "data": dict(self.data_json or {}),
            "read": bool(self.read),
            "createdAt": isoformat(self.created_at),
        }
