"""
Model: User
"""

from collections import namedtuple

from db import db, now_utc
from flask_login import UserMixin
from constants import ROLE_ADMIN, ROLE_USER
from utils import isoformat

# What the rest of the app needs to know about the caller
Principal = namedtuple("Principal", ["user_id", "role", "is_banned"])


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(30), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), default=ROLE_USER, nullable=False)
    is_banned = db.Column(db.Boolean, default=False, nullable=False)
    ban_reason = db.Column(db.String(500))
    banned_at = db.Column(db.DateTime)
    active = db.Column(db.Boolean, default=True, nullable=False)
    last_active = db.Column(db.DateTime, default=now_utc)
    created_at = db.Column(db.DateTime, default=now_utc)

    @property
    def is_active(self):
        return bool(self.active)

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def has_role(self, role):
        return self.role == role

    @property
    def principal(self):
        return Principal(self.id, self.role, bool(self.is_banned))

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "isBanned": bool(self.is_banned),
            "banReason": self.ban_reason,
            "lastActive": isoformat(self.last_active),
            "createdAt": isoformat(self.created_at),
        }
