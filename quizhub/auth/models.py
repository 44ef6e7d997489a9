import enum
from datetime import datetime

from flask_login import UserMixin

from quizhub import db


class Role(enum.Enum):
    """Roles a user can hold. super_tutor is the administrator role."""
    STUDENT = "student"
    TUTOR = "tutor"
    SUPER_TUTOR = "super_tutor"

    @classmethod
    def parse(cls, value) -> "Role":
        """Accept a Role or its string value; raise ValueError otherwise."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())

    @property
    def is_tutor_or_admin(self) -> bool:
        return self in (Role.TUTOR, Role.SUPER_TUTOR)

    @property
    def is_super_tutor(self) -> bool:
        return self is Role.SUPER_TUTOR


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(50), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False, default="")
    last_name = db.Column(db.String(100), nullable=False, default="")
    role = db.Column(
        db.Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.STUDENT,
        index=True,
    )
    avatar_url = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User {self.username} ({self.role.value})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self, include_email: bool = False) -> dict:
        data = {
            "id": self.id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role.value,
            "avatar_url": self.avatar_url,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_email:
            data["email"] = self.email
        return data
