"""User model definition."""

import secrets
from datetime import timedelta

import bcrypt
from flask import current_app

from . import db, generate_id, isoformat, utcnow


GENDERS = ("male", "female", "other", "prefer_not_to_say")
LANGUAGES = ("italian", "english", "spanish", "french", "german")
DEFAULT_PROFILE_PICTURE = "/assets/images/default-profile.png"
MAX_PASSWORD_BYTES = 72


class User(db.Model):
    """Represents a Salus account holder."""

    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    age = db.Column(db.Integer, nullable=True)
    gender = db.Column(db.String(32), nullable=True)
    language = db.Column(db.String(16), nullable=False, default="italian")
    profile_picture = db.Column(
        db.String(512), nullable=False, default=DEFAULT_PROFILE_PICTURE
    )
    role = db.Column(db.String(16), nullable=False, default="user")
    is_email_verified = db.Column(db.Boolean, nullable=False, default=False)
    email_verification_token = db.Column(db.String(128), nullable=True, index=True)
    email_verification_expires = db.Column(db.DateTime, nullable=True)
    reset_password_token = db.Column(db.String(128), nullable=True, index=True)
    reset_password_expires = db.Column(db.DateTime, nullable=True)
    last_login = db.Column(db.DateTime, nullable=True)
    medical_conditions = db.Column(db.JSON, nullable=False, default=list)
    allergies = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    symptoms = db.relationship(
        "Symptom", back_populates="owner", cascade="all, delete-orphan"
    )
    medications = db.relationship(
        "Medication", back_populates="owner", cascade="all, delete-orphan"
    )
    wellness_logs = db.relationship(
        "WellnessLog", back_populates="owner", cascade="all, delete-orphan"
    )

    @staticmethod
    def normalize_email(raw_email: str | None) -> str:
        """Strip whitespace and lower-case an email address."""

        if not isinstance(raw_email, str):
            return ""
        return raw_email.strip().lower()

    @classmethod
    def find_by_email(cls, email: str | None) -> "User | None":
        normalized = cls.normalize_email(email)
        if not normalized:
            return None
        return cls.query.filter(db.func.lower(cls.email) == normalized).first()

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        rounds = current_app.config.get("BCRYPT_ROUNDS", 10)
        salt = bcrypt.gensalt(rounds=rounds)
        self.password_hash = bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        if not self.password_hash or not password:
            return False
        candidate = password.encode("utf-8")
        if len(candidate) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(candidate, self.password_hash.encode("utf-8"))

    def generate_verification_token(self) -> str:
        """Start a pending email verification and return its token."""

        ttl = current_app.config.get("EMAIL_VERIFICATION_TTL_HOURS", 24)
        token = secrets.token_hex(32)
        self.email_verification_token = token
        self.email_verification_expires = utcnow() + timedelta(hours=ttl)
        return token

    def generate_password_reset_token(self) -> str:
        """Start a password reset and return its token."""

        ttl = current_app.config.get("PASSWORD_RESET_TTL_HOURS", 1)
        token = secrets.token_hex(32)
        self.reset_password_token = token
        self.reset_password_expires = utcnow() + timedelta(hours=ttl)
        return token

    def mark_email_verified(self) -> None:
        self.is_email_verified = True
        self.email_verification_token = None
        self.email_verification_expires = None

    def clear_password_reset(self) -> None:
        self.reset_password_token = None
        self.reset_password_expires = None

    @classmethod
    def find_by_verification_token(cls, token: str) -> "User | None":
        return cls.query.filter(
            cls.email_verification_token == token,
            cls.email_verification_expires > utcnow(),
        ).first()

    @classmethod
    def find_by_reset_token(cls, token: str) -> "User | None":
        return cls.query.filter(
            cls.reset_password_token == token,
            cls.reset_password_expires > utcnow(),
        ).first()

    def to_dict(self) -> dict:
        """Serialize the user without credentials or pending tokens."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "age": self.age,
            "gender": self.gender,
            "language": self.language,
            "profilePicture": self.profile_picture,
            "role": self.role,
            "isEmailVerified": bool(self.is_email_verified),
            "lastLogin": isoformat(self.last_login),
            "medicalConditions": list(self.medical_conditions or []),
            "allergies": list(self.allergies or []),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
