"""Symptom model definition."""

from . import db, generate_id, isoformat, utcnow


class Symptom(db.Model):
    """A symptom reported by a user."""

    __tablename__ = "symptoms"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    user_id = db.Column(
        db.String(32), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = db.Column(db.String(200), nullable=False)
    severity = db.Column(db.Integer, nullable=False)
    description = db.Column(db.Text, nullable=True)
    duration = db.Column(db.String(200), nullable=True)
    triggers = db.Column(db.Text, nullable=True)
    date_reported = db.Column(db.DateTime, nullable=False, default=utcnow)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", back_populates="symptoms")

    def __repr__(self) -> str:
        return f"<Symptom id={self.id} user_id={self.user_id} severity={self.severity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user_id,
            "name": self.name,
            "severity": self.severity,
            "description": self.description,
            "duration": self.duration,
            "triggers": self.triggers,
            "dateReported": isoformat(self.date_reported),
            "isActive": self.is_active,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
