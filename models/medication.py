"""Medication model definition."""

from sqlalchemy import and_, or_

from . import db, generate_id, isoformat, utcnow


class Medication(db.Model):
    """A medication course followed by a user."""

    __tablename__ = "medications"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    user_id = db.Column(
        db.String(32), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = db.Column(db.String(200), nullable=False)
    dosage = db.Column(db.String(120), nullable=False)
    frequency = db.Column(db.String(120), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=True)
    purpose = db.Column(db.Text, nullable=True)
    instructions = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    side_effects = db.Column(db.JSON, nullable=False, default=list)
    reminders = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", back_populates="medications")

    def __repr__(self) -> str:
        return f"<Medication id={self.id} user_id={self.user_id} name={self.name}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user_id,
            "name": self.name,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "purpose": self.purpose,
            "instructions": self.instructions,
            "isActive": self.is_active,
            "sideEffects": list(self.side_effects or []),
            "reminders": [dict(reminder) for reminder in (self.reminders or [])],
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    @staticmethod
    def active_filter(query, now=None):
        """Restrict a query to medications still being taken."""

        now = now or utcnow()
        return query.filter(
            and_(
                Medication.is_active.is_(True),
                or_(Medication.end_date.is_(None), Medication.end_date >= now),
            )
        )
