"""WellnessLog model definition."""

from . import db, generate_id, isoformat, utcnow


class WellnessLog(db.Model):
    """A daily wellness entry. One per user per calendar day."""

    __tablename__ = "wellness_logs"
    __table_args__ = (
        db.UniqueConstraint("user_id", "date", name="uq_wellness_logs_user_date"),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    user_id = db.Column(
        db.String(32), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date = db.Column(db.Date, nullable=False, default=lambda: utcnow().date())
    mood = db.Column(db.Float, nullable=False)
    energy = db.Column(db.Float, nullable=False)
    sleep_hours = db.Column(db.Float, nullable=True)
    sleep_quality = db.Column(db.Float, nullable=True)
    nutrition_quality = db.Column(db.Float, nullable=True)
    nutrition_hydration = db.Column(db.Float, nullable=True)
    stress = db.Column(db.Float, nullable=True)
    physical_activity = db.Column(db.Float, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", back_populates="wellness_logs")

    def __repr__(self) -> str:
        return f"<WellnessLog id={self.id} user_id={self.user_id} date={self.date}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user_id,
            "date": isoformat(self.date),
            "mood": self.mood,
            "energy": self.energy,
            "sleep": {"hours": self.sleep_hours, "quality": self.sleep_quality},
            "nutrition": {
                "quality": self.nutrition_quality,
                "hydration": self.nutrition_hydration,
            },
            "stress": self.stress,
            "physicalActivity": self.physical_activity,
            "notes": self.notes,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
