"""Create the schema and a verified demo user with a few sample entries."""

from datetime import timedelta

from app import create_app
from models import Medication, Symptom, WellnessLog, db, utcnow
from models.user import User

DEMO_EMAIL = "demo@salus-app.com"
DEMO_PASSWORD = "DemoPass123"


def _sample_entries(user_id: str) -> list:
    today = utcnow().date()
    entries = [
        Symptom(user_id=user_id, name="Headache", severity=4, duration="2 hours"),
        Medication(
            user_id=user_id,
            name="Vitamin D",
            dosage="1000 IU",
            frequency="once a day",
            start_date=utcnow() - timedelta(days=14),
            reminders=[{"time": "08:00", "enabled": True}],
        ),
    ]
    for offset, mood in enumerate((6, 7, 5)):
        entries.append(
            WellnessLog(
                user_id=user_id,
                date=today - timedelta(days=offset),
                mood=mood,
                energy=6,
                sleep_hours=7.0,
                sleep_quality=7,
                stress=4,
            )
        )
    return entries


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()
        user = User.find_by_email(DEMO_EMAIL)
        if user is None:
            user = User(email=DEMO_EMAIL, name="Demo User", is_email_verified=True)
            user.set_password(DEMO_PASSWORD)
            db.session.add(user)
            db.session.flush()
            db.session.add_all(_sample_entries(user.id))
            action = "created"
        else:
            user.is_email_verified = True
            user.set_password(DEMO_PASSWORD)
            action = "updated"
        db.session.commit()
        print(f"Demo user {action}: {DEMO_EMAIL}")


if __name__ == "__main__":
    main()
