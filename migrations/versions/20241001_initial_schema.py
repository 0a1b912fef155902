"""create users, symptoms, medications and wellness_logs tables"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "initial_20241001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _owner():
    return sa.Column(
        "user_id",
        sa.String(length=32),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(length=32), nullable=True),
        sa.Column("language", sa.String(length=16), nullable=False, server_default="italian"),
        sa.Column(
            "profile_picture",
            sa.String(length=512),
            nullable=False,
            server_default="/assets/images/default-profile.png",
        ),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verification_token", sa.String(length=128), nullable=True),
        sa.Column("email_verification_expires", sa.DateTime(), nullable=True),
        sa.Column("reset_password_token", sa.String(length=128), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("medical_conditions", sa.JSON(), nullable=False),
        sa.Column("allergies", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_email_verification_token", "users", ["email_verification_token"])
    op.create_index("ix_users_reset_password_token", "users", ["reset_password_token"])

    op.create_table(
        "symptoms",
        sa.Column("id", sa.String(length=32), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("severity", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(length=200), nullable=True),
        sa.Column("triggers", sa.Text(), nullable=True),
        sa.Column("date_reported", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_symptoms_user_id", "symptoms", ["user_id"])

    op.create_table(
        "medications",
        sa.Column("id", sa.String(length=32), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("dosage", sa.String(length=120), nullable=False),
        sa.Column("frequency", sa.String(length=120), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("purpose", sa.Text(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("side_effects", sa.JSON(), nullable=False),
        sa.Column("reminders", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_medications_user_id", "medications", ["user_id"])

    op.create_table(
        "wellness_logs",
        sa.Column("id", sa.String(length=32), primary_key=True),
        _owner(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("mood", sa.Float(), nullable=False),
        sa.Column("energy", sa.Float(), nullable=False),
        sa.Column("sleep_hours", sa.Float(), nullable=True),
        sa.Column("sleep_quality", sa.Float(), nullable=True),
        sa.Column("nutrition_quality", sa.Float(), nullable=True),
        sa.Column("nutrition_hydration", sa.Float(), nullable=True),
        sa.Column("stress", sa.Float(), nullable=True),
        sa.Column("physical_activity", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "date", name="uq_wellness_logs_user_date"),
    )
    op.create_index("ix_wellness_logs_user_id", "wellness_logs", ["user_id"])


def downgrade():
    op.drop_index("ix_wellness_logs_user_id", table_name="wellness_logs")
    op.drop_table("wellness_logs")
    op.drop_index("ix_medications_user_id", table_name="medications")
    op.drop_table("medications")
    op.drop_index("ix_symptoms_user_id", table_name="symptoms")
    op.drop_table("symptoms")
    op.drop_index("ix_users_reset_password_token", table_name="users")
    op.drop_index("ix_users_email_verification_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
