"""initial schema

Revision ID: 0001
Revises:
Create Date: 2024-05-02 10:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("professional_license", sa.String(100), nullable=True),
        sa.Column("specialty", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_is_active", "users", ["is_active"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "patients",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("cpf", sa.String(11), nullable=False),
        sa.Column("cns", sa.String(15), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("blood_type", sa.String(5), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("comorbidities", sa.Text(), nullable=True),
        sa.Column("medications", sa.Text(), nullable=True),
        sa.Column("mobility", sa.String(50), nullable=True),
        sa.Column("consciousness", sa.String(50), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.String(300), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(2), nullable=True),
        sa.Column("zip_code", sa.String(10), nullable=True),
        sa.Column("emergency_contact", sa.String(200), nullable=True),
        sa.Column("emergency_phone", sa.String(20), nullable=True),
        sa.Column("observations", sa.Text(), nullable=True),
        sa.Column("responsible_id", sa.String(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_patients_name", "patients", ["name"])
    op.create_index("ix_patients_cpf", "patients", ["cpf"], unique=True)
    op.create_index("ix_patients_responsible_id", "patients", ["responsible_id"])
    op.create_index("ix_patients_created_at", "patients", ["created_at"])
    op.create_index("ix_patients_status_created_at", "patients", ["status", "created_at"])

    op.create_table(
        "wounds",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("patient_id", sa.String(), sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_by_id", sa.String(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("stage", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("length", sa.Float(), nullable=True),
        sa.Column("width", sa.Float(), nullable=True),
        sa.Column("depth", sa.Float(), nullable=True),
        sa.Column("area", sa.Float(), nullable=True),
        sa.Column("tissue_type", sa.String(20), nullable=True),
        sa.Column("exudate", sa.String(20), nullable=True),
        sa.Column("exudate_type", sa.String(20), nullable=True),
        sa.Column("odor", sa.String(20), nullable=True),
        sa.Column("pain", sa.Integer(), nullable=True),
        sa.Column("edema", sa.Boolean(), nullable=False),
        sa.Column("infection", sa.Boolean(), nullable=False),
        sa.Column("temperature", sa.String(20), nullable=True),
        sa.Column("periwound_skin", sa.String(20), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("risk_factors", sa.Text(), nullable=True),
        sa.Column("previous_treatments", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_wounds_patient_id", "wounds", ["patient_id"])
    op.create_index("ix_wounds_created_at", "wounds", ["created_at"])
    op.create_index("ix_wounds_status_created_at", "wounds", ["status", "created_at"])
    op.create_index("ix_wounds_type_status", "wounds", ["type", "status"])

    op.create_table(
        "treatments",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("wound_id", sa.String(), sa.ForeignKey("wounds.id", ondelete="SET NULL"), nullable=True),
        sa.Column("patient_id", sa.String(), sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("protocol", sa.Text(), nullable=False),
        sa.Column("dressing", sa.String(200), nullable=True),
        sa.Column("frequency", sa.String(100), nullable=True),
        sa.Column("technique", sa.Text(), nullable=True),
        sa.Column("materials", sa.Text(), nullable=True),
        sa.Column("observations", sa.Text(), nullable=True),
        sa.Column("next_change_date", sa.DateTime(), nullable=True),
        sa.Column("debridement_type", sa.String(50), nullable=True),
        sa.Column("debridement_date", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_treatments_wound_id", "treatments", ["wound_id"])
    op.create_index("ix_treatments_patient_id", "treatments", ["patient_id"])
    op.create_index("ix_treatments_user_id", "treatments", ["user_id"])
    op.create_index("ix_treatments_status", "treatments", ["status"])
    op.create_index("ix_treatments_next_change_date", "treatments", ["next_change_date"])
    op.create_index("ix_treatments_created_at", "treatments", ["created_at"])

    op.create_table(
        "wound_images",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("wound_id", sa.String(), sa.ForeignKey("wounds.id", ondelete="CASCADE"), nullable=False),
        sa.Column("uploaded_by_id", sa.String(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("captured_at", sa.DateTime(), nullable=False),
        sa.Column("is_before_after", sa.Boolean(), nullable=False),
        sa.Column("before_after_type", sa.String(10), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_wound_images_wound_id", "wound_images", ["wound_id"])
    op.create_index("ix_wound_images_created_at", "wound_images", ["created_at"])


def downgrade() -> None:
    op.drop_table("wound_images")
    op.drop_table("treatments")
    op.drop_table("wounds")
    op.drop_table("patients")
    op.drop_table("users")
