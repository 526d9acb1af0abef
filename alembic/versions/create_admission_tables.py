"""create_admission_tables

Revision ID: create_admission_tables
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "create_admission_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SHIFT_TYPES = ("morning", "evening", "night", "weekend_morning", "weekend_night")
SAFETY_TYPES = ("emergency", "observation", "short-stay")

shift_type_enum = sa.Enum(*SHIFT_TYPES, name="shift_type")
# Second use of the type (consultations) must not try to create it again
shift_type_ref = postgresql.ENUM(*SHIFT_TYPES, name="shift_type", create_type=False)
safety_type_enum = sa.Enum(*SAFETY_TYPES, name="safety_type")
admission_status_enum = sa.Enum("active", "discharged", "transferred", name="admission_status")
discharge_type_enum = sa.Enum("regular", "against-medical-advice", "transfer", name="discharge_type")
consultation_status_enum = sa.Enum("active", "completed", name="consultation_status")
user_role_enum = sa.Enum("admin", "doctor", "nurse", name="user_role_enum")

ACTIVE_ADMISSIONS_VIEW = """
CREATE VIEW active_admissions AS
SELECT
    a.id,
    a.patient_id,
    p.mrn,
    p.name,
    a.admission_date,
    a.department,
    a.safety_type,
    a.shift_type,
    a.is_weekend,
    u.name AS doctor_name,
    a.diagnosis,
    a.status,
    a.visit_number,
    a.admitting_doctor_id
FROM
    admissions a
    JOIN patients p ON a.patient_id = p.id
    LEFT JOIN users u ON a.admitting_doctor_id = u.id
WHERE
    a.status = 'active'
"""

# Storage-side guard for writers that bypass the application services.
# DOW in PostgreSQL is Sunday-indexed: 5 = Friday, 6 = Saturday.
PG_SET_IS_WEEKEND = """
CREATE OR REPLACE FUNCTION set_is_weekend()
RETURNS TRIGGER AS $$
BEGIN
    NEW.is_weekend := EXTRACT(DOW FROM NEW.admission_date) IN (5, 6);
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;
"""

PG_VALIDATE_SHIFT_TYPE = """
CREATE OR REPLACE FUNCTION validate_shift_type()
RETURNS TRIGGER AS $$
BEGIN
    IF NEW.is_weekend AND NEW.shift_type NOT IN ('weekend_morning', 'weekend_night') THEN
        RAISE EXCEPTION 'Weekend admissions must use weekend shift types';
    END IF;
    IF NOT NEW.is_weekend AND NEW.shift_type IN ('weekend_morning', 'weekend_night') THEN
        RAISE EXCEPTION 'Weekday admissions cannot use weekend shift types';
    END IF;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;
"""

# Trigger names sort alphabetically in PostgreSQL: "a_" runs before "b_",
# so the flag is derived before the shift type is checked.
PG_TRIGGERS = """
CREATE TRIGGER a_set_admission_is_weekend
    BEFORE INSERT OR UPDATE OF admission_date
    ON admissions
    FOR EACH ROW
    EXECUTE FUNCTION set_is_weekend();

CREATE TRIGGER b_validate_admission_shift_type
    BEFORE INSERT OR UPDATE OF shift_type, is_weekend, admission_date
    ON admissions
    FOR EACH ROW
    EXECUTE FUNCTION validate_shift_type();
"""


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    is_postgres = op.get_bind().dialect.name == "postgresql"

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("mrn", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Non-unique: the same MRN may be registered more than once
    op.create_index("ix_patients_mrn", "patients", ["mrn"], unique=False)

    op.create_table(
        "admissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("admitting_doctor_id", sa.Integer(), nullable=True),
        sa.Column("admission_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=False),
        sa.Column("diagnosis", sa.Text(), nullable=False),
        sa.Column("visit_number", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column("safety_type", safety_type_enum, nullable=True),
        sa.Column("shift_type", shift_type_enum, nullable=False),
        sa.Column("is_weekend", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("status", admission_status_enum, nullable=False),
        sa.Column("discharge_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("discharge_type", discharge_type_enum, nullable=True),
        sa.Column("follow_up_required", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("follow_up_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["admitting_doctor_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admissions_patient_id", "admissions", ["patient_id"])
    op.create_index("ix_admissions_admission_date", "admissions", ["admission_date"])
    op.create_index("ix_admissions_status", "admissions", ["status"])
    op.create_index(
        "idx_admissions_safety_type",
        "admissions",
        ["safety_type"],
        postgresql_where=sa.text("safety_type IS NOT NULL"),
    )
    op.create_index("idx_admissions_visit_number", "admissions", ["patient_id", "visit_number"])
    op.create_index("idx_admissions_shift_type", "admissions", ["shift_type"])
    op.create_index("idx_admissions_is_weekend", "admissions", ["is_weekend"])

    op.create_table(
        "consultations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("mrn", sa.String(length=50), nullable=False),
        sa.Column("patient_name", sa.String(length=200), nullable=False),
        sa.Column("consultation_specialty", sa.String(length=100), nullable=False),
        sa.Column("requesting_department", sa.String(length=100), nullable=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=True),
        sa.Column("doctor_name", sa.String(length=200), nullable=True),
        sa.Column("shift_type", shift_type_ref, nullable=True),
        sa.Column("status", consultation_status_enum, nullable=False),
        sa.Column("completion_note", sa.Text(), nullable=True),
        sa.Column("completed_by", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["doctor_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["completed_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_consultations_patient_id", "consultations", ["patient_id"])
    op.create_index("ix_consultations_consultation_specialty", "consultations", ["consultation_specialty"])
    op.create_index("ix_consultations_status", "consultations", ["status"])

    op.create_table(
        "medical_notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=True),
        sa.Column("note_type", sa.String(length=50), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["doctor_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_medical_notes_patient_id", "medical_notes", ["patient_id"])

    op.execute(ACTIVE_ADMISSIONS_VIEW)

    if is_postgres:
        op.execute(PG_SET_IS_WEEKEND)
        op.execute(PG_VALIDATE_SHIFT_TYPE)
        op.execute(PG_TRIGGERS)


def downgrade() -> None:
    is_postgres = op.get_bind().dialect.name == "postgresql"

    if is_postgres:
        op.execute("DROP TRIGGER IF EXISTS b_validate_admission_shift_type ON admissions")
        op.execute("DROP TRIGGER IF EXISTS a_set_admission_is_weekend ON admissions")
        op.execute("DROP FUNCTION IF EXISTS validate_shift_type()")
        op.execute("DROP FUNCTION IF EXISTS set_is_weekend()")

    op.execute("DROP VIEW IF EXISTS active_admissions")

    op.drop_index("ix_medical_notes_patient_id", table_name="medical_notes")
    op.drop_table("medical_notes")

    op.drop_index("ix_consultations_status", table_name="consultations")
    op.drop_index("ix_consultations_consultation_specialty", table_name="consultations")
    op.drop_index("ix_consultations_patient_id", table_name="consultations")
    op.drop_table("consultations")

    for index_name in (
        "idx_admissions_is_weekend",
        "idx_admissions_shift_type",
        "idx_admissions_visit_number",
        "idx_admissions_safety_type",
        "ix_admissions_status",
        "ix_admissions_admission_date",
        "ix_admissions_patient_id",
    ):
        op.drop_index(index_name, table_name="admissions")
    op.drop_table("admissions")

    op.drop_index("ix_patients_mrn", table_name="patients")
    op.drop_table("patients")
    op.drop_table("users")

    if is_postgres:
        for enum_type in (
            user_role_enum,
            consultation_status_enum,
            discharge_type_enum,
            admission_status_enum,
            safety_type_enum,
            shift_type_enum,
        ):
            enum_type.drop(op.get_bind(), checkfirst=True)
