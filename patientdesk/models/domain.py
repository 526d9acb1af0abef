# patientdesk/models/domain.py
from sqlalchemy.engine import Connection, Engine

from patientdesk.models.admission import Admission
from patientdesk.models.base import Base
from patientdesk.models.consultation import Consultation
from patientdesk.models.medical_note import MedicalNote
from patientdesk.models.patient import Patient
from patientdesk.models.user import User

# Order matters: tables with no dependencies first, then tables that depend on them
# - Admission, Consultation, MedicalNote depend on Patient and User
DOMAIN_TABLES = [
    User.__table__,
    Patient.__table__,
    Admission.__table__,
    Consultation.__table__,
    MedicalNote.__table__,
]


def create_domain_tables(bind: Engine | Connection) -> None:
    """
    Create every domain table that does not exist yet.

    Used by tests and local SQLite setups; PostgreSQL deployments run the
    alembic migrations instead (they also install the view and triggers).
    """
    Base.metadata.create_all(bind=bind, tables=DOMAIN_TABLES, checkfirst=True)
