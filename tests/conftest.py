import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from patientdesk.core.database import build_engine, get_db
from patientdesk.main import app
from patientdesk.models.domain import create_domain_tables


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_domain_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def doctor(client):
    r = client.post(
        "/api/v1/users",
        json={"name": "Dr. Salma Haddad", "email": "salma.haddad@stmarys-hospital.org", "department": "Cardiology"},
    )
    assert r.status_code == 201, r.text
    return r.json()


# 2024-06-10 is a Monday
MONDAY = "2024-06-10T09:00:00Z"


@pytest.fixture
def admit_patient(client):
    def _admit(mrn="MRN-001", name="Omar Nasser", **admission):
        body = {
            "mrn": mrn,
            "name": name,
            "admission": {
                "admission_date": MONDAY,
                "department": "Cardiology",
                "diagnosis": "Chest pain",
                "shift_type": "morning",
                **admission,
            },
        }
        r = client.post("/api/v1/patients", json=body)
        assert r.status_code == 201, r.text
        return r.json()

    return _admit
