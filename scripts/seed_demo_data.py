#!/usr/bin/env python3
# scripts/seed_demo_data.py
"""
PatientDesk demo data seeder + reset.

- A handful of clinicians across the demo departments.
- Patients admitted over the past weeks, each with 1-3 visits. Shift
  types are picked from the vocabulary matching the admission date, so
  Friday/Saturday admissions always get weekend shifts.
- Some admissions discharged (with a Discharge Summary), the rest active.
- Open consultations between departments.

Every demo patient MRN starts with "DEMO-" so --reset only touches demo rows.

Run:
  python -m scripts.seed_demo_data --seed
  python -m scripts.seed_demo_data --reset
  python -m scripts.seed_demo_data --seed --patients 40 --random-seed 7
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from datetime import datetime, time, timedelta, timezone
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

# Allow "python -m scripts.seed_demo_data" from repo root
REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from patientdesk.core.config import get_settings  # noqa: E402
from patientdesk.core.database import SessionLocal, engine, transaction  # noqa: E402
from patientdesk.domain.shifts import allowed_shifts, is_weekend  # noqa: E402
from patientdesk.models.domain import create_domain_tables  # noqa: E402
from patientdesk.models.patient import Patient  # noqa: E402
from patientdesk.models.user import RoleName, User  # noqa: E402
from patientdesk.schemas.admission import AdmissionCreate, AdmissionFields  # noqa: E402
from patientdesk.schemas.consultation import ConsultationCreate  # noqa: E402
from patientdesk.schemas.discharge import DischargeRequest  # noqa: E402
from patientdesk.schemas.patient import PatientCreate  # noqa: E402
from patientdesk.services import (  # noqa: E402
    admission_service,
    consultation_service,
    discharge_service,
    patient_service,
)

logger = logging.getLogger(__name__)

DEMO_MRN_PREFIX = "DEMO-"

DEPARTMENTS = ["Cardiology", "Neurology", "Nephrology", "Internal Medicine", "Pulmonology"]

CLINICIANS = [
    ("Dr. Salma Haddad", "Cardiology"),
    ("Dr. Karim Mansour", "Neurology"),
    ("Dr. Rania Khalil", "Nephrology"),
    ("Dr. Youssef Farid", "Internal Medicine"),
    ("Dr. Maha Suleiman", "Pulmonology"),
]

FIRST_NAMES = ["Omar", "Lina", "Huda", "Tariq", "Nour", "Sami", "Dina", "Faris", "Reem", "Ziad"]
LAST_NAMES = ["Nasser", "Saad", "Kareem", "Aziz", "Hamdan", "Qasim", "Bakr", "Rashid"]

DIAGNOSES = {
    "Cardiology": ["Chest pain", "Atrial fibrillation", "Heart failure exacerbation"],
    "Neurology": ["Ischaemic stroke", "Seizure", "Migraine"],
    "Nephrology": ["Acute kidney injury", "Hyperkalaemia"],
    "Internal Medicine": ["Community-acquired pneumonia", "Cellulitis", "DKA"],
    "Pulmonology": ["COPD exacerbation", "Pulmonary embolism"],
}


def _random_admission_date(rng: random.Random, days_back: int) -> datetime:
    day = datetime.now(timezone.utc).date() - timedelta(days=rng.randint(1, days_back))
    return datetime.combine(day, time(rng.randint(0, 23), rng.choice([0, 15, 30, 45])), timezone.utc)


def _admission_fields(rng: random.Random, clinicians: list[User], days_back: int) -> AdmissionFields:
    department = rng.choice(DEPARTMENTS)
    admitted_at = _random_admission_date(rng, days_back)
    doctor = rng.choice([c for c in clinicians if c.department == department] + [None])
    # Same zone the admission service classifies in
    weekend = is_weekend(admitted_at, get_settings().hospital_timezone)
    return AdmissionFields(
        admission_date=admitted_at,
        department=department,
        admitting_doctor_id=doctor.id if doctor else None,
        diagnosis=rng.choice(DIAGNOSES[department]),
        safety_type=rng.choice([None, "emergency", "observation", "short-stay"]),
        shift_type=rng.choice(sorted(allowed_shifts(weekend))),
    )


def ensure_clinicians(db: Session) -> list[User]:
    existing = {u.name: u for u in db.query(User).all()}
    with transaction(db):
        for name, department in CLINICIANS:
            if name not in existing:
                user = User(name=name, department=department, role=RoleName.DOCTOR)
                db.add(user)
                existing[name] = user
    return [existing[name] for name, _ in CLINICIANS]


def seed(db: Session, *, patients: int, rng: random.Random, days_back: int = 60) -> dict:
    clinicians = ensure_clinicians(db)
    stats = {"patients": 0, "admissions": 0, "discharges": 0, "consultations": 0}

    for index in range(1, patients + 1):
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        patient = patient_service.intake_patient(
            db,
            payload=PatientCreate(
                mrn=f"{DEMO_MRN_PREFIX}{index:05d}",
                name=name,
                gender=rng.choice(["female", "male"]),
                admission=_admission_fields(rng, clinicians, days_back),
            ),
        )
        stats["patients"] += 1
        stats["admissions"] += 1

        for _ in range(rng.randint(0, 2)):
            fields = _admission_fields(rng, clinicians, days_back)
            admission_service.create_admission(
                db, payload=AdmissionCreate(patient_id=patient.id, **fields.model_dump())
            )
            stats["admissions"] += 1

        # Everything but the latest visit is closed; the latest one sometimes
        db.refresh(patient)
        admissions = sorted(patient.admissions, key=lambda a: a.admission_date)
        for admission in admissions[:-1] + ([admissions[-1]] if rng.random() < 0.3 else []):
            discharge_service.process_discharge(
                db,
                request=DischargeRequest(
                    record_id=admission.id,
                    discharged_by_id=rng.choice(clinicians).id,
                    discharge_date=admission.admission_date + timedelta(days=rng.randint(1, 6)),
                    discharge_type=rng.choice(["regular", "regular", "regular", "transfer"]),
                    discharge_note=f"{admission.diagnosis}: treated and stable for discharge.",
                ),
            )
            stats["discharges"] += 1

        if rng.random() < 0.25:
            consultation_service.create_consultation(
                db,
                payload=ConsultationCreate(
                    patient_id=patient.id,
                    consultation_specialty=rng.choice(DEPARTMENTS),
                    requesting_department=admissions[-1].department,
                    reason=f"Opinion on {admissions[-1].diagnosis.lower()}",
                ),
            )
            stats["consultations"] += 1

    return stats


def reset(db: Session) -> int:
    """Delete demo patients; their admissions, consultations and notes cascade."""
    demo = db.query(Patient).filter(Patient.mrn.startswith(DEMO_MRN_PREFIX)).all()
    for patient in demo:
        patient_service.delete_patient(db, patient_id=patient.id)
    return len(demo)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed / reset PatientDesk demo data")
    parser.add_argument("--seed", action="store_true", help="Seed demo clinicians, patients and admissions")
    parser.add_argument("--reset", action="store_true", help="Delete demo patients only")
    parser.add_argument("--patients", type=int, default=25, help="Patients to seed (default: 25)")
    parser.add_argument("--random-seed", type=int, default=None, help="Seed for reproducible data")
    args = parser.parse_args()

    if not (args.seed or args.reset):
        parser.print_help()
        raise SystemExit(1)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    create_domain_tables(engine)

    db = SessionLocal()
    try:
        if args.reset:
            logger.info("Deleted %d demo patient(s)", reset(db))
        if args.seed:
            stats = seed(db, patients=args.patients, rng=random.Random(args.random_seed))
            logger.info("Seeded: %s", stats)
    except SQLAlchemyError as e:
        logger.error("Seed failed: %s", e, exc_info=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
