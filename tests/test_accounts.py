import threading

import pytest

from clinic.core.errors import ClinicError, ReasonCode
from clinic.models import Patient
from clinic.schemas.patient import PatientCreate
from clinic.services.patient_service import PatientService

class TestPatientSignup:

    def test_concurrent_signups_with_one_email(self, session_factory):
        """Same email, different phones, six threads: one account, five conflicts."""
        barrier = threading.Barrier(6)
        lock = threading.Lock()
        outcomes = []

        def register(index):
            db = session_factory()
            try:
                barrier.wait()
                data = PatientCreate(
                    name="Dana Patient",
                    email="dana@example.com",
                    phone=f"555123000{index}",
                    password="Secret123",
                )
                try:
                    PatientService(db).register(data)
                    outcome = "created"
                except ClinicError as exc:
                    outcome = exc.reason
                with lock:
                    outcomes.append(outcome)
            finally:
                db.close()

        threads = [threading.Thread(target=register, args=(i,)) for i in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(outcomes) == 6
        assert outcomes.count("created") == 1
        assert outcomes.count(ReasonCode.CONFLICT) == 5

        db = session_factory()
        try:
            assert db.query(Patient).filter(Patient.email == "dana@example.com").count() == 1
        finally:
            db.close()

    def test_details_of_unknown_patient(self, db_session):
        with pytest.raises(ClinicError) as exc_info:
            PatientService(db_session).details(404)
        assert exc_info.value.reason is ReasonCode.NOT_FOUND
