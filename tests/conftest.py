import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set testing environment before the application is imported
os.environ["TESTING"] = "1"
os.environ.setdefault("SECRET_KEY", "test-signing-key-that-is-long-enough-0123456789")
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from clinic.main import app
from clinic.core.database import Base, get_db, get_redis
from clinic.core.security import UserRole, get_password_hash
from clinic.models import Admin, Appointment, Doctor, Patient
from clinic.services.token_service import get_token_service

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Secret123"
PASSWORD_HASH = get_password_hash(PASSWORD)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

class FakeRedis:
    """In-memory stand-in for the rate limiter's Redis client."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, time, value):
        self.data[key] = str(value)
        return True

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def session_factory(test_db):
    """Opens independent sessions, one per worker thread."""
    return TestingSessionLocal

@pytest.fixture
def fake_redis():
    return FakeRedis()

@pytest.fixture
def client(test_db, fake_redis):
    app.dependency_overrides[get_redis] = lambda: fake_redis
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def tokens():
    return get_token_service()

@pytest.fixture
def make_admin(db_session):
    def _make(username="admin"):
        admin = Admin(username=username, password_hash=PASSWORD_HASH)
        db_session.add(admin)
        db_session.commit()
        db_session.refresh(admin)
        return admin
    return _make

@pytest.fixture
def make_doctor(db_session):
    def _make(name="Dr. A", email="dra@example.com", slots=("09:00", "09:30"), specialty="Cardiology"):
        doctor = Doctor(
            name=name,
            specialty=specialty,
            email=email,
            phone="5550001111",
            password_hash=PASSWORD_HASH,
        )
        doctor.set_available_times(list(slots))
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor
    return _make

@pytest.fixture
def make_patient(db_session):
    def _make(name="Alice Patient", email="alice@example.com", phone="5551234567"):
        patient = Patient(
            name=name,
            email=email,
            phone=phone,
            address="1 Main St",
            password_hash=PASSWORD_HASH,
        )
        db_session.add(patient)
        db_session.commit()
        db_session.refresh(patient)
        return patient
    return _make

@pytest.fixture
def make_appointment(db_session):
    def _make(doctor, patient, when, status=0):
        appointment = Appointment(
            doctor_id=doctor.id,
            patient_id=patient.id,
            appointment_time=when,
            status=status,
        )
        db_session.add(appointment)
        db_session.commit()
        db_session.refresh(appointment)
        return appointment
    return _make

@pytest.fixture
def token_for(tokens):
    """Issue a token for an admin, doctor or patient row."""
    def _issue(account, role):
        identifier = account.username if role is UserRole.ADMIN else account.email
        return tokens.issue(identifier, role)
    return _issue