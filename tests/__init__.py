"""
Test suite for the Clinic Scheduling Service.

Contains unit and integration tests for availability, booking and
role-scoped access.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
os.environ.setdefault("SECRET_KEY", "test-signing-key-that-is-long-enough-0123456789")
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"
