"""
Clinic Scheduling Service

A FastAPI-based backend for clinic appointment scheduling: doctor
availability, conflict-free booking, and role-scoped token access for
admins, doctors and patients.
"""

__version__ = "1.0.0"
