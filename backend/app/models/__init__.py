"""
Back Office API - ORM Models Package
=====================================

Importing this package registers every table with `Base.metadata`
(Alembic autogenerate and the test fixtures rely on that).
"""

from app.models.clinician import Clinician
from app.models.practice_information import PracticeInformation

__all__ = ["Clinician", "PracticeInformation"]
