# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - errors.py: Error kinds raised by every operation
# - models/: Pydantic schemas for data validation
# - services/: Band, song, profile, calendar, member and diagnostic logic
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
