# =============================================================================
# app/routers/diagnostics.py - Diagnostic Endpoints
# =============================================================================

from typing import Any

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from core.models.profile import DiagStatusRequest, DiagStatusResponse
from core.services.diagnostics_service import DiagnosticsService

router = APIRouter()


@router.post("/diag-status", response_model=DiagStatusResponse)
def diag_status(
    body: DiagStatusRequest | None = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Memberships, bands and per-band suggestion counts for one user.

    Looks up `user_id` or `email`, defaulting to the caller. Only the
    caller's own account can be inspected.
    """
    body = body or DiagStatusRequest()
    return DiagnosticsService.user_status(user.id, user_id=body.user_id, email=body.email)


@router.post("/diag-system")
def diag_system(user: AuthUser = Depends(get_current_user)) -> dict[str, Any]:
    """Project-wide status snapshot with recommendations."""
    return DiagnosticsService.system_status()
