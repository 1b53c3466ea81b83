"""
FastAPI routes for the workflow state machine.

Implements the control surface:
- GET /state - Current state
- POST /transition - Request a (possibly delayed) transition
- DELETE /transition/{target} - Cancel a pending delayed transition
- POST /rollback - Roll back the last transition
- GET /visualize - DOT graph of the workflow
- GET /version, PUT /version - Workflow version
- GET /history - Recorded state changes
- GET /health - Health check

Transition failures are reported as 400 without distinguishing the cause.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from workflow_fsm import __version__
from workflow_fsm.core.errors import NoPreviousStateError, StorageError, WorkflowError
from workflow_fsm.core.state_machine import TransitionOutcome, WorkflowManager
from workflow_fsm.i18n import Translator
from workflow_fsm.security import AuthenticationError, AuthManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workflow"])


# ==================== Request/Response Models ====================

class StateResponse(BaseModel):
    """Response for the current state."""

    currentState: Optional[str]
    previousState: Optional[str] = None
    pendingTransitions: list[str] = Field(default_factory=list)


class TransitionRequest(BaseModel):
    """Request body for a transition."""

    to: str = Field(..., min_length=1, description="Target state name")
    delay: float = Field(default=0, ge=0, description="Delay in seconds before the transition fires")

    model_config = {
        "json_schema_extra": {
            "example": {"to": "in_progress", "delay": 0}
        }
    }


class TransitionResponse(BaseModel):
    """Response for a transition request."""

    success: bool
    scheduled: bool = False
    currentState: Optional[str] = None
    message: Optional[str] = None


class RollbackResponse(BaseModel):
    success: bool
    currentState: str


class CancelResponse(BaseModel):
    cancelled: bool


class VersionRequest(BaseModel):
    version: str = Field(..., min_length=1)


class VersionResponse(BaseModel):
    version: str


class HistoryEntry(BaseModel):
    from_state: Optional[str]
    to_state: str
    kind: str
    timestamp: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]


# ==================== Dependency Injection ====================

async def get_manager(request: Request) -> WorkflowManager:
    """Get workflow manager from app state."""
    return request.app.state.manager


def get_locale(
    request: Request,
    accept_language: Optional[str] = Header(default=None),
) -> Optional[str]:
    """Primary language tag of Accept-Language, if the translator knows it."""
    if not accept_language:
        return None
    primary = accept_language.split(",")[0].split(";")[0].strip()
    translator: Translator = request.app.state.translator
    for candidate in (primary, primary.split("-")[0]):
        if candidate in translator.locales:
            return candidate
    return None


def translate(request: Request, key: str, locale: Optional[str]) -> str:
    translator: Translator = request.app.state.translator
    return translator.translate(key, locale=locale)


async def require_transition_role(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
    locale: Optional[str] = Depends(get_locale),
) -> None:
    """Enforce ``transition_roles`` when configured."""
    roles = request.app.state.settings.transition_roles
    if not roles:
        return

    auth: AuthManager = request.app.state.auth
    try:
        user = auth.authenticate(x_user_id)
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=translate(request, "authentication_required", locale),
        )

    if not auth.authorize(user, roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=translate(request, "not_authorized", locale),
        )


# ==================== Routes ====================

@router.get(
    "/state",
    response_model=StateResponse,
    summary="Get current state",
)
async def get_state(manager: WorkflowManager = Depends(get_manager)) -> StateResponse:
    current = manager.get_current_state()
    previous = manager.previous_state
    return StateResponse(
        currentState=current.name if current else None,
        previousState=previous.name if previous else None,
        pendingTransitions=manager.pending_transitions,
    )


@router.post(
    "/transition",
    response_model=TransitionResponse,
    summary="Request a transition",
    description="Transition to a target state, optionally after a delay in seconds.",
    dependencies=[Depends(require_transition_role)],
)
async def transition(
    body: TransitionRequest,
    request: Request,
    manager: WorkflowManager = Depends(get_manager),
    locale: Optional[str] = Depends(get_locale),
) -> TransitionResponse:
    try:
        outcome = await manager.transition_to(body.to, body.delay)
    except WorkflowError as e:
        logger.info(f"Transition to {body.to} rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(request, "transition_rejected", locale),
        )

    scheduled = outcome == TransitionOutcome.SCHEDULED
    current = manager.get_current_state()
    return TransitionResponse(
        success=True,
        scheduled=scheduled,
        currentState=current.name if current else None,
        message=translate(request, "transition_scheduled", locale) if scheduled else None,
    )


@router.delete(
    "/transition/{target}",
    response_model=CancelResponse,
    summary="Cancel a pending delayed transition",
    dependencies=[Depends(require_transition_role)],
)
async def cancel_transition(
    target: str,
    manager: WorkflowManager = Depends(get_manager),
) -> CancelResponse:
    return CancelResponse(cancelled=manager.clear_timer(target))


@router.post(
    "/rollback",
    response_model=RollbackResponse,
    summary="Roll back the last transition",
    dependencies=[Depends(require_transition_role)],
)
async def rollback(
    request: Request,
    manager: WorkflowManager = Depends(get_manager),
    locale: Optional[str] = Depends(get_locale),
) -> RollbackResponse:
    try:
        state = await manager.rollback()
    except NoPreviousStateError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=translate(request, "nothing_to_rollback", locale),
        )
    return RollbackResponse(success=True, currentState=state.name)


@router.get(
    "/visualize",
    response_class=PlainTextResponse,
    summary="Render the workflow as a DOT graph",
)
async def visualize(manager: WorkflowManager = Depends(get_manager)) -> str:
    return manager.generate_graph()


@router.get("/version", response_model=VersionResponse, summary="Get workflow version")
async def get_version(manager: WorkflowManager = Depends(get_manager)) -> VersionResponse:
    return VersionResponse(version=manager.get_version())


@router.put(
    "/version",
    response_model=VersionResponse,
    summary="Set and persist workflow version",
    dependencies=[Depends(require_transition_role)],
)
async def put_version(
    body: VersionRequest,
    manager: WorkflowManager = Depends(get_manager),
) -> VersionResponse:
    try:
        await manager.save_version(body.version)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )
    return VersionResponse(version=manager.get_version())


@router.get("/history", response_model=list[HistoryEntry], summary="State change history")
async def get_history(manager: WorkflowManager = Depends(get_manager)) -> list[HistoryEntry]:
    return [
        HistoryEntry(
            from_state=record.from_state,
            to_state=record.to_state,
            kind=record.kind.value,
            timestamp=record.timestamp.isoformat(),
        )
        for record in manager.notifier.monitor.history
    ]


# ==================== Health Check Routes ====================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(manager: WorkflowManager = Depends(get_manager)) -> HealthResponse:
    services = {}

    storage_ok = await manager.persistence.ping()
    services["storage"] = "healthy" if storage_ok else "unhealthy"

    services["state_machine"] = "healthy" if manager.get_current_state() else "unhealthy"

    unhealthy_count = sum(1 for s in services.values() if s == "unhealthy")
    if unhealthy_count == 0:
        overall_status = "healthy"
    elif unhealthy_count == len(services):
        overall_status = "unhealthy"
    else:
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
    )
