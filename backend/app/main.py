"""FastAPI application - task board API."""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.routes.audit import router as audit_router
from backend.app.api.routes.auth import router as auth_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.organizations import router as organizations_router
from backend.app.api.routes.tasks import router as tasks_router
from backend.app.config import get_settings
from backend.app.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    InvalidAssigneeError,
    NotFoundError,
    TaskBoardError,
)
from backend.app.utils.logging import configure_logging

API_PREFIX = "/api"

# Domain error -> HTTP status; checked in order so subclasses come first
ERROR_STATUS: list[tuple[type[TaskBoardError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidAssigneeError, 422),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ConflictError, status.HTTP_409_CONFLICT),
]

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="Task Board API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ui_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TaskBoardError)
async def task_board_error_handler(request: Request, exc: TaskBoardError) -> JSONResponse:
    """Map domain errors to HTTP responses."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break

    body: dict[str, str] = {"detail": str(exc)}
    if isinstance(exc, ForbiddenError) and exc.reason:
        body["reason"] = exc.reason

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(tasks_router, prefix=API_PREFIX)
app.include_router(audit_router, prefix=API_PREFIX)
app.include_router(organizations_router, prefix=API_PREFIX)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Task Board API", "version": "0.1.0"}
