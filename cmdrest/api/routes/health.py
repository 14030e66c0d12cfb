"""Health check endpoints for the cmdrest server.

- /health/live: Liveness check (minimal, fast)
- /health/ready: Readiness check
- /health: Detailed diagnostics

Responses follow the IETF Health Check Response Format draft.
"""

import shutil
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Response

from cmdrest.api.dependencies import ContainerDep
from cmdrest.core import __version__
from cmdrest.core.logging import get_logger


router = APIRouter(tags=["health"])
logger = get_logger(__name__)


def _no_cache(response: Response) -> None:
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"


@router.get("/health/live")
async def liveness_check(response: Response) -> dict[str, Any]:
    """Liveness check: the process is up."""
    _no_cache(response)
    logger.debug("liveness_check_request")

    return {
        "status": "pass",
        "version": __version__,
        "output": "Application process is running",
    }


@router.get("/health/ready")
async def readiness_check(response: Response) -> dict[str, Any]:
    """Readiness check: the server accepts requests."""
    _no_cache(response)
    logger.debug("readiness_check_request")

    return {
        "status": "pass",
        "version": __version__,
        "output": "Service is ready to accept traffic",
    }


@router.get("/health")
async def detailed_health_check(
    response: Response, container: ContainerDep
) -> dict[str, Any]:
    """Detailed status of the hook registry and the command executable.

    A missing executable only warns: hooks may still answer every request.
    """
    _no_cache(response)
    logger.debug("detailed_health_check_request")

    current_time = datetime.now(UTC).isoformat()
    executable = container.settings.commands.executable
    resolved = shutil.which(executable)

    registrations = container.hook_registry.get_alter_hooks()

    return {
        "status": "pass" if resolved else "warn",
        "version": __version__,
        "serviceId": "cmdrest",
        "description": "cmdrest command server",
        "time": current_time,
        "checks": {
            "command:executable": [
                {
                    "componentId": executable,
                    "componentType": "system",
                    "status": "pass" if resolved else "warn",
                    "time": current_time,
                    "output": resolved or f"'{executable}' not found on PATH",
                }
            ],
            "hooks:request_alter": [
                {
                    "componentId": "process_request_alter",
                    "componentType": "component",
                    "status": "pass",
                    "time": current_time,
                    "observedValue": len(registrations),
                    "observedUnit": "hooks",
                }
            ],
        },
    }
