"""
Health Check Endpoints.

Endpoints:
- /health: Liveness check (process running)
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. Upstream is never contacted,
    so a slow or failing Aviationstack does not make the relay look dead.
    """
    return {"status": "healthy"}
