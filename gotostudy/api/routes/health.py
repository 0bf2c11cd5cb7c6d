"""Liveness probe."""

from fastapi import APIRouter, status


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
def health_check() -> dict[str, str]:
    """Return 200 while the process is up."""
    return {"status": "ok"}
