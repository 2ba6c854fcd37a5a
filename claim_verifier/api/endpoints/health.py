"""Health check endpoints."""

from typing import Dict

from fastapi import APIRouter

from ...infrastructure.dependencies import get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> Dict[str, Dict[str, bool]]:
    """Check the health of all service components.

    Returns:
        Registered AI and search providers and whether each is active
    """
    status = get_service_container().provider_status
    return {
        "ai_providers": {name.title(): active for name, active in status["ai_providers"].items()},
        "search_providers": {name.title(): active for name, active in status["search_providers"].items()},
    }
