"""Health check router."""

from erp_api.security.access import GuardedRouter, public

router = GuardedRouter()


@router.get("/health")
@public()
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
