"""Domain models package."""

from erp_api.models.domain.identity import Identity

__all__ = ["Identity"]
