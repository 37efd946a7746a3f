"""Identity provider client used to build refresh operations."""

from .client import RefreshClient

__all__ = ["RefreshClient"]
