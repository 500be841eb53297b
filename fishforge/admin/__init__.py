"""Admin tooling."""

from .commands import build_admin_router
from .service import AdminService

__all__ = ["build_admin_router", "AdminService"]
