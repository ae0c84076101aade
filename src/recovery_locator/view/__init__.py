"""View sessions and the locator query cycle."""

from recovery_locator.view.controller import LocatorController, NearestNotFoundError
from recovery_locator.view.session import ViewSession, ViewSessionManager

__all__ = ["LocatorController", "NearestNotFoundError", "ViewSession", "ViewSessionManager"]
