from .base import BaseManager
from .factory import get_manager, reset_managers

__all__ = ["BaseManager", "get_manager", "reset_managers"]
