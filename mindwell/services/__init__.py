"""
Service Layer Package

Business logic services sitting between the presentation layer (REST API)
and the storage layer (ProgressStore).

Core Services:
- ProgressService: mood logging, exercise completion, XP, streaks, achievements
"""

from mindwell.services.container import ServiceContainer, get_container, init_container, reset_container
from mindwell.services.progress_service import ProgressService

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "reset_container",
    "ProgressService",
]
