"""
Service Container - Dependency Injection Container

Simple DI container for managing service instances and their dependencies.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from mindwell.db.store import ProgressStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    The progress service is lazy-loaded on first access.
    The store (infrastructure) is injected.
    """

    store: ProgressStore

    _progress_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def progress_service(self):
        """Get ProgressService instance (lazy-loaded)"""
        if self._progress_service is None:
            from mindwell.services.progress_service import ProgressService
            self._progress_service = ProgressService(self.store)
            logger.debug("ProgressService instantiated")
        return self._progress_service


# Global container instance (initialized by the API lifespan)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Returns:
        ServiceContainer: The global container instance

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before using services."
        )
    return _container


def init_container(store: ProgressStore) -> ServiceContainer:
    """
    Initialize the global service container.

    Should be called once at startup after the store is loaded.

    Args:
        store: ProgressStore instance

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    _container = ServiceContainer(store=store)

    logger.info("Service container initialized")
    return _container


def reset_container() -> None:
    """Drop the global container (used on shutdown and in tests)"""
    global _container
    _container = None
