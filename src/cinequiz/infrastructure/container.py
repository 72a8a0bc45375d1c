"""Dependency injection container."""

import inspect
import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import IContentProvider

T = TypeVar("T")


class Container:
    """Registry that builds services and wires their constructor arguments.

    Constructor parameters annotated with ``Config`` receive the loaded
    configuration; parameters annotated with a registered type receive that
    service. Parameters with defaults are left alone.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager instance. If None, creates default.
        """
        self._services: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[[], Any]] = {}
        self._singletons: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Register a type that is built once on first use."""
        self._services[interface] = implementation
        self._logger.debug(
            f"Registered singleton: {interface.__name__} -> {implementation.__name__}"
        )

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Register a function that builds a new instance per lookup."""
        self._factories[interface] = factory
        self._logger.debug(f"Registered factory: {interface.__name__}")

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a pre-built instance (fakes in tests, shared clients)."""
        self._singletons[interface] = instance
        self._logger.debug(f"Registered instance: {interface.__name__}")

    def is_registered(self, interface: Type) -> bool:
        return (
            interface in self._singletons
            or interface in self._factories
            or interface in self._services
        )

    def get(self, interface: Type[T]) -> T:
        """Resolve a service.

        Args:
            interface: Registered type.

        Returns:
            Service instance.

        Raises:
            ValueError: If service is not registered.
        """
        if interface in self._singletons:
            return self._singletons[interface]  # type: ignore

        if interface in self._factories:
            return self._factories[interface]()  # type: ignore

        if interface in self._services:
            instance = self._create_instance(self._services[interface])
            self._singletons[interface] = instance
            return instance  # type: ignore

        raise ValueError(f"Service not registered: {interface.__name__}")

    def _create_instance(self, implementation: Type[T]) -> T:
        sig = inspect.signature(implementation.__init__)
        kwargs: Dict[str, Any] = {}

        for param_name, param in sig.parameters.items():
            if param_name == "self":
                continue

            if param.annotation is Config:
                kwargs[param_name] = self.get_config()
            elif isinstance(param.annotation, type) and self.is_registered(param.annotation):
                kwargs[param_name] = self.get(param.annotation)
            elif param.default is not inspect.Parameter.empty:
                continue
            else:
                raise ValueError(
                    f"Cannot resolve dependency {param_name} of {implementation.__name__}"
                )

        return implementation(**kwargs)

    def get_config(self) -> Config:
        return self._config_manager.get_config()

    def configure_default_services(self) -> None:
        """Register the TMDb provider and both game sessions."""
        from ..core.services import CastRevealSession, FilmographySession, TMDbContentProvider

        if not self.is_registered(IContentProvider):
            self.register_singleton(IContentProvider, TMDbContentProvider)  # type: ignore
        self.register_singleton(CastRevealSession, CastRevealSession)
        self.register_singleton(FilmographySession, FilmographySession)

        self._logger.info("Default services configured")

    async def aclose(self) -> None:
        """Release the countdown and close network sessions."""
        from ..core.services import FilmographySession

        filmography = self._singletons.get(FilmographySession)
        if filmography is not None:
            filmography.close()

        provider = self._singletons.get(IContentProvider)
        close = getattr(provider, "close", None)
        if close is not None:
            await close()

    def reset(self) -> None:
        """Forget every registration and built instance."""
        self._services.clear()
        self._factories.clear()
        self._singletons.clear()
        self._logger.debug("Container reset")
