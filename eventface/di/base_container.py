# Standard library imports
from typing import Any, Callable, Dict, Union

Key = Union[type, str]


class BaseContainer:
    """
    Minimal dependency injection container.

    Dependencies are keyed by type (interfaces, use cases) or by name
    (database collections, settings). Singletons are stored as instances,
    factories are called on every `get`.
    """

    def __init__(self) -> None:
        self._singletons: Dict[Key, Any] = {}
        self._factories: Dict[Key, Callable[[], Any]] = {}

    def register_singleton(self, key: Key, instance: Any) -> None:
        """Register a shared instance (replaces any previous registration)"""
        self._factories.pop(key, None)
        self._singletons[key] = instance

    def register_factory(self, key: Key, factory: Callable[[], Any]) -> None:
        """Register a factory creating a new instance per `get`"""
        self._singletons.pop(key, None)
        self._factories[key] = factory

    def is_registered(self, key: Key) -> bool:
        return key in self._singletons or key in self._factories

    def get(self, key: Key) -> Any:
        """
        Resolve a dependency

        Raises:
            ValueError: If nothing is registered under key
        """
        if key in self._singletons:
            return self._singletons[key]
        if key in self._factories:
            return self._factories[key]()
        name = key.__name__ if isinstance(key, type) else key
        raise ValueError(f"Dependency not registered: {name}")
