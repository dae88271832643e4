"""Name-based registries for pluggable generation components.

Distribution samplers and task-sequence schemes are looked up by the string
that appears in a block configuration (``'uniform'``, ``'AABB'``, ...). A
lookup of an unregistered name raises the registry's error class, so a typo
in a config file fails loudly instead of silently picking a default.

Example:
    >>> from trialforge.registry import DISTRIBUTION_REGISTRY
    >>> DISTRIBUTION_REGISTRY.register("exponential", sample_exponential)
    >>> sampler = DISTRIBUTION_REGISTRY.get("exponential")
"""

from __future__ import annotations

from typing import Callable, Dict, List, Type
import warnings

from trialforge.errors import UnknownDistributionType, UnknownSequenceType


class ComponentRegistry:
    """Registry mapping configuration names to callables.

    Attributes:
        _registry: Dict mapping component name → callable.
        _error_cls: Exception class raised for unknown names.
    """

    def __init__(
        self,
        registry_name: str = "ComponentRegistry",
        error_cls: Type[Exception] = KeyError,
    ):
        """Initialize empty registry.

        Args:
            registry_name: Name for error messages (e.g., "SEQUENCE_REGISTRY").
            error_cls: Exception raised when an unregistered name is requested.
        """
        self._registry: Dict[str, Callable] = {}
        self._name = registry_name
        self._error_cls = error_cls

    def register(self, name: str, func: Callable) -> None:
        """Register a component under ``name``.

        Registering the same callable twice is a no-op. Replacing an existing
        entry with a different callable emits a ``UserWarning``.
        """
        existing = self._registry.get(name)
        if existing is func:
            return
        if existing is not None:
            warnings.warn(
                f"{self._name}: Component '{name}' already registered with "
                f"{existing.__name__}, overwriting with {func.__name__}",
                UserWarning,
            )
        self._registry[name] = func

    def __call__(self, name: str) -> Callable[[Callable], Callable]:
        """Decorator form of :meth:`register`."""

        def decorator(func: Callable) -> Callable:
            self.register(name, func)
            return func

        return decorator

    def get(self, name: str) -> Callable:
        """Return the component registered under ``name``.

        Raises:
            The registry's error class if ``name`` is not registered.
        """
        if name not in self._registry:
            available = ", ".join(self.list_registered())
            raise self._error_cls(
                f"{self._name}: unknown type '{name}'. Available: {available}"
            )
        return self._registry[name]

    def list_registered(self) -> List[str]:
        """Names in registration order."""
        return list(self._registry)

    def is_registered(self, name: str) -> bool:
        return name in self._registry


DISTRIBUTION_REGISTRY = ComponentRegistry(
    "DISTRIBUTION_REGISTRY", error_cls=UnknownDistributionType
)
SEQUENCE_REGISTRY = ComponentRegistry(
    "SEQUENCE_REGISTRY", error_cls=UnknownSequenceType
)
