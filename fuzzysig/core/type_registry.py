"""Generic type registry with case-insensitive lookup.

Indicator types and membership function shapes are both resolved by name from
configuration files. The registry supports:
- Case-insensitive lookup
- Aliases (multiple names resolving to the same type)
- Collision detection
- A class decorator for registration at definition time

Example usage:
    >>> INDICATOR_REGISTRY = TypeRegistry[BaseIndicator]("indicator")
    >>> @INDICATOR_REGISTRY.registered("rsi", aliases=["relative_strength"])
    ... class RSIIndicator(BaseIndicator): ...
    >>> INDICATOR_REGISTRY.get("RSI")  # Returns RSIIndicator
"""

from typing import Callable, Generic, Optional, TypeVar

from fuzzysig.errors import ConfigurationError, ErrorCodes

T = TypeVar("T")


class TypeRegistry(Generic[T]):
    """Generic registry for types with case-insensitive lookup.

    Attributes:
        _name: Registry name used in error messages (e.g. "indicator")
        _types: Maps lowercase names (both canonical and aliases) to type classes
        _canonical: Set of canonical names (excludes aliases)
    """

    def __init__(self, name: str, error_code: str = ErrorCodes.CONFIG_VALIDATION_FAILED) -> None:
        self._name = name
        self._error_code = error_code
        self._types: dict[str, type[T]] = {}
        self._canonical: set[str] = set()

    def register(
        self, cls: type[T], canonical: str, aliases: Optional[list[str]] = None
    ) -> None:
        """Register a type with a canonical name and optional aliases.

        Raises:
            ValueError: If any name (canonical or alias) is already registered
        """
        all_names = [canonical] + (aliases or [])
        # Check for collisions before registering anything
        for name in all_names:
            existing = self._types.get(name.lower())
            if existing is not None:
                raise ValueError(
                    f"Cannot register {cls.__name__} as '{name}': "
                    f"already registered to {existing.__name__}"
                )

        for name in all_names:
            self._types[name.lower()] = cls
        self._canonical.add(canonical.lower())

    def registered(
        self, canonical: str, aliases: Optional[list[str]] = None
    ) -> Callable[[type[T]], type[T]]:
        """Class decorator form of :meth:`register`."""

        def decorator(cls: type[T]) -> type[T]:
            self.register(cls, canonical, aliases)
            return cls

        return decorator

    def get(self, name: str) -> Optional[type[T]]:
        """Look up a type by name (case-insensitive), None if not found."""
        return self._types.get(name.lower())

    def get_or_raise(self, name: str) -> type[T]:
        """Look up a type by name, raising a ConfigurationError if not found."""
        cls = self.get(name)
        if cls is None:
            available = self.list_types()
            raise ConfigurationError(
                message=f"Unknown {self._name} type '{name}'",
                error_code=self._error_code,
                details={"type": name, "available": available},
                suggestion=f"Use one of: {', '.join(available)}",
            )
        return cls

    def list_types(self) -> list[str]:
        """Sorted list of canonical names (excludes aliases)."""
        return sorted(self._canonical)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None
