"""Core utilities shared across fuzzysig packages."""

from fuzzysig.core.type_registry import TypeRegistry

__all__ = ["TypeRegistry"]
