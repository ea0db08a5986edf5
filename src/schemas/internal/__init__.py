"""Internal schema definitions."""

from .graph import (  # noqa: F401
    DEFAULT_SEPARATOR,
    GraphMetadata,
    InputStyle,
    OutputStyle,
    TokenCounts,
)

__all__ = [
    "DEFAULT_SEPARATOR",
    "GraphMetadata",
    "InputStyle",
    "OutputStyle",
    "TokenCounts",
]
