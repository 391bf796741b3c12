"""Configuration helpers for generation business rules."""

from .rules import GenerationRules

__all__ = [
    "GenerationRules",
]
