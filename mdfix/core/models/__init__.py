"""
Domain models — Pydantic types for mdfix.

    from mdfix.core.models import FixerConfig
"""

from mdfix.core.models.config import DEFAULT_ROOTS, FixerConfig

__all__ = [
    "DEFAULT_ROOTS",
    "FixerConfig",
]
