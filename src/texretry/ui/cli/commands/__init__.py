"""CLI command implementations."""

from __future__ import annotations

from .build import build, split_arguments


__all__ = ["build", "split_arguments"]
