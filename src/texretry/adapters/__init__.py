"""Adapters wrapping external LaTeX tooling."""
