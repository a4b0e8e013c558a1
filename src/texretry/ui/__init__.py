"""User interfaces for texretry."""
