"""Core data model, configuration and the build-retry loop."""
