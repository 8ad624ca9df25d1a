"""Core configuration, constants, errors and logging."""
