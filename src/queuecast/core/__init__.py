"""Core catalog models, registry and rollover logic."""
