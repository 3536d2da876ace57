"""Problem-detail errors, operation naming, parameter parsing and response headers."""

__version__ = "0.1.0"

__all__ = ["errors", "naming", "fields", "params", "headers"]