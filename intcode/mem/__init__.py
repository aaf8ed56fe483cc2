from .memory import Memory

__all__ = ["Memory"]
