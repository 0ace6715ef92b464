from . import user, platform

__all__ = ["user", "platform"]
