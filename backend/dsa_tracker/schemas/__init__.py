from . import stats, platform, user

__all__ = ["stats", "platform", "user"]
