from typing import Any, Dict, Optional


class PlatformError(Exception):
    """Base for caller-visible failures of the platform integration layer."""

    status_code = 500
    code = "platform_error"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.reason}


class InvalidInput(PlatformError):
    status_code = 400
    code = "invalid_input"


class UnsupportedPlatform(PlatformError):
    status_code = 400
    code = "unsupported_platform"

    def __init__(self, platform: str):
        super().__init__(f"Platform {platform} not supported")
        self.platform = platform


class LimitExceeded(PlatformError):
    status_code = 403
    code = "limit_exceeded"

    def __init__(self, current: int, limit: int):
        super().__init__(
            f"You've reached your limit of {limit} linked platforms. Upgrade to Pro for unlimited platforms."
        )
        self.current = current
        self.limit = limit

    def to_detail(self) -> Dict[str, Any]:
        detail = super().to_detail()
        detail.update({"current": self.current, "limit": self.limit, "upgradeRequired": True})
        return detail


class UsernameNotFound(PlatformError):
    status_code = 404
    code = "username_not_found"

    def __init__(self, platform: str, username: str):
        super().__init__(f"Username {username} not found on {platform} or platform not supported")
        self.platform = platform
        self.username = username


class NotLinked(PlatformError):
    status_code = 404
    code = "not_linked"

    def __init__(self, platform: str):
        super().__init__(f"Platform {platform} not linked")
        self.platform = platform


class SyncFailed(PlatformError):
    status_code = 500
    code = "sync_failed"

    def __init__(self, platform: Optional[str], reason: str = "Sync failed"):
        super().__init__(reason)
        self.platform = platform
