from fastapi import HTTPException

from ..services.errors import PlatformError


def to_http(error: PlatformError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())
