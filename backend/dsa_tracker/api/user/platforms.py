from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from ... import schemas
from ...schemas.user import UserContext
from ...services import platform_links
from ...services.errors import PlatformError
from ...services.platform_service import PlatformService
from ...services.subscription import get_platform_limits
from ..deps import get_db, get_current_user, get_service
from ..errors import to_http

router = APIRouter()

@router.post("/platforms/verify")
async def verify_platform_endpoint(
    request: schemas.platform.PlatformUsernameRequest,
    current_user: UserContext = Depends(get_current_user),
    service: PlatformService = Depends(get_service),
):
    """
    Check that a username exists on a platform without linking it.
    """
    try:
        stats = await platform_links.verify_username(request.platform, request.username, service)
    except PlatformError as e:
        raise to_http(e)
    return {"success": True, "verified": True, "data": stats.to_record()}


@router.post("/platforms/link", response_model=schemas.platform.LinkResponse)
async def link_platform_endpoint(
    request: schemas.platform.PlatformUsernameRequest,
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user),
    service: PlatformService = Depends(get_service),
):
    """
    Link a platform account, or update the username of an existing link.
    """
    try:
        link, is_new = await platform_links.link_platform(
            db, request.platform, request.username, current_user, service
        )
    except PlatformError as e:
        raise to_http(e)
    return {
        "is_new_link": is_new,
        "data": schemas.platform.LinkedPlatform.model_validate(link),
        "message": f"Successfully linked {link.platform} account",
    }


@router.post("/platforms/sync", response_model=schemas.platform.SyncResponse)
async def sync_platform_endpoint(
    request: schemas.platform.PlatformRequest,
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user),
    service: PlatformService = Depends(get_service),
):
    """
    Refresh stats for a linked platform using the stored username.
    """
    try:
        result = await platform_links.sync_platform(db, request.platform, current_user, service)
    except PlatformError as e:
        raise to_http(e)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "sync_failed", "message": result.error},
        )
    return vars(result)


@router.post("/platforms/sync-all", response_model=schemas.platform.SyncAllResponse)
async def sync_all_platforms_endpoint(
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user),
    service: PlatformService = Depends(get_service),
):
    """
    Refresh every linked platform; the outcome is reported per platform.
    """
    results = await platform_links.sync_all_platforms(db, current_user, service)
    return {"results": [vars(r) for r in results]}


@router.post("/platforms/unlink")
async def unlink_platform_endpoint(
    request: schemas.platform.PlatformRequest,
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user),
):
    try:
        platform_links.unlink_platform(db, request.platform, current_user)
    except PlatformError as e:
        raise to_http(e)
    return {"success": True, "message": f"Successfully unlinked {request.platform} account"}


@router.get("/platforms", response_model=List[schemas.platform.LinkedPlatform])
async def list_platforms_endpoint(
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user),
):
    return platform_links.list_linked_platforms(db, current_user)


@router.get("/platforms/limits", response_model=schemas.platform.PlatformLimits)
async def platform_limits_endpoint(
    db: Session = Depends(get_db),
    current_user: UserContext = Depends(get_current_user),
):
    user = platform_links.ensure_user(db, current_user)
    return get_platform_limits(user)
