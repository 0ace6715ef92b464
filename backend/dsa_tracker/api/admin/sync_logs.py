from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ... import models, schemas
from ...schemas.user import UserContext
from ..deps import get_db, get_current_admin_user

router = APIRouter()

@router.get("/sync-logs", response_model=List[schemas.platform.SyncLogEntry])
async def get_sync_logs_endpoint(
    user_id: Optional[int] = None,
    platform: Optional[str] = None,
    n: int = Query(50, gt=0, le=500),
    db: Session = Depends(get_db),
    admin_user: UserContext = Depends(get_current_admin_user),
):
    """
    Admin-only: most recent link/sync/unlink attempts, newest first.
    """
    PlatformSync = models.platform.PlatformSync
    query = db.query(PlatformSync)
    if user_id is not None:
        query = query.filter(PlatformSync.user_id == user_id)
    if platform:
        query = query.filter(PlatformSync.platform == platform.upper())
    return query.order_by(PlatformSync.id.desc()).limit(n).all()
