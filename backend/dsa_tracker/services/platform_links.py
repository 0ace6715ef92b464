"""
Link, sync and unlink of a user's external platform accounts.

Every attempt leaves one append-only ``PlatformSync`` row behind. Link and
unlink touch the link row, the user's ``platforms_linked`` counter and the sync
log in a single commit so the counter never disagrees with the rows.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.platform import LinkedPlatform, Platform, PlatformSync, SyncStatus
from ..models.user import User
from ..schemas.stats import PlatformStatistics
from ..schemas.user import UserContext
from .errors import InvalidInput, NotLinked, PlatformError, SyncFailed, UsernameNotFound
from .platform_service import PlatformService
from .subscription import check_platform_limit

logger = logging.getLogger(__name__)

NO_DATA_ERROR = "No data returned from platform"
SCRAPE_FAILED_ERROR = "Profile scrape failed; kept last known stats"

SUPPORTED_PLATFORMS = {p.value for p in Platform}

_default_service: Optional[PlatformService] = None


@dataclass
class SyncResult:
    platform: str
    success: bool
    stats: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def get_platform_service() -> PlatformService:
    global _default_service
    if _default_service is None:
        _default_service = PlatformService()
    return _default_service


def _now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_platform(platform: Optional[str]) -> str:
    if not platform or not isinstance(platform, str) or not platform.strip():
        raise InvalidInput("Platform is required")
    value = platform.strip().upper()
    if value not in SUPPORTED_PLATFORMS:
        raise InvalidInput(f"Unknown platform: {platform}")
    return value


def _require_username(username: Optional[str]) -> str:
    if not username or not isinstance(username, str) or not username.strip():
        raise InvalidInput("Username is required")
    return username.strip()


def find_user(db: Session, user_ctx: UserContext) -> Optional[User]:
    return db.query(User).filter(User.external_id == user_ctx.external_id).first()


def ensure_user(db: Session, user_ctx: UserContext) -> User:
    user = find_user(db, user_ctx)
    if user:
        return user

    user = User(external_id=user_ctx.external_id, email=user_ctx.email, name=user_ctx.name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Created by a concurrent request
        db.rollback()
        return find_user(db, user_ctx)
    db.refresh(user)
    logger.info("New user synced to database: %s", user_ctx.external_id)
    return user


def find_link(db: Session, user_id: int, platform: str) -> Optional[LinkedPlatform]:
    return db.query(LinkedPlatform).filter(
        LinkedPlatform.user_id == user_id,
        LinkedPlatform.platform == platform,
    ).first()


def _sync_log(
    user_id: Optional[int],
    platform: str,
    status: SyncStatus,
    data: Dict[str, Any],
    error_msg: Optional[str] = None,
) -> PlatformSync:
    return PlatformSync(
        user_id=user_id,
        platform=platform,
        status=status.value,
        error_msg=error_msg,
        data=data,
    )


def _adjust_platform_count(user: User, delta: int) -> None:
    user.platforms_linked = max(0, (user.platforms_linked or 0) + delta)


async def _fetch(service: Optional[PlatformService], platform: str, username: str) -> Optional[PlatformStatistics]:
    service = service or get_platform_service()
    return await service.fetch_user_data(platform.lower(), username)


async def verify_username(
    platform: str, username: str, service: Optional[PlatformService] = None
) -> PlatformStatistics:
    """Check that ``username`` exists on ``platform`` without persisting anything."""
    platform = normalize_platform(platform)
    username = _require_username(username)
    stats = await _fetch(service, platform, username)
    if stats is None or stats.scrape_failed:
        raise UsernameNotFound(platform, username)
    return stats


async def link_platform(
    db: Session,
    platform: str,
    username: str,
    user_ctx: UserContext,
    service: Optional[PlatformService] = None,
) -> Tuple[LinkedPlatform, bool]:
    platform = normalize_platform(platform)
    username = _require_username(username)

    user = ensure_user(db, user_ctx)
    link = find_link(db, user.id, platform)
    is_new = link is None

    if is_new:
        check_platform_limit(user)

    stats = await _fetch(service, platform, username)
    if stats is None or stats.scrape_failed:
        logger.info("Link rejected: %s not found on %s", username, platform)
        raise UsernameNotFound(platform, username)

    now = _now()
    record = stats.to_record()
    record.update({"lastUpdated": now.isoformat(), "platform": platform})

    def _log(action: str) -> PlatformSync:
        return _sync_log(user.id, platform, SyncStatus.SUCCESS, {
            "action": action,
            "timestamp": now.isoformat(),
            "username": username,
            "totalSolved": stats.total_solved,
        })

    try:
        if is_new:
            link = LinkedPlatform(
                user_id=user.id,
                platform=platform,
                username=username,
                stats=record,
                last_sync=now,
                is_active=True,
            )
            db.add(link)
            db.flush()
            _adjust_platform_count(user, +1)
        else:
            _apply_link_update(link, username, record, now)
        db.add(_log("link" if is_new else "update"))
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent first link: update the row that won
        db.rollback()
        link = find_link(db, user.id, platform)
        if link is None:
            raise
        is_new = False
        _apply_link_update(link, username, record, now)
        db.add(_log("update"))
        db.commit()

    db.refresh(link)
    logger.info("%s %s account %s for user %s", "Linked" if is_new else "Updated", platform, username, user.id)
    return link, is_new


def _apply_link_update(link: LinkedPlatform, username: str, record: Dict[str, Any], now: datetime) -> None:
    link.username = username
    link.stats = record
    link.last_sync = now
    link.is_active = True


def _record_sync(db: Session, user: User, link: LinkedPlatform, stats: Optional[PlatformStatistics]) -> SyncResult:
    now = _now()

    if stats is None or stats.scrape_failed:
        error_msg = NO_DATA_ERROR if stats is None else SCRAPE_FAILED_ERROR
        db.add(_sync_log(user.id, link.platform, SyncStatus.FAILED, {
            "action": "sync",
            "error": error_msg,
            "attemptedAt": now.isoformat(),
            "platform": link.platform,
            "username": link.username,
        }, error_msg=error_msg))
        db.commit()
        logger.warning("Sync of %s for user %s failed: %s", link.platform, user.id, error_msg)
        return SyncResult(platform=link.platform, success=False, error=error_msg)

    previous = link.last_sync.isoformat() if link.last_sync else None
    record = stats.to_record()
    record.update({"syncedAt": now.isoformat(), "previousSync": previous, "syncType": "manual"})

    link.stats = record
    link.last_sync = now
    db.add(_sync_log(user.id, link.platform, SyncStatus.SUCCESS, {
        "action": "sync",
        "timestamp": now.isoformat(),
        "username": link.username,
        "totalSolved": stats.total_solved,
    }))
    db.commit()
    logger.info("Synced %s for user %s", link.platform, user.id)
    return SyncResult(platform=link.platform, success=True, stats=record)


def _log_unexpected_failure(
    db: Session, user_id: Optional[int], platform: str, user_ctx: UserContext, error: BaseException
) -> None:
    try:
        db.add(_sync_log(user_id, platform, SyncStatus.FAILED, {
            "error": str(error),
            "errorType": type(error).__name__,
            "timestamp": _now().isoformat(),
            "externalId": user_ctx.external_id,
        }, error_msg=str(error) or type(error).__name__))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to log sync error for %s", platform)


async def sync_platform(
    db: Session,
    platform: str,
    user_ctx: UserContext,
    service: Optional[PlatformService] = None,
) -> SyncResult:
    """
    Re-fetch stats for an already linked platform using the stored username.

    A ``None`` from the platform is a failed-but-recorded sync, not an error.
    Anything unexpected is logged as a FAILED entry and raised as ``SyncFailed``.
    """
    platform_key = platform
    user_id: Optional[int] = None
    try:
        platform_key = normalize_platform(platform)
        user = find_user(db, user_ctx)
        link = find_link(db, user.id, platform_key) if user else None
        if link is None:
            raise NotLinked(platform_key)
        user_id = user.id

        stats = await _fetch(service, platform_key, link.username)
        return _record_sync(db, user, link, stats)
    except PlatformError:
        raise
    except Exception as e:
        logger.exception("Platform sync error for %s", platform_key)
        db.rollback()
        _log_unexpected_failure(db, user_id, platform_key or "UNKNOWN", user_ctx, e)
        raise SyncFailed(platform_key) from e


async def sync_all_platforms(
    db: Session,
    user_ctx: UserContext,
    service: Optional[PlatformService] = None,
) -> List[SyncResult]:
    user = find_user(db, user_ctx)
    if user is None:
        return []
    links = db.query(LinkedPlatform).filter(LinkedPlatform.user_id == user.id).order_by(LinkedPlatform.platform).all()
    if not links:
        return []

    fetched = await asyncio.gather(
        *(_fetch(service, link.platform, link.username) for link in links),
        return_exceptions=True,
    )

    results: List[SyncResult] = []
    for link, outcome in zip(links, fetched):
        platform = link.platform
        try:
            if isinstance(outcome, BaseException):
                raise outcome
            results.append(_record_sync(db, user, link, outcome))
        except Exception as e:
            logger.exception("Sync-all failed for %s", platform)
            db.rollback()
            _log_unexpected_failure(db, user.id, platform, user_ctx, e)
            results.append(SyncResult(platform=platform, success=False, error="Sync failed"))
    return results


def unlink_platform(db: Session, platform: str, user_ctx: UserContext) -> str:
    """Delete the link; returns the username that was unlinked."""
    platform = normalize_platform(platform)
    user = find_user(db, user_ctx)
    link = find_link(db, user.id, platform) if user else None
    if link is None:
        raise NotLinked(platform)

    username = link.username
    snapshot = {
        "action": "unlink",
        "timestamp": _now().isoformat(),
        "username": username,
        "stats": link.stats,
    }
    try:
        db.delete(link)
        db.flush()
        _adjust_platform_count(user, -1)
        db.add(_sync_log(user.id, platform, SyncStatus.SUCCESS, snapshot))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Unlink of %s for user %s rolled back", platform, user.id)
        raise

    logger.info("Unlinked %s account %s for user %s", platform, username, user.id)
    return username


def list_linked_platforms(db: Session, user_ctx: UserContext) -> List[LinkedPlatform]:
    user = find_user(db, user_ctx)
    if user is None:
        return []
    return db.query(LinkedPlatform).filter(LinkedPlatform.user_id == user.id).order_by(LinkedPlatform.platform).all()
