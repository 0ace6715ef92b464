import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Platform(str, enum.Enum):
    LEETCODE = "LEETCODE"
    CODEFORCES = "CODEFORCES"
    CODECHEF = "CODECHEF"
    GEEKSFORGEEKS = "GEEKSFORGEEKS"
    HACKERRANK = "HACKERRANK"
    ATCODER = "ATCODER"


class SyncStatus(str, enum.Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class LinkedPlatform(Base):
    __tablename__ = "user_platforms"
    __table_args__ = (
        UniqueConstraint("user_id", "platform", name="uq_user_platforms_user_platform"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(32), nullable=False)

    username = Column(String(255), nullable=False)
    stats = Column(JSONType, nullable=True)
    last_sync = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="platforms")


class PlatformSync(Base):
    """Append-only audit trail of link/sync/unlink attempts."""
    __tablename__ = "platform_syncs"

    id = Column(Integer, primary_key=True, index=True)
    # Nullable: failures are logged even when the caller could not be resolved
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    platform = Column(String(32), nullable=False)

    status = Column(String(16), nullable=False)
    error_msg = Column(Text, nullable=True)
    data = Column(JSONType, nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
