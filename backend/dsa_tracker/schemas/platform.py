from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime

# For POST /platforms/verify and /platforms/link
class PlatformUsernameRequest(BaseModel):
    platform: str
    username: str

# For POST /platforms/sync and /platforms/unlink
class PlatformRequest(BaseModel):
    platform: str

class LinkedPlatform(BaseModel):
    id: int
    user_id: int
    platform: str
    username: str
    stats: Optional[Dict[str, Any]] = None
    last_sync: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class LinkResponse(BaseModel):
    success: bool = True
    is_new_link: bool
    data: LinkedPlatform
    message: str

class SyncResponse(BaseModel):
    platform: str
    success: bool
    stats: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

class PlatformLimits(BaseModel):
    maxPlatforms: int
    platformsLinked: int
    platformsRemaining: int
    canLinkPlatform: bool
    subscriptionType: str

class SyncLogEntry(BaseModel):
    id: int
    user_id: Optional[int] = None
    platform: str
    status: str
    error_msg: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class SyncAllResponse(BaseModel):
    results: List[SyncResponse]
