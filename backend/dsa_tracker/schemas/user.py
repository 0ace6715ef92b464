from pydantic import BaseModel
from typing import Optional

class UserContext(BaseModel):
    """Caller identity as supplied by the external identity provider."""
    external_id: str
    email: Optional[str] = None
    name: Optional[str] = None

class TokenData(BaseModel):
    sub: Optional[str] = None
    email: Optional[str] = None
