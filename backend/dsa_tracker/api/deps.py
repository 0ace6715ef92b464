from typing import Iterable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from jose import JWTError, jwt

from ..database import SessionLocal
from ..config import settings
from ..schemas.user import TokenData, UserContext
from ..services.platform_service import PlatformService
from ..services.platform_links import get_platform_service

# Tokens are issued by the external identity provider; we only verify them
bearer_scheme = HTTPBearer(auto_error=False)


class AdminPolicy:
    """Allowlist of admin e-mail addresses, fixed at startup."""

    def __init__(self, emails: Iterable[str]):
        self._emails = frozenset(e.strip().lower() for e in emails if e and e.strip())

    def is_admin(self, user: UserContext) -> bool:
        return bool(user.email) and user.email.lower() in self._emails


admin_policy = AdminPolicy(settings.admin_emails)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_service() -> PlatformService:
    return get_platform_service()

def get_admin_policy() -> AdminPolicy:
    return admin_policy

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserContext:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        payload = jwt.decode(
            credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        token_data = TokenData(sub=payload.get("sub"), email=payload.get("email"))
    except JWTError:
        raise credentials_exception
    if token_data.sub is None:
        raise credentials_exception

    return UserContext(external_id=token_data.sub, email=token_data.email, name=payload.get("name"))

def get_current_admin_user(
    current_user: UserContext = Depends(get_current_user),
    policy: AdminPolicy = Depends(get_admin_policy),
) -> UserContext:
    if not policy.is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to perform this action"
        )
    return current_user
