import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from .config import AUTH_COOKIE_NAME, AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

# auto_error=False so the session cookie can be used when no header is sent
security = HTTPBearer(auto_error=False)

USER_ROLES = ("planner", "vendor", "client", "admin")
PLANNER_ROLES = ("planner", "admin")
# user_metadata is writable by the user at signup, so it never grants admin
SELF_ASSIGNABLE_ROLES = ("planner", "vendor", "client")


def verify_session_token(token: str) -> dict:
    """
    Verify an auth provider session token (HS256 JWT signed with the project secret).

    Returns the decoded claims. Raises 401 on any signature, expiry or audience problem.
    """
    try:
        claims = jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        logger.warning("⚠️ Session token expired")
        raise HTTPException(status_code=401, detail="Session expired") from e
    except JWTError as e:
        logger.warning(f"❌ Session token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid session token") from e

    if not claims.get("sub"):
        logger.warning("❌ Session token missing subject")
        raise HTTPException(status_code=401, detail="Invalid session token")

    return claims


def role_from_claims(claims: dict) -> str:
    """Role lives in app_metadata (set by the backend) or user_metadata (set at signup)"""
    role = (claims.get("app_metadata") or {}).get("role")
    if role in USER_ROLES:
        return role
    role = (claims.get("user_metadata") or {}).get("role")
    if role in SELF_ASSIGNABLE_ROLES:
        return role
    return "planner"


def get_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(AUTH_COOKIE_NAME)


def get_or_create_user(db: Session, claims: dict) -> User:
    """Find the local user for a verified token, creating it on first sight"""
    auth_uid = claims["sub"]
    user = db.query(User).filter(User.auth_uid == auth_uid).first()
    if user:
        return user

    metadata = claims.get("user_metadata") or {}
    user = User(
        auth_uid=auth_uid,
        email=claims.get("email"),
        full_name=metadata.get("full_name") or metadata.get("name"),
        role=role_from_claims(claims),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"👤 Created user {user.id} with role {user.role}")
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    token = get_token(request, credentials)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    claims = verify_session_token(token)
    return get_or_create_user(db, claims)


async def get_current_planner(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role not in PLANNER_ROLES:
        logger.warning(f"🚫 User {current_user.id} with role {current_user.role} denied planner access")
        raise HTTPException(status_code=403, detail="Planner access required")
    return current_user
