"""
Authentication endpoints and dependencies.

Email + password login issuing a JWT session.

Security features:
- Passwords hashed with passlib, never stored in plain text
- Account lockout after 5 failed attempts (30 min cooldown)
- Session JWT in an httpOnly cookie (Bearer header also accepted)
- IP address logging for audit trail
- Role-based access control via require_roles / require_admin
"""
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Header, Request, Response, Cookie
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from smartmatch.database import get_db
from smartmatch.models.user import User, UserRole, SELF_REGISTER_ROLES
from smartmatch.config import settings
from smartmatch.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    CurrentUserResponse,
)
from smartmatch.services.profile import build_user_response, build_current_user_response
from smartmatch.services.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Security constants
MAX_FAILED_ATTEMPTS = 5
ACCOUNT_LOCK_MINUTES = 30
AUTH_COOKIE = "auth_token"


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        samesite="lax",  # CSRF protection
        max_age=settings.access_token_expire_minutes * 60,
        secure=settings.cookie_secure,
    )


def _extract_token(auth_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Cookie first, then `Authorization: Bearer <token>`."""
    if auth_token:
        return auth_token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


async def _load_token_user(token: str, db: AsyncSession) -> Optional[User]:
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        return None
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


# Authentication Dependencies
async def get_current_user(
    auth_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    Args:
        auth_token: Session JWT from the httpOnly cookie
        authorization: Optional `Bearer <jwt>` header
        db: Database session

    Returns:
        User: The authenticated user

    Raises:
        HTTPException 401: If the token is missing, invalid, or the user is gone
        HTTPException 403: If the account is deactivated or locked
    """
    token = _extract_token(auth_token, authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await _load_token_user(token, db)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token. Please log in again.")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    # Check if account is locked
    if user.is_account_locked():
        raise HTTPException(
            status_code=403,
            detail=f"Account temporarily locked due to multiple failed login attempts. Try again after {user.account_locked_until.isoformat()}"
        )

    return user


async def get_optional_user(
    auth_token: Optional[str] = Cookie(None),
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Like get_current_user, but anonymous visitors get None instead of 401."""
    token = _extract_token(auth_token, authorization)
    if not token:
        return None

    user = await _load_token_user(token, db)
    if not user or not user.is_active or user.is_account_locked():
        return None
    return user


def require_roles(*roles: UserRole):
    """
    Dependency factory restricting an endpoint to the given roles.

    Example:
        @router.post("/jobs")
        async def create_job(current_user: User = Depends(require_roles(UserRole.HR))):
            ...
    """
    allowed = set(roles)

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"User {current_user.email} (role={current_user.role.value}) denied; "
                f"requires one of {sorted(r.value for r in allowed)}"
            )
            raise HTTPException(
                status_code=403,
                detail="You do not have permission to access this resource."
            )
        return current_user

    return dependency


async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency to require admin role.

    Raises:
        HTTPException 403: If user is not an admin
    """
    if not current_user.is_admin():
        logger.warning(
            f"User {current_user.email} (role={current_user.role.value}) "
            f"attempted to access admin endpoint"
        )
        raise HTTPException(
            status_code=403,
            detail="Admin access required. You do not have permission to access this resource."
        )

    return current_user


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Checks X-Forwarded-For header (for proxies/load balancers) first,
    falls back to direct client IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can be comma-separated list, take first IP
        return forwarded.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


# Endpoints
@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account and start a session.

    Returns:
        201: Account created, session cookie set
        403: Staff role requested
        409: Email already registered
    """
    if payload.role not in SELF_REGISTER_ROLES:
        logger.warning(f"Self-registration with staff role {payload.role.value} refused for {payload.email}")
        raise HTTPException(status_code=403, detail="This role cannot be self-registered")

    email = payload.email.lower()
    existing = await db.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="A user with this email already exists")

    try:
        user = User(
            email=email,
            password_hash=hash_password(payload.password),
            role=payload.role,
            last_login_at=datetime.utcnow(),
            last_login_ip=get_client_ip(request),
        )
        db.add(user)
        await db.commit()

        # Reload so the (empty) profile relationships are populated
        result = await db.execute(
            select(User).where(User.id == user.id).execution_options(populate_existing=True)
        )
        user = result.scalar_one()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error registering {email}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Registration failed. Please try again.")

    logger.info(f"Registered {user.email} as {user.role.value}")

    token = create_access_token(str(user.id), user.role.value)
    _set_auth_cookie(response, token)
    return AuthResponse(access_token=token, user=build_user_response(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate with email and password.

    Returns:
        200: Authenticated, session cookie set
        401: Unknown email or wrong password
        403: Account locked or deactivated
    """
    client_ip = get_client_ip(request)
    result = await db.execute(select(User).where(User.email == credentials.email.lower()))
    user = result.scalar_one_or_none()

    if not user:
        logger.warning(f"Login attempt for unknown email from IP: {client_ip}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if user.is_account_locked():
        logger.warning(f"Login attempt on locked account: {user.email} from IP: {client_ip}")
        raise HTTPException(
            status_code=403,
            detail=f"Account temporarily locked. Try again after {user.account_locked_until.isoformat()}"
        )

    if not verify_password(credentials.password, user.password_hash):
        user.failed_login_attempts += 1

        # Lock account after too many failed attempts
        if user.failed_login_attempts >= MAX_FAILED_ATTEMPTS:
            user.account_locked_until = datetime.utcnow() + timedelta(minutes=ACCOUNT_LOCK_MINUTES)
            logger.warning(
                f"Account locked due to {MAX_FAILED_ATTEMPTS} failed attempts: {user.email}"
            )

        await db.commit()
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        logger.warning(f"Login attempt on deactivated account: {user.email}")
        raise HTTPException(status_code=403, detail="Account is deactivated")

    user.last_login_at = datetime.utcnow()
    user.last_login_ip = client_ip
    user.failed_login_attempts = 0  # Reset failed attempts on successful login
    user.account_locked_until = None
    await db.commit()

    logger.info(f"Successful login: {user.email} from IP: {client_ip}")

    token = create_access_token(str(user.id), user.role.value)
    _set_auth_cookie(response, token)
    return AuthResponse(access_token=token, user=build_user_response(user))


@router.post("/logout")
async def logout(
    response: Response,
    current_user: User = Depends(get_current_user)
):
    """Logout user by clearing the authentication cookie."""
    response.delete_cookie(
        key=AUTH_COOKIE,
        httponly=True,
        samesite="lax"
    )

    logger.info(f"User logged out: {current_user.email}")

    return {"message": "Successfully logged out"}


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Current user with their role profile."""
    return build_current_user_response(current_user)
