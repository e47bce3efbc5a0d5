"""
Security Service

Handles password hashing and JWT token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. JWT token generation and validation (python-jose, HS256)
3. Constant-time password verification

Usage:
    from library_api.services.security import hash_password, verify_password

    hashed = hash_password("secret")
    is_valid = verify_password("secret", hashed)

    token = create_access_token({"sub": "1", "username": "mluukkai"})
    claims = decode_token(token)  # None if expired, malformed or forged
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from library_api.config import get_settings

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# - schemes: List of hashing algorithms (bcrypt is industry standard)
# - deprecated: "auto" means old hashes are automatically upgraded
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Every call uses a fresh salt, so hashing the same password twice
    gives two different strings.

    Example:
        >>> hashed = hash_password("secret")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Returns:
        True if password matches, False otherwise (including a stored
        value that is not a recognizable hash)
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.warning(f"Unverifiable password hash: {e}")
        return False


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode, {"sub": user id, "username": ...}
        expires_delta: Optional custom expiration time; defaults to
            ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT token string (header.payload.signature)
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": datetime.now(UTC) + expires_delta})

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded claims if valid, None if invalid, expired or signed with
        another key
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None
