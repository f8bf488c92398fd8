"""
Security utilities for JWT authentication and password hashing
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union, Any
from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError
from joserfc.jwk import OctKey
from joserfc.jwt import JWTClaimsRegistry
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
import structlog

from taskhub.core.exceptions import UnauthorizedError
from taskhub.core.simple_config import settings

logger = structlog.get_logger()

# Password hashing context
pwd_context = PasswordHash((BcryptHasher(rounds=settings.BCRYPT_ROUNDS),))

# JWT Configuration
ALGORITHM = settings.JWT_ALGORITHM
SECRET_KEY = settings.JWT_SECRET_KEY
ACCESS_TOKEN_EXPIRE_MINUTES = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

# joserfc key object (reusable)
_jwt_key = OctKey.import_key(SECRET_KEY)

_claims_registry = JWTClaimsRegistry(
    sub={"essential": True},
    exp={"essential": True},
)


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[dict] = None
) -> str:
    """
    Create JWT access token

    Args:
        subject: Token subject (the user ID)
        expires_delta: Custom expiration time
        additional_claims: Additional claims to include in token

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "exp": int(expire.timestamp()),
        "sub": str(subject),
        "type": "access",
        "iat": int(now.timestamp()),
    }

    if additional_claims:
        to_encode.update(additional_claims)

    encoded_jwt = jose_jwt.encode({"alg": ALGORITHM}, to_encode, _jwt_key)

    logger.debug("Access token created", subject=str(subject), expires=expire.isoformat())
    return encoded_jwt


def verify_token(token: str, token_type: str = "access") -> str:
    """
    Verify JWT signature, expiry and type

    Returns:
        Token subject

    Raises:
        UnauthorizedError: If the token is invalid, expired or of the wrong type
    """
    try:
        token_obj = jose_jwt.decode(token, _jwt_key, algorithms=[ALGORITHM])
        _claims_registry.validate(token_obj.claims)
    except (JoseError, ValueError) as exc:
        logger.warning("JWT verification failed", error=str(exc))
        raise UnauthorizedError("Token invalid or expired")

    payload = token_obj.claims
    if payload.get("type") != token_type:
        logger.warning("Invalid token type", expected=token_type, actual=payload.get("type"))
        raise UnauthorizedError("Token invalid or expired")

    return str(payload["sub"])


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a password against its hash

    Accounts without a local password (external identity) never match.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error("Password verification error", error=str(e))
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password
    """
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        password = password_bytes[:72].decode("utf-8", errors="ignore")
        logger.warning("Password truncated to 72 bytes for bcrypt")

    return pwd_context.hash(password)

