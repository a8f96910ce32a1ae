"""Session token issuing and verification with python-jose."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import ExpiredSignatureError, JWTError, jwt

from blog_api.configs import settings
from blog_api.errors import InvalidTokenError
from blog_api.schemas.auth import TokenData

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user_id: UUID,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed, time-boxed access token for a user.

    Args:
        user_id: User's UUID
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": ACCESS_TOKEN_TYPE,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> TokenData:
    """
    Decode and validate an access token.

    Args:
        token: JWT token string

    Returns:
        TokenData: Decoded token data

    Raises:
        InvalidTokenError: If the signature, claims or expiry do not check out
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError as e:
        mssg = "Token has expired. Please login again."
        raise InvalidTokenError(mssg) from e
    except JWTError as e:
        raise InvalidTokenError from e

    subject: str | None = payload.get("sub")
    jti: str | None = payload.get("jti")
    token_type: str | None = payload.get("type")

    if not subject or not jti or token_type != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError

    try:
        user_id = UUID(subject)
    except ValueError as e:
        raise InvalidTokenError from e

    return TokenData(user_id=user_id, jti=jti, token_type=token_type)
