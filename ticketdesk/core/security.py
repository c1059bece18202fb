from jose import JWTError, jwt

from ticketdesk.config import settings
from ticketdesk.core.exceptions import UnauthorizedException
from ticketdesk.models.principal import Principal


def decode_jwt(token: str, secret_key: str | None = None) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    Args:
        token: JWT access token from Authorization header
        secret_key: Override for the signing key (defaults to settings)

    Returns:
        Decoded token payload with 'sub', 'email', 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, secret_key or settings.SECRET_KEY, algorithms=["HS256"])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # Validate expiration (jose checks this automatically)
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing user identifier")

    if not payload.get("email"):
        raise UnauthorizedException("Token missing email claim")

    return payload


def principal_from_token(token: str, secret_key: str | None = None) -> Principal:
    """Build the authenticated Principal from a bearer token"""
    payload = decode_jwt(token, secret_key)
    return Principal(
        id=payload["sub"],
        email=payload["email"].strip().lower(),
        name=payload.get("name"),
    )
