# storefront/core/auth.py
import logging
from typing import Optional

from fastapi import Depends, Request
from firebase_admin import auth as fb_auth

from storefront.config import init_firebase, settings
from storefront.core.errors import AuthenticationRequiredError, ForbiddenError
from storefront.schemas.principal import Principal

logger = logging.getLogger("storefront.auth")

MOCK_TOKEN_PREFIX = "mock_jwt_token_"


def _extract_bearer_token(request: Request) -> Optional[str]:
    """
    Reads the token from an `Authorization: Bearer <id_token>` header.
    Returns None when it is missing or malformed.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _decode_mock_token(mock_token: str) -> dict:
    """
    Decodes a development token.
    Format: mock_jwt_token_<uid>, e.g. mock_jwt_token_anonymous_1234567890
    """
    uid = mock_token[len(MOCK_TOKEN_PREFIX):]
    if not uid:
        raise AuthenticationRequiredError("Invalid mock token format.")
    return {
        "uid": uid,
        "email": None,
        "name": None,
        "firebase": {
            "sign_in_provider": "anonymous" if "anonymous" in uid else "password"
        },
        "admin": False,
    }


def _decode_id_token(id_token: str) -> dict:
    """
    Verifies a Firebase ID token (revocation checked).
    Mock tokens are accepted only when DEBUG is on.
    """
    if settings.debug and id_token.startswith(MOCK_TOKEN_PREFIX):
        return _decode_mock_token(id_token)

    init_firebase()
    try:
        return fb_auth.verify_id_token(id_token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise AuthenticationRequiredError("Session expired. Please log in again.")
    except fb_auth.RevokedIdTokenError:
        raise AuthenticationRequiredError("Session revoked. Please log in again.")
    except (ValueError, fb_auth.InvalidIdTokenError, fb_auth.CertificateFetchError) as exc:
        logger.info("Rejected ID token: %s", exc)
        raise AuthenticationRequiredError("Invalid authentication token.")


def token_to_principal(decoded: dict) -> Principal:
    """
    Builds a Principal from a decoded token.
    - anonymous provider → role='guest'
    - custom claim admin=True → role='admin'
    - everything else → role='user'
    """
    uid = decoded.get("uid") or decoded.get("user_id")
    if not uid:
        raise AuthenticationRequiredError("Token missing uid.")

    provider = (decoded.get("firebase") or {}).get("sign_in_provider")
    if provider == "anonymous":
        role = "guest"
    elif decoded.get("admin") is True:
        role = "admin"
    else:
        role = "user"

    return Principal(
        uid=uid,
        role=role,
        email=decoded.get("email"),
        display_name=decoded.get("name"),
    )

# --------- FastAPI Dependencies --------- #

async def get_principal(request: Request) -> Principal:
    """Token required (guest/user/admin all accepted)."""
    token = _extract_bearer_token(request)
    if not token:
        raise AuthenticationRequiredError()
    return token_to_principal(_decode_id_token(token))


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    """Only admins pass."""
    if not principal.is_admin:
        raise ForbiddenError("Admin privilege required.")
    return principal
