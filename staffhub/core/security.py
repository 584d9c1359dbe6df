"""
Security utilities for StaffHub API.
Access tokens are issued by the hosted identity service; this module only
reads them. With the project's JWT secret configured they are verified
locally, otherwise the identity service is asked (see api.deps).
"""
from typing import Any, Dict, Optional

import jwt

ALGORITHM = "HS256"
AUDIENCE = "authenticated"


def decode_access_token(token: str, secret: str, audience: str = AUDIENCE) -> Optional[dict]:
    """
    Verify and decode an access token.

    Returns:
        Decoded claims or None if invalid or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM], audience=audience)
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def role_from_metadata(user: Dict[str, Any]) -> str:
    """
    Application role from app_metadata.

    Only the service key can write app_metadata. user_metadata is editable
    by the user and never grants a role.
    """
    role = (user.get("app_metadata") or {}).get("role")
    return role or "user"


def identity_from_claims(claims: Dict[str, Any]) -> Dict[str, Any]:
    """Shape verified JWT claims like an identity-service user object."""
    return {
        "id": claims.get("sub"),
        "email": claims.get("email"),
        "app_metadata": claims.get("app_metadata") or {},
        "user_metadata": claims.get("user_metadata") or {},
    }
