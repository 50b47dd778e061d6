"""
Session Tokens

Signed JWT bearer tokens carrying an authenticated Session across HTTP
requests. The subject is the account id; the owner id rides along so
owner-scoped operations need no extra lookup.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from .auth import Session
from .config import BankConfig, get_config
from .errors import NotAuthenticatedError


def issue_token(session: Session, config: Optional[BankConfig] = None) -> str:
    """Sign a bearer token for an authenticated session"""
    config = config or get_config()
    payload = {
        "sub": str(session.account_id),
        "owner_id": session.owner_id,
        "iat": session.authenticated_at,
        "exp": session.authenticated_at + timedelta(hours=config.jwt_expiry_hours),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_token(token: str, config: Optional[BankConfig] = None) -> Session:
    """
    Verify a bearer token and rebuild its Session.

    Raises:
        NotAuthenticatedError: If the token is expired, tampered with or malformed
    """
    config = config or get_config()
    try:
        payload = jwt.decode(
            token, config.jwt_secret, algorithms=[config.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]}
        )
        return Session(
            account_id=int(payload["sub"]),
            owner_id=int(payload["owner_id"]),
            authenticated_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
        )
    except jwt.ExpiredSignatureError:
        raise NotAuthenticatedError("Token expired") from None
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        raise NotAuthenticatedError("Invalid token") from None
