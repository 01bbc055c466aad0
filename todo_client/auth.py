"""
Bearer-token inspection helpers.

The remote API's tokens are opaque to the client: it holds no key to
verify them, and the server stays the only authority on whether a token
is valid. Many deployments issue JWTs though, and when they do the
``exp`` claim is readable without a key. Reading it lets a restored
session that has plainly expired be dropped without a round trip.

Key Concepts Demonstrated:
- Unverified claim inspection with PyJWT (``verify_signature=False``)
- Clock-skew tolerance (``leeway``) when comparing expiry times
- Treating any non-JWT token as opaque rather than invalid
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import jwt


def read_unverified_claims(token: str) -> dict[str, Any] | None:
    """
    Decode a JWT's payload without checking its signature or expiry.

    Args:
        token: The raw bearer token.

    Returns:
        The claims dictionary, or ``None`` when *token* is not a JWT.
    """
    try:
        claims = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
        )
    except jwt.InvalidTokenError:
        return None
    return claims if isinstance(claims, dict) else None


def token_is_expired(token: str, leeway: int = 0, now: datetime | None = None) -> bool:
    """
    Return True only when *token* is a JWT whose ``exp`` has passed.

    Opaque tokens, and JWTs without a numeric ``exp``, are never reported
    as expired; the server decides for those.

    Args:
        token: The raw bearer token.
        leeway: Seconds of clock skew tolerated past ``exp``.
        now: Reference time, defaulting to the current UTC time.
    """
    claims = read_unverified_claims(token)
    if claims is None:
        return False

    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False

    current = now or datetime.now(timezone.utc)
    return current.timestamp() > exp + leeway
