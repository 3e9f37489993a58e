from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Sequence

import jwt
from jwt import InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str | None


def create_id_token(
    *,
    user_id: int,
    email: str,
    given_name: str,
    family_name: str,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=60))
    payload = {
        "sub": str(user_id),
        "email": email,
        "username": email,
        "given_name": given_name,
        "family_name": family_name,
        "iat": now,
        "exp": exp,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_id_token(
    token: str,
    *,
    secret: str,
    algorithms: Sequence[str],
) -> TokenClaims:
    try:
        payload = jwt.decode(token, secret, algorithms=list(algorithms))
    except InvalidTokenError as exc:  # includes ExpiredSignatureError
        raise ValueError("invalid token") from exc

    sub = payload.get("sub")
    if sub is None:
        raise ValueError("token missing sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError) as exc:
        raise ValueError("token sub is not an integer") from exc
    return TokenClaims(user_id=user_id, email=payload.get("email"))
