from datetime import timedelta
from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings, get_settings
from .database import async_session
from .domain.errors import InvalidCredentialsError, StorageFailureError
from .infrastructure.identity import SqlAlchemyIdentityProvider


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def build_identity_provider(session: AsyncSession, settings: Settings) -> SqlAlchemyIdentityProvider:
    return SqlAlchemyIdentityProvider(
        session,
        secret=settings.auth_secret,
        algorithm=settings.auth_algorithm,
        token_ttl=timedelta(minutes=settings.token_ttl_minutes),
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> int:
    if authorization is None:
        raise _unauthorized("Authorization header required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Missing or invalid Authorization header")

    identity = build_identity_provider(session, get_settings())
    try:
        return await identity.verify_token(token.strip())
    except InvalidCredentialsError as exc:
        raise _unauthorized("Invalid or expired token") from exc
    except StorageFailureError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage unavailable") from exc
    finally:
        # end the lookup transaction so handlers can open their own with session.begin()
        await session.rollback()
