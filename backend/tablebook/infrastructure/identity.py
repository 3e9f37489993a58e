from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.errors import InvalidCredentialsError, StorageFailureError, UserExistsError
from ..domain.repositories import IdentityProvider
from ..models import User
from ..utils.auth import create_id_token, decode_id_token
from ..utils.passwords import hash_password, verify_password
from .repositories import storage_errors

logger = logging.getLogger(__name__)


class SqlAlchemyIdentityProvider(IdentityProvider):
    """Users stored in the ``users`` table, id tokens signed with a shared secret."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        secret: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(minutes=60),
    ) -> None:
        self.session = session
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = token_ttl

    async def create_user(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> User:
        with storage_errors("checking for existing user"):
            existing = await self.session.scalar(select(User.id).where(User.email == email))
        if existing is not None:
            raise UserExistsError("email already exists")

        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # concurrent signup with the same email
            raise UserExistsError("email already exists") from exc
        except SQLAlchemyError as exc:
            logger.error("storage failure while creating user", exc_info=exc)
            raise StorageFailureError("storage unavailable") from exc
        return user

    async def authenticate(self, *, email: str, password: str) -> str:
        with storage_errors("looking up user"):
            user = await self.session.scalar(select(User).where(User.email == email))
        if not isinstance(user, User):
            raise InvalidCredentialsError("user does not exist")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("incorrect email or password")
        return create_id_token(
            user_id=user.id,
            email=user.email,
            given_name=user.first_name,
            family_name=user.last_name,
            secret=self.secret,
            algorithm=self.algorithm,
            expires_delta=self.token_ttl,
        )

    async def verify_token(self, token: str) -> int:
        try:
            claims = decode_id_token(token, secret=self.secret, algorithms=[self.algorithm])
        except ValueError as exc:
            raise InvalidCredentialsError(str(exc)) from exc
        with storage_errors("verifying token subject"):
            exists = await self.session.scalar(select(User.id).where(User.id == claims.user_id))
        if exists is None:
            raise InvalidCredentialsError("user not found")
        return claims.user_id
