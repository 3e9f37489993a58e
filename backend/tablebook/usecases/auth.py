import re

from ..domain.errors import InvalidRequestError, MissingFieldsError
from ..domain.repositories import IdentityProvider
from ..models import User

EMAIL_PATTERN = re.compile(r"^[\w.%+-]+@[\w.-]+\.[a-zA-Z]{2,}$")
# at least 12 chars from letters, digits and $%^*-_, with one of each kind
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[$%^*\-_])[A-Za-z\d$%^*\-_]{12,}$")


async def sign_up(
    identity: IdentityProvider,
    *,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
) -> User:
    missing = [
        name
        for name, value in (
            ("firstName", first_name),
            ("lastName", last_name),
            ("email", email),
            ("password", password),
        )
        if not value
    ]
    if missing:
        raise MissingFieldsError(missing)
    if not EMAIL_PATTERN.fullmatch(email):
        raise InvalidRequestError("Invalid email format.")
    if not PASSWORD_PATTERN.fullmatch(password):
        raise InvalidRequestError("Invalid password format.")
    return await identity.create_user(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
    )


async def sign_in(identity: IdentityProvider, *, email: str, password: str) -> str:
    if not email or not password:
        raise MissingFieldsError([name for name, value in (("email", email), ("password", password)) if not value])
    return await identity.authenticate(email=email, password=password)
