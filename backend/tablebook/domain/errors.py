class DomainError(Exception):
    """Base class for errors raised by usecases and repositories."""


class InvalidRequestError(DomainError):
    """Input is malformed: bad format, inverted time window, wrong type."""


class MissingFieldsError(InvalidRequestError):
    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"missing required fields: {', '.join(fields)}")


class TableNotFoundError(DomainError):
    pass


class DuplicateTableError(DomainError):
    pass


class OverlapConflictError(DomainError):
    def __init__(self, conflicting_id: str) -> None:
        self.conflicting_id = conflicting_id
        super().__init__("reservation overlaps with existing reservation")


class StorageFailureError(DomainError):
    """A collaborator (database, identity store) failed.

    The underlying exception is chained as ``__cause__``; the message is safe
    to show to clients.
    """


class UserExistsError(DomainError):
    pass


class InvalidCredentialsError(DomainError):
    pass
