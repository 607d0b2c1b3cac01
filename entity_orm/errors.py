import typing


class OrmError(Exception):
    def __init__(self, message: str, details: typing.Optional[typing.Dict[str, typing.Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(OrmError):
    """Entity type lacks required schema declarations."""


class UnsupportedTypeError(ConfigurationError):
    """No column type is known for a field's semantic type."""


class StatementError(OrmError):
    """The store rejected a statement."""


class HydrationError(OrmError):
    """A result row cannot populate an entity instance."""


class DuplicateError(OrmError):
    pass


class NotFoundError(OrmError):
    pass
