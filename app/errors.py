class AccessError(Exception):
    """Base for everything the access layer raises."""

class InvalidArgumentError(AccessError, ValueError):
    """A caller passed a value outside a closed set (level, role, resource kind)."""

class InvalidResourceError(InvalidArgumentError):
    """Unrecognised resource discriminant.

    Raised instead of matching zero grants so a typo can neither open nor
    silently close access.
    """

class StorageUnavailableError(AccessError):
    """A read against the backing store failed.

    Must surface as a 5xx; it is never a denial.
    """

class AccessDenied(AccessError):
    """Raised by the route layer when a resolved check does not grant access.

    The message is deliberately the same for every cause.
    """

    message = "you do not have access"

    def __init__(self) -> None:
        super().__init__(self.message)
