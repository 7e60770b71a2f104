"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected at the normalization boundary"""

    pass


class InvalidCycleInputError(ValidationError):
    """Cycle money fields or account count are out of range"""

    pass


class InvalidCostInputError(ValidationError):
    """Cost amount, name or category is invalid"""

    pass


class MalformedDateError(ValidationError):
    """Date is neither a date, dd/mm/yyyy nor yyyy-mm-dd"""

    pass


class InvalidCommissionRateError(ValidationError):
    """Commission rate outside the 0-100 percent range"""

    pass


class UserNotFoundError(DomainException):
    """Referenced user does not exist"""

    pass


class RecordNotFoundError(DomainException):
    """Cycle or cost does not exist"""

    pass


class DuplicateUsernameError(DomainException):
    """Username already taken (case-insensitive)"""

    pass


class PermissionDeniedError(DomainException):
    """User is not allowed to act on the target record"""

    pass


class InvalidBackupError(DomainException):
    """Backup payload is malformed or contains invalid records"""

    pass


class InvalidTimeframeError(ValidationError):
    """Reporting period is not daily, weekly, monthly or all"""

    pass


class InvalidRoleError(ValidationError):
    """Role is neither admin nor operator"""

    pass
