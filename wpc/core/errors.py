"""wpclone error taxonomy"""


class CloneError(Exception):
    """Base exception for a failed clone phase.

    ``message`` is safe to show to the caller. ``detail`` carries tool
    diagnostics (stderr, driver errors) and only goes to the log.
    """

    def __init__(self, message, detail=None, outcome=None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.outcome = outcome

    def __str__(self):
        return self.message


class ValidationError(CloneError):
    """Request rejected before any mutation"""
    pass


class MissingFieldError(ValidationError):
    """A field required by the clone type is absent"""

    def __init__(self, field):
        super().__init__(f"Required field '{field}' is missing")
        self.field = field


class InvalidNameError(ValidationError):
    """Database identifier failed the naming rules"""
    pass


class FilesystemError(CloneError):
    """Target directory creation or file copy failed"""
    pass


class DatabaseError(CloneError):
    """Database existence check, dump, create or restore failed"""
    pass


class ProvisioningError(CloneError):
    """Post-copy WordPress configuration failed"""
    pass
