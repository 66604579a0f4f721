"""Exception classes raised while patching configuration files."""


class LimitFixerError(Exception):
    """Base exception for all limit-fixer errors."""

    pass


class MissingFileError(LimitFixerError):
    """Raised when a target configuration file does not exist."""

    def __init__(self, path, label: str = "configuration file"):
        self.path = path
        self.label = label
        super().__init__(f"{label} not found at {path}")


class BackupError(LimitFixerError):
    """Raised when a backup copy cannot be created before a mutation."""

    pass


class ServiceError(LimitFixerError):
    """Raised when an external service-management command fails."""

    pass
