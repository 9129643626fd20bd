"""Domain errors for the ERPNext installer."""

from typing import Optional, Sequence


class InstallerError(RuntimeError):
    """Raised when the installation cannot continue safely."""


class ConfigurationError(InstallerError):
    """Missing, invalid or mismatched input."""


class PrivilegeError(InstallerError):
    """The installer runs under the wrong identity."""


class UnsupportedPlatformError(InstallerError):
    """Operating system or runtime version floor not met."""


class ExternalCommandError(InstallerError):
    """A delegated command exited with a non-zero status."""

    def __init__(self, message: str, command: Optional[Sequence[str]] = None, returncode: Optional[int] = None):
        super().__init__(message)
        self.command = list(command or [])
        self.returncode = returncode
