class TgoError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to the persisted cache record ---
class ConfigError(TgoError):
    """Base class for errors encountered while reading or parsing the cache record."""

    pass


class ConfigParsingError(ConfigError):
    """Raised when the cache record is not valid YAML or not a mapping."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when the cache record fails structural validation (Pydantic)."""

    pass


# --- 2. Errors related to IO operations ---
class TgoIOError(TgoError):
    """Base class for IO-related errors. ``path`` names the offending path, if known."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class TgoPathNotFoundError(TgoIOError):
    """Raised when a file or directory is not found."""

    pass


class TgoPathExistsError(TgoIOError):
    """Raised when a file or directory already exists."""

    pass


class ProcessStartError(TgoIOError):
    """Raised when a command cannot be started at all."""

    pass


# --- 3. Errors related to the toolchain boundary ---
class EnumerationError(TgoError):
    """Raised when the toolchain fails to report its environment or dependency directories."""

    pass


# --- 4. Errors related to launched processes ---
class ExternalProcessError(TgoError):
    """Raised when a child process exits nonzero."""

    def __init__(self, command, exit_code: int):
        super().__init__(f"Error running {command}: exit status {exit_code}")
        self.command = command
        self.exit_code = exit_code


# --- 5. Errors related to cache teardown ---
class ScopeViolationError(TgoError):
    """Raised when a clean request targets a path outside the cache directory."""

    pass
