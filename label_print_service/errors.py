"""
Label Print Service Errors
==========================

Exception Hierarchy:
    LabelPrintError (base)
    ├── ClientInputError        - bad request input, job aborted before printing
    │   ├── MissingFieldError
    │   ├── ImageDecodeError
    │   ├── UnknownFormatError
    │   ├── UnknownLabelError
    │   └── UnauthorizedError
    ├── ExecutionError          - driver could not print, artifact retained
    │   ├── EmptyTargetError
    │   ├── DriverSpawnError
    │   ├── DriverFailedError
    │   └── DriverTimeoutError
    ├── ProbeError              - discovery sub-command failed
    ├── StorageError            - local disk or remote store I/O
    │   ├── LocalStorageError
    │   └── RemoteStorageError
    └── CatalogError            - inconsistent label tables (startup)

Every class carries the HTTP status code the web layer answers with.
"""

from typing import Optional, Dict, Any


class LabelPrintError(Exception):
    """Base exception for all Label Print Service errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Client Input Faults (4xx)
# =============================================================================

class ClientInputError(LabelPrintError):
    """The request itself is unusable; nothing was printed."""

    status_code = 400


class MissingFieldError(ClientInputError):
    """A required form field or query parameter is absent."""

    def __init__(self, field: str):
        super().__init__(f"Missing required field '{field}'", {'field': field})
        self.field = field


class ImageDecodeError(ClientInputError):
    """Uploaded content is not an image in an accepted format."""


class UnknownFormatError(ClientInputError):
    """Image dimensions (or a format name) have no catalog entry."""


class UnknownLabelError(ClientInputError):
    """Status lookup for a label name the catalog does not know."""

    status_code = 404

    def __init__(self, label: str):
        super().__init__(f"Unknown label '{label}'", {'label': label})
        self.label = label


class UnauthorizedError(ClientInputError):
    """Missing or wrong API key."""

    status_code = 401


# =============================================================================
# Execution Faults (5xx)
# =============================================================================

class ExecutionError(LabelPrintError):
    """The print driver could not complete the job."""


class EmptyTargetError(ExecutionError):
    """A job reached the executor without a printer target."""


class DriverSpawnError(ExecutionError):
    """The driver executable could not be started."""


class DriverFailedError(ExecutionError):
    """The driver exited with a nonzero status."""

    def __init__(self, message: str, returncode: int, output: bytes = b''):
        super().__init__(message, {'returncode': returncode})
        self.returncode = returncode
        self.output = output


class DriverTimeoutError(ExecutionError):
    """The driver did not finish within the configured timeout."""

    def __init__(self, message: str, timeout: float, output: bytes = b''):
        super().__init__(message, {'timeout': timeout})
        self.timeout = timeout
        self.output = output


class ProbeError(LabelPrintError):
    """Printer discovery failed; no liveness answer is available."""


# =============================================================================
# I/O Faults (5xx)
# =============================================================================

class StorageError(LabelPrintError):
    """Reading or writing an artifact failed."""


class LocalStorageError(StorageError):
    """Local disk read/write failure."""


class RemoteStorageError(StorageError):
    """Remote object or parameter store failure."""


class CatalogError(LabelPrintError):
    """Label tables are inconsistent or unreadable."""
