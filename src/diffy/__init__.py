"""Diffy - Python client for the Diffy visual regression testing API."""

__version__ = "1.0.0"

from .api_clients import (  # noqa: E402
    DEFAULT_BASE_URL,
    DiffyAPIClient,
    DiffyError,
    InvalidArgumentsError,
    AuthenticationError,
    RequestError,
    ResponseValidationError,
    DataNotLoadedError,
    MultipartField,
    SnapshotState,
    Project,
    Screenshot,
    Diff,
)
from .config import DiffyConfig, load_config  # noqa: E402

__all__ = [
    "DEFAULT_BASE_URL",
    "DiffyAPIClient",
    "DiffyError",
    "InvalidArgumentsError",
    "AuthenticationError",
    "RequestError",
    "ResponseValidationError",
    "DataNotLoadedError",
    "MultipartField",
    "SnapshotState",
    "Project",
    "Screenshot",
    "Diff",
    "DiffyConfig",
    "load_config",
]
