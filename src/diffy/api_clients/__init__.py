"""API Client Abstractions for the Diffy API.

Every resource operation takes an explicit ``DiffyAPIClient``; no raw HTTP
calls live outside the base client.
"""

from .base_client import (
    DEFAULT_BASE_URL,
    DiffyAPIClient,
    DiffyError,
    InvalidArgumentsError,
    AuthenticationError,
    RequestError,
    ResponseValidationError,
    DataNotLoadedError,
    MultipartField,
)
from .models import SnapshotState, TokenResponse, ScreenshotRecord, DiffRecord
from .project_client import Project
from .screenshot_client import Screenshot
from .diff_client import Diff

__all__ = [
    # Base client
    "DEFAULT_BASE_URL",
    "DiffyAPIClient",
    "MultipartField",
    # Errors
    "DiffyError",
    "InvalidArgumentsError",
    "AuthenticationError",
    "RequestError",
    "ResponseValidationError",
    "DataNotLoadedError",
    # Response shapes
    "SnapshotState",
    "TokenResponse",
    "ScreenshotRecord",
    "DiffRecord",
    # Resources
    "Project",
    "Screenshot",
    "Diff",
]
