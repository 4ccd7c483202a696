"""Response shapes for the Diffy API.

Only the fields the client reads are declared; everything else the server
sends is kept as extra fields so newer responses still validate.
"""

from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnapshotState(IntEnum):
    """Processing state shared by screenshot sets and diffs."""

    # Screenshots were not started.
    NOT_STARTED = 0
    # Actively in progress.
    PROGRESS = 1
    # Completed, "completed" event (notifications, webhooks) not fired yet.
    COMPLETED = 2
    # "Completed" event fired, zipfile creation started.
    COMPLETED_HOOK_EXECUTED = 3
    # Zipfile is completed.
    ZIPFILE = 4


class _Record(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)


class TokenResponse(_Record):
    """Response of the ``auth/key`` token exchange."""

    token: Optional[str] = Field(default=None, description="Bearer token")


class ScreenshotStatus(_Record):
    estimate: Optional[Any] = Field(
        default=None, description="Server estimate for the set to complete"
    )


class ScreenshotRecord(_Record):
    """Screenshot set as returned by ``GET snapshots/{id}``."""

    state: int = Field(..., description="Processing state, see SnapshotState")
    status: Optional[ScreenshotStatus] = Field(
        default=None, description="Progress information"
    )


class DiffRecord(_Record):
    """Diff as returned by ``GET diffs/{id}``."""

    state: int = Field(..., description="Processing state, see SnapshotState")
