"""Diff operations for the Diffy API."""

from dataclasses import dataclass
from typing import Any, Dict

from .base_client import DiffyAPIClient
from .models import DiffRecord, SnapshotState
from .resource import ResourceHandle, require_id


@dataclass(frozen=True)
class Diff(ResourceHandle):
    """A visual comparison between two screenshot sets."""

    ENDPOINT = "diffs"
    RECORD_TYPE = DiffRecord
    TERMINAL_STATES = frozenset({SnapshotState.COMPLETED, SnapshotState.ZIPFILE})

    @property
    def diff_id(self) -> int:
        return self.resource_id

    @staticmethod
    def create(
        client: DiffyAPIClient,
        project_id: int,
        screenshot_id1: int,
        screenshot_id2: int,
    ) -> Dict[str, Any]:
        """Create a diff between two screenshot sets.

        Raises:
            InvalidArgumentsError: If any ID is empty
        """
        require_id(project_id, "Project ID")
        require_id(screenshot_id1, "Screenshot 1 ID")
        require_id(screenshot_id2, "Screenshot 2 ID")

        return client.request(
            "POST",
            f"projects/{project_id}/diffs",
            {"snapshot1": screenshot_id1, "snapshot2": screenshot_id2},
        )
