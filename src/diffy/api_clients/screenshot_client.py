"""Screenshot set operations for the Diffy API.

A screenshot set moves through NOT_STARTED, PROGRESS, COMPLETED,
COMPLETED_HOOK_EXECUTED and ZIPFILE on the server; the client only
observes the state through ``retrieve`` and ``refresh``.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from .base_client import (
    DataNotLoadedError,
    DiffyAPIClient,
    InvalidArgumentsError,
    MultipartField,
)
from .models import ScreenshotRecord, SnapshotState
from .resource import ResourceHandle, require_id

logger = logging.getLogger(__name__)

TYPES = ("production", "staging", "development", "custom", "upload")

FILE_PART_CONTENT_TYPE = "multipart/form-data"

CUSTOM_ITEM_KEYS = ("file", "url", "breakpoint")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True)
class Screenshot(ResourceHandle):
    """A captured set of screenshots for one project environment."""

    ENDPOINT = "snapshots"
    RECORD_TYPE = ScreenshotRecord
    TERMINAL_STATES = frozenset(
        {
            SnapshotState.COMPLETED,
            SnapshotState.COMPLETED_HOOK_EXECUTED,
            SnapshotState.ZIPFILE,
        }
    )
    TYPES = TYPES

    @property
    def screenshot_id(self) -> int:
        return self.resource_id

    def get_estimate(self) -> Any:
        """Return the server's completion estimate for this set.

        Raises:
            DataNotLoadedError: If the handle holds no status estimate
        """
        status = self._loaded_record().status
        if status is None or "estimate" not in status.model_fields_set:
            raise DataNotLoadedError(
                f"Screenshot {self.resource_id} has no status estimate"
            )
        return status.estimate

    @staticmethod
    def create(
        client: DiffyAPIClient, project_id: int, environment: str
    ) -> Dict[str, Any]:
        """Create a set of screenshots for an environment.

        Args:
            client: Authenticated Diffy client
            project_id: Project ID
            environment: One of production, staging, development, custom, upload

        Raises:
            InvalidArgumentsError: If the project ID is empty or the
                environment is unknown
        """
        require_id(project_id, "Project ID")
        if environment not in TYPES:
            raise InvalidArgumentsError(
                f'"{environment}" is not a valid environment. '
                f"Can be one of: {', '.join(TYPES)}"
            )

        return client.request(
            "POST",
            f"projects/{project_id}/screenshots",
            {"environment": environment},
        )

    @staticmethod
    def set_baseline_set(
        client: DiffyAPIClient, project_id: int, screenshot_id: int
    ) -> Dict[str, Any]:
        """Set a whole set of screenshots as the project's baseline."""
        require_id(project_id, "Project ID")
        require_id(screenshot_id, "Screenshot ID")
        return client.request(
            "PUT", f"projects/{project_id}/set-base-line-set/{screenshot_id}"
        )

    @staticmethod
    def create_upload(
        client: DiffyAPIClient, project_id: int, upload: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Create a set of screenshots from image files on disk.

        Args:
            client: Authenticated Diffy client
            project_id: Project ID
            upload: Mapping with "snapshotName" and equally long "files",
                "breakpoints" and "urls" lists

        Raises:
            InvalidArgumentsError: If the upload is malformed or a file
                can not be read
        """
        require_id(project_id, "Project ID")
        if not _is_sequence(upload.get("files")):
            raise InvalidArgumentsError('"files" property is missing or is not a list')
        if not upload.get("snapshotName"):
            raise InvalidArgumentsError('"snapshotName" property is missing')
        if not _is_sequence(upload.get("breakpoints")):
            raise InvalidArgumentsError(
                '"breakpoints" property is missing or is not a list'
            )
        if not _is_sequence(upload.get("urls")):
            raise InvalidArgumentsError('"urls" property is missing or is not a list')

        files: Sequence[str] = upload["files"]
        breakpoints: Sequence[Any] = upload["breakpoints"]
        urls: Sequence[str] = upload["urls"]
        if not len(files) == len(breakpoints) == len(urls):
            raise InvalidArgumentsError(
                'Number of "urls", "breakpoints" and "files" should be the same'
            )

        for filepath in files:
            if not os.path.isfile(filepath) or not os.access(filepath, os.R_OK):
                raise InvalidArgumentsError(
                    f"File {filepath} can not be found. Check file exists and readable."
                )

        parts: List[MultipartField] = [
            MultipartField("snapshotName", str(upload["snapshotName"]))
        ]
        for index, breakpoint in enumerate(breakpoints):
            parts.append(MultipartField(f"breakpoints[{index}]", str(breakpoint)))
        for index, url in enumerate(urls):
            parts.append(MultipartField(f"urls[{index}]", str(url)))
        for index, filepath in enumerate(files):
            with open(filepath, "rb") as f:
                contents = f.read()
            parts.append(
                MultipartField(
                    f"files[{index}]",
                    contents,
                    filename=os.path.basename(filepath),
                    content_type=FILE_PART_CONTENT_TYPE,
                )
            )

        logger.debug(f"Uploading {len(files)} screenshots to project {project_id}")
        return client.multipart_request(
            "POST", f"projects/{project_id}/create-custom-snapshot", parts
        )

    @staticmethod
    def create_browser_stack_screenshot(
        client: DiffyAPIClient, project_id: int, screenshots: Sequence[Any]
    ) -> Dict[str, Any]:
        """Create a screenshot set from BrowserStack screenshots."""
        require_id(project_id, "Project ID")
        if not screenshots:
            raise InvalidArgumentsError("Screenshots list can not be empty")

        return client.request(
            "POST",
            f"projects/{project_id}/create-browser-stack-screenshot",
            {"screenshots": list(screenshots)},
        )

    @staticmethod
    def create_custom_screenshot(
        client: DiffyAPIClient,
        project_id: int,
        data: Sequence[Mapping[str, Any]],
        screenshot_name: str,
    ) -> Dict[str, Any]:
        """Create a screenshot set with custom files.

        Each item of ``data`` is a mapping ``{"file": ..., "url": ...,
        "breakpoint": ...}``; files should be PNG.
        """
        require_id(project_id, "Project ID")
        if not data:
            raise InvalidArgumentsError("Data list can not be empty")

        parts: List[MultipartField] = [
            MultipartField("snapshotName", str(screenshot_name))
        ]
        for index, item in enumerate(data):
            if not isinstance(item, Mapping) or not all(
                item.get(key) for key in CUSTOM_ITEM_KEYS
            ):
                raise InvalidArgumentsError(
                    "Data list contain not valid data. Each item of list should be "
                    "a mapping with items: {'file': '', 'url': '', 'breakpoint': ''}"
                )
            contents = item["file"]
            if not isinstance(contents, bytes):
                contents = str(contents)
            parts.append(MultipartField(f"files[{index}]", contents))
            parts.append(MultipartField(f"urls[{index}]", str(item["url"])))
            parts.append(
                MultipartField(f"breakpoints[{index}]", str(item["breakpoint"]))
            )

        return client.multipart_request(
            "POST", f"projects/{project_id}/create-custom-snapshot", parts
        )
