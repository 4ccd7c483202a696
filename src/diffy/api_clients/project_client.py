"""Project operations for the Diffy API."""

from typing import Any, Dict, List, Mapping, Optional

from .base_client import DiffyAPIClient, InvalidArgumentsError
from .resource import require_id

ENVIRONMENTS = ("prod", "stage", "dev", "baseline")


class Project:
    """Operations on Diffy projects."""

    ENVIRONMENTS = ENVIRONMENTS

    @staticmethod
    def all(
        client: DiffyAPIClient, params: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Get list of all projects.

        ``params`` is accepted for forward compatibility and not sent.
        """
        return client.request("GET", "projects")

    @staticmethod
    def compare(
        client: DiffyAPIClient, project_id: int, params: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Start a comparison between two environments of a project.

        Args:
            client: Authenticated Diffy client
            project_id: Project ID
            params: Mapping with "env1" and "env2", each one of
                prod, stage, dev, baseline

        Returns:
            Comparison job descriptor from server

        Raises:
            InvalidArgumentsError: If an environment is missing or invalid
        """
        require_id(project_id, "Project ID")
        params = params or {}
        if params.get("env1") is None:
            raise InvalidArgumentsError(
                'Compare call requires "env1" as the first environment to compare.'
            )
        if params.get("env2") is None:
            raise InvalidArgumentsError(
                'Compare call requires "env2" as the second environment to compare.'
            )
        for key in ("env1", "env2"):
            if params[key] not in ENVIRONMENTS:
                raise InvalidArgumentsError(
                    f'"{key}" is not a valid environment. '
                    f"Can be one of: {', '.join(ENVIRONMENTS)}"
                )

        return client.request(
            "POST",
            f"projects/{project_id}/compare",
            {"env1": params["env1"], "env2": params["env2"]},
        )
