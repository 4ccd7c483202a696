"""Immutable handles over server-side resources."""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .base_client import (
    DataNotLoadedError,
    DiffyAPIClient,
    InvalidArgumentsError,
    ResponseValidationError,
)

logger = logging.getLogger(__name__)

H = TypeVar("H", bound="ResourceHandle")


def require_id(value: Any, label: str) -> None:
    """Raise InvalidArgumentsError if an identifier is missing or zero."""
    if not value:
        raise InvalidArgumentsError(f"{label} can not be empty")


@dataclass(frozen=True)
class ResourceHandle:
    """Snapshot of one resource as last fetched from the server.

    ``data`` mirrors the decoded response verbatim; ``record`` is the same
    payload validated against the resource's response shape. Handles are
    never mutated: ``refresh`` fetches a new one.
    """

    ENDPOINT: ClassVar[str] = ""
    RECORD_TYPE: ClassVar[Type[BaseModel]] = BaseModel
    TERMINAL_STATES: ClassVar[FrozenSet[int]] = frozenset()

    client: DiffyAPIClient = field(repr=False, compare=False)
    resource_id: int
    data: Dict[str, Any] = field(default_factory=dict, hash=False)
    record: Optional[BaseModel] = field(default=None, repr=False, compare=False)

    @classmethod
    def _fetch(cls: Type[H], client: DiffyAPIClient, resource_id: int) -> H:
        path = f"{cls.ENDPOINT}/{resource_id}"
        payload = client.request("GET", path)
        if not isinstance(payload, dict):
            raise ResponseValidationError(
                f"GET {path} returned {type(payload).__name__}, expected an object"
            )
        try:
            record = cls.RECORD_TYPE.model_validate(payload)
        except ValidationError as e:
            raise ResponseValidationError(
                f"GET {path} returned an invalid record: {e}"
            ) from e
        logger.debug(f"{cls.__name__} {resource_id} state: {payload.get('state')}")
        return cls(client=client, resource_id=resource_id, data=payload, record=record)

    @classmethod
    def retrieve(cls: Type[H], client: DiffyAPIClient, resource_id: int) -> H:
        """Load full info on a resource."""
        require_id(resource_id, f"{cls.__name__} ID")
        return cls._fetch(client, resource_id)

    def refresh(self: H) -> H:
        """Fetch the latest state of this resource as a new handle."""
        return self._fetch(self.client, self.resource_id)

    def _loaded_record(self) -> Any:
        if self.record is None:
            raise DataNotLoadedError(
                f"{type(self).__name__} {self.resource_id} has no data, "
                "call refresh() first"
            )
        return self.record

    @property
    def state(self) -> int:
        return self._loaded_record().state

    def is_completed(self) -> bool:
        """Check if the resource reached one of its terminal states."""
        return self.state in self.TERMINAL_STATES
