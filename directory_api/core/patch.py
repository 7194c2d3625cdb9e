"""JSON Patch (RFC 6902) operations as submitted to collection resources."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from .exceptions import ClientError, UnsupportedOperationError


class PatchOperation(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


@dataclass(frozen=True)
class APIPatch:
    """A single patch operation: ``{"op": ..., "path": ..., "value": ...}``."""

    op: PatchOperation
    path: str
    value: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "APIPatch":
        """Parse a patch from its JSON representation.

        Raises:
            ClientError: If the patch is not an object or lacks a string path
            UnsupportedOperationError: If the op is not a JSON Patch operation
        """
        if not isinstance(data, dict):
            raise ClientError("Each patch must be a JSON object.")

        op = data.get("op")
        try:
            operation = PatchOperation(op)
        except ValueError:
            raise UnsupportedOperationError(f"Unsupported patch operation: \"{op}\"") from None

        path = data.get("path")
        if not isinstance(path, str):
            raise ClientError("Each patch must have a string \"path\".")

        return cls(op=operation, path=path, value=data.get("value"))


def parse_patches(data: Any) -> List[APIPatch]:
    """Parse a request body into a list of patches.

    Raises:
        ClientError: If the body is not a JSON array of patch objects
    """
    if not isinstance(data, list):
        raise ClientError("Patches must be submitted as a JSON array.")
    return [APIPatch.from_dict(item) for item in data]
