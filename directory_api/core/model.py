"""Internal object types stored within directories."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Set

from .permissions import Permissions

ROOT_CONNECTION_GROUP = "ROOT"


@dataclass
class User:
    """A user account. The identifier is the username."""

    identifier: Optional[str]
    password: Optional[str] = None
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    last_active: Optional[datetime] = None
    groups: Set[str] = field(default_factory=set)
    permissions: Permissions = field(default_factory=Permissions)


@dataclass
class UserGroup:
    """A group of users. Groups may themselves be members of other groups."""

    identifier: Optional[str]
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    groups: Set[str] = field(default_factory=set)
    permissions: Permissions = field(default_factory=Permissions)


@dataclass
class Connection:
    """A remote desktop connection definition."""

    identifier: Optional[str]
    name: str = ""
    parent_identifier: str = ROOT_CONNECTION_GROUP
    protocol: str = ""
    parameters: Dict[str, str] = field(default_factory=dict)
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)


class DirectoryType(str, Enum):
    """Tag identifying the kind of objects a directory contains."""

    USER = "USER"
    USER_GROUP = "USER_GROUP"
    CONNECTION = "CONNECTION"

    @classmethod
    def of(cls, object_type: type) -> "DirectoryType":
        """Return the directory type for the given internal object class.

        Raises:
            ValueError: If the class is not stored in any known directory
        """
        for candidate, directory_type in _OBJECT_TYPES.items():
            if issubclass(object_type, candidate):
                return directory_type
        raise ValueError(f"No directory type for objects of type {object_type.__name__}")


_OBJECT_TYPES = {
    User: DirectoryType.USER,
    UserGroup: DirectoryType.USER_GROUP,
    Connection: DirectoryType.CONNECTION,
}
