"""Identity and per-user context handed to the REST resources."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from .directory import Directory
from .model import DirectoryType, User
from .permissions import Permissions


@dataclass(frozen=True)
class AuthenticationProvider:
    """The provider which authenticated a user and supplies its data."""

    identifier: str


@dataclass(frozen=True)
class AuthenticatedUser:
    """A user whose identity has already been verified."""

    identifier: str
    authentication_provider: AuthenticationProvider


@dataclass
class UserContext:
    """Everything a given user may see and manipulate within one provider.

    Attributes:
        authentication_provider: Provider supplying this context
        self_identifier: Identifier of the current user within the user directory
        directories: Directories available to the user, by type
        attribute_names: Attribute names the user may set, by directory type
    """

    authentication_provider: AuthenticationProvider
    self_identifier: str
    directories: Dict[DirectoryType, Directory] = field(default_factory=dict)
    attribute_names: Dict[DirectoryType, FrozenSet[str]] = field(default_factory=dict)

    def get_directory(self, directory_type: DirectoryType) -> Directory:
        try:
            return self.directories[directory_type]
        except KeyError:
            raise LookupError(f"No {directory_type.value} directory in this context") from None

    def get_attribute_names(self, directory_type: DirectoryType) -> FrozenSet[str]:
        return self.attribute_names.get(directory_type, frozenset())

    def self_user(self) -> Optional[User]:
        return self.get_directory(DirectoryType.USER).get(self.self_identifier)

    def effective_permissions(self) -> Permissions:
        """Return the current user's permissions, including those inherited from groups.

        Group membership is followed transitively; membership cycles are
        visited once.
        """
        user = self.self_user()
        if user is None:
            return Permissions()

        group_directory = self.directories.get(DirectoryType.USER_GROUP)
        inherited = []
        pending = list(user.groups)
        seen = set()
        while pending and group_directory is not None:
            identifier = pending.pop()
            if identifier in seen:
                continue
            seen.add(identifier)
            group = group_directory.get(identifier)
            if group is None:
                continue
            inherited.append(group.permissions)
            pending.extend(group.groups)

        return user.permissions.merged(*inherited)
