"""Object and system permission sets."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Set


class ObjectPermissionType(str, Enum):
    """Permissions which may be granted on an individual object."""

    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ADMINISTER = "ADMINISTER"

    @classmethod
    def _missing_(cls, value):
        # "WRITE" is accepted as a name for UPDATE
        if value == "WRITE":
            return cls.UPDATE
        return None


class SystemPermissionType(str, Enum):
    """Permissions which apply to the system as a whole."""

    CREATE_CONNECTION = "CREATE_CONNECTION"
    CREATE_USER = "CREATE_USER"
    CREATE_USER_GROUP = "CREATE_USER_GROUP"
    AUDIT = "AUDIT"
    ADMINISTER = "ADMINISTER"


class ObjectPermissionSet:
    """Permissions granted on objects, keyed by object identifier."""

    def __init__(self, permissions: Dict[str, Iterable[ObjectPermissionType]] | None = None):
        self._permissions: Dict[str, Set[ObjectPermissionType]] = {}
        for identifier, types in (permissions or {}).items():
            for permission_type in types:
                self.add_permission(permission_type, identifier)

    def add_permission(self, permission_type: ObjectPermissionType, identifier: str) -> None:
        self._permissions.setdefault(identifier, set()).add(ObjectPermissionType(permission_type))

    def has_permission(self, permission_type: ObjectPermissionType, identifier: str) -> bool:
        return ObjectPermissionType(permission_type) in self._permissions.get(identifier, set())

    def get_accessible_objects(
        self,
        permission_types: Iterable[ObjectPermissionType],
        identifiers: Iterable[str],
    ) -> Set[str]:
        """Return the identifiers on which at least one of the given permissions is held.

        Args:
            permission_types: Permissions to check for
            identifiers: Candidate object identifiers

        Returns:
            Subset of identifiers accessible with any of the given permissions
        """
        wanted = {ObjectPermissionType(t) for t in permission_types}
        return {
            identifier for identifier in identifiers
            if wanted & self._permissions.get(identifier, set())
        }

    def items(self):
        return self._permissions.items()

    def merged(self, *others: "ObjectPermissionSet") -> "ObjectPermissionSet":
        result = ObjectPermissionSet()
        for permission_set in (self, *others):
            for identifier, types in permission_set.items():
                for permission_type in types:
                    result.add_permission(permission_type, identifier)
        return result


class SystemPermissionSet:
    """System-level permissions held by a user or group."""

    def __init__(self, permissions: Iterable[SystemPermissionType] = ()):
        self._permissions: Set[SystemPermissionType] = {SystemPermissionType(p) for p in permissions}

    def has_permission(self, permission_type: SystemPermissionType) -> bool:
        return SystemPermissionType(permission_type) in self._permissions

    def add_permission(self, permission_type: SystemPermissionType) -> None:
        self._permissions.add(SystemPermissionType(permission_type))

    def __iter__(self):
        return iter(self._permissions)

    def merged(self, *others: "SystemPermissionSet") -> "SystemPermissionSet":
        result = SystemPermissionSet(self)
        for other in others:
            for permission_type in other:
                result.add_permission(permission_type)
        return result


@dataclass
class Permissions:
    """Container for all permission sets held by a user or group."""

    system_permissions: SystemPermissionSet = field(default_factory=SystemPermissionSet)
    connection_permissions: ObjectPermissionSet = field(default_factory=ObjectPermissionSet)
    user_permissions: ObjectPermissionSet = field(default_factory=ObjectPermissionSet)
    user_group_permissions: ObjectPermissionSet = field(default_factory=ObjectPermissionSet)

    def merged(self, *others: "Permissions") -> "Permissions":
        """Return the union of these permissions and the given ones."""
        return Permissions(
            system_permissions=self.system_permissions.merged(
                *(o.system_permissions for o in others)),
            connection_permissions=self.connection_permissions.merged(
                *(o.connection_permissions for o in others)),
            user_permissions=self.user_permissions.merged(
                *(o.user_permissions for o in others)),
            user_group_permissions=self.user_group_permissions.merged(
                *(o.user_group_permissions for o in others)),
        )
