"""In-memory demo data set used when DEMO_MODE=true.

Two users share one set of directories:
    - guacadmin: holds the system ADMINISTER permission
    - alice: member of "operators", which may READ connection "1"
"""
from __future__ import annotations
from typing import Dict

from directory_api.core.context import AuthenticatedUser, AuthenticationProvider, UserContext
from directory_api.core.directory import InMemoryDirectory, sequential_identifiers
from directory_api.core.model import Connection, DirectoryType, User, UserGroup
from directory_api.core.permissions import (
    ObjectPermissionSet,
    ObjectPermissionType,
    Permissions,
    SystemPermissionSet,
    SystemPermissionType,
)
from directory_api.core.session import Session, SessionRegistry

DEMO_PROVIDER = AuthenticationProvider("default")
DEMO_ADMIN = "guacadmin"
DEMO_USER = "alice"

USER_ATTRIBUTES = frozenset({
    "disabled", "expired", "guac-full-name", "guac-email-address", "guac-organization",
})
USER_GROUP_ATTRIBUTES = frozenset({"disabled"})
CONNECTION_ATTRIBUTES = frozenset({"max-connections", "max-connections-per-user", "weight"})


def build_demo_directories() -> Dict[DirectoryType, InMemoryDirectory]:
    users = InMemoryDirectory([
        User(
            identifier=DEMO_ADMIN,
            attributes={"guac-full-name": "Administrator"},
            permissions=Permissions(
                system_permissions=SystemPermissionSet([SystemPermissionType.ADMINISTER]),
            ),
        ),
        User(
            identifier=DEMO_USER,
            attributes={"guac-full-name": "Alice"},
            groups={"operators"},
        ),
    ])
    groups = InMemoryDirectory([
        UserGroup(
            identifier="operators",
            permissions=Permissions(
                connection_permissions=ObjectPermissionSet({"1": [ObjectPermissionType.READ]}),
            ),
        ),
    ])
    connections = InMemoryDirectory([
        Connection(identifier=None, name="web-01", protocol="ssh",
                   parameters={"hostname": "web-01.internal", "port": "22"}),
        Connection(identifier=None, name="db-01", protocol="rdp",
                   parameters={"hostname": "db-01.internal", "port": "3389"}),
    ], identifier_factory=sequential_identifiers())

    return {
        DirectoryType.USER: users,
        DirectoryType.USER_GROUP: groups,
        DirectoryType.CONNECTION: connections,
    }


def build_demo_sessions() -> SessionRegistry:
    """Register demo sessions for the admin and the regular user."""
    directories = build_demo_directories()
    attribute_names = {
        DirectoryType.USER: USER_ATTRIBUTES,
        DirectoryType.USER_GROUP: USER_GROUP_ATTRIBUTES,
        DirectoryType.CONNECTION: CONNECTION_ATTRIBUTES,
    }

    registry = SessionRegistry()
    for username in (DEMO_ADMIN, DEMO_USER):
        registry.add(Session(
            authenticated_user=AuthenticatedUser(username, DEMO_PROVIDER),
            user_context=UserContext(
                authentication_provider=DEMO_PROVIDER,
                self_identifier=username,
                directories=directories,
                attribute_names=attribute_names,
            ),
        ))
    return registry
