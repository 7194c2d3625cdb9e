"""Unit tests for user contexts and effective permissions."""
import pytest

from directory_api.core.context import AuthenticationProvider, UserContext
from directory_api.core.directory import InMemoryDirectory
from directory_api.core.model import DirectoryType, User, UserGroup
from directory_api.core.permissions import (
    ObjectPermissionSet,
    ObjectPermissionType,
    Permissions,
    SystemPermissionSet,
    SystemPermissionType,
)

READ = ObjectPermissionType.READ


def _context(username, users, groups=None):
    directories = {DirectoryType.USER: InMemoryDirectory(users)}
    if groups is not None:
        directories[DirectoryType.USER_GROUP] = InMemoryDirectory(groups)
    return UserContext(
        authentication_provider=AuthenticationProvider("test-provider"),
        self_identifier=username,
        directories=directories,
    )


def _grant(identifier):
    return Permissions(connection_permissions=ObjectPermissionSet({identifier: [READ]}))


def test_missing_directory_raises_lookup_error():
    context = _context("bob", [])

    with pytest.raises(LookupError):
        context.get_directory(DirectoryType.CONNECTION)


def test_attribute_names_default_to_empty():
    assert _context("bob", []).get_attribute_names(DirectoryType.USER) == frozenset()


def test_unknown_user_has_no_permissions():
    permissions = _context("ghost", []).effective_permissions()

    assert not permissions.system_permissions.has_permission(SystemPermissionType.ADMINISTER)
    assert list(permissions.connection_permissions.items()) == []


def test_direct_permissions():
    users = [User(identifier="bob", permissions=Permissions(
        system_permissions=SystemPermissionSet([SystemPermissionType.ADMINISTER])))]

    permissions = _context("bob", users).effective_permissions()

    assert permissions.system_permissions.has_permission(SystemPermissionType.ADMINISTER)


def test_group_permissions_are_inherited_transitively():
    users = [User(identifier="bob", groups={"a"})]
    groups = [
        UserGroup(identifier="a", groups={"b"}, permissions=_grant("1")),
        UserGroup(identifier="b", groups={"c"}, permissions=_grant("2")),
        UserGroup(identifier="c", permissions=_grant("3")),
    ]

    permissions = _context("bob", users, groups).effective_permissions()

    assert permissions.connection_permissions.get_accessible_objects([READ], {"1", "2", "3", "4"}) == {"1", "2", "3"}


def test_group_cycles_terminate():
    users = [User(identifier="bob", groups={"a"})]
    groups = [
        UserGroup(identifier="a", groups={"b"}, permissions=_grant("1")),
        UserGroup(identifier="b", groups={"a", "missing"}, permissions=_grant("2")),
    ]

    permissions = _context("bob", users, groups).effective_permissions()

    assert permissions.connection_permissions.get_accessible_objects([READ], {"1", "2"}) == {"1", "2"}


def test_groups_ignored_without_group_directory():
    users = [User(identifier="bob", groups={"a"}, permissions=_grant("1"))]

    permissions = _context("bob", users).effective_permissions()

    assert permissions.connection_permissions.get_accessible_objects([READ], {"1", "2"}) == {"1"}
