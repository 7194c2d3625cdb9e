"""Unit tests for internal/external object translation."""
import datetime

import pytest

from directory_api.core.context import AuthenticationProvider, UserContext
from directory_api.core.exceptions import ClientError
from directory_api.core.model import Connection, DirectoryType, User, UserGroup
from directory_api.core.translators import ConnectionTranslator, UserGroupTranslator, UserTranslator


@pytest.fixture()
def context():
    return UserContext(
        authentication_provider=AuthenticationProvider("test-provider"),
        self_identifier="admin",
        attribute_names={
            DirectoryType.USER: frozenset({"guac-full-name"}),
            DirectoryType.CONNECTION: frozenset({"max-connections"}),
        },
    )


# ─────────────────────────────────────────────────────────────────────────────
# Users
# ─────────────────────────────────────────────────────────────────────────────

def test_user_to_external_omits_password():
    user = User(identifier="bob", password="secret", attributes={"guac-full-name": "Bob"})

    assert UserTranslator().to_external_object(user) == {
        "username": "bob",
        "attributes": {"guac-full-name": "Bob"},
    }


def test_user_last_active_in_milliseconds():
    active = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
    user = User(identifier="bob", last_active=active)

    external = UserTranslator().to_external_object(user)

    assert external["lastActive"] == 1704067200000


def test_user_to_internal_requires_username():
    with pytest.raises(ClientError, match="username"):
        UserTranslator().to_internal_object({"username": "   "})


def test_user_to_internal():
    user = UserTranslator().to_internal_object({
        "username": "dave", "password": "pw", "attributes": {"guac-full-name": "Dave"},
    })

    assert user.identifier == "dave"
    assert user.password == "pw"
    assert user.attributes == {"guac-full-name": "Dave"}


def test_filter_keeps_only_declared_attributes(context):
    external = {"username": "dave", "attributes": {"guac-full-name": "Dave", "evil": "1"}}

    UserTranslator().filter_external_object(context, external)

    assert external["attributes"] == {"guac-full-name": "Dave"}


def test_filter_replaces_malformed_attributes(context):
    external = {"username": "dave", "attributes": "not-a-dict"}

    UserTranslator().filter_external_object(context, external)

    assert external["attributes"] == {}


def test_filter_with_no_declared_attributes_drops_all(context):
    external = {"identifier": "staff", "attributes": {"disabled": "true"}}

    UserGroupTranslator().filter_external_object(context, external)

    assert external["attributes"] == {}


def test_apply_user_changes_sets_password_only_if_given():
    user = User(identifier="bob", password="old", attributes={"a": "1"})
    translator = UserTranslator()

    translator.apply_external_changes(user, {"attributes": {"b": "2"}})
    assert user.password == "old"
    assert user.attributes == {"a": "1", "b": "2"}

    translator.apply_external_changes(user, {"password": "new"})
    assert user.password == "new"


# ─────────────────────────────────────────────────────────────────────────────
# User groups
# ─────────────────────────────────────────────────────────────────────────────

def test_user_group_round_trip():
    translator = UserGroupTranslator()
    group = UserGroup(identifier="staff", attributes={"disabled": "false"})

    external = translator.to_external_object(group)

    assert external == {"identifier": "staff", "attributes": {"disabled": "false"}}
    assert translator.to_internal_object(external).identifier == "staff"


def test_user_group_requires_identifier():
    with pytest.raises(ClientError, match="identifier"):
        UserGroupTranslator().to_internal_object({})


# ─────────────────────────────────────────────────────────────────────────────
# Connections
# ─────────────────────────────────────────────────────────────────────────────

def test_connection_filter_strips_identifier(context):
    external = {"identifier": "42", "name": "x", "protocol": "ssh"}

    ConnectionTranslator().filter_external_object(context, external)

    assert "identifier" not in external
    assert ConnectionTranslator().to_internal_object(external).identifier is None


def test_connection_round_trip_keeps_identifier():
    translator = ConnectionTranslator()
    connection = Connection(identifier="7", name="db", protocol="rdp",
                            parameters={"password": "hidden"})

    external = translator.to_external_object(connection)

    assert "parameters" not in external
    internal = translator.to_internal_object(external)
    assert internal.identifier == "7"
    assert internal.parent_identifier == "ROOT"


@pytest.mark.parametrize("missing", ["name", "protocol"])
def test_connection_requires_name_and_protocol(missing):
    external = {"name": "db", "protocol": "rdp"}
    del external[missing]

    with pytest.raises(ClientError, match=missing):
        ConnectionTranslator().to_internal_object(external)


def test_apply_connection_changes_replaces_parameters_only_if_given():
    connection = Connection(identifier="7", name="db", protocol="rdp", parameters={"port": "3389"})
    translator = ConnectionTranslator()

    translator.apply_external_changes(connection, {"name": "db2", "protocol": "rdp"})
    assert connection.name == "db2"
    assert connection.parameters == {"port": "3389"}

    translator.apply_external_changes(connection, {
        "name": "db2", "protocol": "vnc", "parameters": {"port": "5900"}, "parentIdentifier": "group-1",
    })
    assert connection.protocol == "vnc"
    assert connection.parameters == {"port": "5900"}
    assert connection.parent_identifier == "group-1"


@pytest.mark.parametrize("parameters", ["oops", [1, 2], {"port": 22}, {"port": None}])
def test_connection_parameters_must_map_to_strings(parameters):
    with pytest.raises(ClientError, match="parameters"):
        ConnectionTranslator().to_internal_object({"name": "db", "protocol": "rdp", "parameters": parameters})


def test_rejected_connection_update_leaves_object_unchanged():
    connection = Connection(identifier="7", name="db", protocol="rdp", parameters={"port": "3389"})

    with pytest.raises(ClientError, match="parameters"):
        ConnectionTranslator().apply_external_changes(connection, {
            "name": "renamed", "protocol": "vnc", "parameters": [1, 2],
        })

    assert connection.name == "db"
    assert connection.protocol == "rdp"
    assert connection.parameters == {"port": "3389"}


def test_connection_parent_identifier_must_be_string():
    with pytest.raises(ClientError, match="parentIdentifier"):
        ConnectionTranslator().to_internal_object({"name": "db", "protocol": "rdp", "parentIdentifier": 5})


def test_attribute_values_must_be_strings_or_null():
    translator = UserTranslator()

    user = translator.to_internal_object({"username": "dave", "attributes": {"guac-email-address": None}})
    assert user.attributes == {"guac-email-address": None}

    with pytest.raises(ClientError, match="attributes"):
        translator.to_internal_object({"username": "dave", "attributes": {"guac-full-name": 42}})
    with pytest.raises(ClientError, match="attributes"):
        UserGroupTranslator().apply_external_changes(UserGroup(identifier="staff"), {"attributes": ["x"]})


def test_password_must_be_string():
    with pytest.raises(ClientError, match="password"):
        UserTranslator().to_internal_object({"username": "dave", "password": 1234})
