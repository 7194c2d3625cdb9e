"""Pytest shared fixtures for directory API tests."""
import os
import pathlib
import sys

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Configure test environment BEFORE any app imports
os.environ.setdefault("DEMO_MODE", "true")
os.environ.setdefault("AUDIT_LOG_ENABLED", "false")

import pytest

from directory_api.api.auth import issue_token
from directory_api.config import AppConfig
from directory_api.core.context import AuthenticatedUser, AuthenticationProvider, UserContext
from directory_api.core.directory import InMemoryDirectory, sequential_identifiers
from directory_api.core.directory_resource import (
    ConnectionDirectoryResource,
    UserDirectoryResource,
    UserGroupDirectoryResource,
)
from directory_api.core.events import ListenerService
from directory_api.core.model import Connection, DirectoryType, User, UserGroup
from directory_api.core.object_resource import DirectoryObjectResourceFactory
from directory_api.core.permissions import (
    ObjectPermissionSet,
    ObjectPermissionType,
    Permissions,
    SystemPermissionSet,
    SystemPermissionType,
)
from directory_api.core.session import Session, SessionRegistry
from directory_api.core.translators import ConnectionTranslator, UserGroupTranslator, UserTranslator
from directory_api.flask_app import create_app

TEST_SECRET_KEY = "test-secret-key-for-bearer-tokens"
PROVIDER = AuthenticationProvider("test-provider")

ATTRIBUTE_NAMES = {
    DirectoryType.USER: frozenset({"guac-full-name", "disabled"}),
    DirectoryType.USER_GROUP: frozenset({"disabled"}),
    DirectoryType.CONNECTION: frozenset({"max-connections"}),
}


# ─────────────────────────────────────────────────────────────────────────────
# Event Recording
# ─────────────────────────────────────────────────────────────────────────────
class RecordingListener:
    """Listener that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def handle_event(self, event):
        self.events.append(event)


class FailingListener:
    """Listener that raises on every event."""

    def __init__(self, error: Exception):
        self.error = error

    def handle_event(self, event):
        raise self.error


@pytest.fixture()
def recorder():
    return RecordingListener()


@pytest.fixture()
def listener_service(recorder):
    return ListenerService([recorder])


@pytest.fixture()
def failing_listeners(recorder):
    """Factory returning a ListenerService whose second listener raises ``error``."""

    def _make(error: Exception):
        return ListenerService([recorder, FailingListener(error)])

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Directories and Contexts
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def directories():
    """Fresh directories shared by every user context of a test.

    Users:
        admin: system ADMINISTER
        bob: member of "staff" (READ on connection "1"), which is itself a
            member of "everyone" (UPDATE on connection "2")
        carol: no permissions at all
    """
    users = InMemoryDirectory([
        User(
            identifier="admin",
            permissions=Permissions(
                system_permissions=SystemPermissionSet([SystemPermissionType.ADMINISTER]),
            ),
        ),
        User(identifier="bob", attributes={"guac-full-name": "Bob"}, groups={"staff"}),
        User(identifier="carol"),
    ])
    groups = InMemoryDirectory([
        UserGroup(
            identifier="staff",
            groups={"everyone"},
            permissions=Permissions(
                connection_permissions=ObjectPermissionSet({"1": [ObjectPermissionType.READ]}),
            ),
        ),
        UserGroup(
            identifier="everyone",
            permissions=Permissions(
                connection_permissions=ObjectPermissionSet({"2": [ObjectPermissionType.UPDATE]}),
            ),
        ),
    ])
    connections = InMemoryDirectory([
        Connection(identifier=None, name="web-01", protocol="ssh", parameters={"hostname": "web-01"}),
        Connection(identifier=None, name="db-01", protocol="rdp", parameters={"hostname": "db-01"}),
        Connection(identifier=None, name="backup", protocol="vnc"),
    ], identifier_factory=sequential_identifiers())

    return {
        DirectoryType.USER: users,
        DirectoryType.USER_GROUP: groups,
        DirectoryType.CONNECTION: connections,
    }


@pytest.fixture()
def make_context(directories):
    """Factory returning (AuthenticatedUser, UserContext) for a username."""

    def _make(username: str):
        user = AuthenticatedUser(username, PROVIDER)
        context = UserContext(
            authentication_provider=PROVIDER,
            self_identifier=username,
            directories=directories,
            attribute_names=ATTRIBUTE_NAMES,
        )
        return user, context

    return _make


RESOURCES = {
    DirectoryType.USER: (UserDirectoryResource, UserTranslator),
    DirectoryType.USER_GROUP: (UserGroupDirectoryResource, UserGroupTranslator),
    DirectoryType.CONNECTION: (ConnectionDirectoryResource, ConnectionTranslator),
}


@pytest.fixture()
def make_resource(make_context, listener_service):
    """Factory returning the DirectoryResource of a type for a username."""

    def _make(directory_type: DirectoryType, username: str = "admin", listeners=None):
        listeners = listeners or listener_service
        user, context = make_context(username)
        resource_class, translator_class = RESOURCES[directory_type]
        translator = translator_class()
        return resource_class(
            user,
            context,
            context.get_directory(directory_type),
            translator,
            DirectoryObjectResourceFactory(translator, listeners),
            listeners,
        )

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def app_config(tmp_path):
    return AppConfig(
        demo_mode=False,
        secret_key=TEST_SECRET_KEY,
        audit_log_enabled=False,
        audit_log_dir=tmp_path / "audit",
    )


@pytest.fixture()
def sessions(make_context):
    registry = SessionRegistry()
    for username in ("admin", "bob", "carol"):
        user, context = make_context(username)
        registry.add(Session(authenticated_user=user, user_context=context))
    return registry


@pytest.fixture()
def flask_app(app_config, sessions, listener_service):
    flask_app = create_app(cfg=app_config, sessions=sessions, listener_service=listener_service)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(flask_app):
    with flask_app.test_client() as client:
        yield client


@pytest.fixture()
def auth_headers():
    """Factory returning an Authorization header carrying a token for a username."""

    def _headers(username: str, secret_key: str = TEST_SECRET_KEY, lifetime_seconds: int = 3600) -> dict:
        return {"Authorization": f"Bearer {issue_token(username, secret_key, lifetime_seconds)}"}

    return _headers


@pytest.fixture()
def admin_headers(auth_headers):
    return auth_headers("admin")


@pytest.fixture()
def bob_headers(auth_headers):
    return auth_headers("bob")


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "critical: marks tests as critical security tests (P0 priority)"
    )
