"""Collection-level operations shared by every directory.

A DirectoryResource exposes listing, creation and patch-based removal for the
objects of one Directory, and hands out DirectoryObjectResources for
individual objects. It is framework-independent: the Flask blueprint in
``directory_api.api.directories`` maps HTTP requests onto it.

Usage:
    resource = ConnectionDirectoryResource(
        authenticated_user, user_context, directory,
        ConnectionTranslator(), DirectoryObjectResourceFactory(translator, listeners),
        listeners,
    )
    visible = resource.get_objects([ObjectPermissionType.READ])
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from .context import AuthenticatedUser, UserContext
from .directory import Directory
from .events import DirectoryEventSource, DirectoryOperation, ListenerService
from .exceptions import ClientError, NotFoundError, UnsupportedOperationError
from .model import Connection, DirectoryType, User, UserGroup
from .object_resource import DirectoryObjectResource, DirectoryObjectResourceFactory
from .patch import APIPatch, PatchOperation
from .permissions import ObjectPermissionSet, ObjectPermissionType, Permissions, SystemPermissionType
from .translators import DirectoryObjectTranslator

InternalT = TypeVar("InternalT")

logger = logging.getLogger(__name__)


class DirectoryResource(DirectoryEventSource, ABC, Generic[InternalT]):
    """Operations available on all directories.

    Subclasses fix the internal object type and select which object
    permission set governs visibility of that type.

    Args:
        authenticated_user: User accessing this resource
        user_context: Context providing the directory
        directory: Directory exposed by this resource
        translator: Translator for the directory's objects
        resource_factory: Factory for per-object child resources
        listener_service: Sink for directory events
    """

    object_type: type

    def __init__(self, authenticated_user: AuthenticatedUser, user_context: UserContext,
                 directory: Directory[InternalT],
                 translator: DirectoryObjectTranslator[InternalT],
                 resource_factory: DirectoryObjectResourceFactory[InternalT],
                 listener_service: ListenerService):
        super().__init__(authenticated_user, user_context,
                         DirectoryType.of(self.object_type), listener_service)
        self.directory = directory
        self.translator = translator
        self.resource_factory = resource_factory

    @abstractmethod
    def get_object_permissions(self, permissions: Permissions) -> ObjectPermissionSet:
        """Return the permission set governing objects of this directory."""

    def get_objects(
        self, permissions: Optional[Iterable[ObjectPermissionType]] = None
    ) -> Dict[str, Dict[str, Any]]:
        """Return all visible objects keyed by identifier.

        Args:
            permissions: If given and non-empty, only objects on which the user
                holds at least one of these permissions are returned. Ignored
                for administrators.

        Returns:
            Mapping of identifier to external object
        """
        effective = self.user_context.effective_permissions()
        is_admin = effective.system_permissions.has_permission(SystemPermissionType.ADMINISTER)

        identifiers = self.directory.get_identifiers()
        permissions = list(permissions or [])
        if not is_admin and permissions:
            object_permissions = self.get_object_permissions(effective)
            identifiers = object_permissions.get_accessible_objects(permissions, identifiers)

        objects = self.directory.get_all(identifiers)
        logger.debug("Listing %d %s objects for \"%s\"", len(objects),
                     self.directory_type.value, self.authenticated_user.identifier)
        return {obj.identifier: self.translator.to_external_object(obj) for obj in objects}

    def patch_objects(self, patches: List[APIPatch]) -> None:
        """Apply the given patches in order. Only "remove" is supported.

        The path of each patch is "/ID", where ID is the identifier of the
        object to remove. Every patch is validated before the first removal.
        Removal stops at the first failure; earlier removals remain applied.

        Raises:
            UnsupportedOperationError: If any patch is not a "remove"
            ClientError: If any patch path does not start with "/"
        """
        identifiers = []
        for patch in patches:
            if patch.op is not PatchOperation.REMOVE:
                raise UnsupportedOperationError(
                    f"Only the \"remove\" operation is supported (got \"{patch.op.value}\").")
            if not patch.path.startswith("/"):
                raise ClientError("Patch paths must start with \"/\".")
            identifiers.append(patch.path[1:])

        for identifier in identifiers:
            try:
                self.directory.remove(identifier)
                self.fire_directory_success_event(DirectoryOperation.REMOVE, identifier, None)
            except Exception as exc:
                self.fire_directory_failure_event(DirectoryOperation.REMOVE, identifier, None, exc)
                raise

    def create_object(self, external: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Create a new object within the directory.

        Returns:
            External representation of the created object, with its
            identifier populated

        Raises:
            ClientError: If no data was submitted
        """
        if external is None:
            raise ClientError("Data must be submitted when creating objects.")
        if not isinstance(external, dict):
            raise ClientError("Objects must be submitted as a JSON object.")

        self.translator.filter_external_object(self.user_context, external)
        internal = self.translator.to_internal_object(external)

        try:
            self.directory.add(internal)
            self.fire_directory_success_event(DirectoryOperation.ADD, internal.identifier, internal)
        except Exception as exc:
            self.fire_directory_failure_event(DirectoryOperation.ADD, internal.identifier, internal, exc)
            raise

        return self.translator.to_external_object(internal)

    def get_object_resource(self, identifier: str) -> DirectoryObjectResource[InternalT]:
        """Return a resource exposing the object having the given identifier.

        Raises:
            NotFoundError: If no such object exists
        """
        try:
            obj = self.directory.get(identifier)
            if obj is None:
                raise NotFoundError(f"Not found: \"{identifier}\"")
        except Exception as exc:
            self.fire_directory_failure_event(DirectoryOperation.GET, identifier, None, exc)
            raise

        resource = self.resource_factory.create(
            self.authenticated_user, self.user_context, self.directory, obj)
        self.fire_directory_success_event(DirectoryOperation.GET, identifier, obj)
        return resource


class UserDirectoryResource(DirectoryResource[User]):
    object_type = User

    def get_object_permissions(self, permissions: Permissions) -> ObjectPermissionSet:
        return permissions.user_permissions


class UserGroupDirectoryResource(DirectoryResource[UserGroup]):
    object_type = UserGroup

    def get_object_permissions(self, permissions: Permissions) -> ObjectPermissionSet:
        return permissions.user_group_permissions


class ConnectionDirectoryResource(DirectoryResource[Connection]):
    object_type = Connection

    def get_object_permissions(self, permissions: Permissions) -> ObjectPermissionSet:
        return permissions.connection_permissions
