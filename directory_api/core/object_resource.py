"""Resources exposing operations on a single object within a directory."""
from __future__ import annotations
from typing import Any, Dict, Generic, Optional, TypeVar

from .context import AuthenticatedUser, UserContext
from .directory import Directory
from .events import DirectoryEventSource, DirectoryOperation, ListenerService
from .exceptions import ClientError
from .model import DirectoryType
from .translators import DirectoryObjectTranslator

InternalT = TypeVar("InternalT")


class DirectoryObjectResource(DirectoryEventSource, Generic[InternalT]):
    """Fetch, update and delete one object of a directory."""

    def __init__(self, authenticated_user: AuthenticatedUser, user_context: UserContext,
                 directory: Directory[InternalT], obj: InternalT,
                 translator: DirectoryObjectTranslator[InternalT],
                 listener_service: ListenerService):
        super().__init__(authenticated_user, user_context,
                         DirectoryType.of(type(obj)), listener_service)
        self.directory = directory
        self.object = obj
        self.translator = translator

    @property
    def identifier(self) -> Optional[str]:
        return self.object.identifier

    def get_object(self) -> Dict[str, Any]:
        """Return the external representation of the object."""
        return self.translator.to_external_object(self.object)

    def update_object(self, modified: Optional[Dict[str, Any]]) -> None:
        """Apply the given external representation to the object.

        Raises:
            ClientError: If no data was submitted
        """
        if modified is None:
            raise ClientError("Data must be submitted when updating objects.")
        if not isinstance(modified, dict):
            raise ClientError("Objects must be submitted as a JSON object.")

        self.translator.filter_external_object(self.user_context, modified)

        try:
            self.translator.apply_external_changes(self.object, modified)
            self.directory.update(self.object)
            self.fire_directory_success_event(DirectoryOperation.UPDATE, self.identifier, self.object)
        except Exception as exc:
            self.fire_directory_failure_event(DirectoryOperation.UPDATE, self.identifier, self.object, exc)
            raise

    def delete_object(self) -> None:
        """Remove the object from its directory."""
        try:
            self.directory.remove(self.identifier)
            self.fire_directory_success_event(DirectoryOperation.REMOVE, self.identifier, None)
        except Exception as exc:
            self.fire_directory_failure_event(DirectoryOperation.REMOVE, self.identifier, None, exc)
            raise


class DirectoryObjectResourceFactory(Generic[InternalT]):
    """Creates DirectoryObjectResources sharing one translator and listener service."""

    def __init__(self, translator: DirectoryObjectTranslator[InternalT],
                 listener_service: ListenerService):
        self.translator = translator
        self.listener_service = listener_service

    def create(self, authenticated_user: AuthenticatedUser, user_context: UserContext,
               directory: Directory[InternalT], obj: InternalT) -> DirectoryObjectResource[InternalT]:
        return DirectoryObjectResource(
            authenticated_user, user_context, directory, obj,
            self.translator, self.listener_service,
        )
