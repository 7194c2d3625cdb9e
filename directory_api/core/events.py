"""Directory events and the service dispatching them to listeners."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Protocol

from .context import AuthenticatedUser, AuthenticationProvider
from .model import DirectoryType

logger = logging.getLogger(__name__)


class DirectoryOperation(str, Enum):
    """Operations reported through directory events."""

    ADD = "ADD"
    GET = "GET"
    UPDATE = "UPDATE"
    REMOVE = "REMOVE"


@dataclass(frozen=True)
class DirectoryEvent:
    """Outcome of an operation against an object within a directory.

    Attributes:
        directory_type: Type of directory affected
        operation: Operation that was attempted
        identifier: Identifier of the affected object, if known
        object: The affected object, if available, including any changes
            that were to be applied
        authenticated_user: User that performed the operation
        authentication_provider: Provider of the directory
        failure: Exception that caused the operation to fail, or None on success
    """

    directory_type: DirectoryType
    operation: DirectoryOperation
    identifier: Optional[str]
    object: Any
    authenticated_user: AuthenticatedUser
    authentication_provider: AuthenticationProvider
    failure: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


class Listener(Protocol):
    def handle_event(self, event: DirectoryEvent) -> None:
        ...


class ListenerService:
    """Dispatches events to every registered listener, in registration order.

    Exceptions raised by a listener are not caught; they abort dispatch and
    propagate to whoever fired the event.
    """

    def __init__(self, listeners: Optional[List[Listener]] = None):
        self._listeners: List[Listener] = list(listeners or [])

    def register(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def listeners(self) -> List[Listener]:
        return list(self._listeners)

    def handle_event(self, event: DirectoryEvent) -> None:
        for listener in self._listeners:
            listener.handle_event(event)


class LoggingListener:
    """Writes a log line for every directory event."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def handle_event(self, event: DirectoryEvent) -> None:
        if event.succeeded:
            self.log.info(
                "%s %s \"%s\" by \"%s\" succeeded",
                event.operation.value, event.directory_type.value,
                event.identifier, event.authenticated_user.identifier,
            )
        else:
            self.log.warning(
                "%s %s \"%s\" by \"%s\" failed: %s",
                event.operation.value, event.directory_type.value,
                event.identifier, event.authenticated_user.identifier,
                event.failure,
            )


class DirectoryEventSource:
    """Base for resources which report directory operations to listeners."""

    def __init__(self, authenticated_user: AuthenticatedUser, user_context,
                 directory_type: DirectoryType, listener_service: ListenerService):
        self.authenticated_user = authenticated_user
        self.user_context = user_context
        self.directory_type = directory_type
        self.listener_service = listener_service

    def fire_directory_success_event(self, operation: DirectoryOperation,
                                     identifier: Optional[str], obj: Any) -> None:
        """Notify listeners that ``operation`` succeeded against the given object.

        Raises:
            Exception: Whatever a listener raises from its event handler
        """
        self.listener_service.handle_event(DirectoryEvent(
            directory_type=self.directory_type,
            operation=operation,
            identifier=identifier,
            object=obj,
            authenticated_user=self.authenticated_user,
            authentication_provider=self.user_context.authentication_provider,
        ))

    def fire_directory_failure_event(self, operation: DirectoryOperation,
                                     identifier: Optional[str], obj: Any,
                                     failure: BaseException) -> None:
        """Notify listeners that ``operation`` failed with ``failure``.

        ``obj`` is the object that would have been affected, including any
        changes that were to be applied, or None if not available.
        """
        self.listener_service.handle_event(DirectoryEvent(
            directory_type=self.directory_type,
            operation=operation,
            identifier=identifier,
            object=obj,
            authenticated_user=self.authenticated_user,
            authentication_provider=self.user_context.authentication_provider,
            failure=failure,
        ))
