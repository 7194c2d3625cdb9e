"""Internal object ↔ external (JSON) representation translations.

Each translator converts between a directory's internal object type and the
dict exchanged with REST clients, and sanitizes client-submitted dicts
before they are converted.

Usage:
    translator = UserTranslator()
    external = translator.to_external_object(user)
    translator.filter_external_object(user_context, submitted)
    user = translator.to_internal_object(submitted)
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from .context import UserContext
from .exceptions import ClientError
from .model import ROOT_CONNECTION_GROUP, Connection, DirectoryType, User, UserGroup

InternalT = TypeVar("InternalT")


def _filter_attributes(allowed: frozenset, attributes: Any) -> Dict[str, Optional[str]]:
    """Keep only the attributes whose names are in ``allowed``."""
    if not isinstance(attributes, dict):
        return {}
    return {name: value for name, value in attributes.items() if name in allowed}


def _require_string(external: Dict[str, Any], key: str) -> str:
    value = external.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ClientError(f"\"{key}\" is required and must be a non-empty string.")
    return value


def _optional_string(external: Dict[str, Any], key: str) -> Optional[str]:
    value = external.get(key)
    if value is not None and not isinstance(value, str):
        raise ClientError(f"\"{key}\" must be a string.")
    return value


def _require_mapping(external: Dict[str, Any], key: str,
                     nullable_values: bool = False) -> Dict[str, Optional[str]]:
    """Return a copy of ``external[key]``, or {} if it is absent.

    Raises:
        ClientError: If the value is not an object whose values are strings
            (or null, when ``nullable_values`` is set)
    """
    value = external.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(
        isinstance(item, str) or (nullable_values and item is None)
        for item in value.values()
    ):
        raise ClientError(f"\"{key}\" must be an object with string values.")
    return dict(value)


def _attributes(external: Dict[str, Any]) -> Dict[str, Optional[str]]:
    return _require_mapping(external, "attributes", nullable_values=True)


class DirectoryObjectTranslator(ABC, Generic[InternalT]):
    """Converts objects of one directory between internal and external form."""

    directory_type: DirectoryType

    @abstractmethod
    def to_external_object(self, obj: InternalT) -> Dict[str, Any]:
        """Convert an internal object to its external representation."""

    @abstractmethod
    def to_internal_object(self, external: Dict[str, Any]) -> InternalT:
        """Convert an external representation to a new internal object.

        Raises:
            ClientError: If the external object is missing required data
        """

    @abstractmethod
    def apply_external_changes(self, existing: InternalT, external: Dict[str, Any]) -> None:
        """Overwrite the mutable fields of ``existing`` with those of ``external``."""

    def filter_external_object(self, user_context: UserContext, external: Dict[str, Any]) -> None:
        """Remove, in place, anything the user may not set on the object.

        Only attributes declared by the user context for this directory type
        are kept.
        """
        allowed = user_context.get_attribute_names(self.directory_type)
        external["attributes"] = _filter_attributes(allowed, external.get("attributes"))


class UserTranslator(DirectoryObjectTranslator[User]):
    """Translator for users. ``password`` is write-only."""

    directory_type = DirectoryType.USER

    def to_external_object(self, obj: User) -> Dict[str, Any]:
        external = {
            "username": obj.identifier,
            "attributes": dict(obj.attributes),
        }
        if obj.last_active is not None:
            external["lastActive"] = int(obj.last_active.timestamp() * 1000)
        return external

    def to_internal_object(self, external: Dict[str, Any]) -> User:
        return User(
            identifier=_require_string(external, "username"),
            password=_optional_string(external, "password"),
            attributes=_attributes(external),
        )

    def apply_external_changes(self, existing: User, external: Dict[str, Any]) -> None:
        password = _optional_string(external, "password")
        attributes = _attributes(external)
        # Omitting the password leaves it unchanged
        if password is not None:
            existing.password = password
        existing.attributes.update(attributes)


class UserGroupTranslator(DirectoryObjectTranslator[UserGroup]):
    directory_type = DirectoryType.USER_GROUP

    def to_external_object(self, obj: UserGroup) -> Dict[str, Any]:
        return {
            "identifier": obj.identifier,
            "attributes": dict(obj.attributes),
        }

    def to_internal_object(self, external: Dict[str, Any]) -> UserGroup:
        return UserGroup(
            identifier=_require_string(external, "identifier"),
            attributes=_attributes(external),
        )

    def apply_external_changes(self, existing: UserGroup, external: Dict[str, Any]) -> None:
        existing.attributes.update(_attributes(external))


class ConnectionTranslator(DirectoryObjectTranslator[Connection]):
    """Translator for connections.

    Connection identifiers are assigned by the directory, so identifiers
    submitted by clients are stripped. ``parameters`` may contain credentials
    and is write-only.
    """

    directory_type = DirectoryType.CONNECTION

    def filter_external_object(self, user_context: UserContext, external: Dict[str, Any]) -> None:
        external.pop("identifier", None)
        super().filter_external_object(user_context, external)

    def to_external_object(self, obj: Connection) -> Dict[str, Any]:
        return {
            "identifier": obj.identifier,
            "name": obj.name,
            "parentIdentifier": obj.parent_identifier,
            "protocol": obj.protocol,
            "attributes": dict(obj.attributes),
        }

    def to_internal_object(self, external: Dict[str, Any]) -> Connection:
        return Connection(
            identifier=_optional_string(external, "identifier"),
            name=_require_string(external, "name"),
            parent_identifier=_optional_string(external, "parentIdentifier") or ROOT_CONNECTION_GROUP,
            protocol=_require_string(external, "protocol"),
            parameters=_require_mapping(external, "parameters"),
            attributes=_attributes(external),
        )

    def apply_external_changes(self, existing: Connection, external: Dict[str, Any]) -> None:
        # Validate everything before touching the existing object
        name = _require_string(external, "name")
        protocol = _require_string(external, "protocol")
        parent_identifier = _optional_string(external, "parentIdentifier") or ROOT_CONNECTION_GROUP
        attributes = _attributes(external)
        parameters = None
        if external.get("parameters") is not None:
            parameters = _require_mapping(external, "parameters")

        existing.name = name
        existing.protocol = protocol
        existing.parent_identifier = parent_identifier
        if parameters is not None:
            existing.parameters = parameters
        existing.attributes.update(attributes)
