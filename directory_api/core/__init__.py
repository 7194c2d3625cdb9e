"""Core Directory Logic Module

This module provides the directory abstraction and the REST resource logic
layered on it, independent of HTTP frameworks.

Module Structure:
    - directory.py          : Directory interface + thread-safe in-memory store
    - model.py              : Internal object types (User, UserGroup, Connection)
    - permissions.py        : Object/system permission sets
    - context.py            : AuthenticatedUser, UserContext, effective permissions
    - translators.py        : Internal ↔ external (JSON) translations + sanitizing
    - patch.py              : JSON Patch operations
    - events.py             : Directory events, ListenerService, LoggingListener
    - audit.py              : Signed JSONL audit listener
    - directory_resource.py : Collection operations (list, patch, create, get)
    - object_resource.py    : Single-object operations (get, update, delete)
    - session.py            : Session registry
    - exceptions.py         : Error taxonomy with HTTP status codes

Usage Pattern:
    Import explicitly when needed:
        from directory_api.core.directory_resource import ConnectionDirectoryResource
        from directory_api.core.exceptions import ClientError, NotFoundError
"""
