"""Directory API Flask Application Package.

To use the Flask app:
    from directory_api.flask_app import app

To use directories and resources without Flask:
    from directory_api.core.directory import InMemoryDirectory
    from directory_api.core.directory_resource import UserDirectoryResource
"""
# Note: We don't import flask_app by default so that core can be used
# without loading settings from the environment
