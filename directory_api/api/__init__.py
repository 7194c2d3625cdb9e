"""HTTP layer: Flask blueprints, bearer token handling and error handlers."""
