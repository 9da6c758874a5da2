"""Cricket and authentication domain: models, repositories and use cases."""
