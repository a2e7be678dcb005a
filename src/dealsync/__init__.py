"""dealsync - deal scoring and cross-module data synchronization."""

__version__ = "0.1.0"
