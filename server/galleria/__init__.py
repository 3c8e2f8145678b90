"""galleria: shared multi-user galleries with posts, comments and a trash."""

__version__ = "0.1.0"
