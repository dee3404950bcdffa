"""Read Git objects from packfiles and pack indexes, and encode and decode tags."""

__version__ = "2.0.0"