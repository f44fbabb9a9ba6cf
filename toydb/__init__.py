"""An in-memory SQL database with B+ tree primary-key indexing and a shell."""

__version__ = "0.1.0"