"""
Todo API package.

A small REST backend for a single todo list: FastAPI routes over a
TodoService over a pluggable Repository (in-memory or SQLite).
"""

__version__ = "0.1.0"
