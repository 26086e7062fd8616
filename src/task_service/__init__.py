"""Task Service.

An HTTP task tracker backed by an in-memory store with tag and due-date
indexes.
"""

__version__ = "0.1.0"
