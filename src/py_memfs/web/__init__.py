"""Browser-facing inspection API for py-memfs.

This package provides a Flask application that exposes one in-memory
filesystem over HTTP.  It is an **optional** extra — install with::

    pip install py-memfs[web]

The ``create_app`` factory in ``app.py`` mounts a filesystem and serves
JSON endpoints for status, attributes, listings, reads, the operation
log, and arbitrary operations routed through the dispatcher.
"""
