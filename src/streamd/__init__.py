"""
streamd - configuration resolution for the stream-processing client daemon.

- streamd.core.config: settings binding and resolution
- streamd.core.errors: structured error hierarchy
- streamd.core.credentials: built-in credentials providers
"""

__version__ = "0.1.0"
