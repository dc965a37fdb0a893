"""streamd core -- errors, logging, credentials and configuration resolution.

Architecture::

    errors.py        Structured error hierarchy (StreamdError, ConfigError, ...)
    logging.py       structlog configuration + get_logger()
    credentials.py   Built-in credentials providers
    config/          Settings binding, retrieval-mode selection, resolution
"""
