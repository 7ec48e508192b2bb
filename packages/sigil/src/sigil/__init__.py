"""Contract store and agent tool server."""

__version__ = "0.1.0"

__all__ = ["__version__", "cli", "config", "contracts", "errors", "logging", "server", "session", "tools"]
