"""In-memory table store with a system catalog, relationships, plain-text persistence and a sample database."""

__version__ = "0.1.0"
__all__ = ["catalog", "demo"]