from .server import ChatListener

__all__ = ["ChatListener"]
