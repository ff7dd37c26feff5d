from .network import connect_to_peer

__all__ = ["connect_to_peer"]
