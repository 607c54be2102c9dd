"""HTTP infrastructure."""

from ollachat.infrastructure.http.server import BridgeFactory, BridgeServer

__all__ = ["BridgeFactory", "BridgeServer"]
