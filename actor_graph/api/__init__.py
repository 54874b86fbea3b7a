"""
Public API

Modules:
    network: ActorNetwork facade
"""

from actor_graph.api.network import ActorNetwork

__all__ = ["ActorNetwork"]
