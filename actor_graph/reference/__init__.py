"""
Reference Catalog

Curated entities consulted before any external classification lookup.

Modules:
    index: ReferenceIndex multi-key lookup, reference graph and profiles
"""

from actor_graph.reference.index import REFERENCE_ACTION, ReferenceIndex, infer_category

__all__ = ["REFERENCE_ACTION", "ReferenceIndex", "infer_category"]
