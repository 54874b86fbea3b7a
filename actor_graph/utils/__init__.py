"""
Utility Functions

Modules:
    names: Name normalization, title stripping and field splitting
"""

from actor_graph.utils.names import name_key, normalize_name, split_names, strip_titles

__all__ = ["name_key", "normalize_name", "split_names", "strip_titles"]
