"""
Configuration System

Configuration Priority (highest to lowest):
    1. Programmatic (passed to GraphConfig())
    2. Environment variables (ACTOR_GRAPH_* prefix)
    3. Built-in defaults

A TOML file can be loaded explicitly with GraphConfig.from_file().
"""

from actor_graph.config.settings import GraphConfig

__all__ = ["GraphConfig"]
