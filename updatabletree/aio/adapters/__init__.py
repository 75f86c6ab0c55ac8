"""Concrete node types for updatable trees."""

from .nodes import LeafNode, StaticNode, QueryNode

__all__ = [
    'LeafNode',
    'StaticNode',
    'QueryNode',
]
