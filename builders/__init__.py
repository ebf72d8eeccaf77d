"""
Builders Module
Turns Studio ObjectData trees into TargetNode trees with components
"""

from .context import ConversionContext
from .node_graph import NodeGraphBuilder, build_scene, build_prefab
from .creators import NODE_CREATORS, CreatedNode
from .components import NODE_INITIALIZERS

__all__ = [
    'ConversionContext',
    'NodeGraphBuilder',
    'build_scene',
    'build_prefab',
    'NODE_CREATORS',
    'NODE_INITIALIZERS',
    'CreatedNode',
]
