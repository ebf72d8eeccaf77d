#!/usr/bin/env python3
"""
Node Graph Module
Depth-first construction of the target node tree from a Studio ObjectData tree.

For every Studio node:
1. create it (NODE_CREATORS, or an empty node),
2. record its ActionTag against its animation path,
3. apply base properties, visibility, touch blocking, the docking widget and
   the type-specific initializer (NODE_INITIALIZERS),
4. build the children in document order and re-convert their positions
   against the node they were finally attached to.
"""

from core.scene_data import BlockInputEvents, Camera, Canvas, TargetNode

from .base_properties import apply_position_conversion, init_base_properties, sanitize_node_name
from .components import NODE_INITIALIZERS
from .creators import NODE_CREATORS, CreatedNode, create_default_node
from .widget import derive_widget

# Types that are plain containers; no component and no diagnostic
STRUCTURAL_TYPES = {
    'GameNodeObjectData',
    'GameLayerObjectData',
    'SingleNodeObjectData',
    'LayerObjectData',
    'ProjectNodeObjectData',
    'ScrollViewObjectData',
}

# Creators that already applied base properties to the node they return
PRE_INITIALIZED_TYPES = {'ScrollViewObjectData'}


def join_node_path(parent_path, name):
    if parent_path:
        return f"{parent_path}/{name}"
    return name


class NodeGraphBuilder:
    """Builds TargetNode trees for one document

    Args:
        ctx: ConversionContext of the document being converted
    """

    def __init__(self, ctx):
        self.ctx = ctx

    def build(self, data, root=None, parent_path=''):
        """Build the subtree rooted at `data`

        Args:
            data: SourceNode (an ObjectData / AbstractNodeData element)
            root: Existing node to initialize instead of creating one
                  (the document root); its ActionTag is not recorded
            parent_path: Animation path of the parent

        Returns:
            TargetNode: The node to attach to the parent
        """
        if root is None:
            created = self.create_node(data)
            node_path = join_node_path(parent_path, sanitize_node_name(data.name))
            self.record_action_tag(data, node_path, created.node)
        else:
            created = CreatedNode(root)
            node_path = parent_path

        self.init_node(created.node, data)
        child_path = node_path
        if created.child_parent is not created.node:
            # children of a scroll view live under its content node
            child_path = join_node_path(node_path, created.child_parent.name)
        self.build_children(data, created.child_parent, child_path)
        return created.node

    def create_node(self, data):
        creator = NODE_CREATORS.get(data.ctype, create_default_node)
        return creator(data, self.ctx)

    def record_action_tag(self, data, node_path, node):
        tag = data.get('ActionTag', '')
        if tag:
            self.ctx.action_tags.record(tag, node_path, node)

    def init_node(self, node, data):
        node_type = data.ctype
        diagnostics = self.ctx.diagnostics

        if node_type not in PRE_INITIALIZED_TYPES:
            init_base_properties(node, data, diagnostics)

        node.active = data.get_bool('VisibleForFrame', True)

        # touchable nodes swallow clicks
        if data.get_bool('TouchEnable', False):
            if node.add_component(BlockInputEvents()) is None:
                diagnostics.warn(f"Add BlockInputEvents component for node {data.name} failed.",
                                 node=data.name, field='TouchEnable')

        derive_widget(node, data, diagnostics)

        initializer = NODE_INITIALIZERS.get(node_type)
        if initializer is not None:
            initializer(node, data, self.ctx)
        elif node_type and node_type not in STRUCTURAL_TYPES:
            diagnostics.warn(f"Node type {node_type} is not supported, an empty node is created.",
                             node=data.name, field='ctype')

    def build_children(self, data, parent, parent_path):
        children_data = data.first_child('Children')
        if children_data is None:
            return

        for child_data in children_data.children:
            child = self.build(child_data, parent_path=parent_path)
            parent.add_child(child)
            # the position was authored against the provisional parent
            if child.parent is not None:
                apply_position_conversion(child)


def build_scene(document, ctx):
    """Build a scene

    The scene holds a 'Scene' node (anchor 0,0) with a Canvas node and its
    Main Camera. The document tree is built into the 'Scene' node, so clip
    paths are relative to it.

    Returns:
        tuple: (scene, node the document tree was built into)
    """
    scene = TargetNode('')

    root = TargetNode('Scene')
    root.anchor = (0.0, 0.0)
    scene.add_child(root)

    canvas_node = TargetNode('Canvas')
    canvas_node.add_component(Canvas())
    root.add_child(canvas_node)

    camera_node = TargetNode('Main Camera')
    camera_node.add_component(Camera())
    canvas_node.add_child(camera_node)

    NodeGraphBuilder(ctx).build(document.object_data, root=root)
    return scene, root


def build_prefab(document, ctx):
    """Build a prefab: the document tree under a bare root node

    Returns:
        tuple: (root, root)
    """
    root = TargetNode()
    NodeGraphBuilder(ctx).build(document.object_data, root=root)
    return root, root
