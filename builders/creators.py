#!/usr/bin/env python3
"""
Node Creators Module
Custom node construction for Studio types that do not map to a single empty node.

A creator returns a CreatedNode pair: `node` is attached to the parent,
`child_parent` receives the Studio node's children. For a scroll view these
differ: children go into the view's content node.
"""

from dataclasses import dataclass
from typing import Optional

from core.errors import CyclicReferenceError
from core.scene_data import (
    Mask, Scrollbar, ScrollbarDirection, ScrollView, SizeMode, Sprite, SpriteType,
    StudioWidget, TargetNode,
)
from core.settings import DEFAULT_HSCROLLBAR_URL, DEFAULT_VSCROLLBAR_URL

from .base_properties import apply_position_conversion, init_base_properties, sanitize_node_name
from .components import add_container_background

SCROLLBAR_THICKNESS = 15
SCROLLBAR_HANDLE_RATIO = 0.7


@dataclass
class CreatedNode:
    """Result of a node creator

    Attributes:
        node: Node attached to the parent (and recorded for its ActionTag)
        child_parent: Node the Studio children are attached to
    """
    node: TargetNode
    child_parent: Optional[TargetNode] = None

    def __post_init__(self):
        if self.child_parent is None:
            self.child_parent = self.node


def create_default_node(data, ctx):
    return CreatedNode(TargetNode())


def create_project_node(data, ctx):
    """Instantiate a referenced sub-document (ProjectNodeObjectData)

    The referenced .csd is converted first (once per run) and its prefab
    instantiated. Any failure falls back to an empty node.
    """
    file_path = data.get('Path', '', 'FileData')
    instance = None
    if not file_path:
        ctx.warn("Project node has no file reference.", node=data.name, field='FileData')
    elif ctx.import_document is None:
        ctx.warn(f"Cannot import referenced document {file_path}.", node=data.name, field='FileData')
    else:
        try:
            instance = ctx.import_document(ctx.resource_root / file_path)
        except CyclicReferenceError as e:
            ctx.diagnostics.error(str(e), node=data.name, field='FileData')
        if instance is None:
            ctx.warn(f"Referenced document {file_path} could not be instantiated.",
                     node=data.name, field='FileData')

    return CreatedNode(instance if instance is not None else TargetNode())


def create_scroll_view(data, ctx):
    """Build a scroll view node with its content node and scrollbars"""
    scroll_node = TargetNode(sanitize_node_name(data.name))
    init_base_properties(scroll_node, data, ctx.diagnostics)

    scroll = scroll_node.add_component(ScrollView())
    if scroll is None:
        ctx.warn(f"Add ScrollView component for node {data.name} failed.",
                 node=data.name, field='ScrollView')
        return CreatedNode(scroll_node)

    scroll.inertia = data.get_bool('IsBounceEnabled', False)
    direction = data.get('ScrollDirectionType', 'Vertical')
    scroll.vertical = 'Vertical' in direction
    scroll.horizontal = 'Horizontal' in direction

    if data.get_bool('ClipAble', False):
        scroll_node.add_component(Mask(enabled=True))

    view_width, view_height = scroll_node.content_size
    content_node = TargetNode('content')
    content_node.content_size = (data.get_int('Width', view_width, 'InnerNodeSize'),
                                 data.get_int('Height', view_height, 'InnerNodeSize'))
    content_node.anchor = (0.0, 1.0)
    content_node.position = (0.0, view_height)

    add_container_background(scroll_node, data, ctx)

    scroll_node.add_child(content_node)
    apply_position_conversion(content_node)
    scroll.content = content_node

    if scroll.vertical:
        bar_node = create_scrollbar(ctx, ScrollbarDirection.VERTICAL, 'vScrollBar', scroll_node.content_size)
        scroll_node.add_child(bar_node)
        scroll.vertical_scroll_bar = bar_node
    if scroll.horizontal:
        bar_node = create_scrollbar(ctx, ScrollbarDirection.HORIZONTAL, 'hScrollBar', scroll_node.content_size)
        scroll_node.add_child(bar_node)
        scroll.horizontal_scroll_bar = bar_node

    return CreatedNode(scroll_node, content_node)


def create_scrollbar(ctx, direction, name, view_size):
    bar_root = TargetNode(name)
    scrollbar = bar_root.add_component(Scrollbar())
    scrollbar.direction = direction

    widget = bar_root.add_component(StudioWidget())
    widget.is_align_right = True
    widget.is_align_bottom = True
    widget.is_align_top = direction == ScrollbarDirection.VERTICAL
    widget.is_align_left = direction == ScrollbarDirection.HORIZONTAL

    handle = TargetNode('bar')
    bar_root.add_child(handle)
    sprite = handle.add_component(Sprite())
    sprite.type = SpriteType.SLICED
    sprite.trim = False
    sprite.size_mode = SizeMode.CUSTOM

    view_width, view_height = view_size
    if direction == ScrollbarDirection.HORIZONTAL:
        bar_root.content_size = (view_width, SCROLLBAR_THICKNESS)
        handle.content_size = (view_width * SCROLLBAR_HANDLE_RATIO, SCROLLBAR_THICKNESS)
        sprite.sprite_frame = ctx.resolver.resolve_handle(DEFAULT_HSCROLLBAR_URL)
    else:
        bar_root.content_size = (SCROLLBAR_THICKNESS, view_height)
        handle.content_size = (SCROLLBAR_THICKNESS, view_height * SCROLLBAR_HANDLE_RATIO)
        sprite.sprite_frame = ctx.resolver.resolve_handle(DEFAULT_VSCROLLBAR_URL)
    return bar_root


NODE_CREATORS = {
    'ProjectNodeObjectData': create_project_node,
    'ScrollViewObjectData': create_scroll_view,
}
