#!/usr/bin/env python3
"""
Base Properties Module
Applies the properties every Studio node carries (name, size, transform, color).
"""

import re

from core.coordinates import convert_node_position

# Plain layer/group containers keep the default transform
NO_BASE_PROPERTY_TYPES = {'GameLayerObjectData', 'GameNodeObjectData'}

# Their color is managed by the component (EditBox font color, ScrollView background)
NO_COLOR_TYPES = {'TextFieldObjectData', 'ScrollViewObjectData'}

PATH_SEPARATOR_EXP = re.compile(r'[\\/]')


def sanitize_node_name(name, diagnostics=None):
    """Replace path separators in a node name

    Node names become animation path segments, so '/' and '\\' are not allowed.
    """
    if not name:
        return name
    new_name = PATH_SEPARATOR_EXP.sub('_', name)
    if new_name != name and diagnostics is not None:
        diagnostics.warn(f'The name of node "{name}" contains illegal characters. '
                         f'It was renamed to "{new_name}".', node=name, field='Name')
    return new_name


def read_color(data, element, default=(255, 255, 255)):
    return (
        data.get_int('R', default[0], element),
        data.get_int('G', default[1], element),
        data.get_int('B', default[2], element),
    )


def init_base_properties(node, data, diagnostics=None):
    """Set name, content size and (for most types) transform, color and opacity

    Args:
        node: TargetNode to initialize
        data: SourceNode of the Studio node
        diagnostics: DiagnosticLog for name sanitization warnings
    """
    node_type = data.ctype
    node.name = sanitize_node_name(data.name, diagnostics)
    node.content_size = (data.get_float('X', 0.0, 'Size'), data.get_float('Y', 0.0, 'Size'))

    if node_type == 'GameLayerObjectData':
        node.anchor = (0.0, 0.0)

    if node_type in NO_BASE_PROPERTY_TYPES:
        return

    node.active = data.get_bool('VisibleForFrame', True)
    node.anchor = (data.get_float('ScaleX', 0.0, 'AnchorPoint'),
                   data.get_float('ScaleY', 0.0, 'AnchorPoint'))
    node.position = (data.get_float('X', 0.0, 'Position'),
                     data.get_float('Y', 0.0, 'Position'))

    scale_x = data.get_float('ScaleX', 1.0, 'Scale')
    scale_y = data.get_float('ScaleY', 1.0, 'Scale')
    if data.get_bool('FlipX', False):
        scale_x = -scale_x
    if data.get_bool('FlipY', False):
        scale_y = -scale_y
    node.scale = (scale_x, scale_y)

    rotation_x = data.get_float('RotationSkewX', 0.0)
    rotation_y = data.get_float('RotationSkewY', 0.0)
    if rotation_x == rotation_y:
        node.angle = rotation_x
    else:
        node.is_3d = True
        node.euler_angles = (rotation_x, rotation_y, 0.0)

    if node_type not in NO_COLOR_TYPES:
        node.color = read_color(data, 'CColor')
        node.opacity = data.get_int('Alpha', 255)


def apply_position_conversion(node):
    """Re-express the node's position relative to its current parent's anchor"""
    node.position = convert_node_position(node)
