#!/usr/bin/env python3
"""
Coordinates Module
Converts authored positions between the Studio and Creator conventions.

Studio positions are relative to the parent's bottom-left corner; Creator
positions are relative to the parent's anchor point. Converting subtracts
parentSize * parentAnchor whenever the node actually has a parent.
"""

import numpy as np


def _anchor_offset(parent):
    size = np.array(parent.content_size, dtype=float)
    anchor = np.array(parent.anchor, dtype=float)
    return size * anchor


def convert_node_position(node, position=None):
    """Convert a Studio-space position of `node` to its current parent's space

    Args:
        node: TargetNode whose parent defines the offset
        position: (x, y) to convert; defaults to the node's own position

    Returns:
        tuple: Converted (x, y). Unchanged when the node has no parent.
    """
    if position is None:
        position = node.position
    if node.parent is None:
        return (float(position[0]), float(position[1]))

    converted = np.array(position, dtype=float) - _anchor_offset(node.parent)
    return (float(converted[0]), float(converted[1]))


def revert_node_position(parent, position):
    """Inverse of convert_node_position for a node under `parent`"""
    if parent is None:
        return (float(position[0]), float(position[1]))

    reverted = np.array(position, dtype=float) + _anchor_offset(parent)
    return (float(reverted[0]), float(reverted[1]))
