#!/usr/bin/env python3
"""
Widget Module
Derives the edge-docking constraint (StudioWidget) of a node.

Studio lays widgets out with per-axis edge docking (Left/Right/Both,
Bottom/Top/Both) and optional percentage size/position. Each axis is
resolved independently into a near-edge (left/bottom) and far-edge
(right/top) constraint, each either an absolute margin or a fraction of the
parent size.
"""

from dataclasses import dataclass
from typing import Optional

from core.scene_data import StudioWidget


@dataclass
class EdgeConstraint:
    """Alignment to one edge of the parent

    Attributes:
        absolute: True for a margin in points, False for a fraction of the parent size
        value: Margin or fraction
    """
    absolute: bool
    value: float


@dataclass
class AxisInput:
    """Authored layout fields of one axis"""
    edge: str = ''
    percent_size: bool = False
    percent_position: bool = False
    near_margin: float = 0.0
    far_margin: float = 0.0
    position_percent: float = 0.0
    size_percent: float = 0.0
    anchor: float = 0.0

    @property
    def active(self):
        return bool(self.edge) or self.percent_size or self.percent_position

    @property
    def near_percent(self):
        return self.position_percent - self.size_percent * self.anchor

    @property
    def far_percent(self):
        return 1 - self.position_percent - self.size_percent * (1 - self.anchor)


@dataclass
class AxisConstraint:
    """Resolved constraint of one axis (near = left/bottom, far = right/top)"""
    near: Optional[EdgeConstraint] = None
    far: Optional[EdgeConstraint] = None


def derive_axis(axis: AxisInput, near_edge: str, far_edge: str) -> AxisConstraint:
    """Resolve one axis

    Args:
        axis: Authored fields of the axis
        near_edge: Edge keyword of the near side ('Left' or 'Bottom')
        far_edge: Edge keyword of the far side ('Right' or 'Top')

    Returns:
        AxisConstraint: near/far constraints, None where the edge is not aligned
    """
    result = AxisConstraint()

    def near(absolute):
        result.near = EdgeConstraint(absolute, axis.near_margin if absolute else axis.near_percent)

    def far(absolute):
        result.far = EdgeConstraint(absolute, axis.far_margin if absolute else axis.far_percent)

    edge = axis.edge or ''
    if near_edge in edge:
        near(not axis.percent_position)
        if axis.percent_size:
            far(False)
    elif far_edge in edge:
        far(not axis.percent_position)
        if axis.percent_size:
            near(False)
    elif 'Both' in edge:
        absolute = not axis.percent_size and not axis.percent_position
        near(absolute)
        far(absolute)
    elif axis.percent_size:
        near(False)
        far(False)
    elif axis.percent_position:
        near(False)

    return result


def read_axis_inputs(data, anchor):
    """Read both axes' layout fields from a Studio node

    Args:
        data: SourceNode of the node
        anchor: (x, y) anchor point already applied to the node

    Returns:
        tuple: (horizontal AxisInput, vertical AxisInput)
    """
    pos_percent_x = data.get_float('X', 0.0, 'PrePosition')
    pos_percent_y = data.get_float('Y', 0.0, 'PrePosition')

    # A zero percentage position means the node is not using percent positioning
    horizontal = AxisInput(
        edge=data.get('HorizontalEdge', ''),
        percent_size=(data.get_bool('PercentWidthEnable') or data.get_bool('PercentWidthEnabled')
                      or data.get_bool('StretchWidthEnable')),
        percent_position=data.get_bool('PositionPercentXEnabled') and pos_percent_x != 0,
        near_margin=data.get_float('LeftMargin', 0.0),
        far_margin=data.get_float('RightMargin', 0.0),
        position_percent=pos_percent_x,
        size_percent=data.get_float('X', 0.0, 'PreSize'),
        anchor=anchor[0],
    )
    vertical = AxisInput(
        edge=data.get('VerticalEdge', ''),
        percent_size=(data.get_bool('PercentHeightEnable') or data.get_bool('PercentHeightEnabled')
                      or data.get_bool('StretchHeightEnable')),
        percent_position=data.get_bool('PositionPercentYEnabled') and pos_percent_y != 0,
        near_margin=data.get_float('BottomMargin', 0.0),
        far_margin=data.get_float('TopMargin', 0.0),
        position_percent=pos_percent_y,
        size_percent=data.get_float('Y', 0.0, 'PreSize'),
        anchor=anchor[1],
    )
    return horizontal, vertical


def build_widget(horizontal: AxisConstraint, vertical: AxisConstraint, widget=None) -> StudioWidget:
    """Copy resolved axis constraints onto a StudioWidget"""
    widget = widget or StudioWidget()
    if horizontal.near:
        widget.is_align_left = True
        widget.is_absolute_left = horizontal.near.absolute
        widget.left = horizontal.near.value
    if horizontal.far:
        widget.is_align_right = True
        widget.is_absolute_right = horizontal.far.absolute
        widget.right = horizontal.far.value
    if vertical.near:
        widget.is_align_bottom = True
        widget.is_absolute_bottom = vertical.near.absolute
        widget.bottom = vertical.near.value
    if vertical.far:
        widget.is_align_top = True
        widget.is_absolute_top = vertical.far.absolute
        widget.top = vertical.far.value
    return widget


def derive_widget(node, data, diagnostics=None) -> Optional[StudioWidget]:
    """Attach a StudioWidget to `node` if the Studio node uses docking/percent layout

    Must run after base properties so the node's anchor is known.

    Returns:
        StudioWidget or None when no constraint is needed (or it could not be added)
    """
    horizontal, vertical = read_axis_inputs(data, node.anchor)
    if not horizontal.active and not vertical.active:
        return None

    widget = node.add_component(StudioWidget())
    if widget is None:
        if diagnostics is not None:
            diagnostics.warn(f"Add Widget component for node {data.name} failed.",
                             node=data.name, field='StudioWidget')
        return None

    return build_widget(derive_axis(horizontal, 'Left', 'Right'),
                        derive_axis(vertical, 'Bottom', 'Top'), widget)
