#!/usr/bin/env python3
"""
Widget deriver tests
Per-axis docking decision table and StudioWidget construction
"""

import pytest

from builders.widget import AxisInput, derive_axis, derive_widget, read_axis_inputs
from core.diagnostics import DiagnosticLog
from core.scene_data import StudioWidget, TargetNode
from readers.base_reader import element_to_node, parse_xml


def node_data(attrs='', children=''):
    xml = f'<AbstractNodeData Name="w" ctype="PanelObjectData" {attrs}>{children}</AbstractNodeData>'
    return element_to_node(parse_xml(xml.encode('utf-8')))


def test_left_edge_absolute():
    result = derive_axis(AxisInput(edge='LeftEdge', near_margin=10), 'Left', 'Right')
    assert result.near.absolute
    assert result.near.value == 10
    assert result.far is None


def test_left_edge_with_percent_size():
    axis = AxisInput(edge='LeftEdge', percent_size=True, near_margin=10,
                     position_percent=0.5, size_percent=0.2, anchor=0.5)
    result = derive_axis(axis, 'Left', 'Right')
    assert result.near.absolute and result.near.value == 10
    assert not result.far.absolute
    assert result.far.value == pytest.approx(1 - 0.5 - 0.2 * 0.5)


def test_right_edge_with_percent_size():
    axis = AxisInput(edge='RightEdge', percent_size=True, far_margin=4,
                     position_percent=0.5, size_percent=0.2, anchor=0.5)
    result = derive_axis(axis, 'Left', 'Right')
    assert result.far.absolute and result.far.value == 4
    assert not result.near.absolute
    assert result.near.value == pytest.approx(0.5 - 0.2 * 0.5)


def test_right_edge_only():
    result = derive_axis(AxisInput(edge='RightEdge', far_margin=6), 'Left', 'Right')
    assert result.near is None
    assert result.far.absolute and result.far.value == 6


@pytest.mark.parametrize('percent_size, percent_position, absolute', [
    (False, False, True),
    (True, False, False),
    (False, True, False),
])
def test_both_edges(percent_size, percent_position, absolute):
    axis = AxisInput(edge='BothEdge', percent_size=percent_size, percent_position=percent_position,
                     near_margin=1, far_margin=2, position_percent=0.5, size_percent=0.5, anchor=0.5)
    result = derive_axis(axis, 'Left', 'Right')
    assert result.near.absolute is absolute
    assert result.far.absolute is absolute


def test_percent_size_without_edge():
    axis = AxisInput(percent_size=True, position_percent=0.5, size_percent=0.4, anchor=0.5)
    result = derive_axis(axis, 'Bottom', 'Top')
    assert not result.near.absolute and not result.far.absolute
    assert result.near.value == pytest.approx(0.3)
    assert result.far.value == pytest.approx(0.3)


def test_percent_position_only():
    axis = AxisInput(percent_position=True, position_percent=0.25, size_percent=0.1, anchor=0)
    result = derive_axis(axis, 'Left', 'Right')
    assert not result.near.absolute
    assert result.near.value == pytest.approx(0.25)
    assert result.far is None


def test_inactive_axis():
    result = derive_axis(AxisInput(), 'Left', 'Right')
    assert result.near is None and result.far is None


def test_zero_percent_position_is_not_percent_positioning():
    data = node_data('PositionPercentXEnabled="True"', '<PrePosition X="0" Y="0.5" />')
    horizontal, vertical = read_axis_inputs(data, (0.5, 0.5))
    assert not horizontal.percent_position
    assert not vertical.percent_position


def test_redundant_percent_flags_are_ored():
    data = node_data('PercentWidthEnabled="True" StretchHeightEnable="True"')
    horizontal, vertical = read_axis_inputs(data, (0.5, 0.5))
    assert horizontal.percent_size
    assert vertical.percent_size


def test_static_node_gets_no_widget():
    node = TargetNode('w')
    assert derive_widget(node, node_data()) is None
    assert node.get_component(StudioWidget) is None


def test_left_margin_widget():
    node = TargetNode('w')
    widget = derive_widget(node, node_data('HorizontalEdge="LeftEdge" LeftMargin="10"'))

    assert widget is node.get_component(StudioWidget)
    assert widget.is_align_left and widget.is_absolute_left
    assert widget.left == 10
    assert not widget.is_align_right
    assert not widget.is_align_top and not widget.is_align_bottom


def test_top_edge_widget():
    node = TargetNode('w')
    widget = derive_widget(node, node_data('VerticalEdge="TopEdge" TopMargin="20"'))
    assert widget.is_align_top and widget.is_absolute_top
    assert widget.top == 20
    assert not widget.is_align_bottom


def test_widget_add_failure_is_reported():
    node = TargetNode('w')
    node.add_component(StudioWidget())
    diagnostics = DiagnosticLog()

    assert derive_widget(node, node_data('HorizontalEdge="BothEdge"'), diagnostics) is None
    assert len(diagnostics.warnings()) == 1
