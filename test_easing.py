#!/usr/bin/env python3
"""
Easing resolver tests
"""

import pytest

from core.easing import EASE_FAMILIES, easing_from_code, resolve_easing
from readers.base_reader import element_to_node, parse_xml


def frame(xml):
    return element_to_node(parse_xml(xml.encode('utf-8')))


def test_linear_has_no_curve():
    assert easing_from_code(0) is None


@pytest.mark.parametrize('code, expected', [
    (1, 'sineIn'),
    (2, 'sineOut'),
    (3, 'sineInOut'),
    (4, 'quadIn'),
    (15, 'quintInOut'),
    (28, 'bounceIn'),
    (30, 'bounceInOut'),
])
def test_named_curves(code, expected):
    assert easing_from_code(code) == expected


def test_codes_past_last_family_have_no_curve():
    assert easing_from_code(len(EASE_FAMILIES) * 3 + 1) is None


def test_unknown_negative_code_has_no_curve():
    assert easing_from_code(-5) is None


def test_custom_curve_uses_inner_control_points():
    points = [(0, 0), (0.2, 0.1), (0.8, 0.9), (1, 1)]
    assert easing_from_code(-1, points) == [0.2, 0.1, 0.8, 0.9]


def test_custom_curve_without_points():
    assert easing_from_code(-1, None) is None


def test_resolve_from_frame_element():
    data = frame("""
        <PointFrame FrameIndex="10" X="1" Y="2">
          <EasingData Type="-1">
            <Points>
              <PointF />
              <PointF X="0.25" Y="0.1" />
              <PointF X="0.75" Y="0.9" />
              <PointF X="1.0" Y="1.0" />
            </Points>
          </EasingData>
        </PointFrame>""")
    assert resolve_easing(data) == [0.25, 0.1, 0.75, 0.9]


def test_resolve_named_from_frame_element():
    data = frame('<ScaleFrame FrameIndex="0" X="1" Y="1"><EasingData Type="5" /></ScaleFrame>')
    assert resolve_easing(data) == 'quadOut'


def test_resolve_without_easing_data():
    assert resolve_easing(frame('<IntFrame FrameIndex="0" Value="255" />')) is None
