#!/usr/bin/env python3
"""
Easing Module
Resolves Studio easing codes to Creator curve specs.
"""

# Family order matters: code = family_index * 3 + phase_index + 1
EASE_FAMILIES = [
    'sine', 'quad', 'cubic', 'quart', 'quint', 'expo', 'circ', 'elastic', 'back', 'bounce'
]

EASE_PHASES = ['In', 'Out', 'InOut']

LINEAR = 0
CUSTOM = -1


def easing_from_code(code, points=None):
    """Resolve an easing code

    Args:
        code: Authored EasingData Type
        points: For CUSTOM, the four (x, y) control points of the curve

    Returns:
        None for linear or unknown codes, a curve name such as 'quadOut',
        or [x1, y1, x2, y2] for a custom cubic bezier.
    """
    if code == LINEAR:
        return None

    if code == CUSTOM:
        if not points or len(points) < 3:
            return None
        (x1, y1), (x2, y2) = points[1], points[2]
        return [float(x1), float(y1), float(x2), float(y2)]

    if code < 0:
        return None

    family_index, phase_index = divmod(code - 1, 3)
    if family_index >= len(EASE_FAMILIES):
        return None
    return EASE_FAMILIES[family_index] + EASE_PHASES[phase_index]


def resolve_easing(frame_data):
    """Read the EasingData element of a timeline frame and resolve it

    Args:
        frame_data: SourceNode of one timeline frame

    Returns:
        Curve as returned by easing_from_code()
    """
    code = frame_data.get_int('Type', 0, 'EasingData')
    points = None
    if code == CUSTOM:
        easing_data = frame_data.first_child('EasingData')
        points_data = easing_data.first_child('Points') if easing_data is not None else None
        if points_data is not None:
            points = [(p.get_float('X', 0.0), p.get_float('Y', 0.0))
                      for p in points_data.children_named('PointF')]
    return easing_from_code(code, points)
