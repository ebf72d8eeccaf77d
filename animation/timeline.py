#!/usr/bin/env python3
"""
Timeline Module
Extracts keyframe tracks from a document's Animation section.

Each <Timeline> element animates one property of one node, identified by its
ActionTag. The tag is looked up in the ActionTagIndex filled while building
the node tree; timelines whose node was never built are dropped without a
diagnostic. Parsed keyframes still carry Studio frame indices; the clip
segmenter slices and rebases them later.
"""

from core.coordinates import convert_node_position
from core.easing import resolve_easing
from core.scene_data import CurveAccumulator, FrameEvent, Keyframe, Sprite

from builders.components import resolve_sprite_frame

FRAME_EVENT_PROPERTY = 'FrameEvent'
SPRITE_COMPONENT = 'cc.Sprite'


def frame_index(frame_data):
    return frame_data.get_int('FrameIndex', 0)


def _keyframe(frame_data, value, eased=True):
    curve = resolve_easing(frame_data) if eased else None
    return Keyframe(frame_index(frame_data), value, curve)


# ---------- property parsers ----------
# Signature: parse_xxx(timeline, curves, entry, ctx)
#   timeline: SourceNode of the <Timeline> element
#   curves:   NodeCurves of the animated node path
#   entry:    ActionTagEntry (node path and built TargetNode)

def parse_anchor(timeline, curves, entry, ctx):
    anchor_x, anchor_y = [], []
    for frame_data in timeline.children:
        anchor_x.append(_keyframe(frame_data, frame_data.get_float('X', 0.0)))
        anchor_y.append(_keyframe(frame_data, frame_data.get_float('Y', 0.0)))
    curves.props['anchorX'] = anchor_x
    curves.props['anchorY'] = anchor_y


def parse_position(timeline, curves, entry, ctx):
    """Positions are converted against the node's final parent"""
    frames = []
    for frame_data in timeline.children:
        authored = (frame_data.get_float('X', 0.0), frame_data.get_float('Y', 0.0))
        frames.append(_keyframe(frame_data, list(convert_node_position(entry.node, authored))))
    curves.props['position'] = frames


def parse_rotation(timeline, curves, entry, ctx):
    curves.props['angle'] = [_keyframe(f, f.get_float('X', 0.0)) for f in timeline.children]


def parse_scale(timeline, curves, entry, ctx):
    scale_x, scale_y = [], []
    for frame_data in timeline.children:
        scale_x.append(_keyframe(frame_data, frame_data.get_float('X', 1.0)))
        scale_y.append(_keyframe(frame_data, frame_data.get_float('Y', 1.0)))
    curves.props['scaleX'] = scale_x
    curves.props['scaleY'] = scale_y


def parse_color(timeline, curves, entry, ctx):
    frames = []
    for frame_data in timeline.children:
        color = [frame_data.get_int('R', 255, 'Color'),
                 frame_data.get_int('G', 255, 'Color'),
                 frame_data.get_int('B', 255, 'Color')]
        frames.append(_keyframe(frame_data, color))
    curves.props['color'] = frames


def parse_opacity(timeline, curves, entry, ctx):
    curves.props['opacity'] = [_keyframe(f, f.get_int('Value', 255)) for f in timeline.children]


def parse_visible(timeline, curves, entry, ctx):
    # visibility is a step track; easing does not apply
    curves.props['active'] = [_keyframe(f, f.get_bool('Value', True), eased=False)
                              for f in timeline.children]


def parse_sprite_frame(timeline, curves, entry, ctx):
    """Sprite frame swaps; only for nodes that carry a Sprite"""
    if entry.node.get_component(Sprite) is None:
        return

    frames = []
    for frame_data in timeline.children:
        ref = resolve_sprite_frame(ctx, frame_data.first_child('TextureFile'), node_name=entry.node_path)
        if ref is None:
            continue
        frames.append(Keyframe(frame_index(frame_data), ref))
    curves.component_tracks(SPRITE_COMPONENT)['spriteFrame'] = frames


PROPERTY_PARSERS = {
    'AnchorPoint': parse_anchor,
    'Position': parse_position,
    'RotationSkew': parse_rotation,
    'Scale': parse_scale,
    'CColor': parse_color,
    'Alpha': parse_opacity,
    'VisibleForFrame': parse_visible,
    'FileData': parse_sprite_frame,
}


def parse_frame_events(timeline, function_name):
    """Frame events all call one function with the authored string as parameter"""
    events = []
    for frame_data in timeline.children:
        value = frame_data.get('Value', '')
        events.append(FrameEvent(frame_index(frame_data), function_name, [value] if value else []))
    return events


class TimelineExtractor:
    """Fills a CurveAccumulator from a document's Animation element

    Args:
        ctx: ConversionContext whose action_tags were filled by the node graph builder
    """

    def __init__(self, ctx):
        self.ctx = ctx

    def extract(self, content, accumulator=None):
        """Parse every Timeline of the document

        Args:
            content: Inner Content SourceNode of the document
            accumulator: CurveAccumulator to fill (defaults to ctx.curves)

        Returns:
            CurveAccumulator: The filled accumulator
        """
        if accumulator is None:
            accumulator = self.ctx.curves

        animation = content.first_child('Animation')
        if animation is None:
            return accumulator

        for timeline in animation.children_named('Timeline'):
            self.extract_timeline(timeline, accumulator)
        return accumulator

    def extract_timeline(self, timeline, accumulator):
        entry = self.ctx.action_tags.lookup(timeline.get('ActionTag', ''))
        if entry is None:
            # animated node was never built
            return

        prop = timeline.get('Property', '')
        if prop == FRAME_EVENT_PROPERTY:
            accumulator.events.extend(
                parse_frame_events(timeline, self.ctx.settings.frame_event_function))
            return

        parser = PROPERTY_PARSERS.get(prop)
        if parser is None:
            self.ctx.warn(f'Action for property "{prop}" is not supported.',
                          node=entry.node_path, field='Property')
            return

        parser(timeline, accumulator.node(entry.node_path), entry, self.ctx)
