#!/usr/bin/env python3
"""
Clips Module
Splits a document's accumulated timeline into named animation clips.

A document declares a total Duration and, optionally, an AnimationList of
named frame ranges. The whole timeline is always exported as a clip named
after the source file; each named range becomes one more clip. Range names
are also file names, so separators are replaced and case-insensitive
duplicates get a number.
"""

from dataclasses import replace

from builders.base_properties import sanitize_node_name
from core.scene_data import ActionRange, AnimationClip, NodeCurves


def build_action_ranges(content, default_name):
    """List the action ranges of a document

    Args:
        content: Inner Content SourceNode of the document
        default_name: Name of the whole-timeline range (source file stem)

    Returns:
        list: ActionRange items, the whole-timeline range first.
              Empty when the document has no timelines at all.
    """
    animation = content.first_child('Animation')
    if animation is None or not animation.children_named('Timeline'):
        return []

    max_frame = animation.get_int('Duration', 0)
    default_range = ActionRange(default_name, 0, max_frame)
    ranges = [default_range]

    animation_list = content.first_child('AnimationList')
    if animation_list is None:
        return ranges

    declared = []
    for item in animation_list.children_named('AnimationInfo'):
        name = item.get('Name', '')
        if not name:
            continue
        # range names become clip file names
        name = unique_default_name(sanitize_node_name(name), [r.name for r in declared])
        declared.append(ActionRange(name,
                                    item.get_int('StartIndex', 0),
                                    item.get_int('EndIndex', max_frame)))

    default_range.name = unique_default_name(default_name, [r.name for r in declared])
    ranges.extend(declared)
    return ranges


def read_speed(content, default=1.0):
    """Playback speed declared on the Animation element"""
    animation = content.first_child('Animation')
    if animation is None:
        return default
    return animation.get_float('Speed', default)


def unique_default_name(default_name, declared_names):
    """Append an increasing number to `default_name` until no declared name matches it

    Comparison is case-insensitive.
    """
    taken = {name.lower() for name in declared_names}
    name = default_name
    suffix = 1
    while name.lower() in taken:
        name = f"{default_name}{suffix}"
        suffix += 1
    return name


def select_frames(frames, start, end, fps):
    """Keep frames in [start, end] and rebase them to seconds from `start`

    Works for Keyframe and FrameEvent items; values and curves are copied
    unchanged.
    """
    return [replace(frame, frame=(frame.frame - start) / fps)
            for frame in frames
            if start <= frame.frame <= end]


def segment_clip(action_range, accumulator, fps, speed=1.0):
    """Build the clip of one action range

    Args:
        action_range: ActionRange to cut
        accumulator: CurveAccumulator of the whole document
        fps: Sampling rate
        speed: Playback speed declared by the document

    Returns:
        AnimationClip: Clip with every node path of the accumulator; component
                       tracks left empty by the range are omitted.
    """
    start, end = action_range.start_frame, action_range.end_frame
    paths = {}
    for node_path, curves in accumulator.paths.items():
        clip_curves = NodeCurves()
        for prop, frames in curves.props.items():
            clip_curves.props[prop] = select_frames(frames, start, end, fps)

        for comp_name, tracks in curves.comps.items():
            comp_tracks = {}
            for comp_prop, frames in tracks.items():
                selected = select_frames(frames, start, end, fps)
                if selected:
                    comp_tracks[comp_prop] = selected
            if comp_tracks:
                clip_curves.comps[comp_name] = comp_tracks

        paths[node_path] = clip_curves

    return AnimationClip(
        name=action_range.name,
        duration=(end - start) / fps,
        sample=fps,
        speed=speed,
        paths=paths,
        events=select_frames(accumulator.events, start, end, fps),
    )


def segment_clips(action_ranges, accumulator, fps, speed=1.0):
    return [segment_clip(r, accumulator, fps, speed) for r in action_ranges]
