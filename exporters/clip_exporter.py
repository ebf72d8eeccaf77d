#!/usr/bin/env python3
"""
Clip Exporter Module
Serializes an AnimationClip to a Creator .anim file
"""

from .base_exporter import BaseExporter

WRAP_MODE_NORMAL = 1


def serialize_tracks(tracks):
    return {prop: [frame.to_dict() for frame in frames] for prop, frames in tracks.items()}


class ClipExporter(BaseExporter):
    """Creator animation clip serializer"""

    def get_format_name(self):
        return "Animation Clip"

    def serialize(self, clip):
        """Build the cc.AnimationClip object

        Every node path is present; `props` / `comps` only when they hold tracks.
        """
        paths = {}
        for node_path, curves in clip.paths.items():
            node_data = {}
            if curves.props:
                node_data['props'] = serialize_tracks(curves.props)
            if curves.comps:
                node_data['comps'] = {name: serialize_tracks(tracks)
                                      for name, tracks in curves.comps.items()}
            paths[node_path] = node_data

        return {
            '__type__': 'cc.AnimationClip',
            '_name': clip.name,
            '_objFlags': 0,
            '_native': '',
            '_duration': clip.duration,
            'sample': clip.sample,
            'speed': clip.speed,
            'wrapMode': WRAP_MODE_NORMAL,
            'curveData': {'paths': paths},
            'events': [event.to_dict() for event in clip.events],
        }

    def export(self, clip, output_file):
        """Write one clip

        Args:
            clip: AnimationClip with frame times in seconds
            output_file: Artifact path (.anim)

        Returns:
            dict: Export results with keys:
                - 'success': bool
                - 'files': list with the written artifact
                - 'keyframes': int
                - 'message': Status message
        """
        written = self.write_json(self.serialize(clip), output_file)
        keyframes = clip.keyframe_count()

        result = {
            'success': True,
            'files': [str(written)],
            'keyframes': keyframes,
            'message': f"Clip {clip.name}: {keyframes} keyframes, {len(clip.events)} events"
        }
        self.log(self.get_export_summary(result))
        return result
