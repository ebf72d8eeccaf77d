"""
Exporters Module
Serializers for converted scenes, prefabs and animation clips
"""

from .base_exporter import BaseExporter
from .scene_exporter import SceneExporter, SCENE, PREFAB
from .clip_exporter import ClipExporter

__all__ = [
    'BaseExporter',
    'SceneExporter',
    'ClipExporter',
    'SCENE',
    'PREFAB',
]
