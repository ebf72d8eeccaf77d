#!/usr/bin/env python3
"""
Core Module
Format-agnostic data structures, settings, diagnostics and shared math.
"""

from .scene_data import (
    SourceNode,
    SourceDocument,
    TargetNode,
    AssetRef,
    Component,
    Keyframe,
    FrameEvent,
    NodeCurves,
    CurveAccumulator,
    ActionTagIndex,
    ActionRange,
    AnimationClip,
)
from .errors import ConversionError, ParseError, CyclicReferenceError, ArtifactWriteError
from .diagnostics import Diagnostic, DiagnosticLog
from .settings import ConversionSettings
from .asset_db import BaseAssetResolver, BaseAssetImporter, LocalAssetDatabase

__all__ = [
    'SourceNode',
    'SourceDocument',
    'TargetNode',
    'AssetRef',
    'Component',
    'Keyframe',
    'FrameEvent',
    'NodeCurves',
    'CurveAccumulator',
    'ActionTagIndex',
    'ActionRange',
    'AnimationClip',
    'ConversionError',
    'ParseError',
    'CyclicReferenceError',
    'ArtifactWriteError',
    'Diagnostic',
    'DiagnosticLog',
    'ConversionSettings',
    'BaseAssetResolver',
    'BaseAssetImporter',
    'LocalAssetDatabase',
]
