#!/usr/bin/env python3
"""
Conversion Context Module
State shared by the builders and the timeline extractor for one document.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from core.asset_db import BaseAssetResolver, url_join
from core.diagnostics import DiagnosticLog
from core.scene_data import ActionTagIndex, CurveAccumulator, TargetNode
from core.settings import ConversionSettings

# Signature: import_document(csd_path) -> new instance of the converted prefab, or None
DocumentImporter = Callable[[Path], Optional[TargetNode]]


@dataclass
class ConversionContext:
    """Everything one document conversion needs

    Attributes:
        resolver: Asset resolver collaborator (url -> handle, metadata)
        settings: Run-wide settings
        diagnostics: Diagnostic log of the run
        resource_root: Studio resource directory (relative paths start here)
        resource_url: Url the resource directory was imported to
        import_document: Converts a referenced sub-document and instantiates its prefab
        action_tags: ActionTag -> node index, reset per document
        curves: Animation accumulator, reset per document
    """
    resolver: BaseAssetResolver
    settings: ConversionSettings = field(default_factory=ConversionSettings)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    resource_root: Path = Path('.')
    resource_url: str = 'db://assets'
    import_document: Optional[DocumentImporter] = None
    action_tags: ActionTagIndex = field(default_factory=ActionTagIndex)
    curves: CurveAccumulator = field(default_factory=CurveAccumulator)

    def reset(self):
        """Clear per-document state before converting the next document"""
        self.action_tags.reset()
        self.curves.reset()

    def resource_url_for(self, relative_path):
        return url_join(self.resource_url, relative_path)

    def warn(self, message, node=None, field=None):
        return self.diagnostics.warn(message, node=node, field=field)
