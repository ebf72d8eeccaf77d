#!/usr/bin/env python3
"""
Base Exporter Module
Abstract base class ensuring consistent interface across all artifact exporters

Exporters receive built TargetNode trees / AnimationClips, never source
documents, so they stay independent of the Studio format.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from core.errors import ArtifactWriteError


class BaseExporter(ABC):
    """Abstract base class for all artifact exporters

    Provides consistent interface and common utilities for all exporters.
    Each artifact kind (scene/prefab, animation clip) inherits from this class.

    Key principles:
    - Single Responsibility: Each exporter writes ONE artifact kind
    - Shared Utilities: logging, output directory validation, JSON writing
    - Write failures are fatal: they raise ArtifactWriteError
    """

    def __init__(self, progress_callback=None):
        """Initialize exporter

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def export(self, data, output_file):
        """Serialize `data` to `output_file`

        Args:
            data: Object to serialize (TargetNode root or AnimationClip)
            output_file: Artifact path (Path object or string)

        Returns:
            dict: Export results with at least:
                  - 'success': bool
                  - 'files': list of created file paths
                  - 'message': str status message

        Raises:
            ArtifactWriteError: If the artifact could not be written
        """
        pass

    @abstractmethod
    def get_format_name(self):
        """Return human-readable format name

        Returns:
            str: Format name (e.g., "Creator Prefab", "Animation Clip")
        """
        pass

    def validate_output_path(self, output_path):
        """Validate and create output directory if needed

        Args:
            output_path: Directory path to validate

        Returns:
            Path: Validated Path object

        Raises:
            ArtifactWriteError: If the directory cannot be created
        """
        path = Path(output_path)

        # Create directory if it doesn't exist
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteError(f"Cannot create output directory {path}: {e}") from e

        # Verify we can write to the directory
        if not path.is_dir():
            raise ArtifactWriteError(f"Output path is not a directory: {path}")

        return path

    def write_json(self, payload, output_file):
        """Write a JSON artifact, creating its directory first

        Returns:
            Path: The written file
        """
        output_file = Path(output_file)
        self.validate_output_path(output_file.parent)
        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            raise ArtifactWriteError(f"Cannot write {output_file}: {e}") from e
        return output_file

    def get_export_summary(self, result):
        """Generate human-readable summary of export results

        Args:
            result: Export result dict from export() method

        Returns:
            str: Formatted summary text
        """
        lines = [f"✓ {self.get_format_name()} Export Complete"]

        for file_path in result.get('files', []):
            lines.append(f"    - {Path(file_path).name}")

        if 'message' in result:
            lines.append(f"  {result['message']}")

        return "\n".join(lines)
