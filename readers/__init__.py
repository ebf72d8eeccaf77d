#!/usr/bin/env python3
"""
Readers Module
Readers for Cocos Studio projects (.ccs) and documents (.csd)
"""

from pathlib import Path

from .base_reader import BaseReader
from .csd_reader import CSDReader, parse_document
from .project_reader import ProjectReader, ProjectInfo

# Supported file extensions
DOCUMENT_EXTENSIONS = {'.csd'}
PROJECT_EXTENSIONS = {'.ccs'}
SUPPORTED_EXTENSIONS = DOCUMENT_EXTENSIONS | PROJECT_EXTENSIONS


def create_reader(input_file, progress_callback=None):
    """Factory function to create appropriate reader based on file extension

    Args:
        input_file: Path to input file
        progress_callback: Optional progress callback handed to the reader

    Returns:
        BaseReader: CSDReader or ProjectReader instance

    Raises:
        ValueError: If file extension is not supported
    """
    ext = Path(input_file).suffix.lower()

    if ext in DOCUMENT_EXTENSIONS:
        return CSDReader(input_file, progress_callback)
    elif ext in PROJECT_EXTENSIONS:
        return ProjectReader(input_file, progress_callback=progress_callback)
    else:
        raise ValueError(
            f"Unsupported file format: {ext}\n"
            f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )


def get_file_type(input_file):
    """Get the file type string for a given file

    Returns:
        str: 'document', 'project', or 'unknown'
    """
    ext = Path(input_file).suffix.lower()
    if ext in DOCUMENT_EXTENSIONS:
        return 'document'
    elif ext in PROJECT_EXTENSIONS:
        return 'project'
    return 'unknown'


def is_supported_format(input_file):
    """Check if a file has a supported format"""
    return Path(input_file).suffix.lower() in SUPPORTED_EXTENSIONS


__all__ = [
    'BaseReader',
    'CSDReader',
    'ProjectReader',
    'ProjectInfo',
    'parse_document',
    'create_reader',
    'get_file_type',
    'is_supported_format',
    'DOCUMENT_EXTENSIONS',
    'PROJECT_EXTENSIONS',
    'SUPPORTED_EXTENSIONS',
]
