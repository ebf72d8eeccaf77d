#!/usr/bin/env python3
"""
Base Reader Module
Abstract interface for reading Cocos Studio files (.csd documents, .ccs projects)
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from lxml import etree

from core.errors import ParseError
from core.scene_data import SourceNode


def element_to_node(element) -> SourceNode:
    """Convert an lxml element subtree to SourceNode objects

    Comments, processing instructions and text are dropped.
    """
    node = SourceNode(element.tag, dict(element.attrib))
    for child in element:
        if isinstance(child.tag, str):
            node.children.append(element_to_node(child))
    return node


def parse_xml(data: bytes, file_path: Optional[str] = None):
    """Parse XML bytes into an lxml root element

    Raises:
        ParseError: If the byte stream is not well-formed XML
    """
    parser = etree.XMLParser(remove_comments=True, remove_pis=True, resolve_entities=False)
    try:
        root = etree.fromstring(data, parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise ParseError(f"Malformed XML: {e}", file_path)
    if root is None:
        raise ParseError("Empty document", file_path)
    return root


class BaseReader(ABC):
    """Abstract base class for Studio file readers

    Provides a consistent interface for the document and project readers.
    """

    def __init__(self, file_path, progress_callback=None):
        """Initialize reader with file path

        Args:
            file_path: Path to the file to read
            progress_callback: Optional function to call for progress updates
        """
        self.file_path = Path(file_path)
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def get_format_name(self) -> str:
        """Return human-readable format name (e.g., 'Cocos Studio Document')"""
        pass

    @abstractmethod
    def read(self) -> Any:
        """Read and parse the file

        Raises:
            ParseError: If the file cannot be read or is malformed
        """
        pass

    def _read_bytes(self) -> bytes:
        self.log(f"Reading {self.get_format_name()}: {self.file_path.name}")
        if not self.file_path.is_file():
            raise ParseError("File does not exist or is not a file", str(self.file_path))
        try:
            return self.file_path.read_bytes()
        except OSError as e:
            raise ParseError(f"Cannot read file: {e}", str(self.file_path))
