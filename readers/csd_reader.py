#!/usr/bin/env python3
"""
CSD Reader Module
Parses Cocos Studio scene/UI documents (.csd) into SourceDocument trees.

A .csd document looks like:

    <GameFile>
      <PropertyGroup Name="MainScene" Type="Scene" Version="3.10.0.0" />
      <Content ctype="GameProjectContent">
        <Content>
          <Animation Duration="60" Speed="1.0"> <Timeline .../> </Animation>
          <AnimationList> <AnimationInfo Name="idle" StartIndex="0" EndIndex="30"/> </AnimationList>
          <ObjectData Name="Scene" ctype="GameNodeObjectData"> ... </ObjectData>
        </Content>
      </Content>
    </GameFile>
"""

from core.errors import ParseError
from core.scene_data import SourceDocument

from .base_reader import BaseReader, element_to_node, parse_xml

DOCUMENT_KINDS = ('Scene', 'Node', 'Layer')


def parse_document(data: bytes, file_path=None) -> SourceDocument:
    """Parse .csd bytes

    Args:
        data: Raw file content
        file_path: Source path, used for error messages and SourceDocument.file_path

    Returns:
        SourceDocument: Parsed document

    Raises:
        ParseError: Malformed XML, missing PropertyGroup/Content, or unknown Type
    """
    path_str = str(file_path) if file_path else None
    root = parse_xml(data, path_str)

    property_group = next(root.iter('PropertyGroup'), None)
    if property_group is None:
        raise ParseError("Missing PropertyGroup section", path_str)

    kind = property_group.get('Type', '')
    if not kind:
        raise ParseError("PropertyGroup has no Type", path_str)
    if kind not in DOCUMENT_KINDS:
        raise ParseError(f"Unsupported document type: {kind}", path_str)

    outer_content = next(root.iter('Content'), None)
    if outer_content is None:
        raise ParseError("Missing Content section", path_str)
    inner_content = None
    for child in outer_content:
        if isinstance(child.tag, str) and child.tag == 'Content':
            inner_content = child
            break
    if inner_content is None:
        raise ParseError("Missing inner Content section", path_str)

    document = SourceDocument(
        kind=kind,
        name=property_group.get('Name', ''),
        version=property_group.get('Version', ''),
        content=element_to_node(inner_content),
        file_path=path_str,
    )
    if document.object_data is None:
        raise ParseError("Missing ObjectData section", path_str)
    return document


class CSDReader(BaseReader):
    """Reads a single .csd file"""

    def get_format_name(self):
        return "Cocos Studio Document"

    def read(self) -> SourceDocument:
        return parse_document(self._read_bytes(), str(self.file_path))
