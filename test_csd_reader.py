#!/usr/bin/env python3
"""
Document reader tests
Parsing of .csd documents and rejection of malformed ones
"""

import pytest

from conftest import csd_bytes, root_object
from core.errors import ParseError
from readers import CSDReader, create_reader, get_file_type, ProjectReader
from readers.csd_reader import parse_document


def test_parse_node_document():
    document = parse_document(csd_bytes(root_object(), kind='Layer', name='Hud'), 'ui/Hud.csd')

    assert document.kind == 'Layer'
    assert document.name == 'Hud'
    assert document.version == '3.10.0.0'
    assert document.file_path == 'ui/Hud.csd'
    assert not document.is_scene
    assert document.object_data.ctype == 'GameNodeObjectData'
    assert document.object_data.get_float('X', child='Size') == 960.0


def test_scene_document_is_scene():
    document = parse_document(csd_bytes(root_object(), kind='Scene'))
    assert document.is_scene


def test_comments_are_dropped():
    data = csd_bytes(root_object('<!-- nothing here -->'))
    children = parse_document(data).object_data.first_child('Children')
    assert children.children == []


@pytest.mark.parametrize('data', [
    b'<GameFile><PropertyGroup Name="x" Type="Node"',
    b'',
    b'not xml at all',
])
def test_malformed_xml_raises(data):
    with pytest.raises(ParseError):
        parse_document(data, 'broken.csd')


def test_missing_property_group_raises():
    data = b'<GameFile><Content><Content><ObjectData ctype="GameNodeObjectData"/></Content></Content></GameFile>'
    with pytest.raises(ParseError, match='PropertyGroup'):
        parse_document(data)


def test_unknown_document_kind_raises():
    with pytest.raises(ParseError, match='Unsupported document type'):
        parse_document(csd_bytes(root_object(), kind='Skeleton'))


def test_missing_inner_content_raises():
    data = b'<GameFile><PropertyGroup Name="x" Type="Node"/><Content/></GameFile>'
    with pytest.raises(ParseError, match='inner Content'):
        parse_document(data)


def test_missing_object_data_raises():
    data = (b'<GameFile><PropertyGroup Name="x" Type="Node"/>'
            b'<Content><Content><Animation Duration="0"/></Content></Content></GameFile>')
    with pytest.raises(ParseError, match='ObjectData'):
        parse_document(data)


def test_parse_error_carries_path():
    with pytest.raises(ParseError) as info:
        parse_document(b'<broken', 'scenes/Main.csd')
    assert str(info.value).startswith('scenes/Main.csd: ')


def test_reader_missing_file_raises(tmp_path):
    with pytest.raises(ParseError, match='does not exist'):
        CSDReader(tmp_path / 'missing.csd').read()


def test_reader_reads_file(tmp_path):
    csd_file = tmp_path / 'Main.csd'
    csd_file.write_bytes(csd_bytes(root_object(), kind='Scene', name='Main'))

    document = CSDReader(csd_file).read()
    assert document.name == 'Main'
    assert document.file_path == str(csd_file)


def test_source_node_defaults():
    node = parse_document(csd_bytes(root_object())).object_data
    assert node.get('Missing', 'fallback') == 'fallback'
    assert node.get_int('X', 7, 'NoSuchChild') == 7
    assert node.get_bool('TouchEnable') is False
    assert node.name == 'Root'


def test_reader_factory():
    assert isinstance(create_reader('a/Main.csd'), CSDReader)
    assert isinstance(create_reader('a/Game.CCS'), ProjectReader)
    assert get_file_type('x.csd') == 'document'
    assert get_file_type('x.ccs') == 'project'
    assert get_file_type('x.abc') == 'unknown'
    with pytest.raises(ValueError):
        create_reader('scene.fire')
