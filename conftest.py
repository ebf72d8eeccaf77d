"""
Shared pytest fixtures: an in-memory asset database and .csd document builders
"""

from pathlib import Path

import pytest

from builders.context import ConversionContext
from core.asset_db import (
    BaseAssetImporter, BaseAssetResolver, LocalAssetDatabase, url_join, uuid_for_url,
)
from core.diagnostics import DiagnosticLog
from core.scene_data import AssetRef
from core.settings import ConversionSettings
from readers.csd_reader import parse_document

RESOURCE_URL = 'db://assets/proj'


class MemoryAssetDB(BaseAssetResolver, BaseAssetImporter):
    """Asset database that only tracks urls and metadata in memory"""

    def __init__(self, urls=()):
        self._urls = {}
        self.meta = {}
        self.imported = []
        for url in list(urls) + LocalAssetDatabase.BUILTIN_SPRITE_URLS:
            self.add(url)

    def add(self, url, meta=None):
        ref = AssetRef(uuid_for_url(url))
        self._urls[ref.uuid] = url
        if meta is not None:
            self.meta[ref.uuid] = dict(meta)
        return ref

    def resolve_handle(self, url):
        ref = AssetRef(uuid_for_url(url)) if url else None
        return ref if ref is not None and ref.uuid in self._urls else None

    def handle_exists(self, ref):
        return ref is not None and ref.uuid in self._urls

    def read_metadata(self, ref):
        if ref.uuid not in self._urls:
            return None
        return dict(self.meta.get(ref.uuid, {}))

    def write_metadata(self, ref, metadata):
        self.meta[ref.uuid] = dict(metadata)

    def url_of(self, ref):
        return self._urls.get(ref.uuid)

    def import_paths(self, paths, target_url):
        urls = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                for file_path in sorted(path.rglob('*')):
                    if file_path.is_file():
                        urls.append(url_join(target_url, path.name, file_path.relative_to(path).as_posix()))
            else:
                urls.append(url_join(target_url, path.name))
        for url in urls:
            self.add(url)
        self.imported.extend(urls)
        return urls


def csd_bytes(object_data, kind='Node', name='Test', animation='', animation_list=''):
    """Wrap an ObjectData element (and optional animation sections) in a .csd document"""
    return f"""<GameFile>
  <PropertyGroup Name="{name}" Type="{kind}" ID="00000000" Version="3.10.0.0" />
  <Content ctype="GameProjectContent">
    <Content>
      {animation}
      {animation_list}
      {object_data}
    </Content>
  </Content>
</GameFile>""".encode('utf-8')


def root_object(children='', ctype='GameNodeObjectData', name='Root'):
    return f"""<ObjectData Name="{name}" ctype="{ctype}">
        <Size X="960.0" Y="640.0" />
        <Children>{children}</Children>
      </ObjectData>"""


@pytest.fixture
def asset_db():
    return MemoryAssetDB()


@pytest.fixture
def make_context(asset_db):
    def factory(**kwargs):
        kwargs.setdefault('resolver', asset_db)
        kwargs.setdefault('settings', ConversionSettings())
        kwargs.setdefault('diagnostics', DiagnosticLog())
        kwargs.setdefault('resource_root', Path('/project/cocosstudio'))
        kwargs.setdefault('resource_url', RESOURCE_URL)
        return ConversionContext(**kwargs)
    return factory


@pytest.fixture
def make_document():
    def factory(children='', kind='Node', animation='', animation_list='', ctype='GameNodeObjectData'):
        return parse_document(csd_bytes(root_object(children, ctype), kind,
                                        animation=animation, animation_list=animation_list))
    return factory
