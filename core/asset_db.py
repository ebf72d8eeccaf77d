#!/usr/bin/env python3
"""
Asset Database Module
Interfaces of the asset resolver / importer collaborators, plus a local
file-backed implementation used by the command line tool and the tests.

Urls follow the target editor convention: `db://assets/<relative path>` for
project assets, `<asset url>/<sub asset name>` for sub-assets (sprite frames
of an image or of a sprite-sheet plist) and `db://internal/...` for built-in
assets. Handles are AssetRef instances wrapping a uuid derived from the url,
so re-importing an unchanged tree yields the same handles.
"""

import json
import plistlib
import re
import shutil
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from PIL import Image

from .errors import ArtifactWriteError
from .scene_data import AssetRef
from .settings import (
    INTERNAL_URL_PREFIX,
    DEFAULT_SPRITE_URL, DEFAULT_SPLASH_SPRITE_URL, DEFAULT_PARTICLE_URL,
    DEFAULT_BTN_NORMAL_URL, DEFAULT_BTN_PRESSED_URL, DEFAULT_BTN_DISABLED_URL,
    DEFAULT_PROGRESSBAR_URL, DEFAULT_VSCROLLBAR_URL, DEFAULT_HSCROLLBAR_URL,
    DEFAULT_PANEL_URL,
)

IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.webp', '.bmp'}
META_EXTENSION = '.meta'

FNT_INFO_SIZE_EXP = re.compile(r'^info .*?\bsize=(-?\d+)', re.MULTILINE)
FNT_COMMON_HEIGHT_EXP = re.compile(r'^common .*?\blineHeight=(\d+)', re.MULTILINE)


def url_join(*parts):
    """Join url segments with '/', ignoring empty and '.' segments"""
    segments = []
    for i, part in enumerate(parts):
        part = str(part).replace('\\', '/')
        if i > 0:
            part = part.strip('/')
        else:
            part = part.rstrip('/')
        if part and part != '.':
            segments.append(part)
    return '/'.join(segments)


def url_basename_no_ext(url):
    name = url.rstrip('/').rsplit('/', 1)[-1]
    return name.rsplit('.', 1)[0] if '.' in name else name


def uuid_for_url(url):
    return str(uuid.uuid5(uuid.NAMESPACE_URL, url))


class BaseAssetResolver(ABC):
    """Url <-> handle resolution and asset metadata access"""

    @abstractmethod
    def resolve_handle(self, url: str) -> Optional[AssetRef]:
        """Return the handle of the asset at `url`, or None if unknown"""
        pass

    @abstractmethod
    def handle_exists(self, ref: Optional[AssetRef]) -> bool:
        pass

    @abstractmethod
    def read_metadata(self, ref: AssetRef) -> Optional[Dict]:
        """Return a copy of the asset's metadata, or None"""
        pass

    @abstractmethod
    def write_metadata(self, ref: AssetRef, metadata: Dict):
        pass

    def url_of(self, ref: AssetRef) -> Optional[str]:
        return None


class BaseAssetImporter(ABC):
    """Copies/registers files into the asset database"""

    @abstractmethod
    def import_paths(self, paths: List, target_url: str) -> List[str]:
        """Import files or folders under `target_url`

        Returns:
            list: Urls of every registered asset (sub-assets included)

        Raises:
            ArtifactWriteError: Target outside the database, or copy failure
        """
        pass


class LocalAssetDatabase(BaseAssetResolver, BaseAssetImporter):
    """Asset database backed by a plain directory

    `assets_dir` maps to `root_url`. Metadata is stored as JSON next to each
    file (`<file>.meta`), sub-asset metadata under its `subMetas` key.
    Built-in assets are registered in memory only.
    """

    BUILTIN_SPRITE_URLS = [
        DEFAULT_SPRITE_URL, DEFAULT_SPLASH_SPRITE_URL, DEFAULT_BTN_NORMAL_URL,
        DEFAULT_BTN_PRESSED_URL, DEFAULT_BTN_DISABLED_URL, DEFAULT_PROGRESSBAR_URL,
        DEFAULT_VSCROLLBAR_URL, DEFAULT_HSCROLLBAR_URL, DEFAULT_PANEL_URL,
    ]

    def __init__(self, assets_dir, root_url='db://assets'):
        self.assets_dir = Path(assets_dir)
        self.root_url = root_url.rstrip('/')
        self._url_to_uuid: Dict[str, str] = {}
        self._uuid_to_url: Dict[str, str] = {}
        self._builtin_meta: Dict[str, Dict] = {}
        self._register_builtins()
        self.refresh()

    # ---------- resolver ----------

    def resolve_handle(self, url):
        if not url:
            return None
        asset_uuid = self._url_to_uuid.get(url)
        return AssetRef(asset_uuid) if asset_uuid else None

    def handle_exists(self, ref):
        return ref is not None and ref.uuid in self._uuid_to_url

    def url_of(self, ref):
        return self._uuid_to_url.get(ref.uuid) if ref else None

    def fspath(self, url) -> Optional[Path]:
        """Filesystem path of a project asset url (None for built-ins)"""
        if url == self.root_url:
            return self.assets_dir
        prefix = self.root_url + '/'
        if not url.startswith(prefix):
            return None
        return self.assets_dir / url[len(prefix):]

    def read_metadata(self, ref):
        url = self.url_of(ref)
        if url is None:
            return None
        if url.startswith(INTERNAL_URL_PREFIX):
            return dict(self._builtin_meta.get(url, {'uuid': ref.uuid}))

        owner_url, sub_name = self._split_sub_asset(url)
        meta = self._load_meta(owner_url)
        if meta is None:
            return None
        if sub_name is not None:
            return dict(meta.get('subMetas', {}).get(sub_name, {}))
        return meta

    def write_metadata(self, ref, metadata):
        url = self.url_of(ref)
        if url is None:
            raise KeyError(f"Unknown asset: {ref.uuid}")
        if url.startswith(INTERNAL_URL_PREFIX):
            raise PermissionError(f"Built-in asset metadata is read-only: {url}")

        owner_url, sub_name = self._split_sub_asset(url)
        meta = self._load_meta(owner_url) or {'uuid': uuid_for_url(owner_url)}
        if sub_name is not None:
            meta.setdefault('subMetas', {})[sub_name] = dict(metadata)
        else:
            meta = dict(metadata)
        self._save_meta(owner_url, meta)

    # ---------- importer ----------

    def import_paths(self, paths, target_url):
        target_dir = self.fspath(target_url)
        if target_dir is None:
            raise ArtifactWriteError(f"Cannot import outside {self.root_url}: {target_url}")

        imported = []
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            for src in paths:
                src = Path(src)
                dst = target_dir / src.name
                if src.is_dir():
                    shutil.copytree(src, dst, dirs_exist_ok=True)
                    for file_path in sorted(dst.rglob('*')):
                        if file_path.is_file() and file_path.suffix != META_EXTENSION:
                            imported.extend(self._register_file(file_path))
                elif src.is_file():
                    if src.resolve() != dst.resolve():
                        shutil.copy2(src, dst)
                    imported.extend(self._register_file(dst))
        except (OSError, shutil.Error) as e:
            raise ArtifactWriteError(f"Cannot import into {target_url}: {e}") from e
        return imported

    def refresh(self):
        """Register every file already present in the assets directory"""
        if not self.assets_dir.is_dir():
            return
        for file_path in sorted(self.assets_dir.rglob('*')):
            if file_path.is_file() and file_path.suffix != META_EXTENSION:
                self._register_file(file_path)

    # ---------- internals ----------

    def _register_builtins(self):
        for url in self.BUILTIN_SPRITE_URLS:
            self._register_url(url)
            self._builtin_meta[url] = {'uuid': uuid_for_url(url), 'rawWidth': 40, 'rawHeight': 36}
        self._register_url(DEFAULT_PARTICLE_URL)

    def _register_url(self, url):
        asset_uuid = uuid_for_url(url)
        self._url_to_uuid[url] = asset_uuid
        self._uuid_to_url[asset_uuid] = url
        return url

    def _url_for_file(self, file_path):
        relative = Path(file_path).relative_to(self.assets_dir).as_posix()
        return url_join(self.root_url, relative)

    def _split_sub_asset(self, url):
        # Sub-asset urls extend a registered file url by one segment
        parent, _, name = url.rpartition('/')
        if parent in self._url_to_uuid and self.fspath(parent) is not None \
                and self.fspath(parent).is_file():
            return parent, name
        return url, None

    def _register_file(self, file_path):
        url = self._register_url(self._url_for_file(file_path))
        meta = self._load_meta(url) or {'uuid': uuid_for_url(url)}
        registered = [url]

        suffix = file_path.suffix.lower()
        sub_metas = meta.setdefault('subMetas', {})
        if suffix in IMAGE_EXTENSIONS:
            frame_name = file_path.stem
            sub_metas.setdefault(frame_name, self._sprite_frame_meta(url_join(url, frame_name), file_path))
            registered.append(self._register_url(url_join(url, frame_name)))
        elif suffix == '.plist':
            for frame_name in self._plist_frame_names(file_path):
                sub_url = url_join(url, frame_name)
                sub_metas.setdefault(frame_name, {'uuid': uuid_for_url(sub_url)})
                registered.append(self._register_url(sub_url))
        elif suffix == '.fnt':
            meta.update(self._fnt_config(file_path))

        self._save_meta(url, meta)
        return registered

    def _sprite_frame_meta(self, url, image_path):
        meta = {
            'uuid': uuid_for_url(url),
            'rawWidth': 0,
            'rawHeight': 0,
            'trimThreshold': 1,
            'borderTop': 0,
            'borderBottom': 0,
            'borderLeft': 0,
            'borderRight': 0,
        }
        try:
            with Image.open(image_path) as img:
                meta['rawWidth'], meta['rawHeight'] = img.size
        except OSError:
            pass
        return meta

    def _plist_frame_names(self, plist_path):
        try:
            with open(plist_path, 'rb') as f:
                data = plistlib.load(f)
        except (OSError, plistlib.InvalidFileException, ValueError):
            return []
        frames = data.get('frames') if isinstance(data, dict) else None
        if not isinstance(frames, dict):
            return []
        return [name.replace('/', '-').replace('\\', '-') for name in sorted(frames)]

    def _fnt_config(self, fnt_path):
        content = Path(fnt_path).read_text(encoding='utf-8', errors='replace')
        config = {}
        size_match = FNT_INFO_SIZE_EXP.search(content)
        if size_match:
            config['fontSize'] = abs(int(size_match.group(1)))
        height_match = FNT_COMMON_HEIGHT_EXP.search(content)
        if height_match:
            config['commonHeight'] = int(height_match.group(1))
        return config

    def _meta_path(self, url):
        path = self.fspath(url)
        return path.with_name(path.name + META_EXTENSION) if path is not None else None

    def _load_meta(self, url):
        meta_path = self._meta_path(url)
        if meta_path is None or not meta_path.is_file():
            return None
        with open(meta_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _save_meta(self, url, meta):
        meta_path = self._meta_path(url)
        with open(meta_path, 'w', encoding='utf-8') as f:
            json.dump(meta, f, indent=2, sort_keys=True)
