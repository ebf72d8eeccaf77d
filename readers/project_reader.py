#!/usr/bin/env python3
"""
Project Reader Module
Reads a Cocos Studio project (.ccs) and lists the files it references.

The project's resource tree lives in `<project dir>/cocosstudio`. Besides the
.csd documents, resources may pull in dependent files: a bitmap font page
image, a particle texture, tileset images of a TMX map.
"""

import plistlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from core.diagnostics import DiagnosticLog
from core.errors import ParseError

from .base_reader import BaseReader, parse_xml

FNT_PAGE_EXP = re.compile(r'^page [^\n]*', re.IGNORECASE | re.MULTILINE)
FNT_ITEM_EXP = re.compile(r'(\w+)=([^ \r\n]+)')

DEFAULT_RESOURCE_FOLDER = 'cocosstudio'


@dataclass
class ProjectInfo:
    """Contents of a .ccs project

    Attributes:
        name: Project name (also the target folder name)
        version: Cocos Studio version that saved the project
        project_dir: Directory containing the .ccs file
        resource_root: Resource directory all relative paths refer to
        folders: Resource sub-folders, relative to resource_root
        csd_files: Absolute paths of the project's documents, in listing order
        resource_files: Absolute paths of plain resources to import, unique, in listing order
    """
    name: str
    version: str
    project_dir: Path
    resource_root: Path
    folders: List[Path] = field(default_factory=list)
    csd_files: List[Path] = field(default_factory=list)
    resource_files: List[Path] = field(default_factory=list)

    def add_resource(self, path):
        path = Path(path)
        if path not in self.resource_files:
            self.resource_files.append(path)


class ProjectReader(BaseReader):
    """Reads a .ccs project file"""

    def __init__(self, file_path, diagnostics: Optional[DiagnosticLog] = None,
                 resource_folder=DEFAULT_RESOURCE_FOLDER, progress_callback=None):
        super().__init__(file_path, progress_callback)
        self.diagnostics = diagnostics or DiagnosticLog(progress_callback)
        self.resource_folder = resource_folder

    def get_format_name(self):
        return "Cocos Studio Project"

    def read(self) -> ProjectInfo:
        """Parse the project and walk its resource listing

        Raises:
            ParseError: Resource directory missing or malformed project file
        """
        project_dir = self.file_path.parent
        resource_root = project_dir / self.resource_folder
        if not resource_root.is_dir():
            raise ParseError(f"Resource directory {resource_root} does not exist", str(self.file_path))

        root = parse_xml(self._read_bytes(), str(self.file_path))
        property_group = next(root.iter('PropertyGroup'), None)
        if property_group is None:
            raise ParseError("Illegal format of project file", str(self.file_path))

        info = ProjectInfo(
            name=property_group.get('Name', '') or self.file_path.stem,
            version=property_group.get('Version', ''),
            project_dir=project_dir,
            resource_root=resource_root,
        )
        self.log(f"Project Name : {info.name}, Cocos Studio Version : {info.version}")

        root_folder = self._find_root_folder(root)
        if root_folder is None:
            raise ParseError("Illegal format of project file", str(self.file_path))
        self._walk_folder(root_folder, resource_root, info)
        return info

    def _find_root_folder(self, root):
        solution = next(root.iter('SolutionFolder'), None)
        group = next(solution.iter('Group'), None) if solution is not None else None
        return next(group.iter('RootFolder'), None) if group is not None else None

    def _walk_folder(self, folder, folder_path, info):
        for child in folder:
            if not isinstance(child.tag, str):
                continue

            file_path = folder_path / child.get('Name', '')
            tag = child.tag
            if tag == 'Folder':
                info.folders.append(file_path.relative_to(info.resource_root))
                self._walk_folder(child, file_path, info)
            elif tag == 'Project':
                info.csd_files.append(file_path)
            elif tag == 'PlistInfo':
                # csi file, nothing to import
                continue
            elif tag in ('Image', 'TTF', 'Audio'):
                self._add_existing(file_path, info)
            elif tag == 'PlistImageFolder':
                self._add_existing(folder_path / child.get('PListFile', ''), info)
                self._add_existing(folder_path / child.get('Image', ''), info)
            elif tag == 'Fnt':
                self._add_fnt(file_path, info)
            elif tag == 'PlistParticleFile':
                self._add_particle(file_path, info)
            elif tag == 'TmxFile':
                self._add_tmx(file_path, info)

    def _add_existing(self, path, info):
        if not path.is_file():
            self.diagnostics.warn(f"{path} is not found!", field='resource')
            return False
        info.add_resource(path)
        return True

    def _add_fnt(self, fnt_file, info):
        if not self._add_existing(fnt_file, info):
            return

        content = fnt_file.read_text(encoding='utf-8', errors='replace')
        page = FNT_PAGE_EXP.search(content)
        if not page:
            self.diagnostics.warn(f"Get \"page\" config from fnt file {fnt_file} failed!", field='page')
            return

        page_items = {}
        for key, value in FNT_ITEM_EXP.findall(page.group(0)):
            if value.startswith('"'):
                value = value.strip('"')
            page_items[key] = value

        image_file = page_items.get('file')
        if image_file:
            self._add_existing(fnt_file.parent / image_file, info)
        else:
            self.diagnostics.warn(f"Get image file config from fnt file {fnt_file} failed!", field='file')

    def _add_particle(self, particle_file, info):
        if not self._add_existing(particle_file, info):
            return
        try:
            with open(particle_file, 'rb') as f:
                config = plistlib.load(f)
        except (plistlib.InvalidFileException, ValueError) as e:
            self.diagnostics.warn(f"Parse {particle_file} failed: {e}", field='plist')
            return

        texture = config.get('textureFileName') if isinstance(config, dict) else None
        if texture and (particle_file.parent / texture).is_file():
            info.add_resource(particle_file.parent / texture)

    def _add_tmx(self, tmx_file, info):
        if not self._add_existing(tmx_file, info):
            return
        try:
            root = parse_xml(tmx_file.read_bytes(), str(tmx_file))
        except ParseError as e:
            self.diagnostics.warn(str(e), field='tmx')
            return

        for tileset in root.iter('tileset'):
            source_tsx = tileset.get('source')
            if source_tsx:
                tsx_path = tmx_file.parent / source_tsx
                if self._add_existing(tsx_path, info):
                    try:
                        tsx_root = parse_xml(tsx_path.read_bytes(), str(tsx_path))
                    except ParseError as e:
                        self.diagnostics.warn(str(e), field='tsx')
                    else:
                        self._add_tileset_images(tsx_root, tsx_path, info)
            self._add_tileset_images(tileset, tmx_file, info)

    def _add_tileset_images(self, tileset, source_path, info):
        for image in tileset.iter('image'):
            image_source = image.get('source')
            if image_source:
                self._add_existing(source_path.parent / image_source, info)
