#!/usr/bin/env python3
"""
Cocos Studio Converter - Main Orchestrator Module
Coordinates project import, document conversion and artifact registration

Per document:
1. Read the .csd (document-fatal ParseError skips it, the batch continues)
2. Build the scene / prefab node tree (referenced documents are converted first)
3. Extract the timeline, cut one clip per action range, write and import them
4. Attach an Animation component listing the imported clips
5. Write the .fire / .prefab artifact and import it

Artifact write failures (ArtifactWriteError) abort the whole run.
"""

import copy
import shutil
import tempfile
from pathlib import Path

from readers import CSDReader, ProjectReader, get_file_type
from builders import ConversionContext, build_prefab, build_scene
from animation import TimelineExtractor, build_action_ranges, segment_clips
from animation.clips import read_speed
from exporters import ClipExporter, PREFAB, SCENE, SceneExporter
from core.asset_db import url_join
from core.diagnostics import DiagnosticLog
from core.errors import ArtifactWriteError, ConversionError, CyclicReferenceError, ParseError
from core.scene_data import Animation, PrefabRef
from core.settings import ConversionSettings


class CSDConverter:
    """Cocos Studio to Creator converter (orchestrator/facade)

    This class coordinates the conversion process:
    1. Stage and import the project's resources (via ProjectReader + asset importer)
    2. Convert every .csd document ONCE, in listing order (memoized by path)
    3. Export scenes/prefabs and animation clips (via SceneExporter / ClipExporter)

    A document referencing another document converts the referenced one first,
    synchronously. Reference cycles raise CyclicReferenceError at the
    referencing node, which falls back to an empty node.
    """

    def __init__(self, asset_db, settings=None, progress_callback=None, temp_dir=None):
        """Initialize converter

        Args:
            asset_db: Asset resolver + importer (e.g. LocalAssetDatabase)
            settings: ConversionSettings (defaults apply when None)
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
            temp_dir: Staging directory for converted artifacts
        """
        self.asset_db = asset_db
        self.settings = settings or ConversionSettings()
        self.progress_callback = progress_callback
        self.diagnostics = DiagnosticLog(progress_callback)
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()) / 'csd2creator'

        self.scene_exporter = SceneExporter(progress_callback)
        self.clip_exporter = ClipExporter(progress_callback)

        self.resource_root = Path('.')
        self.temp_root = self.temp_dir
        self.target_url = self.settings.target_url

        # path -> result dict; append-only for the whole run
        self.imported = {}
        # path -> built prefab root, instantiated by referencing documents
        self.prefab_roots = {}
        # documents being converted, outermost first
        self.in_progress = []

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    # ---------- entry points ----------

    def convert(self, input_file):
        """Convert a .ccs project or a single .csd document

        Returns:
            dict: Results with keys:
                - 'success': bool (every document converted)
                - 'aborted': True when a fatal error stopped the run
                - 'documents': list of per-document results
                - 'diagnostics': DiagnosticLog of the run
                - 'message': Summary message
        """
        input_path = Path(input_file)
        file_type = get_file_type(str(input_path))
        try:
            if file_type == 'project':
                results = self.import_project(input_path)
            elif file_type == 'document':
                # resources are expected to be imported under target_url already
                temp_root = self.temp_dir / input_path.stem
                self._reset_temp(temp_root)
                try:
                    documents = self.import_csd_files([input_path], input_path.parent,
                                                      temp_root, self.settings.target_url)
                finally:
                    self._remove_temp(temp_root)
                results = self._summarize(documents)
            else:
                raise ParseError(f"Unsupported file format: {input_path.suffix}", str(input_path))
        except ConversionError as e:
            self.diagnostics.error(str(e))
            return {
                'success': False,
                'aborted': True,
                'documents': [],
                'diagnostics': self.diagnostics,
                'message': f"Conversion failed: {e}"
            }

        self.log(f"\n{self.diagnostics.get_summary()}")
        return results

    def import_project(self, ccs_file):
        """Import a whole Cocos Studio project

        Raises:
            ParseError: Unreadable project file or missing resource directory
            ArtifactWriteError: An artifact could not be written
        """
        self.log(f"\n{'='*60}")
        self.log(f"Import Cocos Studio project : {ccs_file}")
        self.log(f"{'='*60}\n")

        reader = ProjectReader(ccs_file, self.diagnostics, self.settings.resource_folder,
                               self.progress_callback)
        info = reader.read()

        target_url = url_join(self.settings.assets_root_url, info.name)
        temp_root = self.temp_dir / info.name
        self._reset_temp(temp_root)
        try:
            self.log("Step 1/2: Importing resources...")
            self._stage_resources(info, temp_root)
            self.asset_db.import_paths([temp_root], self.settings.assets_root_url)

            self.log(f"\nStep 2/2: Converting {len(info.csd_files)} document(s)...")
            documents = self.import_csd_files(info.csd_files, info.resource_root, temp_root, target_url)
        finally:
            self._remove_temp(temp_root)

        results = self._summarize(documents)
        results['project'] = info.name
        self.log("Import Cocos Studio project finished.")
        self.log(f"Resources are imported to folder : {target_url}")
        return results

    def import_csd_files(self, csd_files, resource_root, temp_root, target_url):
        """Convert documents in order

        Args:
            csd_files: Paths of the .csd documents
            resource_root: Directory relative resource paths start from
            temp_root: Staging directory mirroring resource_root
            target_url: Url resource_root was imported to

        Returns:
            list: Per-document result dicts
        """
        self.resource_root = Path(resource_root).resolve()
        self.temp_root = Path(temp_root)
        self.target_url = target_url
        return [self.import_csd_file(csd_file) for csd_file in csd_files]

    def import_csd_file(self, csd_file):
        """Convert one document (once per run)

        Returns:
            dict: Results with keys:
                - 'success': bool
                - 'kind': 'scene' or 'prefab' (when parsed)
                - 'files': list of written artifact paths
                - 'urls': list of artifact urls (document first, then clips)
                - 'clips': list of clip names
                - 'message': Status message
        """
        csd_path = Path(csd_file).resolve()
        if csd_path in self.imported:
            return self.imported[csd_path]

        self.log(f"Importing csd file : {csd_path}")
        previous_document = self.diagnostics.document
        self.diagnostics.document = str(csd_path)
        try:
            try:
                document = CSDReader(csd_path, self.progress_callback).read()
            except ParseError as e:
                self.diagnostics.error(str(e))
                result = {
                    'success': False,
                    'files': [],
                    'urls': [],
                    'clips': [],
                    'message': f"Skipped {csd_path.name}: {e}"
                }
            else:
                self.in_progress.append(csd_path)
                try:
                    result = self._convert_document(document, csd_path)
                finally:
                    self.in_progress.remove(csd_path)
            self.imported[csd_path] = result
            return result
        finally:
            self.diagnostics.document = previous_document

    def instantiate(self, csd_file):
        """Convert a referenced document if needed and return a new instance of its prefab

        Raises:
            CyclicReferenceError: The document is already being converted
        """
        csd_path = Path(csd_file).resolve()
        if csd_path in self.in_progress:
            chain = [p.name for p in self.in_progress[self.in_progress.index(csd_path):]]
            raise CyclicReferenceError(chain + [csd_path.name])

        result = self.import_csd_file(csd_path)
        template = self.prefab_roots.get(csd_path)
        if not result.get('success') or template is None:
            return None

        ref = self.asset_db.resolve_handle(result['urls'][0])
        if ref is None:
            return None

        instance = copy.deepcopy(template)
        instance.add_component(PrefabRef(asset=ref, source_path=self._relative(csd_path).as_posix()))
        return instance

    # ---------- artifact naming ----------

    def _relative(self, csd_path):
        try:
            return csd_path.relative_to(self.resource_root)
        except ValueError:
            return Path(csd_path.name)

    def document_artifact_path(self, csd_path, is_scene):
        ext = self.settings.scene_extension if is_scene else self.settings.prefab_extension
        relative = self._relative(Path(csd_path))
        return self.temp_root / relative.parent / (relative.stem + ext)

    def action_folder_path(self, csd_path):
        relative = self._relative(Path(csd_path))
        return self.temp_root / relative.parent / (relative.stem + self.settings.action_folder_suffix)

    def artifact_url(self, artifact_path):
        return url_join(self.target_url, Path(artifact_path).relative_to(self.temp_root).as_posix())

    def artifact_paths(self, csd_path, is_scene, range_names=()):
        """Artifact paths of a document, relative to the staging root

        Depends only on the document's path relative to the resource root and
        its range names, so converting an unchanged tree twice yields the same set.
        """
        paths = [self.document_artifact_path(csd_path, is_scene)]
        action_folder = self.action_folder_path(csd_path)
        paths.extend(action_folder / (name + self.settings.clip_extension) for name in range_names)
        return [p.relative_to(self.temp_root) for p in paths]

    # ---------- conversion ----------

    def _convert_document(self, document, csd_path):
        ctx = ConversionContext(
            resolver=self.asset_db,
            settings=self.settings,
            diagnostics=self.diagnostics,
            resource_root=self.resource_root,
            resource_url=self.target_url,
            import_document=self.instantiate,
        )

        if document.is_scene:
            container, root = build_scene(document, ctx)
        else:
            container, root = build_prefab(document, ctx)

        TimelineExtractor(ctx).extract(document.content)
        ranges = build_action_ranges(document.content, csd_path.stem)
        clip_results = self._export_clips(csd_path, ranges, ctx, root, read_speed(document.content))

        artifact = self.document_artifact_path(csd_path, document.is_scene)
        kind = SCENE if document.is_scene else PREFAB
        export_result = self.scene_exporter.export(container, artifact, kind)
        artifact_url = self.artifact_url(artifact)
        self.asset_db.import_paths([artifact], artifact_url.rsplit('/', 1)[0])

        if not document.is_scene:
            self.prefab_roots[csd_path] = root

        files = export_result['files'] + [f for r in clip_results for f in r['files']]
        return {
            'success': True,
            'kind': kind,
            'files': files,
            'urls': [artifact_url] + [r['url'] for r in clip_results],
            'clips': [r['name'] for r in clip_results],
            'message': f"{csd_path.name} -> {artifact_url}"
        }

    def _export_clips(self, csd_path, ranges, ctx, root, speed):
        if not ranges:
            return []

        action_folder = self.action_folder_path(csd_path)
        results = []
        for clip in segment_clips(ranges, ctx.curves, self.settings.fps, speed):
            clip_file = action_folder / (clip.name + self.settings.clip_extension)
            result = self.clip_exporter.export(clip, clip_file)
            result['name'] = clip.name
            result['url'] = self.artifact_url(clip_file)
            results.append(result)

        folder_url = self.artifact_url(action_folder.parent)
        self.asset_db.import_paths([action_folder], folder_url)

        animation = root.add_component(Animation())
        if animation is None:
            self.diagnostics.warn("Add Animation component failed.", node=root.name, field='Animation')
            return results

        for result in results:
            ref = self.asset_db.resolve_handle(result['url'])
            if ref is None:
                continue
            animation.add_clip(ref, result['name'])
        return results

    # ---------- staging ----------

    def _stage_resources(self, info, temp_root):
        try:
            for folder in info.folders:
                (temp_root / folder).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteError(f"Cannot create staging folder under {temp_root}: {e}") from e
        for resource in info.resource_files:
            try:
                target = temp_root / resource.resolve().relative_to(info.resource_root.resolve())
            except ValueError:
                self.diagnostics.warn(f"{resource} is outside the resource directory, skipped.",
                                      field='resource')
                continue
            if target.exists():
                continue
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(resource, target)
            except OSError as e:
                raise ArtifactWriteError(f"Cannot stage {resource}: {e}") from e

    def _reset_temp(self, temp_root):
        try:
            if temp_root.exists():
                shutil.rmtree(temp_root)
            temp_root.mkdir(parents=True)
        except OSError as e:
            raise ArtifactWriteError(f"Cannot prepare staging folder {temp_root}: {e}") from e

    def _remove_temp(self, temp_root):
        try:
            shutil.rmtree(temp_root)
        except OSError:
            self.diagnostics.warn(f"Delete temp path {temp_root} failed, please delete it manually!")

    def _summarize(self, documents):
        converted = sum(1 for r in documents if r.get('success'))
        return {
            'success': converted == len(documents),
            'aborted': False,
            'documents': documents,
            'diagnostics': self.diagnostics,
            'message': f"Converted {converted}/{len(documents)} document(s)"
        }
