#!/usr/bin/env python3
"""
Scene Data Module
Format-agnostic data structures for scene conversion.

This module defines the intermediate data structures that decouple the
document reader (Cocos Studio .csd XML) from the exporters (scene, prefab and
animation clip JSON). The reader produces SourceNode trees, the builders
turn them into TargetNode trees with attached Components, and the animation
extractor fills a CurveAccumulator that is later sliced into clips.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Source side
# ---------------------------------------------------------------------------

@dataclass
class SourceNode:
    """Single element of a parsed source document

    Attributes:
        type_tag: XML element name (e.g. "AbstractNodeData", "Size")
        attributes: Raw attribute values keyed by attribute name
        children: Child elements in document order
    """
    type_tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List['SourceNode'] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.attributes.get('Name', '')

    @property
    def ctype(self) -> str:
        """Node type tag used by the dispatch tables (the `ctype` attribute)"""
        return self.attributes.get('ctype', '')

    def first_child(self, name: str) -> Optional['SourceNode']:
        for child in self.children:
            if child.type_tag == name:
                return child
        return None

    def children_named(self, name: str) -> List['SourceNode']:
        return [child for child in self.children if child.type_tag == name]

    def get(self, attr: str, default: Any = None, child: Optional[str] = None) -> Any:
        """Read an attribute, optionally from the first child element named `child`

        Missing elements, missing attributes and empty strings all read as
        `default`.
        """
        node = self.first_child(child) if child else self
        if node is None:
            return default
        value = node.attributes.get(attr)
        if not value:
            return default
        return value

    def get_int(self, attr: str, default: Any = 0, child: Optional[str] = None) -> Any:
        value = self.get(attr, default, child)
        if isinstance(value, str):
            try:
                return int(float(value))
            except ValueError:
                return default
        return value

    def get_float(self, attr: str, default: Any = 0.0, child: Optional[str] = None) -> Any:
        value = self.get(attr, default, child)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return default
        return value

    def get_bool(self, attr: str, default: bool = False, child: Optional[str] = None) -> bool:
        value = self.get(attr, default, child)
        if isinstance(value, str):
            return value.lower() == 'true'
        return value


@dataclass(frozen=True)
class SourceDocument:
    """Parsed .csd document

    Attributes:
        kind: Declared document type ("Scene", "Node" or "Layer")
        name: Document name from the PropertyGroup
        version: Authoring tool version string
        content: Inner Content element (holds ObjectData, Animation, AnimationList)
        file_path: Absolute path of the source file, if read from disk
    """
    kind: str
    name: str
    version: str
    content: SourceNode
    file_path: Optional[str] = None

    @property
    def object_data(self) -> Optional[SourceNode]:
        return self.content.first_child('ObjectData')

    @property
    def is_scene(self) -> bool:
        return self.kind == 'Scene'


# ---------------------------------------------------------------------------
# Target side: enums
# ---------------------------------------------------------------------------

class SizeMode(Enum):
    CUSTOM = 0
    TRIMMED = 1
    RAW = 2


class SpriteType(Enum):
    SIMPLE = 0
    SLICED = 1
    TILED = 2
    FILLED = 3


class FillType(Enum):
    HORIZONTAL = 0
    VERTICAL = 1
    RADIAL = 2


class HorizontalAlign(Enum):
    LEFT = 0
    CENTER = 1
    RIGHT = 2


class VerticalAlign(Enum):
    TOP = 0
    CENTER = 1
    BOTTOM = 2


class Overflow(Enum):
    NONE = 0
    CLAMP = 1
    SHRINK = 2
    RESIZE_HEIGHT = 3


class ButtonTransition(Enum):
    NONE = 0
    COLOR = 1
    SPRITE = 2
    SCALE = 3


class ProgressMode(Enum):
    HORIZONTAL = 0
    VERTICAL = 1
    FILLED = 2


class InputFlag(Enum):
    PASSWORD = 0
    SENSITIVE = 1
    INITIAL_CAPS_WORD = 2
    INITIAL_CAPS_SENTENCE = 3
    INITIAL_CAPS_ALL_CHARACTERS = 4
    DEFAULT = 5


class InputMode(Enum):
    ANY = 0
    EMAIL_ADDR = 1
    NUMERIC = 2
    PHONE_NUMBER = 3
    URL = 4
    DECIMAL = 5
    SINGLE_LINE = 6


class StudioType(Enum):
    """Widget kinds carried by the generic StudioComponent"""
    CHECKBOX = 0
    TEXT_ATLAS = 1
    SLIDER_BAR = 2
    LIST_VIEW = 3
    PAGE_VIEW = 4


class ListDirection(Enum):
    VERTICAL = 0
    HORIZONTAL = 1


class ScrollbarDirection(Enum):
    HORIZONTAL = 0
    VERTICAL = 1


class BlendFactor(Enum):
    ONE = 1
    ZERO = 0
    SRC_ALPHA = 770
    ONE_MINUS_SRC_ALPHA = 771


# ---------------------------------------------------------------------------
# Target side: asset references and components
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AssetRef:
    """Opaque handle to an asset known to the asset database"""
    uuid: str


class Component:
    """Base class for all components attached to a TargetNode

    Subclasses are dataclasses; `to_dict()` serializes their fields with
    enum members flattened to their values.
    """
    TYPE_NAME = 'cc.Component'
    ALLOW_MULTIPLE = False

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            data[f.name] = _plain(getattr(self, f.name))
        return data


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass
class Canvas(Component):
    TYPE_NAME = 'cc.Canvas'
    design_resolution: Tuple[float, float] = (960.0, 640.0)
    fit_height: bool = True
    fit_width: bool = False


@dataclass
class Camera(Component):
    TYPE_NAME = 'cc.Camera'
    depth: int = -1


@dataclass
class Sprite(Component):
    TYPE_NAME = 'cc.Sprite'
    sprite_frame: Optional[AssetRef] = None
    type: SpriteType = SpriteType.SIMPLE
    size_mode: SizeMode = SizeMode.TRIMMED
    trim: bool = True
    fill_type: FillType = FillType.HORIZONTAL
    fill_start: float = 0.0
    src_blend_factor: int = BlendFactor.SRC_ALPHA.value
    dst_blend_factor: int = BlendFactor.ONE_MINUS_SRC_ALPHA.value


@dataclass
class Label(Component):
    TYPE_NAME = 'cc.Label'
    string: str = ''
    font: Optional[AssetRef] = None
    font_size: int = 40
    line_height: float = 40.0
    horizontal_align: HorizontalAlign = HorizontalAlign.LEFT
    vertical_align: VerticalAlign = VerticalAlign.TOP
    overflow: Overflow = Overflow.NONE
    use_original_size: bool = True


@dataclass
class Button(Component):
    TYPE_NAME = 'cc.Button'
    interactable: bool = True
    transition: ButtonTransition = ButtonTransition.NONE
    normal_sprite: Optional[AssetRef] = None
    hover_sprite: Optional[AssetRef] = None
    pressed_sprite: Optional[AssetRef] = None
    disabled_sprite: Optional[AssetRef] = None


@dataclass
class ProgressBar(Component):
    TYPE_NAME = 'cc.ProgressBar'
    mode: ProgressMode = ProgressMode.HORIZONTAL
    reverse: bool = False
    total_length: float = 1.0
    progress: float = 0.0
    has_bar_sprite: bool = False


@dataclass
class EditBox(Component):
    TYPE_NAME = 'cc.EditBox'
    string: str = ''
    placeholder: str = ''
    font_size: int = 20
    font_color: Tuple[int, int, int, int] = (255, 255, 255, 255)
    line_height: float = 0.0
    max_length: int = -1
    input_flag: InputFlag = InputFlag.DEFAULT
    input_mode: InputMode = InputMode.ANY
    use_original_size: bool = False


@dataclass
class Mask(Component):
    TYPE_NAME = 'cc.Mask'
    enabled: bool = True


@dataclass
class StudioComponent(Component):
    """Catch-all component for Studio widgets without a native counterpart

    Only the fields relevant to `type` are filled in.
    """
    TYPE_NAME = 'cc.StudioComponent'
    type: StudioType = StudioType.CHECKBOX
    # checkbox
    check_normal_back_frame: Optional[AssetRef] = None
    check_pressed_back_frame: Optional[AssetRef] = None
    check_disable_back_frame: Optional[AssetRef] = None
    check_normal_frame: Optional[AssetRef] = None
    check_disable_frame: Optional[AssetRef] = None
    check_interactable: bool = True
    is_checked: bool = False
    # text atlas
    atlas_frame: Optional[AssetRef] = None
    first_char: str = '.'
    char_width: int = 0
    char_height: int = 0
    string: str = ''
    # slider
    slider_back_frame: Optional[AssetRef] = None
    slider_bar_frame: Optional[AssetRef] = None
    slider_btn_normal_frame: Optional[AssetRef] = None
    slider_btn_pressed_frame: Optional[AssetRef] = None
    slider_btn_disabled_frame: Optional[AssetRef] = None
    slider_interactable: bool = True
    slider_progress: float = 0.5
    # list view
    list_inertia: bool = True
    list_direction: ListDirection = ListDirection.VERTICAL
    list_horizontal_align: HorizontalAlign = HorizontalAlign.LEFT
    list_vertical_align: VerticalAlign = VerticalAlign.TOP
    list_padding: int = 0


@dataclass
class ScrollView(Component):
    TYPE_NAME = 'cc.ScrollView'
    inertia: bool = True
    vertical: bool = True
    horizontal: bool = False
    content: Optional['TargetNode'] = None
    vertical_scroll_bar: Optional['TargetNode'] = None
    horizontal_scroll_bar: Optional['TargetNode'] = None

    def to_dict(self):
        # node references are resolved by the exporter
        return {
            'inertia': self.inertia,
            'vertical': self.vertical,
            'horizontal': self.horizontal,
        }


@dataclass
class Scrollbar(Component):
    TYPE_NAME = 'cc.Scrollbar'
    direction: ScrollbarDirection = ScrollbarDirection.HORIZONTAL


@dataclass
class ParticleSystem(Component):
    TYPE_NAME = 'cc.ParticleSystem'
    file: Optional[AssetRef] = None
    custom: bool = True


@dataclass
class TiledMap(Component):
    TYPE_NAME = 'cc.TiledMap'
    tmx_file: Optional[AssetRef] = None


@dataclass
class AudioSource(Component):
    TYPE_NAME = 'cc.AudioSource'
    clip: Optional[AssetRef] = None


@dataclass
class StudioWidget(Component):
    """Edge-docking constraint (absolute margins or fractions of the parent size)"""
    TYPE_NAME = 'cc.StudioWidget'
    is_align_left: bool = False
    is_align_right: bool = False
    is_align_top: bool = False
    is_align_bottom: bool = False
    is_align_horizontal_center: bool = False
    is_align_vertical_center: bool = False
    is_absolute_left: bool = True
    is_absolute_right: bool = True
    is_absolute_top: bool = True
    is_absolute_bottom: bool = True
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0


@dataclass
class BlockInputEvents(Component):
    TYPE_NAME = 'cc.BlockInputEvents'


@dataclass
class Animation(Component):
    TYPE_NAME = 'cc.Animation'
    clips: List[AssetRef] = field(default_factory=list)
    clip_names: List[str] = field(default_factory=list)

    def add_clip(self, ref: AssetRef, name: str):
        self.clips.append(ref)
        self.clip_names.append(name)


@dataclass
class PrefabRef(Component):
    """Marks a node as an instance of an imported prefab"""
    TYPE_NAME = 'cc.PrefabInfo'
    asset: Optional[AssetRef] = None
    source_path: str = ''


# ---------------------------------------------------------------------------
# Target side: nodes
# ---------------------------------------------------------------------------

class TargetNode:
    """Node of the destination scene graph

    Owns its children and components. `parent` is maintained by add_child().
    """

    def __init__(self, name: str = 'New Node'):
        self.name = name
        self.position: Tuple[float, float] = (0.0, 0.0)
        self.anchor: Tuple[float, float] = (0.5, 0.5)
        self.scale: Tuple[float, float] = (1.0, 1.0)
        self.angle: float = 0.0
        self.euler_angles: Tuple[float, float, float] = (0.0, 0.0, 0.0)
        self.is_3d = False
        self.content_size: Tuple[float, float] = (0.0, 0.0)
        self.color: Tuple[int, int, int] = (255, 255, 255)
        self.opacity = 255
        self.active = True
        self.parent: Optional['TargetNode'] = None
        self.children: List['TargetNode'] = []
        self.components: List[Component] = []

    def __repr__(self):
        return f"TargetNode({self.name!r}, children={len(self.children)})"

    def add_child(self, child: 'TargetNode'):
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)

    def add_component(self, component: Component) -> Optional[Component]:
        """Attach a component

        Returns:
            The component, or None if a component of the same type is already
            attached and the type does not allow multiple instances.
        """
        if not component.ALLOW_MULTIPLE and self.get_component(type(component)) is not None:
            return None
        self.components.append(component)
        return component

    def get_component(self, component_type) -> Optional[Component]:
        for comp in self.components:
            if isinstance(comp, component_type):
                return comp
        return None

    def get_child(self, name: str) -> Optional['TargetNode']:
        for child in self.children:
            if child.name == name:
                return child
        return None

    @property
    def path(self) -> str:
        """Slash-joined names from the top of the tree (top excluded)"""
        parts = []
        node = self
        while node.parent is not None:
            parts.insert(0, node.name)
            node = node.parent
        return '/'.join(parts)

    def walk(self) -> Iterator['TargetNode']:
        """Depth-first, parent before children"""
        yield self
        for child in self.children:
            yield from child.walk()


# ---------------------------------------------------------------------------
# Animation
# ---------------------------------------------------------------------------

@dataclass
class ActionTagEntry:
    """Node that an ActionTag points at, with its animation path"""
    node_path: str
    node: TargetNode


class ActionTagIndex:
    """ActionTag -> (node path, node), scoped to one document conversion"""

    def __init__(self):
        self._entries: Dict[str, ActionTagEntry] = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, tag):
        return str(tag) in self._entries

    def record(self, tag, node_path: str, node: TargetNode):
        self._entries[str(tag)] = ActionTagEntry(node_path, node)

    def lookup(self, tag) -> Optional[ActionTagEntry]:
        return self._entries.get(str(tag))

    def reset(self):
        self._entries = {}


@dataclass
class Keyframe:
    """Single animation keyframe

    Attributes:
        frame: Frame index while accumulating, time in seconds once in a clip
        value: Property value (float, [x, y], [r, g, b], bool or AssetRef)
        curve: Easing name, 4-float bezier list, or None for linear
    """
    frame: float
    value: Any
    curve: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'frame': self.frame, 'value': _plain_value(self.value)}
        if self.curve is not None:
            data['curve'] = self.curve
        return data


def _plain_value(value):
    if isinstance(value, AssetRef):
        return {'__uuid__': value.uuid}
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass
class FrameEvent:
    """Custom event fired at a frame"""
    frame: float
    func: str
    params: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {'frame': self.frame, 'func': self.func}
        if self.params:
            data['params'] = list(self.params)
        return data


@dataclass
class NodeCurves:
    """Keyframe tracks of one node path

    Attributes:
        props: Node property tracks (position, scaleX, opacity, ...)
        comps: Component tracks, keyed by component type name then property
    """
    props: Dict[str, List[Keyframe]] = field(default_factory=dict)
    comps: Dict[str, Dict[str, List[Keyframe]]] = field(default_factory=dict)

    def component_tracks(self, component_name: str) -> Dict[str, List[Keyframe]]:
        return self.comps.setdefault(component_name, {})


@dataclass
class CurveAccumulator:
    """Whole-document animation data before it is split into clips"""
    paths: Dict[str, NodeCurves] = field(default_factory=dict)
    events: List[FrameEvent] = field(default_factory=list)

    def node(self, node_path: str) -> NodeCurves:
        return self.paths.setdefault(node_path, NodeCurves())

    def reset(self):
        self.paths = {}
        self.events = []


@dataclass
class ActionRange:
    """Named frame range that becomes one clip"""
    name: str
    start_frame: int
    end_frame: int


@dataclass
class AnimationClip:
    """Time-rebased slice of a document's timeline

    Attributes:
        name: Clip name (the action range name)
        duration: Length in seconds
        sample: Sampling rate (frames per second)
        speed: Playback speed declared by the document
        paths: node path -> NodeCurves with frame times in seconds
        events: Frame events with times in seconds
    """
    name: str
    duration: float
    sample: int
    speed: float
    paths: Dict[str, NodeCurves] = field(default_factory=dict)
    events: List[FrameEvent] = field(default_factory=list)

    def keyframe_count(self) -> int:
        count = 0
        for curves in self.paths.values():
            count += sum(len(frames) for frames in curves.props.values())
            for comp in curves.comps.values():
                count += sum(len(frames) for frames in comp.values())
        return count
