#!/usr/bin/env python3
"""
Scene Exporter Module
Serializes a TargetNode tree to a Creator scene (.fire) or prefab (.prefab).

The format is a flat JSON array of objects. Element 0 is the asset wrapper
(cc.SceneAsset or cc.Prefab); nodes and components follow in depth-first
order and reference each other with {"__id__": index}. Assets are referenced
with {"__uuid__": uuid}.
"""

from core.scene_data import AssetRef, PrefabRef, ScrollView, Scrollbar, TargetNode

from .base_exporter import BaseExporter

SCENE = 'scene'
PREFAB = 'prefab'


def camel_field(name):
    """sprite_frame -> _spriteFrame"""
    head, *rest = name.split('_')
    return '_' + head + ''.join(part.capitalize() for part in rest)


class SceneExporter(BaseExporter):
    """Creator scene / prefab serializer"""

    def __init__(self, progress_callback=None):
        super().__init__(progress_callback)
        self._ids = {}
        self._objects = []

    def get_format_name(self):
        return "Creator Scene/Prefab"

    def export(self, root, output_file, kind=PREFAB):
        """Write `root` as a scene or prefab

        Args:
            root: TargetNode root of the tree
            output_file: Artifact path (.fire or .prefab)
            kind: 'scene' or 'prefab'

        Returns:
            dict: Export results with keys:
                - 'success': bool
                - 'files': list with the written artifact
                - 'node_count': int
                - 'message': Status message
        """
        objects = self.serialize(root, kind)
        written = self.write_json(objects, output_file)
        node_count = sum(1 for _ in root.walk())

        result = {
            'success': True,
            'files': [str(written)],
            'node_count': node_count,
            'message': f"{kind.capitalize()} export complete: {node_count} nodes"
        }
        self.log(self.get_export_summary(result))
        return result

    def serialize(self, root, kind=PREFAB):
        """Build the flat object list without writing it

        Returns:
            list: JSON-ready objects
        """
        self._ids = {}
        self._objects = []

        wrapper = {'__type__': 'cc.SceneAsset' if kind == SCENE else 'cc.Prefab',
                   '_name': '', '_objFlags': 0, '_native': ''}
        self._objects.append(wrapper)

        # first pass assigns indices so forward references resolve
        self._assign_ids(root)
        wrapper['scene' if kind == SCENE else 'data'] = {'__id__': self._ids[id(root)]}

        self._objects.extend([None] * (len(self._ids)))
        self._serialize_node(root, is_scene_root=(kind == SCENE))
        return self._objects

    def _assign_ids(self, node):
        self._ids[id(node)] = len(self._ids) + 1
        for comp in node.components:
            self._ids[id(comp)] = len(self._ids) + 1
        for child in node.children:
            self._assign_ids(child)

    def _ref(self, obj):
        if obj is None or id(obj) not in self._ids:
            return None
        return {'__id__': self._ids[id(obj)]}

    def _serialize_node(self, node, is_scene_root=False):
        data = {
            '__type__': 'cc.Scene' if is_scene_root else 'cc.Node',
            '_name': node.name,
            '_objFlags': 0,
            '_parent': self._ref(node.parent),
            '_children': [self._ref(child) for child in node.children],
            '_active': node.active,
            '_components': [self._ref(comp) for comp in node.components
                            if not isinstance(comp, PrefabRef)],
            '_prefab': None,
            '_opacity': node.opacity,
            '_color': {'__type__': 'cc.Color', 'r': node.color[0], 'g': node.color[1],
                       'b': node.color[2], 'a': 255},
            '_contentSize': {'__type__': 'cc.Size', 'width': node.content_size[0],
                             'height': node.content_size[1]},
            '_anchorPoint': {'__type__': 'cc.Vec2', 'x': node.anchor[0], 'y': node.anchor[1]},
            '_position': {'__type__': 'cc.Vec3', 'x': node.position[0], 'y': node.position[1], 'z': 0},
            '_scale': {'__type__': 'cc.Vec3', 'x': node.scale[0], 'y': node.scale[1], 'z': 1},
            '_is3DNode': node.is_3d,
            '_eulerAngles': {'__type__': 'cc.Vec3', 'x': node.euler_angles[0],
                             'y': node.euler_angles[1], 'z': node.euler_angles[2]},
            'angle': node.angle,
        }

        prefab_ref = node.get_component(PrefabRef)
        if prefab_ref is not None:
            data['_prefab'] = self._ref(prefab_ref)

        self._objects[self._ids[id(node)]] = data
        for comp in node.components:
            self._objects[self._ids[id(comp)]] = self._serialize_component(node, comp)
        for child in node.children:
            self._serialize_node(child)

    def _serialize_component(self, node, comp):
        data = {'__type__': comp.TYPE_NAME, '_name': '', '_objFlags': 0,
                'node': self._ref(node), '_enabled': True}
        if isinstance(comp, PrefabRef):
            data = {'__type__': comp.TYPE_NAME, 'root': self._ref(node),
                    'asset': self._value(comp.asset), 'fileId': comp.source_path}
            return data

        for name, value in comp.to_dict().items():
            data[camel_field(name)] = self._value(value)

        if isinstance(comp, ScrollView):
            data['content'] = self._ref(comp.content)
            data['_verticalScrollBar'] = self._scrollbar_ref(comp.vertical_scroll_bar)
            data['_horizontalScrollBar'] = self._scrollbar_ref(comp.horizontal_scroll_bar)
        return data

    def _scrollbar_ref(self, bar_node):
        if bar_node is None:
            return None
        return self._ref(bar_node.get_component(Scrollbar))

    def _value(self, value):
        if isinstance(value, AssetRef):
            return {'__uuid__': value.uuid}
        if isinstance(value, TargetNode):
            return self._ref(value)
        if isinstance(value, (list, tuple)):
            return [self._value(v) for v in value]
        return value
