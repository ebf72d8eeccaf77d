#!/usr/bin/env python3
"""
Node graph builder tests
Tree construction, base properties, creators and component initializers
"""

import pytest

from builders import NodeGraphBuilder, build_prefab, build_scene
from core.errors import CyclicReferenceError
from core.scene_data import (
    BlockInputEvents, Button, Camera, Canvas, Label, Mask, PrefabRef, ScrollView,
    SizeMode, Sprite, SpriteType, StudioWidget, TargetNode,
)
from core.settings import DEFAULT_BTN_NORMAL_URL


def sprite_node(name='hero', tag='', extra='', children=''):
    return f"""<AbstractNodeData Name="{name}" ActionTag="{tag}" ctype="SpriteObjectData" {extra}>
      <Size X="40" Y="20" />
      <AnchorPoint ScaleX="0.5" ScaleY="0.5" />
      <Position X="100" Y="50" />
      <Scale ScaleX="1" ScaleY="1" />
      <CColor A="255" R="255" G="255" B="255" />
      <FileData Type="Normal" Path="images/hero.png" />
      {children}
    </AbstractNodeData>"""


def test_prefab_tree_and_child_position(make_context, make_document, asset_db):
    asset_db.add('db://assets/proj/images/hero.png/hero')
    ctx = make_context()
    container, root = build_prefab(make_document(sprite_node()), ctx)

    assert container is root
    assert root.name == 'Root'
    assert root.content_size == (960.0, 640.0)
    hero = root.get_child('hero')
    # authored at the parent's bottom-left, converted against the root anchor
    assert hero.position == (100 - 960 * 0.5, 50 - 640 * 0.5)

    sprite = hero.get_component(Sprite)
    assert sprite.size_mode == SizeMode.RAW
    assert sprite.trim is False
    assert sprite.sprite_frame == asset_db.resolve_handle('db://assets/proj/images/hero.png/hero')
    assert ctx.diagnostics.entries == []


def test_unresolved_sprite_frame_warns(make_context, make_document):
    ctx = make_context()
    _, root = build_prefab(make_document(sprite_node()), ctx)

    assert root.get_child('hero').get_component(Sprite).sprite_frame is None
    assert any('spriteframe' in d.message for d in ctx.diagnostics.warnings())


def test_children_keep_document_order(make_context, make_document):
    children = ''.join(f'<AbstractNodeData Name="n{i}" ctype="SingleNodeObjectData" />' for i in range(5))
    _, root = build_prefab(make_document(children), make_context())
    assert [c.name for c in root.children] == ['n0', 'n1', 'n2', 'n3', 'n4']


def test_name_with_separators_is_sanitized(make_context, make_document):
    ctx = make_context()
    children = '<AbstractNodeData Name="ui/left\\arm" ActionTag="7" ctype="SingleNodeObjectData" />'
    _, root = build_prefab(make_document(children), ctx)

    child = root.children[0]
    assert child.name == 'ui_left_arm'
    assert '/' not in child.name and '\\' not in child.name
    assert ctx.action_tags.lookup('7').node_path == 'ui_left_arm'
    assert len(ctx.diagnostics.warnings()) == 1


def test_action_tag_paths_are_nested(make_context, make_document):
    ctx = make_context()
    inner = '<AbstractNodeData Name="leaf" ActionTag="2" ctype="SingleNodeObjectData" />'
    children = f"""<AbstractNodeData Name="branch" ActionTag="1" ctype="SingleNodeObjectData">
        <Children>{inner}</Children>
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(children), ctx)

    assert ctx.action_tags.lookup('1').node_path == 'branch'
    assert ctx.action_tags.lookup(2).node_path == 'branch/leaf'
    leaf = root.get_child('branch').get_child('leaf')
    assert ctx.action_tags.lookup('2').node is leaf
    assert leaf.path == 'branch/leaf'


def test_base_properties(make_context, make_document):
    child = """<AbstractNodeData Name="n" ctype="SingleNodeObjectData" FlipX="True"
                RotationSkewX="30" RotationSkewY="30" Alpha="128" VisibleForFrame="False">
        <Size X="10" Y="10" />
        <AnchorPoint ScaleX="0" ScaleY="1" />
        <Scale ScaleX="2" ScaleY="3" />
        <CColor R="10" G="20" B="30" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(child), make_context())
    node = root.children[0]

    assert node.scale == (-2.0, 3.0)
    assert node.angle == 30.0
    assert not node.is_3d
    assert node.anchor == (0.0, 1.0)
    assert node.color == (10, 20, 30)
    assert node.opacity == 128
    assert node.active is False


def test_unequal_skew_makes_3d_node(make_context, make_document):
    child = '<AbstractNodeData Name="n" ctype="SingleNodeObjectData" RotationSkewX="10" RotationSkewY="20" />'
    _, root = build_prefab(make_document(child), make_context())
    node = root.children[0]
    assert node.is_3d
    assert node.euler_angles == (10.0, 20.0, 0.0)


def test_layer_root_anchor(make_context, make_document):
    _, root = build_prefab(make_document(ctype='GameLayerObjectData'), make_context())
    assert root.anchor == (0.0, 0.0)


def test_touch_enable_blocks_input(make_context, make_document):
    child = '<AbstractNodeData Name="n" ctype="SingleNodeObjectData" TouchEnable="True" />'
    _, root = build_prefab(make_document(child), make_context())
    assert root.children[0].get_component(BlockInputEvents) is not None


def test_unknown_type_becomes_empty_node(make_context, make_document):
    ctx = make_context()
    child = '<AbstractNodeData Name="arm" ctype="ArmatureNodeObjectData" />'
    _, root = build_prefab(make_document(child), ctx)

    node = root.get_child('arm')
    assert node.components == []
    assert 'ArmatureNodeObjectData' in ctx.diagnostics.warnings()[0].message


def test_scene_wrapper(make_context, make_document):
    scene, root = build_scene(make_document(sprite_node(), kind='Scene'), make_context())

    assert scene.children == [root]
    assert root.anchor == (0.0, 0.0)
    canvas = root.get_child('Canvas')
    assert canvas.get_component(Canvas) is not None
    assert canvas.get_child('Main Camera').get_component(Camera) is not None
    assert root.get_child('hero') is not None


def test_scroll_view_children_go_to_content(make_context, make_document):
    ctx = make_context()
    children = f"""<AbstractNodeData Name="list" ActionTag="5" ctype="ScrollViewObjectData"
                ClipAble="True" ScrollDirectionType="Vertical" IsBounceEnabled="True">
        <Size X="200" Y="300" />
        <InnerNodeSize Width="200" Height="600" />
        <AnchorPoint />
        <Position X="0" Y="0" />
        <Children>{sprite_node('item', extra='', children='')}</Children>
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(children), ctx)

    scroll_node = root.get_child('list')
    scroll = scroll_node.get_component(ScrollView)
    content = scroll_node.get_child('content')

    assert scroll.content is content
    assert scroll.vertical and not scroll.horizontal
    assert scroll.inertia
    assert scroll_node.get_component(Mask) is not None
    assert content.content_size == (200, 600)
    assert content.anchor == (0.0, 1.0)
    # top-left of the view, relative to the scroll node's (0,0) anchor
    assert content.position == (0.0, 300.0)
    assert [c.name for c in content.children] == ['item']
    assert scroll_node.get_child('item') is None
    assert scroll.vertical_scroll_bar is scroll_node.get_child('vScrollBar')
    # the tag points at the node attached to the parent
    assert ctx.action_tags.lookup('5').node is scroll_node

    item = content.get_child('item')
    assert item.position == (100 - 200 * 0.0, 50 - 600 * 1.0)


def test_button_with_label(make_context, make_document, asset_db):
    ctx = make_context()
    child = """<AbstractNodeData Name="ok" ctype="ButtonObjectData" ButtonText="OK" FontSize="18">
        <Size X="80" Y="30" />
        <TextColor R="1" G="2" B="3" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(child), ctx)

    node = root.get_child('ok')
    button = node.get_component(Button)
    assert button.normal_sprite == asset_db.resolve_handle(DEFAULT_BTN_NORMAL_URL)
    assert node.get_component(Sprite).size_mode == SizeMode.CUSTOM

    label_node = node.get_child('Label')
    label = label_node.get_component(Label)
    assert label.string == 'OK'
    assert label.font_size == 18
    assert label_node.color == (1, 2, 3)
    assert label_node.get_component(StudioWidget).is_align_horizontal_center


def test_image_view_scale9_writes_borders(make_context, make_document, asset_db):
    ref = asset_db.add('db://assets/proj/ui/frame.png/frame', {'rawWidth': 30, 'rawHeight': 20})
    child = """<AbstractNodeData Name="frame" ctype="ImageViewObjectData" Scale9Enable="True"
                Scale9OriginX="5" Scale9OriginY="4" Scale9Width="20" Scale9Height="10">
        <FileData Type="Normal" Path="ui/frame.png" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(child), make_context())

    sprite = root.get_child('frame').get_component(Sprite)
    assert sprite.type == SpriteType.SLICED
    meta = asset_db.read_metadata(ref)
    assert meta['borderLeft'] == 5
    assert meta['borderRight'] == 5
    assert meta['borderTop'] == 4
    assert meta['borderBottom'] == 6


def test_project_node_instantiates_sub_document(make_context, make_document):
    requested = []

    def import_document(path):
        requested.append(path)
        instance = TargetNode('Sub')
        instance.add_component(PrefabRef(source_path='sub/Sub.csd'))
        return instance

    ctx = make_context(import_document=import_document)
    child = """<AbstractNodeData Name="embedded" ctype="ProjectNodeObjectData">
        <FileData Type="Normal" Path="sub/Sub.csd" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(child), ctx)

    assert requested == [ctx.resource_root / 'sub/Sub.csd']
    node = root.get_child('embedded')
    assert node.get_component(PrefabRef) is not None
    assert node.name == 'embedded'


def test_project_node_cycle_falls_back_to_empty_node(make_context, make_document):
    def import_document(path):
        raise CyclicReferenceError(['A.csd', 'B.csd', 'A.csd'])

    ctx = make_context(import_document=import_document)
    child = """<AbstractNodeData Name="loop" ctype="ProjectNodeObjectData">
        <FileData Type="Normal" Path="A.csd" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(child), ctx)

    node = root.get_child('loop')
    assert node.components == []
    assert len(ctx.diagnostics.errors()) == 1
    assert 'Cyclic' in ctx.diagnostics.errors()[0].message


def test_builder_reuses_context_index(make_context, make_document):
    ctx = make_context()
    document = make_document(sprite_node(tag='3'))
    NodeGraphBuilder(ctx).build(document.object_data, root=TargetNode())
    assert '3' in ctx.action_tags
    ctx.reset()
    assert len(ctx.action_tags) == 0


@pytest.mark.parametrize('ctype', ['PanelObjectData', 'ListViewObjectData', 'PageViewObjectData'])
def test_single_color_background(make_context, make_document, ctype):
    child = f"""<AbstractNodeData Name="panel" ctype="{ctype}" ComboBoxIndex="1" BackColorAlpha="100">
        <Size X="50" Y="60" />
        <SingleColor R="9" G="8" B="7" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(child), make_context())

    background = root.get_child('panel').get_child('background')
    assert background.color == (9, 8, 7)
    assert background.opacity == 100
    assert background.content_size == (50.0, 60.0)


def test_scroll_view_child_tags_follow_content_node(make_context, make_document):
    ctx = make_context()
    children = f"""<AbstractNodeData Name="list" ActionTag="5" ctype="ScrollViewObjectData">
        <Size X="200" Y="300" />
        <InnerNodeSize Width="200" Height="600" />
        <Children>{sprite_node('item', tag='6')}</Children>
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(children), ctx)

    item = root.get_child('list').get_child('content').get_child('item')
    entry = ctx.action_tags.lookup('6')
    assert entry.node is item
    assert entry.node_path == 'list/content/item'
    assert entry.node_path == item.path


def test_scroll_view_name_is_sanitized_once(make_context, make_document):
    ctx = make_context()
    children = """<AbstractNodeData Name="menu/list" ctype="ScrollViewObjectData">
        <Size X="200" Y="300" />
        <InnerNodeSize Width="200" Height="300" />
      </AbstractNodeData>"""
    _, root = build_prefab(make_document(children), ctx)

    assert root.get_child('menu_list') is not None
    renamed = [d for d in ctx.diagnostics.warnings() if 'illegal characters' in d.message]
    assert len(renamed) == 1
