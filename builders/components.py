#!/usr/bin/env python3
"""
Component Initializers Module
Type-specific setup for Studio widgets (sprite, label, button, ...).

Each initializer has the signature `init_xxx(node, data, ctx)` and is looked
up by the node's ctype in NODE_INITIALIZERS. Initializers never raise for
missing assets or failed component adds: they record a diagnostic and leave
the node usable.
"""

from core.asset_db import url_basename_no_ext, url_join
from core.settings import (
    INTERNAL_URL_PREFIX,
    DEFAULT_SPLASH_SPRITE_URL, DEFAULT_PARTICLE_URL,
    DEFAULT_BTN_NORMAL_URL, DEFAULT_BTN_PRESSED_URL, DEFAULT_BTN_DISABLED_URL,
    DEFAULT_PROGRESSBAR_URL, DEFAULT_PANEL_URL,
)
from core.scene_data import (
    AudioSource, BlendFactor, Button, ButtonTransition, EditBox, HorizontalAlign,
    InputFlag, InputMode, Label, ListDirection, Mask, Overflow, ParticleSystem,
    ProgressBar, ProgressMode, SizeMode, Sprite, SpriteType, FillType,
    StudioComponent, StudioType, StudioWidget, TargetNode, TiledMap, VerticalAlign,
)

from .base_properties import read_color

PATH_SEPARATORS = ('/', '\\')


def _add(node, component, data, ctx):
    """Add a component, recording a diagnostic if the node refuses it"""
    added = node.add_component(component)
    if added is None:
        ctx.warn(f"Add {component.TYPE_NAME} component for node {data.name} failed.",
                 node=data.name, field=component.TYPE_NAME)
    return added


# ---------- asset resolution ----------

def sprite_frame_url(ctx, file_data, default_url=''):
    """Url of the sprite frame a FileData-like element points at

    Normal / MarkedSubImage images resolve to the image's own sprite frame,
    PlistSubImage to the named frame of the sprite sheet.
    """
    url = default_url
    if file_data is None:
        return url

    file_type = file_data.get('Type', 'Default')
    file_path = file_data.get('Path', '')
    if file_type == 'PlistSubImage':
        plist_path = file_data.get('Plist', '')
        if plist_path and file_path:
            frame_name = file_path
            for sep in PATH_SEPARATORS:
                frame_name = frame_name.replace(sep, '-')
            url = url_join(ctx.resource_url_for(plist_path), frame_name)
    elif file_type in ('MarkedSubImage', 'Normal'):
        # images in a csi file are treated as normal images
        if file_path:
            image_url = ctx.resource_url_for(file_path)
            url = url_join(image_url, url_basename_no_ext(image_url))
    return url


def resolve_sprite_frame(ctx, file_data, default_url='', node_name=None):
    """Resolve a sprite frame handle, falling back to `default_url`

    Returns:
        AssetRef or None (unresolved, diagnostic recorded)
    """
    if file_data is None and not default_url:
        return None

    url = sprite_frame_url(ctx, file_data, default_url)
    ref = ctx.resolver.resolve_handle(url) if url else None
    if ref is None or not ctx.resolver.handle_exists(ref):
        field = file_data.type_tag if file_data is not None else None
        ctx.warn(f"Failed to import spriteframe asset, url: {url or '<none>'}",
                 node=node_name, field=field)
        return None
    return ref


def resolve_file_asset(ctx, data, default_url=''):
    """Resolve the asset of a node's FileData element (particle, map, audio)"""
    url = default_url
    if data.get('Type', 'Default', 'FileData') == 'Normal':
        url = ctx.resource_url_for(data.get('Path', '', 'FileData'))
    if not url:
        return None
    ref = ctx.resolver.resolve_handle(url)
    if ref is None or not ctx.resolver.handle_exists(ref):
        ctx.warn(f"Asset {url} is not imported.", node=data.name, field='FileData')
        return None
    return ref


def set_scale9_properties(ctx, data, ref):
    """Write 9-slice borders of a sprite frame into its metadata"""
    meta = ctx.resolver.read_metadata(ref)
    if not meta:
        return

    raw_width = meta.get('rawWidth', 0)
    raw_height = meta.get('rawHeight', 0)
    origin_x = data.get_int('Scale9OriginX', 0)
    origin_y = data.get_int('Scale9OriginY', 0)
    width = data.get_int('Scale9Width', raw_width)
    height = data.get_int('Scale9Height', raw_height)

    meta['trimThreshold'] = -1
    meta['borderTop'] = origin_y
    meta['borderBottom'] = max(raw_height - origin_y - height, 0)
    meta['borderLeft'] = origin_x
    meta['borderRight'] = max(raw_width - origin_x - width, 0)

    url = ctx.resolver.url_of(ref)
    if url and url.startswith(INTERNAL_URL_PREFIX):
        # built-in assets are read-only
        return
    ctx.resolver.write_metadata(ref, meta)


def resolve_font(ctx, font_cfg):
    """Resolve a font resource (BMFont .fnt or TTF) referenced by `font_cfg`"""
    if font_cfg is None:
        return None
    path = font_cfg.get('Path', '')
    if not path:
        return None
    ref = ctx.resolver.resolve_handle(ctx.resource_url_for(path))
    if ref is None or not ctx.resolver.handle_exists(ref):
        ctx.warn(f"Font {path} is not imported.", field=font_cfg.type_tag)
        return None
    return ref


# ---------- sprites ----------

def init_sprite(node, data, ctx):
    init_sprite_with_size_mode(node, data, ctx, SizeMode.RAW)


def init_sprite_with_size_mode(node, data, ctx, size_mode):
    sprite = _add(node, Sprite(), data, ctx)
    if sprite is None:
        return None

    src_blend = data.get_int('Src', BlendFactor.SRC_ALPHA.value, 'BlendFunc')
    sprite.src_blend_factor = BlendFactor.SRC_ALPHA.value if src_blend == 1 else src_blend
    sprite.dst_blend_factor = data.get_int('Dst', BlendFactor.ONE_MINUS_SRC_ALPHA.value, 'BlendFunc')

    sprite.size_mode = size_mode
    sprite.trim = False
    sprite.sprite_frame = resolve_sprite_frame(ctx, data.first_child('FileData'), '', data.name)
    return sprite


def init_image_view(node, data, ctx):
    sprite = init_sprite_with_size_mode(node, data, ctx, SizeMode.CUSTOM)
    if sprite is None:
        return

    if data.get_bool('Scale9Enable', False) and sprite.sprite_frame:
        sprite.type = SpriteType.SLICED
        set_scale9_properties(ctx, data, sprite.sprite_frame)


def init_particle(node, data, ctx):
    particle = _add(node, ParticleSystem(), data, ctx)
    if particle is None:
        return
    ref = resolve_file_asset(ctx, data, DEFAULT_PARTICLE_URL)
    if ref is not None:
        particle.file = ref
        particle.custom = False


def init_tiled_map(node, data, ctx):
    tiled_map = _add(node, TiledMap(), data, ctx)
    if tiled_map is None:
        return
    tiled_map.tmx_file = resolve_file_asset(ctx, data)


def init_audio(node, data, ctx):
    audio = _add(node, AudioSource(), data, ctx)
    if audio is None:
        return
    audio.clip = resolve_file_asset(ctx, data)


# ---------- button ----------

def init_button(node, data, ctx):
    button = _add(node, Button(), data, ctx)
    if button is None:
        return
    sprite = _add(node, Sprite(), data, ctx)

    scale9_enabled = data.get_bool('Scale9Enable', False)
    button.interactable = data.get_bool('DisplayState', True)
    button.transition = ButtonTransition.SPRITE

    normal_cfg = data.first_child('NormalFileData')
    button.normal_sprite = resolve_sprite_frame(ctx, normal_cfg, DEFAULT_BTN_NORMAL_URL, data.name)
    button.hover_sprite = button.normal_sprite
    button.pressed_sprite = resolve_sprite_frame(
        ctx, data.first_child('PressedFileData'), DEFAULT_BTN_PRESSED_URL, data.name)
    button.disabled_sprite = resolve_sprite_frame(
        ctx, data.first_child('DisabledFileData'), DEFAULT_BTN_DISABLED_URL, data.name)

    if sprite is not None:
        sprite.size_mode = SizeMode.CUSTOM
        sprite.trim = False
        sprite.sprite_frame = button.normal_sprite
        if scale9_enabled:
            sprite.type = SpriteType.SLICED

    text = data.get('ButtonText', '')
    if text:
        _add_button_label(node, data, ctx, text)

    if scale9_enabled:
        seen = []
        for ref in (button.normal_sprite, button.pressed_sprite, button.disabled_sprite):
            if ref is not None and ref not in seen:
                seen.append(ref)
                set_scale9_properties(ctx, data, ref)


def _add_button_label(node, data, ctx, text):
    label_node = TargetNode('Label')
    label_node.content_size = node.content_size
    node.add_child(label_node)

    label_node.color = read_color(data, 'TextColor', (65, 65, 70))
    label_node.opacity = data.get_int('A', 255, 'TextColor')

    label = label_node.add_component(Label())
    label.string = text
    label.font_size = data.get_int('FontSize', 14)
    label.horizontal_align = HorizontalAlign.CENTER
    label.vertical_align = VerticalAlign.CENTER
    label.font = resolve_font(ctx, data.first_child('FontResource'))

    widget = label_node.add_component(StudioWidget())
    widget.is_align_horizontal_center = True
    widget.is_align_vertical_center = True


# ---------- text ----------

def init_label(node, data, ctx):
    label = _add(node, Label(), data, ctx)
    if label is None:
        return

    if data.get_bool('IsCustomSize', False):
        label.overflow = Overflow.CLAMP
        label.use_original_size = False

    label.string = data.get('LabelText', '')
    label.line_height = 0

    h_align = data.get('HorizontalAlignmentType', '')
    if h_align == 'HT_Right':
        label.horizontal_align = HorizontalAlign.RIGHT
    elif h_align == 'HT_Center':
        label.horizontal_align = HorizontalAlign.CENTER
    else:
        label.horizontal_align = HorizontalAlign.LEFT

    v_align = data.get('VerticalAlignmentType', '')
    if v_align == 'VT_Bottom':
        label.vertical_align = VerticalAlign.BOTTOM
    elif v_align == 'VT_Center':
        label.vertical_align = VerticalAlign.CENTER
    else:
        label.vertical_align = VerticalAlign.TOP

    bmfont_cfg = data.first_child('LabelBMFontFile_CNB')
    font_cfg = bmfont_cfg if bmfont_cfg is not None else data.first_child('FontResource')
    label.font = resolve_font(ctx, font_cfg)

    font_size = data.get_int('FontSize', -1)
    if font_size >= 0:
        label.font_size = font_size
    elif bmfont_cfg is not None and label.font is not None:
        # BMFont labels take their size from the font file
        meta = ctx.resolver.read_metadata(label.font) or {}
        if 'fontSize' in meta:
            label.font_size = meta['fontSize']
        if 'commonHeight' in meta:
            label.line_height = meta['commonHeight']


def init_edit_box(node, data, ctx):
    edit = _add(node, EditBox(), data, ctx)
    if edit is None:
        return

    edit.use_original_size = False
    edit.line_height = 0
    edit.placeholder = data.get('PlaceHolderText', '')
    edit.string = data.get('LabelText', '')
    edit.font_color = read_color(data, 'CColor') + (data.get_int('A', 255, 'CColor'),)
    edit.font_size = data.get_int('FontSize', 20)
    if data.get_bool('MaxLengthEnable', False):
        edit.max_length = data.get_int('MaxLengthText', 10)
    else:
        edit.max_length = -1

    if data.get_bool('PasswordEnable', False):
        edit.input_flag = InputFlag.PASSWORD
        edit.input_mode = InputMode.SINGLE_LINE


def init_progress_bar(node, data, ctx):
    bar = _add(node, Sprite(), data, ctx)
    progress = _add(node, ProgressBar(), data, ctx)
    if progress is None:
        return

    progress.mode = ProgressMode.FILLED
    progress.reverse = data.get('ProgressType', '') == 'Right_To_Left'
    progress.total_length = 1
    progress.progress = data.get_int('ProgressInfo', 80) / 100

    if bar is not None:
        bar.size_mode = SizeMode.CUSTOM
        bar.trim = False
        bar.sprite_frame = resolve_sprite_frame(
            ctx, data.first_child('ImageFileData'), DEFAULT_PROGRESSBAR_URL, data.name)
        bar.type = SpriteType.FILLED
        bar.fill_type = FillType.HORIZONTAL
        bar.fill_start = 1 if progress.reverse else 0
        progress.has_bar_sprite = True


# ---------- containers ----------

def init_panel(node, data, ctx):
    if data.get_bool('ClipAble', False):
        mask = _add(node, Mask(), data, ctx)
        if mask is not None:
            mask.enabled = True
    add_container_background(node, data, ctx)


def add_container_background(container, data, ctx):
    """Add a 'background' child for a panel-like container, if it has one"""
    file_data = data.first_child('FileData')
    combo_index = data.get_int('ComboBoxIndex', 0)

    back_node = None
    if file_data is not None:
        back_node = TargetNode('background')
        sprite = back_node.add_component(Sprite())
        sprite.trim = False
        frame = resolve_sprite_frame(ctx, file_data, DEFAULT_PANEL_URL, data.name)
        if frame is not None:
            sprite.sprite_frame = frame
            if data.get_bool('Scale9Enable', False):
                back_node.content_size = container.content_size
                sprite.size_mode = SizeMode.CUSTOM
                sprite.type = SpriteType.SLICED
                set_scale9_properties(ctx, data, frame)
    elif combo_index == 1:
        # single-color background
        back_node = TargetNode('background')
        back_node.content_size = container.content_size
        sprite = back_node.add_component(Sprite())
        sprite.size_mode = SizeMode.CUSTOM
        sprite.trim = False
        sprite.sprite_frame = ctx.resolver.resolve_handle(DEFAULT_SPLASH_SPRITE_URL)
        back_node.color = read_color(data, 'SingleColor')
        back_node.opacity = data.get_int('BackColorAlpha', 255)

    if back_node is not None:
        container.add_child(back_node)
        widget = back_node.add_component(StudioWidget())
        widget.is_align_horizontal_center = True
        widget.is_align_vertical_center = True
    return back_node


def _add_studio_component(node, data, ctx, studio_type):
    studio = _add(node, StudioComponent(), data, ctx)
    if studio is not None:
        studio.type = studio_type
    return studio


def init_checkbox(node, data, ctx):
    studio = _add_studio_component(node, data, ctx, StudioType.CHECKBOX)
    if studio is None:
        return

    def frame(element):
        return resolve_sprite_frame(ctx, data.first_child(element), '', data.name)

    studio.check_normal_back_frame = frame('NormalBackFileData')
    studio.check_pressed_back_frame = frame('PressedBackFileData')
    studio.check_disable_back_frame = frame('DisableBackFileData')
    studio.check_normal_frame = frame('NodeNormalFileData')
    studio.check_disable_frame = frame('NodeDisableFileData')
    studio.check_interactable = data.get_bool('DisplayState', True)
    studio.is_checked = data.get_bool('CheckedState', False)


def init_text_atlas(node, data, ctx):
    studio = _add_studio_component(node, data, ctx, StudioType.TEXT_ATLAS)
    if studio is None:
        return

    studio.atlas_frame = resolve_sprite_frame(
        ctx, data.first_child('LabelAtlasFileImage_CNB'), '', data.name)
    studio.first_char = data.get('StartChar', '.')
    studio.char_width = data.get_int('CharWidth', 0)
    studio.char_height = data.get_int('CharHeight', 0)
    studio.string = data.get('LabelText', '')


def init_slider(node, data, ctx):
    studio = _add_studio_component(node, data, ctx, StudioType.SLIDER_BAR)
    if studio is None:
        return

    def frame(element):
        return resolve_sprite_frame(ctx, data.first_child(element), '', data.name)

    studio.slider_back_frame = frame('BackGroundData')
    studio.slider_bar_frame = frame('ProgressBarData')
    studio.slider_btn_normal_frame = frame('BallNormalData')
    studio.slider_btn_pressed_frame = frame('BallPressedData')
    studio.slider_btn_disabled_frame = frame('BallDisabledData')
    studio.slider_interactable = data.get_bool('DisplayState', True)
    studio.slider_progress = data.get_int('PercentInfo', 0) / 100


def init_list_view(node, data, ctx):
    studio = _add_studio_component(node, data, ctx, StudioType.LIST_VIEW)
    if studio is None:
        return

    studio.list_inertia = data.get_bool('IsBounceEnabled', False)
    if data.get('DirectionType', '') == 'Vertical':
        studio.list_direction = ListDirection.VERTICAL
        align = data.get('HorizontalType', 'Left')
        if 'Center' in align:
            studio.list_horizontal_align = HorizontalAlign.CENTER
        elif 'Right' in align:
            studio.list_horizontal_align = HorizontalAlign.RIGHT
        else:
            studio.list_horizontal_align = HorizontalAlign.LEFT
    else:
        studio.list_direction = ListDirection.HORIZONTAL
        align = data.get('VerticalType', 'Top')
        if 'Center' in align:
            studio.list_vertical_align = VerticalAlign.CENTER
        elif 'Bottom' in align:
            studio.list_vertical_align = VerticalAlign.BOTTOM
        else:
            studio.list_vertical_align = VerticalAlign.TOP
    studio.list_padding = data.get_int('ItemMargin', 0)
    init_panel(node, data, ctx)


def init_page_view(node, data, ctx):
    studio = _add_studio_component(node, data, ctx, StudioType.PAGE_VIEW)
    if studio is None:
        return
    init_panel(node, data, ctx)


NODE_INITIALIZERS = {
    'SpriteObjectData': init_sprite,
    'ImageViewObjectData': init_image_view,
    'ParticleObjectData': init_particle,
    'GameMapObjectData': init_tiled_map,
    'SimpleAudioObjectData': init_audio,
    'ButtonObjectData': init_button,
    'TextBMFontObjectData': init_label,
    'TextObjectData': init_label,
    'LoadingBarObjectData': init_progress_bar,
    'TextFieldObjectData': init_edit_box,
    'PanelObjectData': init_panel,
    'CheckBoxObjectData': init_checkbox,
    'TextAtlasObjectData': init_text_atlas,
    'SliderObjectData': init_slider,
    'ListViewObjectData': init_list_view,
    'PageViewObjectData': init_page_view,
}
