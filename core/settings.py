#!/usr/bin/env python3
"""
Settings Module
Conversion settings and built-in asset URLs.
"""

from dataclasses import dataclass

INTERNAL_URL_PREFIX = 'db://internal/'

DEFAULT_SPRITE_URL = 'db://internal/image/default_sprite.png/default_sprite'
DEFAULT_SPLASH_SPRITE_URL = 'db://internal/image/default_sprite_splash.png/default_sprite_splash'
DEFAULT_PARTICLE_URL = 'db://internal/particle/atom.plist'
DEFAULT_BTN_NORMAL_URL = 'db://internal/image/default_btn_normal.png/default_btn_normal'
DEFAULT_BTN_PRESSED_URL = 'db://internal/image/default_btn_pressed.png/default_btn_pressed'
DEFAULT_BTN_DISABLED_URL = 'db://internal/image/default_btn_disabled.png/default_btn_disabled'
DEFAULT_PROGRESSBAR_URL = 'db://internal/image/default_progressbar.png/default_progressbar'
DEFAULT_VSCROLLBAR_URL = 'db://internal/image/default_scrollbar_vertical.png/default_scrollbar_vertical'
DEFAULT_HSCROLLBAR_URL = 'db://internal/image/default_scrollbar.png/default_scrollbar'
DEFAULT_PANEL_URL = 'db://internal/image/default_panel.png/default_panel'


@dataclass
class ConversionSettings:
    """Settings shared by every stage of one import run

    Attributes:
        fps: Clip sampling rate; frame indices are divided by it
        assets_root_url: Root url of the target asset database
        target_url: Folder url the converted project lands in (set per project)
        resource_folder: Name of the resource directory next to the .ccs file
        temp_folder: Staging folder name for converted artifacts
        action_folder_suffix: Suffix of the per-document clip folder
        frame_event_function: Function name every frame event calls
        scene_extension / prefab_extension / clip_extension: Artifact extensions
    """
    fps: int = 60
    assets_root_url: str = 'db://assets'
    target_url: str = 'db://assets'
    resource_folder: str = 'cocosstudio'
    temp_folder: str = 'temp'
    action_folder_suffix: str = '_action'
    frame_event_function: str = 'triggerAnimationEvent'
    scene_extension: str = '.fire'
    prefab_extension: str = '.prefab'
    clip_extension: str = '.anim'
