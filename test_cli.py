#!/usr/bin/env python3
"""
Command line tests
Argument validation and exit codes of csd2creator
"""

import sys

import pytest

from conftest import csd_bytes, root_object
import csd2creator


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['csd2creator', *[str(a) for a in args]])
    csd2creator.main()


def test_converts_document(tmp_path, monkeypatch, capsys):
    csd_file = tmp_path / 'Panel.csd'
    csd_file.write_bytes(csd_bytes(root_object(), name='Panel'))
    assets = tmp_path / 'game' / 'assets'

    run_cli(monkeypatch, csd_file, '--assets-dir', assets)

    assert (assets / 'Panel.prefab').is_file()
    assert 'Converted 1/1 document(s)' in capsys.readouterr().out


def test_skipped_document_does_not_fail_the_run(tmp_path, monkeypatch, capsys):
    csd_file = tmp_path / 'Broken.csd'
    csd_file.write_bytes(b'<GameFile>')

    run_cli(monkeypatch, csd_file, '--assets-dir', tmp_path / 'assets')

    assert 'Converted 0/1 document(s)' in capsys.readouterr().out


def test_missing_input(tmp_path, monkeypatch):
    with pytest.raises(SystemExit) as info:
        run_cli(monkeypatch, tmp_path / 'missing.csd', '--assets-dir', tmp_path)
    assert info.value.code == 1


def test_unsupported_extension(tmp_path, monkeypatch, capsys):
    scene = tmp_path / 'Main.fire'
    scene.write_text('[]', encoding='utf-8')
    with pytest.raises(SystemExit) as info:
        run_cli(monkeypatch, scene, '--assets-dir', tmp_path)
    assert info.value.code == 1
    assert 'Unsupported file format' in capsys.readouterr().err


def test_fps_must_be_positive(tmp_path, monkeypatch):
    csd_file = tmp_path / 'Panel.csd'
    csd_file.write_bytes(csd_bytes(root_object()))
    with pytest.raises(SystemExit) as info:
        run_cli(monkeypatch, csd_file, '--assets-dir', tmp_path / 'assets', '--fps', '0')
    assert info.value.code == 1


def test_project_without_resources_aborts(tmp_path, monkeypatch):
    ccs_file = tmp_path / 'Game.ccs'
    ccs_file.write_text('<Solution><PropertyGroup Name="Game" /></Solution>', encoding='utf-8')
    with pytest.raises(SystemExit) as info:
        run_cli(monkeypatch, ccs_file, '--assets-dir', tmp_path / 'assets')
    assert info.value.code == 1
