#!/usr/bin/env python3
"""
CSD2Creator - Command Line Version
Converts Cocos Studio projects (.ccs) and documents (.csd) to Creator scenes,
prefabs and animation clips
"""

import argparse
import sys
from pathlib import Path

from csd_converter import CSDConverter
from core.asset_db import LocalAssetDatabase
from core.errors import ConversionError
from core.settings import ConversionSettings
from readers import SUPPORTED_EXTENSIONS, is_supported_format


def main():
    parser = argparse.ArgumentParser(
        prog='CSD2Creator',
        description='Convert Cocos Studio projects (.ccs) or documents (.csd) to Creator assets',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import a whole project into ./MyGame/assets/<project name>
  python csd2creator.py MyProject/MyProject.ccs --assets-dir ./MyGame/assets

  # Convert one document whose resources are already imported
  python csd2creator.py cocosstudio/MainScene.csd --assets-dir ./MyGame/assets --target-url db://assets/MyProject

  # Sample clips at 30 fps
  python csd2creator.py MyProject/MyProject.ccs --assets-dir ./MyGame/assets --fps 30

Supported input formats:
  .ccs     - Cocos Studio project (resources and every listed document)
  .csd     - Cocos Studio scene / node / layer document
        """
    )

    parser.add_argument('input', type=str, help='Input project (.ccs) or document (.csd)')
    parser.add_argument('--assets-dir', type=str, required=True,
                       help='Assets directory of the target project (maps to db://assets)')
    parser.add_argument('--target-url', type=str, default='db://assets',
                       help='Folder url of the converted resources (single documents, default: db://assets)')
    parser.add_argument('--fps', type=int, default=60,
                       help='Clip sampling rate (default: 60)')

    args = parser.parse_args()

    # Validate input file exists
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    # Validate file extension
    if not is_supported_format(input_path):
        print(f"Error: Unsupported file format: {input_path.suffix}", file=sys.stderr)
        print(f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}", file=sys.stderr)
        sys.exit(1)

    if args.fps <= 0:
        print(f"Error: --fps must be positive, got {args.fps}", file=sys.stderr)
        sys.exit(1)

    assets_dir = Path(args.assets_dir)
    assets_dir.mkdir(parents=True, exist_ok=True)

    settings = ConversionSettings(fps=args.fps, target_url=args.target_url)
    asset_db = LocalAssetDatabase(assets_dir, settings.assets_root_url)
    converter = CSDConverter(asset_db, settings,
                             temp_dir=assets_dir.parent / settings.temp_folder)

    print("="*60)
    print(f"Converting: {input_path.name}")
    print(f"Assets: {assets_dir}")
    print(f"FPS: {args.fps}")
    print("="*60 + "\n")

    try:
        results = converter.convert(str(input_path))
    except (ConversionError, OSError) as e:
        print(f"\n✗ Conversion failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)

    diagnostics = results['diagnostics']
    print("\n" + "="*60)
    for document in results['documents']:
        status = "✓" if document.get('success') else "✗"
        print(f"{status} {document.get('message', 'N/A')}")
    print(f"Warnings: {len(diagnostics.warnings())}, Errors: {len(diagnostics.errors())}")
    print(results['message'])
    print("="*60)

    # skipped documents are reported above; only an aborted run fails
    if results.get('aborted'):
        sys.exit(1)


if __name__ == "__main__":
    main()
