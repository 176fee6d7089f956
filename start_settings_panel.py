#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Settings Panel - Startup Script

Loads plugins, builds the filtered settings list headlessly and prints it,
or exports/imports setting values. Hosts embed ``SettingsPanelEngine``
directly; this script is for inspecting a plugin directory.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from settings_panel.app import SettingsPanelEngine
from settings_panel.config import get_config_path, load_panel_settings
from settings_panel.logging_config import get_logger, get_performance_stats, setup_logging
from settings_panel.plugins import load_plugin_registry
from settings_panel.version import load_version

logger = get_logger("start")


def parse_arguments(argv: Optional[List[str]] = None):
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(description="Settings Panel - inspect and edit module settings")
    parser.add_argument("--plugins", metavar="PATH", action="append",
                        help="Plugin directory (repeatable). Defaults to the configured paths.")
    parser.add_argument("--config", metavar="FILE", help="Panel config file (default: %(default)s)",
                        default=str(get_config_path()))
    parser.add_argument("--list", action="store_true", help="Print the filtered settings tree")
    parser.add_argument("--search", default="", help="Search string to filter by")
    parser.add_argument("--only-changed", action="store_true", help="Only list settings that differ from default")
    parser.add_argument("--advanced", action="store_true", help="Include advanced settings")
    parser.add_argument("--export", action="store_true", help="Export visible settings to the config directory")
    parser.add_argument("--import", dest="do_import", action="store_true",
                        help="Apply the config directory export file to this run only; "
                             "combine with --list or --export to see the result")
    parser.add_argument("--version", action="store_true", help="Show version information")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode (includes hidden settings)")

    return parser.parse_args(argv)


def print_tree(engine: SettingsPanelEngine) -> None:
    for group in engine.groups:
        module = group.module
        print(f"{module.display_name} {module.version} [{module.module_id}]".rstrip())
        for category in group.categories:
            if category.name:
                print(f"  [{category.name}]")
            for entry in category.settings:
                try:
                    value = entry.get()
                except Exception as exc:
                    value = f"<error: {exc}>"
                marker = "*" if entry.is_advanced else " "
                print(f"   {marker} {entry.display_name} = {value}")
    if engine.show_debug and engine.modules_without_settings:
        print(f"Plugins with no options available: {engine.modules_without_settings_text}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)

    if args.version:
        print(f"Settings Panel v{load_version()}")
        return 0

    setup_logging(log_level="DEBUG" if args.debug else "INFO")

    config_path = Path(args.config)
    settings = load_panel_settings(config_path)
    paths = [Path(p) for p in args.plugins] if args.plugins else None
    registry = load_plugin_registry(paths, cfg=settings.model_dump())

    engine = SettingsPanelEngine(registry, settings=settings, config_dir=config_path.parent)
    engine.show_debug = bool(args.debug)
    engine.state.search = args.search
    engine.state.show_only_changed = bool(args.only_changed)
    if args.advanced:
        engine.state.show_advanced = True
    engine.build_setting_list()

    if args.do_import:
        result = engine.import_()
        if not result.ok:
            print(f"Import failed: {result.error}")
            return 1
        print(f"Imported {result.imported} settings from {result.path} (applied to this session only)")

    if args.export:
        result = engine.export()
        if not result.ok:
            print(f"Failed to export settings: {result.error}")
            return 1
        print(f"Settings exported to {result.path} ({result.written} lines)")

    if args.list or not (args.export or args.do_import):
        print_tree(engine)

    if args.debug:
        for operation, stats in get_performance_stats().items():
            logger.debug("%s: %d calls, avg %.4fs", operation, stats['count'], stats['avg_time'])
    return 0


if __name__ == "__main__":
    sys.exit(main())
