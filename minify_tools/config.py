#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import os
from pathlib import Path
from typing import Iterable, List, Optional, Set

from dotenv import load_dotenv


class AllowList:
    """Class names that must never be renamed."""

    def __init__(self, names: Iterable[str] = ()):
        self.names: Set[str] = {n for n in names if n}

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self):
        return len(self.names)

    def __repr__(self):
        return f"<AllowList {sorted(self.names)}>"


def split_csv(value: Optional[str]) -> List[str]:
    return [s.strip() for s in (value or '').split(',') if s.strip()]


def load_class_names_json(path: Path) -> List[str]:
    """Accept either a JSON list of names or an object whose truthy keys are kept."""
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        raise SystemExit(f'Class names file not found: {path}')
    except json.JSONDecodeError as e:
        raise SystemExit(f'Invalid JSON in {path}: {e}')
    if isinstance(data, list):
        return [str(n) for n in data]
    if isinstance(data, dict):
        return [str(k) for k, v in data.items() if v]
    raise SystemExit(f'{path}: expected a JSON list or object of class names')


class Settings:
    def __init__(self, dist_dir, pages_dir='pages', app_css='app.wxss', markup_ext='.wxml',
                 style_ext='.wxss', allow_list: Optional[AllowList] = None,
                 dry_run=False, backup=False, report=False):
        self.dist_dir = Path(dist_dir)
        self.pages_dir = self.dist_dir / pages_dir
        self.app_css = self.dist_dir / app_css
        self.markup_ext = markup_ext
        self.style_ext = style_ext
        self.allow_list = allow_list if allow_list is not None else AllowList()
        self.dry_run = dry_run
        self.backup = backup
        self.report = report


def parse_args(argv=None):
    load_dotenv()
    p = argparse.ArgumentParser(description='Rename CSS class selectors in a compiled wxml/wxss project to short ids and drop unused rules')
    p.add_argument('--dist-dir', default=os.getenv('DIST_DIR', 'dist'), help='Compiled project root (contains app.wxss and pages/)')
    p.add_argument('--pages-dir', default=os.getenv('PAGES_DIR', 'pages'), help='Pages directory, relative to --dist-dir (default: pages)')
    p.add_argument('--app-css', default=os.getenv('APP_CSS', 'app.wxss'), help='Global stylesheet, relative to --dist-dir (default: app.wxss)')
    p.add_argument('--markup-ext', default=os.getenv('MARKUP_EXT', '.wxml'), help='Page markup extension (default: .wxml)')
    p.add_argument('--style-ext', default=os.getenv('STYLE_EXT', '.wxss'), help='Page stylesheet extension (default: .wxss)')
    p.add_argument('--keep-class', action='append', default=[], help='Class name that must never be renamed (can be repeated)')
    p.add_argument('--class-names-json', default=os.getenv('CLASS_NAMES_JSON'), help='JSON list/object of class names that must never be renamed')
    p.add_argument('--dry-run', action='store_true', help='Do not modify files; only report renames')
    p.add_argument('--backup', action='store_true', help='Write .minify.bak backups before overwriting files')
    p.add_argument('--report', action='store_true', help='Write class_map_report.json into --dist-dir')
    return p.parse_args(argv)


def settings_from_args(args) -> Settings:
    names = split_csv(os.getenv('KEEP_CLASS_NAMES'))
    for value in args.keep_class:
        names.extend(split_csv(value))
    if args.class_names_json:
        names.extend(load_class_names_json(Path(args.class_names_json)))
    return Settings(
        args.dist_dir,
        pages_dir=args.pages_dir,
        app_css=args.app_css,
        markup_ext=args.markup_ext,
        style_ext=args.style_ext,
        allow_list=AllowList(names),
        dry_run=args.dry_run,
        backup=args.backup,
        report=args.report,
    )
