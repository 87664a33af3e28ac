#!/usr/bin/env python3
"""
Minify class names across a compiled wxml/wxss project.

Three phases, in this order:
 1. scan app.wxss into a GlobalRegistry (nothing is written yet)
 2. rewrite every page: class attributes in .wxml, rules in the sibling .wxss
 3. write app.wxss with only the global classes some page actually used

Global usage is only known once every page has been visited, so phase 3 can
not start earlier. The registry is the only state shared between phases.
"""
from __future__ import annotations

import binascii
import enum
import json
import os
import re
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Tuple

from .class_registry import GlobalRegistry
from .config import Settings, parse_args, settings_from_args
from .css_rules import at_rule_class_names, class_name_of, decompose_rule, join_selector_group, minify_css, split_rule_lines


CLASS_ATTR_RE = re.compile(r' class="([^"]+)"')
INTERPOLATION_RE = re.compile(r'\{\{([^}]+)\}\}')
ENCODED_INTERPOLATION_RE = re.compile(r'\{\{([\da-f]+)\}\}')


class TokenKind(enum.Enum):
    DYNAMIC = 'dynamic'
    ALLOW_LISTED = 'allow_listed'
    RESOLVED = 'resolved'
    KNOWN = 'known'
    UNKNOWN = 'unknown'


class Page:
    def __init__(self, markup: Path, style: Path):
        self.markup = markup
        self.style = style

    def __repr__(self):
        return f"<Page {self.markup}>"


class PageResult:
    def __init__(self, markup: str, css: str, renames: List[Tuple[str, str]], class_map: Dict[str, str]):
        self.markup = markup
        self.css = css
        self.renames = renames
        self.class_map = class_map


# ---------------- markup helpers ----------------

def normalize_markup(text: str) -> str:
    text = re.sub(r'[\r\n]\s+<', '\n<', text)
    return re.sub(r'<!--.*?-->', '', text, flags=re.S)


def encode_interpolations(value: str) -> str:
    """Hex-encode the inside of every {{...}} so whitespace splitting keeps it whole."""
    return INTERPOLATION_RE.sub(lambda m: '{{' + m.group(1).encode('utf-8').hex() + '}}', value)


def decode_interpolations(value: str) -> str:
    return ENCODED_INTERPOLATION_RE.sub(
        lambda m: '{{' + binascii.unhexlify(m.group(1)).decode('utf-8') + '}}', value)


def classify_token(token: str, registry: GlobalRegistry, page_names: Set[str],
                   class_map: Dict[str, str], pinned: Set[str] = frozenset()) -> TokenKind:
    if '{' in token:
        return TokenKind.DYNAMIC
    if registry.is_allow_listed(token):
        return TokenKind.ALLOW_LISTED
    if token in pinned:
        registry.keep_literal(token)
        return TokenKind.ALLOW_LISTED
    if token in class_map:
        return TokenKind.RESOLVED
    if token in page_names or token in registry:
        return TokenKind.KNOWN
    return TokenKind.UNKNOWN


def rewrite_class_value(value: str, registry: GlobalRegistry, page_names: Set[str],
                        class_map: Dict[str, str], pinned: Set[str] = frozenset()) -> List[str]:
    """Return the output tokens of one class attribute value; empty means drop the attribute."""
    out: List[str] = []
    for token in encode_interpolations(value).split():
        kind = classify_token(token, registry, page_names, class_map, pinned)
        if kind is TokenKind.DYNAMIC:
            out.append(decode_interpolations(token))
        elif kind is TokenKind.ALLOW_LISTED:
            class_map[token] = token
            out.append(token)
        elif kind is TokenKind.RESOLVED:
            out.append(class_map[token])
        elif kind is TokenKind.KNOWN:
            if token in registry:
                new = registry.mark_used(token)
            else:
                new = registry.ids.next_id()
            class_map[token] = new
            out.append(new)
        # TokenKind.UNKNOWN: dead class, dropped
    return out


# ---------------- page processing ----------------

def rewrite_page(markup: str, css: str, registry: GlobalRegistry) -> PageResult:
    passthrough: List[str] = []
    page_index: Dict[str, List[str]] = {}
    page_names: Set[str] = set()
    pinned: Set[str] = set()

    for line in split_rule_lines(minify_css(css)):
        selectors, body = decompose_rule(line)
        if not body:
            passthrough.append(line)
            pinned.update(at_rule_class_names(line))
            continue
        for selector in selectors:
            name = class_name_of(selector)
            if name is None:
                passthrough.append(selector + body)
                continue
            page_index.setdefault(body, []).append(name)
            page_names.add(name)

    class_map: Dict[str, str] = {}

    def repl(m: re.Match) -> str:
        tokens = rewrite_class_value(m.group(1), registry, page_names, class_map, pinned)
        if not tokens:
            return ''
        return ' class="' + ' '.join(tokens) + '"'

    markup = CLASS_ATTR_RE.sub(repl, normalize_markup(markup))

    lines = list(passthrough)
    renames: List[Tuple[str, str]] = []
    for body, names in page_index.items():
        tokens: List[str] = []
        for name in names:
            if name in class_map:
                token = class_map[name]
            elif registry.is_literal(name) or name in pinned:
                token = name
            else:
                continue
            # same rule already lives in app.wxss under this class
            if registry.has_body(name, body):
                continue
            if token in tokens:
                continue
            tokens.append(token)
            renames.append((name, token))
        if tokens:
            lines.append(join_selector_group(tokens, body))

    return PageResult(markup, minify_css('\n'.join(lines)), renames, class_map)


def _rel(path: Path) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:
        return str(path)


def print_renames(renames: List[Tuple[str, str]]) -> None:
    for old, new in renames:
        print(f"\t.{old} -> .{new}")


def write_file(path: Path, text: str, backup: bool = False) -> None:
    if backup and path.exists():
        bak = path.with_suffix(path.suffix + '.minify.bak')
        if not bak.exists():
            bak.write_text(path.read_text(encoding='utf-8'), encoding='utf-8')
    path.write_text(text, encoding='utf-8')


def minify_page(page: Page, registry: GlobalRegistry, dry_run: bool = False, backup: bool = False) -> PageResult:
    markup = page.markup.read_text(encoding='utf-8')
    css = page.style.read_text(encoding='utf-8') if page.style.is_file() else ''
    result = rewrite_page(markup, css, registry)

    if css:
        print(f"[MINIFY] {_rel(page.style)}")
        print_renames(result.renames)
    if dry_run:
        return result
    write_file(page.markup, result.markup, backup)
    if result.css:
        write_file(page.style, result.css, backup)
    return result


def minify_app(app_css: Path, registry: GlobalRegistry, dry_run: bool = False,
               backup: bool = False) -> Optional[Callable[[], str]]:
    """Scan app.wxss now; return the callable that writes it once every page is done."""
    if not app_css.is_file():
        print(f"[SKIP] global stylesheet not found: {_rel(app_css)}")
        return None
    registry.scan_css(app_css.read_text(encoding='utf-8'))

    def output() -> str:
        css, renames = registry.emit_css()
        print(f"[MINIFY] {_rel(app_css)}")
        print_renames(renames)
        if not dry_run:
            write_file(app_css, css, backup)
        return css

    return output


def find_pages(root: Path, markup_ext: str = '.wxml', style_ext: str = '.wxss') -> List[Page]:
    pages: List[Page] = []
    for path in sorted(root.iterdir()):
        if path.is_dir():
            pages.extend(find_pages(path, markup_ext, style_ext))
            continue
        if path.suffix == markup_ext:
            pages.append(Page(path, path.with_suffix(style_ext)))
    return pages


def write_report(path: Path, registry: GlobalRegistry, page_maps: Dict[str, Dict[str, str]]) -> None:
    report = {
        'app': {name: e.identifier for name, e in registry.entries.items() if e.used and e.identifier},
        'pages': page_maps,
        'id_counter': registry.ids.counter,
    }
    path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding='utf-8')
    print(f"[REPORT] {_rel(path)}")


def run(settings: Settings, registry: Optional[GlobalRegistry] = None) -> GlobalRegistry:
    if not settings.dist_dir.is_dir():
        raise SystemExit(f'dist directory not found: {settings.dist_dir}')
    if not settings.pages_dir.is_dir():
        raise SystemExit(f'pages directory not found: {settings.pages_dir}')
    if registry is None:
        registry = GlobalRegistry(settings.allow_list)

    print('[MINIFY] minify page...')
    # phase 1
    output = minify_app(settings.app_css, registry, settings.dry_run, settings.backup)

    # phase 2
    page_maps: Dict[str, Dict[str, str]] = {}
    pages = find_pages(settings.pages_dir, settings.markup_ext, settings.style_ext)
    for page in pages:
        print(f"[MINIFY] {_rel(page.markup)}")
        result = minify_page(page, registry, settings.dry_run, settings.backup)
        page_maps[Path(os.path.relpath(page.markup, settings.dist_dir)).as_posix()] = result.class_map

    # phase 3: only now is global usage complete
    if output is not None:
        output()

    if settings.report and not settings.dry_run:
        write_report(settings.dist_dir / 'class_map_report.json', registry, page_maps)
    if settings.dry_run:
        print('[DRY-RUN] no files were modified')
    print(f"[MINIFY] done: {len(pages)} pages, {len(registry.entries)} global classes")
    return registry


async def run_async(settings: Settings, registry: Optional[GlobalRegistry] = None) -> GlobalRegistry:
    """Awaitable form for build orchestrators; runs start to finish without yielding."""
    return run(settings, registry)


def main(argv=None):
    settings = settings_from_args(parse_args(argv))
    try:
        run(settings)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ERROR] minify failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
