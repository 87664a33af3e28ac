#!/usr/bin/env python3
from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Set, Tuple

import csscompressor


def _split_rules(css: str) -> List[str]:
    """Cut compressed CSS after every top-level rule or statement.

    A rule ends at the '}' that brings brace depth back to 0, a statement such
    as `@import "x.wxss";` at a top-level ';'. Quoted strings are skipped.
    """
    lines: List[str] = []
    depth = 0
    quote = ''
    start = 0
    i = 0
    n = len(css)
    while i < n:
        ch = css[i]
        if quote:
            if ch == '\\':
                i += 1
            elif ch == quote:
                quote = ''
        elif ch in '"\'':
            quote = ch
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth = max(depth - 1, 0)
            if depth == 0:
                lines.append(css[start:i + 1])
                start = i + 1
        elif ch == ';' and depth == 0:
            lines.append(css[start:i + 1])
            start = i + 1
        i += 1
    lines.append(css[start:])
    return [line.strip() for line in lines if line.strip()]


def minify_css(css: str) -> str:
    """Compress CSS and put every top-level rule on its own line.

    Output lines look like `.a,.b{color:red}`; an at-rule block such as
    `@media(...){.a{x:1}.b{y:2}}` stays whole on one line. Calling it again on
    its own output returns the same text.
    """
    if not css or not css.strip():
        return ''
    return '\n'.join(_split_rules(csscompressor.compress(css)))


def split_rule_lines(css: str) -> Iterator[str]:
    for line in css.split('\n'):
        line = line.strip()
        if line:
            yield line


def decompose_rule(line: str) -> Tuple[List[str], str]:
    """Split `sel1,sel2{body}` into (['sel1', 'sel2'], '{body}').

    A line without '{', or an at-rule line, comes back whole as a single
    selector with an empty body so callers pass it through untouched.
    """
    index = line.find('{')
    if index == -1 or line.startswith('@'):
        return [line], ''
    return line[:index].split(','), line[index:]


def class_name_of(selector: str) -> Optional[str]:
    if not selector.startswith('.'):
        return None
    return selector[1:]


def join_selector_group(tokens: Iterable[str], body: str) -> str:
    return ','.join('.' + t for t in tokens) + body


_CLASS_IN_BLOCK = re.compile(r'\.(-?[A-Za-z_][\w-]*)')
# file names in url(...) and strings are not selectors
_NOT_SELECTOR = re.compile(r'url\([^)]*\)|"[^"]*"|\'[^\']*\'')


def at_rule_class_names(line: str) -> Set[str]:
    """Class names referenced inside an at-rule line that is copied verbatim."""
    if not line.startswith('@'):
        return set()
    return set(_CLASS_IN_BLOCK.findall(_NOT_SELECTOR.sub('', line)))
