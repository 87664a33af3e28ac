#!/usr/bin/env python3
"""
Global class registry for app.wxss.

Filled once from the global stylesheet before any page is visited, mutated
while pages are rewritten (usage + identifier assignment), and read one last
time to emit the final global stylesheet.
"""
from __future__ import annotations

from typing import Container, Dict, List, Optional, Set, Tuple

from .class_ids import ClassIdGenerator, shared_generator
from .css_rules import at_rule_class_names, class_name_of, decompose_rule, join_selector_group, minify_css, split_rule_lines


class ClassEntry:
    def __init__(self):
        self.identifier: Optional[str] = None
        self.bodies: List[str] = []
        self.used = False

    def __repr__(self):
        return f"<ClassEntry id={self.identifier!r} used={self.used} bodies={len(self.bodies)}>"


class GlobalRegistry:
    def __init__(self, allow_list: Container[str] = (), ids: Optional[ClassIdGenerator] = None):
        self.allow_list = allow_list
        self.ids = ids if ids is not None else shared_generator()
        self.entries: Dict[str, ClassEntry] = {}
        # body -> class names, in the order rule lines were first seen
        self.body_index: Dict[str, List[str]] = {}
        self.passthrough: List[str] = []
        # classes inside verbatim at-rule blocks can not be renamed there
        self.pinned: Set[str] = set()

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def register(self, name: str, body: str) -> None:
        entry = self.entries.get(name)
        if entry is None:
            entry = self.entries[name] = ClassEntry()
        entry.bodies.append(body)
        self.body_index.setdefault(body, []).append(name)

    def mark_used(self, name: str) -> str:
        entry = self.entries[name]
        entry.used = True
        if not entry.identifier:
            entry.identifier = self.ids.next_id()
        return entry.identifier

    def has_body(self, name: str, body: str) -> bool:
        entry = self.entries.get(name)
        return entry is not None and body in entry.bodies

    def is_literal(self, name: str) -> bool:
        return name in self.allow_list or name in self.pinned

    def keep_literal(self, name: str) -> None:
        entry = self.entries.get(name)
        if entry is not None:
            entry.used = True
            if not entry.identifier:
                entry.identifier = name

    def is_allow_listed(self, name: str) -> bool:
        if not self.is_literal(name):
            return False
        self.keep_literal(name)
        return True

    def identifier_of(self, name: str) -> Optional[str]:
        entry = self.entries.get(name)
        return entry.identifier if entry is not None else None

    def scan_css(self, css: str) -> None:
        for line in split_rule_lines(minify_css(css)):
            selectors, body = decompose_rule(line)
            if not body:
                self.passthrough.append(line)
                self.pinned.update(at_rule_class_names(line))
                continue
            for selector in selectors:
                name = class_name_of(selector)
                if name is None:
                    self.passthrough.append(selector + body)
                    continue
                self.register(name, body)

    def emit_css(self) -> Tuple[str, List[Tuple[str, str]]]:
        """Assemble the final global stylesheet from what pages actually used.

        Returns the minified CSS text and the (name, token) pairs emitted.
        """
        lines = list(self.passthrough)
        renames: List[Tuple[str, str]] = []
        for body, names in self.body_index.items():
            tokens: List[str] = []
            for name in names:
                entry = self.entries[name]
                if entry.used and entry.identifier:
                    token = entry.identifier
                elif self.is_literal(name):
                    token = name
                else:
                    continue
                if token in tokens:
                    continue
                tokens.append(token)
                renames.append((name, token))
            if tokens:
                lines.append(join_selector_group(tokens, body))
        return minify_css('\n'.join(lines)), renames
