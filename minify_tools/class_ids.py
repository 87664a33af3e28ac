#!/usr/bin/env python3
"""Short class identifiers drawn from a 64-symbol alphabet."""
from __future__ import annotations

import re


ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_'

# selectors may not start with a digit/underscore/hyphen nor end with hyphen/underscore
_BAD_HEAD = re.compile(r'^[\d_-]')
_BAD_TAIL = re.compile(r'[-_]$')


def encode_radix64(n: int) -> str:
    if n < 0:
        raise ValueError(f'cannot encode negative value: {n}')
    if n == 0:
        return ALPHABET[0]
    out = []
    while n:
        n, rem = divmod(n, 64)
        out.append(ALPHABET[rem])
    return ''.join(reversed(out))


def is_valid_id(text: str) -> bool:
    if not text:
        return False
    return not (_BAD_HEAD.search(text) or _BAD_TAIL.search(text))


class ClassIdGenerator:
    """Monotonic counter encoded in radix 64; values are never handed out twice."""

    def __init__(self, start: int = 0):
        self.counter = start

    def next_id(self) -> str:
        while True:
            self.counter += 1
            text = encode_radix64(self.counter)
            if is_valid_id(text):
                return text


# shared for the whole process so app and page scopes never collide
_shared = ClassIdGenerator()


def shared_generator() -> ClassIdGenerator:
    return _shared


def create_id() -> str:
    return _shared.next_id()
