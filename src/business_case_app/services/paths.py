"""Dotted/bracketed path access into nested JSON documents.

A path is a dot-separated list of segments; each segment is a key optionally
followed by one or more ``[n]`` indexes::

    assumptions.opex[1].value.value
    drivers[0].range[2]

Reads never fail on missing structure (``None`` / ``0.0`` come back instead).
Writes return a modified deep copy and create whatever is missing on the way.
"""
from __future__ import annotations

import copy
import logging
import re
from functools import lru_cache
from numbers import Number
from typing import Any, List, Tuple, Union

from ..errors import PathConflictError, PathSyntaxError

logger = logging.getLogger(__name__)

Token = Union[str, int]

_SEGMENT = re.compile(r"^(?P<name>[^\[\]]*)(?P<indexes>(?:\[\d+\])*)$")
_INDEX = re.compile(r"\[(\d+)\]")


@lru_cache(maxsize=512)
def parse_path(path: str) -> Tuple[Token, ...]:
    if not isinstance(path, str) or not path.strip():
        raise PathSyntaxError(str(path), "path is empty")
    tokens: List[Token] = []
    for segment in path.strip().split("."):
        match = _SEGMENT.match(segment)
        if match is None:
            raise PathSyntaxError(path, f"malformed segment {segment!r}")
        name, indexes = match.group("name"), match.group("indexes")
        if not name and not indexes:
            raise PathSyntaxError(path, "empty segment")
        if name:
            tokens.append(name)
        tokens.extend(int(index) for index in _INDEX.findall(indexes))
    return tuple(tokens)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def get_path(document: Any, path: str) -> Any:
    """Return the raw node at ``path`` or ``None`` when any step is missing."""
    current = document
    for token in parse_path(path):
        if isinstance(token, int):
            if isinstance(current, list) and token < len(current):
                current = current[token]
                continue
            if isinstance(current, dict) and str(token) in current:
                current = current[str(token)]
                continue
            return None
        if isinstance(current, dict) and token in current:
            current = current[token]
        else:
            return None
    return current


def get_value(document: Any, path: str) -> float:
    """Numeric value at ``path``, unwrapping a ``{value, unit, rationale}`` node.

    Missing or non-numeric nodes read as ``0.0``.
    """
    node = get_path(document, path)
    if isinstance(node, dict):
        node = node.get("value")
    if _is_number(node):
        return float(node)
    return 0.0


def is_numeric_leaf(node: Any) -> bool:
    if _is_number(node):
        return True
    return isinstance(node, dict) and _is_number(node.get("value"))


def _empty_for(token: Token) -> Any:
    return [] if isinstance(token, int) else {}


def _descend(container: Any, token: Token, next_token: Token, path: str) -> Any:
    if isinstance(token, int):
        if not isinstance(container, list):
            raise PathConflictError(path, f"index [{token}] applied to {type(container).__name__}")
        while len(container) <= token:
            container.append({})
        child = container[token]
        label = f"[{token}]"
    else:
        if not isinstance(container, dict):
            raise PathConflictError(path, f"key {token!r} applied to {type(container).__name__}")
        child = container.get(token)
        label = repr(token)

    # None and {} are placeholders; anything else must already be a container
    if child is None or (child == {} and isinstance(next_token, int)):
        child = _empty_for(next_token)
        container[token] = child
    elif not isinstance(child, (dict, list)):
        raise PathConflictError(path, f"{label} holds a {type(child).__name__}, not a container")
    return child


def set_path(document: Any, path: str, value: Any) -> Any:
    """Return a deep copy of ``document`` with the node at ``path`` replaced.

    Setting a number onto an existing ``{value, ...}`` triple only replaces its
    ``value`` so ``unit`` and ``rationale`` survive.
    """
    tokens = parse_path(path)
    updated = copy.deepcopy(document)
    current = updated
    for token, next_token in zip(tokens, tokens[1:]):
        current = _descend(current, token, next_token, path)

    last = tokens[-1]
    if isinstance(last, int):
        if not isinstance(current, list):
            raise PathConflictError(path, f"index [{last}] applied to {type(current).__name__}")
        while len(current) <= last:
            current.append({})
        slot_owner, slot = current, last
    else:
        if not isinstance(current, dict):
            raise PathConflictError(path, f"key {last!r} applied to {type(current).__name__}")
        slot_owner, slot = current, last

    existing = slot_owner[slot] if isinstance(slot_owner, list) else slot_owner.get(slot)
    if _is_number(value) and isinstance(existing, dict) and "value" in existing:
        existing["value"] = value
    else:
        slot_owner[slot] = copy.deepcopy(value)
    logger.debug("Set %s = %r", path, value)
    return updated
