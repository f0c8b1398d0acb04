"""
Path language for addressing values inside JSON-like payloads.

Paths are dotted property names with optional bracket suffixes:

    a.b[0].c     property "a", property "b", index 0, property "c"
    a.b[*]       every element of the array at a.b
    a.b.*        same as a.b[*]
    a["x.y"]     property named "x.y"

A parsed path is a tuple of segments: ``str`` for property names, ``int`` for
array indices and :data:`WILDCARD` for a single-level wildcard over an array.
The empty path ``()`` (written ``""``) addresses the root value itself.
"""

import re
from typing import Any, List, Sequence, Tuple, Union

from ..core.errors import InvalidPathError


class _Wildcard:
    __slots__ = ()

    def __repr__(self) -> str:
        return "WILDCARD"


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


WILDCARD = _Wildcard()

# Returned by get_value when a segment along the path is absent. Distinct from
# None, which is a legitimate JSON null.
MISSING = _Missing()

Segment = Union[str, int, _Wildcard]
Path = Tuple[Segment, ...]
PathLike = Union[str, Sequence[Union[str, int]], None]

_PLAIN_SEGMENT = re.compile(r"^[^.\[\]\"']+$")


# ──────────────────────────────────────────────────────────────────────────────
# Parsing / formatting
# ──────────────────────────────────────────────────────────────────────────────
def parse_path(path: PathLike) -> Path:
    """
    Parse a path string (or a sequence of segments) into a segment tuple.

    Args:
        path: Path string like ``"a.b[0].c"``, a sequence like
            ``["a", "b", 0, "c"]``, or ``None``/``""`` for the root

    Returns:
        Tuple of segments

    Raises:
        InvalidPathError: If the path is malformed

    Examples:
        >>> parse_path("a.b[0].c")
        ('a', 'b', 0, 'c')
        >>> parse_path("a.b[*]")
        ('a', 'b', WILDCARD)
        >>> parse_path("")
        ()
    """
    if path is None or path == "":
        return ()
    if isinstance(path, str):
        return tuple(_scan(path))
    # tuples are already-parsed paths: a "*" string there is a property name
    star_is_wildcard = not isinstance(path, tuple)
    return tuple(_coerce_segment(path, segment, star_is_wildcard) for segment in path)


def _coerce_segment(path: Any, segment: Any, star_is_wildcard: bool = True) -> Segment:
    if segment is WILDCARD or (star_is_wildcard and segment == "*"):
        return WILDCARD
    if isinstance(segment, bool):
        raise InvalidPathError(path, f"unsupported segment {segment!r}")
    if isinstance(segment, int):
        if segment < 0:
            raise InvalidPathError(path, "index must be non-negative")
        return segment
    if isinstance(segment, str):
        return segment
    raise InvalidPathError(path, f"unsupported segment {segment!r}")


def _scan(text: str) -> List[Segment]:
    segments: List[Segment] = []
    after_dot = False
    need_separator = False
    i = 0

    while i < len(text):
        ch = text[i]
        if ch == "[":
            if after_dot:
                raise InvalidPathError(text, "empty segment before '['")
            i, segment = _read_bracket(text, i)
            segments.append(segment)
            after_dot = False
            need_separator = True
        elif ch == ".":
            if after_dot or not segments:
                raise InvalidPathError(text, "empty segment")
            after_dot = True
            need_separator = False
            i += 1
        elif ch == "]":
            raise InvalidPathError(text, f"unexpected ']' at position {i}")
        else:
            if need_separator:
                raise InvalidPathError(text, f"expected '.' or '[' at position {i}")
            end = i
            while end < len(text) and text[end] not in ".[]":
                end += 1
            name = text[i:end]
            segments.append(WILDCARD if name == "*" else name)
            after_dot = False
            need_separator = True
            i = end

    if after_dot:
        raise InvalidPathError(text, "path ends with '.'")
    return segments


def _read_bracket(text: str, start: int) -> Tuple[int, Segment]:
    """Read a ``[...]`` group starting at ``start``; return (next index, segment)."""
    if start + 1 < len(text) and text[start + 1] in "\"'":
        quote = text[start + 1]
        close = text.find(quote, start + 2)
        if close == -1 or close + 1 >= len(text) or text[close + 1] != "]":
            raise InvalidPathError(text, f"unterminated quoted key at position {start}")
        return close + 2, text[start + 2 : close]

    close = text.find("]", start)
    if close == -1:
        raise InvalidPathError(text, f"missing ']' for '[' at position {start}")
    inner = text[start + 1 : close].strip()
    if inner == "*":
        return close + 1, WILDCARD
    if not inner.isdigit():
        raise InvalidPathError(
            text, f"index must be a non-negative integer or '*', got '{inner}'"
        )
    return close + 1, int(inner)


def format_path(path: PathLike) -> str:
    """
    Render segments back into the canonical path string.

    Examples:
        >>> format_path(("a", "b", 0, "c"))
        'a.b[0].c'
        >>> format_path(("a", "x.y"))
        'a["x.y"]'
        >>> format_path(())
        ''
    """
    parts: List[str] = []
    for segment in parse_path(path):
        if segment is WILDCARD:
            parts.append("[*]")
        elif isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif segment != "*" and _PLAIN_SEGMENT.match(segment):
            parts.append(f".{segment}" if parts else segment)
        elif '"' in segment:
            parts.append(f"['{segment}']")
        else:
            parts.append(f'["{segment}"]')
    return "".join(parts)


def has_wildcard(path: PathLike) -> bool:
    return any(segment is WILDCARD for segment in parse_path(path))


def wildcard_base(path: PathLike) -> Path:
    """Return the segments before the first wildcard (the whole path if none)."""
    segments = parse_path(path)
    for position, segment in enumerate(segments):
        if segment is WILDCARD:
            return segments[:position]
    return segments


# ──────────────────────────────────────────────────────────────────────────────
# Accessors
# ──────────────────────────────────────────────────────────────────────────────
def _as_index(segment: Segment) -> Union[int, None]:
    if isinstance(segment, int):
        return segment
    if isinstance(segment, str) and segment.isdigit():
        return int(segment)
    return None


def _child(node: Any, segment: Segment) -> Any:
    if segment is WILDCARD:
        raise InvalidPathError("*", "wildcards cannot be read directly, expand them first")
    if isinstance(node, dict):
        return node.get(str(segment) if isinstance(segment, int) else segment, MISSING)
    if isinstance(node, list):
        index = _as_index(segment)
        if index is None or index >= len(node):
            return MISSING
        return node[index]
    return MISSING


def _assign(node: Any, segment: Segment, value: Any) -> None:
    if segment is WILDCARD:
        raise InvalidPathError("*", "cannot write through a wildcard")
    if isinstance(node, dict):
        node[str(segment) if isinstance(segment, int) else segment] = value
        return

    index = _as_index(segment)
    if index is None:
        raise InvalidPathError(segment, "cannot set a property on an array")
    if index >= len(node):
        node.extend([None] * (index - len(node) + 1))
    node[index] = value


def get_value(root: Any, path: PathLike, default: Any = MISSING) -> Any:
    """
    Read the value at ``path`` inside ``root``.

    Returns ``default`` (``MISSING`` unless given) when any segment along the
    path is absent; absence is never an error.
    """
    node = root
    for segment in parse_path(path):
        node = _child(node, segment)
        if node is MISSING:
            return default
    return node


def path_exists(root: Any, path: PathLike) -> bool:
    return get_value(root, path) is not MISSING


def set_value(root: Any, path: PathLike, value: Any) -> Any:
    """
    Write ``value`` at ``path`` inside ``root``.

    Intermediate containers are created as needed: dicts for property
    segments, lists for index segments. ``root`` is mutated in place and
    returned; for the empty path the value itself is returned, replacing the
    root.

    Raises:
        InvalidPathError: If the path contains a wildcard or sets a property
            name on an array
    """
    segments = parse_path(path)
    if not segments:
        return value

    if not isinstance(root, (dict, list)):
        root = [] if isinstance(segments[0], int) else {}

    node = root
    for segment, next_segment in zip(segments, segments[1:]):
        child = _child(node, segment)
        if not isinstance(child, (dict, list)):
            child = [] if isinstance(next_segment, int) else {}
            _assign(node, segment, child)
        node = child

    _assign(node, segments[-1], value)
    return root


def expand_path(root: Any, selector: PathLike) -> List[Path]:
    """
    Expand a selector into the concrete paths it matches in ``root``.

    A selector without wildcards always yields exactly itself, whether or not
    a value currently exists there. Each wildcard yields one path per element
    of the array found at that position, in ascending index order; an empty
    or absent array yields nothing.

    Examples:
        >>> expand_path({"a": {"b": ["x", "y"]}}, "a.b[*]")
        [('a', 'b', 0), ('a', 'b', 1)]
        >>> expand_path({"a": {"b": []}}, "a.b[*]")
        []
    """
    segments = parse_path(selector)
    if not has_wildcard(segments):
        return [segments]

    head = wildcard_base(segments)
    tail = segments[len(head) + 1 :]
    container = get_value(root, head)
    if not isinstance(container, list):
        return []

    paths: List[Path] = []
    for index, element in enumerate(container):
        if has_wildcard(tail):
            paths.extend(head + (index,) + sub for sub in expand_path(element, tail))
        else:
            paths.append(head + (index,) + tail)
    return paths
