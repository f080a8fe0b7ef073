"""
Accessors and paths for locating values inside an aggregate.

A Path is an immutable chain of accessors:
- Root("create_user")   -> create_user
- Field("username")     -> .username
- Index(2)              -> [2]
- Key("English")        -> ["English"]

Parsing accepts the rendered form, e.g. "root.tags[2]" or 'root.map["key"]'.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Hashable, Iterator, Union


@dataclass(frozen=True, slots=True)
class Root:
    """The label of the value a validation run starts from."""

    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Field:
    """A named member of a struct-like value."""

    name: str

    def render(self) -> str:
        return f".{self.name}"


@dataclass(frozen=True, slots=True)
class Index:
    """An ordinal position inside a sequence."""

    index: int

    def render(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True, slots=True)
class Key:
    """A key inside a mapping."""

    key: Hashable

    def render(self) -> str:
        if isinstance(self.key, str):
            return f"[{json.dumps(self.key, ensure_ascii=False)}]"
        return f"[{self.key!r}]"


Accessor = Union[Root, Field, Index, Key]


@dataclass(frozen=True, slots=True)
class Path:
    """
    Ordered, append-only chain of accessors.

    Paths are values: extending one returns a new path and leaves the
    original untouched, so sibling members can share a parent path.
    """

    segments: tuple[Accessor, ...] = ()

    @classmethod
    def root(cls, name: str) -> Path:
        return cls((Root(name),))

    @classmethod
    def parse(cls, text: str) -> Path:
        return parse_path(text)

    def extend(self, segment: Accessor) -> Path:
        return Path((*self.segments, segment))

    def field(self, name: str) -> Path:
        return self.extend(Field(name))

    def index(self, index: int) -> Path:
        return self.extend(Index(index))

    def key(self, key: Hashable) -> Path:
        return self.extend(Key(key))

    @property
    def parent(self) -> Path:
        return Path(self.segments[:-1])

    @property
    def last(self) -> Accessor | None:
        return self.segments[-1] if self.segments else None

    def startswith(self, prefix: Path) -> bool:
        n = len(prefix.segments)
        return self.segments[:n] == prefix.segments

    def render(self) -> str:
        return "".join(segment.render() for segment in self.segments)

    def __iter__(self) -> Iterator[Accessor]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.render()


def extend(path: Path, segment: Accessor) -> Path:
    """Return `path` with `segment` appended."""
    return path.extend(segment)


def render(path: Path) -> str:
    """Format a path for humans, e.g. root.tags[2]."""
    return path.render()


def as_path(path: Path | str) -> Path:
    """Accept either a Path or its rendered form."""
    if isinstance(path, Path):
        return path
    return parse_path(path)


class PathParser:
    """Parser for rendered paths."""

    NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_-]*")
    INDEX_PATTERN = re.compile(r"^\[(\d+)\]")
    DOUBLE_QUOTED_KEY_PATTERN = re.compile(r'^\[("(?:[^"\\]|\\.)*")\]')
    SINGLE_QUOTED_KEY_PATTERN = re.compile(r"^\['((?:[^'\\]|\\.)*)'\]")

    def parse(self, path_str: str) -> Path:
        """Parse a path string into a Path object."""
        if not path_str:
            raise ValueError("Empty path")

        match = self.NAME_PATTERN.match(path_str)
        if match is None:
            raise ValueError(f"Path must start with a root label: {path_str}")

        segments: list[Accessor] = [Root(match.group(0))]
        remaining = path_str[match.end() :]

        while remaining:
            segment, remaining = self._parse_segment(remaining)
            segments.append(segment)

        return Path(tuple(segments))

    def _parse_segment(self, s: str) -> tuple[Accessor, str]:
        """Parse a single segment from the start of string s."""
        if s[0] == ".":
            if match := self.NAME_PATTERN.match(s[1:]):
                return Field(match.group(0)), s[1 + match.end() :]
            raise ValueError(f"Invalid field name at: {s}")

        if match := self.INDEX_PATTERN.match(s):
            return Index(int(match.group(1))), s[match.end() :]

        if match := self.DOUBLE_QUOTED_KEY_PATTERN.match(s):
            return Key(json.loads(match.group(1))), s[match.end() :]

        if match := self.SINGLE_QUOTED_KEY_PATTERN.match(s):
            return Key(_unescape_single(match.group(1))), s[match.end() :]

        raise ValueError(f"Invalid path syntax at: {s}")


def _unescape_single(raw: str) -> str:
    return re.sub(r"\\(.)", r"\1", raw)


def parse_path(path_str: str) -> Path:
    """Convenience function to parse a path string."""
    parser = PathParser()
    return parser.parse(path_str)


def segment_value(segment: Accessor) -> Any:
    """The raw name, index or key carried by a segment."""
    match segment:
        case Root(name=name) | Field(name=name):
            return name
        case Index(index=index):
            return index
        case Key(key=key):
            return key
    raise TypeError(f"Not an accessor: {segment!r}")
