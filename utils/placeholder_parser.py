"""
Parser for `{{variable}}` placeholders inside template strings.

A string is turned into a tuple of segments: literal text and placeholder
references. Resolution works on these segments instead of running regex
substitutions over nested structures, so a value that itself contains
`{{...}}` is never re-expanded.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple, Union, Iterator, Mapping, Any, Callable

from utils.errors import PlaceholderSyntaxError

OPEN = '{{'
CLOSE = '}}'


@dataclass(frozen=True)
class LiteralSegment:
    text: str


@dataclass(frozen=True)
class PlaceholderSegment:
    name: str


Segment = Union[LiteralSegment, PlaceholderSegment]


@dataclass(frozen=True)
class TemplateText:
    """Parsed form of one template string"""

    source: str
    segments: Tuple[Segment, ...]

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.segments if isinstance(s, PlaceholderSegment))

    @property
    def is_standalone_placeholder(self) -> bool:
        """True when the whole string is exactly one placeholder, e.g. '{{products}}'"""
        return len(self.segments) == 1 and isinstance(self.segments[0], PlaceholderSegment)

    def render(self, lookup: Callable[[str], str]) -> str:
        parts = []
        for segment in self.segments:
            if isinstance(segment, LiteralSegment):
                parts.append(segment.text)
            else:
                parts.append(lookup(segment.name))
        return ''.join(parts)


def is_valid_name(name: str) -> bool:
    if not name or not (name[0].isascii() and (name[0].isalpha() or name[0] == '_')):
        return False
    return all(c.isascii() and (c.isalnum() or c == '_') for c in name)


def _scan(text: str, strict: bool) -> Iterator[Segment]:
    pos = 0
    literal_start = 0
    while True:
        start = text.find(OPEN, pos)
        if start < 0:
            break
        end = text.find(CLOSE, start + len(OPEN))
        if end < 0:
            if strict:
                raise PlaceholderSyntaxError(text, start, "unclosed '{{'")
            break
        name = text[start + len(OPEN):end].strip()
        if not is_valid_name(name):
            if strict:
                raise PlaceholderSyntaxError(text, start, f"invalid variable name {name!r}")
            pos = start + len(OPEN)
            continue
        if start > literal_start:
            yield LiteralSegment(text[literal_start:start])
        yield PlaceholderSegment(name)
        pos = literal_start = end + len(CLOSE)
    if literal_start < len(text):
        yield LiteralSegment(text[literal_start:])


@lru_cache(maxsize=4096)
def parse_template_text(text: str, strict: bool = True) -> TemplateText:
    """Parse a template string; strict mode rejects malformed placeholders."""
    return TemplateText(source=text, segments=tuple(_scan(text, strict)))


def extract_placeholders(text: str, strict: bool = True) -> Tuple[str, ...]:
    return parse_template_text(text, strict).placeholders


def render_text(text: str, values: Mapping[str, Any], strict: bool = True) -> str:
    """Substitute every placeholder of `text` with `str()` of its value."""
    def lookup(name: str) -> str:
        value = values[name]
        return '' if value is None else str(value)
    return parse_template_text(text, strict).render(lookup)
