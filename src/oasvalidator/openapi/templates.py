"""Matching concrete request paths against OpenAPI path templates.

A template such as ``/pets/{petId}/photos/{file}.jpg`` is split on ``/``
into segments. Literal segments must equal the request segment exactly;
segments containing ``{name}`` placeholders are compiled to an anchored
regular expression in which every placeholder matches one or more
characters other than ``/``. Every segment is checked, so intermediate
placeholders constrain the match as much as the last one.

When several templates match one path, :attr:`PathTemplate.sort_key`
orders them deterministically: fewer placeholder segments first, then more
leading literal segments, then the template string itself. A literal
``/pets/mine`` therefore beats ``/pets/{petId}`` for ``/pets/mine``.

Template-name normalisation (``/items/{id}`` -> ``/items/{}``) is used to
spot templates that are structurally identical apart from their
placeholder names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

_PLACEHOLDER_RE = re.compile(r"\{([^{}/]+)\}")


@dataclass(frozen=True)
class _Segment:
    """One ``/``-separated piece of a template."""

    text: str
    names: tuple[str, ...] = ()
    pattern: Optional[re.Pattern[str]] = None

    @property
    def is_literal(self) -> bool:
        return self.pattern is None

    def match(self, value: str) -> Optional[dict[str, str]]:
        if self.pattern is None:
            return {} if value == self.text else None
        found = self.pattern.fullmatch(value)
        if found is None:
            return None
        return {name: found.group(index + 1) for index, name in enumerate(self.names)}


def _compile_segment(text: str) -> _Segment:
    names = tuple(_PLACEHOLDER_RE.findall(text))
    if not names:
        return _Segment(text=text)
    parts: list[str] = []
    last = 0
    for found in _PLACEHOLDER_RE.finditer(text):
        parts.append(re.escape(text[last:found.start()]))
        parts.append("([^/]+?)")
        last = found.end()
    parts.append(re.escape(text[last:]))
    return _Segment(text=text, names=names, pattern=re.compile("".join(parts)))


def split_path(path: str) -> list[str]:
    """Split *path* into segments, dropping the leading ``/``.

    ``"/"`` yields ``[""]`` and a trailing slash yields a trailing empty
    segment, so trailing slashes are significant.
    """
    return path.split("/")[1:] if path.startswith("/") else path.split("/")


@dataclass(frozen=True)
class PathTemplate:
    """A compiled path template. Build instances with :func:`compile_template`."""

    template: str
    segments: tuple[_Segment, ...]

    @property
    def placeholder_segments(self) -> int:
        return sum(1 for segment in self.segments if not segment.is_literal)

    @property
    def leading_literals(self) -> int:
        count = 0
        for segment in self.segments:
            if not segment.is_literal:
                break
            count += 1
        return count

    @property
    def sort_key(self) -> tuple[int, int, str]:
        """Tie-break key: the smallest key is the preferred match."""
        return (self.placeholder_segments, -self.leading_literals, self.template)

    @property
    def normalized(self) -> str:
        """The template with every placeholder name erased."""
        return _PLACEHOLDER_RE.sub("{}", self.template)

    def match(self, path: str) -> Optional[dict[str, str]]:
        """Return the placeholder values if *path* matches, else ``None``."""
        values = split_path(path)
        if len(values) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for segment, value in zip(self.segments, values):
            found = segment.match(value)
            if found is None:
                return None
            params.update(found)
        return params


@lru_cache(maxsize=1024)
def compile_template(template: str) -> PathTemplate:
    """Compile *template*; results are cached because documents are immutable."""
    return PathTemplate(
        template=template,
        segments=tuple(_compile_segment(text) for text in split_path(template)),
    )


def find_ambiguous_templates(templates: list[str]) -> list[list[str]]:
    """Group templates that differ only in placeholder names.

    Returns:
        Groups of two or more templates, each sorted, e.g.
        ``[["/pets/{id}", "/pets/{petId}"]]``.
    """
    groups: dict[str, list[str]] = {}
    for template in templates:
        groups.setdefault(compile_template(template).normalized, []).append(template)
    return [sorted(group) for group in groups.values() if len(group) > 1]
