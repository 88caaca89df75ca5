"""Version parsing and ordering helpers shared by the store and the selector."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import InvalidVersionError

__all__ = [
    "Version",
    "find_version",
    "normalize_version_spec",
    "sort_version_names",
]

_NUMBER = r"(0|[1-9][0-9]*)"
_CANONICAL_RE = re.compile(rf"{_NUMBER}\.{_NUMBER}\.{_NUMBER}")
_EMBEDDED_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


@dataclass(frozen=True, order=True)
class Version:
    """Numeric major.minor.patch triple."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        match = _CANONICAL_RE.fullmatch(text or "")
        if not match:
            raise InvalidVersionError(f"invalid version {text!r}; expected X.Y.Z")
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def try_parse(cls, text: str) -> Optional["Version"]:
        try:
            return cls.parse(text)
        except InvalidVersionError:
            return None

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def normalize_version_spec(spec: str) -> Version:
    """Strip one leading non-numeric prefix character (``v1.2.3``) and parse."""
    text = (spec or "").strip()
    if text and not text[0].isdigit():
        text = text[1:]
    try:
        return Version.parse(text)
    except InvalidVersionError:
        raise InvalidVersionError(f"invalid version {spec!r}; expected X.Y.Z") from None


def sort_version_names(names: Iterable[str]) -> list[Version]:
    """Keep only canonical names and sort them numerically, ascending."""
    found = {version for version in (Version.try_parse(name) for name in names) if version}
    return sorted(found)


def find_version(text: str) -> Optional[Version]:
    """Return the first X.Y.Z triple embedded in free-form output."""
    match = _EMBEDDED_RE.search(text or "")
    if not match:
        return None
    return Version(*(int(part) for part in match.groups()))
