"""Custom timestamp pattern compilation.

Free-form format tokens are compiled once into a :class:`CompiledPattern`.
Two syntaxes are accepted:

- strftime-style patterns, recognised by a ``%`` directive
  (``"%d/%b/%Y:%H:%M:%S %z"``);
- Joda-style patterns made of repeated pattern letters
  (``"MMM dd yyyy HH:mm:ss"``), translated to the equivalent directives.
  Text between single quotes is literal, ``''`` is a literal quote, and any
  other non-letter character is literal.

Patterns without a year are completed with the current calendar year at parse
time, never at compile time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional

from ..errors import UnsupportedFormat
from ..utils.timestamps import apply_zone

_STRPTIME_DIRECTIVE_RE = re.compile(r"%(.?)", re.DOTALL)

# Directives understood by datetime.strptime
_STRPTIME_DIRECTIVES = frozenset("aAbBcdfGHIjmMpSuUVwWxXyYzZ%")
_YEAR_DIRECTIVES = frozenset({"Y", "y", "G", "c", "x"})
_ZONE_DIRECTIVES = frozenset({"z"})

_FRACTION_MAX_DIGITS = 6


def current_year(zone: Optional[tzinfo] = None) -> int:
    """Return the current calendar year in ``zone`` (UTC by default)."""
    return datetime.now(zone or timezone.utc).year


@dataclass(frozen=True)
class CompiledPattern:
    """A custom pattern translated to ``datetime.strptime`` directives.

    Attributes
    ----------
    pattern: str
        The pattern as declared.
    directives: str
        Equivalent ``strptime`` format string.
    has_year: bool
        Whether the pattern carries a year; if not, one is substituted.
    has_offset: bool
        Whether the pattern parses a UTC offset.
    """

    pattern: str
    directives: str
    has_year: bool
    has_offset: bool

    def parse(self, value: str, zone: Optional[tzinfo] = None) -> datetime:
        """Parse ``value`` into an aware datetime.

        Zone-less results are interpreted in ``zone`` (UTC when ``None``).

        Raises
        ------
        ValueError
            If the value does not match the pattern.
        """
        directives = self.directives
        if not self.has_year:
            directives = "%Y " + directives
            value = f"{current_year(zone)} {value}"
        dt = datetime.strptime(value, directives)
        return apply_zone(dt, zone)


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a strftime- or Joda-style pattern.

    Raises
    ------
    UnsupportedFormat
        On an unknown directive or pattern letter, an unterminated quote, or
        an empty pattern.
    """
    if not pattern or not pattern.strip():
        raise UnsupportedFormat(pattern, "empty pattern")
    if "%" in pattern:
        return _compile_strftime(pattern)
    return _compile_joda(pattern)


def _compile_strftime(pattern: str) -> CompiledPattern:
    found: List[str] = []
    for match in _STRPTIME_DIRECTIVE_RE.finditer(pattern):
        directive = match.group(1)
        if directive not in _STRPTIME_DIRECTIVES:
            raise UnsupportedFormat(
                pattern, f"bad directive %{directive} at index {match.start()}"
            )
        found.append(directive)
    return CompiledPattern(
        pattern=pattern,
        directives=pattern,
        has_year=any(d in _YEAR_DIRECTIVES for d in found),
        has_offset=any(d in _ZONE_DIRECTIVES for d in found),
    )


def _joda_directive(letter: str, count: int, pattern: str) -> str:
    if letter in "yYu":
        return "%y" if count == 2 else "%Y"
    if letter == "M":
        if count >= 4:
            return "%B"
        return "%b" if count == 3 else "%m"
    if letter == "E":
        return "%A" if count >= 4 else "%a"
    if letter == "S":
        if count > _FRACTION_MAX_DIGITS:
            raise UnsupportedFormat(
                pattern, f"at most {_FRACTION_MAX_DIGITS} fraction digits"
            )
        return "%f"
    if letter == "Z":
        if count > 2:
            raise UnsupportedFormat(pattern, "zone identifiers (ZZZ) not supported")
        return "%z"
    directive = _JODA_SIMPLE.get(letter)
    if directive is None:
        raise UnsupportedFormat(pattern, f"unknown pattern letter {letter!r}")
    return directive


_JODA_SIMPLE: Dict[str, str] = {
    "d": "%d",
    "D": "%j",
    "e": "%u",
    "a": "%p",
    "H": "%H",
    "h": "%I",
    "m": "%M",
    "s": "%S",
}


def _compile_joda(pattern: str) -> CompiledPattern:
    out: List[str] = []
    letters: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "'":
            if pattern.startswith("''", i):
                out.append("'")
                i += 2
                continue
            literal, i = _read_quoted(pattern, i + 1)
            out.append(literal.replace("%", "%%"))
            continue
        if ch.isascii() and ch.isalpha():
            j = i
            while j < n and pattern[j] == ch:
                j += 1
            out.append(_joda_directive(ch, j - i, pattern))
            letters.append(ch)
            i = j
            continue
        out.append(ch)
        i += 1
    return CompiledPattern(
        pattern=pattern,
        directives="".join(out),
        has_year=any(letter in "yYu" for letter in letters),
        has_offset="Z" in letters,
    )


def _read_quoted(pattern: str, start: int) -> tuple[str, int]:
    """Read quoted literal text; returns the text and the index past it."""
    buf: List[str] = []
    i, n = start, len(pattern)
    while i < n:
        if pattern[i] == "'":
            if pattern.startswith("''", i):
                buf.append("'")
                i += 2
                continue
            return "".join(buf), i + 1
        buf.append(pattern[i])
        i += 1
    raise UnsupportedFormat(pattern, f"unterminated quote at index {start - 1}")
