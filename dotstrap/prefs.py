"""Merge ``user_pref`` lines from a bundled settings file into a Firefox profile.

Keys present in the new settings are removed from the existing document,
then the new settings are appended verbatim after a provenance marker. Lines
that are not preference entries (comments, blanks, anything malformed) pass
through untouched.
"""

import re
from dataclasses import dataclass
from datetime import datetime

MARKER_PREFIX = '// Added by dotstrap on '

_KEY_RE = re.compile(r'^\s*user_pref\(\s*"([^"]*)"')
_MARKER_RE = re.compile(r'^' + re.escape(MARKER_PREFIX) + r'.*$')
_LINE_RE = re.compile(r'[^\n]*\n|[^\n]+')


@dataclass
class PreferenceLine:
    """A single line of a preference file. ``key`` is None for opaque lines."""

    raw: str
    key: str | None = None

    @property
    def is_entry(self) -> bool:
        return self.key is not None


def extract_key(line: str) -> str | None:
    """Return the quoted key of a ``user_pref("<key>", ...)`` line."""
    match = _KEY_RE.match(line)
    if match is None:
        return None
    return match.group(1)


def parse_document(text: str) -> list[PreferenceLine]:
    """Split text on newlines only, keeping each line ending verbatim."""
    return [PreferenceLine(raw=line, key=extract_key(line)) for line in _LINE_RE.findall(text)]


def collect_keys(text: str) -> set[str]:
    return {line.key for line in parse_document(text) if line.is_entry}


def provenance_marker(now: datetime | None = None) -> str:
    if now is None:
        now = datetime.now()
    return MARKER_PREFIX + now.strftime('%a %b %d %H:%M:%S %Y')


def is_marker(line: str) -> bool:
    return _MARKER_RE.match(line.rstrip('\r\n')) is not None


def strip_previous_block(lines: list[PreferenceLine], new: str) -> list[PreferenceLine]:
    """Drop a trailing block appended by an earlier merge of the same settings.

    The block is a blank line, a marker line, then text identical to ``new``.
    """
    for i in range(len(lines) - 1, 0, -1):
        if not is_marker(lines[i].raw):
            continue
        if lines[i - 1].raw.rstrip('\r\n'):
            return lines
        if ''.join(line.raw for line in lines[i + 1:]) == new:
            return lines[:i - 1]
        return lines
    return lines


def merge_prefs(existing: str, new: str, now: datetime | None = None) -> str:
    """Merge ``new`` preference text into ``existing`` preference text.

    Every existing entry whose key also appears in ``new`` is dropped, even
    when the existing text holds several copies of it. The surviving lines
    keep their order, followed by a blank line, a provenance marker and the
    whole of ``new``.
    """
    new_keys = collect_keys(new)
    lines = strip_previous_block(parse_document(existing), new)

    out = []
    for line in lines:
        if line.is_entry and line.key in new_keys:
            continue
        out.append(line.raw)

    if out and not out[-1].endswith('\n'):
        out[-1] += '\n'

    out.append('\n')
    out.append(provenance_marker(now) + '\n')
    out.append(new)
    return ''.join(out)
