"""
Gitignore Writer

Renders the managed ``.gitignore`` section and merges it into an existing
file, either replacing the previous managed section or appending only the
template blocks the file does not contain yet.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from ignr import APP_NAME
from ignr.core.templates.manager import SECTION_MARKER, TemplateManager
from ignr.utils import get_current_date


logger = logging.getLogger(__name__)

HEADER_TEMPLATE = "# ---- " + APP_NAME + " (detected: {detected}) @ {date} ----"
END_MARKER = "# ---- end " + APP_NAME + " ----"

HEADER_RE = re.compile(r"^# ---- " + APP_NAME + r" \(detected:.*$", re.MULTILINE)
END_RE = re.compile(r"^" + re.escape(END_MARKER) + r"[ \t]*(?:\r?\n|$)", re.MULTILINE)
OTHER_BANNER_RE = re.compile(r"^# ----", re.MULTILINE)
BLOCK_RE = re.compile(r"^# === (.+?) ===[ \t\r]*$", re.MULTILINE)


@dataclass
class GitignoreUpdate:
    """Result of merging generated content into a .gitignore."""

    content: str
    changed: bool
    templates: List[str] = field(default_factory=list)


def render_header(names: Sequence[str], date: Optional[str] = None) -> str:
    return HEADER_TEMPLATE.format(detected=",".join(names), date=date or get_current_date())


def render_section(names: Sequence[str], merged: str, date: Optional[str] = None) -> str:
    """Build a complete managed section from merged template text."""
    body = merged if not merged or merged.endswith("\n") else merged + "\n"
    if body:
        body += "\n"
    return f"{render_header(names, date)}\n\n{body}{END_MARKER}\n"


def existing_blocks(text: str) -> Set[str]:
    """Template names that already have a ``# === name ===`` block."""
    return {match.group(1).strip().lower() for match in BLOCK_RE.finditer(text)}


def existing_lines(text: str) -> Set[str]:
    return {line.strip() for line in text.splitlines() if line.strip()}


def _section_end(text: str, start: int) -> int:
    """End offset of the managed section beginning at ``start``."""
    end_match = END_RE.search(text, start)
    next_header = HEADER_RE.search(text, start + 1)
    if end_match and (next_header is None or end_match.start() < next_header.start()):
        return end_match.end()

    # Sections without an end marker run until the next foreign banner.
    first_line_end = text.find("\n", start)
    if first_line_end == -1:
        return len(text)
    for banner in OTHER_BANNER_RE.finditer(text, first_line_end + 1):
        if not HEADER_RE.match(text, banner.start()):
            return banner.start()
    return len(text)


def strip_managed_sections(text: str) -> tuple:
    """
    Remove every managed section.

    Returns:
        ``(text_without_sections, offset_of_first_section)``; the offset is
        None when the text contained no managed section.
    """
    first = None
    while True:
        match = HEADER_RE.search(text)
        if match is None:
            return text, first
        start = match.start()
        end = _section_end(text, start)
        if first is None:
            first = start
        text = text[:start] + text[end:]


def _join(before: str, section: str) -> str:
    if not before:
        return section
    if not before.endswith("\n"):
        before += "\n"
    return f"{before}\n{section}"


class GitignoreBuilder:
    """Produces the new .gitignore content for a set of template names."""

    def __init__(self, manager: TemplateManager):
        self.manager = manager

    def render(self, names: Sequence[str], date: Optional[str] = None) -> str:
        return render_section(names, self.manager.merge(names), date)

    def update(
        self,
        existing: Optional[str],
        names: Sequence[str],
        append: bool = False,
        date: Optional[str] = None
    ) -> GitignoreUpdate:
        """
        Merge generated content into ``existing``.

        Files with CRLF line endings are written back with CRLF.

        Args:
            existing: Current .gitignore text, or None if the file is absent
            names: Sorted template identifiers
            append: Keep existing content and add only missing template blocks
            date: Header date (defaults to today, UTC)

        Returns:
            GitignoreUpdate with the new content
        """
        names = list(names)
        if not existing:
            return GitignoreUpdate(self.render(names, date), True, names)

        # Work on LF text and restore CRLF files afterwards.
        crlf = "\r\n" in existing
        if crlf:
            existing = existing.replace("\r\n", "\n")

        if append:
            update = self._append(existing, names, date)
        else:
            update = self._replace(existing, names, date)

        if crlf:
            update.content = update.content.replace("\n", "\r\n")
        return update

    def _replace(self, existing: str, names: List[str], date: Optional[str]) -> GitignoreUpdate:
        section = self.render(names, date)
        remaining, offset = strip_managed_sections(existing)

        if offset is None:
            content = _join(existing, section)
        else:
            before, after = remaining[:offset], remaining[offset:]
            if before and not before.endswith("\n"):
                before += "\n"
            content = before + section + after

        return GitignoreUpdate(content, content != existing, names)

    def _append(self, existing: str, names: List[str], date: Optional[str]) -> GitignoreUpdate:
        present = existing_blocks(existing)
        missing = [name for name in names if name not in present]
        if not missing:
            logger.info("All template blocks already present; nothing to append")
            return GitignoreUpdate(existing, False, [])

        # Patterns the file already has are not repeated.
        merged = self._merge_excluding(missing, existing_lines(existing))
        if not merged:
            logger.info("Missing templates add no new patterns; nothing to append")
            return GitignoreUpdate(existing, False, [])

        added = [name for name in missing if SECTION_MARKER.format(name=name) in merged]
        content = _join(existing, render_section(added, merged, date))
        return GitignoreUpdate(content, True, added)

    def _merge_excluding(self, names: List[str], exclude: Set[str]) -> str:
        blocks = []
        for block in self.manager.merge(names).split("\n\n"):
            lines = block.strip("\n").splitlines()
            if not lines:
                continue
            kept = [line for line in lines[1:] if line.strip() not in exclude]
            if kept:
                blocks.append("\n".join([lines[0], *kept]) + "\n")
        return "\n".join(blocks)
