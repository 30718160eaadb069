"""
Template Manager

Resolves template identifiers to text across custom, synced, cached,
embedded and remote sources, and merges several templates into one
deduplicated block.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from cachetools import LRUCache

from ignr.core.config.models import TemplatesConfig
from ignr.core.exceptions import NetworkError
from ignr.core.paths import AppPaths
from ignr.core.templates.embedded import EMBEDDED_TEMPLATE_NAMES, TEMPLATE_SUFFIX, load_embedded
from ignr.core.templates.remote import TemplateClient
from ignr.utils import expand_path, is_valid_name


logger = logging.getLogger(__name__)

SECTION_MARKER = "# === {name} ==="


def _names_in(directory: Optional[Path]) -> Set[str]:
    if directory is None or not directory.is_dir():
        return set()
    return {
        path.stem.lower()
        for path in directory.iterdir()
        if path.is_file() and path.suffix == TEMPLATE_SUFFIX
    }


def _read(directory: Optional[Path], name: str) -> Optional[str]:
    if directory is None:
        return None
    path = directory / f"{name}{TEMPLATE_SUFFIX}"
    try:
        return path.read_text(encoding='utf-8')
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read template %s: %s", path, e)
        return None


class TemplateManager:
    """
    Template manager for loading and merging templates.

    Lookup order for ``get_template``:

    1. custom ``template_dir`` (when ``prefer_local``)
    2. ``<data_dir>/templates`` (synced or seeded)
    3. ``<cache_dir>/templates`` (fetched on demand)
    4. embedded templates
    5. custom ``template_dir`` (when not ``prefer_local``)
    6. remote source (when ``fetch_missing``), cached under ``cache_dir``
    """

    def __init__(
        self,
        config: TemplatesConfig,
        paths: AppPaths,
        client: Optional[TemplateClient] = None,
        dry_run: bool = False
    ):
        self.config = config
        self.paths = paths
        self.dry_run = dry_run
        self._client = client
        self._resolved: LRUCache = LRUCache(maxsize=128)

    @property
    def custom_dir(self) -> Optional[Path]:
        if not self.config.template_dir:
            return None
        return expand_path(self.config.template_dir)

    @property
    def client(self) -> Optional[TemplateClient]:
        if self._client is None and self.config.template_url:
            self._client = TemplateClient(
                self.config.template_url,
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
            )
        return self._client

    def list_available(self) -> List[str]:
        """Sorted union of embedded, custom and data-directory template names."""
        names = set(EMBEDDED_TEMPLATE_NAMES)
        names |= _names_in(self.custom_dir)
        names |= _names_in(self.paths.data_templates_dir)
        return sorted(names)

    def get_template(self, name: str) -> Optional[str]:
        """Resolve a template identifier to its text, or None if unknown."""
        name = name.strip().lower()
        if not is_valid_name(name):
            logger.warning("Invalid template name: %r", name)
            return None
        if name in self._resolved:
            return self._resolved[name]

        content = self._lookup_local(name)
        if content is None and self.config.fetch_missing:
            content = self._fetch_remote(name)

        if content is not None:
            self._resolved[name] = content
        return content

    def _lookup_local(self, name: str) -> Optional[str]:
        if self.config.prefer_local:
            content = _read(self.custom_dir, name)
            if content is not None:
                logger.debug("Template %s: custom directory", name)
                return content

        for source, directory in (
            ("data directory", self.paths.data_templates_dir),
            ("cache directory", self.paths.cache_templates_dir),
        ):
            content = _read(directory, name)
            if content is not None:
                logger.debug("Template %s: %s", name, source)
                return content

        content = load_embedded(name)
        if content is not None:
            logger.debug("Template %s: embedded", name)
            return content

        if not self.config.prefer_local:
            content = _read(self.custom_dir, name)
            if content is not None:
                logger.debug("Template %s: custom directory", name)
        return content

    def _fetch_remote(self, name: str) -> Optional[str]:
        client = self.client
        if client is None:
            return None

        try:
            content = client.fetch(name)
        except NetworkError as e:
            logger.warning("Could not fetch template '%s' (%s); using local templates only", name, e.message)
            return None
        if content is None:
            return None

        if self.dry_run:
            logger.info("dry-run: would cache template %s in %s", name, self.paths.cache_templates_dir)
            return content

        try:
            self.paths.cache_templates_dir.mkdir(parents=True, exist_ok=True)
            (self.paths.cache_templates_dir / f"{name}{TEMPLATE_SUFFIX}").write_text(content, encoding='utf-8')
        except OSError as e:
            logger.warning("Could not cache template %s: %s", name, e)
        return content

    def merge(self, names: Iterable[str]) -> str:
        """
        Merge templates into a single text.

        Each template becomes a ``# === name ===`` section. Blank lines and
        lines already emitted by an earlier section are dropped; sections
        left empty are omitted. Unknown templates are logged and skipped.
        """
        seen: Set[str] = set()
        sections = []

        for name in names:
            content = self.get_template(name)
            if content is None:
                logger.warning("Template '%s' not found", name)
                continue

            section_lines = []
            for line in content.splitlines():
                trimmed = line.strip()
                if trimmed and trimmed not in seen:
                    seen.add(trimmed)
                    section_lines.append(line.rstrip())
            if section_lines:
                sections.append((name, section_lines))

        blocks = [
            "\n".join([SECTION_MARKER.format(name=name), *lines]) + "\n"
            for name, lines in sections
        ]
        return "\n".join(blocks)
