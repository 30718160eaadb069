"""
Stack Detection

Walks a project tree to a bounded depth and maps manifest files, file
extensions and IDE directories to template identifiers.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

import pathspec

from ignr.core.config.models import DetectionConfig
from ignr.core.exceptions import InvalidPathError
from ignr.utils import TRACE


logger = logging.getLogger(__name__)


MANIFEST_RULES: Dict[str, Tuple[str, ...]] = {
    "Cargo.toml": ("rust",),
    "package.json": ("node",),
    "requirements.txt": ("python",),
    "pyproject.toml": ("python",),
    "setup.py": ("python",),
    "Pipfile": ("python",),
    "uv.lock": ("python",),
    "go.mod": ("go",),
    "go.sum": ("go",),
    "pom.xml": ("java",),
    "build.gradle": ("java",),
    "build.gradle.kts": ("java",),
    "CMakeLists.txt": ("cpp",),
    "Makefile": ("cpp",),
    "configure.ac": ("cpp",),
    "Gemfile": ("ruby",),
    "Rakefile": ("ruby",),
    "Package.swift": ("swift",),
    "composer.json": ("php",),
    "build.sbt": ("scala",),
    "mix.exs": ("elixir",),
    "stack.yaml": ("haskell",),
    "cabal.project": ("haskell",),
    "build.zig": ("zig",),
    "pubspec.yaml": ("dart",),
    "main.tf": ("terraform",),
    "terraform.tf": ("terraform",),
    "playbook.yml": ("ansible",),
    "ansible.cfg": ("ansible",),
    "Dockerfile": ("docker",),
    "docker-compose.yml": ("docker",),
    "docker-compose.yaml": ("docker",),
}

EXTENSION_RULES: Dict[str, Tuple[str, ...]] = {
    "rs": ("rust",),
    "py": ("python",), "pyw": ("python",), "pyi": ("python",),
    "js": ("node",), "jsx": ("node",), "ts": ("node",), "tsx": ("node",),
    "mjs": ("node",), "cjs": ("node",),
    "go": ("go",),
    "java": ("java",),
    "cs": ("csharp",), "fs": ("csharp",), "vb": ("csharp",),
    "csproj": ("csharp",), "sln": ("csharp",), "fsproj": ("csharp",),
    "c": ("cpp",), "cpp": ("cpp",), "cc": ("cpp",), "cxx": ("cpp",),
    "h": ("cpp",), "hpp": ("cpp",), "hxx": ("cpp",),
    "rb": ("ruby",),
    "swift": ("swift",),
    "kt": ("kotlin",), "kts": ("kotlin",),
    "php": ("php",),
    "scala": ("scala",), "sc": ("scala",),
    "ex": ("elixir",), "exs": ("elixir",),
    "hs": ("haskell",), "lhs": ("haskell",),
    "zig": ("zig",),
    "dart": ("dart",),
    "tf": ("terraform",), "tfvars": ("terraform",),
}

IDE_DIRECTORIES: Dict[str, Tuple[str, ...]] = {
    ".vscode": ("vscode",),
    ".idea": ("intellij",),
    ".vim": ("vim",),
    ".nvim": ("vim",),
    ".emacs.d": ("emacs",),
}

# Never descended into or matched.
SKIP_DIRECTORIES = {".git"}


def host_os_template(platform: Optional[str] = None) -> Optional[str]:
    """Map ``sys.platform`` to the OS template identifier."""
    platform = platform or sys.platform
    if platform.startswith("linux"):
        return "linux"
    if platform == "darwin":
        return "macos"
    if platform in ("win32", "cygwin"):
        return "windows"
    return None


def match_file(path: Path) -> Set[str]:
    """Template identifiers signalled by a single file."""
    matched: Set[str] = set(MANIFEST_RULES.get(path.name, ()))

    if path.name == "build.gradle.kts" and "kotlin" in str(path):
        matched.add("kotlin")

    extension = path.suffix[1:] if path.suffix else ""
    matched.update(EXTENSION_RULES.get(extension, ()))
    return matched


def match_directory(path: Path) -> Set[str]:
    """Template identifiers signalled by an IDE/editor directory."""
    return set(IDE_DIRECTORIES.get(path.name, ()))


class _IgnoreRules:
    """Stack of .gitignore specs collected while walking."""

    def __init__(self) -> None:
        self._specs: List[Tuple[Path, pathspec.GitIgnoreSpec]] = []

    def load(self, directory: Path) -> None:
        gitignore = directory / ".gitignore"
        if not gitignore.is_file():
            return
        try:
            with open(gitignore, 'r', encoding='utf-8', errors='replace') as f:
                spec = pathspec.GitIgnoreSpec.from_lines(f)
        except OSError as e:
            logger.debug("Could not read %s: %s", gitignore, e)
            return
        self._specs.append((directory, spec))

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        """
        Whether ``path`` is ignored by the collected .gitignore files.

        As in git, the last matching pattern decides and patterns in a
        deeper .gitignore take precedence over those of its parents, so a
        ``!pattern`` in a subdirectory re-includes what the root excludes.
        """
        for base, spec in reversed(self._specs):
            try:
                relative = path.relative_to(base).as_posix()
            except ValueError:
                continue
            if is_dir:
                relative += "/"
            result = spec.check_file(relative)
            if result.include is not None:
                return result.include
        return False


class StackDetector:
    """
    Detects technologies used in a directory.

    The walk is depth-bounded (the root's children are depth 1), scans
    hidden entries, skips ``.git`` and honours ``.gitignore`` files found on
    the way, except that ignored IDE directories still count as signals.
    Results are sorted so the same tree always yields the same list.
    """

    def __init__(self, config: Optional[DetectionConfig] = None, platform: Optional[str] = None):
        self.config = config or DetectionConfig()
        self.platform = platform

    def detect(self, directory: Union[str, Path], depth: Optional[int] = None) -> List[str]:
        """
        Detect template identifiers for a directory.

        Args:
            directory: Project root to scan
            depth: Requested scan depth, capped by ``max_depth``

        Returns:
            Sorted, deduplicated template identifiers

        Raises:
            InvalidPathError: If the directory does not exist
        """
        root = Path(directory)
        if not root.is_dir():
            raise InvalidPathError(f"Directory does not exist: {root}", path=str(root))

        max_depth = self.config.max_depth if depth is None else min(depth, self.config.max_depth)
        detected: Set[str] = set()

        for path, is_dir in self._walk(root, max_depth):
            if is_dir:
                if self.config.detect_ide:
                    detected.update(match_directory(path))
            else:
                detected.update(match_file(path))

        if self.config.detect_os:
            os_template = host_os_template(self.platform)
            if os_template:
                detected.add(os_template)

        result = sorted(detected)
        logger.debug("Detected %s in %s (depth %d)", result, root, max_depth)
        return result

    def _walk(self, root: Path, max_depth: int):
        """Yield ``(path, is_dir)`` for entries up to ``max_depth``."""
        rules = _IgnoreRules()
        stack = [(root, 0)]

        while stack:
            directory, level = stack.pop()
            if level >= max_depth:
                continue
            rules.load(directory)

            try:
                entries = sorted(os.scandir(directory), key=lambda e: e.name)
            except OSError as e:
                logger.debug("Skipping unreadable directory %s: %s", directory, e)
                continue

            for entry in entries:
                path = Path(entry.path)
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    continue
                if is_dir and entry.name in SKIP_DIRECTORIES:
                    continue
                if rules.is_ignored(path, is_dir):
                    logger.log(TRACE, "Ignored by .gitignore: %s", path)
                    # Ignored IDE directories still count but are not descended into.
                    if is_dir and entry.name in IDE_DIRECTORIES:
                        yield path, is_dir
                    continue

                yield path, is_dir
                if is_dir:
                    stack.append((path, level + 1))
