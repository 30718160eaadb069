"""
Embedded Templates

Templates shipped inside the package under ``ignr/data/templates`` and the
seeding of the user's data directory from them.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Optional


logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".gitignore"

EMBEDDED_TEMPLATE_NAMES = (
    "rust", "python", "node", "go", "java", "csharp", "cpp", "ruby",
    "swift", "kotlin", "php", "scala", "elixir", "haskell", "zig", "dart",
    "terraform", "ansible", "docker",
    "vscode", "intellij", "vim", "emacs",
    "linux", "macos", "windows",
)


def _resource(name: str):
    return resources.files("ignr.data").joinpath("templates", f"{name}{TEMPLATE_SUFFIX}")


def load_embedded(name: str) -> Optional[str]:
    """Return the embedded template text for ``name`` or None."""
    name = name.lower()
    if name not in EMBEDDED_TEMPLATE_NAMES:
        return None
    return _resource(name).read_text(encoding='utf-8')


def embedded_templates() -> Dict[str, str]:
    """All embedded templates keyed by identifier."""
    return {name: load_embedded(name) for name in EMBEDDED_TEMPLATE_NAMES}


def seed_templates(target_dir: Path, dry_run: bool = False) -> int:
    """
    Write the embedded templates into ``target_dir`` when it is empty.

    Args:
        target_dir: Data templates directory
        dry_run: Only log what would be written

    Returns:
        Number of templates written (0 when the directory already had content)
    """
    target_dir = Path(target_dir)
    if target_dir.is_dir() and any(target_dir.iterdir()):
        return 0

    if dry_run:
        logger.info("dry-run: would write embedded templates to %s", target_dir)
        return 0

    target_dir.mkdir(parents=True, exist_ok=True)
    for name, content in embedded_templates().items():
        path = target_dir / f"{name}{TEMPLATE_SUFFIX}"
        path.write_text(content, encoding='utf-8')
        logger.debug("Wrote embedded template: %s", name)

    logger.info("Initialized %d embedded templates in %s", len(EMBEDDED_TEMPLATE_NAMES), target_dir)
    return len(EMBEDDED_TEMPLATE_NAMES)
