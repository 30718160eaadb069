"""
Generate Command

Detects the project's stack and writes (or prints) the managed .gitignore
section.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.markup import escape

from ignr.cli.context import OutputFormat, RuntimeContext, make_console
from ignr.cli.error_handling import handle_error
from ignr.cli.utils import dump_structured, emit, get_runtime
from ignr.core.detection import StackDetector
from ignr.core.exceptions import IgnrError, InvalidPathError, NotAGitRepositoryError
from ignr.core.gitignore import GitignoreBuilder
from ignr.utils import normalize_names


logger = logging.getLogger(__name__)

NOTHING_DETECTED = "No technologies detected and none specified"


def find_git_root(directory: Path) -> Optional[Path]:
    """Return the nearest directory at or above ``directory`` containing ``.git``."""
    for candidate in (directory, *directory.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def resolve_directory(directory: Optional[Path]) -> Path:
    target = Path(directory) if directory else Path(".")
    if not target.exists():
        raise InvalidPathError(f"Directory does not exist: {target}", path=str(target))
    if not target.is_dir():
        raise InvalidPathError(f"Not a directory: {target}", path=str(target))
    return target.resolve()


def read_gitignore(path: Path) -> Optional[str]:
    """
    Read an existing .gitignore, or None when there is none.

    Line endings are kept as they are and bytes that are not UTF-8 are
    carried through as surrogates so they can be written back unchanged.
    """
    if not path.exists():
        return None
    with open(path, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
        return f.read()


def write_gitignore(path: Path, content: str) -> None:
    with open(path, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
        f.write(content)


def collect_templates(
    runtime: RuntimeContext,
    directory: Path,
    add: List[str],
    no_detect: bool,
    depth: int
) -> List[str]:
    """Detected identifiers ∪ ``--add`` ∪ ``always_include``, sorted."""
    templates = set()
    if not no_detect:
        templates.update(StackDetector(runtime.config.detection).detect(directory, depth))
    templates.update(normalize_names(add))
    templates.update(runtime.config.templates.always_include)
    return sorted(templates)


def generate(
    ctx: typer.Context,
    print_only: Annotated[bool, typer.Option("--print", "-p", help="Print to stdout instead of writing .gitignore")] = False,
    append: Annotated[bool, typer.Option("--append", "-a", help="Keep the existing file and append only missing template blocks")] = False,
    no_detect: Annotated[bool, typer.Option("--no-detect", help="Skip auto-detection, only use explicitly specified templates")] = False,
    add: Annotated[Optional[List[str]], typer.Option("--add", "-t", metavar="TEMPLATE", help="Additional templates to include")] = None,
    directory: Annotated[Optional[Path], typer.Option("--dir", "-d", metavar="PATH", help="Directory to scan (defaults to current directory)")] = None,
    depth: Annotated[int, typer.Option("--depth", min=0, help="Maximum directory depth to scan")] = 10,
    force: Annotated[bool, typer.Option("--force", "-f", help="Create .gitignore even if not in a git repo")] = False,
):
    """
    Generate .gitignore (auto-detects the stack).

    [bold cyan]Examples:[/bold cyan]

    • Write .gitignore here: [green]ignr generate[/green]
    • Preview only: [green]ignr generate --print[/green]
    • Extra templates: [green]ignr generate -t macos -t vscode[/green]
    """
    runtime = get_runtime(ctx)
    try:
        _generate(runtime, print_only, append, no_detect, add or [], directory, depth, force)
    except IgnrError as e:
        handle_error(e, make_console(runtime.options, stderr=True), runtime.output_format)


def _generate(
    runtime: RuntimeContext,
    print_only: bool,
    append: bool,
    no_detect: bool,
    add: List[str],
    directory: Optional[Path],
    depth: int,
    force: bool
) -> None:
    target = resolve_directory(directory)

    if not force and find_git_root(target) is None:
        raise NotAGitRepositoryError(
            "Not in a git repository. Use --force to create .gitignore anyway.",
            path=str(target)
        )

    templates = collect_templates(runtime, target, add, no_detect, depth)
    if not templates:
        emit(
            runtime,
            {"detected": [], "message": NOTHING_DETECTED},
            f"{NOTHING_DETECTED}. Use --add to specify templates."
        )
        return

    builder = GitignoreBuilder(runtime.template_manager())

    if print_only:
        content = builder.render(templates)
        if runtime.output_format == OutputFormat.TEXT:
            typer.echo(content, nl=False)
        else:
            typer.echo(dump_structured({"detected": templates, "content": content}, runtime.output_format))
        return

    gitignore_path = target / ".gitignore"

    if runtime.dry_run:
        logger.info("dry-run: would write .gitignore to %s", gitignore_path)
        if runtime.options.verbose > 0 or runtime.output_format != OutputFormat.TEXT:
            emit(
                runtime,
                {"detected": templates, "path": str(gitignore_path), "dry_run": True},
                f"Detected: {', '.join(templates)}\nWould write to: {escape(str(gitignore_path))}"
            )
        return

    try:
        existing = read_gitignore(gitignore_path)
    except OSError as e:
        raise InvalidPathError(f"Cannot read {gitignore_path}: {e}", path=str(gitignore_path), cause=e)

    update = builder.update(existing, templates, append=append)
    if update.changed:
        try:
            write_gitignore(gitignore_path, update.content)
        except OSError as e:
            raise InvalidPathError(f"Cannot write {gitignore_path}: {e}", path=str(gitignore_path), cause=e)
        logger.info("Wrote %s", gitignore_path)

    if update.changed:
        message = f"Generated .gitignore with: {', '.join(update.templates)}"
    else:
        message = ".gitignore already contains all detected templates"
    emit(
        runtime,
        {
            "detected": templates,
            "written": update.templates,
            "path": str(gitignore_path),
            "changed": update.changed,
        },
        message
    )
