"""
Command Completion Support

Prints shell completion scripts for the ignr CLI using Typer's completion
machinery.
"""

from enum import Enum
from typing import Annotated

import typer
# Private Typer helper; typer is pinned below 1.0 in pyproject.toml.
from typer._completion_shared import get_completion_script

from ignr import APP_NAME


COMPLETE_VAR = f"_{APP_NAME.upper()}_COMPLETE"


class Shell(str, Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"


def completion_script(shell: Shell) -> str:
    return get_completion_script(prog_name=APP_NAME, complete_var=COMPLETE_VAR, shell=shell.value)


def completions(
    shell: Annotated[Shell, typer.Argument(help="Shell type (bash, zsh, fish, powershell)")],
):
    """
    Generate shell completions.

    [bold cyan]Example:[/bold cyan] [green]ignr completions bash >> ~/.bashrc[/green]
    """
    typer.echo(completion_script(shell))
