"""Interface of the external BART solver and helpers for BART command scripts."""

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from typing_extensions import Protocol

logger = logging.getLogger(__name__)


class BartSolver(Protocol):
    """A solver consuming and producing BART .hdr/.cfl files.

    Implementations typically run a BART command script in the working directory.
    """

    def __call__(self, working_directory: Path, inputs: Sequence[str], arguments: str) -> Sequence[str]:
        """Run the solver.

        Parameters
        ----------
        working_directory
            directory containing the input files
        inputs
            names (without extension) of the input files in the working directory
        arguments
            command line options for the solver

        Returns
        -------
            names (without extension) of the files written to the working directory, the final result last
        """
        ...


def last_bart_command(script: str) -> str:
    """Get the last BART command of a command script.

    Parameters
    ----------
    script
        content of the script

    Returns
    -------
        last non-empty line containing a call to bart

    Raises
    ------
    ValueError
        If the script does not contain a bart command.
    """
    commands = [line.strip() for line in script.splitlines() if line.strip() and 'bart' in line]
    if not commands:
        raise ValueError('The script does not contain a bart command.')
    return commands[-1]


def output_name_from_command(command: str) -> str:
    """Get the output file name of a BART command line.

    BART commands write their output to the last argument, e.g. ``bart pics -l1 kspace sens image``.

    Parameters
    ----------
    command
        command line

    Returns
    -------
        name of the output file

    Raises
    ------
    ValueError
        If the command line is empty.
    """
    tokens = command.split()
    if not tokens:
        raise ValueError('Empty command line.')
    return tokens[-1]


BartScriptRunner = Callable[[Path, Sequence[str]], None]
"""Runs a command line in a working directory, e.g. with `subprocess.run` and ``cwd``."""


class BartScriptSolver:
    """A `BartSolver` running a BART command script.

    The script is called with the command line options followed by the input names.
    The result is the output file of the last bart command in the script.
    Running the command is left to the injected runner.
    """

    def __init__(self, script: str | os.PathLike, runner: BartScriptRunner) -> None:
        """Initialize BartScriptSolver.

        Parameters
        ----------
        script
            path of the command script
        runner
            runs the command line of the script in the working directory
        """
        self.script = Path(script)
        self.runner = runner

    def __call__(self, working_directory: Path, inputs: Sequence[str], arguments: str) -> Sequence[str]:
        """Run the script.

        Parameters
        ----------
        working_directory
            directory containing the input files
        inputs
            names of the input files in the working directory
        arguments
            command line options for the script

        Returns
        -------
            name of the output file of the last bart command

        Raises
        ------
        FileNotFoundError
            If the script does not exist.
        ValueError
            If the script does not contain a bart command.
        """
        output_name = output_name_from_command(last_bart_command(self.script.read_text(encoding='utf-8')))
        command = [str(self.script), *arguments.split(), *inputs]
        logger.debug('Running %s in %s', ' '.join(command), working_directory)
        self.runner(working_directory, command)
        return [output_name]
