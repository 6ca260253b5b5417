"""Temporary working directories and file names for BART files."""

import logging
import shutil
import tempfile
import time
import warnings
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import torch

from mrbart.data.dims import restore_gadgetron_dims

logger = logging.getLogger(__name__)

INPUT_NAME = 'input_data'
REFERENCE_NAME = 'reference_data'


@contextmanager
def bart_working_directory(parent: Path | None = None, delete: bool = True) -> Iterator[Path]:
    """Create a uniquely named directory for .hdr/.cfl files.

    Parameters
    ----------
    parent
        directory in which the working directory is created. Default is the system temporary directory.
    delete
        remove the directory and its content on exit, also if an exception was raised
    """
    path = Path(tempfile.mkdtemp(prefix=time.strftime('bart_%H_%M_%S__'), dir=parent))
    logger.debug('Folder to store *.hdr & *.cfl files is %s', path)
    try:
        yield path
    finally:
        if delete:
            shutil.rmtree(path)


def restore_solver_output_dims(data: torch.Tensor, shape: Sequence[int]) -> torch.Tensor:
    """Restore N, S and LOC of the solver input if the solver output allows it."""
    try:
        return restore_gadgetron_dims(data, shape)
    except ValueError:
        warnings.warn(
            f'Cannot restore N, S and LOC of {tuple(shape)} for the solver output {tuple(data.shape)}.', stacklevel=3
        )
        return data
