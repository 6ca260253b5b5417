"""Reading and writing of BART complex float files (.hdr/.cfl pairs).

An array is stored as two files sharing a common name:

- ``<name>.hdr``: a comment line ``# Dimensions`` and a line with the 16 dimensions,
- ``<name>.cfl``: the complex samples as interleaved float32 real and imaginary parts
  in column-major order (first dimension varies fastest) and native byte order.
"""

import logging
import os
from math import prod
from pathlib import Path

import numpy as np
import torch

from mrbart.data.dims import MAX_DIMS, to_bart_dims, to_gadgetron_dims
from mrbart.utils.reshape import ravel_fortran, reshape_fortran

logger = logging.getLogger(__name__)

HEADER_COMMENT = '# Dimensions'
BYTES_PER_SAMPLE = np.dtype(np.complex64).itemsize


class CflError(Exception):
    """An error in a BART complex float file."""


class HeaderParseError(CflError, ValueError):
    """A malformed BART header file."""


class TruncatedFileError(CflError, OSError):
    """A BART data file holding fewer samples than its header declares."""


def _header_path(name: str | os.PathLike) -> Path:
    return Path(f'{os.fspath(name)}.hdr')


def _data_path(name: str | os.PathLike) -> Path:
    return Path(f'{os.fspath(name)}.cfl')


def write_cfl_header(name: str | os.PathLike, dims: tuple[int, ...]) -> None:
    """Write a BART header file.

    Parameters
    ----------
    name
        file name without extension
    dims
        dimensions of the array, at most 15. Padded with ones to 16 dimensions.

    Raises
    ------
    DimensionOverflowError
        If there are 16 or more dimensions.
    """
    bart_dims = to_bart_dims(dims)
    with _header_path(name).open('w', encoding='utf-8') as file:
        file.write(f'{HEADER_COMMENT}\n')
        file.write(' '.join(str(d) for d in bart_dims) + '\n')


def read_cfl_header(name: str | os.PathLike) -> tuple[int, ...]:
    """Read the dimensions from a BART header file.

    Parameters
    ----------
    name
        file name without extension

    Returns
    -------
        the 16 BART dimensions

    Raises
    ------
    HeaderParseError
        If the header is not UTF-8 text, has fewer than two lines or the second line is not a list of at most 16
        non-negative integers.
    """
    path = _header_path(name)
    try:
        lines = path.read_text(encoding='utf-8').splitlines()
    except UnicodeDecodeError as e:
        raise HeaderParseError(f'{path} is not a text file.') from e
    if len(lines) < 2:
        raise HeaderParseError(f'{path} has {len(lines)} line(s), expected a comment and a dimension line.')
    tokens = lines[1].split()
    if not tokens:
        raise HeaderParseError(f'{path} has an empty dimension line.')
    try:
        dims = tuple(int(token) for token in tokens)
    except ValueError as e:
        raise HeaderParseError(f'{path} has a non-integer dimension: {lines[1]!r}.') from e
    if any(d < 0 for d in dims):
        raise HeaderParseError(f'{path} has a negative dimension: {lines[1]!r}.')
    if len(dims) > MAX_DIMS:
        raise HeaderParseError(f'{path} has {len(dims)} dimensions, at most {MAX_DIMS} are supported.')
    return dims + (1,) * (MAX_DIMS - len(dims))


def write_cfl(name: str | os.PathLike, data: torch.Tensor | np.ndarray) -> None:
    """Write an array to a BART .hdr/.cfl file pair.

    Existing files are overwritten.

    Parameters
    ----------
    name
        file name without extension
    data
        array with at most 15 dimensions. Written as complex64 in column-major order.

    Raises
    ------
    DimensionOverflowError
        If data has 16 or more dimensions.
    OSError
        If one of the files cannot be written.
    """
    if isinstance(data, torch.Tensor):
        tensor = data.detach().cpu().resolve_conj().to(torch.complex64)
    else:
        tensor = torch.from_numpy(np.ascontiguousarray(data, dtype=np.complex64))
    write_cfl_header(name, tuple(tensor.shape))
    samples = ravel_fortran(tensor).numpy()
    with _data_path(name).open('wb') as file:
        samples.tofile(file)
    logger.debug('Wrote %s with dimensions %s', os.fspath(name), tuple(tensor.shape))


def _read_samples(name: str | os.PathLike, bart_dims: tuple[int, ...]) -> torch.Tensor:
    """Read the flat samples declared by a header."""
    path = _data_path(name)
    n_samples = prod(bart_dims)
    with path.open('rb') as file:
        n_bytes = os.fstat(file.fileno()).st_size
        if n_bytes < n_samples * BYTES_PER_SAMPLE:
            raise TruncatedFileError(
                f'{path} has {n_bytes} bytes, expected {n_samples * BYTES_PER_SAMPLE} for dimensions {bart_dims}.'
            )
        samples = np.fromfile(file, dtype=np.complex64, count=n_samples)
    return torch.from_numpy(samples)


def read_cfl_bart(name: str | os.PathLike) -> torch.Tensor:
    """Read a BART .hdr/.cfl file pair keeping all 16 BART dimensions.

    Parameters
    ----------
    name
        file name without extension

    Returns
    -------
        complex64 array with 16 dimensions

    Raises
    ------
    HeaderParseError
        If the header is malformed.
    TruncatedFileError
        If the data file is shorter than declared in the header.
    OSError
        If one of the files cannot be read.
    """
    bart_dims = read_cfl_header(name)
    data = reshape_fortran(_read_samples(name, bart_dims), bart_dims)
    logger.debug('Read %s with dimensions %s', os.fspath(name), bart_dims)
    return data


def read_cfl(name: str | os.PathLike) -> torch.Tensor:
    """Read a BART .hdr/.cfl file pair as a 7D Gadgetron array.

    The BART dimensions from the fifth on are flattened into the repetition dimension N,
    segment and slice location have size 1: ``[RO, E1, E2, CHA, prod(rest), 1, 1]``.
    Use `read_cfl_bart` to keep the BART dimensions.

    Parameters
    ----------
    name
        file name without extension

    Returns
    -------
        complex64 array ``[RO, E1, E2, CHA, N, S, LOC]``

    Raises
    ------
    HeaderParseError
        If the header is malformed.
    TruncatedFileError
        If the data file is shorter than declared in the header.
    OSError
        If one of the files cannot be read.
    """
    bart_dims = read_cfl_header(name)
    shape = to_gadgetron_dims(bart_dims)
    assert prod(shape) == prod(bart_dims), 'collapsed shape does not match the number of samples'
    data = reshape_fortran(_read_samples(name, bart_dims), shape)
    logger.debug('Read %s with dimensions %s as %s', os.fspath(name), bart_dims, shape)
    return data
