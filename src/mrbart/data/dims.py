"""Dimension conventions of Gadgetron and BART arrays and mapping between them.

Gadgetron k-space and image arrays have 7 dimensions in a fixed order
``[RO, E1, E2, CHA, N, S, LOC]``. BART arrays have 16 dimensions, unused
dimensions have size 1.
"""

from collections.abc import Iterable, Iterator, Sequence
from math import prod
from typing import NamedTuple

import torch
from einops import rearrange

from mrbart.utils.reshape import ravel_fortran, reshape_fortran

DIM_RO = 0  # readout
DIM_E1 = 1  # phase encoding 1
DIM_E2 = 2  # phase encoding 2 (partition)
DIM_CHA = 3  # receiver channel
DIM_N = 4  # repetition
DIM_S = 5  # segment
DIM_LOC = 6  # slice location

GADGETRON_DIMS = ('ro', 'e1', 'e2', 'cha', 'n', 's', 'loc')
BART_DIMS = (
    'read',
    'phs1',
    'phs2',
    'coil',
    'maps',
    'te',
    'coeff',
    'coeff2',
    'iter',
    'cshift',
    'time',
    'time2',
    'level',
    'slice',
    'avg',
    'batch',
)
MAX_DIMS = len(BART_DIMS)


class DimensionOverflowError(ValueError):
    """More dimensions than a BART header can hold."""


class Chunk(NamedTuple):
    """A ``[RO, E1, E2, CHA]`` slab of a Gadgetron array."""

    data: torch.Tensor
    """View of the slab."""

    dims: tuple[int, ...]
    """Dimensions of the slab padded to the BART header size."""

    idx: tuple[int, int, int]
    """Index ``(n, s, loc)`` of the slab in the 7D array."""


def to_bart_dims(shape: Sequence[int]) -> tuple[int, ...]:
    """Pad a shape to the 16 dimensions of a BART header.

    Parameters
    ----------
    shape
        shape of the array, at most 15 dimensions

    Returns
    -------
        shape padded with trailing ones to 16 dimensions

    Raises
    ------
    DimensionOverflowError
        If the shape has 16 or more dimensions.
    """
    if len(shape) >= MAX_DIMS:
        raise DimensionOverflowError(f'Arrays with {len(shape)} dimensions do not fit into {MAX_DIMS} BART dimensions.')
    return (*(int(s) for s in shape), *((1,) * (MAX_DIMS - len(shape))))


def to_gadgetron_dims(bart_dims: Sequence[int]) -> tuple[int, ...]:
    """Collapse BART dimensions to the 7 Gadgetron dimensions.

    All BART dimensions starting from the fifth (maps, te, coeff, ...) are flattened
    into the repetition dimension N, segment and slice are set to 1.
    The meaning of the flattened dimensions cannot be recovered from the result.

    Parameters
    ----------
    bart_dims
        dimensions as stored in a BART header

    Returns
    -------
        ``(RO, E1, E2, CHA, N, 1, 1)``
    """
    dims = tuple(bart_dims) + (1,) * max(0, 4 - len(bart_dims))
    return (*dims[:4], prod(dims[4:]), 1, 1)


def restore_gadgetron_dims(data: torch.Tensor, shape: Sequence[int]) -> torch.Tensor:
    """Restore N, S and LOC of a collapsed 7D array.

    Reverts `to_gadgetron_dims` for data that was written with the target N, S and LOC
    and came back with these dimensions flattened into N.

    Parameters
    ----------
    data
        7D array ``[RO, E1, E2, CHA, N*S*LOC, 1, 1]``
    shape
        7D shape whose last three entries are the N, S and LOC to restore

    Returns
    -------
        array ``[RO, E1, E2, CHA, N, S, LOC]``

    Raises
    ------
    ValueError
        If the number of elements does not match
    """
    if data.ndim != len(GADGETRON_DIMS) or len(shape) != len(GADGETRON_DIMS):
        raise ValueError(f'Expected 7D data and shape, got {tuple(data.shape)} and {tuple(shape)}.')
    n_n, n_s, n_loc = shape[DIM_N:]
    if data.shape[DIM_S:] != (1, 1) or data.shape[DIM_N] != n_n * n_s * n_loc:
        raise ValueError(f'Cannot restore N, S and LOC of {tuple(shape)} from {tuple(data.shape)}.')
    # N varies fastest in the collapsed dimension
    return rearrange(data, 'ro e1 e2 cha (loc s n) () () -> ro e1 e2 cha n s loc', n=n_n, s=n_s, loc=n_loc)


def to_chunked_interchange(data: torch.Tensor) -> Iterator[Chunk]:
    """Split a Gadgetron array into ``[RO, E1, E2, CHA]`` chunks.

    Chunks are yielded with LOC as the outer, S as the middle and N as the inner loop.
    `from_chunked_interchange` relies on this order.

    Parameters
    ----------
    data
        7D array ``[RO, E1, E2, CHA, N, S, LOC]``

    Yields
    ------
        chunks with views of the data

    Raises
    ------
    ValueError
        If data is not 7D
    """
    if data.ndim != len(GADGETRON_DIMS):
        raise ValueError(f'Expected a 7D array [RO, E1, E2, CHA, N, S, LOC], got shape {tuple(data.shape)}.')
    n_n, n_s, n_loc = data.shape[DIM_N:]
    dims = to_bart_dims(data.shape[:DIM_N])
    for loc in range(n_loc):
        for s in range(n_s):
            for n in range(n_n):
                yield Chunk(data[:, :, :, :, n, s, loc], dims, (n, s, loc))


def from_chunked_interchange(
    chunks: Iterable[torch.Tensor | Chunk] | torch.Tensor, shape: Sequence[int]
) -> torch.Tensor:
    """Reassemble a Gadgetron array from ``[RO, E1, E2, CHA]`` chunks.

    The chunks are flattened in column-major order and concatenated to a single buffer,
    which is interpreted as a column-major array of the target shape.
    This is only correct if the chunks are in the order of `to_chunked_interchange`.

    Parameters
    ----------
    chunks
        chunks in LOC, S, N nesting order or the already concatenated 1D buffer
    shape
        7D target shape ``[RO, E1, E2, CHA, N, S, LOC]``

    Returns
    -------
        7D array

    Raises
    ------
    ValueError
        If the number of elements does not match the target shape
    """
    if isinstance(chunks, torch.Tensor):
        buffer = chunks.reshape(-1)
    else:
        buffer = torch.cat([ravel_fortran(c.data if isinstance(c, Chunk) else c) for c in chunks])
    return reshape_fortran(buffer, shape)
