"""Column-major (Fortran order) reshaping of tensors."""

from collections.abc import Sequence
from math import prod

import torch


def ravel_fortran(x: torch.Tensor) -> torch.Tensor:
    """Flatten a tensor in column-major order.

    The first axis varies fastest in the result, as in the memory layout of BART and Gadgetron arrays.

    Example:
        tensor [[1, 2], [3, 4]] results in [1, 3, 2, 4]

    Parameters
    ----------
    x
        tensor to flatten

    Returns
    -------
        1D tensor (a copy unless x is already column-major contiguous)
    """
    return x.permute(*reversed(range(x.ndim))).reshape(-1)


def reshape_fortran(x: torch.Tensor, shape: Sequence[int]) -> torch.Tensor:
    """Reshape a tensor in column-major order.

    Inverse of `ravel_fortran` if shape is the shape of the flattened tensor.

    Parameters
    ----------
    x
        tensor to reshape, will be read in column-major order
    shape
        target shape

    Returns
    -------
        tensor with the target shape, filled in column-major order

    Raises
    ------
    ValueError
        If the number of elements does not match the target shape
    """
    shape = tuple(shape)
    if prod(shape) != x.numel():
        raise ValueError(f'Cannot reshape tensor with {x.numel()} elements to shape {shape}.')
    flat = ravel_fortran(x)
    return flat.reshape(shape[::-1]).permute(*reversed(range(len(shape))))
