"""Helper/Utilities for test functions."""

import torch

from tests._RandomGenerator import RandomGenerator


def normalized_coil_maps(shape: tuple[int, ...], seed: int = 0) -> torch.Tensor:
    """Create random coil maps with a sum of squares of one in each voxel.

    Parameters
    ----------
    shape
        shape ``[RO, E1, E2, CHA, N, S, LOC]`` of the coil maps
    seed
        seed of the random generator

    Returns
    -------
        complex coil maps
    """
    csm = RandomGenerator(seed).complex64_tensor(shape, low=0.1, high=1.0)
    return csm / csm.abs().square().sum(dim=3, keepdim=True).sqrt()
