"""PyTest fixtures for the mrbart package."""

import pytest
import torch

from tests import RandomGenerator
from tests.helper import normalized_coil_maps

# [RO, E1, E2, CHA, N, S, LOC]
KSPACE_SHAPES = {
    '2d': (16, 12, 1, 3, 1, 1, 1),
    '3d': (8, 6, 4, 2, 1, 1, 1),
    '2d_multi': (8, 6, 1, 4, 2, 3, 2),
    '3d_multi': (8, 6, 4, 2, 3, 1, 2),
}


@pytest.fixture(params=list(KSPACE_SHAPES.values()), ids=list(KSPACE_SHAPES.keys()))
def kspace_shape(request) -> tuple[int, ...]:
    """Shapes of 7D k-space arrays."""
    return request.param


@pytest.fixture
def random_kspace(kspace_shape: tuple[int, ...]) -> torch.Tensor:
    """Random complex k-space with the shape of the kspace_shape fixture."""
    return RandomGenerator(seed=0).complex64_tensor(kspace_shape)


@pytest.fixture
def random_csm(kspace_shape: tuple[int, ...]) -> torch.Tensor:
    """Normalized random coil maps matching the kspace_shape fixture."""
    return normalized_coil_maps(kspace_shape, seed=1)
