"""Tests for the coil combination."""

import pytest
import torch
from mrbart.algorithms import combine_coils
from mrbart.utils import image_to_kspace, kspace_to_image

from tests import RandomGenerator
from tests.helper import normalized_coil_maps


def test_combine_coils_single_coil():
    """Test that a single coil with unit sensitivity is the inverse FFT."""
    kspace = RandomGenerator(seed=0).complex64_tensor((8, 6, 4, 1, 2, 1, 1))
    csm = torch.ones(8, 6, 4, 1, 1, 1, 1, dtype=torch.complex64)
    result = combine_coils(kspace, csm)
    torch.testing.assert_close(result, kspace_to_image(kspace, dim=(0, 1, 2)))


def test_combine_coils_2d_does_not_transform_e2():
    """Test that a singleton E2 is not transformed."""
    kspace = RandomGenerator(seed=1).complex64_tensor((8, 6, 1, 1, 1, 1, 1))
    csm = torch.ones(8, 6, 1, 1, 1, 1, 1, dtype=torch.complex64)
    torch.testing.assert_close(combine_coils(kspace, csm), kspace_to_image(kspace, dim=(0, 1)))


def test_combine_coils_shape(random_kspace, random_csm):
    """Test that the channel dimension is reduced to one."""
    result = combine_coils(random_kspace, random_csm)
    n_ro, n_e1, n_e2, _, n_n, n_s, n_loc = random_kspace.shape
    assert result.shape == (n_ro, n_e1, n_e2, 1, n_n, n_s, n_loc)
    assert result.dtype == torch.complex64


def test_combine_coils_consistent_maps(random_csm):
    """Test that data simulated with normalized coil maps are combined to the object."""
    n_ro, n_e1, n_e2, _, n_n, n_s, n_loc = random_csm.shape
    obj = RandomGenerator(seed=2).complex64_tensor((n_ro, n_e1, n_e2, 1, n_n, n_s, n_loc))
    kspace = image_to_kspace(random_csm * obj, dim=(0, 1, 2))
    torch.testing.assert_close(combine_coils(kspace, random_csm), obj, rtol=1e-4, atol=1e-5)


def test_combine_coils_clamps_repetitions_and_segments():
    """Test that the last coil map is used for repetitions and segments without a map."""
    kspace = RandomGenerator(seed=3).complex64_tensor((8, 6, 1, 3, 3, 2, 2))
    csm = normalized_coil_maps((8, 6, 1, 3, 2, 1, 2), seed=4)
    # maps for n=2 and s=1 are the ones of the last available repetition and segment
    csm_full = torch.cat([csm, csm[:, :, :, :, -1:]], dim=4)
    csm_full = torch.cat([csm_full, csm_full], dim=5)
    torch.testing.assert_close(combine_coils(kspace, csm), combine_coils(kspace, csm_full))


def test_combine_coils_uses_conjugate():
    """Test that the coil images are multiplied with the conjugate of the coil maps."""
    kspace = image_to_kspace(torch.full((4, 4, 1, 1, 1, 1, 1), 1j, dtype=torch.complex64), dim=(0, 1))
    csm = torch.full((4, 4, 1, 1, 1, 1, 1), 1j, dtype=torch.complex64)
    result = combine_coils(kspace, csm)
    torch.testing.assert_close(result, torch.ones_like(result))


def test_combine_coils_serial_equals_parallel(random_kspace, random_csm):
    """Test that the thread pool gives the same result as the serial loop."""
    serial = combine_coils(random_kspace, random_csm, max_workers=1)
    parallel = combine_coils(random_kspace, random_csm, max_workers=4)
    torch.testing.assert_close(serial, parallel)


@pytest.mark.parametrize(
    'csm_shape',
    [(8, 6, 1, 2, 1, 1, 1), (8, 6, 1, 3, 1, 1, 2), (8, 5, 1, 3, 1, 1, 1), (8, 6, 1, 3, 0, 1, 1), (8, 6, 1, 3)],
    ids=['channels', 'locations', 'e1', 'no_repetition', 'not_7d'],
)
def test_combine_coils_shape_mismatch(csm_shape):
    """Test that coil maps not matching the k-space raise an error."""
    kspace = torch.zeros(8, 6, 1, 3, 2, 1, 1, dtype=torch.complex64)
    csm = torch.zeros(csm_shape, dtype=torch.complex64)
    with pytest.raises(ValueError):  # noqa: PT011
        combine_coils(kspace, csm)
