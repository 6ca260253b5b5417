"""Tests for the reconstruction of several encoding spaces."""

import pytest
import torch
from mrbart.algorithms.reconstruction import BartReconstruction, EncodingSpace, reconstruct_encoding_spaces

from tests import RandomGenerator


def encoding_space(n_e1: int, seed: int) -> EncodingSpace:
    """Create an encoding space with a single coil."""
    kspace = RandomGenerator(seed).complex64_tensor((8, n_e1, 1, 1, 1, 1, 1))
    csm = torch.ones(8, n_e1, 1, 1, 1, 1, 1, dtype=torch.complex64)
    return EncodingSpace(kspace, csm)


def test_reconstruct_encoding_spaces(identity_solver):
    """Test that all encoding spaces are reconstructed in order."""
    encoding_spaces = [encoding_space(6, seed=0), encoding_space(10, seed=1)]
    results = reconstruct_encoding_spaces(BartReconstruction(identity_solver), encoding_spaces, n_encoding_spaces=2)
    assert [result.image.shape[1] for result in results] == [6, 10]
    assert len(identity_solver.calls) == 2


def test_reconstruct_encoding_spaces_more_than_protocol(identity_solver):
    """Test the warning for more encoding spaces than in the protocol."""
    encoding_spaces = [encoding_space(6, seed=0), encoding_space(6, seed=1)]
    with pytest.warns(UserWarning, match='More encoding spaces'):
        results = reconstruct_encoding_spaces(BartReconstruction(identity_solver), encoding_spaces, 1)
    assert len(results) == 2


def test_reconstruct_encoding_spaces_error(identity_solver):
    """Test that errors of an encoding space are propagated."""
    kspace = RandomGenerator(seed=2).complex64_tensor((8, 6, 1, 2, 1, 1, 1))
    csm = torch.ones(8, 6, 1, 3, 1, 1, 1, dtype=torch.complex64)
    encoding_spaces = [encoding_space(6, seed=0), EncodingSpace(kspace, csm)]
    with pytest.raises(ValueError, match='do not match'):
        reconstruct_encoding_spaces(BartReconstruction(identity_solver), encoding_spaces)
