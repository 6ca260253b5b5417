"""Classification of the undersampling pattern of Cartesian k-space data."""

import logging
from collections.abc import Sequence

import torch

from mrbart.data.AccelerationFactor import AccelerationFactor
from mrbart.data.dims import GADGETRON_DIMS
from mrbart.data.enums import SamplingPattern

logger = logging.getLogger(__name__)

GAP_FACTOR = 1.5
"""Gaps between acquired lines larger than this multiple of the acceleration factor are large gaps."""

MAX_LARGE_GAPS = 5
"""Uniform sampling has at most this many large gaps per direction."""


def _count_large_gaps(mask_line: torch.Tensor, threshold: float) -> int:
    """Count gaps between consecutive acquired positions larger than threshold."""
    positions = torch.nonzero(mask_line).flatten()
    if positions.numel() < 2:
        return 0
    return int((torch.diff(positions) > threshold).sum())


def classify_sampling_pattern(
    kspace: torch.Tensor, acceleration_factor: AccelerationFactor | Sequence[float]
) -> SamplingPattern:
    """Classify the undersampling as uniform or variable density.

    Uses the central readout sample of the first channel and first slice location.
    A phase encoding position is acquired if it has a non-zero sample in any repetition or segment.
    The acquired positions along the central E1 and E2 lines are compared: uniform undersampling leads to
    regular gaps of about the acceleration factor, variable density (e.g. Poisson disc) sampling to
    irregular, larger gaps. More than `MAX_LARGE_GAPS` gaps larger than `GAP_FACTOR` times the
    acceleration factor in either direction classify the data as variable density.

    This is a heuristic, data close to the threshold can be misclassified.

    Parameters
    ----------
    kspace
        k-space data ``[RO, E1, E2, CHA, N, S, LOC]``. Missing trailing dimensions are treated as singletons.
    acceleration_factor
        acceleration along E1 and E2

    Returns
    -------
        the sampling pattern. `SamplingPattern.UNIFORM` if no line was acquired.

    Raises
    ------
    ValueError
        If kspace has more than 7 dimensions.
    """
    if kspace.ndim > len(GADGETRON_DIMS):
        raise ValueError(f'Expected at most 7 dimensions [RO, E1, E2, CHA, N, S, LOC], got {kspace.ndim}.')
    kspace = kspace.reshape(*kspace.shape, *((1,) * (len(GADGETRON_DIMS) - kspace.ndim)))
    acceleration = AccelerationFactor.from_sequence(acceleration_factor)
    n_ro, n_e1, n_e2, _, n_n, n_s, _ = kspace.shape
    if kspace.numel() == 0:
        return SamplingPattern.UNIFORM

    # acquired[e1, e2, n, s]
    acquired = kspace[n_ro // 2, :, :, 0, :, :, 0].abs() > 0
    num_readout_lines = int(acquired.sum())
    if num_readout_lines == 0:
        logger.debug('No acquired readout lines, assuming uniform sampling')
        return SamplingPattern.UNIFORM
    logger.debug('Effective acceleration factor: %.3f', n_s * n_n * n_e1 * n_e2 / num_readout_lines)

    mask = acquired.flatten(start_dim=2).any(dim=-1)
    # each direction is compared with its own acceleration factor
    large_gaps_e1 = _count_large_gaps(mask[:, n_e2 // 2], GAP_FACTOR * acceleration.k1)
    large_gaps_e2 = _count_large_gaps(mask[n_e1 // 2, :], GAP_FACTOR * acceleration.k2)

    if large_gaps_e1 > MAX_LARGE_GAPS or large_gaps_e2 > MAX_LARGE_GAPS:
        pattern = SamplingPattern.VARIABLE_DENSITY
    else:
        pattern = SamplingPattern.UNIFORM
    logger.debug('Large gaps along E1: %d, along E2: %d, sampling pattern: %s', large_gaps_e1, large_gaps_e2, pattern)
    return pattern
