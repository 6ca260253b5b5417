"""Reconstruction of all encoding spaces of an acquisition."""

import logging
import warnings
from collections.abc import Sequence
from typing import NamedTuple

import torch

from mrbart.algorithms.reconstruction.BartReconstruction import BartReconstruction, BartReconstructionResult

logger = logging.getLogger(__name__)


class EncodingSpace(NamedTuple):
    """Data of one encoding space."""

    kspace: torch.Tensor
    """k-space ``[RO, E1, E2, CHA, N, S, LOC]``."""

    csm: torch.Tensor
    """Coil sensitivity maps ``[RO, E1, E2, CHA, N', S', LOC]``."""

    reference: torch.Tensor | None = None
    """Calibration data."""


def reconstruct_encoding_spaces(
    reconstruction: BartReconstruction,
    encoding_spaces: Sequence[EncodingSpace],
    n_encoding_spaces: int | None = None,
) -> list[BartReconstructionResult]:
    """Reconstruct encoding spaces one after the other.

    Errors of the reconstruction of an encoding space are not caught. The caller decides
    whether to skip the encoding space or abort.

    Parameters
    ----------
    reconstruction
        reconstruction applied to each encoding space
    encoding_spaces
        data of the encoding spaces
    n_encoding_spaces
        number of encoding spaces in the protocol. A warning is issued if more are passed.

    Returns
    -------
        results in the order of the encoding spaces
    """
    if n_encoding_spaces is not None and len(encoding_spaces) > n_encoding_spaces:
        warnings.warn(
            f'More encoding spaces than in the protocol: {len(encoding_spaces)} instead of {n_encoding_spaces}',
            stacklevel=2,
        )
    results = []
    for e, encoding_space in enumerate(encoding_spaces):
        logger.debug('Encoding space: %d', e)
        results.append(reconstruction(encoding_space.kspace, encoding_space.csm, encoding_space.reference))
    return results
