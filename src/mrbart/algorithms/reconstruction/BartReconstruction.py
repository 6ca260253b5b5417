"""Reconstruction with an external BART solver followed by coil combination."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import torch

from mrbart.algorithms.coil_combination import combine_coils
from mrbart.algorithms.reconstruction._bart_files import (
    INPUT_NAME,
    REFERENCE_NAME,
    bart_working_directory,
    restore_solver_output_dims,
)
from mrbart.algorithms.reconstruction.BartSolver import BartSolver
from mrbart.algorithms.sampling_pattern import classify_sampling_pattern
from mrbart.data.AccelerationFactor import AccelerationFactor
from mrbart.data.cfl import read_cfl, write_cfl
from mrbart.data.enums import SamplingPattern

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BartReconConfig:
    """Settings of the BART reconstruction."""

    lambda_l1: float = 0.002
    """Regularization weight of the l1 wavelet term."""

    n_iter_l1: int = 15
    """Number of iterations."""

    esp_map: int = 2
    """Number of ESPIRiT maps."""

    acceleration_factor: tuple[float, float] = (1.0, 1.0)
    """Acceleration along E1 and E2, used to classify the sampling pattern."""

    working_directory: Path | None = None
    """Directory for the temporary BART files. Default is the system temporary directory."""

    delete_working_directory: bool = True
    """Remove the BART files after the reconstruction."""

    max_workers: int | None = None
    """Threads used for the coil combination."""


def script_parameters(config: BartReconConfig) -> str:
    """Command line options passed to a BART reconstruction script."""
    return f'-w {config.lambda_l1} -i {config.n_iter_l1} -m {config.esp_map}'


class BartReconstructionResult(NamedTuple):
    """Result of a BART reconstruction."""

    image: torch.Tensor
    """Coil combined image ``[RO, E1, E2, 1, N, S, LOC]``."""

    sampling_pattern: SamplingPattern
    """Sampling pattern of the k-space."""


class BartReconstruction(torch.nn.Module):
    """Reconstruction by an external BART solver.

    The k-space (and reference data) are written to a working directory, the solver is run and the
    full k-space it returns is transformed to image space and coil combined with the coil sensitivity maps.
    """

    def __init__(self, solver: BartSolver, config: BartReconConfig | None = None) -> None:
        """Initialize BartReconstruction.

        Parameters
        ----------
        solver
            runs the BART reconstruction, e.g. a command script calling ``bart pics``.
            Has to return full k-space ``[RO, E1, E2, CHA, ...]``.
        config
            settings of the reconstruction
        """
        super().__init__()
        self.solver = solver
        self.config = BartReconConfig() if config is None else config

    def forward(
        self, kspace: torch.Tensor, csm: torch.Tensor, reference: torch.Tensor | None = None
    ) -> BartReconstructionResult:
        """Apply the reconstruction.

        Parameters
        ----------
        kspace
            undersampled k-space ``[RO, E1, E2, CHA, N, S, LOC]``
        csm
            coil sensitivity maps ``[RO, E1, E2, CHA, N', S', LOC]``
        reference
            calibration data ``[RO, E1, E2, CHA, N, S, LOC]``, passed to the solver if given

        Returns
        -------
            coil combined image and sampling pattern

        Raises
        ------
        RuntimeError
            If the solver does not produce an output file.
        """
        config = self.config
        acceleration_factor = AccelerationFactor.from_sequence(config.acceleration_factor)
        sampling_pattern = classify_sampling_pattern(kspace, acceleration_factor)
        logger.info('Sampling pattern: %s', sampling_pattern.value)

        with bart_working_directory(config.working_directory, config.delete_working_directory) as working_directory:
            inputs: list[str] = []
            if reference is not None:
                logger.debug('Reference array [E0, E1, E2, CHA, N, S, LOC] = %s', list(reference.shape))
                write_cfl(working_directory / REFERENCE_NAME, reference)
                inputs.append(REFERENCE_NAME)
            logger.debug('Data array [E0, E1, E2, CHA, N, S, LOC] = %s', list(kspace.shape))
            write_cfl(working_directory / INPUT_NAME, kspace)
            inputs.insert(0, INPUT_NAME)

            outputs = self.solver(working_directory, inputs, script_parameters(config))
            if not outputs:
                raise RuntimeError('The BART solver did not produce an output file.')
            full_kspace = read_cfl(working_directory / outputs[-1])

        full_kspace = restore_solver_output_dims(full_kspace, kspace.shape)
        image = combine_coils(full_kspace, csm, max_workers=config.max_workers)
        return BartReconstructionResult(image, sampling_pattern)

    # Required for type hinting
    def __call__(
        self, kspace: torch.Tensor, csm: torch.Tensor, reference: torch.Tensor | None = None
    ) -> BartReconstructionResult:
        """Apply the reconstruction."""
        return super().__call__(kspace, csm, reference)
