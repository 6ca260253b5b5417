"""Geometric coil compression with an external BART solver."""

import logging
from dataclasses import dataclass
from pathlib import Path

import torch

from mrbart.algorithms.reconstruction._bart_files import (
    INPUT_NAME,
    REFERENCE_NAME,
    bart_working_directory,
    restore_solver_output_dims,
)
from mrbart.algorithms.reconstruction.BartSolver import BartSolver
from mrbart.data.cfl import read_cfl, write_cfl
from mrbart.data.dims import DIM_CHA, DIM_E1, DIM_E2

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BartCoilCompressionConfig:
    """Settings of the BART coil compression."""

    dst_channels: int
    """Number of channels after compression."""

    calib_size: int = 24
    """Size of the calibration region, limited by the size of the reference data."""

    working_directory: Path | None = None
    """Directory for the temporary BART files. Default is the system temporary directory."""

    delete_working_directory: bool = True
    """Remove the BART files after the compression."""


class BartCoilCompression(torch.nn.Module):
    """Geometric coil compression (``bart cc -G`` and ``bart ccapply``) of k-space and reference data.

    The compression matrix is calibrated on the reference data and applied to both arrays.
    No coil combination is done. If the target number of channels is not smaller than the
    channels of both k-space and reference, the data are returned unchanged without calling the solver.
    """

    def __init__(self, solver: BartSolver, config: BartCoilCompressionConfig) -> None:
        """Initialize BartCoilCompression.

        Parameters
        ----------
        solver
            runs the compression, gets the names of k-space and reference data and
            returns the names of the compressed k-space and reference data, in this order.
        config
            settings of the compression
        """
        super().__init__()
        self.solver = solver
        self.config = config

    def forward(self, kspace: torch.Tensor, reference: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
        """Apply the coil compression.

        Parameters
        ----------
        kspace
            k-space ``[RO, E1, E2, CHA, N, S, LOC]``
        reference
            calibration data ``[RO, E1, E2, CHA, N, S, LOC]``

        Returns
        -------
            compressed k-space and reference data

        Raises
        ------
        RuntimeError
            If the solver does not return two output files.
        """
        config = self.config
        if not (config.dst_channels < kspace.shape[DIM_CHA] and config.dst_channels < reference.shape[DIM_CHA]):
            logger.debug('Coil compression to %d channels skipped', config.dst_channels)
            return kspace, reference
        logger.debug('Coil compression from %d to %d channels', kspace.shape[DIM_CHA], config.dst_channels)

        calib_size = min(config.calib_size, reference.shape[DIM_E1], reference.shape[DIM_E2])
        arguments = f'-r {calib_size} -p {config.dst_channels}'
        with bart_working_directory(config.working_directory, config.delete_working_directory) as working_directory:
            write_cfl(working_directory / REFERENCE_NAME, reference)
            write_cfl(working_directory / INPUT_NAME, kspace)
            outputs = self.solver(working_directory, [INPUT_NAME, REFERENCE_NAME], arguments)
            if len(outputs) != 2:
                raise RuntimeError(f'The BART solver returned {len(outputs)} output files, expected 2.')
            compressed_kspace = read_cfl(working_directory / outputs[0])
            compressed_reference = read_cfl(working_directory / outputs[1])

        compressed_kspace = restore_solver_output_dims(compressed_kspace, kspace.shape)
        compressed_reference = restore_solver_output_dims(compressed_reference, reference.shape)
        return compressed_kspace, compressed_reference

    # Required for type hinting
    def __call__(self, kspace: torch.Tensor, reference: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
        """Apply the coil compression."""
        return super().__call__(kspace, reference)
