"""PyTest fixtures for the BART reconstruction tests."""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
import torch
from mrbart.data import read_cfl, write_cfl


class FakeBartSolver:
    """Stand-in for a BART command script.

    Reads the inputs from the working directory, applies a function to them and writes
    the results. Records the calls and the files present in the working directory.
    """

    def __init__(
        self,
        function: Callable[..., Sequence[torch.Tensor]],
        output_names: Sequence[str],
    ) -> None:
        self.function = function
        self.output_names = output_names
        self.calls: list[dict] = []

    def __call__(self, working_directory: Path, inputs: Sequence[str], arguments: str) -> Sequence[str]:
        self.calls.append(
            {
                'working_directory': working_directory,
                'inputs': list(inputs),
                'arguments': arguments,
                'files': sorted(path.name for path in working_directory.iterdir()),
            }
        )
        outputs = self.function(*(read_cfl(working_directory / name) for name in inputs))
        for name, output in zip(self.output_names, outputs, strict=True):
            write_cfl(working_directory / name, output)
        return list(self.output_names)


@pytest.fixture
def identity_solver() -> FakeBartSolver:
    """Solver returning the k-space unchanged, as for fully sampled data."""
    return FakeBartSolver(lambda kspace, *_: (kspace,), ['kspace_out'])


@pytest.fixture
def compression_solver() -> FakeBartSolver:
    """Solver keeping the first four channels of k-space and reference data."""
    return FakeBartSolver(
        lambda kspace, reference: (kspace[:, :, :, :4], reference[:, :, :, :4]),
        ['kspace_cc', 'reference_cc'],
    )
