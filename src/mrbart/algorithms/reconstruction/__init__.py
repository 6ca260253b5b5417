"""Reconstructions and coil compression with an external BART solver."""

from mrbart.algorithms.reconstruction.BartSolver import (
    BartScriptRunner,
    BartScriptSolver,
    BartSolver,
    last_bart_command,
    output_name_from_command,
)
from mrbart.algorithms.reconstruction.BartReconstruction import (
    BartReconConfig,
    BartReconstruction,
    BartReconstructionResult,
    script_parameters,
)
from mrbart.algorithms.reconstruction.BartCoilCompression import BartCoilCompression, BartCoilCompressionConfig
from mrbart.algorithms.reconstruction.encoding_spaces import EncodingSpace, reconstruct_encoding_spaces
from mrbart.algorithms.reconstruction._bart_files import bart_working_directory

__all__ = [
    "BartCoilCompression",
    "BartCoilCompressionConfig",
    "BartReconConfig",
    "BartReconstruction",
    "BartReconstructionResult",
    "BartScriptRunner",
    "BartScriptSolver",
    "BartSolver",
    "EncodingSpace",
    "bart_working_directory",
    "last_bart_command",
    "output_name_from_command",
    "reconstruct_encoding_spaces",
    "script_parameters"
]
