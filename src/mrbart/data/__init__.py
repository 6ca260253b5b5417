"""Data containers, dimension conventions and BART file input/output."""

from mrbart.data import enums
from mrbart.data.AccelerationFactor import AccelerationFactor
from mrbart.data.cfl import (
    CflError,
    HeaderParseError,
    TruncatedFileError,
    read_cfl,
    read_cfl_bart,
    read_cfl_header,
    write_cfl,
    write_cfl_header,
)
from mrbart.data.dims import (
    BART_DIMS,
    GADGETRON_DIMS,
    MAX_DIMS,
    Chunk,
    DimensionOverflowError,
    from_chunked_interchange,
    restore_gadgetron_dims,
    to_bart_dims,
    to_chunked_interchange,
    to_gadgetron_dims,
)

__all__ = [
    "AccelerationFactor",
    "BART_DIMS",
    "CflError",
    "Chunk",
    "DimensionOverflowError",
    "GADGETRON_DIMS",
    "HeaderParseError",
    "MAX_DIMS",
    "TruncatedFileError",
    "enums",
    "from_chunked_interchange",
    "read_cfl",
    "read_cfl_bart",
    "read_cfl_header",
    "restore_gadgetron_dims",
    "to_bart_dims",
    "to_chunked_interchange",
    "to_gadgetron_dims",
    "write_cfl",
    "write_cfl_header",
]
