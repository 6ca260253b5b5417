"""Functions for centered Fourier transforms and column-major reshaping."""

from mrbart.utils.fft import image_to_kspace, kspace_to_image
from mrbart.utils.reshape import ravel_fortran, reshape_fortran

__all__ = [
    "image_to_kspace",
    "kspace_to_image",
    "ravel_fortran",
    "reshape_fortran",
]
