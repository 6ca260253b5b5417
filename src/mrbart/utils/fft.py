"""Centered FFT and IFFT between k-space and image space."""

from collections.abc import Sequence

import torch


def kspace_to_image(kdat: torch.Tensor, dim: Sequence[int] = (0, 1, 2)) -> torch.Tensor:
    """Centered IFFT from k-space to image space.

    The zero spatial frequency is expected at the center of each transformed axis and the
    image origin is returned at the center as well.

    Parameters
    ----------
    kdat
        k-space data on Cartesian grid
    dim, optional
        dim along which iFFT is applied, by default the first three dimensions (RO, E1, E2)

    Returns
    -------
        iFFT of kdat
    """
    dim = tuple(dim)
    return torch.fft.fftshift(torch.fft.ifftn(torch.fft.ifftshift(kdat, dim=dim), dim=dim, norm='ortho'), dim=dim)


def image_to_kspace(idat: torch.Tensor, dim: Sequence[int] = (0, 1, 2)) -> torch.Tensor:
    """Centered FFT from image space to k-space.

    Parameters
    ----------
    idat
        image data on Cartesian grid
    dim, optional
        dim along which FFT is applied, by default the first three dimensions (RO, E1, E2)

    Returns
    -------
        FFT of idat
    """
    dim = tuple(dim)
    return torch.fft.ifftshift(torch.fft.fftn(torch.fft.fftshift(idat, dim=dim), dim=dim, norm='ortho'), dim=dim)
