"""Complex coil combination of Cartesian k-space using coil sensitivity maps."""

import logging
from concurrent.futures import ThreadPoolExecutor

import torch

from mrbart.data.dims import DIM_CHA, DIM_LOC, DIM_N, DIM_S, GADGETRON_DIMS
from mrbart.utils.fft import kspace_to_image

logger = logging.getLogger(__name__)


def _check_shapes(kspace: torch.Tensor, csm: torch.Tensor) -> None:
    if kspace.ndim != len(GADGETRON_DIMS) or csm.ndim != len(GADGETRON_DIMS):
        raise ValueError(
            'Expected 7D k-space and coil maps [RO, E1, E2, CHA, N, S, LOC], '
            f'got {tuple(kspace.shape)} and {tuple(csm.shape)}.'
        )
    if csm.shape[: DIM_CHA + 1] != kspace.shape[: DIM_CHA + 1] or csm.shape[DIM_LOC] != kspace.shape[DIM_LOC]:
        raise ValueError(
            f'Coil maps {tuple(csm.shape)} do not match k-space {tuple(kspace.shape)} in RO, E1, E2, CHA or LOC.'
        )
    if csm.shape[DIM_N] < 1 or csm.shape[DIM_S] < 1:
        raise ValueError(f'Coil maps need at least one repetition and segment, got {tuple(csm.shape)}.')


def combine_coils(kspace: torch.Tensor, csm: torch.Tensor, max_workers: int | None = None) -> torch.Tensor:
    """Reconstruct k-space and combine the channels using coil sensitivity maps.

    The k-space is transformed to image space by a centered inverse FFT along RO, E1 and E2
    (only RO and E1 if E2 is a singleton). For each repetition, segment and slice location the
    coil images are multiplied with the complex conjugate of the coil maps and summed over the channels.

    The coil maps can have fewer repetitions and segments than the k-space. The last available
    map is then used for all higher repetitions or segments.

    The combinations are independent and run in a thread pool. Each task writes to its own slice of
    the output.

    Parameters
    ----------
    kspace
        fully sampled (or completed) k-space ``[RO, E1, E2, CHA, N, S, LOC]``
    csm
        coil sensitivity maps ``[RO, E1, E2, CHA, N', S', LOC]``
    max_workers
        number of threads. Default is `torch.get_num_threads()`. 1 runs serially.

    Returns
    -------
        combined image ``[RO, E1, E2, 1, N, S, LOC]``

    Raises
    ------
    ValueError
        If the shapes of k-space and coil maps do not match.
    """
    _check_shapes(kspace, csm)
    n_ro, n_e1, n_e2, _, n_n, n_s, n_loc = kspace.shape
    dim = (0, 1, 2) if n_e2 > 1 else (0, 1)
    image = kspace_to_image(kspace, dim=dim)
    combined = torch.zeros((n_ro, n_e1, n_e2, 1, n_n, n_s, n_loc), dtype=image.dtype, device=image.device)
    csm_n, csm_s = csm.shape[DIM_N], csm.shape[DIM_S]

    def combine(index: int) -> None:
        loc, rest = divmod(index, n_n * n_s)
        s, n = divmod(rest, n_n)
        coil_map = csm[:, :, :, :, min(n, csm_n - 1), min(s, csm_s - 1), loc]
        combined[:, :, :, 0, n, s, loc] = (image[:, :, :, :, n, s, loc] * coil_map.conj()).sum(dim=DIM_CHA)

    n_combinations = n_n * n_s * n_loc
    if max_workers is None:
        max_workers = torch.get_num_threads()
    logger.debug(
        'Combining %d channels for %d images with %d worker(s), %dD FFT',
        kspace.shape[DIM_CHA],
        n_combinations,
        max_workers,
        len(dim),
    )
    if n_combinations > 1 and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # list() re-raises exceptions of the workers
            list(executor.map(combine, range(n_combinations)))
    else:
        for index in range(n_combinations):
            combine(index)
    return combined
