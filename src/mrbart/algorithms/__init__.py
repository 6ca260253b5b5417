"""Algorithms for sampling pattern analysis, coil combination and BART reconstructions."""

from mrbart.algorithms import reconstruction
from mrbart.algorithms.coil_combination import combine_coils
from mrbart.algorithms.sampling_pattern import classify_sampling_pattern
__all__ = ["classify_sampling_pattern", "combine_coils", "reconstruction"]
