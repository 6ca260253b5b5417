"""Enums describing the acquisition."""

import enum


class SamplingPattern(enum.Enum):
    """Undersampling scheme of the phase encoding plane."""

    UNIFORM = 'uniform'
    VARIABLE_DENSITY = 'variable_density'
