from ._RandomGenerator import RandomGenerator
