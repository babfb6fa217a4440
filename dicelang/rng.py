"""
Random sources consumed by the evaluator.

The evaluator only ever calls next(low, high) with a half open upper bound:
    d{sides}:   next(1, sides + 1)
    d%:         next(1, 101)
    dF:         next(-1, 2)
"""
from __future__ import absolute_import, print_function
import abc

import numpy.random

import dicelang.util
from dicelang.util import ReprMixin

MAX_INT = 2 ** 31 - 1


class RandomSource(abc.ABC):
    """
    Standard interface for an integer random source.
    """
    @abc.abstractmethod
    def next(self, *args):
        """
        Draw an integer.

            next()              Any integer in [0, MAX_INT).
            next(high)          An integer in [0, high).
            next(low, high)     An integer in [low, high).

        Returns:
            The integer drawn.
        """
        raise NotImplementedError

    @property
    def seed(self):
        """
        The seed explicitly set on this source. Optional, sources that cannot be seeded keep this.

        Raises:
            ValueError: No seed is available for this source.
        """
        raise ValueError(f"{self.__class__.__name__} has no seed.")


def bounds(args):
    """
    Normalize the arguments of next to a (low, high) pair.

    Raises:
        TypeError: More than two bounds given.
    """
    if not args:
        return 0, MAX_INT
    if len(args) == 1:
        return 0, args[0]
    if len(args) == 2:
        return args[0], args[1]

    raise TypeError(f"next takes at most 2 bounds, {len(args)} given.")


class NumpyRandomSource(ReprMixin, RandomSource):
    """
    Default random source backed by a private numpy RandomState.

    Attributes:
        _seed: The seed explicitly set, None if never set.
        _state: The numpy.random.RandomState draws come from.
    """
    _repr_keys = ['_seed']

    def __init__(self, seed=None):
        self._seed = None
        if seed is None:
            self._state = numpy.random.RandomState(dicelang.util.generate_seed())
        else:
            self.seed = seed

    @property
    def seed(self):
        """
        The seed explicitly set on this source.

        Raises:
            ValueError: No seed was ever explicitly set.
        """
        if self._seed is None:
            raise ValueError("Seed was not explicitly set.")

        return self._seed

    @seed.setter
    def seed(self, new_seed):
        """ Reseed the source, draws restart from the new seed. """
        self._seed = int(new_seed) % dicelang.util.MAX_SEED
        self._state = numpy.random.RandomState(self._seed)

    def next(self, *args):
        low, high = bounds(args)
        return int(self._state.randint(low, high))


class SequenceRandomSource(ReprMixin, RandomSource):
    """
    Replays a fixed list of draws in order, the bounds requested are ignored.
    Useful to replay a recorded roll or to script one.

    Attributes:
        values: The draws to hand out.
        index: Position of the next draw in values.
    """
    _repr_keys = ['values', 'index']

    def __init__(self, values):
        self.values = list(values)
        self.index = 0

    def next(self, *args):
        """
        Raises:
            IndexError: All values have been drawn.
        """
        bounds(args)
        try:
            value = self.values[self.index]
        except IndexError:
            raise IndexError(f"Sequence exhausted after {len(self.values)} draws.") from None

        self.index += 1
        return value

    @property
    def remaining(self):
        """ The number of draws left. """
        return len(self.values) - self.index
