# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Used for pytest fixtures and anything else test setup/teardown related.
"""
from __future__ import absolute_import, print_function

import pytest

from dicelang.evaluator import DiceEvaluator
from dicelang.rng import SequenceRandomSource


@pytest.fixture
def f_rng():
    """
    Factory for scripted random sources, draws are handed out in order.

    Usage:
        rng = f_rng(6, 4, 2)
    """
    def inner(*values):
        return SequenceRandomSource(values)

    yield inner


@pytest.fixture
def f_evaluator(f_rng):
    """
    Factory for evaluators drawing the scripted values given.
    """
    def inner(*values, **kwargs):
        return DiceEvaluator(f_rng(*values), **kwargs)

    yield inner
