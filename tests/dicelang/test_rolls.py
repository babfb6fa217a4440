# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Tests for dicelang.rolls
"""
from __future__ import absolute_import, print_function

import pytest

import dicelang.exc
from dicelang.rolls import (ArithmeticOperator, ArithmeticRoll, Basic, BasicRoll, ComparisonOperator,
                            CompoundingModifier, Constant, ConstantDie, ConstantModifier, DropModifier,
                            ExplodeModifier, FailureModifier, Fudge, KeepModifier, Percent, Reroll,
                            RerollOnceModifier, SuccessDie, SuccessModifier, compare)

EQ = ComparisonOperator.EQUAL
GT = ComparisonOperator.GREATER_THAN
LT = ComparisonOperator.LESS_THAN


def test_compare():
    assert compare(EQ, 6, 6)
    assert not compare(EQ, 5, 6)
    assert compare(GT, 6, 5)
    assert not compare(GT, 5, 5)
    assert compare(LT, 1, 2)
    assert not compare(LT, 2, 2)


def test_compare_unknown_operator():
    with pytest.raises(dicelang.exc.InvalidComparisonOperator):
        compare('>=', 1, 2)


def test_arithmetic_operator_sign():
    assert ArithmeticOperator.ADD.sign == 1
    assert ArithmeticOperator.SUBTRACT.sign == -1


def test_die_type_ranges():
    assert (Basic(6).min_value, Basic(6).max_value, Basic(6).draw_bounds) == (1, 6, (1, 7))
    assert Percent().draw_bounds == (1, 101)
    assert Fudge().draw_bounds == (-1, 2)
    assert Fudge().sides == 3


def test_die_type_rollable():
    assert Basic(6).rollable
    assert not ConstantDie().rollable
    assert not SuccessDie().rollable


def test_reroll_wraps_base():
    die = Reroll(Reroll(Basic(8)))
    assert die.base == Basic(8)
    assert die.sides == 8
    assert die.draw_bounds == (1, 9)
    assert Basic(8).base == Basic(8)


def test_node_equality_and_hash():
    assert Basic(6) == Basic(6)
    assert Basic(6) != Basic(8)
    assert Percent() != Basic(100)
    assert len({Basic(6), Basic(6), Fudge()}) == 2


def test_node_immutable():
    die = Basic(6)
    with pytest.raises(AttributeError):
        die.sides = 8
    with pytest.raises(AttributeError):
        del die.sides

    roll = BasicRoll(2, die, [KeepModifier(1)])
    assert isinstance(roll.modifiers, tuple)


def test_node_repr():
    assert repr(KeepModifier(3)) == 'KeepModifier(count=3, highest=True)'


def test_modifier_str():
    assert str(KeepModifier(2, False)) == 'kl2'
    assert str(DropModifier(1)) == 'dl1'
    assert str(ExplodeModifier(EQ, 6)) == '!=6'
    assert str(CompoundingModifier(GT, 5)) == '^>5'
    assert str(SuccessModifier(GT, 4)) == '>4'
    assert str(FailureModifier(LT, 2)) == 'f<2'
    assert str(ConstantModifier(ArithmeticOperator.SUBTRACT, 3)) == '-3'


def test_comparison_modifier_matches():
    mod = RerollOnceModifier(LT, 3)
    assert mod.matches(2)
    assert not mod.matches(3)


def test_constant_modifier_signed_value():
    assert ConstantModifier(ArithmeticOperator.ADD, 3).signed_value == 3
    assert ConstantModifier(ArithmeticOperator.SUBTRACT, 3).signed_value == -3


def test_phased_modifiers():
    roll = BasicRoll(4, Basic(6), [
        SuccessModifier(GT, 4),
        KeepModifier(3),
        ExplodeModifier(EQ, 6),
        DropModifier(1),
        RerollOnceModifier(EQ, 1),
    ])
    assert roll.phased_modifiers() == [
        ExplodeModifier(EQ, 6),
        RerollOnceModifier(EQ, 1),
        KeepModifier(3),
        DropModifier(1),
        SuccessModifier(GT, 4),
    ]


def test_roll_str():
    roll = ArithmeticRoll([
        (ArithmeticOperator.ADD, BasicRoll(3, Basic(6), [KeepModifier(2), ExplodeModifier(EQ, 6)])),
        (ArithmeticOperator.ADD, BasicRoll(1, Fudge())),
        (ArithmeticOperator.SUBTRACT, Constant(3)),
    ])
    assert str(roll) == '3d6kh2!=6+1dF-3'
