# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Tests for dicelang.roll
"""
from __future__ import absolute_import, print_function

import pytest

import dicelang.exc
import dicelang.roll
from dicelang.evaluator import DiceEvaluationResult


@pytest.fixture
def f_result(f_rng):
    yield dicelang.roll.roll_detailed('4d6dl1', f_rng(6, 5, 4, 2))


def test_roll(f_rng):
    assert dicelang.roll.roll('2d6', f_rng(3, 5)) == 8
    assert dicelang.roll.roll('2d20kh1 + 5', f_rng(12, 18)) == 23


def test_roll_default_rng():
    for _ in range(20):
        assert 3 <= dicelang.roll.roll('3d6') <= 18


def test_roll_invalid():
    with pytest.raises(dicelang.exc.InvalidNotation):
        dicelang.roll.roll('3d6abc')
    with pytest.raises(dicelang.exc.InvalidNotation):
        dicelang.roll.roll_detailed('d0')


def test_roll_detailed(f_result):
    assert isinstance(f_result, DiceEvaluationResult)
    assert f_result.value == 15
    assert len(f_result.events) == 4


def test_format_events(f_result):
    assert dicelang.roll.format_events(f_result.events) == '(6, 5, 4, ~~2~~)'


def test_format_events_empty():
    assert dicelang.roll.format_events([]) == ''


def test_format_events_arithmetic(f_rng):
    result = dicelang.roll.roll_detailed('1d6+1d6-1d4+3', f_rng(6, 4, 2))
    assert dicelang.roll.format_events(result.events) == '(6) + (4) - (2) + 3'


def test_format_events_marks(f_rng):
    result = dicelang.roll.roll_detailed('3d6ro=1!=6', f_rng(1, 6, 3, 2, 4))
    assert dicelang.roll.format_events(result.events) == '(1r, 6, 3, 2, __4__)'


def test_format_events_constant():
    result = dicelang.roll.roll_detailed('12')
    assert dicelang.roll.format_events(result.events) == '12'


def test_success_string(f_rng):
    result = dicelang.roll.roll_detailed('5d6>4f<2', f_rng(5, 3, 6, 2, 1))
    assert dicelang.roll.success_string(result) == '(+1) **1** Failure(s), **2** Success(es)'

    result = dicelang.roll.roll_detailed('2d6f<3', f_rng(1, 2))
    assert dicelang.roll.success_string(result) == '(-2) **2** Failure(s), **0** Success(es)'


def test_success_string_not_counted(f_result):
    assert dicelang.roll.success_string(f_result) == ''


def test_throw_result(f_result):
    expect = {
        'spec': '4d6dl1',
        'steps': '(6, 5, 4, ~~2~~)',
        'value': 15,
        'success': '',
        'note': 'For Gordon',
    }
    assert dicelang.roll.throw_result('4d6dl1', f_result, note='For Gordon') == expect


def test_throw_output(f_result):
    result = dicelang.roll.throw_result('4d6dl1', f_result)
    assert dicelang.roll.throw_output(result) == '4d6dl1 = (6, 5, 4, ~~2~~) = 15'


def test_throw_output_trail():
    result = {
        'spec': '4d6>4',
        'steps': '(**5**, 3r, **6**, 1r, 2)',
        'value': 2,
        'success': '(+2) **0** Failure(s), **2** Success(es)',
        'note': 'Attack',
    }
    expect = """4d6>4 = (**5**, 3r, **6**, 1r, 2) = 2
        (+2) **0** Failure(s), **2** Success(es)
        Note: Attack"""
    assert dicelang.roll.throw_output(result) == expect
