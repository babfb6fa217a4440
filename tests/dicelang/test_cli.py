# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Tests for dicelang.cli
"""
from __future__ import absolute_import, print_function

import mock
import pytest

import dicelang.cli
import dicelang.exc
from dicelang.evaluator import DiceEvaluator


@pytest.fixture
def f_no_logging():
    with mock.patch('dicelang.util.init_logging') as init:
        yield init


def test_throw_argument_parser():
    parser = dicelang.cli.ThrowArgumentParser()
    with pytest.raises(dicelang.exc.ArgumentHelpError):
        parser.print_help()
    with pytest.raises(dicelang.exc.ArgumentParseError):
        parser.error('blank')
    with pytest.raises(dicelang.exc.ArgumentParseError):
        parser.exit()


def test_make_parser():
    args = dicelang.cli.make_parser().parse_args(['-d', '-s', '42', '-t', '3', '2d20kh1', '+', '5'])
    assert args.detailed
    assert args.seed == 42
    assert args.times == 3
    assert args.notation == ['2d20kh1', '+', '5']


def test_make_parser_defaults():
    args = dicelang.cli.make_parser().parse_args([])
    assert not args.detailed
    assert args.seed is None
    assert args.times == 1
    assert args.notation == []


def test_make_parser_throws():
    parser = dicelang.cli.make_parser()
    with pytest.raises(dicelang.exc.ArgumentHelpError):
        parser.parse_args(['--help'])
    with pytest.raises(dicelang.exc.ArgumentParseError):
        parser.parse_args(['--invalidflag'])
    with pytest.raises(dicelang.exc.ArgumentParseError):
        parser.parse_args(['-t', '0', '1d6'])


def test_roll_lines(f_evaluator):
    lines = dicelang.cli.roll_lines(f_evaluator(3, 5, 6, 1), '2d6', times=2)
    assert lines == ['2d6 = (3, 5) = 8', '2d6 = (6, 1) = 7']


def test_roll_lines_detailed(f_evaluator):
    lines = dicelang.cli.roll_lines(f_evaluator(6, 3), '1d6!=6', detailed=True)
    assert lines[0] == '1d6!=6 = (6, __3__) = 9'
    assert len(lines) == 3
    assert 'explosion' in lines[2]
    assert 'maximum' in lines[1]


def test_roll_lines_invalid(f_evaluator):
    with pytest.raises(dicelang.exc.InvalidNotation):
        dicelang.cli.roll_lines(f_evaluator(), '3d6abc')


def test_format_trace_groups(f_evaluator):
    result = f_evaluator(4).evaluate_detailed(dicelang.cli.parse_roll('1d6-2'))
    lines = dicelang.cli.format_trace(result.events)
    assert lines[0].endswith('group 0 (+)')
    assert lines[1].endswith('group 1 (-)')


def test_interactive(f_evaluator, capsys):
    with mock.patch('builtins.input', side_effect=['2d6', '', '3d6abc', EOFError]):
        dicelang.cli.interactive(f_evaluator(3, 5))

    out = capsys.readouterr().out
    assert '2d6 = (3, 5) = 8' in out
    assert 'Invalid roll format' in out


def test_main(f_no_logging, capsys):
    assert dicelang.cli.main(['-s', '7', '3d6']) == 0
    out = capsys.readouterr().out
    assert out.startswith('3d6 = (')
    assert f_no_logging.called


def test_main_seed_repeats(f_no_logging, capsys):
    dicelang.cli.main(['-s', '7', '-t', '3', '4d6kh3'])
    first = capsys.readouterr().out
    dicelang.cli.main(['-s', '7', '-t', '3', '4d6kh3'])
    assert capsys.readouterr().out == first


def test_main_invalid_notation(f_no_logging, capsys):
    assert dicelang.cli.main(['d0']) == 1
    assert 'Invalid roll format' in capsys.readouterr().out


def test_main_bad_args(capsys):
    assert dicelang.cli.main(['--times', 'x']) == 2
    assert dicelang.cli.main(['--help']) == 0
    assert 'diceLang' in capsys.readouterr().out


def test_main_interactive(f_no_logging):
    with mock.patch('dicelang.cli.interactive') as interactive:
        assert dicelang.cli.main([]) == 0

    evaluator = interactive.call_args[0][0]
    assert isinstance(evaluator, DiceEvaluator)
    assert evaluator.max_explosions == 100
