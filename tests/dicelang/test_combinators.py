# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Tests for dicelang.combinators
"""
from __future__ import absolute_import, print_function

from dicelang.combinators import (Failure, Success, alternative, attempt, char, end_of_input, many,
                                  many1, map_result, optional, positive_int, satisfy, sequence,
                                  string, token, whitespace)


def test_success_failure_truth():
    assert Success(1, 1)
    assert not Failure('x', 0)
    assert Success(1, 1) == Success(1, 1)
    assert Failure('x', 0) != Success('x', 0)
    assert repr(Success('d', 1)) == "Success(value='d', pos=1)"


def test_satisfy():
    digit = satisfy(str.isdigit, 'digit')
    assert digit('4d', 0) == Success('4', 1)
    assert digit('d4', 0) == Failure('digit', 0)
    assert digit('', 0) == Failure('digit', 0)


def test_char():
    assert char('d')('d6', 0) == Success('d', 1)
    assert not char('d')('D6', 0)


def test_string_partial_consumes_nothing():
    assert string('kh')('kh3', 0) == Success('kh', 2)
    result = string('kh')('kl3', 0)
    assert not result
    assert result.pos == 0


def test_sequence():
    parser = sequence(char('d'), positive_int)
    assert parser('d20', 0) == Success(('d', 20), 3)


def test_sequence_combine():
    parser = sequence(char('d'), positive_int, combine=lambda _, sides: sides * 2)
    assert parser('d20', 0) == Success(40, 3)


def test_sequence_failure_after_consuming():
    result = sequence(char('d'), positive_int)('dx', 0)
    assert not result
    assert result.pos == 1


def test_alternative_first_wins():
    parser = alternative(string('kh'), string('kl'))
    assert parser('kl', 0) == Success('kl', 2)


def test_alternative_no_fallthrough_after_consuming():
    first = sequence(char('k'), char('h'))
    parser = alternative(first, string('kl'))
    result = parser('kl', 0)
    assert not result
    assert result.pos == 1


def test_alternative_attempt_rewinds():
    first = attempt(sequence(char('k'), char('h')))
    parser = alternative(first, string('kl'))
    assert parser('kl', 0) == Success('kl', 2)


def test_alternative_all_fail():
    result = alternative(char('a'), char('b'))('c', 0)
    assert not result
    assert result.pos == 0
    assert 'or' in result.expected


def test_many():
    assert many(char('!'))('!!!6', 0) == Success(['!', '!', '!'], 3)
    assert many(char('!'))('6', 0) == Success([], 0)


def test_many_propagates_consuming_failure():
    parser = many(sequence(char('k'), positive_int))
    result = parser('k2kx', 0)
    assert not result
    assert result.pos == 3


def test_many_stops_without_progress():
    assert many(optional(char('x')))('abc', 0) == Success([None], 0)


def test_many1():
    assert many1(char('a'))('aab', 0) == Success(['a', 'a'], 2)
    assert not many1(char('a'))('b', 0)


def test_map_result():
    assert map_result(positive_int, lambda val: -val)('7', 0) == Success(-7, 1)


def test_optional():
    assert optional(positive_int, default=1)('d6', 0) == Success(1, 0)
    assert optional(positive_int)('3d6', 0) == Success(3, 1)


def test_whitespace():
    assert whitespace('  \t3', 0) == Success(None, 3)
    assert whitespace('3', 0) == Success(None, 0)


def test_token():
    assert token(positive_int)('  12  +', 0) == Success(12, 6)


def test_token_rewinds_leading_whitespace():
    result = token(positive_int)('   x', 0)
    assert not result
    assert result.pos == 0


def test_end_of_input():
    assert end_of_input('abc', 3) == Success(None, 3)
    assert not end_of_input('abc', 2)


def test_positive_int():
    assert positive_int('120d', 0) == Success(120, 3)
    assert positive_int('007', 0) == Success(7, 3)


def test_positive_int_rejects():
    assert positive_int('0', 0) == Failure('positive integer', 0)
    assert positive_int('d', 0) == Failure('positive integer', 0)
    assert not positive_int('', 0)


def test_parser_parse():
    assert positive_int.parse('42') == Success(42, 2)
    assert repr(positive_int) == "Parser(name='positive integer')"
