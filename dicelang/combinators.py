"""
Minimal parser combinators.

A parser is a callable taking (text, pos) and returning either:
    Success(value, pos): pos is the offset just after what was consumed.
    Failure(expected, pos): pos is where the failure happened.

A Failure whose pos is past the starting offset has consumed input.
alternative only falls through to the next choice on failures that consumed
nothing, wrap a parser in attempt to rewind it on failure.

Parsers hold no state between calls, a composed grammar can be shared freely.
"""
from __future__ import absolute_import, print_function

from dicelang.util import ReprMixin


class Success(ReprMixin):
    """
    A successful parse.

    Attributes:
        value: The value produced.
        pos: The offset after the consumed input.
    """
    _repr_keys = ['value', 'pos']

    def __init__(self, value, pos):
        self.value = value
        self.pos = pos

    def __bool__(self):
        return True

    def __eq__(self, other):
        return isinstance(other, Success) and (self.value, self.pos) == (other.value, other.pos)


class Failure(ReprMixin):
    """
    A failed parse.

    Attributes:
        expected: Description of what was expected.
        pos: The offset where the failure happened.
    """
    _repr_keys = ['expected', 'pos']

    def __init__(self, expected, pos):
        self.expected = expected
        self.pos = pos

    def __bool__(self):
        return False

    def __eq__(self, other):
        return isinstance(other, Failure) and (self.expected, self.pos) == (other.expected, other.pos)


class Parser(ReprMixin):
    """
    Wrap a parse function with a name for debugging.

    Attributes:
        func: Callable (text, pos) -> Success | Failure.
        name: Describes what the parser recognises.
    """
    _repr_keys = ['name']

    def __init__(self, func, name='parser'):
        self.func = func
        self.name = name

    def __call__(self, text, pos=0):
        return self.func(text, pos)

    def parse(self, text):
        """ Run the parser from the start of text. Input need not be fully consumed. """
        return self.func(text, 0)


def satisfy(predicate, expected='character'):
    """
    Match one character for which predicate is true.
    """
    def inner(text, pos):
        if pos < len(text) and predicate(text[pos]):
            return Success(text[pos], pos + 1)
        return Failure(expected, pos)

    return Parser(inner, expected)


def char(expected_char):
    """
    Match exactly expected_char.
    """
    return satisfy(lambda found: found == expected_char, repr(expected_char))


def string(expected_str):
    """
    Match exactly expected_str. A partial match consumes nothing.
    """
    def inner(text, pos):
        if text.startswith(expected_str, pos):
            return Success(expected_str, pos + len(expected_str))
        return Failure(repr(expected_str), pos)

    return Parser(inner, repr(expected_str))


def sequence(*parsers, combine=None):
    """
    Run parsers one after another, stopping at the first failure.

    Args:
        parsers: The parsers to run in order.
        combine: Called with each parser's value as positional args.
                 If not given, the tuple of values is produced.
    """
    def inner(text, pos):
        values = []
        for parser in parsers:
            result = parser(text, pos)
            if not result:
                return result
            values.append(result.value)
            pos = result.pos

        if combine:
            return Success(combine(*values), pos)
        return Success(tuple(values), pos)

    return Parser(inner, ' '.join(parser.name for parser in parsers))


def alternative(*parsers):
    """
    Try parsers in order, the first success wins.
    A choice that fails after consuming input stops the search and its failure is returned.
    """
    expected = ' or '.join(parser.name for parser in parsers)

    def inner(text, pos):
        for parser in parsers:
            result = parser(text, pos)
            if result or result.pos != pos:
                return result

        return Failure(expected, pos)

    return Parser(inner, expected)


def attempt(parser):
    """
    Rewind to the starting offset when parser fails, so alternative can try the next choice.
    """
    def inner(text, pos):
        result = parser(text, pos)
        if not result:
            return Failure(result.expected, pos)
        return result

    return Parser(inner, parser.name)


def many(parser):
    """
    Apply parser zero or more times, producing a list of values.
    Stops on a failure that consumed nothing, propagates one that did.
    """
    def inner(text, pos):
        values = []
        while True:
            result = parser(text, pos)
            if not result:
                if result.pos != pos:
                    return result
                return Success(values, pos)

            values.append(result.value)
            if result.pos == pos:
                return Success(values, pos)
            pos = result.pos

    return Parser(inner, f'many({parser.name})')


def many1(parser):
    """
    Apply parser one or more times, producing a list of values.
    """
    rest = many(parser)

    def inner(text, pos):
        first = parser(text, pos)
        if not first:
            return first

        result = rest(text, first.pos)
        if not result:
            return result
        return Success([first.value] + result.value, result.pos)

    return Parser(inner, f'many1({parser.name})')


def map_result(parser, func):
    """
    Transform the value of a successful parse with func.
    """
    def inner(text, pos):
        result = parser(text, pos)
        if result:
            return Success(func(result.value), result.pos)
        return result

    return Parser(inner, parser.name)


def optional(parser, default=None):
    """
    Never fails, produce parser's value when present or default when absent.
    When parser fails nothing is consumed.
    """
    def inner(text, pos):
        result = parser(text, pos)
        if result:
            return result
        return Success(default, pos)

    return Parser(inner, f'optional({parser.name})')


def _skip_whitespace(text, pos):
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return Success(None, pos)


whitespace = Parser(_skip_whitespace, 'whitespace')


def token(parser):
    """
    Allow whitespace on both sides of parser.
    The whole token rewinds on failure, leading whitespace included.
    """
    return attempt(map_result(sequence(whitespace, parser, whitespace), lambda values: values[1]))


def _end_of_input(text, pos):
    if pos == len(text):
        return Success(None, pos)
    return Failure('end of input', pos)


end_of_input = Parser(_end_of_input, 'end of input')


def _positive_int(text, pos):
    end = pos
    while end < len(text) and text[end] in '0123456789':
        end += 1

    if end == pos or int(text[pos:end]) < 1:
        return Failure('positive integer', pos)
    return Success(int(text[pos:end]), end)


positive_int = Parser(_positive_int, 'positive integer')
