"""
Grammar for dice notation, built once at import from dicelang.combinators.

    roll            := arithmeticRoll | basicRoll | constant
    arithmeticRoll  := rollTerm (('+' | '-') rollTerm)*
    rollTerm        := basicRoll(no constant modifier) | constant
    basicRoll       := count? 'd' dieType modifier*
    dieType         := 'F' | '%' | positiveInt
    comparisonPoint := ('=' | '>' | '<') positiveInt

Modifiers, tried in this order:
    kh[N] kl[N] dh[N] dl[N]     Keep/drop highest or lowest N, N defaults to 1.
    ro<cmp>                     Reroll once.
    rc<cmp>                     Reroll until the comparison fails.
    !<cmp>                      Explode.
    ^<cmp>                      Compound.
    <cmp>                       Count successes, i.e. >4
    f<cmp>                      Count failures.
    +N -N                       Constant modifier, only outside arithmetic terms.

Every token allows whitespace around it, never inside it. "3d6" is one token.
The whole input must be consumed, zero counts or sides never parse.
"""
from __future__ import absolute_import, print_function
import logging

import dicelang.exc
from dicelang.combinators import (alternative, attempt, char, end_of_input, many, map_result,
                                  optional, positive_int, sequence, string, token, whitespace)
from dicelang.rolls import (ArithmeticOperator, ArithmeticRoll, Basic, BasicRoll, ComparisonOperator,
                            CompoundingModifier, Constant, ConstantModifier, DropModifier,
                            ExplodeModifier, FailureModifier, Fudge, KeepModifier, Percent,
                            RerollMultipleModifier, RerollOnceModifier, SuccessModifier)

COMPARISON_OPERATOR = alternative(
    map_result(char('='), lambda _: ComparisonOperator.EQUAL),
    map_result(char('>'), lambda _: ComparisonOperator.GREATER_THAN),
    map_result(char('<'), lambda _: ComparisonOperator.LESS_THAN),
)
COMPARISON_POINT = attempt(sequence(COMPARISON_OPERATOR, positive_int))
SIGN = alternative(
    map_result(char('+'), lambda _: ArithmeticOperator.ADD),
    map_result(char('-'), lambda _: ArithmeticOperator.SUBTRACT),
)
ARITHMETIC_OPERATOR = token(SIGN)


def count_modifier(prefix, cls, highest):
    """
    A keep or drop modifier: prefix followed by an optional positive count.
    """
    return token(sequence(string(prefix), optional(positive_int, default=1),
                          combine=lambda _, count: cls(count, highest)))


def comparison_modifier(prefix, cls):
    """
    A modifier made of prefix followed by a mandatory comparison point.
    """
    return token(sequence(string(prefix), COMPARISON_POINT,
                          combine=lambda _, point: cls(*point)))


KEEP_HIGH = count_modifier('kh', KeepModifier, True)
KEEP_LOW = count_modifier('kl', KeepModifier, False)
DROP_HIGH = count_modifier('dh', DropModifier, True)
DROP_LOW = count_modifier('dl', DropModifier, False)
REROLL_ONCE = comparison_modifier('ro', RerollOnceModifier)
REROLL_MULTIPLE = comparison_modifier('rc', RerollMultipleModifier)
EXPLODE = comparison_modifier('!', ExplodeModifier)
COMPOUND = comparison_modifier('^', CompoundingModifier)
SUCCESS = token(map_result(COMPARISON_POINT, lambda point: SuccessModifier(*point)))
FAILURE = comparison_modifier('f', FailureModifier)
CONSTANT_MODIFIER = token(sequence(SIGN, positive_int, combine=ConstantModifier))

MODIFIER_NO_CONSTANT = alternative(KEEP_HIGH, KEEP_LOW, DROP_HIGH, DROP_LOW,
                                   REROLL_ONCE, REROLL_MULTIPLE, EXPLODE, COMPOUND,
                                   SUCCESS, FAILURE)
MODIFIER = alternative(MODIFIER_NO_CONSTANT, CONSTANT_MODIFIER)

DIE_TYPE = alternative(
    map_result(char('F'), lambda _: Fudge()),
    map_result(char('%'), lambda _: Percent()),
    map_result(positive_int, Basic),
)


def basic_roll(modifier):
    """
    A basic roll whose trailing modifiers are parsed by modifier.
    """
    return token(sequence(optional(positive_int, default=1), char('d'), DIE_TYPE, many(modifier),
                          combine=lambda count, _, die_type, mods: BasicRoll(count, die_type, mods)))


def _collapse_terms(values):
    first, rest = values
    if not rest:
        return first

    return ArithmeticRoll([(ArithmeticOperator.ADD, first)] + rest)


BASIC_ROLL = basic_roll(MODIFIER)
CONSTANT = token(map_result(positive_int, Constant))
ROLL_TERM = alternative(basic_roll(MODIFIER_NO_CONSTANT), CONSTANT)
ARITHMETIC_ROLL = map_result(sequence(ROLL_TERM, many(sequence(ARITHMETIC_OPERATOR, ROLL_TERM))),
                             _collapse_terms)


def complete(parser):
    """ Require parser to consume the rest of the input. """
    return sequence(parser, end_of_input, combine=lambda value, _: value)


ROLL = map_result(sequence(whitespace, alternative(
    attempt(complete(ARITHMETIC_ROLL)),
    attempt(complete(BASIC_ROLL)),
    complete(CONSTANT),
)), lambda values: values[1])


def parse_roll(notation):
    """
    Parse a dice notation into a roll.

    Args:
        notation: The text to parse, i.e. "4d6kh3 + 2".

    Raises:
        InvalidNotation: The notation could not be parsed, there is no partial result.

    Returns:
        A Constant, BasicRoll or ArithmeticRoll.
    """
    result = ROLL(notation, 0)
    if not result:
        failure = complete(ARITHMETIC_ROLL)(notation, len(notation) - len(notation.lstrip()))
        logging.getLogger('dicelang.grammar').debug("Failed to parse %r at %d", notation, failure.pos)
        raise dicelang.exc.InvalidNotation(notation, failure.pos, failure.expected)

    logging.getLogger('dicelang.grammar').debug("Parsed %r into %r", notation, result.value)
    return result.value
