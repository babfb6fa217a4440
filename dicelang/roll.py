"""
Roll dice notation in one call and present the results.

    roll("4d6kh3")          Parse and evaluate, returns the total.
    roll_detailed("4d6kh3") Same but returns the full DiceEvaluationResult.

Presentation follows the markdown like marks used in chat:
    ~~v~~   Dropped by a keep or drop.
    vr      Rerolled or superseded.
    __v__   Added by an explosion.
    **v**   Counted as a success.
"""
from __future__ import absolute_import, print_function
import itertools

from dicelang.evaluator import DiceEvaluator
from dicelang.grammar import parse_roll
from dicelang.rolls import ArithmeticOperator, ConstantDie, SuccessDie

PAD_LEN = 8


def roll(text, rng=None):
    """
    Parse and evaluate text.

    Args:
        text: The dice notation.
        rng: The RandomSource to draw from, a fresh NumpyRandomSource if None.

    Raises:
        InvalidNotation: text is not valid notation.

    Returns:
        The integer total.
    """
    return DiceEvaluator(rng).evaluate(parse_roll(text))


def roll_detailed(text, rng=None):
    """
    Parse and evaluate text, keeping every event.

    Raises:
        InvalidNotation: text is not valid notation.

    Returns:
        A DiceEvaluationResult.
    """
    return DiceEvaluator(rng).evaluate_detailed(parse_roll(text))


def format_group(events):
    """ Format the events of one term. A lone constant is shown bare. """
    if len(events) == 1 and isinstance(events[0].die_type, ConstantDie):
        return str(events[0])

    return "(" + ", ".join(str(event) for event in events) + ")"


def format_events(events):
    """
    Format a trace of events for display, terms are separated by their operator.

    Returns:
        The formatted string, empty when there are no events.
    """
    msg = ""
    for _, group in itertools.groupby(events, key=lambda event: event.group_id):
        group = list(group)
        operator = group[0].group_operator
        if msg:
            msg += f" {operator.value if operator else '+'} "
        elif operator is ArithmeticOperator.SUBTRACT:
            msg += "-"
        msg += format_group(group)

    return msg


def success_string(result):
    """
    Count and print the total number of successes and fails in the result.

    Returns:
        The formatted string to print, empty when nothing was counted.
    """
    if not [event for event in result.events if isinstance(event.die_type, SuccessDie)]:
        return ""

    fcnt, scnt = result.failures, result.successes
    diff = scnt - fcnt
    psign = '+' if diff >= 0 else ''
    return f"({psign}{diff}) **{fcnt}** Failure(s), **{scnt}** Success(es)"


def throw_result(spec, result, note=None):
    """
    Gather all information required to present a roll.

    Args:
        spec: The notation rolled.
        result: The DiceEvaluationResult of the roll.
        note: Optional text replayed with the roll.

    Returns:
        A dict suitable for throw_output.
    """
    return {
        'spec': spec,
        'steps': format_events(result.events),
        'value': result.value,
        'success': success_string(result),
        'note': note,
    }


def throw_output(result):
    """
    Using a result dict from a throw, combine them into expected output format.

    Args:
        result: A dict object with all information required.

    Returns:
        A string formatted to present important information of roll.
    """
    pad = PAD_LEN * " "
    trail = ""
    if result.get('success'):
        trail += f"\n{pad}{result['success']}"
    if result.get('note'):
        trail += f"\n{pad}Note: {result['note']}"

    return f"{result['spec']} = {result['steps']} = {result['value']}{trail}"
