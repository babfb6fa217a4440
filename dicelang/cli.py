"""
Command line entry point.

    diceLang 4d6kh3                 Roll once and print the result.
    diceLang -t 6 4d6kh3            Roll six times.
    diceLang -d -s 42 "2d20kh1 + 5" Seeded roll, print every event drawn.
    diceLang                        Interactive, one roll per line until EOF.
"""
from __future__ import absolute_import, print_function
import argparse
import logging

import dicelang
import dicelang.exc
import dicelang.util
from dicelang.evaluator import DiceEvaluator, RollSignificance, SuccessStatus
from dicelang.grammar import parse_roll
from dicelang.rng import NumpyRandomSource
from dicelang.roll import PAD_LEN, throw_output, throw_result

DESCRIPTION = 'Roll dice written in dice notation, i.e. 3d6kh2!=6+1d4-3'


class ThrowArgumentParser(argparse.ArgumentParser):
    """
    ArgumentParser subclass that does NOT terminate the program.
    """
    def print_help(self, file=None):  # pylint: disable=redefined-builtin
        raise dicelang.exc.ArgumentHelpError(self.format_help())

    def error(self, message):
        raise dicelang.exc.ArgumentParseError(message)

    def exit(self, status=0, message=None):
        """
        Suppress default exit behaviour.
        """
        raise dicelang.exc.ArgumentParseError(message)


def positive_int(text):
    """ argparse type for counts that must be at least 1. """
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")

    return value


def make_parser():
    """
    Returns the command line parser.
    """
    parser = ThrowArgumentParser(prog='diceLang', description=DESCRIPTION)
    parser.add_argument('notation', nargs='*', help='The roll, joined with spaces when split.')
    parser.add_argument('-d', '--detailed', action='store_true',
                        help='Print every event drawn.')
    parser.add_argument('-s', '--seed', type=int, help='Seed the random source.')
    parser.add_argument('-t', '--times', type=positive_int, default=1,
                        help='Roll this many times.')
    parser.add_argument('-v', '--version', action='version', version=dicelang.__version__)

    return parser


def format_trace(events):
    """
    Format each event on its own line.

    Returns:
        The list of lines.
    """
    pad = PAD_LEN * " "
    lines = []
    for ind, event in enumerate(events):
        line = f"{pad}{ind:>3}: {event.value:>4} d{event.die_type} "
        line += f"{event.event_type.value} {event.status.value}"
        if event.significance is not RollSignificance.NONE:
            line += f" {event.significance.value}"
        if event.success is not SuccessStatus.NEUTRAL:
            line += f" {event.success.value}"
        if event.group_id is not None:
            line += f" group {event.group_id} ({event.group_operator.value})"
        lines.append(line)

    return lines


def roll_lines(evaluator, notation, *, times=1, detailed=False):
    """
    Parse notation once and evaluate it times times.

    Raises:
        InvalidNotation: notation is not valid.

    Returns:
        The list of lines to print.
    """
    roll = parse_roll(notation)
    lines = []
    for _ in range(times):
        result = evaluator.evaluate_detailed(roll)
        lines.append(throw_output(throw_result(notation, result)))
        if detailed:
            lines.extend(format_trace(result.events))

    return lines


def interactive(evaluator, *, times=1, detailed=False):
    """ Try dice rolls interactively until EOF. """
    log = logging.getLogger('dicelang.cli')
    while True:
        try:
            text = input('> ')
        except EOFError:
            print()
            break

        if not text.strip():
            continue

        try:
            print('\n'.join(roll_lines(evaluator, text, times=times, detailed=detailed)))
        except dicelang.exc.InvalidNotation as exc:
            dicelang.exc.write_log(exc, log, notation=text)
            print(exc)


def main(argv=None):
    """
    Entry point for the diceLang console script.

    Returns:
        The exit status.
    """
    parser = make_parser()
    try:
        args = parser.parse_args(argv)
    except dicelang.exc.ArgumentHelpError as exc:
        print(exc)
        return 0
    except dicelang.exc.ArgumentParseError as exc:
        if exc.args[0]:
            print(exc)
        return 2 if exc.args[0] else 0

    dicelang.util.init_logging()
    log = logging.getLogger('dicelang.cli')
    seed = dicelang.util.seed_random(args.seed)
    log.info("Random source seeded with %d", seed)
    evaluator = DiceEvaluator.from_config(NumpyRandomSource(seed))

    if not args.notation:
        interactive(evaluator, times=args.times, detailed=args.detailed)
        return 0

    notation = ' '.join(args.notation)
    try:
        print('\n'.join(roll_lines(evaluator, notation, times=args.times, detailed=args.detailed)))
    except dicelang.exc.InvalidNotation as exc:
        dicelang.exc.write_log(exc, log, notation=notation)
        print(exc)
        return 1

    return 0


if __name__ == "__main__":
    main()
