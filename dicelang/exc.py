"""
Common exceptions.
"""
from __future__ import absolute_import, print_function


class DiceException(Exception):
    """
    All project exceptions subclass this.
    """
    def __init__(self, msg=None, lvl='info'):
        super().__init__(msg)
        self.log_level = lvl


class UserException(DiceException):
    """
    Exception occurred usually due to user error.

    Not unexpected but can indicate a problem.
    """


class ArgumentParseError(UserException):
    """ Error raised on failure to parse arguments. """


class ArgumentHelpError(UserException):
    """ Error raised on request to print help for command. """


class InvalidNotation(UserException):
    """
    The notation could not be parsed into a roll.
    No partial roll is ever produced.

    Attributes:
        notation: The text that failed to parse.
        position: The offset into notation where parsing stopped.
    """
    def __init__(self, notation, position=0, reason=None):
        msg = f"Invalid roll format: {notation!r}, stopped at position {position}."
        if reason:
            msg += f" Expected {reason}."
        super().__init__(msg)
        self.notation = notation
        self.position = position


class ConfigurationError(UserException, ValueError):
    """ A configured limit was out of range. """


class InternalException(DiceException):
    """
    An internal exception that went uncaught.

    Indicates a severe problem.
    """
    def __init__(self, msg, lvl='exception'):
        super().__init__(msg, lvl)


class EvaluationError(InternalException):
    """ A roll, die type or modifier the evaluator does not know reached it. """


class InvalidComparisonOperator(InternalException):
    """ A comparison was requested with an operator outside ComparisonOperator. """


def log_format(*, notation):
    """ Describe the notation that triggered a problem for the logs. """
    msg = "Notation: {}".format(notation)
    msg += "\n    Length: " + str(len(notation))

    return msg


def write_log(exc, log, *, lvl='info', notation):
    """
    Log all relevant information about this failure.
    The exception's own log_level takes priority over lvl.
    """
    log_func = getattr(log, getattr(exc, 'log_level', lvl), getattr(log, lvl))
    header = '\n{}\n{}\n'.format(exc.__class__.__name__ + ': ' + str(exc), '=' * 20)
    log_func(header + log_format(notation=notation))
