"""
The roll tree produced by the grammar and consumed by the evaluator.

Three closed families of nodes:
    Roll:      Constant, BasicRoll, ArithmeticRoll
    DieType:   Basic, Percent, Fudge and the evaluation only Reroll, ConstantDie, SuccessDie
    Modifier:  Keep, Drop, RerollOnce, RerollMultiple, Explode, Compounding,
               Success, Failure, ConstantModifier

Every node is immutable once built, a parsed roll can be shared and evaluated
from any number of threads.

Modifiers carry a PHASE, the evaluator applies them phase by phase and
in notation order within a phase:
    1 Generation:   RerollOnce, RerollMultiple, Explode, Compounding
    2 Selection:    Keep, Drop
    3 Finalization: Success, Failure, ConstantModifier
"""
from __future__ import absolute_import, print_function
import enum

import dicelang.exc
from dicelang.util import ReprMixin

PHASE_GENERATION = 1
PHASE_SELECTION = 2
PHASE_FINALIZATION = 3


class ComparisonOperator(enum.Enum):
    """ Strict comparisons supported by comparison points. """
    EQUAL = '='
    GREATER_THAN = '>'
    LESS_THAN = '<'


class ArithmeticOperator(enum.Enum):
    """ Sign applied to a term or constant modifier. """
    ADD = '+'
    SUBTRACT = '-'

    @property
    def sign(self):
        """ The multiplier this operator applies, 1 or -1. """
        return 1 if self is ArithmeticOperator.ADD else -1


def compare(operator, left, right):
    """
    Evaluate left <operator> right.

    Raises:
        InvalidComparisonOperator: operator is not a ComparisonOperator.

    Returns:
        True IFF the comparison holds.
    """
    if operator is ComparisonOperator.EQUAL:
        return left == right
    if operator is ComparisonOperator.GREATER_THAN:
        return left > right
    if operator is ComparisonOperator.LESS_THAN:
        return left < right

    raise dicelang.exc.InvalidComparisonOperator(f"Unknown comparison operator: {operator!r}")


class Node(ReprMixin):
    """
    Base of all tree nodes. Values are fixed at construction.
    Equality and hashing are by type and the values in _repr_keys.
    """
    def __init__(self, **kwargs):
        for key in self._repr_keys:
            object.__setattr__(self, key, kwargs[key])

    def __setattr__(self, key, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable.")

    def __delattr__(self, key):
        raise AttributeError(f"{self.__class__.__name__} is immutable.")

    def _key(self):
        return tuple(getattr(self, key) for key in self._repr_keys)

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.__class__.__name__,) + self._key())


# Die types
class DieType(Node):
    """
    The kind of die drawn.
    Subclasses that can be rolled define min_value, max_value and the
    half open draw bounds passed to the random source.
    """
    rollable = False

    @property
    def draw_bounds(self):
        """ The (low, high) arguments for RandomSource.next, high excluded. """
        return (self.min_value, self.max_value + 1)

    @property
    def base(self):
        """ The die type actually rolled, rerolls unwrap to their original die. """
        return self


class Basic(DieType):
    """ A die with sides faces numbered 1 to sides. """
    _repr_keys = ['sides']
    rollable = True

    def __init__(self, sides):
        super().__init__(sides=sides)

    def __str__(self):
        return str(self.sides)

    @property
    def min_value(self):
        return 1

    @property
    def max_value(self):
        return self.sides


class Percent(DieType):
    """ A percentile die, 1 to 100. """
    rollable = True
    sides = 100

    def __str__(self):
        return '%'

    @property
    def min_value(self):
        return 1

    @property
    def max_value(self):
        return 100


class Fudge(DieType):
    """ A FATE/FUDGE die: -1, 0 or +1. """
    rollable = True
    sides = 3

    def __str__(self):
        return 'F'

    @property
    def min_value(self):
        return -1

    @property
    def max_value(self):
        return 1


class Reroll(DieType):
    """
    A redraw of another die, only created during evaluation.

    Attributes:
        die: The Basic, Percent or Fudge die that was rerolled.
    """
    _repr_keys = ['die']
    rollable = True

    def __init__(self, die):
        super().__init__(die=die.base)

    def __str__(self):
        return str(self.die)

    @property
    def sides(self):
        return self.die.sides

    @property
    def base(self):
        return self.die

    @property
    def min_value(self):
        return self.die.min_value

    @property
    def max_value(self):
        return self.die.max_value


class ConstantDie(DieType):
    """ Marks a summary event holding a constant, never rolled. """

    def __str__(self):
        return 'C'


class SuccessDie(DieType):
    """ Marks a summary event holding a success or failure count, never rolled. """

    def __str__(self):
        return 'S'


# Modifiers
class Modifier(Node):
    """
    Base of all modifiers, PHASE decides when the evaluator applies it.
    """
    PHASE = 0


class ComparisonModifier(Modifier):
    """
    A modifier that triggers on dice satisfying a comparison point.

    Attributes:
        op: The ComparisonOperator.
        value: The positive value compared against.
    """
    _repr_keys = ['op', 'value']
    SYMBOL = ''

    def __init__(self, op, value):
        super().__init__(op=op, value=value)

    def __str__(self):
        return f'{self.SYMBOL}{self.op.value}{self.value}'

    def matches(self, value):
        """ True IFF value satisfies this modifier's comparison point. """
        return compare(self.op, value, self.value)


class KeepModifier(Modifier):
    """ Keep count highest (or lowest) dice, drop the rest. """
    _repr_keys = ['count', 'highest']
    PHASE = PHASE_SELECTION

    def __init__(self, count, highest=True):
        super().__init__(count=count, highest=highest)

    def __str__(self):
        return f"k{'h' if self.highest else 'l'}{self.count}"


class DropModifier(Modifier):
    """ Drop count highest (or lowest) dice. """
    _repr_keys = ['count', 'highest']
    PHASE = PHASE_SELECTION

    def __init__(self, count, highest=False):
        super().__init__(count=count, highest=highest)

    def __str__(self):
        return f"d{'h' if self.highest else 'l'}{self.count}"


class RerollOnceModifier(ComparisonModifier):
    """ Reroll a matching die a single time. """
    PHASE = PHASE_GENERATION
    SYMBOL = 'ro'


class RerollMultipleModifier(ComparisonModifier):
    """ Keep rerolling a matching die until it no longer matches. """
    PHASE = PHASE_GENERATION
    SYMBOL = 'rc'


class ExplodeModifier(ComparisonModifier):
    """ A matching die adds another die, which may itself explode. """
    PHASE = PHASE_GENERATION
    SYMBOL = '!'


class CompoundingModifier(ComparisonModifier):
    """ Like ExplodeModifier but the chain sums into a single die. """
    PHASE = PHASE_GENERATION
    SYMBOL = '^'


class SuccessModifier(ComparisonModifier):
    """ Count dice that match as successes. """
    PHASE = PHASE_FINALIZATION


class FailureModifier(ComparisonModifier):
    """ Count dice that match as failures, each subtracting one. """
    PHASE = PHASE_FINALIZATION
    SYMBOL = 'f'


class ConstantModifier(Modifier):
    """
    Add or subtract a fixed value from the roll.

    Attributes:
        op: The ArithmeticOperator.
        value: The positive value.
    """
    _repr_keys = ['op', 'value']
    PHASE = PHASE_FINALIZATION

    def __init__(self, op, value):
        super().__init__(op=op, value=value)

    def __str__(self):
        return f'{self.op.value}{self.value}'

    @property
    def signed_value(self):
        return self.op.sign * self.value


# Rolls
class Roll(Node):
    """ Base of all rolls. """


class Constant(Roll):
    """ A fixed positive number. """
    _repr_keys = ['value']

    def __init__(self, value):
        super().__init__(value=value)

    def __str__(self):
        return str(self.value)


class BasicRoll(Roll):
    """
    Roll count dice of die_type, then apply modifiers.

    Attributes:
        count: Number of dice, always positive.
        die_type: A Basic, Percent or Fudge die.
        modifiers: Tuple of modifiers in notation order.
    """
    _repr_keys = ['count', 'die_type', 'modifiers']

    def __init__(self, count, die_type, modifiers=()):
        super().__init__(count=count, die_type=die_type, modifiers=tuple(modifiers))

    def __str__(self):
        return f"{self.count}d{self.die_type}" + ''.join(str(mod) for mod in self.modifiers)

    def phased_modifiers(self):
        """
        The modifiers ordered by phase, notation order is kept within a phase.

        Returns:
            A list of modifiers.
        """
        return sorted(self.modifiers, key=lambda mod: mod.PHASE)


class ArithmeticRoll(Roll):
    """
    Rolls chained left to right with + and -.

    Attributes:
        terms: Tuple of (ArithmeticOperator, Roll), the first operator is always ADD.
    """
    _repr_keys = ['terms']

    def __init__(self, terms):
        super().__init__(terms=tuple((op, roll) for op, roll in terms))

    def __str__(self):
        text = ''
        for ind, (op, roll) in enumerate(self.terms):
            if ind or op is not ArithmeticOperator.ADD:
                text += op.value
            text += str(roll)

        return text
