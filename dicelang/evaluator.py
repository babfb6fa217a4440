"""
Evaluate a roll tree against a random source.

Fixed Order of Evaluation for a BasicRoll:
    1 Generation:   RerollOnce, RerollMultiple, Explode, Compounding
    2 Selection:    Keep, Drop
    3 Finalization: Success, Failure, ConstantModifier
Within a phase modifiers apply in notation order.

Logic regarding events:
    Every die drawn becomes a DieEvent and stays in the trace in the order drawn.
    All events start Kept.
    Rerolled dice are Discarded, their replacement is appended at the end.
    Exploded dice stay Kept, each extra die is a new Explosion event.
    Compounded dice and their extra draws are Discarded, one Compound event holds the sum.
    Dropped dice have intentionally been ignored by a keep or drop.
    Success and Failure mark dice once, a die marked by one is never remarked.
    Counting Discards every Kept die and constant, a summary event holds the count.

The value of a roll is the sum of its Kept events. For an ArithmeticRoll the
events of each term carry the term index and operator, so the Kept events
signed by their group operator always sum to the value returned.
"""
from __future__ import absolute_import, print_function
import enum
import logging

import dicelang.exc
import dicelang.util
from dicelang.rng import NumpyRandomSource
from dicelang.rolls import (PHASE_FINALIZATION, ArithmeticOperator, ArithmeticRoll, Basic, BasicRoll,
                            CompoundingModifier, Constant, ConstantDie, ConstantModifier, DropModifier,
                            ExplodeModifier, FailureModifier, Fudge, KeepModifier, Percent, Reroll,
                            RerollMultipleModifier, RerollOnceModifier, SuccessDie, SuccessModifier)
from dicelang.util import ReprMixin

MAX_EXPLOSIONS = 100
MAX_COMPOUNDS = 100
MAX_REROLLS = 10
ROLLABLE = (Basic, Percent, Fudge)


class DieEventType(enum.Enum):
    """ How a die came to be drawn. """
    INITIAL = 'initial'
    REROLL = 'reroll'
    EXPLOSION = 'explosion'
    COMPOUND = 'compound'


class RollSignificance(enum.Enum):
    """ Where a value falls in its die's range. """
    NONE = 'none'
    MINIMUM = 'minimum'
    MAXIMUM = 'maximum'


class DieStatus(enum.Enum):
    """ Whether an event counts toward the total. """
    KEPT = 'kept'
    DROPPED = 'dropped'
    DISCARDED = 'discarded'


class SuccessStatus(enum.Enum):
    """ Mark set by success or failure counting. """
    NEUTRAL = 'neutral'
    SUCCESS = 'success'
    FAILURE = 'failure'


def significance(die_type, value):
    """
    Determine the significance of value on die_type.

    Returns:
        RollSignificance.MAXIMUM or MINIMUM at the extremes of a rollable die, otherwise NONE.
    """
    die = die_type.base
    if not isinstance(die, ROLLABLE):
        return RollSignificance.NONE
    if value == die.max_value:
        return RollSignificance.MAXIMUM
    if value == die.min_value:
        return RollSignificance.MINIMUM

    return RollSignificance.NONE


class DieEvent(ReprMixin):
    """
    One contribution to a roll, with its provenance and final disposition.
    Only status and success change, and only during the evaluation that created it.

    Attributes:
        value: The value of the die or summary.
        event_type: A DieEventType.
        die_type: The DieType drawn, ConstantDie or SuccessDie for summaries.
        significance: A RollSignificance.
        status: A DieStatus.
        success: A SuccessStatus.
        group_id: Index of the arithmetic term that produced it, None outside arithmetic.
        group_operator: The ArithmeticOperator of that term, None outside arithmetic.
    """
    _repr_keys = ['value', 'event_type', 'die_type', 'significance', 'status', 'success',
                  'group_id', 'group_operator']

    def __init__(self, *, value, event_type=DieEventType.INITIAL, die_type=None,
                 significance=RollSignificance.NONE, status=DieStatus.KEPT,
                 success=SuccessStatus.NEUTRAL, group_id=None, group_operator=None):
        self.value = value
        self.event_type = event_type
        self.die_type = die_type
        self.significance = significance
        self.status = status
        self.success = success
        self.group_id = group_id
        self.group_operator = group_operator

    def __str__(self):
        return self.fmt_string().format(self.value)

    def __int__(self):
        return self.value

    @property
    def signed_value(self):
        """ The value with the sign of the arithmetic term it belongs to. """
        if self.group_operator is ArithmeticOperator.SUBTRACT:
            return -self.value
        return self.value

    def is_kept(self):
        """ True if this event still counts. """
        return self.status is DieStatus.KEPT

    def is_dropped(self):
        """ True if a keep or drop excluded this event. """
        return self.status is DieStatus.DROPPED

    def is_discarded(self):
        """ True if this event was replaced by a reroll, compound or count. """
        return self.status is DieStatus.DISCARDED

    def is_die(self):
        """ True if this event is a die drawn, not a constant or count summary. """
        return isinstance(self.die_type, ROLLABLE + (Reroll,))

    def fmt_string(self):
        """ Return the formatting string for the event's current state. """
        fmt = "{}"

        if self.is_discarded() and self.is_die() and self.success is SuccessStatus.NEUTRAL:
            fmt = fmt + "r"
        if self.event_type is DieEventType.EXPLOSION:
            fmt = "__" + fmt + "__"
        if self.is_dropped():
            fmt = "~~" + fmt + "~~"
        if self.success is SuccessStatus.SUCCESS:
            fmt = "**" + fmt + "**"

        return fmt


class DiceEvaluationResult(ReprMixin):
    """
    The value of a roll and every event drawn to reach it, in the order drawn.

    Attributes:
        value: The total of the roll.
        events: The list of DieEvent.
    """
    _repr_keys = ['value', 'events']

    def __init__(self, value, events=None):
        self.value = value
        self.events = events if events is not None else []

    def __int__(self):
        return self.value

    @property
    def kept(self):
        """ The events that count toward value. """
        return [event for event in self.events if event.is_kept()]

    @property
    def successes(self):
        """ Number of dice marked as successes. """
        return len([event for event in self.events if event.success is SuccessStatus.SUCCESS])

    @property
    def failures(self):
        """ Number of dice marked as failures. """
        return len([event for event in self.events if event.success is SuccessStatus.FAILURE])


class DiceEvaluator(ReprMixin):
    """
    Interpret rolls using a random source.
    Holds no state between evaluations besides the source and its limits.

    Attributes:
        rng: The RandomSource dice are drawn from.
        max_explosions: Most extra dice one die may explode into.
        max_compounds: Most extra draws one die may compound.
    """
    _repr_keys = ['rng', 'max_explosions', 'max_compounds']

    def __init__(self, rng=None, *, max_explosions=MAX_EXPLOSIONS, max_compounds=MAX_COMPOUNDS):
        self.rng = rng if rng is not None else NumpyRandomSource()
        self.max_explosions = max_explosions
        self.max_compounds = max_compounds
        self.log = logging.getLogger('dicelang.evaluator')

    @classmethod
    def from_config(cls, rng=None):
        """
        Build an evaluator with the limits found under the evaluator section of the config.

        Raises:
            ConfigurationError: A configured limit is below 1.
        """
        return cls(rng,
                   max_explosions=dicelang.util.get_config('evaluator', 'max_explosions',
                                                           default=MAX_EXPLOSIONS),
                   max_compounds=dicelang.util.get_config('evaluator', 'max_compounds',
                                                          default=MAX_COMPOUNDS))

    @property
    def max_explosions(self):
        """ Most extra dice a single die may explode into. """
        return self._max_explosions

    @max_explosions.setter
    def max_explosions(self, new_value):
        """
        Raises:
            ConfigurationError: new_value is below 1.
        """
        self._max_explosions = check_limit('max_explosions', new_value)

    @property
    def max_compounds(self):
        """ Most extra draws a single die may compound. """
        return self._max_compounds

    @max_compounds.setter
    def max_compounds(self, new_value):
        """
        Raises:
            ConfigurationError: new_value is below 1.
        """
        self._max_compounds = check_limit('max_compounds', new_value)

    def evaluate(self, roll):
        """
        Evaluate roll and return only its total.

        Raises:
            EvaluationError: roll contains a node the evaluator does not know.

        Returns:
            The integer total.
        """
        return self.evaluate_detailed(roll).value

    def evaluate_detailed(self, roll):
        """
        Evaluate roll keeping every event drawn.

        Raises:
            EvaluationError: roll contains a node the evaluator does not know.

        Returns:
            A DiceEvaluationResult.
        """
        events = []
        value = self._evaluate(roll, events)
        self.log.debug("Evaluated %s = %d with %d events", roll, value, len(events))

        return DiceEvaluationResult(value, events)

    def _evaluate(self, roll, events):
        if isinstance(roll, BasicRoll):
            return self._evaluate_basic(roll, events)
        if isinstance(roll, ArithmeticRoll):
            return self._evaluate_arithmetic(roll, events)
        if isinstance(roll, Constant):
            events.append(DieEvent(value=roll.value, die_type=ConstantDie()))
            return roll.value

        raise dicelang.exc.EvaluationError(f"Unknown roll type: {roll!r}")

    def _evaluate_arithmetic(self, roll, events):
        total = 0
        for group_id, (op, term) in enumerate(roll.terms):
            if not isinstance(op, ArithmeticOperator):
                raise dicelang.exc.EvaluationError(f"Unknown arithmetic operator: {op!r}")

            term_events = []
            value = self._evaluate(term, term_events)
            for event in term_events:
                event.group_id = group_id
                event.group_operator = op

            events.extend(term_events)
            total += op.sign * value

        return total

    def _evaluate_basic(self, roll, events):
        if not isinstance(roll.die_type, ROLLABLE):
            raise dicelang.exc.EvaluationError(f"Unknown die type: {roll.die_type!r}")

        roll_events = [self._draw(roll.die_type, DieEventType.INITIAL) for _ in range(roll.count)]
        counted = None
        for mod in roll.phased_modifiers():
            if mod.PHASE == PHASE_FINALIZATION and counted is None:
                counted = [event for event in roll_events if event.is_kept() and event.is_die()]
            self._apply_modifier(mod, roll_events, counted)

        events.extend(roll_events)
        return sum(event.value for event in roll_events if event.is_kept())

    def _draw(self, die_type, event_type):
        """
        Draw one die of die_type from the random source.

        Raises:
            EvaluationError: The die type cannot be rolled.

        Returns:
            A new Kept DieEvent.
        """
        die = die_type.base
        if not isinstance(die, ROLLABLE):
            raise dicelang.exc.EvaluationError(f"Unknown die type: {die_type!r}")

        value = self.rng.next(*die.draw_bounds)
        if event_type is DieEventType.REROLL:
            die_type = Reroll(die)
        else:
            die_type = die

        return DieEvent(value=value, event_type=event_type, die_type=die_type,
                        significance=significance(die, value))

    def _apply_modifier(self, mod, events, counted):
        if isinstance(mod, RerollOnceModifier):
            self._reroll_once(mod, events)
        elif isinstance(mod, RerollMultipleModifier):
            self._reroll_multiple(mod, events)
        elif isinstance(mod, ExplodeModifier):
            self._explode(mod, events)
        elif isinstance(mod, CompoundingModifier):
            self._compound(mod, events)
        elif isinstance(mod, KeepModifier):
            self._keep(mod, events)
        elif isinstance(mod, DropModifier):
            self._drop(mod, events)
        elif isinstance(mod, SuccessModifier):
            self._count(mod, events, counted, SuccessStatus.SUCCESS)
        elif isinstance(mod, FailureModifier):
            self._count(mod, events, counted, SuccessStatus.FAILURE)
        elif isinstance(mod, ConstantModifier):
            events.append(DieEvent(value=mod.signed_value, die_type=ConstantDie()))
        else:
            raise dicelang.exc.EvaluationError(f"Unknown modifier: {mod!r}")

    def _reroll_once(self, mod, events):
        for event in live_dice(events):
            if mod.matches(event.value):
                event.status = DieStatus.DISCARDED
                events.append(self._draw(event.die_type, DieEventType.REROLL))

    def _reroll_multiple(self, mod, events):
        for event in live_dice(events):
            current, rerolls = event, 0
            while mod.matches(current.value) and rerolls < MAX_REROLLS:
                current.status = DieStatus.DISCARDED
                current = self._draw(current.die_type, DieEventType.REROLL)
                events.append(current)
                rerolls += 1

            if rerolls == MAX_REROLLS and mod.matches(current.value):
                self.log.warning("Reroll limit of %d reached for %s, keeping %d",
                                 MAX_REROLLS, mod, current.value)

    def _explode(self, mod, events):
        for event in live_dice(events):
            current, explosions = event, 0
            while mod.matches(current.value) and explosions < self.max_explosions:
                current = self._draw(event.die_type, DieEventType.EXPLOSION)
                events.append(current)
                explosions += 1

            if explosions == self.max_explosions and mod.matches(current.value):
                self.log.warning("Explosion limit of %d reached for %s", self.max_explosions, mod)

    def _compound(self, mod, events):
        for event in live_dice(events):
            if not mod.matches(event.value):
                continue

            total, current, chain = event.value, event, []
            while mod.matches(current.value) and len(chain) < self.max_compounds:
                current = self._draw(event.die_type, DieEventType.COMPOUND)
                current.status = DieStatus.DISCARDED
                chain.append(current)
                total += current.value

            if len(chain) == self.max_compounds and mod.matches(current.value):
                self.log.warning("Compound limit of %d reached for %s", self.max_compounds, mod)

            event.status = DieStatus.DISCARDED
            events.extend(chain)
            events.append(DieEvent(value=total, event_type=DieEventType.COMPOUND,
                                   die_type=event.die_type.base,
                                   significance=significance(event.die_type, total)))

    def _keep(self, mod, events):
        ranked = rank(kept_dice(events), mod.highest)
        for event in ranked[mod.count:]:
            event.status = DieStatus.DROPPED

    def _drop(self, mod, events):
        ranked = rank(kept_dice(events), mod.highest)
        for event in ranked[:mod.count]:
            event.status = DieStatus.DROPPED

    def _count(self, mod, events, counted, mark):
        """
        Mark the counted dice matching mod, then collapse the roll into one summary event.
        Everything still Kept is Discarded, earlier constant modifiers included.
        Other count summaries stay, failures count negatively so the counts add up.
        """
        matched = [event for event in counted
                   if event.success is SuccessStatus.NEUTRAL and mod.matches(event.value)]
        for event in matched:
            event.success = mark
        for event in events:
            if event.is_kept() and not isinstance(event.die_type, SuccessDie):
                event.status = DieStatus.DISCARDED

        sign = 1 if mark is SuccessStatus.SUCCESS else -1
        events.append(DieEvent(value=sign * len(matched), die_type=SuccessDie()))


def check_limit(name, value):
    """
    Validate an iteration ceiling.

    Raises:
        ConfigurationError: value is not an integer of at least 1.

    Returns:
        value unchanged.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise dicelang.exc.ConfigurationError(f"{name} must be an integer >= 1, got {value!r}.")

    return value


def live_dice(events):
    """ The dice still in play for generation modifiers, a snapshot list. """
    return [event for event in events if not event.is_discarded() and event.is_die()]


def kept_dice(events):
    """ The dice currently counting toward the total. """
    return [event for event in events if event.is_kept() and event.is_die()]


def rank(events, highest):
    """
    Order events by value, highest first if highest else lowest first.
    Equal values keep their original order.
    """
    if highest:
        return sorted(events, key=lambda event: -event.value)
    return sorted(events, key=lambda event: event.value)
