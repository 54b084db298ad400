"""
Argosy restrictions: declarative value checks attached to options and
positional arguments.

Variants
- RangeRestriction: bounds check over any ordered domain (integers of four
  widths, single/double floats, collated strings). The comparator is the only
  domain-specific part.
- RequiredRestriction: a value must be present and non-empty.
- AllowedValuesRestriction: a value must be one of an enumerated set.

Outcomes
- Restriction.validate(value) returns None when the value passes, or a
  Violation describing which rule failed, the actual value and the bound
  involved. Violations are normal outcomes; nothing here raises for a bad
  user value.
- RangeRestriction.evaluate(value) returns a RangeOutcome
  (within-range | below-minimum | above-maximum).

Module helpers
- validate(restriction, value): RangeOutcome for ranges, Violation | None for
  every other variant.
- check(restrictions, value): run several restrictions, collect violations.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import NamedTuple, Any

from .collation import compare
from .faults import FaultCode, InvertedBoundsError
from .utils import Unset, mirror, frozen

logger = logging.getLogger(__name__)


class RangeOutcome(Enum):
    WITHIN_RANGE = "within-range"
    BELOW_MINIMUM = "below-minimum"
    ABOVE_MAXIMUM = "above-maximum"


class Violation(NamedTuple):
    """
    a failed restriction.

    fields
    - code: FaultCode of the broken rule (BELOW_MINIMUM, ABOVE_MAXIMUM, ...).
    - restriction: the restriction that produced this violation.
    - value: the offending value, as received.
    - message: short lowercased sentence suitable for composing user messages.
    - bound: the bound (or allowed values) involved, when relevant.
    - inclusive: whether that bound was inclusive, for range violations.
    """
    code: FaultCode
    restriction: Any
    value: Any
    message: str
    bound: Any = None
    inclusive: bool | None = None

    def __str__(self):
        return self.message


class Restriction(ABC):
    """
    base of every restriction variant.

    subclasses list their public fields in __introspectable__; each one is
    published as a read-only property over the private "_<name>" field and
    drives __repr__/__rich_repr__.
    """
    __introspectable__ = ()
    __typename__ = "restriction"

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        for name in cls.__dict__.get("__introspectable__", ()):
            setattr(cls, name, mirror(name))

    @abstractmethod
    def validate(self, value, /):
        """return None when value passes, otherwise a Violation."""

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return f"{type(self).__typename__}({', '.join('%s=%r' % pair for pair in self.__rich_repr__())})"


@frozen
class RangeRestriction(Restriction):
    """
    Range membership over an ordered domain.

    Parameters
    - min / max: native bound values, or None for an unbounded side.
    - min_inclusive / max_inclusive: whether the bound value itself is inside.
    - comparator: callable (left, right) -> negative | 0 | positive.
    - converter: optional callable turning a string token into a native value
      before comparison (raises ValueError on malformed tokens).

    Raises
    - InvertedBoundsError when both bounds are present and min > max.
    """
    __introspectable__ = ("min", "min_inclusive", "max", "max_inclusive", "comparator")
    __typename__ = "range-restriction"

    def __init__(self, min, min_inclusive, max, max_inclusive, comparator=compare, *, converter=None):
        if not callable(comparator):
            raise TypeError("range-restriction 'comparator' must be callable")
        if converter is not None and not callable(converter):
            raise TypeError("range-restriction 'converter' must be callable")
        if min is not None and max is not None and comparator(min, max) > 0:
            raise InvertedBoundsError(f"minimum {min!r} is greater than maximum {max!r}")
        self._min = min
        self._min_inclusive = bool(min_inclusive)
        self._max = max
        self._max_inclusive = bool(max_inclusive)
        self._comparator = comparator
        self._converter = converter

    def convert(self, value, /):
        if self._converter is not None and isinstance(value, str):
            return self._converter(value)
        return value

    def evaluate(self, value, /):
        """
        place value relative to the bounds.

        an absent bound always passes its side; with no bounds at all every
        value is within range.
        """
        value = self.convert(value)
        if self._min is not None:
            order = self._comparator(value, self._min)
            if order < 0 or (order == 0 and not self._min_inclusive):
                return RangeOutcome.BELOW_MINIMUM
        if self._max is not None:
            order = self._comparator(value, self._max)
            if order > 0 or (order == 0 and not self._max_inclusive):
                return RangeOutcome.ABOVE_MAXIMUM
        return RangeOutcome.WITHIN_RANGE

    def validate(self, value, /):
        # absence is reported by RequiredRestriction
        if value is None or value is Unset:
            return None
        try:
            outcome = self.evaluate(value)
        except (ValueError, TypeError) as error:
            return Violation(FaultCode.MALFORMED_VALUE, self, value, str(error))

        match outcome:
            case RangeOutcome.BELOW_MINIMUM:
                kind = "minimum" if self._min_inclusive else "exclusive minimum"
                return Violation(
                    FaultCode.BELOW_MINIMUM, self, value,
                    f"value {value!r} is below the {kind} of {self._min!r}",
                    self._min, self._min_inclusive,
                )
            case RangeOutcome.ABOVE_MAXIMUM:
                kind = "maximum" if self._max_inclusive else "exclusive maximum"
                return Violation(
                    FaultCode.ABOVE_MAXIMUM, self, value,
                    f"value {value!r} is above the {kind} of {self._max!r}",
                    self._max, self._max_inclusive,
                )
        return None


@frozen
class RequiredRestriction(Restriction):
    """
    A value must be provided: None, Unset, and empty strings or collections
    are reported as missing. Zero and False are legitimate values.
    """
    __typename__ = "required-restriction"

    def __init__(self):
        pass

    def validate(self, value, /):
        if value is None or value is Unset:
            missing = True
        else:
            try:
                missing = len(value) == 0
            except TypeError:
                missing = False
        if missing:
            return Violation(FaultCode.MISSING_VALUE, self, value, "a value is required")
        return None


@frozen
class AllowedValuesRestriction(Restriction):
    """
    A value must be one of the declared values.

    Parameters
    - values: non-empty iterable of allowed values (declaration order is kept
      for messages).
    - ignore_case: compare string values case-insensitively.
    """
    __introspectable__ = ("values", "ignore_case")
    __typename__ = "allowed-values-restriction"

    def __init__(self, values, *, ignore_case=False):
        values = tuple(dict.fromkeys(values))
        if not values:
            raise ValueError("allowed-values-restriction 'values' cannot be empty")
        self._values = values
        self._ignore_case = bool(ignore_case)

    def _fold(self, value, /):
        return value.casefold() if self._ignore_case and isinstance(value, str) else value

    def validate(self, value, /):
        if self._fold(value) in map(self._fold, self._values):
            return None
        return Violation(
            FaultCode.DISALLOWED_VALUE, self, value,
            f"value {value!r} is not one of {', '.join(map(repr, self._values))}",
            self._values,
        )


def validate(restriction, value, /):
    """
    evaluate value against a single restriction.

    returns
    - RangeOutcome for RangeRestriction (string tokens are converted first
      when the range carries a converter).
    - Violation | None for every other restriction.
    """
    if isinstance(restriction, RangeRestriction):
        return restriction.evaluate(value)
    if not callable(getattr(restriction, "validate", None)):
        raise TypeError("validate() argument must be a restriction")
    return restriction.validate(value)


def check(restrictions, value, /):
    """
    run every restriction and return the violations as a tuple (empty on pass).
    """
    violations = tuple(
        violation for restriction in restrictions if (violation := restriction.validate(value)) is not None
    )
    if violations:
        logger.debug("value %r failed %d restriction(s)", value, len(violations))
    return violations


__all__ = (
    "RangeOutcome",
    "Violation",
    "Restriction",
    "RangeRestriction",
    "RequiredRestriction",
    "AllowedValuesRestriction",
    "validate",
    "check",
)
