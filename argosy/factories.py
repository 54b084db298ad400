"""
Argosy restriction factory: from declarative constraint specifications to
restriction objects.

Overview
- RestrictionKind: the built-in constraint kinds (seven range domains plus
  allowed-values and required).
- RestrictionSpec: the tagged, positional specification a metadata builder
  hands over (kind, textual bounds, inclusiveness flags, locale, values).
- RestrictionFactory: dispatches a spec to a concrete restriction.
  • built-in kinds are handled by a closed match statement;
  • custom kinds are served by constructors registered with register();
  • anything else reaches create_unknown(), which returns None (not handled)
    and can be overridden by derived factories.

Configuration errors
- Every fault raised here is a ConfigurationError (malformed literal,
  literal out of the domain, malformed locale, inverted bounds). They happen
  while metadata is built and never during a later validation.

Quick example
    >>> spec = RestrictionSpec(RestrictionKind.INT32_RANGE, "1", "10")
    >>> restriction = create(spec)
    >>> restriction.evaluate(11)
    <RangeOutcome.ABOVE_MAXIMUM: 'above-maximum'>
"""
import logging
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple, Any

from . import collation
from .faults import MalformedBoundError, UnsupportedRestrictionError
from .restrictions import RangeRestriction, AllowedValuesRestriction, RequiredRestriction

logger = logging.getLogger(__name__)


class RestrictionKind(Enum):
    INT64_RANGE = "int64-range"
    INT32_RANGE = "int32-range"
    INT16_RANGE = "int16-range"
    INT8_RANGE = "int8-range"
    DOUBLE_RANGE = "double-range"
    FLOAT_RANGE = "float-range"
    LEXICAL_RANGE = "lexical-range"
    ALLOWED_VALUES = "allowed-values"
    REQUIRED = "required"


class RestrictionSpec(NamedTuple):
    """
    declarative constraint specification.

    fields (read positionally by the factory)
    - kind: RestrictionKind, or any hashable tag for custom kinds.
    - min / max: textual bounds. None means "not declared": integer kinds
      fall back to the width's limits, float kinds are unbounded. For the
      lexical kind an empty string is also unbounded.
    - min_inclusive / max_inclusive: kept verbatim on the restriction.
    - locale: BCP-47 tag of the lexical collation (None → "root").
    - values: allowed values for ALLOWED_VALUES.
    - ignore_case: case-insensitive matching for ALLOWED_VALUES.
    """
    kind: Any
    min: str | None = None
    max: str | None = None
    min_inclusive: bool = True
    max_inclusive: bool = True
    locale: str | None = None
    values: tuple = ()
    ignore_case: bool = False


_DOMAINS = MappingProxyType({
    RestrictionKind.INT64_RANGE: collation.INT64,
    RestrictionKind.INT32_RANGE: collation.INT32,
    RestrictionKind.INT16_RANGE: collation.INT16,
    RestrictionKind.INT8_RANGE: collation.INT8,
    RestrictionKind.DOUBLE_RANGE: collation.FLOAT64,
    RestrictionKind.FLOAT_RANGE: collation.FLOAT32,
})


def _bound(domain, literal, default, side, /):
    if literal is None:
        return default
    try:
        return domain.parse(literal)
    except ValueError as error:
        raise MalformedBoundError(f"{side} bound of {domain.name} range is malformed: {error}") from None


class RestrictionFactory:
    """
    Creates restrictions from RestrictionSpec values.

    Extension
    - register(kind, constructor): constructor(spec) -> restriction | None.
      Registered kinds are consulted after the built-ins, so a built-in kind
      cannot be shadowed.
    - create_unknown(spec): last resort for unrecognized kinds; returns None.
      Derived factories override it to add kinds without touching create().
    """

    def __init__(self, constructors=()):
        self._constructors = dict(constructors)

    def register(self, kind, constructor, /):
        if isinstance(kind, RestrictionKind):
            raise ValueError(f"built-in kind {kind.value!r} cannot be re-registered")
        if not callable(constructor):
            raise TypeError("restriction constructor must be callable")
        self._constructors[kind] = constructor
        return constructor

    def unregister(self, kind, /):
        del self._constructors[kind]

    @property
    def kinds(self):
        return (*RestrictionKind, *self._constructors)

    def create(self, spec, /):
        """
        build the restriction described by spec, or None when the kind is not
        handled by this factory.
        """
        if not isinstance(spec, RestrictionSpec):
            raise TypeError("create() argument must be a restriction spec")

        match spec.kind:
            case (
                RestrictionKind.INT64_RANGE | RestrictionKind.INT32_RANGE |
                RestrictionKind.INT16_RANGE | RestrictionKind.INT8_RANGE |
                RestrictionKind.DOUBLE_RANGE | RestrictionKind.FLOAT_RANGE
            ):
                restriction = self.create_numeric_range(spec)
            case RestrictionKind.LEXICAL_RANGE:
                restriction = self.create_lexical_range(spec)
            case RestrictionKind.ALLOWED_VALUES:
                restriction = AllowedValuesRestriction(spec.values, ignore_case=spec.ignore_case)
            case RestrictionKind.REQUIRED:
                restriction = RequiredRestriction()
            case kind if kind in self._constructors:
                logger.debug("dispatching custom restriction kind %r", kind)
                restriction = self._constructors[kind](spec)
            case _:
                restriction = self.create_unknown(spec)

        logger.debug("restriction spec %r produced %r", spec, restriction)
        return restriction

    def require(self, spec, /):
        """
        like create(), but an unhandled kind is a configuration error.
        """
        if (restriction := self.create(spec)) is None:
            kind = spec.kind.value if isinstance(spec.kind, Enum) else spec.kind
            raise UnsupportedRestrictionError(f"restriction kind {kind!r} is not supported")
        return restriction

    def create_numeric_range(self, spec, /):
        domain = _DOMAINS[spec.kind]
        minimum, maximum = domain.limits
        return RangeRestriction(
            _bound(domain, spec.min, minimum, "lower"),
            spec.min_inclusive,
            _bound(domain, spec.max, maximum, "upper"),
            spec.max_inclusive,
            domain.compare,
            converter=domain.parse,
        )

    def create_lexical_range(self, spec, /):
        domain = collation.lexical(spec.locale)
        return RangeRestriction(
            _bound(domain, spec.min or None, None, "lower"),
            spec.min_inclusive,
            _bound(domain, spec.max or None, None, "upper"),
            spec.max_inclusive,
            domain.compare,
            converter=domain.parse,
        )

    def create_unknown(self, spec, /):
        return None


factory = RestrictionFactory()
"""process-wide default factory backing create()/register()."""


def create(spec, /):
    return factory.create(spec)


def register(kind, constructor=None, /):
    """
    register a custom kind on the default factory; usable as a decorator.
    """
    if constructor is None:
        return lambda constructor: factory.register(kind, constructor)
    return factory.register(kind, constructor)


__all__ = (
    "RestrictionKind",
    "RestrictionSpec",
    "RestrictionFactory",
    "factory",
    "create",
    "register",
)
