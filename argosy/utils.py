"""
Argosy utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the metadata, restriction and usage layers.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “not provided”, distinct from None (None is a
    legitimate “unbounded”/“absent” value in several places of the model).

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated accessors.

- mirror("attr")
  • Read-only property exposing the private field self._attr as an immutable
    view (tuple/frozenset/mapping proxy) so metadata cannot be mutated through
    its public surface.

- frozen(cls)
  • Class decorator sealing instances after __init__ returns.

- ordinal(number)
  • English ordinal label (1 → "first") used by diagnostics.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are returned as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Return an immutable view of a container value.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType
    - Set                   → frozenset
    - anything else         → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private field "_{name}".

    Containers are returned as immutable views, so callers can iterate and
    index the metadata but never alter it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def frozen(cls, /):
    """
    Seal instances of cls once construction completes.

    Attribute assignment is allowed while __init__ runs (including the __init__
    of subclasses); afterwards any assignment or deletion raises AttributeError.
    """
    initializer = cls.__init__

    @functools.wraps(initializer)
    def __init__(self, *args, **kwargs):
        object.__setattr__(self, "__sealed__", False)
        initializer(self, *args, **kwargs)
        if type(self).__init__ is __init__:
            object.__setattr__(self, "__sealed__", True)

    def __setattr__(self, name, value, /):
        if getattr(self, "__sealed__", False):
            raise AttributeError(f"{type(self).__name__} objects are read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__} objects are read-only")

    cls.__init__ = __init__
    cls.__setattr__ = rename(__setattr__, "__setattr__")
    cls.__delattr__ = rename(__delattr__, "__delattr__")
    return cls


def ordinal(number, /):
    """
    Return the English ordinal word for small positive integers ("first",
    "second", ...), falling back to the numeric suffix form ("21st").
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 1:
        raise ValueError("ordinal() argument must be a positive integer")
    words = (
        "first", "second", "third", "fourth", "fifth",
        "sixth", "seventh", "eighth", "ninth", "tenth",
    )
    if number <= len(words):
        return words[number - 1]
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None carries meaning (for instance an unbounded
range side, or a caller asking for declaration order instead of sorting).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "frozen",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
