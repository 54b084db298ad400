"""
Argosy faults (configuration errors, violation codes) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue argosy can
  report. Codes are grouped by domain to keep logs and searches predictable.
- ArgosyException: base type carrying a message plus options; it knows how to
  render itself with rich in a short, lowercased and actionable way.
- ConfigurationError and subclasses: faults raised while metadata or
  restrictions are being built. They never surface from a later validate or
  render call.

Domains
- configuration (21xxx): malformed bounds/locales/examples, inverted ranges,
  unsupported restriction kinds, duplicated names.
- validation (22xxx): codes carried by Violation values. Violations are
  returned, never raised.
- dispatch (23xxx): codes carried by UnknownCommand help outcomes.

Integration
- Hosts may define __codes__ (FaultCode → label), __styles__ (palette
  overrides) and __prog__ (program label) in __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - configuration (211xx)
      • MALFORMED_BOUND, INVERTED_BOUNDS, UNSUPPORTED_RESTRICTION,
        MALFORMED_LOCALE, MALFORMED_EXAMPLES, DUPLICATE_NAME
    - validation (221xx)
      • BELOW_MINIMUM, ABOVE_MAXIMUM, MISSING_VALUE, DISALLOWED_VALUE,
        MALFORMED_VALUE
    - dispatch (231xx)
      • UNKNOWN_COMMAND, UNKNOWN_GROUP_COMMAND
    """
    # --- configuration errors (21xxx) ---
    MALFORMED_BOUND             = 21101
    INVERTED_BOUNDS             = 21102
    UNSUPPORTED_RESTRICTION     = 21103
    MALFORMED_LOCALE            = 21104
    MALFORMED_EXAMPLES          = 21111
    DUPLICATE_NAME              = 21112

    # --- validation violations (22xxx) ---
    BELOW_MINIMUM               = 22101
    ABOVE_MAXIMUM               = 22102
    MISSING_VALUE               = 22111
    DISALLOWED_VALUE            = 22112
    MALFORMED_VALUE             = 22113

    # --- dispatch outcomes (23xxx) ---
    UNKNOWN_COMMAND             = 23101
    UNKNOWN_GROUP_COMMAND       = 23102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. when no mapping is present
        the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def palette(**defaults):
    """
    build a style lookup merging the given defaults with __main__.__styles__.

    unknown keys resolve to "" (no style).
    """
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class ArgosyException(Exception):
    """
    base fault: a message plus read-only options.

    class-level defaults
    - code/title/hint describe the fault family; any of them can be
      overridden per instance through options.

    rendering options
    - colorful (default True): apply the palette.
    - fancy (default False): wrap the body in a panel.
    """
    code = Unset
    title = "error"
    hint = Unset

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)
        # per-instance overrides of the class-level family defaults
        for name in ("code", "title", "hint"):
            if name in options:
                setattr(self, name, options[name])

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = palette(**{
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "argosy"), "prog-name"),
            " — ",
            text(self.code.normalize() if isinstance(self.code, FaultCode) else "", "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(ArgosyException, ValueError):
    """raised while metadata or restrictions are being built."""
    title = "configuration error"


class MalformedBoundError(ConfigurationError):
    code = FaultCode.MALFORMED_BOUND
    title = "malformed bound"
    hint = "range bounds must be valid literals of the declared value domain"


class InvertedBoundsError(ConfigurationError):
    code = FaultCode.INVERTED_BOUNDS
    title = "inverted bounds"
    hint = "the minimum must not be greater than the maximum"


class UnsupportedRestrictionError(ConfigurationError):
    code = FaultCode.UNSUPPORTED_RESTRICTION
    title = "unsupported restriction"
    hint = "register a constructor for this kind on the restriction factory"


class MalformedLocaleError(ConfigurationError):
    code = FaultCode.MALFORMED_LOCALE
    title = "malformed locale"
    hint = "use a BCP-47 language tag such as 'en', 'sv-SE' or 'en-u-ks-level1'"


class MalformedExamplesError(ConfigurationError):
    code = FaultCode.MALFORMED_EXAMPLES
    title = "malformed examples"
    hint = "examples are (caption, text) pairs or caption/example/blank-line triples"


class DuplicateNameError(ConfigurationError):
    code = FaultCode.DUPLICATE_NAME
    title = "duplicate name"
    hint = "names must be unique among siblings and across merged option scopes"


class UnknownCommandError(ArgosyException, LookupError):
    """the help dispatcher could not resolve a name path."""
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"
    hint = "run help without arguments to list the available commands"


__all__ = (
    "FaultCode",
    "ArgosyException",
    "ConfigurationError",
    "MalformedBoundError",
    "InvertedBoundsError",
    "UnsupportedRestrictionError",
    "MalformedLocaleError",
    "MalformedExamplesError",
    "DuplicateNameError",
    "UnknownCommandError",
    "palette",
)
