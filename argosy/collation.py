"""
Argosy value domains and comparators.

Overview
- ScalarDomain: a typed value domain used by range restrictions. It bundles
  the textual parser, the natural limits of the domain and the comparator that
  orders its values. Seven domains are provided:
  • INT64, INT32, INT16, INT8: signed integers of the given width.
  • FLOAT64, FLOAT32: IEEE-754 binary64/binary32 floating point values.
  • lexical(locale): strings ordered by a locale-aware Collator.

- Collator: linguistic string ordering built from an explicit BCP-47 locale
  tag. There is no ambient locale: the tag is the only input besides the two
  operands, so an ordering is reproducible across processes and threads.

Comparators
- Every comparator is a callable (left, right) -> -1 | 0 | 1. The range engine
  only ever talks to this callable, which is what lets one evaluation routine
  serve every domain.

Collation model
- Level 1 (primary): base letters, case-folded and stripped of accents, with
  language tailorings (for instance Swedish 'å', 'ä', 'ö' sort after 'z').
- Level 2 (secondary): accents (combining marks) per base letter.
- Level 3 (tertiary): case per letter, lower case first unless 'kf-upper'.
- identic: the normalized code points as a final tie-breaker.

Supported tag shapes
    root | und | en | sv-SE | de_DE | en-u-ks-level1 | da-u-kf-upper
"""
import math
import re
import struct
import unicodedata
from typing import NamedTuple, Any
from collections.abc import Callable

from .faults import MalformedLocaleError
from .utils import frozen


def compare(left, right, /):
    """
    natural ordering comparator used by every numeric domain.

    total over floats: NaN equals itself and sorts above every number.
    """
    left_nan, right_nan = left != left, right != right
    if left_nan or right_nan:
        return left_nan - right_nan
    return (left > right) - (left < right)


class ScalarDomain(NamedTuple):
    """
    a typed scalar domain.

    fields
    - name: short label used in messages ("int32", "float", "lexical"...).
    - parse: converts a textual literal into the native value; raises
      ValueError on malformed or out-of-domain input.
    - limits: (minimum, maximum) native limits, None where unbounded.
    - compare: ordering comparator over native values.
    """
    name: str
    parse: Callable[[str], Any]
    limits: tuple[Any, Any]
    compare: Callable[[Any, Any], int]


_INTEGER = re.compile(r"[+-]?[0-9]+")


def _integer(bits, /):
    minimum, maximum = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def parse(text, /):
        if isinstance(text, int) and not isinstance(text, bool):
            value = text
        elif not isinstance(text, str) or not _INTEGER.fullmatch(text := text.strip()):
            raise ValueError(f"{text!r} is not a valid integer literal")
        else:
            value = int(text, 10)
        if not minimum <= value <= maximum:
            raise ValueError(f"{value} does not fit in a signed {bits}-bit integer")
        return value

    return ScalarDomain(f"int{bits}", parse, (minimum, maximum), compare)


def _single(value, /):
    # round to the nearest binary32 value
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        raise ValueError(f"{value!r} does not fit in a single precision float") from None


def _floating(single, /):
    def parse(text, /):
        if isinstance(text, int | float) and not isinstance(text, bool):
            value = float(text)
        elif isinstance(text, str):
            try:
                value = float(text.strip())
            except ValueError:
                raise ValueError(f"{text!r} is not a valid floating point literal") from None
        else:
            raise ValueError(f"{text!r} is not a valid floating point literal")
        if math.isnan(value):
            raise ValueError("NaN is not an ordered floating point value")
        return _single(value) if single else value

    return ScalarDomain("float" if single else "double", parse, (None, None), compare)


INT64 = _integer(64)
INT32 = _integer(32)
INT16 = _integer(16)
INT8 = _integer(8)
FLOAT64 = _floating(False)
FLOAT32 = _floating(True)


# --- collation ---

_STRENGTHS = {"level1": 1, "level2": 2, "level3": 3, "identic": 4}
_CASE_FIRST = {"upper": True, "lower": False, "false": False}

# letters placed after an anchor letter in a language's alphabet
_TAILORINGS = {
    "sv": ("z", "åäö"),
    "fi": ("z", "åäö"),
    "da": ("z", "æøå"),
    "nb": ("z", "æøå"),
    "nn": ("z", "æøå"),
    "no": ("z", "æøå"),
    "es": ("n", "ñ"),
}

_LANGUAGE = re.compile(r"[a-z]{2,3}|[a-z]{5,8}")
_SUBTAG = re.compile(r"[a-z0-9]{1,8}")


def _primaries(language, /):
    try:
        anchor, letters = _TAILORINGS[language]
    except KeyError:
        return {}
    # '\U0010fffe' sorts after every assigned code point, so the tailored
    # letters land after every word continuing the anchor letter
    return {letter: anchor + "\U0010fffe" + str(index) for index, letter in enumerate(letters)}


@frozen
class Collator:
    """
    Locale-aware string comparator.

    Parameters
    - locale: str | None
      BCP-47 tag; None or "" select the root collation. Underscores are
      accepted as separators ("sv_SE"). Unicode extension keywords 'ks'
      (strength) and 'kf' (case first) are honoured; other keywords and
      private-use subtags are ignored.

    Raises
    - MalformedLocaleError when the tag is not well-formed or an extension
      keyword carries an unsupported value.
    """

    def __init__(self, locale="root"):
        if locale is not None and not isinstance(locale, str):
            raise TypeError("collator 'locale' must be a string")
        self.locale = locale.strip() if locale and locale.strip() else "root"
        self.language, self.strength, self.upper_first = self._parse(self.locale)
        self._tailoring = _primaries(self.language)

    @staticmethod
    def _parse(tag, /):
        subtags = re.split(r"[-_]", tag.lower())
        if not all(map(_SUBTAG.fullmatch, subtags)):
            raise MalformedLocaleError(f"locale tag {tag!r} is not well-formed")

        language = subtags[0]
        if language in ("root", "und"):
            language = "root"
        elif not _LANGUAGE.fullmatch(language):
            raise MalformedLocaleError(f"locale tag {tag!r} does not start with a language subtag")

        strength, upper = 3, False
        try:
            index = subtags.index("u", 1)
        except ValueError:
            return language, strength, upper

        key = None
        for subtag in subtags[index + 1:]:
            if len(subtag) == 1:
                # next singleton ends the unicode extension
                break
            if len(subtag) == 2:
                key = subtag
                continue
            if key == "ks":
                try:
                    strength = _STRENGTHS[subtag]
                except KeyError:
                    raise MalformedLocaleError(f"unsupported collation strength {subtag!r} in {tag!r}") from None
            elif key == "kf":
                try:
                    upper = _CASE_FIRST[subtag]
                except KeyError:
                    raise MalformedLocaleError(f"unsupported case-first value {subtag!r} in {tag!r}") from None
        return language, strength, upper

    def key(self, text, /):
        """
        return the sort key of text at this collator's strength.
        """
        if not isinstance(text, str):
            raise TypeError(f"collator can only order strings, not {type(text).__name__!r}")

        primary = []
        secondary = []
        tertiary = []
        for char in unicodedata.normalize("NFC", text):
            lower = char.lower()
            case = int(char != lower) ^ self.upper_first if char.lower() != char.upper() else 0
            if lower in self._tailoring:
                primary.append(self._tailoring[lower])
                secondary.append("")
                tertiary.append(case)
                continue
            for part in unicodedata.normalize("NFD", char):
                if unicodedata.combining(part) and secondary:
                    secondary[-1] += part
                    continue
                primary.append(part.casefold())
                secondary.append("")
                tertiary.append(case)

        levels = ("".join(primary), tuple(secondary), tuple(tertiary))[:min(self.strength, 3)]
        if self.strength > 3:
            levels += (unicodedata.normalize("NFD", text),)
        return levels

    def compare(self, left, right, /):
        return compare(self.key(left), self.key(right))

    __call__ = compare

    def __eq__(self, other):
        if not isinstance(other, Collator):
            return NotImplemented
        return (self.language, self.strength, self.upper_first) == (other.language, other.strength, other.upper_first)

    def __hash__(self):
        return hash((Collator, self.language, self.strength, self.upper_first))

    def __repr__(self):
        return f"collator(locale={self.locale!r})"


def lexical(locale="root", /):
    """
    build the lexical domain ordered by Collator(locale).

    parse() accepts any string as-is.
    """
    collator = Collator(locale)

    def parse(text, /):
        if not isinstance(text, str):
            raise ValueError(f"{text!r} is not a string")
        return text

    return ScalarDomain("lexical", parse, (None, None), collator)


__all__ = (
    "ScalarDomain",
    "Collator",
    "compare",
    "lexical",
    "INT64",
    "INT32",
    "INT16",
    "INT8",
    "FLOAT64",
    "FLOAT32",
)
