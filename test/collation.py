"""
Collation and scalar domain tests.

Scope
- Validate the integer and floating point parsers of the scalar domains.
- Validate collator ordering levels, tailorings and extension keywords.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from argosy import Collator, MalformedLocaleError, compare, lexical, INT8, INT64, FLOAT32, FLOAT64


class TestScalarDomains(TestCase):
    """Parsers and limits of the numeric domains."""

    def testIntegerLimits(self):
        self.assertEqual(INT8.limits, (-128, 127))
        self.assertEqual(INT64.limits, (-(1 << 63), (1 << 63) - 1))

    def testIntegerParsing(self):
        self.assertEqual(INT8.parse("+5"), 5)
        self.assertEqual(INT8.parse(" -7 "), -7)
        with self.assertRaises(ValueError):
            INT8.parse("1_0")
        with self.assertRaises(ValueError):
            INT8.parse("-129")

    def testSinglePrecisionRounding(self):
        self.assertEqual(FLOAT32.parse("0.5"), 0.5)
        self.assertNotEqual(FLOAT32.parse("0.1"), 0.1)
        self.assertEqual(FLOAT64.parse("0.1"), 0.1)

    def testFloatingDomainsAreUnbounded(self):
        self.assertEqual(FLOAT64.limits, (None, None))
        self.assertEqual(FLOAT32.limits, (None, None))

    def testDomainNames(self):
        self.assertEqual([INT8.name, FLOAT64.name, FLOAT32.name], ["int8", "double", "float"])

    def testNaNSortsAboveEveryNumber(self):
        nan = float("nan")
        self.assertEqual(compare(nan, math.inf), 1)
        self.assertEqual(compare(-math.inf, nan), -1)
        self.assertEqual(compare(nan, nan), 0)
        self.assertEqual(compare(1.5, 2), -1)


class TestCollator(TestCase):
    """Locale-aware ordering."""

    def testRootOrdersLettersBeforeCase(self):
        collator = Collator()
        self.assertLess(collator("a", "B"), 0)
        self.assertLess(collator("apple", "Apple"), 0)

    def testAccentsAreSecondary(self):
        collator = Collator("fr")
        self.assertLess(collator("cote", "côte"), 0)
        self.assertLess(collator("côte", "cotf"), 0)

    def testStrengthLevelOneIgnoresCaseAndAccents(self):
        collator = Collator("en-u-ks-level1")
        self.assertEqual(collator("apple", "APPLE"), 0)
        self.assertEqual(collator("cote", "côte"), 0)

    def testStrengthLevelTwoIgnoresCase(self):
        collator = Collator("en-u-ks-level2")
        self.assertEqual(collator("apple", "Apple"), 0)
        self.assertNotEqual(collator("cote", "côte"), 0)

    def testUpperCaseFirst(self):
        collator = Collator("da-u-kf-upper")
        self.assertLess(collator("Apple", "apple"), 0)

    def testSwedishTailoring(self):
        self.assertLess(Collator("sv")("zebra", "ål"), 0)
        self.assertLess(Collator("root")("ål", "zebra"), 0)

    def testSpanishTailoring(self):
        self.assertLess(Collator("es")("nube", "ñu"), 0)
        self.assertLess(Collator("es")("ñu", "oso"), 0)

    def testUnderscoreSeparatorAndAliases(self):
        self.assertEqual(Collator("sv_SE"), Collator("sv"))
        self.assertEqual(Collator("und"), Collator("root"))
        self.assertEqual(Collator(None), Collator())

    def testMalformedTags(self):
        for tag in ("1", "en-", "x", "en-u-ks-bogus"):
            with self.subTest(tag=tag):
                with self.assertRaises(MalformedLocaleError):
                    Collator(tag)

    def testCollatorIsReadOnly(self):
        with self.assertRaises(AttributeError):
            Collator().strength = 1  # type: ignore[misc]

    def testLexicalDomain(self):
        domain = lexical("en")
        self.assertEqual(domain.name, "lexical")
        self.assertEqual(domain.parse("text"), "text")
        self.assertEqual(domain.compare, Collator("en"))


if __name__ == "__main__":
    unittest.main()
