#!/usr/bin/env python3


# part of the Recital software package
# Copyright 2026 by the Recital authors
# All rights reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included
# in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
# IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
# DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
# TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
# OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.


def preload_local_recital():
    """
    Pre-load the local "recital" module, to preclude finding
    an already-installed one on the path.
    """
    from pathlib import Path
    import sys
    recital_dir = Path(__file__).resolve().parent
    while True:
        recital_init = recital_dir / "recital" / "__init__.py"
        if recital_init.is_file():
            break
        recital_dir = recital_dir.parent
    sys.path.insert(1, str(recital_dir))
    import recital
    return recital_dir

recital_dir = preload_local_recital()

import recital
from recital.pattern import (
    eps,
    Alternation,
    AnyOption,
    Argument,
    Command,
    LongOption,
    Optional,
    Repeat,
    Required,
    Sequence,
    ShortOptions,
    )
import unittest


def make_registry():
    registry = recital.OptionRegistry()
    registry.add("v", "verbose")
    registry.add("x")
    registry.add("f", "file", operand=True)
    registry.add(long="out", operand=True)
    return registry


class TestCompileLine(unittest.TestCase):

    def setUp(self):
        self.registry = make_registry()
        self.verbose = self.registry.find_short("v")
        self.x = self.registry.find_short("x")
        self.f = self.registry.find_short("f")
        self.out = self.registry.find_long("out")

    def compile(self, pattern):
        return recital.compile_line(pattern, self.registry)

    def assert_compiles(self, pattern, expected):
        self.assertEqual(self.compile(pattern), expected)

    def assert_grammar_error(self, pattern, column=None, also=None):
        with self.assertRaises(recital.UsageGrammarError) as cm:
            self.compile(pattern)
        e = cm.exception
        if column is not None:
            self.assertEqual(e.column, column)
        if also is not None:
            self.assertIsInstance(e, also)
        return e

    def test_empty(self):
        self.assert_compiles("", eps)
        self.assert_compiles("   ", eps)

    def test_long_option(self):
        self.assert_compiles("--verbose", LongOption(self.verbose))

    def test_command_and_argument(self):
        self.assert_compiles("run NAME", Sequence([Command("run"), Argument("NAME")]))

    def test_angle_argument(self):
        self.assert_compiles("<path>", Argument("<path>"))

    def test_angle_argument_with_spaces(self):
        self.assert_compiles("<input file>", Argument("<input file>"))
        self.assert_compiles("--out=<output file> <x>", Sequence([LongOption(self.out), Argument("<x>")]))

    def test_mixed_case_word_is_a_command(self):
        self.assert_compiles("Run", Command("Run"))

    def test_digits_and_dashes(self):
        self.assert_compiles("FILE-2 go-fast", Sequence([Argument("FILE-2"), Command("go-fast")]))

    def test_operand_name_is_absorbed(self):
        self.assert_compiles("--out FILE", LongOption(self.out))
        self.assert_compiles("-f <path>", ShortOptions([self.f]))

    def test_inline_operand_name(self):
        self.assert_compiles("--out=FILE FILE", Sequence([LongOption(self.out), Argument("FILE")]))
        self.assert_compiles("--out=<file>", LongOption(self.out))

    def test_flag_doesnt_absorb_argument(self):
        self.assert_compiles("--verbose FILE", Sequence([LongOption(self.verbose), Argument("FILE")]))

    def test_short_cluster(self):
        self.assert_compiles("-xv", ShortOptions([self.x, self.verbose]))

    def test_short_cluster_with_trailing_operand(self):
        self.assert_compiles("-xvf", ShortOptions([self.x, self.verbose, self.f]))
        self.assert_compiles("-xf FILE", ShortOptions([self.x, self.f]))

    def test_short_cluster_stops_at_operand(self):
        # "ZZ" would be unknown options; they're f's operand instead.
        self.assert_compiles("-fZZ", ShortOptions([self.f]))
        self.assert_compiles("-fZZ NAME", Sequence([ShortOptions([self.f]), Argument("NAME")]))

    def test_repeated_letters(self):
        self.assert_compiles("-vvv", ShortOptions([self.verbose, self.verbose, self.verbose]))

    def test_adjacent_clusters_merge(self):
        self.assert_compiles("-x -v", ShortOptions([self.x, self.verbose]))
        self.assert_compiles("-x -v -f", ShortOptions([self.x, self.verbose, self.f]))

    def test_operand_name_interrupts_merging(self):
        self.assert_compiles("-f FILE -x", Sequence([ShortOptions([self.f]), ShortOptions([self.x])]))

    def test_options_shortcut(self):
        self.assert_compiles("[options] FILE", Sequence([AnyOption(self.registry), Argument("FILE")]))

    def test_groups(self):
        self.assert_compiles("[-v] FILE", Sequence([Optional(ShortOptions([self.verbose])), Argument("FILE")]))
        self.assert_compiles("(a b)", Required(Sequence([Command("a"), Command("b")])))
        self.assert_compiles("[ a ]", Optional(Command("a")))

    def test_alternation_is_left_associative(self):
        a, b, c = Command("a"), Command("b"), Command("c")
        self.assert_compiles("a | b | c", Alternation(Alternation(a, b), c))

    def test_alternation_binds_looser_than_sequence(self):
        self.assert_compiles("a b | c", Alternation(Sequence([Command("a"), Command("b")]), Command("c")))
        self.assert_compiles("a|b", Alternation(Command("a"), Command("b")))

    def test_repeat_wraps_last_element(self):
        self.assert_compiles("FILE...", Repeat(Argument("FILE")))
        self.assert_compiles("a b...", Sequence([Command("a"), Repeat(Command("b"))]))
        self.assert_compiles("a... b", Sequence([Repeat(Command("a")), Command("b")]))

    def test_repeat_binds_tighter_than_alternation(self):
        self.assert_compiles("a | b...", Alternation(Command("a"), Repeat(Command("b"))))

    def test_repeat_group(self):
        inner = Required(Sequence([Argument("SRC"), Argument("DST")]))
        self.assert_compiles("(SRC DST)...", Repeat(inner))

    def test_repeat_after_operand_name(self):
        self.assert_compiles("--out FILE...", Repeat(LongOption(self.out)))

    def test_repeat_after_merged_cluster(self):
        self.assert_compiles("-x -v...", Repeat(ShortOptions([self.x, self.verbose])))

    def test_unknown_long_option(self):
        e = self.assert_grammar_error("a --trace", column=3, also=recital.UnknownLongOption)
        self.assertEqual(e.option, "trace")

    def test_unknown_short_option(self):
        e = self.assert_grammar_error("a -xz", column=5, also=recital.UnknownShortOption)
        self.assertEqual(e.option, "z")
        self.assertIsInstance(e, recital.UsageError)

    def test_flag_with_operand(self):
        self.assert_grammar_error("--verbose=X", column=1)

    def test_unbalanced_groups(self):
        self.assert_grammar_error("[a b")
        self.assert_grammar_error("(a b]", column=5)
        self.assert_grammar_error("a b)", column=4)

    def test_empty_terms(self):
        self.assert_grammar_error("a |")
        self.assert_grammar_error("[ ]")
        self.assert_grammar_error("...", column=1)

    def test_terms_need_whitespace(self):
        self.assert_grammar_error("FILE<x>", column=5)
        self.assert_grammar_error("[a]b", column=4)

    def test_bad_character(self):
        self.assert_grammar_error("a & b", column=3)


class TestCompileUsage(unittest.TestCase):

    def setUp(self):
        self.registry = make_registry()

    def test_one_tree_per_line(self):
        usage = """
            prog run NAME
            prog stop NAME

            prog --verbose
            """
        lines = recital.compile_usage(usage, self.registry)
        self.assertIsInstance(lines, tuple)
        self.assertEqual(lines, (
            Sequence([Command("run"), Argument("NAME")]),
            Sequence([Command("stop"), Argument("NAME")]),
            LongOption(self.registry.find_long("verbose")),
            ))

    def test_program_name_only(self):
        self.assertEqual(recital.compile_usage("prog", self.registry), (eps,))

    def test_no_lines(self):
        self.assertEqual(recital.compile_usage("\n\n", self.registry), ())

    def test_deterministic(self):
        usage = "prog [options] (run | stop) NAME...\nprog -xvf FILE [--out=X]"
        self.assertEqual(
            recital.compile_usage(usage, self.registry),
            recital.compile_usage(usage, self.registry, max_workers=1),
            )

    def test_error_position(self):
        usage = "prog a\n  prog a -z"
        with self.assertRaises(recital.UsageGrammarError) as cm:
            recital.compile_usage(usage, self.registry)
        e = cm.exception
        self.assertEqual(e.line_number, 2)
        self.assertEqual(e.column, 11)
        self.assertEqual(e.text, "  prog a -z")
        self.assertIn("unknown option -z", str(e))

    def test_error_is_a_configuration_error(self):
        with self.assertRaises(recital.ConfigurationError):
            recital.compile_usage("prog (", self.registry)


class TestUsageSection(unittest.TestCase):

    def test_usage_section(self):
        doc = """Frobnicator.

Usage:
  frob run NAME
  frob stop NAME

Options:
  -v --verbose  Talk more.
"""
        usage = recital.usage_section(doc)
        self.assertEqual(usage.split(), "frob run NAME frob stop NAME".split())

    def test_usage_on_heading_line(self):
        self.assertEqual(recital.usage_section("usage: prog FILE").strip(), "prog FILE")

    def test_missing_usage(self):
        with self.assertRaises(recital.ConfigurationError):
            recital.usage_section("Options:\n  -v  Talk.\n")

    def test_two_usages(self):
        with self.assertRaises(recital.ConfigurationError):
            recital.usage_section("Usage: prog\n\nUsage: prog2\n")


if __name__ == "__main__":
    unittest.main()
