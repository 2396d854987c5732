"""
Compiles usage text into pattern trees.

Each usage line is one alternative way of invoking the program:

    Usage:
        naval_fate ship new <name>...
        naval_fate ship <name> move <x> <y> [--speed=<kn>]
        naval_fate -h | --help

The first word of each line is the program name; the rest
is the pattern.  Patterns are made of terms separated by
whitespace, combined with these operators, tightest first:

    a...        a, zero or more times
    a b         a, then b
    a | b       either a or b

Terms are options ("--long", "-abc", "[options]"),
positional arguments ("FILE", "<file>"), commands ("ship"),
and groups ("[ optional ]", "( required )").
"""

# please leave this copyright notice in binary distributions.
license = """
recital/grammar.py
part of the Recital software package
Copyright 2026 by the Recital authors
All rights reserved.

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included
in all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

import collections
import concurrent.futures
import re

import big.all as big

from .errors import (
    ConfigurationError,
    UnknownLongOptionInUsage,
    UnknownShortOptionInUsage,
    UsageGrammarError,
    )
from .pattern import (
    kind,
    eps,
    Alternation,
    AnyOption,
    Argument,
    Command,
    LongOption,
    Optional,
    Repeat,
    Required,
    ShortOptions,
    sequence,
    )
from .registry import sections


Token = collections.namedtuple("Token", "type text column")

_token_re = re.compile(r"""
      (?P<space>     \s+ )
    | (?P<options>   \[options\] )
    | (?P<open>      [\[(] )
    | (?P<close>     [\])] )
    | (?P<pipe>      \| )
    | (?P<ellipsis>  \.\.\. )
    | (?P<long>      --[A-Za-z0-9][A-Za-z0-9_-]*(?:=(?:<[^>]+>|[A-Za-z0-9_-]+))? )
    | (?P<short>     -[A-Za-z0-9]+(?:<[^>]+>)? )
    | (?P<angle>     <[^>]+> )
    | (?P<word>      [A-Za-z0-9_][A-Za-z0-9_-]* )
    """, re.VERBOSE)

_upper_re = re.compile(r"[A-Z0-9][A-Z0-9_-]*")

# tokens that begin a term, and tokens that end one.
# a term can't begin right where the last one ended;
# there has to be whitespace in between.
term_starts = {"options", "open", "long", "short", "angle", "word"}
term_ends = {"options", "close", "ellipsis", "long", "short", "angle", "word"}


def is_positional(word):
    return bool(_upper_re.fullmatch(word))


class UsageCompiler:
    """
    Compiles one usage line (program name already removed)
    into a pattern tree.

    offset is where pattern starts in the original line,
    and text is the original line; both are only used
    to make error messages point at the right spot.
    """

    def __init__(self, registry, pattern, *, line_number=1, offset=0, text=None):
        self.registry = registry
        self.pattern = pattern
        self.line_number = line_number
        self.offset = offset
        self.text = pattern if text is None else text
        self.tokens = self.tokenize()
        self.i = 0

    def error(self, message, column=None):
        if column is None:
            token = self.peek()
            column = token.column if token else len(self.pattern) + 1
        return UsageGrammarError(message, line_number=self.line_number, column=self.offset + column, text=self.text)

    def unknown_option(self, cls, option, column):
        return cls(option, line_number=self.line_number, column=self.offset + column, text=self.text)

    def tokenize(self):
        tokens = []
        pattern = self.pattern
        position = 0
        previous = None
        while position < len(pattern):
            match = _token_re.match(pattern, position)
            if not match:
                raise self.error(f"unexpected character {pattern[position]!r}", position + 1)
            type = match.lastgroup
            if type == "space":
                previous = None
            else:
                if (type in term_starts) and (previous in term_ends):
                    raise self.error(f"expected whitespace before {match.group()!r}", position + 1)
                tokens.append(Token(type, match.group(), position + 1))
                previous = type
            position = match.end()
        return tokens

    def peek(self):
        if self.i < len(self.tokens):
            return self.tokens[self.i]
        return None

    def next(self):
        token = self.peek()
        self.i += 1
        return token

    def compile(self):
        if not self.tokens:
            return eps
        node = self.expression()
        token = self.peek()
        if token:
            raise self.error(f"unexpected {token.text!r}")
        return node

    def expression(self):
        node = self.sequence()
        while True:
            token = self.peek()
            if not (token and token.type == "pipe"):
                return node
            self.next()
            node = Alternation(node, self.sequence())

    def sequence(self):
        items = []
        # the last term we compiled, even if it compiled to eps.
        previous = None
        # the option (if any) whose operand can still
        # be named by a positional right after it
        pending = None

        while True:
            token = self.peek()
            if not token:
                break

            if token.type == "ellipsis":
                self.next()
                if not items:
                    raise self.error("'...' must follow something", token.column)
                items[-1] = previous = Repeat(items[-1])
                pending = None
                continue

            if token.type not in term_starts:
                break
            self.next()

            if token.type == "options":
                term = AnyOption(self.registry)
                pending = None

            elif token.type == "long":
                descriptor, inline = self.long_option(token)
                term = LongOption(descriptor)
                pending = descriptor if (descriptor.operand and not inline) else None

            elif token.type == "short":
                descriptors, inline = self.short_options(token)
                term = ShortOptions(descriptors)
                if previous and (previous.kind == kind.short_options):
                    # two clusters in a row are the same slot.
                    term = items[-1] = previous.merge(term)
                    previous = term
                    descriptor = term.descriptor
                    pending = descriptor if (descriptor.operand and not inline) else None
                    continue
                descriptor = term.descriptor
                pending = descriptor if (descriptor.operand and not inline) else None

            elif token.type == "open":
                term = self.group(token)
                pending = None

            elif (token.type == "angle") or is_positional(token.text):
                if pending:
                    # it's the documented name of the option's operand.
                    previous = eps
                    pending = None
                    continue
                term = Argument(token.text)

            else:
                term = Command(token.text)
                pending = None

            items.append(term)
            previous = term

        if not (items or previous):
            raise self.error("expected a term")
        return sequence(items)

    def group(self, token):
        close = "]" if token.text == "[" else ")"
        node = self.expression()
        end = self.next()
        if not (end and end.text == close):
            if end:
                self.i -= 1
            raise self.error(f"expected {close!r} to match {token.text!r} in column {self.offset + token.column}")
        if close == "]":
            return Optional(node)
        return Required(node)

    def long_option(self, token):
        name, equals, inline = token.text[2:].partition("=")
        descriptor = self.registry.find_long(name, prefix=False)
        if not descriptor:
            raise self.unknown_option(UnknownLongOptionInUsage, name, token.column)
        if equals and not descriptor.operand:
            raise self.error(f"--{name} doesn't take an argument", token.column)
        return descriptor, inline

    def short_options(self, token):
        letters = token.text[1:]
        descriptors = []
        inline = ""
        for i, c in enumerate(letters):
            descriptor = self.registry.find_short(c)
            if not descriptor:
                raise self.unknown_option(UnknownShortOptionInUsage, c, token.column + 1 + i)
            descriptors.append(descriptor)
            if descriptor.operand:
                # the rest is the operand's name, not more options.
                inline = letters[i + 1:]
                break
        return descriptors, inline


def compile_line(pattern, registry, *, line_number=1, offset=0, text=None):
    "Compiles one usage line, program name already removed."
    compiler = UsageCompiler(registry, pattern, line_number=line_number, offset=offset, text=text)
    return compiler.compile()


_program_re = re.compile(r"\s*\S+")

def split_usage(usage):
    """
    Yields (line_number, offset, pattern, line) for each
    non-empty line of usage.  pattern is the line with the
    program name removed; offset is where pattern starts.
    """
    for info, line in big.lines_rstrip(big.lines(usage)):
        if not line.strip():
            continue
        offset = _program_re.match(line).end()
        yield info.line_number, offset, line[offset:], line


def compile_usage(usage, registry, *, max_workers=None):
    """
    Compiles every line of usage, returning a tuple of
    pattern trees in line order.

    Lines are independent, so they're compiled concurrently.
    If any line fails, its UsageGrammarError is raised.
    """
    lines = list(split_usage(usage))
    if not lines:
        return ()

    def compile_one(t):
        line_number, offset, pattern, line = t
        return compile_line(pattern, registry, line_number=line_number, offset=offset, text=line)

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        return tuple(executor.map(compile_one, lines))


def usage_section(doc):
    """
    Returns the body of the one "Usage:" section in doc,
    with the "Usage:" heading removed.
    """
    found = list(sections("usage:", doc))
    if not found:
        raise ConfigurationError('"usage:" (case-insensitive) not found.')
    if len(found) > 1:
        raise ConfigurationError('More than one "usage:" (case-insensitive).')
    _, _, usage = found[0].partition(":")
    return usage
