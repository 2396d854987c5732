"The compiled form of a usage line: a tree of pattern nodes."

# please leave this copyright notice in binary distributions.
license = """
recital/pattern.py
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
import enum


##
## Pattern nodes are a closed set.  Every node has a "kind",
## and the code that walks the tree (recital/matcher.py)
## dispatches on it:
##
##     if node.kind == kind.sequence:
##         ...
##
## Nodes are immutable once compiled.  Anything that changes
## while matching a command-line lives in a separate State
## object, so one compiled tree can serve any number of matches.
##

class kind(enum.Enum):
    eps = 0
    argument = 1
    command = 2
    short_options = 3
    long_option = 4
    any_option = 5
    optional = 6
    required = 7
    sequence = 8
    alternation = 9
    repeat = 10


class PatternNode:
    __slots__ = ['kind']

    def _key(self):
        return tuple(getattr(self, attr) for attr in self.__slots__)

    def __eq__(self, other):
        if not isinstance(other, PatternNode):
            return NotImplemented
        return (self.kind == other.kind) and (self._key() == other._key())

    def __hash__(self):
        return hash((self.kind, self._key()))

    @property
    def children(self):
        return ()


class Eps(PatternNode):
    """
    eps

    Matches nothing.  The identity element of sequencing;
    a sequence never contains one.
    """

    __slots__ = []

    def __init__(self):
        self.kind = kind.eps

    def __repr__(self):
        return "<eps>"

eps = Eps()


class Argument(PatternNode):
    """
    argument <name>

    A positional argument, "FILE" or "<path>".
    Binds the token it matches to name.
    """

    __slots__ = ['name']

    def __init__(self, name):
        self.kind = kind.argument
        self.name = name

    def __repr__(self):
        return f"<argument {self.name}>"


class Command(PatternNode):
    """
    command <name>

    A literal word.  Matches only a token spelled exactly name.
    """

    __slots__ = ['name']

    def __init__(self, name):
        self.kind = kind.command
        self.name = name

    def __repr__(self):
        return f"<command {self.name}>"


class ShortOptions(PatternNode):
    """
    short_options <descriptors>

    One or more short options.  They may appear glued
    together on the command-line ("-abc") or apart
    ("-a -b -c").
    """

    __slots__ = ['descriptors']

    def __init__(self, descriptors):
        self.kind = kind.short_options
        self.descriptors = tuple(descriptors)

    def __repr__(self):
        letters = "".join(d.short for d in self.descriptors)
        return f"<short_options -{letters}>"

    def merge(self, other):
        return ShortOptions(self.descriptors + other.descriptors)

    @property
    def descriptor(self):
        "The last option; the only one whose operand can be spelled separately."
        return self.descriptors[-1]


class LongOption(PatternNode):
    """
    long_option <descriptor>
    """

    __slots__ = ['descriptor']

    def __init__(self, descriptor):
        self.kind = kind.long_option
        self.descriptor = descriptor

    def __repr__(self):
        return f"<long_option --{self.descriptor.long}>"


class AnyOption(PatternNode):
    """
    any_option <registry>

    The "[options]" shortcut.  Matches any option in registry
    that isn't otherwise mentioned in the same usage line.
    """

    __slots__ = ['registry']

    def __init__(self, registry):
        self.kind = kind.any_option
        self.registry = registry

    def _key(self):
        return (id(self.registry),)

    def __repr__(self):
        return "<any_option>"


class Optional(PatternNode):
    """
    optional <child>

    "[ ... ]".  child may match once, or not at all.
    """

    __slots__ = ['child']

    def __init__(self, child):
        self.kind = kind.optional
        self.child = child

    def __repr__(self):
        return f"<optional {self.child!r}>"

    @property
    def children(self):
        return (self.child,)


class Required(PatternNode):
    """
    required <child>

    "( ... )".  Groups child; it must match.
    """

    __slots__ = ['child']

    def __init__(self, child):
        self.kind = kind.required
        self.child = child

    def __repr__(self):
        return f"<required {self.child!r}>"

    @property
    def children(self):
        return (self.child,)


class Sequence(PatternNode):
    """
    sequence <children>

    Whitespace-separated terms.  Positional arguments must
    appear in order; options may appear anywhere.
    """

    __slots__ = ['items']

    def __init__(self, items):
        self.kind = kind.sequence
        self.items = tuple(items)
        assert len(self.items) > 1

    def __repr__(self):
        return f"<sequence {' '.join(repr(item) for item in self.items)}>"

    @property
    def children(self):
        return self.items


class Alternation(PatternNode):
    """
    alternation <left> <right>

    "left | right".  Once a branch accepts something,
    the alternation is committed to that branch.
    """

    __slots__ = ['left', 'right']

    def __init__(self, left, right):
        self.kind = kind.alternation
        self.left = left
        self.right = right

    def __repr__(self):
        return f"<alternation {self.left!r} | {self.right!r}>"

    @property
    def children(self):
        return (self.left, self.right)


class Repeat(PatternNode):
    """
    repeat <child>

    "child...".  child matches zero or more times.
    """

    __slots__ = ['child']

    def __init__(self, child):
        self.kind = kind.repeat
        self.child = child

    def __repr__(self):
        return f"<repeat {self.child!r}>"

    @property
    def children(self):
        return (self.child,)


def sequence(items):
    """
    Folds a list of terms into one node.
    Drops eps terms; zero terms left is eps,
    one is that term, more is a Sequence.
    """
    items = [item for item in items if item.kind != kind.eps]
    if not items:
        return eps
    if len(items) == 1:
        return items[0]
    return Sequence(items)


def leaves(node, repeated=False):
    """
    Yields (leaf, repeated) for every leaf node in the tree
    rooted at node.  repeated is true if the leaf is inside
    a Repeat.
    """
    if node.kind == kind.repeat:
        repeated = True
    children = node.children
    if not children:
        yield node, repeated
        return
    for child in children:
        yield from leaves(child, repeated)


def named_options(node):
    "The set of option descriptors mentioned explicitly in the tree."
    named = set()
    for leaf, _ in leaves(node):
        if leaf.kind == kind.short_options:
            named.update(leaf.descriptors)
        elif leaf.kind == kind.long_option:
            named.add(leaf.descriptor)
    return named


def occurrences(node):
    """
    Returns a Counter: how many times each name can be
    bound by one path through the tree rooted at node.
    The two sides of an alternation are different paths,
    so they take the larger count; everything else adds up.
    """
    k = node.kind
    if k in (kind.argument, kind.command):
        return collections.Counter((node.name,))
    if k == kind.short_options:
        return collections.Counter(d.name for d in node.descriptors)
    if k == kind.long_option:
        return collections.Counter((node.descriptor.name,))
    if k == kind.alternation:
        return occurrences(node.left) | occurrences(node.right)
    counter = collections.Counter()
    for child in node.children:
        counter += occurrences(child)
    return counter


def repeated_names(node):
    """
    The names a single path through the tree can bind
    more than once: "prog FILE FILE", "prog -vv".
    These collect every value, like names inside a Repeat.
    """
    return frozenset(name for name, count in occurrences(node).items() if count > 1)
