"Matches a command-line against compiled usage lines."

# please leave this copyright notice in binary distributions.
license = """
recital/matcher.py
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

from big.itertools import PushbackIterator

from .errors import (
    MissingOperand,
    UnexpectedOperand,
    UnexpectedOption,
    UnexpectedPositional,
    UnknownLongOption,
    UnknownShortOption,
    UsageMismatch,
    )
from .grammar import compile_usage
from .pattern import kind, leaves, named_options, repeated_names


class Bindings(dict):
    "The result of a match: canonical name -> value."

    def __repr__(self):
        return "{" + ",\n ".join(f"{k!r}: {v!r}" for k, v in sorted(self.items())) + "}"


def leaf_defaults(root, registry, named, repeated=frozenset()):
    """
    Yields (name, value) for every name the tree rooted
    at root can bind, paired with the value it binds
    when nothing on the command-line matched it.

    repeated is the set of names the line binds more
    than once (see pattern.repeated_names).
    """
    for leaf, in_repeat in leaves(root):
        k = leaf.kind
        if k == kind.argument:
            yield leaf.name, ([] if (in_repeat or leaf.name in repeated) else None)
        elif k == kind.command:
            yield leaf.name, (0 if (in_repeat or leaf.name in repeated) else False)
        elif k == kind.short_options:
            for descriptor in leaf.descriptors:
                yield descriptor.name, descriptor.absent_value(in_repeat or descriptor.name in repeated)
        elif k == kind.long_option:
            descriptor = leaf.descriptor
            yield descriptor.name, descriptor.absent_value(in_repeat or descriptor.name in repeated)
        elif k == kind.any_option:
            for descriptor in registry:
                if descriptor not in named:
                    yield descriptor.name, descriptor.absent_value(in_repeat)


##
## Consumption state.
##
## The pattern tree is immutable; everything that changes
## while we walk a command-line lives in a tree of State
## objects shaped like the pattern tree.  Every match gets
## a fresh State tree, so a compiled UsageProgram can be
## shared between matches (and threads).
##
## The match functions below follow one rule: if they
## return False, they haven't changed anything.  No state,
## no bindings.  That's what lets Sequence, Alternation, and
## Repeat try a child and move on when it declines.
##

class State:
    __slots__ = ['node', 'repeated', 'count', 'seen', 'touched', 'index', 'branch', 'states', 'child']

    def __init__(self, node, repeated=False):
        self.node = node
        self.repeated = repeated
        # argument, command: how many times we matched (0 or 1)
        # repeat: how many iterations we've started
        self.count = 0
        # short_options, long_option, any_option:
        # how many times each descriptor has matched
        self.seen = collections.Counter()
        # optional: has anything inside matched?
        self.touched = False
        # sequence: the child currently consuming positionals
        self.index = 0
        # alternation: 0 (left) or 1 (right), once committed
        self.branch = None
        self.states = ()
        self.child = None

        k = node.kind
        if k in (kind.optional, kind.required):
            self.child = State(node.child, repeated)
        elif k == kind.sequence:
            self.states = [State(item, repeated) for item in node.items]
        elif k == kind.alternation:
            self.states = [State(node.left, repeated), State(node.right, repeated)]
        # repeat creates its child's State on each iteration.

    def __repr__(self):
        return f"<State {self.node!r} count={self.count} index={self.index} branch={self.branch}>"


class OperandSource:
    """
    Supplies the operand for one option on the command-line.

    It's only consulted if some usage line accepts the option,
    and it only consumes from the command-line once; every
    line that accepts the option gets the same operand.

    If the operand was spelled inline ("--out=x", "-ox"),
    it's been pushed back onto the iterator, so either way
    it's the next thing there.
    """

    def __init__(self, option, iterator, inline=False):
        self.option = option
        self.iterator = iterator
        self.inline = inline
        self.pulled = False
        self.value = None

    def __call__(self):
        if not self.pulled:
            if not self.iterator:
                raise MissingOperand(self.option)
            value = next(self.iterator)
            if (not self.inline) and is_option(value):
                raise MissingOperand(self.option)
            self.value = value
            self.pulled = True
        return self.value


def is_option(a):
    # "-" by itself is a positional argument.
    # it conventionally means stdin or stdout.
    return a.startswith("-") and (a != "-")


def bind_option(line, state, descriptor, operands):
    bindings = line.bindings
    name = descriptor.name
    repeated = state.repeated or (name in line.repeated)
    if descriptor.operand:
        value = operands()
        if repeated:
            bindings.setdefault(name, []).append(value)
        else:
            bindings[name] = value
    elif repeated:
        bindings[name] = bindings.get(name, 0) + 1
    else:
        bindings[name] = True
    state.seen[descriptor] += 1


def match_option(line, state, descriptor, operands):
    """
    Offers an option to the tree rooted at state.
    Short and long spellings of the same option are
    interchangeable, so this works on descriptors.
    """
    k = state.node.kind

    if k == kind.short_options:
        # "-vvv" takes -v three times.
        if state.seen[descriptor] < state.node.descriptors.count(descriptor):
            bind_option(line, state, descriptor, operands)
            return True
        return False

    if k == kind.long_option:
        if (descriptor == state.node.descriptor) and not state.seen[descriptor]:
            bind_option(line, state, descriptor, operands)
            return True
        return False

    if k == kind.any_option:
        if (descriptor not in line.named) and not state.seen[descriptor]:
            bind_option(line, state, descriptor, operands)
            return True
        return False

    if k in (kind.eps, kind.argument, kind.command):
        return False

    if k == kind.optional:
        if match_option(line, state.child, descriptor, operands):
            state.touched = True
            return True
        return False

    if k == kind.required:
        return match_option(line, state.child, descriptor, operands)

    if k == kind.sequence:
        # options aren't positional; any child may take one.
        for child in state.states:
            if match_option(line, child, descriptor, operands):
                return True
        return False

    if k == kind.alternation:
        return match_alternation(state, lambda child: match_option(line, child, descriptor, operands))

    if k == kind.repeat:
        return match_repeat(line, state, lambda child: match_option(line, child, descriptor, operands))

    raise RuntimeError(f"unhandled node kind {k}")


def match_positional(line, state, token):
    "Offers a positional argument (or command) to the tree rooted at state."
    k = state.node.kind
    bindings = line.bindings

    if k == kind.argument:
        if state.count:
            return False
        name = state.node.name
        if state.repeated or (name in line.repeated):
            bindings.setdefault(name, []).append(token)
        else:
            bindings[name] = token
        state.count = 1
        return True

    if k == kind.command:
        if state.count or (token != state.node.name):
            return False
        name = state.node.name
        if state.repeated or (name in line.repeated):
            bindings[name] = bindings.get(name, 0) + 1
        else:
            bindings[name] = True
        state.count = 1
        return True

    if k in (kind.eps, kind.short_options, kind.long_option, kind.any_option):
        return False

    if k == kind.optional:
        if match_positional(line, state.child, token):
            state.touched = True
            return True
        return False

    if k == kind.required:
        return match_positional(line, state.child, token)

    if k == kind.sequence:
        # positionals go in order.  we only move past
        # a child once it's satisfied.
        states = state.states
        i = state.index
        while i < len(states):
            child = states[i]
            if match_positional(line, child, token):
                state.index = i
                return True
            if not default_fill(line, child):
                return False
            i += 1
        return False

    if k == kind.alternation:
        return match_alternation(state, lambda child: match_positional(line, child, token))

    if k == kind.repeat:
        return match_repeat(line, state, lambda child: match_positional(line, child, token))

    raise RuntimeError(f"unhandled node kind {k}")


def match_alternation(state, attempt):
    if state.branch is not None:
        return attempt(state.states[state.branch])
    for branch, child in enumerate(state.states):
        if attempt(child):
            state.branch = branch
            return True
    return False


def match_repeat(line, state, attempt):
    child = state.child
    if child is not None:
        if attempt(child):
            return True
        if not default_fill(line, child):
            return False
    # start another iteration.
    child = State(state.node.child, True)
    if attempt(child):
        state.child = child
        state.count += 1
        return True
    return False


def default_fill(line, state):
    """
    Returns true if the tree rooted at state is satisfied
    with what it's matched so far, letting everything it
    hasn't matched take its default.

    Absent options are always fine.  An optional group
    is fine if nothing in it matched; once something did,
    the rest of it has to be satisfied too.
    """
    k = state.node.kind

    if k in (kind.eps, kind.short_options, kind.long_option, kind.any_option):
        return True

    if k in (kind.argument, kind.command):
        return bool(state.count)

    if k == kind.optional:
        if not state.touched:
            return True
        return default_fill(line, state.child)

    if k == kind.required:
        return default_fill(line, state.child)

    if k == kind.sequence:
        return all(default_fill(line, child) for child in state.states)

    if k == kind.alternation:
        if state.branch is not None:
            return default_fill(line, state.states[state.branch])
        return any(default_fill(line, child) for child in state.states)

    if k == kind.repeat:
        if state.child is None:
            return True
        return default_fill(line, state.child)

    raise RuntimeError(f"unhandled node kind {k}")


class Line:
    """
    One usage line's progress through one command-line.
    """

    def __init__(self, program, index):
        self.program = program
        self.index = index
        self.root = program.lines[index]
        self.named = program.named[index]
        self.repeated = program.repeated[index]
        self.state = State(self.root)
        self.bindings = Bindings()

    def __repr__(self):
        return f"<Line {self.index + 1} {self.root!r}>"

    def match_short(self, letter, operands):
        descriptor = self.program.registry.find_short(letter)
        if not descriptor:
            raise UnknownShortOption(letter)
        return match_option(self, self.state, descriptor, operands)

    def match_long(self, name, operands):
        descriptor = self.program.registry.find_long(name)
        if not descriptor:
            raise UnknownLongOption(name)
        return match_option(self, self.state, descriptor, operands)

    def match_positional(self, token):
        return match_positional(self, self.state, token)

    def default_fill(self):
        """
        If this line is satisfied, fills in defaults for
        everything it didn't bind and returns True.
        Otherwise returns False.
        """
        if not default_fill(self, self.state):
            return False
        for name, value in leaf_defaults(self.root, self.program.registry, self.named, self.repeated):
            self.bindings.setdefault(name, value)
        return True


class Matcher:
    """
    Walks one command-line against every usage line at once.

    Each usage line is an alternative.  Every token is offered
    to every line still in the running; a line that can't
    account for a token drops out.  An option needs at least
    one taker; so does a positional argument.  When the
    command-line runs out, the first line that's satisfied
    wins.
    """

    def __init__(self, program, argv, *, log=None):
        self.program = program
        self.argv = list(argv)
        self.log = log
        self.lines = [Line(program, i) for i in range(len(program.lines))]

    def __repr__(self):
        return f"<Matcher argv={self.argv!r} lines={len(self.lines)}>"

    def eliminate(self, accepted, token):
        log = self.log
        if log is not None:
            for line in self.lines:
                if line not in accepted:
                    log(f"line {line.index + 1} can't take {token!r}")
        self.lines = accepted

    def match_option(self, option, method, operands):
        accepted = [line for line in self.lines if method(line, option, operands)]
        if not accepted:
            raise UnexpectedOption(self.program.usage, option)
        self.eliminate(accepted, option)

    def match_positional(self, token):
        accepted = [line for line in self.lines if line.match_positional(token)]
        if not accepted:
            raise UnexpectedPositional(self.program.usage, token)
        self.eliminate(accepted, token)

    def __call__(self):
        log = self.log
        if log is not None:
            log.enter(f"match {self.argv!r}")
        try:
            self.consume()
            return self.finish()
        finally:
            if log is not None:
                log.exit()

    def consume(self):
        "Offers every token of argv to the lines still in the running."
        registry = self.program.registry
        log = self.log
        iterator = PushbackIterator(self.argv)
        force_positional = False

        for a in iterator:
            if force_positional or not is_option(a):
                if log is not None:
                    log(f"positional {a!r}")
                self.match_positional(a)
                continue

            if a == "--":
                # everything after "--" is positional.
                force_positional = True
                continue

            if a.startswith("--"):
                name, equals, value = a[2:].partition("=")
                # "--=x" and "---x" name no option.
                if (not name) or name.startswith("-"):
                    raise UnknownLongOption(name)
                descriptor = registry.find_long(name)
                if not descriptor:
                    raise UnknownLongOption(name)
                if equals:
                    if not descriptor.operand:
                        raise UnexpectedOperand(descriptor.long, value)
                    iterator.push(value)
                if log is not None:
                    log(f"long option --{descriptor.long}")
                operands = OperandSource(descriptor.long, iterator, inline=bool(equals))
                self.match_option(descriptor.long, Line.match_long, operands)
                continue

            # "-abc" is exactly equivalent to "-a -b -c".
            # an option taking an operand ends the cluster;
            # the rest of it, if any, is the operand.
            letters = a[1:]
            for i, letter in enumerate(letters):
                descriptor = registry.find_short(letter)
                if not descriptor:
                    raise UnknownShortOption(letter)
                remainder = letters[i + 1:]
                inline = bool(descriptor.operand and remainder)
                if inline:
                    iterator.push(remainder)
                if log is not None:
                    log(f"short option -{letter}")
                operands = OperandSource(letter, iterator, inline=inline)
                self.match_option(letter, Line.match_short, operands)
                if descriptor.operand:
                    break

    def finish(self):
        "Returns the bindings of the first satisfied line."
        log = self.log
        for line in self.lines:
            if line.default_fill():
                if log is not None:
                    log(f"line {line.index + 1} matched")
                bindings = self.program.fresh_defaults()
                bindings.update(line.bindings)
                return bindings

        if log is not None:
            log("no line satisfied")
        raise UsageMismatch(self.program.usage)


class UsageProgram:
    """
    A compiled usage text: one pattern tree per usage line.

    Compiling is done once, here; match() can then be
    called any number of times.
    """

    def __init__(self, usage, registry, *, max_workers=None):
        self.usage = usage
        self.registry = registry
        self.lines = compile_usage(usage, registry, max_workers=max_workers)
        self.named = tuple(named_options(root) for root in self.lines)
        self.repeated = tuple(repeated_names(root) for root in self.lines)

        defaults = Bindings()
        for root, named, repeated in zip(self.lines, self.named, self.repeated):
            for name, value in leaf_defaults(root, registry, named, repeated):
                defaults.setdefault(name, value)
        for descriptor in registry:
            defaults.setdefault(descriptor.name, descriptor.absent_value())
        self.defaults = defaults

    def __repr__(self):
        return f"<UsageProgram {len(self.lines)} lines>"

    def fresh_defaults(self):
        "A copy of the defaults that can be modified safely."
        return Bindings((name, list(value) if isinstance(value, list) else value) for name, value in self.defaults.items())

    def match(self, argv, *, log=None):
        return Matcher(self, argv, log=log)()


def match(argv, registry, usage):
    "Compiles usage and matches argv against it."
    return UsageProgram(usage, registry).match(argv)
