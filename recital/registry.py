"The option registry: what options exist, and which take an operand."

# please leave this copyright notice in binary distributions.
license = """
recital/registry.py
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

import re

import big.all as big

from .errors import AmbiguousLongOption, ConfigurationError


def normalize_option(option):
    """
    Strips the dashes off an option.
    "-v" becomes "v", "--verbose" becomes "verbose".
    Already-normalized options pass through unchanged.
    Only the leading "-" or "--" is removed; "---x" is "-x".
    """
    if option.startswith("--"):
        return option[2:]
    if option.startswith("-"):
        return option[1:]
    return option


class OptionDescriptor:
    """
    Everything Recital knows about one option.

    short is the single character ("v"), long is the name ("verbose");
    either may be None, not both.  name is the key the option binds
    to in the results.  If operand is true the option consumes an
    argument, and default is what it binds to when absent.
    """

    __slots__ = ['short', 'long', 'operand', 'name', 'default']

    def __init__(self, short=None, long=None, *, operand=False, name=None, default=None):
        if short is not None:
            short = normalize_option(short)
            if len(short) != 1:
                raise ConfigurationError(f"short option must be a single character, not {short!r}")
        if long is not None:
            long = normalize_option(long)
            if (not long) or long.startswith("-"):
                raise ConfigurationError(f"invalid long option {long!r}")
        if not (short or long):
            raise ConfigurationError("an option needs a short or a long spelling")
        self.short = short
        self.long = long
        self.operand = bool(operand)
        self.name = name or long or short
        self.default = default

    def _key(self):
        return (self.short, self.long, self.operand, self.name, self.default)

    def __eq__(self, other):
        if not isinstance(other, OptionDescriptor):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        spellings = []
        if self.short:
            spellings.append("-" + self.short)
        if self.long:
            spellings.append("--" + self.long)
        operand = " operand" if self.operand else ""
        return f"<OptionDescriptor {'|'.join(spellings)} name={self.name!r}{operand}>"

    def absent_value(self, repeated=False):
        "The value bound when this option doesn't appear on the command-line."
        if self.operand:
            if repeated:
                if self.default is None:
                    return []
                return self.default.split()
            return self.default
        if repeated:
            return 0
        return False


class OptionRegistry:
    """
    A read-only-after-construction table of options.

    Short options are looked up by character, long options
    by name, optionally by unambiguous prefix.
    """

    def __init__(self, descriptors=()):
        self.shorts = {}
        self.longs = {}
        self.descriptors = []
        for descriptor in descriptors:
            self.register(descriptor)

    def __repr__(self):
        return f"<OptionRegistry {self.descriptors!r}>"

    def __iter__(self):
        return iter(self.descriptors)

    def __len__(self):
        return len(self.descriptors)

    def __contains__(self, descriptor):
        return descriptor in self.descriptors

    def register(self, descriptor):
        if descriptor.short is not None:
            if descriptor.short in self.shorts:
                raise ConfigurationError(f"option -{descriptor.short} defined more than once")
        if descriptor.long is not None:
            if descriptor.long in self.longs:
                raise ConfigurationError(f"option --{descriptor.long} defined more than once")
        if descriptor.short is not None:
            self.shorts[descriptor.short] = descriptor
        if descriptor.long is not None:
            self.longs[descriptor.long] = descriptor
        self.descriptors.append(descriptor)
        return descriptor

    def add(self, short=None, long=None, *, operand=False, name=None, default=None):
        return self.register(OptionDescriptor(short, long, operand=operand, name=name, default=default))

    def find_short(self, option):
        return self.shorts.get(normalize_option(option))

    def find_long(self, option, *, prefix=True):
        """
        Returns the descriptor for long option "option",
        or None if there isn't one.

        An exact match always wins.  Otherwise, if prefix
        is true, "option" may be an abbreviation of exactly
        one long option; if it abbreviates more than one,
        raises AmbiguousLongOption.
        """
        option = normalize_option(option)
        if not option:
            return None
        descriptor = self.longs.get(option)
        if descriptor or not prefix:
            return descriptor
        candidates = [long for long in self.longs if long.startswith(option)]
        if len(candidates) > 1:
            raise AmbiguousLongOption(option, sorted(candidates))
        if candidates:
            return self.longs[candidates[0]]
        return None

    @classmethod
    def from_options_section(cls, doc):
        """
        Builds a registry from the "Options:" sections of
        a help document.  Each option is described on a line
        starting with a dash:

            -o FILE, --output=FILE  Write here [default: out.txt].

        The spellings are separated from the description by
        at least two spaces.  A spelling that isn't an option
        means the option takes an operand.
        """
        registry = cls()
        for section in sections("options:", doc):
            _, _, section = section.partition(':')
            chunks = re.split(r'\n[ \t]*(-\S+?)', '\n' + section)[1:]
            chunks = [a + b for a, b in zip(chunks[::2], chunks[1::2])]
            for chunk in chunks:
                registry.register(parse_option_description(chunk))
        return registry


_default_re = re.compile(r'\[default: (.*)\]', re.IGNORECASE)

def parse_option_description(description):
    short = long = None
    operand = False
    spellings, _, text = description.strip().partition('  ')
    spellings = spellings.replace(',', ' ').replace('=', ' ')
    for s in spellings.split():
        if s.startswith('--'):
            long = s
        elif s.startswith('-'):
            short = s
        else:
            operand = True
    default = None
    if operand:
        match = _default_re.search(text)
        if match:
            default = match.group(1)
    return OptionDescriptor(short, long, operand=operand, default=default)


def sections(name, doc):
    """
    Yields each section of doc whose heading line contains
    name (case-insensitively).  A section is its heading
    line plus the lines after it, up to the first line
    that isn't indented.
    """
    name = name.lower()
    section = None
    for info, line in big.lines_rstrip(big.lines(doc)):
        if section is not None:
            if line and line[0].isspace():
                section.append(line)
                continue
            yield "\n".join(section).strip()
            section = None
        if name in line.lower():
            section = [line]
    if section is not None:
        yield "\n".join(section).strip()
