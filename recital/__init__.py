#!/usr/bin/env python3

"Your usage message is your command-line parser.  Give a Recital!"
__version__ = "0.1.0"


# please leave this copyright notice in binary distributions.
license = """
recital/__init__.py
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


import big.all as big
from os.path import basename
import sys

from .errors import (
    RecitalBaseException,
    ConfigurationError,
    UsageGrammarError,
    UnknownShortOptionInUsage,
    UnknownLongOptionInUsage,
    UsageError,
    UnknownShortOption,
    UnknownLongOption,
    AmbiguousLongOption,
    MissingOperand,
    UnexpectedOperand,
    UsageMismatch,
    UnexpectedPositional,
    UnexpectedOption,
    )
from .grammar import compile_line, compile_usage, usage_section
from .matcher import Bindings, Matcher, UsageProgram, match
from .registry import OptionDescriptor, OptionRegistry


class Recital:
    """
    Parses a command-line using nothing but the program's
    help text.  The "Usage:" section says what command-lines
    are legal; the "Options:" section says what the options
    are, which take an argument, and their defaults.

    A Recital object compiles the help text once; you can
    call process() or main() on it as many times as you like.
    """

    def __init__(self,
        doc,
        *,
        name=None,

        # if true, a lone "-h" or "--help" prints doc.
        help=True,

        # if set to a non-empty string, a lone "--version"
        # prints it.
        version=None,

        log_events=True,

        # how many threads to compile usage lines with.
        # None lets concurrent.futures decide.
        max_workers=None,
        ):
        self.doc = doc
        self.name = name or basename(sys.argv[0])
        self.support_help = help
        self.version_str = version
        self.log_events = log_events

        self.usage = usage_section(doc)
        self.registry = OptionRegistry.from_options_section(doc)
        self.program = UsageProgram(self.usage, self.registry, max_workers=max_workers)
        self.log = None

    def __repr__(self):
        return f"<Recital {self.name!r}>"

    def help(self):
        print(self.doc.strip("\n"))

    def version(self):
        print(self.version_str)

    def usage_error(self, e):
        print(f"{self.name}: {e}")
        print("Usage:" + self.usage.rstrip())

    def process(self, argv=None):
        """
        Matches argv (default: sys.argv[1:]) against the usage.
        Returns the Bindings, or None if argv asked for help
        or the version and we printed it instead.
        """
        if argv is None:
            argv = sys.argv[1:]
        argv = list(argv)

        self.log = log = big.Log() if self.log_events else None
        if log is not None:
            log("process start")

        if self.support_help:
            if (len(argv) == 1) and argv[0] in ("-h", "--help"):
                self.help()
                return None

        if self.version_str:
            if (len(argv) == 1) and (argv[0] == "--version"):
                self.version()
                return None

        bindings = self.program.match(argv, log=log)
        if log is not None:
            log("process complete")
        return bindings

    def main(self, argv=None):
        """
        Like process(), but for use as the top level of a script.
        Exits after printing help or the version; on a usage
        error, prints the error and the usage, and exits with -1.
        """
        try:
            bindings = self.process(argv)
        except UsageError as e:
            self.usage_error(e)
            sys.exit(-1)
        if bindings is None:
            sys.exit(0)
        return bindings


def recite(doc, argv=None, **kwargs):
    "Builds a Recital from doc and runs main() on argv."
    return Recital(doc, **kwargs).main(argv)
