"Exceptions raised by Recital."

# please leave this copyright notice in binary distributions.
license = """
recital/errors.py
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


def denormalize_option(option):
    """
    Options are stored without their dashes:
    a single character for short options ("v"),
    the bare name for long options ("verbose").
    This puts the dashes back for messages.
    """
    if len(option) == 1:
        return "-" + option
    return "--" + option


class RecitalBaseException(Exception):
    pass

class ConfigurationError(RecitalBaseException):
    """
    Raised when Recital is handed unusable usage text
    or an unusable option table.
    """
    pass

class UsageGrammarError(ConfigurationError):
    """
    Raised when a usage line can't be compiled.

    line_number and column are 1-based; text is the
    offending usage line, program name included.
    """
    def __init__(self, message, *, line_number=None, column=None, text=None):
        self.message = message
        self.line_number = line_number
        self.column = column
        self.text = text
        where = []
        if line_number is not None:
            where.append(f"line {line_number}")
        if column is not None:
            where.append(f"column {column}")
        if where:
            message = f"{message} ({', '.join(where)})"
        if text is not None:
            message = f"{message}\n    {text}"
            if column is not None:
                message = f"{message}\n    {' ' * (column - 1)}^"
        # not super(): the subclasses below also derive from
        # UsageError classes with different constructors.
        RecitalBaseException.__init__(self, message)


class UsageError(RecitalBaseException):
    """
    Raised when Recital processes an invalid command-line.
    """
    pass

class UnknownShortOption(UsageError):
    def __init__(self, option):
        self.option = option
        super().__init__(f"unknown option {denormalize_option(option)}")

class UnknownLongOption(UsageError):
    def __init__(self, option):
        self.option = option
        super().__init__(f"unknown option {denormalize_option(option)}")


##
## A usage line naming an option the registry doesn't have
## is a mistake in the usage text, but it's still an unknown
## option.  These are both, so either except clause works.
##

class UnknownShortOptionInUsage(UsageGrammarError, UnknownShortOption):
    def __init__(self, option, *, line_number=None, column=None, text=None):
        self.option = option
        super().__init__(f"unknown option {denormalize_option(option)}", line_number=line_number, column=column, text=text)

class UnknownLongOptionInUsage(UsageGrammarError, UnknownLongOption):
    def __init__(self, option, *, line_number=None, column=None, text=None):
        self.option = option
        super().__init__(f"unknown option {denormalize_option(option)}", line_number=line_number, column=column, text=text)


class AmbiguousLongOption(UsageError):
    def __init__(self, option, candidates):
        self.option = option
        self.candidates = tuple(candidates)
        choices = ", ".join(denormalize_option(c) for c in self.candidates)
        super().__init__(f"{denormalize_option(option)} is not a unique prefix: {choices}?")

class MissingOperand(UsageError):
    def __init__(self, option):
        self.option = option
        super().__init__(f"{denormalize_option(option)} requires an argument")

class UnexpectedOperand(UsageError):
    def __init__(self, option, operand):
        self.option = option
        self.operand = operand
        super().__init__(f"{denormalize_option(option)}={operand} isn't allowed, {denormalize_option(option)} doesn't take an argument")


class UsageMismatch(UsageError):
    """
    Raised when the command-line doesn't fit any
    of the usage lines.  usage is the usage text,
    for printing alongside the error.
    """
    def __init__(self, usage, message=None):
        self.usage = usage
        if message is None:
            message = "command-line doesn't match any usage line"
        super().__init__(message)

class UnexpectedPositional(UsageMismatch):
    def __init__(self, usage, token):
        self.token = token
        super().__init__(usage, f"unexpected argument {token!r}")

class UnexpectedOption(UsageMismatch):
    def __init__(self, usage, option):
        self.option = option
        super().__init__(usage, f"{denormalize_option(option)} isn't allowed here")
