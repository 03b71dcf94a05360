#!/usr/bin/env python3

"A small table-driven command-line option parser, with commands and per-option callbacks."
__version__ = "0.1.0"


# please leave this copyright notice in binary distributions.
license = """
optgen/__init__.py
part of the optgen software package
Copyright 2021-2023 by Larry Hastings
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
from big.itertools import PushbackIterator
import enum
import os.path
import shlex
import sys

from . import text


__all__ = [
    "CALLBACK_ERROR",
    "CALLBACK_OK",
    "CallbackError",
    "ConfigurationError",
    "NO_COMMAND",
    "OptgenBaseException",
    "OptionTable",
    "Parser",
    "Status",
    "UsageError",
    ]


class Status(enum.Enum):
    OK = 0
    NONE = 1
    ERROR = 2


# the "command" returned when the command-line didn't name one.
# declared commands are numbered from 0, so this never collides.
NO_COMMAND = -1

CALLBACK_OK = 0
CALLBACK_ERROR = 1


class OptgenBaseException(Exception):
    pass

class ConfigurationError(OptgenBaseException):
    """
    Raised when the optgen API is used improperly.
    """
    pass

class UsageError(OptgenBaseException):
    """
    Raised when optgen processes an invalid command-line.

    Parser.parse() never lets this escape; it's reported
    as Status.ERROR.
    """
    pass

class CallbackError(OptgenBaseException):
    """
    Raised when an option callback returns anything
    other than CALLBACK_OK.
    """
    pass


##
## Options are stored internally in a "normalized" format.
##
##     * For long options, it's the full string (e.g. "--verbose").
##     * For short options, it's just the single character (e.g. "v").
##
## That way clustered short options ("-avc") can be looked up
## one letter at a time.
##
def normalize_option(option):
    if not (isinstance(option, str) and option.startswith("-")):
        raise ConfigurationError(f"illegal option {option!r}, options must start with '-'")
    if len(option) == 2:
        if option[1] in "-=":
            raise ConfigurationError(f"illegal short option {option!r}")
        return option[1]
    if (not option.startswith("--")) or (len(option) < 4) or ("=" in option):
        raise ConfigurationError(f"illegal option {option!r}, use '-x' or '--long-name'")
    return option

def denormalize_option(option):
    if len(option) == 1:
        return "-" + option
    return option


class CommandDefinition:
    __slots__ = [
        "name",
        "doc",
        ]

    def __init__(self, name, doc):
        self.name = name
        self.doc = doc

    def __repr__(self):
        return f"<CommandDefinition {self.name}>"


class OptionDefinition:
    __slots__ = [
        "name",
        "spellings",
        "argument",
        "commands",
        "repeat",
        "callback",
        "doc",
        ]

    def __init__(self, name, spellings, argument, commands, repeat, callback, doc):
        self.name = name
        self.spellings = spellings
        self.argument = argument
        self.commands = commands
        self.repeat = repeat
        self.callback = callback
        self.doc = doc

    def __repr__(self):
        scope = " ".join(self.commands) if self.commands else "global"
        repeat_str = " repeat" if self.repeat else ""
        return f"<OptionDefinition {self.name} ({scope}){repeat_str}>"

    def usage(self):
        spellings = "|".join(denormalize_option(o) for o in self.spellings)
        if self.argument:
            return f"{spellings} {self.argument}"
        return spellings


class OptionTable:
    """
    The values parsed for every option, one slot per option.

    Slots are indexed by a member of the parser's Option enum,
    its integer value, or its name.  A slot is None if the
    option wasn't specified, otherwise it's a string.
    The set of slots is fixed when the table is created.
    """

    __slots__ = [
        "_options",
        "_slots",
        ]

    def __init__(self, options):
        self._options = options
        self._slots = [None] * len(options)

    def _index(self, key):
        if isinstance(key, str):
            try:
                return self._options[key].value
            except KeyError:
                raise KeyError(key) from None
        if isinstance(key, enum.Enum) and not isinstance(key, self._options):
            raise KeyError(key)
        if isinstance(key, int) and not isinstance(key, bool):
            if 0 <= key < len(self._slots):
                return int(key)
        raise KeyError(key)

    def __getitem__(self, key):
        return self._slots[self._index(key)]

    def get(self, key, default=None):
        value = self[key]
        if value is None:
            return default
        return value

    def present(self, key):
        return self._slots[self._index(key)] is not None

    def store(self, key, value):
        if not isinstance(value, str):
            raise TypeError(f"option values must be str, not {type(value).__name__}")
        self._slots[self._index(key)] = value

    def __len__(self):
        return len(self._slots)

    def __iter__(self):
        return zip(self._options, self._slots)

    def __repr__(self):
        fields = [f"{option.name}={value!r}" for option, value in self if value is not None]
        return f"<OptionTable {' '.join(fields)}>"


class Parser:
    """
    A Parser maps a command-line to a command and a table of option values.

    Declare commands with command() and options with option(),
    then call parse().  Once you've called parse(), the set of
    commands and options is fixed; you can call parse() again
    as many times as you like, each call starts from scratch.
    """

    def __init__(self,
        name=None,
        *,

        option_space_oparg = True,              # '--long OPARG' and '-s OPARG'
        long_option_equals_oparg = True,        # --long=OPARG
        short_option_concatenated_oparg = True, # -sOPARG, only if -s takes an oparg

        usage_max_columns = 80,
        usage_indent_definitions = 2,
        ):
        self.name = name or os.path.basename(sys.argv[0])

        self.option_parsing_semantics = (
            option_space_oparg,
            long_option_equals_oparg,
            short_option_concatenated_oparg,
            )

        self.usage_max_columns = usage_max_columns
        self.usage_indent_definitions = usage_indent_definitions

        # self.commands[name] = CommandDefinition
        # self.options[name] = OptionDefinition
        # self.option_lookup[normalized option] = OptionDefinition
        self.commands = {}
        self.options = {}
        self.option_lookup = {}

        # built by freeze()
        self.Command = None
        self.Option = None

        self.log = big.Log()

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name!r}>"

    def _check_name(self, name, kind):
        if self.Option is not None:
            raise ConfigurationError(f"can't add {kind} {name!r}, parser is already in use")
        if not (isinstance(name, str) and name.isidentifier() and not name.startswith("_")):
            raise ConfigurationError(f"illegal {kind} name {name!r}")

    def command(self, name, doc=""):
        self._check_name(name, "command")
        if name in self.commands:
            raise ConfigurationError(f"command {name!r} defined twice")
        self.commands[name] = CommandDefinition(name, doc)

    def option(self, name, *options, argument=None, commands=(), repeat=False, callback=None, doc=""):
        self._check_name(name, "option")
        if name in self.options:
            raise ConfigurationError(f"option {name!r} defined twice")
        if callback is not None and not callable(callback):
            raise ConfigurationError(f"callback for option {name!r} isn't callable")

        if isinstance(commands, str):
            commands = (commands,)
        commands = tuple(commands)
        for command in commands:
            if command not in self.commands:
                raise ConfigurationError(f"option {name!r} refers to undefined command {command!r}")

        if not options:
            if len(name) == 1:
                options = ("-" + name,)
            else:
                options = ("--" + name.replace("_", "-"),)
        normalized = []
        for option in options:
            option = normalize_option(option)
            if (option in self.option_lookup) or (option in normalized):
                raise ConfigurationError(f"option {denormalize_option(option)} defined twice")
            normalized.append(option)

        definition = OptionDefinition(name, tuple(normalized), argument, commands, repeat, callback, doc)
        self.options[name] = definition
        for option in normalized:
            self.option_lookup[option] = definition

    def callback(self, name, callback):
        definition = self.options.get(name)
        if not definition:
            raise ConfigurationError(f"can't set callback, no option named {name!r}")
        if not callable(callback):
            raise ConfigurationError(f"callback for option {name!r} isn't callable")
        definition.callback = callback

    def freeze(self):
        if self.Option is not None:
            return
        self.Command = enum.IntEnum("Command", [(name, i) for i, name in enumerate(self.commands)])
        self.Option = enum.IntEnum("Option", [(name, i) for i, name in enumerate(self.options)])

    @property
    def count_options(self):
        return len(self.options)

    def parse(self, args):
        """
        Parses args, a list of strings not including the program name.

        Returns a tuple of (status, command, options).
        status is a Status.  If it's Status.OK, command is
        a member of self.Command or NO_COMMAND, and options
        is an OptionTable.
        """
        self.freeze()
        log = self.log = big.Log()
        log(f"parse start: {shlex.join(args)}")

        options = OptionTable(self.Option)

        if not args:
            log("no arguments")
            return Status.NONE, NO_COMMAND, options

        try:
            command = self._parse(PushbackIterator(args), options)
        except (UsageError, CallbackError) as e:
            log(f"parse failed: {e}")
            print(f"error: {e}", file=sys.stderr)
            return Status.ERROR, NO_COMMAND, options

        log("parse complete")
        return Status.OK, command, options

    def _lookup(self, option, command):
        key = option[1] if len(option) == 2 else option
        definition = self.option_lookup.get(key)
        if not definition:
            raise UsageError(f"unknown option {option}")
        if definition.commands:
            if command == NO_COMMAND:
                raise UsageError(f"option {option} can only be used after a command")
            if command.name not in definition.commands:
                raise UsageError(f"option {option} isn't valid for command {command.name}")
        return definition

    def _next_oparg(self, iterator, option):
        option_space_oparg = self.option_parsing_semantics[0]
        if not (option_space_oparg and iterator):
            raise UsageError(f"option {option} requires an argument")
        return next(iterator)

    def _store(self, options, definition, option, value, command, seen):
        if (definition.name in seen) and (not definition.repeat):
            raise UsageError(f"option {option} specified more than once")
        seen.add(definition.name)
        options.store(definition.name, value)
        self.log(f"option {option} -> {definition.name} = {value!r}")

        callback = definition.callback
        if callback is None:
            return
        self.log.enter(f"callback for {definition.name}")
        try:
            result = callback(value, command)
        finally:
            self.log.exit()
        if result != CALLBACK_OK:
            raise CallbackError(f"callback for option {option} rejected {value!r}")

    def _parse(self, iterator, options):
        (
        option_space_oparg,
        long_option_equals_oparg,
        short_option_concatenated_oparg,
        ) = self.option_parsing_semantics

        command = NO_COMMAND
        seen = set()

        for token in iterator:
            if token.startswith("--") and (len(token) > 2):
                option, equals, oparg = token.partition("=")
                if not (equals and long_option_equals_oparg):
                    option = token
                    oparg = None
                if (len(option) < 4) or ("=" in option):
                    raise UsageError(f"unknown option {option}")
                definition = self._lookup(option, command)
                if definition.argument:
                    if oparg is None:
                        oparg = self._next_oparg(iterator, option)
                    self._store(options, definition, option, oparg, command, seen)
                    continue
                if oparg is not None:
                    raise UsageError(f"option {option} doesn't take an argument")
                self._store(options, definition, option, option, command, seen)
                continue

            if token.startswith("-") and (len(token) > 1) and (token != "--"):
                # one or more short options, maybe glued together (-ab),
                # and maybe with a glued-on oparg (-xVALUE)
                letters = token[1:]
                while letters:
                    letter = letters[0]
                    letters = letters[1:]
                    option = "-" + letter
                    if letter in "-=":
                        raise UsageError(f"unknown option {option}")
                    definition = self._lookup(option, command)
                    if not definition.argument:
                        self._store(options, definition, option, option, command, seen)
                        continue
                    if letters:
                        if not short_option_concatenated_oparg:
                            raise UsageError(f"option {option} requires a separate argument")
                        oparg = letters
                        letters = ""
                    else:
                        oparg = self._next_oparg(iterator, option)
                    self._store(options, definition, option, oparg, command, seen)
                continue

            if command != NO_COMMAND:
                raise UsageError(f"unexpected argument {token!r}")
            if token not in self.commands:
                raise UsageError(f"unknown command {token!r}")
            command = self.Command[token]
            self.log(f"command {command.name}")

        return command

    def help_text(self):
        self.freeze()
        indent = " " * self.usage_indent_definitions
        margin = self.usage_max_columns - 1

        global_options = []
        command_options = {name: [] for name in self.commands}
        for definition in self.options.values():
            if not definition.commands:
                global_options.append(definition)
            for name in definition.commands:
                command_options[name].append(definition)

        usage = f"usage: {self.name}"
        if global_options:
            usage += " [options]"
        if self.commands:
            usage += " [command [options]]"

        # every term is rendered in the same column
        entries = []
        if global_options:
            entries.append(("Options:", None))
            for definition in global_options:
                entries.append((indent + definition.usage(), definition.doc))
        if self.commands:
            entries.append(("Commands:", None))
            for name, command in self.commands.items():
                entries.append((indent + name, command.doc))
                for definition in command_options[name]:
                    entries.append((indent * 2 + definition.usage(), definition.doc))

        column = text.align_column([term for term, doc in entries if doc is not None])

        lines = [usage]
        for term, doc in entries:
            if doc is None:
                lines.append("")
                lines.append(term)
                continue
            lines.append(text.column_wrapper(term, doc.split(), column=column, right_margin=margin))
        return "\n".join(lines)

    def show_help(self):
        print(self.help_text())
