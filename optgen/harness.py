#!/usr/bin/env python3

"""
The optgen test harness.

Builds a parser for a small fixed set of commands and options,
parses the command-line, and prints exactly one line saying what
the parser produced.  An external test runner runs it with various
command-lines and checks the output and the exit code.
"""

# please leave this copyright notice in binary distributions.
license = """
optgen/harness.py
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

from collections import namedtuple
import enum
import sys

from . import CALLBACK_OK, NO_COMMAND, Parser, Status


class Accumulator:
    """
    Collects every value passed to a repeatable option,
    as one semicolon-separated string.

    Each value is appended as ";value", so starting from
    the default empty string, "a", "b", and "c" produce ";a;b;c".
    """

    def __init__(self, initial=""):
        self.initial = initial
        self.reset()

    def reset(self):
        self.value = self.initial

    def __call__(self, arg, command):
        if arg is None:
            print("error: arg is null into callback")
            sys.exit(1)
        self.value = f"{self.value};{arg}"
        return CALLBACK_OK

    def __repr__(self):
        return f"<Accumulator {self.value!r}>"

    def __str__(self):
        return self.value


def build_parser(level_callback=None, name=None):
    parser = Parser(name)

    parser.command("info", "Show information.")
    parser.command("help", "Show help on a topic.")
    parser.command("two", "Exercise options that take values.")
    parser.command("testing", "Takes no options at all.")

    parser.option("experimental", "-e", "--experimental",
        doc="Enable experimental features.")
    parser.option("info", "-i", "--info", commands="info",
        doc="Show more information.")
    parser.option("help", "--help", argument="TOPIC", commands="help",
        doc="The topic to show help on.")
    parser.option("two", "-t", "--two", argument="VALUE", commands="two",
        doc="A plain string value.")
    parser.option("level", "-L", "--level", argument="LEVEL", commands="two",
        repeat=True, callback=level_callback,
        doc="May be specified more than once. Every value is remembered.")
    parser.option("letter", "-l", "--letter", argument="LETTER", commands="two",
        doc="A letter.")
    parser.option("path", "-p", "--path", argument="PATH", commands="two",
        doc="A path.")

    return parser


class State(enum.Enum):
    no_args = enum.auto()
    return_not_ok = enum.auto()
    no_command_experimental = enum.auto()
    no_command = enum.auto()
    info_info = enum.auto()
    info = enum.auto()
    help_no_value = enum.auto()
    help = enum.auto()
    two_two = enum.auto()
    two_level = enum.auto()
    two_letter = enum.auto()
    two_path = enum.auto()
    testing = enum.auto()
    no_known_test = enum.auto()


Outcome = namedtuple("Outcome", ["state", "text", "exit_code"])


def dispatch(status, command, options, level_line, Command):
    """
    Decides what the harness prints for a parse result.

    The rules are tried in order and the first one that
    matches wins; rules never fall through to one another.
    Returns an Outcome.
    """
    def is_command(name):
        return (command != NO_COMMAND) and (command == Command[name])

    rules = (
        (State.no_args,
            lambda: status == Status.NONE,
            lambda: "no args", 0),
        (State.return_not_ok,
            lambda: status != Status.OK,
            lambda: "return not ok", 1),

        (State.no_command_experimental,
            lambda: (command == NO_COMMAND) and options.present("experimental"),
            lambda: "no command:experimental", 0),
        (State.no_command,
            lambda: command == NO_COMMAND,
            lambda: "no command", 0),

        (State.info_info,
            lambda: is_command("info") and options.present("info"),
            lambda: "info:info", 0),
        (State.info,
            lambda: is_command("info"),
            lambda: "info", 0),

        (State.help_no_value,
            lambda: is_command("help") and not options.present("help"),
            lambda: "help:no value", 0),
        (State.help,
            lambda: is_command("help"),
            lambda: f"help:{options['help']}", 0),

        (State.two_two,
            lambda: is_command("two") and options.present("two"),
            lambda: f"two:two:{options['two']}", 0),
        (State.two_level,
            lambda: is_command("two") and options.present("level"),
            lambda: f"two:level:{level_line}", 0),
        (State.two_letter,
            lambda: is_command("two") and options.present("letter"),
            lambda: f"two:letter:{options['letter']}", 0),
        (State.two_path,
            lambda: is_command("two") and options.present("path"),
            lambda: f"two:path:{options['path']}", 0),

        (State.testing,
            lambda: is_command("testing"),
            lambda: "testing", 0),
        )

    for state, test, render, exit_code in rules:
        if test():
            return Outcome(state, render(), exit_code)

    return Outcome(State.no_known_test, f"no known test\ncommand: {int(command)}", 1)


def main(args=None):
    if args is None:
        args = sys.argv[1:]

    level_line = Accumulator()
    parser = build_parser(level_line)
    status, command, options = parser.parse(args)

    outcome = dispatch(status, command, options, level_line.value, parser.Command)
    print(outcome.text)
    if outcome.state == State.no_known_test:
        parser.show_help()
    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
