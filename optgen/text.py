# please leave this copyright notice in binary distributions.
license = """
optgen/text.py
part of the optgen software package
Copyright 2021 by Larry Hastings
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


# gap between the end of a term and the start of its definition
gutter = 2


def align_column(terms, *, min_column=12, max_column=40):
    """
    Returns the column where definitions should start
    so that every term in "terms" fits to its left.

    Terms too long to fit in "max_column" don't push
    the column out; column_wrapper() puts their definition
    on the next line instead.
    """
    column = min_column
    for term in terms:
        width = len(term) + gutter
        if width <= max_column:
            column = max(column, width)
    return column


def column_wrapper(term, words, *, column=12, right_margin=79, two_spaces=True):
    """
    Formats a term and its definition, like so:

        term here           words here which are wrapped to
                            multiple lines in a pleasing way.

    "words" should be an iterable of pre-split words.

    If "two_spaces" is true, words that end in sentence-ending
    punctuation ('.', '?', and '!') will be followed by two spaces,
    not one.

    A single word longer than the available space is never
    broken, it just overflows the margin.
    """
    lines = []
    blank = " " * column

    if len(term) + gutter <= column:
        line = term.ljust(column)
    else:
        lines.append(term)
        line = blank

    col = len(line)
    empty = True
    lastword = ''

    for word in words:
        if empty:
            line += word
            col += len(word)
            empty = False
            lastword = word
            continue

        if two_spaces and lastword.endswith(('.', '?', '!')):
            space = "  "
        else:
            space = " "

        if (col + len(space) + len(word)) > right_margin:
            lines.append(line)
            line = blank + word
            col = column + len(word)
        else:
            line += space + word
            col += len(space) + len(word)
        lastword = word

    line = line.rstrip()
    if line or not lines:
        lines.append(line)
    return "\n".join(lines)
