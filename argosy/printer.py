"""
Argosy usage printer: column-aware word wrapping into a rich Text.

UsagePrinter writes words into a shared sink (a rich Text plus the current
column). Printers derived with indented()/hanging() share that sink, so a
section heading, its indented body and a nested description all flow into
the same output while each keeps its own margins.

Wrapping contract
- Words are packed greedily: a word goes on the current line when the line,
  a separating space and the word fit within `columns`; otherwise the line is
  broken.
- The first line of a paragraph starts at `indent`; continuation lines start
  at `indent + hanging`.
- A word wider than the available room is written on its own line and left
  to overflow; words are never split.
- Literal text (append_literal) is copied line by line, only re-indented.

Example
    >>> out = UsagePrinter(30)
    >>> out.append("SYNOPSIS").newline()
    >>> out.indented(8).hanging(4).append_words(["prog", "[-v]", "[--name <name>]"]).newline()
    >>> print(out)
"""
from rich.text import Text


class _Sink:
    __slots__ = ("text", "position")

    def __init__(self):
        self.text = Text()
        self.position = 0


class UsagePrinter:
    """
    Greedy word wrapper with base and hanging indents.

    Parameters
    - columns: maximum line width (must be positive).
    - indent: left margin of every line.
    - hanging: extra margin of continuation lines.
    """

    def __init__(self, columns=79, *, indent=0, hanging=0, sink=None):
        if not isinstance(columns, int) or isinstance(columns, bool):
            raise TypeError("usage-printer 'columns' must be an integer")
        if columns < 1:
            raise ValueError("usage-printer 'columns' must be greater than 0")
        self._columns = columns
        self._indent = indent
        self._hanging = hanging
        self._sink = sink if sink is not None else _Sink()

    @property
    def columns(self):
        return self._columns

    @property
    def indent(self):
        return self._indent

    @property
    def text(self):
        return self._sink.text

    def indented(self, size, /):
        """a printer sharing this output with `size` more columns of margin."""
        return UsagePrinter(self._columns, indent=self._indent + size, sink=self._sink)

    def hanging(self, size, /):
        """a printer sharing this output whose continuation lines hang by `size`."""
        return UsagePrinter(self._columns, indent=self._indent, hanging=size, sink=self._sink)

    def _write(self, fragment, style="", /):
        if isinstance(fragment, Text):
            self._sink.text.append_text(fragment)
        else:
            self._sink.text.append(fragment, style)
        self._sink.position += len(fragment)

    def append(self, value, style="", /):
        """append prose: split on whitespace and wrap word by word."""
        if value is None:
            return self
        if isinstance(value, Text):
            return self.append_words(value.split(" "), style)
        return self.append_words(str(value).split(), style)

    def append_words(self, words, style="", /):
        """append unbreakable words (str or Text)."""
        for word in words:
            if not word:
                continue
            if self._sink.position == 0:
                self._write(" " * self._indent)
            elif self._sink.position + 1 + len(word) <= self._columns:
                self._write(" ")
            else:
                self._sink.text.append("\n")
                self._sink.position = 0
                self._write(" " * (self._indent + self._hanging))
            self._write(word, style)
        return self

    def newline(self):
        self._sink.text.append("\n")
        self._sink.position = 0
        return self

    def append_literal(self, value, style="", /):
        """copy text verbatim, one output line per input line, re-indented."""
        if value is None:
            return self
        if self._sink.position:
            self.newline()
        for line in str(value).rstrip("\n").split("\n"):
            if line.strip():
                self._write(" " * self._indent)
                self._write(line.rstrip(), style)
            self.newline()
        return self

    def append_table(self, rows, styles=(), /, *, gutter=2):
        """
        lay rows out in aligned columns.

        every column but the last is padded to its widest cell; the last cell
        may span several lines, continuation lines aligning under it.
        """
        rows = [tuple("" if cell is None else str(cell) for cell in row) for row in rows]
        if not rows:
            return self
        if self._sink.position:
            self.newline()
        count = max(map(len, rows))
        widths = [
            max((len(row[index]) for row in rows if index < len(row)), default=0)
            for index in range(count - 1)
        ]
        offset = self._indent + sum(widths) + gutter * len(widths)
        for row in rows:
            self._write(" " * self._indent)
            for index, cell in enumerate(row[:-1]):
                self._write(cell, styles[index] if index < len(styles) else "")
                self._write(" " * (widths[index] - len(cell) + gutter))
            if count - 1 > len(row) - 1:
                self._write(" " * sum(widths[len(row) - 1:]) + " " * gutter * (count - len(row)))
            last = row[-1].rstrip("\n").split("\n")
            style = styles[count - 1] if count - 1 < len(styles) else ""
            self._write(last[0].rstrip(), style)
            for line in last[1:]:
                self.newline()
                if line.strip():
                    self._write(" " * offset)
                    self._write(line.rstrip(), style)
            self.newline()
        return self

    def __str__(self):
        return self._sink.text.plain


__all__ = (
    "UsagePrinter",
)
