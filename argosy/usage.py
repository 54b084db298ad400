"""
Argosy usage rendering: manual-style help for commands, groups and programs.

What this module provides
- A small content model (Document → Section → blocks) built once from the
  metadata and shared by every output format, so plain text, HTML and ronn
  always carry the same sections in the same order.
- Usage builders:
  • CommandUsage: NAME, SYNOPSIS, OPTIONS, DISCUSSION, EXAMPLES of a command.
  • CommandGroupUsage: NAME, SYNOPSIS (one line per command), OPTIONS,
    COMMANDS of a group.
  • GlobalUsage: NAME, SYNOPSIS, OPTIONS, COMMANDS of the whole program.
  • GlobalUsageSummary: the short "usage: ..." overview with the command list.
- Format backends selected by an explicit UsageFormat argument (there is no
  process-wide format switch): TEXT (word-wrapped, rich-styled), HTML, RONN.

Layout (TEXT)
- Section headings start at column 0; section bodies are indented by 8.
- Option descriptions are indented 4 more than their names.
- SYNOPSIS wraps with a hanging indent: continuation lines align under the
  first word after the program name.
- DISCUSSION and EXAMPLES are pre-authored: copied verbatim line by line.

Escaping
- HTML: '&', '<' and '>' are escaped and newlines become <br/>.
- RONN: markdown metacharacters in prose (descriptions, discussion,
  captions) are backslash-escaped; synopsis tokens are emitted as written
  (e.g. "[-t <branch>]") and examples are emitted as indented code blocks.

Ordering
- Options are sorted with option_key by default (short single-character
  forms first, then case-insensitive lexicographic, lower case before upper
  case). Pass key=<callable> for another order, or key=None to keep the
  declaration order.
"""
import html
import logging
import re
from enum import Enum
from typing import NamedTuple, Any

from rich.console import Console
from rich.text import Text

from .faults import palette
from .metadata import ArgumentsMetadata, OptionMetadata
from .printer import UsagePrinter
from .utils import Unset

logger = logging.getLogger(__name__)

SEPARATOR_DESCRIPTION = (
    "This option can be used to separate command-line options from the list of "
    "arguments (useful when arguments might be mistaken for command-line options)."
)


class UsageFormat(Enum):
    TEXT = "text"
    HTML = "html"
    RONN = "ronn"


# --- content model ---

class Synopsis(NamedTuple):
    """one invocation line: (name, option tokens) per scope, then arguments."""
    segments: tuple[tuple[str, tuple[str, ...]], ...]
    arguments: str | None = None
    label: str | None = None


class Entry(NamedTuple):
    """a definition: a term followed by its indented description."""
    term: str
    description: str | None = None


class Paragraph(NamedTuple):
    text: str


class Verbatim(NamedTuple):
    text: str


class Table(NamedTuple):
    """(caption, text) rows, such as examples or a command listing."""
    rows: tuple[tuple[str, str], ...]
    listing: bool = False


class Section(NamedTuple):
    title: str | None
    blocks: tuple[Any, ...]
    indent: int = 8


class Document(NamedTuple):
    """
    names/description feed the NAME section (TEXT, HTML) or the page header
    (RONN) when named is true.
    """
    names: tuple[str, ...]
    description: str | None
    sections: tuple[Section, ...]
    named: bool = True


# --- option helpers ---

def _stem(name, /):
    return name.lstrip("-")


def option_key(option, /):
    """
    default option ordering key.

    an option is represented by its first single-character form when it has
    one (else its first name); options with a single-character form sort
    first, then by case-insensitive name, lower case before upper case.
    """
    shorts = [name for name in option.names if len(_stem(name)) == 1]
    stem = _stem(shorts[0] if shorts else option.names[0])
    return not shorts, stem.casefold(), stem.swapcase()


def _placeholder(title, arity, /):
    return " ".join(f"<{title}>" for _ in range(arity))


def synopsis_usage(option, /):
    """
    the synopsis token of an option.

    examples
    - [-v]
    - [{-n <name> | --name <name>}]
    - --file <file>          (required)
    - [-D <property>...]     (multiple)
    """
    if not isinstance(option, OptionMetadata):
        raise TypeError("synopsis_usage() argument must be option metadata")
    argument = _placeholder(option.title, option.arity)
    forms = [f"{name} {argument}" if argument else name for name in option.names]
    usage = " | ".join(forms)
    if len(forms) > 1:
        usage = "{" + usage + "}"
    if option.multiple:
        usage += "..."
    if not option.required:
        usage = "[" + usage + "]"
    return usage


def arguments_usage(arguments, /):
    """the synopsis token of an arguments clause, e.g. [<file>...]."""
    if not isinstance(arguments, ArgumentsMetadata):
        raise TypeError("arguments_usage() argument must be arguments metadata")
    usage = " ".join(f"<{title}>" for title in arguments.titles)
    if arguments.multiple:
        usage += "..."
    if not arguments.required:
        usage = "[" + usage + "]"
    return usage


def describe(metadata, /):
    """
    the term used in OPTIONS: every alias with its placeholder for options
    ("-n <name>, --name <name>"), the placeholders for arguments.
    """
    if isinstance(metadata, OptionMetadata):
        argument = _placeholder(metadata.title, metadata.arity)
        return ", ".join(f"{name} {argument}" if argument else name for name in metadata.names)
    if isinstance(metadata, ArgumentsMetadata):
        return " ".join(f"<{title}>" for title in metadata.titles)
    raise TypeError("describe() argument must be option or arguments metadata")


# --- builders ---

class Usage:
    """
    Base of the usage builders.

    Parameters
    - columns: line width of the TEXT format (positive integer).
    - key: option ordering; Unset → option_key, None → declaration order,
      otherwise a key callable taking an OptionMetadata.
    """

    def __init__(self, columns=79, key=Unset):
        if not isinstance(columns, int) or isinstance(columns, bool):
            raise TypeError("usage 'columns' must be an integer")
        if columns < 1:
            raise ValueError("usage 'columns' must be greater than 0")
        if key is not Unset and key is not None and not callable(key):
            raise TypeError("usage 'key' must be callable or None")
        self._columns = columns
        self._key = option_key if key is Unset else key

    @property
    def columns(self):
        return self._columns

    def sort(self, options, /):
        options = list(options)
        if self._key is not None:
            options.sort(key=self._key)
        return options

    def visible(self, options, /):
        return [option for option in self.sort(options) if not option.hidden]

    def tokens(self, options, /):
        return tuple(map(synopsis_usage, self.visible(options)))

    def options_section(self, options, arguments=None, /):
        """OPTIONS entries; a '--' separator and the arguments come last."""
        blocks = [Entry(describe(option), option.description) for option in self.visible(options)]
        if arguments is not None:
            blocks.append(Entry("--", SEPARATOR_DESCRIPTION))
            blocks.append(Entry(describe(arguments), arguments.description))
        return Section("OPTIONS", tuple(blocks)) if blocks else None

    def document(self, *args, **kwargs):
        raise NotImplementedError

    def render(self, format, /, *args, **kwargs):
        return render_document(format, self.document(*args, **kwargs), columns=self._columns)

    def text(self, /, *args, colorful=True, **kwargs):
        return _text(self.document(*args, **kwargs), self._columns, colorful=colorful)


def _merge(*scopes):
    merged = []
    for options in scopes:
        merged.extend(option for option in options if option not in merged)
    return merged


class CommandUsage(Usage):
    """
    Usage of a single command.

    program_name/group_name are the invoking names of the enclosing scopes;
    when given, the options of that scope are listed in the synopsis right
    after the name and included in OPTIONS.
    """

    def document(self, command, program_name=None, group_name=None):
        names = tuple(name for name in (program_name, group_name, command.name) if name)

        scopes = []
        if program_name:
            scopes.append((program_name, command.global_options))
        if group_name:
            scopes.append((group_name, command.group_options))
        scopes.append((command.name, command.command_options))

        segments = []
        options = []
        for name, scoped in scopes:
            scoped = [option for option in scoped if option not in options]
            options.extend(scoped)
            segments.append((name, self.tokens(scoped)))

        arguments = command.arguments
        sections = [
            Section("SYNOPSIS", (Synopsis(
                tuple(segments),
                arguments_usage(arguments) if arguments is not None else None,
            ),)),
        ]
        if section := self.options_section(options, arguments):
            sections.append(section)
        if command.discussion:
            sections.append(Section("DISCUSSION", (Verbatim(command.discussion),)))
        if command.examples:
            sections.append(Section("EXAMPLES", (Table(command.examples),)))

        return Document(names, command.description, tuple(sections))


def _listing(group, /):
    """COMMANDS entries of a group: its visible commands then sub-groups."""
    path = " ".join(group.path)
    for command in group.commands:
        if not command.hidden:
            yield Entry(f"{path} {command.name}", command.description)
    for subgroup in group.subgroups:
        if not subgroup.hidden:
            yield Entry(" ".join(subgroup.path), subgroup.description)
            yield from _listing(subgroup)


class CommandGroupUsage(Usage):
    """Usage of a command group: one synopsis line per visible command."""

    def document(self, program, group):
        program_tokens = self.tokens(program.options)
        group_name = " ".join(group.path)
        group_tokens = self.tokens(group.options)

        synopses = []
        commands = [command for command in group.commands if not command.hidden]
        if group.default_command is not None and group.default_command not in commands:
            if not group.default_command.hidden:
                commands.insert(0, group.default_command)
        for command in commands:
            synopses.append(Synopsis(
                (
                    (program.name, program_tokens),
                    (group_name, group_tokens),
                    (command.name, self.tokens(command.command_options)),
                ),
                arguments_usage(command.arguments) if command.arguments is not None else None,
            ))
        for subgroup in group.subgroups:
            if not subgroup.hidden:
                synopses.append(Synopsis((
                    (program.name, program_tokens),
                    (group_name, group_tokens),
                    (subgroup.name, ("<command>", "[<args>]")),
                )))
        if not synopses:
            synopses.append(Synopsis(((program.name, program_tokens), (group_name, group_tokens))))

        sections = [Section("SYNOPSIS", tuple(synopses))]
        if section := self.options_section(_merge(program.options, group.options)):
            sections.append(section)

        blocks = []
        if group.default_command is not None and group.default_command.description:
            blocks.append(Paragraph(f"With no arguments, {group.default_command.description}"))
        blocks.extend(
            Entry(entry.term.removeprefix(group_name + " "), entry.description)
            for entry in _listing(group)
        )
        if blocks:
            sections.append(Section("COMMANDS", tuple(blocks)))

        return Document((program.name, group_name), group.description, tuple(sections))


class GlobalUsage(Usage):
    """Full usage of a program: global options and every visible command."""

    def document(self, program):
        sections = [
            Section("SYNOPSIS", (Synopsis(((program.name, self.tokens(program.options) + ("<command>", "[<args>]")),)),)),
        ]
        if section := self.options_section(program.options):
            sections.append(section)

        blocks = [Entry(command.name, command.description) for command in program.commands if not command.hidden]
        for group in program.groups:
            if not group.hidden:
                blocks.append(Entry(group.name, group.description))
                blocks.extend(_listing(group))
        if blocks:
            sections.append(Section("COMMANDS", tuple(blocks)))

        return Document((program.name,), program.description, tuple(sections))


class GlobalUsageSummary(Usage):
    """The short overview printed when help is asked without a target."""

    def document(self, program):
        rows = [(command.name, command.description or "") for command in program.commands if not command.hidden]
        rows.extend((group.name, group.description or "") for group in program.groups if not group.hidden)

        sections = [
            Section(None, (Synopsis(
                ((program.name, self.tokens(program.options) + ("<command>", "[<args>]")),), label="usage:",
            ),), indent=0),
        ]
        if rows:
            sections.append(Section(
                f"The most commonly used {program.name} commands are:", (Table(tuple(rows), listing=True),), indent=4,
            ))
        sections.append(Section(None, (Paragraph(
            f"See '{program.name} help <command>' for more information on a specific command."
        ),), indent=0))

        return Document((program.name,), program.description, tuple(sections), named=False)


# --- TEXT backend ---

def _text(document, columns, /, *, colorful=True):
    styles = palette(**{
        "section-title": "bold #00E6FF",  # cyan headings
        "name": "bold #FF4D94",  # magenta-pink names
        "description": "#A3A3A3",  # neutral gray prose
        "synopsis-option": "#FFD600",  # amber option tokens
        "synopsis-arguments": "italic #FFD600",
        "entry-term": "bold #36C5F0",  # sky-blue option terms
        "literal": "#D1D5DB",
        "example-caption": "bold #22C55E",  # green captions
        "example": "#E5E7EB",
    })

    def styler(style):
        return styles[style] if colorful else ""

    out = UsagePrinter(columns)

    def heading(title):
        out.append_words([title], styler("section-title")).newline()

    if document.named:
        heading("NAME")
        name = out.indented(8).append_words(document.names, styler("name"))
        if document.description:
            name.append_words(["-"]).append(document.description, styler("description"))
        name.newline().newline()

    for section in document.sections:
        if section.title:
            heading(section.title)
        body = out.indented(section.indent)
        for previous, block in zip((None, *section.blocks), section.blocks):
            if isinstance(previous, Paragraph) and isinstance(block, Entry):
                body.newline()
            match block:
                case Synopsis(segments, arguments, label):
                    first = segments[0][0] if segments else ""
                    hang = len(first) + 1 + (len(label) + 1 if label else 0)
                    line = body.hanging(hang)
                    if label:
                        line.append_words([label])
                    for name, tokens in segments:
                        line.append_words([name], styler("name"))
                        line.append_words(tokens, styler("synopsis-option"))
                    if arguments:
                        line.append_words(["[--]"], styler("synopsis-option"))
                        line.append_words([arguments], styler("synopsis-arguments"))
                    line.newline()
                case Entry(term, description):
                    body.append(term, styler("entry-term")).newline()
                    if description:
                        body.indented(4).append(description, styler("description")).newline()
                    body.newline()
                case Paragraph(value):
                    body.append(value, styler("description")).newline()
                case Verbatim(value):
                    body.append_literal(value, styler("literal"))
                case Table(rows, listing):
                    if listing:
                        body.append_table(rows, (styler("name"), styler("description")))
                    else:
                        body.append_table(rows, (styler("example-caption"), styler("example")))
        if section.blocks and not isinstance(section.blocks[-1], Entry):
            out.newline()

    text = out.text
    text.rstrip()
    text.append("\n")
    return text


# --- HTML backend ---

_ROW = '<div class="row">\n<div class="span8 offset{}">\n{}\n</div>\n</div>\n'
_BREAK = "<br/>\n"


def _escape(value, /):
    return html.escape(value or "", quote=False).replace("\n", "<br/>")


def _html(document, /):
    parts = [
        "<html>\n",
        "<head>\n",
        '<link href="css/bootstrap.min.css" rel="stylesheet" media="screen">\n',
        "</head>\n",
        "<style>\n    body { margin: 50px; }\n</style>\n",
        "<body>\n",
    ]
    title = _escape(" ".join(document.names))
    if document.named:
        parts.append("<hr/>\n")
        parts.append(f'<h1 class="text-info">{title} Manual Page</h1>\n')
        parts.append("<hr/>\n")
        parts.append('<h1 class="text-info">NAME</h1>\n' + _BREAK)
        name = title
        if document.description:
            name += f" &mdash; {_escape(document.description)}"
        parts.append(_ROW.format(1, name))

    for section in document.sections:
        if section.title:
            parts.append(_BREAK)
            parts.append(f'<h1 class="text-info">{_escape(section.title)}</h1>\n' + _BREAK)
        for block in section.blocks:
            match block:
                case Synopsis(segments, arguments, label):
                    words = [label] if label else []
                    for name, tokens in segments:
                        words.append(name)
                        words.extend(tokens)
                    if arguments:
                        words.extend(("[--]", arguments))
                    parts.append(_ROW.format(1, _escape(" ".join(words))))
                case Entry(term, description):
                    parts.append(_ROW.format(1, _escape(term)))
                    if description:
                        parts.append(_ROW.format(2, _escape(description)))
                case Paragraph(value) | Verbatim(value):
                    parts.append(_ROW.format(1, _escape(value)))
                case Table(rows, listing):
                    parts.append('<div class="row">\n<div class="span12 offset1">\n')
                    for caption, value in rows:
                        if listing:
                            parts.append(f"<p>\n<b>{_escape(caption)}</b> {_escape(value)}\n</p>\n")
                        else:
                            parts.append(f"<p>\n{_escape(caption)}\n</p>\n")
                            parts.append(f"<pre>\n{html.escape(value, quote=False)}\n</pre>\n")
                    parts.append("</div>\n</div>\n")

    parts.append("</body>\n")
    parts.append("</html>\n")
    return "".join(parts)


# --- RONN backend ---

_MARKDOWN = re.compile(r"([\\`*_\[\]<>#|])")


def _markdown(value, /):
    return _MARKDOWN.sub(r"\\\1", value or "")


def _ronn(document, /):
    parts = []
    if document.named:
        header = "_".join(word for name in document.names for word in name.split()) + "(1)"
        if document.description:
            header += " -- " + _markdown(document.description)
        parts.append(header + "\n" + "=" * 10)

    for section in document.sections:
        if section.title:
            parts.append("## " + _markdown(section.title))
        for block in section.blocks:
            match block:
                case Synopsis(segments, arguments, label):
                    words = [label] if label else []
                    for name, tokens in segments:
                        words.append(f"`{name}`")
                        words.extend(tokens)
                    if arguments:
                        words.extend(("[--]", arguments))
                    parts.append(" ".join(words))
                case Entry(term, description):
                    parts.append(f"* {term}:\n{_markdown(description)}".rstrip())
                case Paragraph(value) | Verbatim(value):
                    parts.append(_markdown(value.strip("\n")))
                case Table(rows, listing):
                    for caption, value in rows:
                        if listing:
                            parts.append(f"* `{caption}`:\n{_markdown(value)}".rstrip())
                        else:
                            code = "\n".join("    " + line if line.strip() else "" for line in value.strip("\n").split("\n"))
                            parts.append(f"* {_markdown(caption)}:\n\n{code}")

    return "\n\n".join(parts) + "\n"


def render_document(format, document, /, *, columns=79):
    """render a Document in the requested format; always returns a str."""
    match UsageFormat(format):
        case UsageFormat.TEXT:
            return _text(document, columns, colorful=False).plain
        case UsageFormat.HTML:
            return _html(document)
        case UsageFormat.RONN:
            return _ronn(document)


def render(format, command, program_name=None, group_name=None, /, *, columns=79, key=Unset):
    """
    render the usage of a command (with the invoking program/group names).
    """
    logger.debug("rendering %s usage of command %r", UsageFormat(format).value, command.name)
    return CommandUsage(columns, key).render(format, command, program_name, group_name)


def display(format, command, program_name=None, group_name=None, /, *, console=None, colorful=True, columns=Unset, key=Unset):
    """
    print the usage of a command to a rich console (stdout by default).

    TEXT is printed styled; HTML and RONN are printed as raw markup. When
    columns is omitted, the console width is used.
    """
    console = console if console is not None else Console()
    usage = CommandUsage(console.width if columns is Unset else columns, key)
    if UsageFormat(format) is UsageFormat.TEXT:
        console.print(usage.text(command, program_name, group_name, colorful=colorful), soft_wrap=True, end="")
    else:
        console.print(usage.render(format, command, program_name, group_name), markup=False, highlight=False, emoji=False, soft_wrap=True, end="")


__all__ = (
    "UsageFormat",
    "Document",
    "Section",
    "Synopsis",
    "Entry",
    "Paragraph",
    "Verbatim",
    "Table",
    "Usage",
    "CommandUsage",
    "CommandGroupUsage",
    "GlobalUsage",
    "GlobalUsageSummary",
    "SEPARATOR_DESCRIPTION",
    "option_key",
    "synopsis_usage",
    "arguments_usage",
    "describe",
    "render_document",
    "render",
    "display",
)
