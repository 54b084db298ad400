"""
Argosy help dispatcher: from a path of names to a rendered usage.

Resolution (resolve)
- []                       → global summary
- [<program name>]         → global detail (full program usage)
- [<default command>]      → command detail, no group
- [<group>]                → group detail
- [<group>, <command>]     → command detail within the group
- [<group>, <unknown>]     → UnknownCommand naming both
- [<unknown>]              → UnknownCommand naming the first token

Groups
- Group names are matched exactly, one segment per name. Multi-word tokens
  ("remote branch") and successive tokens both walk nested sub-groups.
- suffix=True restores the legacy rule: the first token selects the first
  declared top-level group whose name it ends with.
- Hidden groups and commands are never listed but still resolve by name.

Outcomes
- help() returns Rendered or UnknownCommand; nothing is printed and nothing
  is raised for an unknown path. show() prints the outcome with rich and
  hands it back, so the caller decides the exit status.
"""
import logging
from enum import Enum
from typing import NamedTuple, Any

from rich.console import Console
from rich.text import Text

from .faults import FaultCode, UnknownCommandError
from .metadata import ProgramMetadata
from .usage import UsageFormat, CommandUsage, CommandGroupUsage, GlobalUsage, GlobalUsageSummary
from .utils import Unset

logger = logging.getLogger(__name__)


class HelpTarget(Enum):
    GLOBAL_SUMMARY = "global-summary"
    GLOBAL_DETAIL = "global-detail"
    GROUP_DETAIL = "group-detail"
    COMMAND_DETAIL = "command-detail"


class Resolution(NamedTuple):
    """a resolved help target, with the group and command it addresses."""
    target: HelpTarget
    group: Any = None
    command: Any = None


class Rendered(NamedTuple):
    """a help target rendered in some format."""
    target: HelpTarget
    text: str
    group: Any = None
    command: Any = None

    def __str__(self):
        return self.text

    def __rich__(self):
        return Text(self.text, end="")


class UnknownCommand(NamedTuple):
    """
    a path that names nothing.

    - path: the names reported ("grp x" inside a group, "zzz" otherwise).
    - group: the group the last name was searched in, or None.
    """
    path: tuple[str, ...]
    group: Any = None

    @property
    def code(self):
        return FaultCode.UNKNOWN_GROUP_COMMAND if self.group is not None else FaultCode.UNKNOWN_COMMAND

    def fault(self, **options):
        """the equivalent exception, for callers that prefer raising."""
        return UnknownCommandError(str(self), code=self.code, **options)

    def __str__(self):
        return f"Unknown command {' '.join(self.path)}"

    def __rich__(self):
        return self.fault().__rich__()


def _words(path, /):
    if isinstance(path, str):
        return path.split()
    return [word for token in path for word in str(token).split()]


def _descend(group, words, /):
    """follow sub-groups from group while the next word names one."""
    while words and (subgroup := group.find_subgroup(words[0])) is not None:
        group, words = subgroup, words[1:]
    return group, words


def resolve(program, path=(), /, *, suffix=False):
    """
    resolve path (a sequence of names, or a string of words) to a Resolution
    or an UnknownCommand.
    """
    if not isinstance(program, ProgramMetadata):
        raise TypeError("resolve() argument must be program metadata")
    words = _words(path)
    logger.debug("resolving help path %r", words)

    if not words:
        return Resolution(HelpTarget.GLOBAL_SUMMARY)

    name, *rest = words
    if name == program.name:
        return Resolution(HelpTarget.GLOBAL_DETAIL)

    if (command := program.find_command(name)) is not None:
        return Resolution(HelpTarget.COMMAND_DETAIL, command=command)

    if suffix:
        group = next((group for group in program.groups if name.endswith(group.name)), None)
    else:
        group = program.find_group(name)
    if group is None:
        return UnknownCommand((name,))

    group, rest = _descend(group, rest)
    if not rest:
        return Resolution(HelpTarget.GROUP_DETAIL, group=group)

    command = group.find_command(rest[0])
    if command is None and group.default_command is not None and group.default_command.name == rest[0]:
        command = group.default_command
    if command is None:
        return UnknownCommand((*group.path, rest[0]), group)
    return Resolution(HelpTarget.COMMAND_DETAIL, group=group, command=command)


def help(program, path=(), /, *, format=UsageFormat.TEXT, columns=79, key=Unset, suffix=False):
    """
    resolve path and render its usage.

    returns Rendered(target, text, group, command) or UnknownCommand.
    """
    resolution = resolve(program, path, suffix=suffix)
    if isinstance(resolution, UnknownCommand):
        logger.debug("help path %r is unknown", resolution.path)
        return resolution

    target, group, command = resolution
    match target:
        case HelpTarget.GLOBAL_SUMMARY:
            text = GlobalUsageSummary(columns, key).render(format, program)
        case HelpTarget.GLOBAL_DETAIL:
            text = GlobalUsage(columns, key).render(format, program)
        case HelpTarget.GROUP_DETAIL:
            text = CommandGroupUsage(columns, key).render(format, program, group)
        case HelpTarget.COMMAND_DETAIL:
            group_name = " ".join(group.path) if group is not None else None
            text = CommandUsage(columns, key).render(format, command, program.name, group_name)

    logger.debug("rendered %s help as %s", target.value, UsageFormat(format).value)
    return Rendered(target, text, group, command)


def show(program, path=(), /, *, console=None, **options):
    """
    print the help outcome to a rich console (stdout by default) and return it.

    options are those of help(); columns defaults to the console width.
    """
    console = console if console is not None else Console()
    options.setdefault("columns", console.width)
    outcome = help(program, path, **options)
    if isinstance(outcome, UnknownCommand):
        console.print(outcome)
    else:
        console.print(outcome.text, markup=False, highlight=False, emoji=False, soft_wrap=True, end="")
    return outcome


__all__ = (
    "HelpTarget",
    "Resolution",
    "Rendered",
    "UnknownCommand",
    "resolve",
    "help",
    "show",
)
