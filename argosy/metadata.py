r"""
Argosy metadata model: the immutable description of a command-line program.

Overview
- ProgramMetadata: program name/description, the default group's commands,
  the command groups (nested sub-groups included) and the global options.
- CommandGroupMetadata: a named group of commands with its own options, an
  optional default command and nested sub-groups. A name containing spaces
  ("remote branch") addresses a sub-group; the program grafts it under an
  implicit "remote" parent.
- CommandMetadata: one command with its discussion, examples, the three
  option scopes it inherits (global, group, command) and at most one
  arguments clause.
- OptionMetadata: an option with one or more aliases, arity, flags and
  attached restrictions.
- ArgumentsMetadata: the trailing positional arguments clause.

Lifecycle
- Objects are built once by a metadata builder and are read-only afterwards:
  every public field is a property returning an immutable view, and
  attribute assignment raises AttributeError once __init__ completes.

Validation highlights (configuration time)
- Option names must match r"--?[^\W\d_](-?[^\W_]+)*" and be unique per option.
- Options merged across scopes must not share an alias unless they are the
  same option (DuplicateNameError).
- Group, sub-group and command names are unique among siblings.
- Examples are (caption, text) pairs, or flat caption/example/blank triples;
  anything else raises MalformedExamplesError.
"""
import functools
import logging
import operator
import re
from collections.abc import Iterable, Sequence
from enum import Enum

from .faults import DuplicateNameError, MalformedExamplesError
from .restrictions import check
from .utils import Unset, coalesce, mirror, frozen, ordinal, rename

logger = logging.getLogger(__name__)


class OptionScope(Enum):
    GLOBAL = "global"
    GROUP = "group"
    COMMAND = "command"


class MetadataType(type):
    """
    Metaclass giving every metadata class the same introspection surface.

    Responsibilities
    - Publish each name in __introspectable__ as a read-only property over the
      private "_<name>" field (via mirror()).
    - Provide __repr__/__rich_repr__ restricted to __displayable__ when set.
    - Derive __typename__ from the class name ("OptionMetadata" →
      "option-metadata") for messages.
    - Seal instances after construction (via frozen()).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return frozen(self)


_OPTION_NAME = re.compile(r"--?[^\W\d_](-?[^\W_]+)*")
_SEGMENT = re.compile(r"(?!-)\S+")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the shared 'name', 'description' and 'hidden' fields.

    - name (when present): non-empty after trimming, made of whitespace
      separated segments that do not start with '-'.
    - description: Unset → None; otherwise a non-empty string after trimming.
    - hidden: coerced to bool.
    """
    if "name" in metadata:
        if not isinstance(name := metadata["name"], str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not (segments := name.split()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        if not all(map(_SEGMENT.fullmatch, segments)):
            raise ValueError(f"{cls.__typename__} 'name' segments cannot start with '-'")
        metadata["name"] = " ".join(segments)

    if not isinstance(description := metadata["description"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    metadata["description"] = coalesce(description)

    if "hidden" in metadata:
        metadata["hidden"] = bool(metadata["hidden"])


def _sanitize_restrictions(cls, metadata, /):
    if not isinstance(restrictions := metadata["restrictions"], Iterable):
        raise TypeError(f"{cls.__typename__} 'restrictions' must be iterable")
    restrictions = tuple(restrictions)
    for restriction in restrictions:
        if not callable(getattr(restriction, "validate", None)):
            raise TypeError(f"{cls.__typename__} 'restrictions' must provide a validate() method")
    metadata["restrictions"] = restrictions


def _sanitize_arity(cls, metadata, /, *, minimum, unbounded=False):
    arity = metadata["arity"]
    if arity is None and unbounded:
        return
    if not isinstance(arity, int) or isinstance(arity, bool):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")
    if arity < minimum:
        raise ValueError(f"{cls.__typename__} 'arity' must be at least {minimum}")


def _sanitize_titles(cls, titles, /):
    sanitized = []
    for title in titles:
        if not isinstance(title, str):
            raise TypeError(f"{cls.__typename__} titles must be strings")
        if not (title := title.strip()):
            raise ValueError(f"{cls.__typename__} titles cannot be empty-strings")
        sanitized.append(title)
    return tuple(sanitized)


def _sanitize_examples(cls, examples, /):
    """
    Internal: normalize examples into (caption, text) pairs.

    accepted shapes
    - a sequence of 2-item (caption, text) sequences;
    - the flat legacy shape: strings in caption/example/blank-line triples.
      A leading '*' bullet on captions is dropped.
    """
    if isinstance(examples, str) or not isinstance(examples, Iterable):
        raise TypeError(f"{cls.__typename__} 'examples' must be a sequence")
    examples = list(examples)

    if all(isinstance(example, str) for example in examples):
        if len(examples) % 3:
            raise MalformedExamplesError(
                f"{len(examples)} example lines do not form caption/example/blank-line triples"
            )
        pairs = []
        for index in range(0, len(examples), 3):
            caption, text, blank = examples[index:index + 3]
            if blank.strip():
                raise MalformedExamplesError(
                    f"the {ordinal(index // 3 + 1)} example is not followed by a blank line"
                )
            pairs.append((caption.strip().removeprefix("*").strip(), text))
        examples = pairs

    sanitized = []
    for index, example in enumerate(examples, start=1):
        if isinstance(example, str) or not isinstance(example, Sequence) or len(example) != 2:
            raise MalformedExamplesError(f"the {ordinal(index)} example is not a (caption, text) pair")
        caption, text = example
        if not isinstance(caption, str) or not isinstance(text, str):
            raise MalformedExamplesError(f"the {ordinal(index)} example must hold strings")
        if not text.strip():
            raise MalformedExamplesError(f"the {ordinal(index)} example has no text")
        sanitized.append((caption.strip(), text))
    return tuple(sanitized)


def _ensure_unique(cls, names, what, /):
    seen = set()
    for name in names:
        if name in seen:
            raise DuplicateNameError(f"{cls.__typename__} declares {what} {name!r} more than once")
        seen.add(name)


class OptionMetadata(metaclass=MetadataType):
    """
    A named option.

    Parameters
    - names: one or more aliases ("-v", "--verbose", "-long-name").
    - title: placeholder shown for the option's value ("<title>").
    - description: Unset | str, becomes None when omitted.
    - arity: number of values consumed; 0 makes a presence-only flag.
    - required: the option must be given (rendered without brackets).
    - hidden: suppressed from every rendered output.
    - multiple: the option may be repeated (rendered with a '...' marker).
    - restrictions: restrictions applied to each value.

    Equality
    - two options are equal when they declare the same set of aliases; this is
      what lets an option shared by several scopes be listed once.
    """
    __introspectable__ = (
        "names",
        "title",
        "description",
        "arity",
        "required",
        "hidden",
        "multiple",
        "restrictions",
    )
    __displayable__ = ("names", "title", "description", "arity", "required", "hidden", "multiple")

    def __init__(
            self,
            *names,
            title="value",
            description=Unset,
            arity=1,
            required=False,
            hidden=False,
            multiple=False,
            restrictions=(),
    ):
        cls = type(self)
        metadata = {
            "description": description,
            "hidden": hidden,
            "arity": arity,
            "restrictions": restrictions,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_arity(cls, metadata, minimum=0)
        _sanitize_restrictions(cls, metadata)

        if not names:
            raise TypeError(f"{cls.__typename__} must specify at least one name")
        sanitized = []
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} names must be strings")
            elif not (name := name.strip()):
                raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
            elif not _OPTION_NAME.fullmatch(name):
                raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
            elif name in sanitized:
                raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
            sanitized.append(name)

        title, = _sanitize_titles(cls, (title,))

        self._names = tuple(sanitized)
        self._title = title
        self._description = metadata["description"]
        self._arity = metadata["arity"]
        self._required = bool(required)
        self._hidden = metadata["hidden"]
        self._multiple = bool(multiple)
        self._restrictions = metadata["restrictions"]

    def validate(self, value, /):
        """
        run the attached restrictions; returns a tuple of violations.
        """
        return check(self._restrictions, value)

    def __eq__(self, other):
        if not isinstance(other, OptionMetadata):
            return NotImplemented
        return frozenset(self._names) == frozenset(other._names)

    def __hash__(self):
        return hash(frozenset(self._names))


class ArgumentsMetadata(metaclass=MetadataType):
    """
    The positional arguments clause of a command.

    Parameters
    - titles: one or more placeholders ("<file>", "<dest>").
    - description: Unset | str, becomes None when omitted.
    - required: at least one argument must be given.
    - arity: None for an unbounded trailing capture, or a positive count.
    - restrictions: restrictions applied to each argument.
    """
    __introspectable__ = ("titles", "description", "required", "arity", "restrictions")
    __displayable__ = ("titles", "description", "required", "arity")

    def __init__(self, *titles, description=Unset, required=False, arity=None, restrictions=()):
        cls = type(self)
        metadata = {
            "description": description,
            "arity": arity,
            "restrictions": restrictions,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_arity(cls, metadata, minimum=1, unbounded=True)
        _sanitize_restrictions(cls, metadata)
        if not titles:
            raise TypeError(f"{cls.__typename__} must specify at least one title")

        self._titles = _sanitize_titles(cls, titles)
        self._description = metadata["description"]
        self._required = bool(required)
        self._arity = metadata["arity"]
        self._restrictions = metadata["restrictions"]

    @property
    def multiple(self):
        return self._arity is None or self._arity > len(self._titles)

    def validate(self, value, /):
        return check(self._restrictions, value)

    def validate_each(self, values, /):
        """
        validate every positional value; messages are prefixed with the
        ordinal position ("from second position, value ...").
        """
        violations = []
        for index, value in enumerate(values, start=1):
            for violation in check(self._restrictions, value):
                violations.append(violation._replace(message=f"from {ordinal(index)} position, {violation.message}"))
        return tuple(violations)


def _sanitize_options(cls, options, field, /):
    if not isinstance(options, Iterable):
        raise TypeError(f"{cls.__typename__} '{field}' must be iterable")
    options = tuple(options)
    if not all(isinstance(option, OptionMetadata) for option in options):
        raise TypeError(f"{cls.__typename__} '{field}' must hold option metadata")
    return options


def _merge_options(cls, *scopes):
    """
    Internal: merge option scopes in order, dropping repeated options and
    rejecting distinct options that share an alias.
    """
    merged = []
    owners = {}
    for options in scopes:
        for option in options:
            if option in merged:
                continue
            for name in option.names:
                if name in owners:
                    raise DuplicateNameError(
                        f"{cls.__typename__} option name {name!r} is declared by both "
                        f"{owners[name].names!r} and {option.names!r}"
                    )
                owners[name] = option
            merged.append(option)
    return tuple(merged)


class CommandMetadata(metaclass=MetadataType):
    """
    A command.

    Parameters
    - name: command name (a single word).
    - description: Unset | str, one line shown in listings and NAME.
    - discussion: Unset | str, free text copied verbatim into DISCUSSION.
    - examples: (caption, text) pairs (or legacy flat triples, see module doc).
    - hidden: omitted from listings; still reachable by exact name.
    - global_options / group_options / command_options: the three scopes.
    - arguments: ArgumentsMetadata | None.
    """
    __introspectable__ = (
        "name",
        "description",
        "discussion",
        "examples",
        "hidden",
        "global_options",
        "group_options",
        "command_options",
        "arguments",
    )
    __displayable__ = ("name", "description", "hidden", "arguments")

    def __init__(
            self,
            name,
            description=Unset,
            *,
            discussion=Unset,
            examples=(),
            hidden=False,
            global_options=(),
            group_options=(),
            command_options=(),
            arguments=None,
    ):
        cls = type(self)
        metadata = {"name": name, "description": description, "hidden": hidden}
        _sanitize_metadata(cls, metadata)
        if " " in metadata["name"]:
            raise ValueError(f"{cls.__typename__} 'name' must be a single word")

        if not isinstance(discussion, str | Unset):
            raise TypeError(f"{cls.__typename__} 'discussion' must be a string")
        if discussion and not discussion.strip():
            discussion = Unset

        if arguments is not None and not isinstance(arguments, ArgumentsMetadata):
            raise TypeError(f"{cls.__typename__} 'arguments' must be arguments metadata")

        self._name = metadata["name"]
        self._description = metadata["description"]
        self._discussion = coalesce(discussion) or None
        self._examples = _sanitize_examples(cls, examples)
        self._hidden = metadata["hidden"]
        self._global_options = _sanitize_options(cls, global_options, "global_options")
        self._group_options = _sanitize_options(cls, group_options, "group_options")
        self._command_options = _sanitize_options(cls, command_options, "command_options")
        self._arguments = arguments
        self._options = _merge_options(cls, self._global_options, self._group_options, self._command_options)

    @property
    def options(self):
        """all options of the three scopes, deduplicated, in scope order."""
        return self._options

    def scoped(self, scope, /):
        match OptionScope(scope):
            case OptionScope.GLOBAL:
                return self._global_options
            case OptionScope.GROUP:
                return self._group_options
            case OptionScope.COMMAND:
                return self._command_options

    def find_option(self, name, /):
        for option in self._options:
            if name in option.names:
                return option
        return None


class CommandGroupMetadata(metaclass=MetadataType):
    """
    A group of commands.

    Parameters
    - name: group name; several words denote a nested sub-group path.
    - description: Unset | str.
    - hidden: omitted from listings; still reachable by exact name.
    - default_command: CommandMetadata | None, run when no command is named.
    - commands: ordered commands of the group.
    - options: group-scoped options.
    - subgroups: nested CommandGroupMetadata.
    - parent: names of the enclosing groups (filled in by ProgramMetadata).
    """
    __introspectable__ = (
        "name",
        "description",
        "hidden",
        "default_command",
        "commands",
        "options",
        "subgroups",
        "parent",
    )
    __displayable__ = ("name", "description", "hidden", "commands", "subgroups")

    def __init__(
            self,
            name,
            description=Unset,
            *,
            hidden=False,
            default_command=None,
            commands=(),
            options=(),
            subgroups=(),
            parent=(),
    ):
        cls = type(self)
        metadata = {"name": name, "description": description, "hidden": hidden}
        _sanitize_metadata(cls, metadata)

        if default_command is not None and not isinstance(default_command, CommandMetadata):
            raise TypeError(f"{cls.__typename__} 'default_command' must be command metadata")
        commands = tuple(commands)
        if not all(isinstance(command, CommandMetadata) for command in commands):
            raise TypeError(f"{cls.__typename__} 'commands' must hold command metadata")
        subgroups = tuple(subgroups)
        if not all(isinstance(group, CommandGroupMetadata) for group in subgroups):
            raise TypeError(f"{cls.__typename__} 'subgroups' must hold command group metadata")
        _ensure_unique(cls, [command.name for command in commands], "command")
        _ensure_unique(
            cls,
            [command.name for command in commands] + [group.segments[0] for group in subgroups],
            "sub-group or command",
        )

        self._name = metadata["name"]
        self._description = metadata["description"]
        self._hidden = metadata["hidden"]
        self._default_command = default_command
        self._commands = commands
        self._options = _sanitize_options(cls, options, "options")
        self._subgroups = subgroups
        self._parent = tuple(parent)

    @property
    def segments(self):
        return tuple(self._name.split(" "))

    @property
    def path(self):
        """names from the top-level group down to this group."""
        return self._parent + self.segments

    def find_command(self, name, /):
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def find_subgroup(self, name, /):
        for group in self._subgroups:
            if group.name == name:
                return group
        return None


def _graft(groups, tree, /):
    """
    Internal: fold groups (possibly multi-word names and nested sub-groups)
    into a tree of plain nodes keyed by single segment names.
    """
    for group in groups:
        *ancestors, last = group.segments
        branch = tree
        for segment in ancestors:
            branch = branch.setdefault(segment, {"group": None, "children": {}})["children"]
        node = branch.setdefault(last, {"group": None, "children": {}})
        if node["group"] is not None:
            raise DuplicateNameError(f"command group {' '.join(group.segments)!r} is declared more than once")
        node["group"] = group
        _graft(group.subgroups, node["children"])
    return tree


def _build(tree, parent, /):
    groups = []
    for name, node in tree.items():
        subgroups = _build(node["children"], parent + (name,))
        if (group := node["group"]) is None:
            logger.debug("creating implicit command group %r", " ".join(parent + (name,)))
            groups.append(CommandGroupMetadata(name, subgroups=subgroups, parent=parent))
            continue
        groups.append(CommandGroupMetadata(
            name,
            Unset if group.description is None else group.description,
            hidden=group.hidden,
            default_command=group.default_command,
            commands=group.commands,
            options=group.options,
            subgroups=subgroups,
            parent=parent,
        ))
    return tuple(groups)


class ProgramMetadata(metaclass=MetadataType):
    """
    A whole program.

    Parameters
    - name: program name (what users type first).
    - description: Unset | str.
    - commands: commands of the default group (reachable without a group name).
    - groups: command groups; names with spaces and nested sub-groups are
      grafted into a single tree, creating implicit parents where needed.
    - options: global options.
    """
    __introspectable__ = ("name", "description", "commands", "groups", "options")
    __displayable__ = ("name", "description", "commands", "groups")

    def __init__(self, name, description=Unset, *, commands=(), groups=(), options=()):
        cls = type(self)
        metadata = {"name": name, "description": description}
        _sanitize_metadata(cls, metadata)
        if " " in metadata["name"]:
            raise ValueError(f"{cls.__typename__} 'name' must be a single word")

        commands = tuple(commands)
        if not all(isinstance(command, CommandMetadata) for command in commands):
            raise TypeError(f"{cls.__typename__} 'commands' must hold command metadata")
        groups = tuple(groups)
        if not all(isinstance(group, CommandGroupMetadata) for group in groups):
            raise TypeError(f"{cls.__typename__} 'groups' must hold command group metadata")

        groups = _build(_graft(groups, {}), ())
        _ensure_unique(cls, [command.name for command in commands], "command")
        _ensure_unique(cls, [command.name for command in commands] + [group.name for group in groups], "group or command")

        self._name = metadata["name"]
        self._description = metadata["description"]
        self._commands = commands
        self._groups = groups
        self._options = _sanitize_options(cls, options, "options")

    def find_command(self, name, /):
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def find_group(self, path, /):
        """
        return the group addressed by path (a sequence of names, or a single
        string whose words are the names), or None.
        """
        segments = path.split() if isinstance(path, str) else [word for name in path for word in name.split()]
        if not segments:
            return None
        groups, group = self._groups, None
        for segment in segments:
            for candidate in groups:
                if candidate.name == segment:
                    group = candidate
                    break
            else:
                return None
            groups = group.subgroups
        return group


__all__ = (
    "OptionScope",
    "MetadataType",
    "OptionMetadata",
    "ArgumentsMetadata",
    "CommandMetadata",
    "CommandGroupMetadata",
    "ProgramMetadata",
)
