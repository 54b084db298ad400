"""
Usage rendering tests (sections, synopsis, ordering, formats, escaping).

Scope
- Validate the plain text layout of command usage section by section.
- Validate synopsis tokens: scopes, deduplication, hidden options, '[--]'.
- Validate option ordering (default key, custom key, declaration order).
- Validate HTML and ronn markup and the escaping of user text.
- Validate idempotence and the group/global builders.

Conventions
- Test method names follow CamelCase per project convention.
- Output is always rendered through the public render()/Usage API.
"""

from __future__ import annotations

import html
import io
import unittest
from unittest import TestCase

from rich.console import Console

from argosy import (
    OptionMetadata,
    ArgumentsMetadata,
    CommandMetadata,
    CommandGroupMetadata,
    ProgramMetadata,
    UsageFormat,
    CommandUsage,
    CommandGroupUsage,
    GlobalUsage,
    GlobalUsageSummary,
    synopsis_usage,
    arguments_usage,
    describe,
    option_key,
    render,
    display,
)


def section(text, title):
    """lines of a TEXT section body (up to the next heading)."""
    lines = text.splitlines()
    start = lines.index(title) + 1
    body = []
    for line in lines[start:]:
        if line and not line.startswith(" "):
            break
        body.append(line)
    return body


def terms(lines, indent=8):
    return [line.strip() for line in lines if line.startswith(" " * indent) and line[indent] != " "]


VERBOSE = OptionMetadata("-v", arity=0, description="Verbose mode")

ADD = CommandMetadata(
    "add",
    "Add file contents to the index",
    global_options=[VERBOSE],
    command_options=[OptionMetadata("-i", arity=0, description="Add modified contents interactively.")],
    arguments=ArgumentsMetadata("patterns", description="Patterns of files to be added"),
)


class TestCommandUsageText(TestCase):
    """Plain text layout of a command."""

    def testFullLayout(self):
        self.assertEqual(
            render(UsageFormat.TEXT, ADD, "git"),
            "NAME\n"
            "        git add - Add file contents to the index\n"
            "\n"
            "SYNOPSIS\n"
            "        git [-v] add [-i] [--] [<patterns>...]\n"
            "\n"
            "OPTIONS\n"
            "        -i\n"
            "            Add modified contents interactively.\n"
            "\n"
            "        -v\n"
            "            Verbose mode\n"
            "\n"
            "        --\n"
            "            This option can be used to separate command-line options from the\n"
            "            list of arguments (useful when arguments might be mistaken for\n"
            "            command-line options).\n"
            "\n"
            "        <patterns>\n"
            "            Patterns of files to be added\n",
        )

    def testScopeNamesAreOptional(self):
        text = render(UsageFormat.TEXT, ADD)
        self.assertEqual(section(text, "SYNOPSIS")[0], "        add [-i] [--] [<patterns>...]")
        self.assertNotIn("-v", terms(section(text, "OPTIONS")))

    def testGroupScopeComesBetweenProgramAndCommand(self):
        command = CommandMetadata(
            "add",
            global_options=[VERBOSE],
            group_options=[OptionMetadata("--dry-run", arity=0)],
        )
        text = render(UsageFormat.TEXT, command, "git", "remote")
        self.assertEqual(section(text, "SYNOPSIS")[0], "        git [-v] remote [--dry-run] add")
        self.assertEqual(section(text, "NAME")[0], "        git remote add")

    def testSynopsisHangsUnderTheFirstWordAfterTheProgram(self):
        command = CommandMetadata("build", command_options=[
            OptionMetadata(f"--option-{index}", title=f"value{index}") for index in range(8)
        ])
        text = CommandUsage(columns=40).render(UsageFormat.TEXT, command, "tool")
        synopsis = [line for line in section(text, "SYNOPSIS") if line]
        self.assertGreater(len(synopsis), 1)
        self.assertTrue(synopsis[0].startswith("        tool build "))
        for line in synopsis[1:]:
            self.assertTrue(line.startswith(" " * 13))
            self.assertNotEqual(line[13], " ")
        for line in text.splitlines():
            if len(line) > 40:
                self.assertNotIn(" ", line.strip())

    def testOptionalSectionsAreOmitted(self):
        text = render(UsageFormat.TEXT, CommandMetadata("status"))
        self.assertEqual(text, "NAME\n        status\n\nSYNOPSIS\n        status\n")

    def testDiscussionIsCopiedVerbatim(self):
        discussion = "A deliberately long discussion line that must never be re-wrapped by the renderer at all.\n\n  Indented."
        text = render(UsageFormat.TEXT, CommandMetadata("status", discussion=discussion))
        self.assertEqual(section(text, "DISCUSSION"), [
            "        " + discussion.splitlines()[0],
            "",
            "          Indented.",
        ])

    def testExamplesAreLaidOutAsATable(self):
        command = CommandMetadata("add", examples=[
            ("Add a file", "git add a.txt"),
            ("Add two", "git add a.txt \\\n  b.txt"),
        ])
        self.assertEqual(section(render(UsageFormat.TEXT, command), "EXAMPLES"), [
            "        Add a file  git add a.txt",
            "        Add two     git add a.txt \\",
            "                      b.txt",
        ])

    def testHiddenOptionsNeverAppear(self):
        command = CommandMetadata("add", command_options=[
            OptionMetadata("--secret", hidden=True, description="Top secret"),
            OptionMetadata("-i", arity=0),
        ])
        for format in UsageFormat:
            with self.subTest(format=format):
                output = render(format, command, "git")
                self.assertNotIn("secret", output.lower())

    def testIdempotence(self):
        for format in UsageFormat:
            with self.subTest(format=format):
                self.assertEqual(render(format, ADD, "git"), render(format, ADD, "git"))


class TestSynopsisTokens(TestCase):
    """Tokens, ordering and the synopsis round-trip."""

    def testOptionTokens(self):
        self.assertEqual(synopsis_usage(OptionMetadata("-v", arity=0)), "[-v]")
        self.assertEqual(synopsis_usage(OptionMetadata("-n", "--name", title="name")), "[{-n <name> | --name <name>}]")
        self.assertEqual(synopsis_usage(OptionMetadata("--file", title="file", required=True)), "--file <file>")
        self.assertEqual(synopsis_usage(OptionMetadata("-D", title="property", multiple=True)), "[-D <property>...]")

    def testArgumentsTokens(self):
        self.assertEqual(arguments_usage(ArgumentsMetadata("file")), "[<file>...]")
        self.assertEqual(arguments_usage(ArgumentsMetadata("name", "url", arity=2, required=True)), "<name> <url>")

    def testDescribe(self):
        self.assertEqual(describe(OptionMetadata("-n", "--name", title="name")), "-n <name>, --name <name>")
        self.assertEqual(describe(ArgumentsMetadata("name", "url")), "<name> <url>")
        with self.assertRaises(TypeError):
            describe("-n")

    def testDefaultOrdering(self):
        options = [
            OptionMetadata("--zeta"),
            OptionMetadata("-B"),
            OptionMetadata("--alpha"),
            OptionMetadata("-b"),
            OptionMetadata("-a", "--all"),
        ]
        ordered = sorted(options, key=option_key)
        self.assertEqual([option.names[0] for option in ordered], ["-a", "-b", "-B", "--alpha", "--zeta"])

    def testOrderingCanBeReplacedOrDisabled(self):
        command = CommandMetadata("x", command_options=[OptionMetadata("--zeta"), OptionMetadata("--alpha")])
        declared = CommandUsage(key=None).render(UsageFormat.TEXT, command)
        reverse = CommandUsage(key=lambda option: [-ord(char) for char in option.names[0]]).render(UsageFormat.TEXT, command)
        self.assertEqual(terms(section(declared, "OPTIONS")), ["--zeta <value>", "--alpha <value>"])
        self.assertEqual(terms(section(reverse, "OPTIONS")), ["--zeta <value>", "--alpha <value>"])
        self.assertEqual(terms(section(render(UsageFormat.TEXT, command), "OPTIONS")), ["--alpha <value>", "--zeta <value>"])

    def testSynopsisRoundTripInEveryFormat(self):
        shared = OptionMetadata("-v", "--verbose", arity=0)
        command = CommandMetadata(
            "push",
            global_options=[shared, OptionMetadata("-C", title="path")],
            group_options=[OptionMetadata("--dry-run", arity=0)],
            command_options=[shared, OptionMetadata("-f", "--force", arity=0), OptionMetadata("--tags", arity=0, hidden=True)],
            arguments=ArgumentsMetadata("repository", "refspec"),
        )
        expected = [synopsis_usage(option) for option in command.options if not option.hidden]
        expected.append(arguments_usage(command.arguments))
        for format in UsageFormat:
            with self.subTest(format=format):
                output = render(format, command, "git", "remote")
                if format is UsageFormat.HTML:
                    output = html.unescape(output)
                for token in expected:
                    self.assertEqual(output.count(token), 1, token)
                self.assertEqual(output.count("[--]"), 1)
                self.assertNotIn("--tags", output)


class TestMarkupFormats(TestCase):
    """HTML and ronn renderings."""

    COMMAND = CommandMetadata(
        "add",
        "Use <file> & *globs*",
        discussion="First line\nSecond <line>",
        examples=[("Add <all>", "git add <dir> && echo")],
        command_options=[OptionMetadata("-i", arity=0, description="Interactive_mode")],
    )

    def testHtmlEscapesUserText(self):
        output = render(UsageFormat.HTML, self.COMMAND, "git")
        self.assertIn("Use &lt;file&gt; &amp; *globs*", output)
        self.assertIn("First line<br/>Second &lt;line&gt;", output)
        self.assertIn("<pre>\ngit add &lt;dir&gt; &amp;&amp; echo\n</pre>", output)
        self.assertNotIn("<file>", output)

    def testHtmlStructure(self):
        output = render(UsageFormat.HTML, self.COMMAND, "git")
        self.assertTrue(output.startswith("<html>\n<head>\n"))
        self.assertTrue(output.endswith("</body>\n</html>\n"))
        for title in ("NAME", "SYNOPSIS", "OPTIONS", "DISCUSSION", "EXAMPLES"):
            self.assertIn(f'<h1 class="text-info">{title}</h1>', output)
        self.assertIn('<div class="span8 offset2">\nInteractive_mode\n</div>', output)

    def testRonnEscapesMarkdown(self):
        output = render(UsageFormat.RONN, self.COMMAND, "git")
        self.assertTrue(output.startswith("git_add(1) -- Use \\<file\\> & \\*globs\\*\n=========="))
        self.assertIn("Interactive\\_mode", output)
        self.assertIn("    git add <dir> && echo", output)
        self.assertIn("## SYNOPSIS", output)
        self.assertNotIn("## NAME", output)

    def testRonnHeaderOfANestedGroupCommand(self):
        output = render(UsageFormat.RONN, CommandMetadata("ls", "Lists branches"), "git", "remote branch")
        self.assertTrue(output.startswith("git_remote_branch_ls(1) -- Lists branches\n"))

    def testSectionOrderIsSharedByAllFormats(self):
        titles = ("SYNOPSIS", "OPTIONS", "DISCUSSION", "EXAMPLES")
        for format in UsageFormat:
            with self.subTest(format=format):
                output = render(format, self.COMMAND, "git")
                positions = [output.index(title) for title in titles]
                self.assertEqual(positions, sorted(positions))

    def testDisplayPrintsToTheConsole(self):
        stream = io.StringIO()
        display(UsageFormat.TEXT, ADD, "git", console=Console(file=stream, width=79), colorful=False)
        self.assertEqual(stream.getvalue(), render(UsageFormat.TEXT, ADD, "git"))

    def testDisplayPrintsMarkupVerbatim(self):
        stream = io.StringIO()
        display(UsageFormat.RONN, ADD, "git", console=Console(file=stream, width=79))
        self.assertEqual(stream.getvalue(), render(UsageFormat.RONN, ADD, "git"))


class TestScopeUsages(TestCase):
    """Global summary, global detail and group detail builders."""

    PROGRAM = ProgramMetadata(
        "git",
        "the stupid content tracker",
        options=[VERBOSE],
        commands=[ADD, CommandMetadata("gc", hidden=True)],
        groups=[
            CommandGroupMetadata(
                "remote",
                "Manage set of tracked repositories",
                default_command=CommandMetadata("show", "shows the remotes"),
                commands=[CommandMetadata("a", "First"), CommandMetadata("b", "Second"), CommandMetadata("c", hidden=True)],
            ),
            CommandGroupMetadata("internal", hidden=True, commands=[CommandMetadata("fsck")]),
        ],
    )

    def testGlobalSummary(self):
        self.assertEqual(
            GlobalUsageSummary().render(UsageFormat.TEXT, self.PROGRAM),
            "usage: git [-v] <command> [<args>]\n"
            "\n"
            "The most commonly used git commands are:\n"
            "    add     Add file contents to the index\n"
            "    remote  Manage set of tracked repositories\n"
            "\n"
            "See 'git help <command>' for more information on a specific command.\n",
        )

    def testGlobalUsageListsVisibleCommands(self):
        text = GlobalUsage().render(UsageFormat.TEXT, self.PROGRAM)
        self.assertEqual(section(text, "NAME")[0], "        git - the stupid content tracker")
        self.assertEqual(section(text, "SYNOPSIS")[0], "        git [-v] <command> [<args>]")
        self.assertEqual(terms(section(text, "COMMANDS")), ["add", "remote", "remote a", "remote b"])

    def testGroupUsageListsExactlyItsVisibleCommands(self):
        group = self.PROGRAM.find_group("remote")
        text = CommandGroupUsage().render(UsageFormat.TEXT, self.PROGRAM, group)
        commands = section(text, "COMMANDS")
        self.assertEqual(commands[0], "        With no arguments, shows the remotes")
        self.assertEqual(terms(commands), ["With no arguments, shows the remotes", "a", "b"])
        self.assertEqual(section(text, "SYNOPSIS")[:3], [
            "        git [-v] remote show",
            "        git [-v] remote a",
            "        git [-v] remote b",
        ])

    def testScopeUsagesRenderInEveryFormat(self):
        group = self.PROGRAM.find_group("remote")
        for format in UsageFormat:
            with self.subTest(format=format):
                for output in (
                        GlobalUsageSummary().render(format, self.PROGRAM),
                        GlobalUsage().render(format, self.PROGRAM),
                        CommandGroupUsage().render(format, self.PROGRAM, group),
                ):
                    self.assertNotIn("internal", output)
                    self.assertNotIn("fsck", output)
                    self.assertNotIn("gc", output.split())


if __name__ == "__main__":
    unittest.main()
