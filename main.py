from rich.pretty import pprint

from argosy import *

program = ProgramMetadata(
    "git",
    "the stupid content tracker",
    options=[OptionMetadata("-v", "--verbose", arity=0, description="Verbose mode")],
    commands=[
        CommandMetadata(
            "add",
            "Add file contents to the index",
            command_options=[
                OptionMetadata("-i", arity=0, description="Add modified contents interactively."),
            ],
            arguments=ArgumentsMetadata("patterns", description="Patterns of files to be added"),
        ),
    ],
    groups=[
        CommandGroupMetadata(
            "remote",
            "Manage set of tracked repositories",
            commands=[
                CommandMetadata(
                    "add",
                    "Adds a remote",
                    command_options=[
                        OptionMetadata(
                            "-t",
                            title="branch",
                            description="Track only a specific branch",
                            restrictions=[create(RestrictionSpec(RestrictionKind.LEXICAL_RANGE, "a", "z", locale="en"))],
                        ),
                    ],
                    arguments=ArgumentsMetadata("name", "url", arity=2, required=True),
                ),
            ],
        ),
    ],
)


if __name__ == '__main__':
    pprint(program)
    show(program, ["remote", "add"])
