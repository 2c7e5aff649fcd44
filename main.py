from rich.pretty import pprint

from climan import *

__styles__ = {
    "program-name": "bold #22C55E",
}


def version(path):
    print("forest 1.0.0")


def report(*arguments):
    *values, options, path = arguments
    pprint({
        "command": " ".join(node.name for node in path),
        "parameters": values,
        "options": options,
    })


forest = Group(
    "forest",
    help="national forest manager cli",
    options=[
        Flag("help", "h", "display help and exit", handler=help),
        Flag("version", help="display application version and exit", handler=version),
        Flag("verbose", "v", "enable verbose output"),
    ],
    colorful=True,
    commands=[
        Group(
            "add",
            help="add objects to the forest",
            options=[
                Flag("dry-run", help="to a test run without changing any actual state"),
                Option(
                    "sector-id", "s", "destination forest sector to add object",
                    parser=parsers.integer, required=True,
                ),
            ],
            commands=[
                Command(
                    report,
                    "tree",
                    "add a tree(s) to a forest sector",
                    options=[
                        Option(
                            "type", "t", "type of tree to add",
                            metavar="TYPE", default="pine", parser=parsers.enum("pine", "oak", "maple", "willow"),
                        ),
                        Option(
                            "count", "c", "amount of trees to add (max 10)",
                            metavar="N", default="1", parser=parsers.range(1, 10, integer=True),
                        ),
                        Option(
                            "use-fertilizer", "f",
                            "use a fertilizer during planting, can be repeated to use multiple fertilizers",
                            metavar="NAME", repeatable=True,
                        ),
                    ],
                ),
                Command(
                    report,
                    "animal",
                    "add an animal(s) to a forest sector",
                    parameters=[
                        Parameter(
                            "species", "specie of the specimen to add, multiple values can be passed",
                            optional=True, repeatable=True,
                        ),
                    ],
                ),
            ],
        ),
        Command(
            report,
            "move",
            "move objects between forest sectors",
            "Warning! Operator must make sure the dentation forest sector has correct habitat for the moved object!",
            options=[
                Flag("all", "a", "when source ambiguous move all matching objects instead of failing"),
            ],
            parameters=[
                Parameter("object", "name of object to be moved"),
                Parameter("destination", "destination sector id", default="1", parser=parsers.integer),
                Parameter(
                    "source",
                    "source sector id, can be omitted when object is present only in one sector "
                    "or if --all flag is used",
                    optional=True, parser=parsers.integer,
                ),
            ],
        ),
    ],
)


if __name__ == '__main__':
    run(forest)
