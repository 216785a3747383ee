# Copyright 2024 Shane Loretz.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import os
import sys

from .definitions import DefinitionSet
from .definitions import build_all_definitions
from .definitions import build_definition
from .errors import InspectError
from .errors import ValidationError
from . import graph
from . import output


SUBCOMMANDS = ("parents", "children", "tree")


def expand_path(raw_path):
    """Return an absolute path with ~ and environment variables expanded."""
    return os.path.abspath(os.path.expandvars(os.path.expanduser(raw_path)))


class ArgumentParser(argparse.ArgumentParser):
    """Exits with 1 on bad arguments like every other inspectalot error."""

    def error(self, message):
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        sys.exit(1)


def _add_common_arguments(parser):
    parser.add_argument(
        "--images-dir", "-d", default=".", help="Location of the images."
    )
    parser.add_argument("--debug", action="store_true")


def parse_arguments(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] in SUBCOMMANDS:
        command = argv[0]
        argv = argv[1:]
    else:
        command = "inspect"

    if command == "inspect":
        parser = ArgumentParser(
            prog="inspectalot",
            description="Inspect an image.",
            epilog="Other commands: " + ", ".join(SUBCOMMANDS),
        )
        parser.add_argument("image_name", metavar="IMAGE_NAME")
    elif command == "parents":
        parser = ArgumentParser(
            prog="inspectalot parents",
            description="The parents (inherited images) of an image.",
        )
        parser.add_argument("image_name", metavar="IMAGE_NAME")
        parser.add_argument("--exclude-external", action="store_true")
        parser.add_argument("--reverse", action="store_true")
    elif command == "children":
        parser = ArgumentParser(
            prog="inspectalot children",
            description="The children that are dependent on the provided image.",
        )
        parser.add_argument("image_name", metavar="IMAGE_NAME")
        parser.add_argument("--reverse", action="store_true")
    else:
        parser = ArgumentParser(
            prog="inspectalot tree",
            description="Display all images in a tree.",
        )
        parser.add_argument("--dot", action="store_true")
    _add_common_arguments(parser)

    args = parser.parse_args(argv)
    args.command = command
    return args


def _require_name(name):
    if not name:
        raise ValidationError("Name is required")


def _images_dir(args):
    # An empty flag must not expand to the current directory
    if not args.images_dir:
        raise ValidationError("Images directory is required")
    return expand_path(args.images_dir)


def _load_definitions(args):
    definitions = build_all_definitions(_images_dir(args))
    if args.debug:
        print("-----------------")
        print("- Debug printing loaded definitions")
        print(definitions)
        print("-----------------")
    return definitions


def _inspect(args):
    definition = build_definition(args.image_name, _images_dir(args))
    if args.debug:
        print("-----------------")
        print("- Debug printing definition")
        print(DefinitionSet.from_definitions([definition]))
        print("-----------------")
    print(definition.name)


def _parents(args):
    _require_name(args.image_name)
    definitions = _load_definitions(args)
    results = graph.parents(
        definitions,
        args.image_name,
        exclude_external=args.exclude_external,
        reverse=args.reverse,
    )
    if results:
        print(output.format_names(results))


def _children(args):
    _require_name(args.image_name)
    definitions = _load_definitions(args)
    results = graph.children(definitions, args.image_name, reverse=args.reverse)
    if results:
        print(output.format_names(results))


def _tree(args):
    definitions = _load_definitions(args)
    forest = graph.build_forest(definitions)
    if args.dot:
        print(output.forest_to_dot(forest))
    elif forest:
        print(output.format_forest(forest))


_COMMANDS = {
    "inspect": _inspect,
    "parents": _parents,
    "children": _children,
    "tree": _tree,
}


def main(argv=None):
    args = parse_arguments(argv)
    try:
        _COMMANDS[args.command](args)
    except InspectError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
