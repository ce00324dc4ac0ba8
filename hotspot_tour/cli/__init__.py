"""CLI interface for hotspot_tour.

Every folder next to this file is a subcommand: its ``__init__.py``
exposes ``COMMAND_DESCRIPTION`` and ``command(subparser)``, which adds
the arguments and returns the handler.
"""

import logging
import sys
from argparse import SUPPRESS, ArgumentDefaultsHelpFormatter, ArgumentParser
from gettext import gettext as _
from pathlib import Path

from hotspot_tour.utils.misc import load_module

logger = logging.getLogger(__name__)


def add_subcommand(subparsers, name: str, submodule):
    subparser = subparsers.add_parser(name, help=submodule.COMMAND_DESCRIPTION)
    # Flags repeated after the subcommand must not reset values given before it
    common_flags(subparser, default=SUPPRESS)
    handler = submodule.command(subparser)
    subparser.set_defaults(fn=handler)


def common_flags(parser, default=None):
    flag_default = False if default is None else default
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        default=flag_default,
        help=_("Give more details about what is happening"),
    )  # noqa: E501
    parser.add_argument(
        "-V",
        "--version",
        dest="is_show_version",
        action="store_true",
        default=flag_default,
        help=_("Print version and exit"),
    )  # noqa: E501
    parser.add_argument(
        "--store",
        dest="store",
        type=Path,
        default=default,
        help=_("Folder where the hotspot collection is kept"),
    )  # noqa: E501


def build_parser():
    parser = ArgumentParser(
        prog="hotspot_tour", formatter_class=ArgumentDefaultsHelpFormatter
    )
    common_flags(parser)
    subparsers = parser.add_subparsers()

    for module in sorted(Path(__file__).parent.glob("*/__init__.py")):
        if str(module).find("pycache") > 0:
            continue
        module_name = module.parent.name
        subcommand_module = load_module(
            module, module_name=f"hotspot_tour.cli.{module_name}"
        )
        add_subcommand(subparsers, module_name, subcommand_module)
    return parser


def main(argv=None):  # pragma: no cover
    """
    The main function executes on commands:
    `python -m hotspot_tour` and `$ hotspot_tour `.
    """
    logging.basicConfig()
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(argv)

    if args.verbose:
        logging.root.setLevel(logging.DEBUG)

    version = (Path(__file__).parent.parent / "VERSION").read_text().strip()
    if args.is_show_version:
        print(version)
        sys.exit(0)
    logger.debug(f"{_('Starting')} hotspot_tour v{version}")

    fn = args.__dict__.get("fn")
    args.__dict__["fn"] = None
    if fn is not None:
        fn(args)
    else:
        parser.parse_args([*argv, "--help"])
