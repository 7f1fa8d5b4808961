"""Command line interface

Usage::

    lingplot new ~/projects lexdec-replication --title "Lexical decision" --author "A. Student"
    lingplot check ~/projects/lexdec-replication
    lingplot tutorial figures --format pdf --step rt-histogram --step rt-violin
"""
import argparse
import logging
import sys

from ._config import configure
from ._exceptions import ProjectLayoutError
from ._utils import LOG_LEVELS, ScreenHandler, set_log_level
from .project import check_project, new_project
from .tutorial import STEP_NAMES, run_tutorial


def _new(args):
    try:
        root = new_project(args.dst, args.name, args.title, args.author, args.exist_ok)
    except (IOError, ValueError) as error:
        print(error, file=sys.stderr)
        return 1
    print(f"Created {root}")
    return 0


def _check(args):
    try:
        check = check_project(args.root)
    except ProjectLayoutError as error:
        print(error, file=sys.stderr)
        return 1
    print(check)
    return 0 if check.ok else 1


def _tutorial(args):
    configure(show=False)
    paths = run_tutorial(args.dst, args.data, args.format, args.step)
    for path in paths:
        print(path)
    return 0


def get_parser():
    parser = argparse.ArgumentParser(
        prog='lingplot',
        description="Project layout and plotting tutorial for psycholinguistics classes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    lingplot new ~/projects my-experiment --author "A. Student"
    lingplot check ~/projects/my-experiment
    lingplot tutorial figures --format svg
        """,
    )
    parser.add_argument('--log-level', default='WARNING', choices=list(LOG_LEVELS), type=str.upper, help="Minimum level of log messages to print")
    subparsers = parser.add_subparsers(dest='command', required=True)

    new = subparsers.add_parser('new', help="Create a new project directory")
    new.add_argument('dst', help="Directory in which to create the project")
    new.add_argument('name', help="Name of the project directory")
    new.add_argument('--title', help="Project title for the README (default is NAME)")
    new.add_argument('--author', help="Author(s) for the README")
    new.add_argument('--exist-ok', action='store_true', help="Add missing parts to an existing project")
    new.set_defaults(func=_new)

    check = subparsers.add_parser('check', help="Check whether a directory follows the project conventions")
    check.add_argument('root', help="Project directory")
    check.set_defaults(func=_check)

    tutorial = subparsers.add_parser('tutorial', help="Render the lexdec plotting tutorial figures")
    tutorial.add_argument('dst', help="Directory for the figures")
    tutorial.add_argument('--data', help="lexdec table exported from R (default: simulated data)")
    tutorial.add_argument('--format', help="Image format (e.g., png, pdf, svg)")
    tutorial.add_argument('--step', action='append', choices=STEP_NAMES, help="Render only this step (can be repeated)")
    tutorial.set_defaults(func=_tutorial)
    return parser


def main(argv=None):
    args = get_parser().parse_args(argv)
    logger = logging.getLogger('lingplot')
    handler = ScreenHandler()
    logger.addHandler(handler)
    set_log_level(args.log_level)
    try:
        return args.func(args)
    finally:
        logger.removeHandler(handler)


if __name__ == '__main__':
    sys.exit(main())
