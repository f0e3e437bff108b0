"""Argument parsing functionality for depsync."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depsync",
        description=(
            "depsync - Sync package.json caret ranges with package-lock.json "
            "and report changes against a git reference"
        ),
        add_help=True,
    )

    parser.add_argument("ref",
                        metavar="REF",
                        help="Git reference to compare against (default: configured, else main)",
                        nargs="?",
                        default=None)
    parser.add_argument("-d", "--directory",
                        dest="DIRECTORY",
                        help="Project directory containing package.json (default: current directory)",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("--manifest",
                        dest="MANIFEST",
                        help="Manifest file name inside the project directory",
                        action="store",
                        type=str)
    parser.add_argument("--lockfile",
                        dest="LOCKFILE",
                        help="Lockfile name inside the project directory",
                        action="store",
                        type=str)
    parser.add_argument("--no-compare",
                        dest="NO_COMPARE",
                        help="Skip the comparison with the git reference.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default="INFO")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only output errors to the console.",
                        action="store_true")

    return parser.parse_args(argv)
