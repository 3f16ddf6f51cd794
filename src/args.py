"""Argument parsing functionality for depfresh."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depfresh",
        description=(
            "depfresh - Find newer versions of Maven and Gradle artifacts"
        ),
        add_help=True,
    )

    input_group = parser.add_argument_group("artifacts")
    input_group.add_argument("-p", "--package",
                             dest="SINGLE",
                             help="Artifact to check as groupId:artifactId:version (dependency).",
                             action="append", type=str,
                             default=[])
    input_group.add_argument("--plugin",
                             dest="PLUGINS",
                             help="Build plugin to check as groupId:artifactId:version.",
                             action="append", type=str,
                             default=[])
    input_group.add_argument("-l", "--load_list",
                             dest="LIST_FROM_FILE",
                             help=("Load artifacts from a file, one groupId:artifactId:version per line, "
                                   "optionally followed by an artifact type such as build-plugin"),
                             action="append", type=str,
                             default=[])
    input_group.add_argument("-d", "--directory",
                             dest="DIRECTORY",
                             help="Build directory; its ignore file is honoured (default: current directory)",
                             action="store", type=str,
                             default=".")

    repo_group = parser.add_argument_group("repositories")
    repo_group.add_argument("--repository",
                            dest="REPOSITORIES",
                            help="Additional repository as ID=URL (can be used multiple times)",
                            action="append", type=str,
                            default=[])
    repo_group.add_argument("--plugin-repository",
                            dest="PLUGIN_REPOSITORIES",
                            help="Additional plugin repository as ID=URL (can be used multiple times)",
                            action="append", type=str,
                            default=[])
    repo_group.add_argument("--timeout",
                            dest="TIMEOUT",
                            help=f"Request timeout in seconds (default: {Constants.REQUEST_TIMEOUT})",
                            action="store", type=int)
    repo_group.add_argument("--retries",
                            dest="RETRIES",
                            help=f"Attempts per metadata request (default: {Constants.HTTP_RETRY_MAX})",
                            action="store", type=int)
    repo_group.add_argument("--max-workers",
                            dest="MAX_WORKERS",
                            help=f"Artifacts checked concurrently (default: {Constants.MAX_WORKERS})",
                            action="store", type=int)
    repo_group.add_argument("--fail-fast",
                            dest="FAIL_FAST",
                            help="Fail an artifact as soon as one repository fails.",
                            action="store_true")

    filter_group = parser.add_argument_group("filters")
    filter_group.add_argument("--filter",
                              dest="FILTERS",
                              help=("Only check artifacts matching GROUP[:ARTIFACT[:VERSION]]; "
                                    "'?' and '*' wildcards allowed (can be used multiple times)"),
                              action="append", type=str,
                              default=[])
    filter_group.add_argument("--include-prereleases",
                              dest="INCLUDE_PRERELEASES",
                              help="Offer alpha, beta, milestone and release candidate versions.",
                              action="store_true")
    filter_group.add_argument("--ignore-snapshots",
                              dest="IGNORE_SNAPSHOTS",
                              help="Skip artifacts declared with a -SNAPSHOT version.",
                              action="store_true")
    filter_group.add_argument("--ignore-inherited",
                              dest="IGNORE_INHERITED",
                              help="Skip artifacts whose version is inherited.",
                              action="store_true")

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=['json', 'csv'])
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if updates or failures are present.",
                        action="store_true")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
