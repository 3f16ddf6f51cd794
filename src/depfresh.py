"""depfresh - Find newer versions of build artifacts in Maven repositories.

    Returns:
        int: Exit code
"""
import csv
import json
import logging
import os
import sys
from pathlib import Path

from args import parse_args
from artifacts.models import Artifact, ArtifactIdentifier, ArtifactType, MavenArtifactType, artifact_type_from_name
from builds.models import Build, BuildFile, BuildFileType
from cli_config import apply_cli_overrides, configured_repositories
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ConfigError, Constants, ExitCodes, apply_config, load_config
from filters.artifact import WildcardArtifactFilter
from filters.ignore_parser import ArtifactFilterParseError
from filters.version import create_version_filter_factory
from registry.maven import MavenMetadataService, MavenSession, MavenSessionError
from service import UpdateCheckService, create_user_artifact_filter
from versioning.resolver import ArtifactAvailableVersionsResolver

logger = logging.getLogger(__name__)


def parse_artifact_token(token, default_type=MavenArtifactType.DEPENDENCY):
    """Parse ``groupId:artifactId[:version]`` into an Artifact.

    Raises:
        ValueError: the token is not valid coordinates.
    """
    parts = [p.strip() for p in token.strip().split(":")]
    if len(parts) not in (2, 3):
        raise ValueError(f"Expected groupId:artifactId[:version], got {token!r}")
    version = parts[2] if len(parts) == 3 and parts[2] else None
    return Artifact(default_type, ArtifactIdentifier(parts[0], parts[1]), version)


def load_artifacts_file(file_name):
    """Loads artifacts from a file.

    Each line holds coordinates optionally followed by an artifact type name,
    e.g. ``org.apache.maven.plugins:maven-jar-plugin:3.3.0 build-plugin``.
    Blank lines and ``#`` comments are skipped.

    Args:
        file_name (str): File path containing the list of artifacts.

    Returns:
        list: List of artifacts
    """
    artifacts = []
    try:
        with open(file_name, encoding='utf-8') as file:
            for line_number, raw in enumerate(file, start=1):
                line = raw.split("#", 1)[0].strip()
                if not line:
                    continue
                fields = line.split()
                try:
                    artifact_type: ArtifactType = (
                        artifact_type_from_name(fields[1]) if len(fields) > 1 else MavenArtifactType.DEPENDENCY
                    )
                    if len(fields) > 2:
                        raise ValueError("too many fields")
                    artifacts.append(parse_artifact_token(fields[0], artifact_type))
                except ValueError as e:
                    logging.error("Invalid artifact at %s:%d: %s, aborting", file_name, line_number, e)
                    sys.exit(ExitCodes.FILE_ERROR.value)
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    return artifacts


def build_artifact_list(args):
    """Collect artifacts from CLI tokens and list files, in input order."""
    artifacts = []
    try:
        for tok in args.SINGLE:
            artifacts.append(parse_artifact_token(tok, MavenArtifactType.DEPENDENCY))
        for tok in args.PLUGINS:
            artifacts.append(parse_artifact_token(tok, MavenArtifactType.BUILD_PLUGIN))
    except ValueError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    for file_name in args.LIST_FROM_FILE:
        artifacts.extend(load_artifacts_file(file_name))
    return list(dict.fromkeys(artifacts))


def _result_row(result):
    update = result.update.update_version if result.update is not None else None
    if result.error is not None:
        status = "error"
    elif result.cancelled:
        status = "cancelled"
    elif update is not None:
        status = "outdated"
    else:
        status = "up-to-date"
    return {
        "groupId": result.artifact.identifier.group_id,
        "artifactId": result.artifact.identifier.artifact_id,
        "type": str(result.artifact.type),
        "version": result.artifact.version,
        "updateVersion": update,
        "status": status,
        "error": result.error,
    }


def export_json(results, path):
    """Exports the check results to a JSON file.

    Args:
        results (list): List of ArtifactCheckResult.
        path (str): File path to export the JSON.
    """
    data = [_result_row(r) for r in results]
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_csv(results, path):
    """Exports the check results to a CSV file.

    Args:
        results (list): List of ArtifactCheckResult.
        path (str): File path to export the CSV.
    """
    headers = ["groupId", "artifactId", "type", "version", "updateVersion", "status", "error"]
    rows = [headers]
    for r in results:
        row = _result_row(r)
        rows.append(["" if row[h] is None else row[h] for h in headers])
    try:
        with open(path, 'w', newline='', encoding='utf-8') as file:
            export = csv.writer(file)
            export.writerows(rows)
        logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_results(args, results):
    """Write results to --output in the requested or inferred format."""
    fmt = None
    if getattr(args, "OUTPUT_FORMAT", None):
        fmt = args.OUTPUT_FORMAT.lower()
    elif args.OUTPUT.lower().endswith(".csv"):
        fmt = "csv"
    if fmt == "csv":
        export_csv(results, args.OUTPUT)
    else:
        export_json(results, args.OUTPUT)


def report(results):
    """Log one line per outdated, failed or cancelled artifact, then a summary."""
    for r in results:
        if r.update is not None:
            logging.info("[%s] %s %s -> %s", r.artifact.type, r.artifact.identifier,
                         r.artifact.version, r.update.update_version)
        elif r.error is not None:
            logging.warning("[%s] %s: %s", r.artifact.type, r.artifact.identifier, r.error)
        elif r.cancelled:
            logging.warning("[%s] %s: not checked (cancelled)", r.artifact.type, r.artifact.identifier)
    updates = sum(1 for r in results if r.update is not None)
    errors = sum(1 for r in results if r.error is not None)
    logging.info("%d artifact(s) checked, %d update(s), %d failure(s).", len(results), updates, errors)


def main(argv=None):
    """Main function of the program."""
    # pylint: disable=too-many-branches, too-many-statements
    args = parse_args(argv)
    level = "CRITICAL" if args.QUIET else args.LOG_LEVEL
    configure_logging(level, getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        apply_config(load_config(args.CONFIG))
        apply_cli_overrides(args)
        repositories = configured_repositories()
    except ConfigError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    artifacts = build_artifact_list(args)
    if not artifacts:
        logging.warning("No artifacts given, use --package, --plugin or --load_list.")
        sys.exit(ExitCodes.SUCCESS.value)

    build_path = Path(args.DIRECTORY) / BuildFileType.MAVEN.file_name
    build = Build(BuildFile(BuildFileType.MAVEN, build_path), repositories, artifacts)
    filters = []
    try:
        for expression in args.FILTERS:
            filters.append(WildcardArtifactFilter.parse(expression))
        user_filter = create_user_artifact_filter(os.environ.get(Constants.ENV_HOME) or None)
    except ValueError as e:
        logging.error("Invalid filter: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except ArtifactFilterParseError as e:
        logging.error("Invalid ignore file: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except OSError as e:
        logging.error("Unable to read ignore file: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        session = MavenSession()
    except MavenSessionError as e:
        logging.error("Unable to set up repository session: %s", e)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)

    with session:
        resolver = ArtifactAvailableVersionsResolver(MavenMetadataService(session))
        service = UpdateCheckService(
            resolver,
            create_version_filter_factory(Constants.INCLUDE_PRERELEASES),
            user_filter,
        )
        try:
            results = service.check_build(build, filters=filters)
        except (ArtifactFilterParseError, OSError) as e:
            logging.error("Invalid ignore file: %s", e)
            sys.exit(ExitCodes.FILE_ERROR.value)

    report(results)
    if getattr(args, "OUTPUT", None):
        export_results(args, results)

    if service.cancel_event.is_set():
        logging.error("Interrupted, results are partial.")
        sys.exit(ExitCodes.INTERRUPTED.value)

    has_warnings = any(r.update is not None or r.error is not None for r in results)
    if has_warnings:
        logging.warning("One or more artifacts are outdated or could not be checked.")
        if args.ERROR_ON_WARNINGS:
            logging.error("Warnings present, exiting with non-zero status code.")
            sys.exit(ExitCodes.EXIT_WARNINGS.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main", outcome="success")
        )
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
