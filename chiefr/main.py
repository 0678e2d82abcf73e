"""Command line entry point."""

import argparse
import asyncio
import sys
from collections.abc import Sequence

import structlog

from chiefr import __version__
from chiefr.config import Settings, get_settings
from chiefr.errors import (
    ChiefrError,
    MissingCredentialError,
    NoOwnerFoundError,
    NothingToSubmitError,
)
from chiefr.maintainers import MaintainersConfig, load_maintainers
from chiefr.observability import configure_logging
from chiefr.segments import (
    describe_segment,
    distinct_repositories,
    is_file_name_match,
    order_by_priority,
    require_owners,
    resolve,
)
from chiefr.segments.resolver import Resolution
from chiefr.trackers import (
    PullRequestUpdate,
    UpdateAction,
    create_tracker,
    tracker_kind_for_url,
    update_pull_request,
)
from chiefr.vcs import GitRepository

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its three commands."""
    parser = argparse.ArgumentParser(
        prog="chiefr",
        description="Distributed source code maintenance toolkit.",
    )
    parser.add_argument(
        "-m",
        "--maintainers-file",
        help="Maintainers configuration file (default: .maintainers.ini)",
    )
    parser.add_argument(
        "-C",
        "--repo",
        help="Path of the git repository (default: current directory)",
    )
    parser.add_argument("--log-level", help="Log level (default: WARNING)")
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        help="Log output format",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    list_cmd = commands.add_parser("list", help="List maintainers")
    list_cmd.add_argument(
        "path",
        nargs="?",
        metavar="PATH",
        help="Only list segments whose file rules match this path",
    )

    submit_cmd = commands.add_parser("submit", help="Submit patches to maintainers")
    submit_cmd.add_argument(
        "revision", metavar="REVISION", help="Git revision of the patch's first commit"
    )

    update_cmd = commands.add_parser(
        "update-pull-request",
        help="Update pull request chiefs and topics according to the maintainers file",
    )
    update_cmd.add_argument(
        "revision", metavar="REVISION", help="Git revision of the patch's first commit"
    )
    update_cmd.add_argument("url", metavar="PULL_REQUEST_URL", help="URL of the pull request")
    update_cmd.add_argument(
        "api_key",
        nargs="?",
        metavar="API_KEY",
        help="API key of the project (default: CHIEFR_GITHUB_TOKEN)",
    )
    update_cmd.add_argument(
        "--close-if-unowned",
        action="store_true",
        help="Comment with the right repository and close the pull request "
        "when it targets a repository no segment owns",
    )

    return parser


def resolve_changeset(config: MaintainersConfig, settings: Settings, revision: str) -> Resolution:
    """Resolve the changes between a revision and HEAD against the segments."""
    repository = GitRepository(settings.repo_path, context_lines=settings.diff_context_lines)
    patches = repository.changes_since(revision)
    return resolve(config.segments, patches)


def list_segments(config: MaintainersConfig, path: str | None = None) -> int:
    """Print segments in priority order, optionally only those matching a path."""
    segments = order_by_priority(config.segments.values())
    if path is not None:
        segments = [s for s in segments if is_file_name_match(s, path)]
        if not segments:
            raise NoOwnerFoundError(f"No segment matches '{path}'", path=path)

    for segment in segments:
        print(describe_segment(segment))
    return 0


def submit(config: MaintainersConfig, settings: Settings, revision: str) -> int:
    """Print the repositories the current changeset should be submitted to."""
    resolution = resolve_changeset(config, settings, revision)
    segments = require_owners(resolution)

    print("Please submit your patch to one of the following repositories:\n")
    for repository in distinct_repositories(segments):
        print(f" - {repository}")
    print("")
    return 0


async def update_pr(
    config: MaintainersConfig,
    settings: Settings,
    revision: str,
    url: str,
    api_key: str | None,
    close_if_unowned: bool = False,
) -> PullRequestUpdate:
    """Resolve the changeset and drive the tracker update for a pull request."""
    kind = tracker_kind_for_url(url)
    resolution = resolve_changeset(config, settings, revision)
    if not resolution.paths:
        raise NothingToSubmitError("Nothing to submit: the changeset touches no file")

    token = api_key or settings.github_token.get_secret_value()
    if not token:
        raise MissingCredentialError(
            "No API key given; pass API_KEY or set CHIEFR_GITHUB_TOKEN"
        )

    async with create_tracker(kind, token, settings) as tracker:
        return await update_pull_request(
            url,
            resolution.segments.values(),
            tracker,
            close_if_unowned=close_if_unowned,
        )


def _report_update(update: PullRequestUpdate) -> None:
    if update.action is UpdateAction.ASSIGNED:
        print(f"Pull request {update.pull_request} assigned to {', '.join(update.assignees)}")
        if update.labels:
            print(f"Labels: {', '.join(update.labels)}")
    else:
        print(f"Pull request {update.pull_request} closed, redirected to {update.repository}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        key: value
        for key, value in {
            "maintainers_file": args.maintainers_file,
            "repo_path": args.repo,
            "log_level": args.log_level,
            "log_format": args.log_format,
        }.items()
        if value is not None
    }
    settings = get_settings().model_copy(update=overrides)
    configure_logging(settings.log_level, settings.log_format)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_maintainers(settings.maintainers_file)

        if args.command == "list":
            return list_segments(config, args.path)
        if args.command == "submit":
            return submit(config, settings, args.revision)

        update = asyncio.run(
            update_pr(
                config,
                settings,
                args.revision,
                args.url,
                args.api_key,
                close_if_unowned=args.close_if_unowned,
            )
        )
        _report_update(update)
        return 0

    except ChiefrError as e:
        logger.error("Command failed", command=args.command, **e.to_dict())
        print(e.message, file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
