"""Evergreen API command-line tool.

Usage:
    evg-client task TASK_ID                     # Show a task
    evg-client build BUILD_ID                   # Show a build (exit 1 if missing)
    evg-client tests TASK_ID                    # List all tests of a task
    evg-client versions PROJECT --limit 20      # Most recent mainline versions
    evg-client patches --user USER              # Patches of a user
    evg-client build-tasks BUILD_ID --status failed
    evg-client log TASK_ID --name task_log      # Print a task log
    evg-client test-log TASK_ID TEST_FILE       # Print a test log
    evg-client projects                         # List projects

Records are printed one JSON object per line.
"""

import argparse
import asyncio
import sys
from itertools import count

from .client import EvgClient
from .config import EvgConfig, get_config
from .errors import ConfigError, EvgClientError
from .logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evg-client",
        description="Query the Evergreen CI REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration:
  Credentials are read from ~/.evergreen.yml (override with --config or
  EVG_CONFIG_FILE), or from EVG_USER, EVG_API_KEY and EVG_API_SERVER_HOST.
        """,
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Evergreen auth file (default: ~/.evergreen.yml)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("task", help="Show a task").add_argument("task_id")
    commands.add_parser("version", help="Show a version").add_argument("version_id")
    commands.add_parser("build", help="Show a build").add_argument("build_id")
    commands.add_parser("tests", help="List the tests of a task").add_argument("task_id")
    commands.add_parser("projects", help="List projects")

    versions = commands.add_parser("versions", help="Stream mainline versions of a project")
    versions.add_argument("project_id")
    versions.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Stop after N versions",
    )

    patches = commands.add_parser("patches", help="Stream patches of a user or project")
    owner = patches.add_mutually_exclusive_group(required=True)
    owner.add_argument("--user", metavar="USER_ID")
    owner.add_argument("--project", metavar="PROJECT_ID")
    patches.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Page size requested from the server",
    )

    build_tasks = commands.add_parser("build-tasks", help="Stream the tasks of a build")
    build_tasks.add_argument("build_id")
    build_tasks.add_argument("--status", help="Only tasks with this status")

    log = commands.add_parser("log", help="Print a task log")
    log.add_argument("task_id")
    log.add_argument("--name", default="task_log", help="Log name (default: task_log)")

    test_log = commands.add_parser("test-log", help="Print the log of one test")
    test_log.add_argument("task_id")
    test_log.add_argument("test_file")

    return parser


def _emit(record) -> None:
    print(record.model_dump_json())


async def run(args: argparse.Namespace, config: EvgConfig) -> int:
    """Execute one command and return the process exit code."""
    async with EvgClient(config) as client:
        if args.command == "task":
            _emit(await client.get_task(args.task_id))
        elif args.command == "version":
            _emit(await client.get_version(args.version_id))
        elif args.command == "build":
            build = await client.get_build(args.build_id)
            if build is None:
                print(f"Build not found: {args.build_id}", file=sys.stderr)
                return 1
            _emit(build)
        elif args.command == "tests":
            for test in await client.get_tests(args.task_id):
                _emit(test)
        elif args.command == "projects":
            async for project in client.stream_projects():
                _emit(project)
        elif args.command == "versions":
            seen = count(1)
            async for version in client.stream_versions(args.project_id):
                _emit(version)
                if args.limit is not None and next(seen) >= args.limit:
                    break
        elif args.command == "patches":
            if args.user:
                stream = client.stream_user_patches(args.user, limit=args.limit)
            else:
                stream = client.stream_project_patches(args.project, limit=args.limit)
            async for patch in stream:
                _emit(patch)
        elif args.command == "build-tasks":
            async for task in client.stream_build_tasks(args.build_id, status=args.status):
                _emit(task)
        elif args.command == "log":
            task = await client.get_task(args.task_id)
            async for line in client.stream_log(task, args.name):
                print(line)
        elif args.command == "test-log":
            tests = await client.get_tests(args.task_id)
            matching = [t for t in tests if t.test_file == args.test_file]
            if not matching:
                print(f"Test not found in {args.task_id}: {args.test_file}", file=sys.stderr)
                return 1
            async for line in client.stream_test_log(matching[0]):
                print(line)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = EvgConfig.from_file(args.config) if args.config else get_config()
    except ConfigError as e:
        print(f"Error: Failed to load configuration: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.log_level, config.log_format)

    try:
        code = asyncio.run(run(args, config))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except EvgClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)
