"""Command line entry point: `bsubio types | jobs | process`."""

import argparse
import asyncio
import os
import sys
from typing import Optional, Sequence, Tuple

from bsubio.client import BsubClient
from bsubio.config import Settings, get_settings
from bsubio.exceptions import BsubError, JobFailedError
from bsubio.jobs.models import JobResult
from bsubio.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bsubio", description="bsub.io job client")
    parser.add_argument("--base-url", help="API server URL (default from config)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("types", help="List available processing types")

    jobs = sub.add_parser("jobs", help="List recent jobs")
    jobs.add_argument("--limit", type=int, default=10)

    process = sub.add_parser("process", help="Process one or more files")
    process.add_argument("job_type")
    process.add_argument("files", nargs="+")
    process.add_argument("--output-dir", default=None, help="Where to save <file>.out (default: next to input)")
    process.add_argument("--timeout", type=float, default=None, help="Seconds per file")
    return parser


async def _process_one(
    client: BsubClient, job_type: str, path: str, timeout: Optional[float]
) -> Tuple[str, Optional[JobResult], Optional[BsubError]]:
    try:
        return path, await client.process_file(job_type, path, timeout=timeout), None
    except BsubError as exc:
        return path, None, exc


def _output_path(path: str, output_dir: Optional[str]) -> str:
    name = os.path.basename(path) + ".out"
    return os.path.join(output_dir, name) if output_dir else path + ".out"


async def run_process(client: BsubClient, args: argparse.Namespace) -> int:
    print(f"Processing {len(args.files)} file(s) with job type: {args.job_type}")
    outcomes = await asyncio.gather(
        *(_process_one(client, args.job_type, f, args.timeout) for f in args.files)
    )

    failed = 0
    for path, result, error in outcomes:
        name = os.path.basename(path)
        if error is not None:
            failed += 1
            print(f"[FAILED] {name}: {error}")
            if isinstance(error, JobFailedError) and error.result and error.result.logs:
                print(f"  Logs:\n{error.result.logs}")
            continue

        out_path = _output_path(path, args.output_dir)
        print(f"[SUCCESS] {name}: job {result.job.id}, output {len(result.output)} bytes")
        try:
            with open(out_path, "wb") as fh:
                fh.write(result.output)
            print(f"  Saved output to: {out_path}")
        except OSError as exc:
            print(f"  Warning: failed to save output to {out_path}: {exc}")

    print("\n=== Summary ===")
    print(f"Total files: {len(outcomes)}")
    print(f"Successful: {len(outcomes) - failed}")
    print(f"Failed: {failed}")
    return 1 if failed else 0


async def run_types(client: BsubClient) -> int:
    for proc_type in await client.get_types():
        print(f"  - {proc_type.name}: {proc_type.description}")
    return 0


async def run_jobs(client: BsubClient, limit: int) -> int:
    listing = await client.list_jobs(limit=limit)
    for job in listing.jobs:
        status = job.status.value if job.status else "unknown"
        print(f"  Job {job.id}: {status} (type: {job.type})")
    print(f"Total jobs: {listing.total}")
    return 0


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    async with BsubClient.from_settings(settings) as client:
        if args.command == "types":
            return await run_types(client)
        if args.command == "jobs":
            return await run_jobs(client, args.limit)
        return await run_process(client, args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.base_url:
        settings.base_url = args.base_url
    configure_logging(args.log_level or settings.log_level)

    try:
        return asyncio.run(_run(args, settings))
    except BsubError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
