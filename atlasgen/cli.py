"""Command-line entry point: run the API server or convert images directly."""

import argparse
import asyncio
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import List

from . import __version__
from .config import Settings
from .exceptions import AtlasGenError
from .models import JobState, RequestKind
from .services import JobManager, PipelineSelector

KIND_CHOICES = {
    "obj": RequestKind.GENERATE_OBJ,
    "fbx": RequestKind.GENERATE_FBX,
}


def setup_logging(settings: Settings):
    """Configure console logging, plus a rotating file when log_file is set."""
    root_logger = logging.getLogger("atlasgen")
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    # Own handlers below; the app module also configures the root logger
    root_logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if settings.log_file:
        log_dir = os.path.dirname(str(settings.log_file))
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_max_size_mb * 1024 * 1024,
            backupCount=settings.log_backup_count,
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


async def convert(settings: Settings, names: List[str], kind: RequestKind) -> int:
    """Queue one job per image in the given order and wait for all of them.

    Returns:
        Process exit code, 0 when every job completed
    """
    logger = logging.getLogger("atlasgen.cli")
    manager = JobManager.from_settings(settings)

    jobs = []
    for name in names:
        try:
            job = manager.create_job(name, kind)
        except AtlasGenError as e:
            logger.error("Skipping %s: %s", name, e)
            continue
        await manager.submit(job)
        jobs.append(job)

    if not jobs:
        return 1

    results = await asyncio.gather(*(manager.wait(job.job_id) for job in jobs))
    failed = 0
    for job in results:
        if job.state == JobState.COMPLETED:
            print(f"{job.job_id}: {job.expected_output_path}")
        else:
            failed += 1
            print(f"{job.job_id}: {job.state.value} ({job.error_message})", file=sys.stderr)
    return 1 if failed else 0


def cmd_serve(settings: Settings, args) -> int:
    import uvicorn

    from .config import settings as app_settings
    from .main import app

    for name, value in settings:
        setattr(app_settings, name, value)

    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_convert(settings: Settings, args) -> int:
    settings.ensure_dirs()
    return asyncio.run(convert(settings, args.images, KIND_CHOICES[args.kind]))


def cmd_pipelines(settings: Settings, args) -> int:
    selector = PipelineSelector(settings.pipelines_dir, settings.pipeline_state_file)
    try:
        if args.select:
            selector.select(args.select)
    except AtlasGenError as e:
        print(str(e), file=sys.stderr)
        return 1

    active = selector.active_name
    for name in selector.list():
        marker = "*" if name == active else " "
        print(f"{marker} {name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlasgen",
        description="Atlas Generator - serialised image-to-3D conversion queue",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c", "--config",
        help="Path to YAML config file",
        default=None,
    )
    parser.add_argument(
        "--worker",
        help="Override worker executable path",
        default=None,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    conv = subparsers.add_parser("convert", help="Convert images, one worker run at a time")
    conv.add_argument("images", nargs="+", help="Image names under the source directory")
    conv.add_argument("-k", "--kind", choices=sorted(KIND_CHOICES), default="obj")
    conv.set_defaults(func=cmd_convert)

    pipes = subparsers.add_parser("pipelines", help="List pipelines or select the active one")
    pipes.add_argument("--select", default=None, help="Pipeline name to make active")
    pipes.set_defaults(func=cmd_pipelines)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.load(args.config)
    if args.worker:
        settings.worker_path = Path(args.worker)

    setup_logging(settings)
    logger = logging.getLogger("atlasgen.cli")
    logger.info("atlasgen v%s: %s", __version__, args.command)

    try:
        return args.func(settings, args)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
