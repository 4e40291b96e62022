"""Command line access to the vcvars environment.

Usage:
    vcvars get INCLUDE                    # one variable
    vcvars get LIB --paths                # one path per line
    vcvars get INCLUDE --cached           # read/write the OUT_DIR cache
    vcvars dump --json                    # everything vcvars set
    vcvars locate                         # where Visual Studio lives
    vcvars --vswhere-arg=-version --vswhere-arg="[16.0,17.0)" dump
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .config import VcvarsConfig
from .environment import Vcvars
from .errors import VcvarsError
from .vswhere import find_instance


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vcvars", description="Capture the environment set up by vcvarsall.bat")
    parser.add_argument("--target-arch", default=None, help="Target architecture (default: VCVARS_TARGET_ARCH or host)")
    parser.add_argument(
        "--vswhere-arg",
        action="append",
        default=None,
        metavar="ARG",
        help="vswhere argument used instead of -latest (repeatable)",
    )
    parser.add_argument("--cache-dir", type=Path, default=None, help="Cache root (default: VCVARS_CACHE_DIR or OUT_DIR)")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds to wait for vswhere and vcvars")
    parser.add_argument(
        "--log-level",
        default=os.getenv("VCVARS_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    get = sub.add_parser("get", help="Print one variable")
    get.add_argument("name")
    get.add_argument("--cached", action="store_true", help="Use the on-disk cache")
    get.add_argument("--paths", action="store_true", help="Print one path per line")

    dump = sub.add_parser("dump", help="Print every variable")
    dump.add_argument("--json", action="store_true", help="Print a JSON object")

    sub.add_parser("locate", help="Print the Visual Studio installation in use")
    sub.add_parser("clear-cache", help="Delete the on-disk cache files")
    return parser


def _config_from_args(args: argparse.Namespace) -> VcvarsConfig:
    return VcvarsConfig.from_env(
        target_arch=args.target_arch,
        cache_dir=args.cache_dir,
        vswhere_args=tuple(args.vswhere_arg) if args.vswhere_arg else None,
        timeout_s=args.timeout,
    )


def run(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    vcvars = Vcvars(config)

    if args.command == "get":
        if args.paths:
            for path in vcvars.get_paths(args.name, cached=args.cached):
                print(path)
        elif args.cached:
            print(vcvars.get_cached(args.name))
        else:
            print(vcvars.get(args.name))
    elif args.command == "dump":
        env = vcvars.environment()
        if args.json:
            print(json.dumps(env, indent=2, sort_keys=True))
        else:
            for key in sorted(env):
                print(f"{key}={env[key]}")
    elif args.command == "locate":
        instance = find_instance(config)
        print(instance.installation_path)
        if instance.installation_version:
            print(instance.installation_version)
    elif args.command == "clear-cache":
        vcvars.cache().clear()
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        code = run(args)
    except VcvarsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
