"""Command line interface for the scene-graph code generator."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .enginelib.errors import CodegenError
from .service import GeneratorConfig, GeneratorService


def _add_common(parser: argparse.ArgumentParser):
    parser.add_argument("-c", "--config", help="Optional YAML config file")
    parser.add_argument("-i", "--input", help="Path to a scene file or a directory of scene files")
    parser.add_argument("-l", "--language", help="Target language (dart, js)")
    parser.add_argument("-e", "--engine", help="Template engine (mustache or jinja)")
    parser.add_argument(
        "--ignore-private",
        action="store_true",
        default=None,
        help="Skip artboards, animations, state machines and properties starting with 'internal', 'private' or '_'",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scene-graph code generator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Render the template for all input files")
    _add_common(generate)
    generate.add_argument("-o", "--output", help="Output file path")
    generate.add_argument("-t", "--template", help="Custom template file path")
    generate.add_argument("--data-json", help="Also write the template data to this JSON file")

    inspect = sub.add_parser("inspect", help="Print the template data as JSON")
    _add_common(inspect)

    validate = sub.add_parser("validate", help="Decode and normalise inputs without writing")
    _add_common(validate)
    return parser


def _load_service(args: argparse.Namespace) -> GeneratorService:
    overrides = {
        "input": args.input,
        "output": getattr(args, "output", None),
        "template": getattr(args, "template", None),
        "data_json": getattr(args, "data_json", None),
        "language": args.language,
        "engine": args.engine,
        "ignore_private": args.ignore_private,
    }
    if args.config:
        return GeneratorService.from_config_file(Path(args.config), **overrides)
    mapping = {key: value for key, value in overrides.items() if value is not None}
    return GeneratorService(GeneratorConfig.from_mapping(mapping))


def cmd_generate(args: argparse.Namespace) -> int:
    service = _load_service(args)
    result = service.generate()
    print(json.dumps(result.summary(), indent=2))
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    service = _load_service(args)
    print(json.dumps(service.inspect(), indent=2, ensure_ascii=False))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    service = _load_service(args)
    result = service.validate()
    print(json.dumps(result.summary(), indent=2))
    return 0 if result.ok else 1


COMMAND_HANDLERS = {
    "generate": cmd_generate,
    "inspect": cmd_inspect,
    "validate": cmd_validate,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    handler = COMMAND_HANDLERS[args.command]
    try:
        return handler(args)
    except CodegenError as error:
        logging.getLogger(__name__).error("%s", error)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
