#!/usr/bin/env python3
"""Command-line front end: walk a local file through the validation wizard."""

import argparse
import json
import mimetypes
import sys
from pathlib import Path
from typing import Optional

from submission_validator.services.registry import load_registry
from submission_validator.services.validation_api import RemoteValidator
from submission_validator.services.validation_service import build_service
from submission_validator.services.wizard import SelectedFile, ValidationWizard, WizardState
from submission_validator.utils.config import _env, EXCERPT_MAX_CHARS, SUBMISSION_TYPES_FILE


def read_excerpt(path: Path, mime_type: str) -> Optional[str]:
    # only plain text is previewed; binary formats would need a document parser
    if not mime_type.startswith("text/"):
        return None
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return f.read(EXCERPT_MAX_CHARS) or None


def selected_file(path: Path, mime_type: Optional[str] = None) -> SelectedFile:
    mime = mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return SelectedFile(
        name=path.name,
        mime_type=mime,
        size_bytes=path.stat().st_size,
        content_excerpt=read_excerpt(path, mime),
    )


def cmd_validate(args) -> int:
    """Validate one file.

    Returns:
        0 when a report was produced, 1 on bad input, 2 when validation failed
    """
    if not args.file.is_file():
        print(f"Error: {args.file} is not a file")
        return 1

    if args.api_url:
        token = args.token or _env("BACKEND_API_KEY")
        if not token:
            print("Error: --token (or BACKEND_API_KEY) is required with --api-url")
            return 1
        validator = RemoteValidator(args.api_url, token)
    else:
        validator = build_service()

    wizard = ValidationWizard(validator)
    wizard.select_file(selected_file(args.file, args.mime_type))
    wizard.choose_category(args.type, args.custom_type)
    if wizard.state is not WizardState.READY_TO_VALIDATE:
        print("Error: --custom-type is required when --type is 'others'")
        return 1

    report = wizard.validate()
    if report is None:
        print(wizard.error, file=sys.stderr)
        return 2
    print(json.dumps(report.to_payload(), indent=2))
    return 0


def cmd_types(args) -> int:
    for p in load_registry(SUBMISSION_TYPES_FILE).profiles():
        formats = ", ".join(p.allowed_formats) or "any"
        print(f"{p.key:<20} {p.max_size_bytes // (1024 * 1024):>4} MB  {formats}")
    return 0


def cmd_serve(args) -> int:
    from submission_validator.server import main as serve
    serve()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="submission-validator", description="Check a file before submitting it.")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("validate", help="Validate a local file")
    v.add_argument("file", type=Path, help="Path to the file to check")
    v.add_argument("--type", required=True, help="Submission type key (resume, thesis, ...)")
    v.add_argument("--custom-type", default=None, help="Free-text category when --type is 'others'")
    v.add_argument("--mime-type", default=None, help="Override the MIME type guessed from the extension")
    v.add_argument("--api-url", default=None, help="Use a running service instead of validating in-process")
    v.add_argument("--token", default=None, help="Bearer token for --api-url")
    v.set_defaults(func=cmd_validate)

    t = sub.add_parser("types", help="List submission types")
    t.set_defaults(func=cmd_types)

    s = sub.add_parser("serve", help="Run the HTTP service")
    s.set_defaults(func=cmd_serve)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
