import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from voucher_verifier.batch.models import BatchItem, BatchReport
from voucher_verifier.batch.runner import BatchRunner
from voucher_verifier.config.settings import Settings
from voucher_verifier.database.connection import close_pool, init_pool
from voucher_verifier.extraction.file_loader import FileLoader
from voucher_verifier.logging.logger import Log
from voucher_verifier.verification.models import Actor, Role
from voucher_verifier.verification.orchestrator import build_orchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voucher-verify",
        description="Verify printed voucher PDFs or voucher codes.",
    )
    parser.add_argument("files", nargs="*", type=Path, help="voucher PDF files")
    parser.add_argument("--code", help="verify a code typed in by hand")
    parser.add_argument("--actor-id", type=int, required=True)
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.ADMINISTRATOR.value,
    )
    parser.add_argument("--association-id", type=int, default=None)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="extract, resolve and authorize only; do not mark anything verified",
    )
    return parser


def _item_line(status: str, item: BatchItem) -> str:
    payload: dict[str, object] = {
        "status": status,
        "source": item.source,
        "code": item.code,
    }
    if item.error_kind:
        payload["error"] = item.error_kind
        payload["message"] = item.message
    if item.warnings:
        payload["warnings"] = list(item.warnings)
    return json.dumps(payload, ensure_ascii=False)


def print_report(report: BatchReport) -> None:
    for item in report.succeeded:
        print(_item_line("ok", item))
    for item in report.already_verified:
        print(_item_line("already_verified", item))
    for item in report.errors:
        print(_item_line("error", item))


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: settings -> logging -> pool -> orchestrator -> batch."""
    args = build_parser().parse_args(argv)
    if not args.files and not args.code:
        print("Nothing to verify: pass PDF files or --code", file=sys.stderr)
        return 2
    if args.files and args.code:
        print("Pass either PDF files or --code, not both", file=sys.stderr)
        return 2

    role = Role(args.role)
    if role == Role.RESTRICTED and args.association_id is None:
        print("--association-id is required for the restricted role", file=sys.stderr)
        return 2
    actor = Actor(id=args.actor_id, role=role, association_id=args.association_id)

    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        orchestrator = build_orchestrator(settings)
        runner = BatchRunner(orchestrator, settings.batch_workers)
        metadata = {"client": "voucher-verify"}
        if args.code:
            if args.dry_run:
                outcome = orchestrator.preview_code(args.code, actor)
                print(json.dumps(outcome.to_dict(), ensure_ascii=False, default=str))
                return 0 if outcome.success else 1
            report = runner.verify_codes([args.code], actor, metadata)
        else:
            loader = FileLoader()
            try:
                documents = [loader.load(path) for path in args.files]
            except FileNotFoundError as exc:
                print(exc, file=sys.stderr)
                return 2
            if args.dry_run:
                report = runner.preview(documents, actor)
            else:
                report = runner.verify(documents, actor, metadata)
        print_report(report)
        return 0 if not report.errors and not report.already_verified else 1
    finally:
        close_pool()


if __name__ == "__main__":
    sys.exit(main())
