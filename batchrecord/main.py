import argparse
import asyncio
import json
import sys
from pathlib import Path

from batchrecord.config.exceptions import ConfigurationError
from batchrecord.config.settings import Settings
from batchrecord.core.errors import ErrorDetail
from batchrecord.ingestion.models import RawFile, RejectedFile
from batchrecord.logging.logger import Log
from batchrecord.pipeline.states import ExtractionState, Failed, Ready
from batchrecord.session import IntakeSession, build_session


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="batchrecord",
        description="Extract structured batch-record data from scanned images.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="images or documents to upload")
    parser.add_argument(
        "--publish",
        action="store_true",
        help="post every extracted record set to the spreadsheet webhook",
    )
    parser.add_argument(
        "--no-extract",
        action="store_true",
        help="only validate and list the files",
    )
    return parser.parse_args(argv)


def _describe(state: ExtractionState) -> dict[str, object]:
    entry: dict[str, object] = {"state": state.label}
    if isinstance(state, Ready):
        entry["records"] = state.records.to_dict()
    elif isinstance(state, Failed):
        entry["error"] = {"stage": state.error.stage.value, "message": state.error.message}
    return entry


async def run(settings: Settings, paths: list[Path], *, extract: bool, publish: bool) -> int:
    """Upload the files, extract every image and print a JSON report.

    Returns the process exit code: 1 if any file was rejected or failed.
    """
    session = build_session(settings)
    report: dict[str, list[dict[str, object]]] = {"rejected": [], "files": []}
    failed = False
    try:
        missing = [path for path in paths if not path.is_file()]
        rejected = [RejectedFile(name=str(path), reason="File not found") for path in missing]
        result = session.add_files(RawFile.from_path(path) for path in paths if path not in missing)
        rejected.extend(result.rejected)
        report["rejected"] = [{"name": r.name, "reason": r.reason} for r in rejected]
        failed = bool(rejected)

        if extract:
            for file in session.files:
                session.extract(file.id)

        for file in session.files:
            state = await session.wait(file.id)
            entry: dict[str, object] = {"name": file.name, "type": file.subtype, **_describe(state)}
            failed = failed or isinstance(state, Failed)
            if publish and isinstance(state, Ready):
                published, ok = await _publish(session, file.id)
                entry["published"] = published
                failed = failed or not ok
            report["files"].append(entry)
    finally:
        await session.aclose()

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 1 if failed else 0


async def _publish(session: IntakeSession, file_id: str) -> tuple[object, bool]:
    session.select(file_id)
    ack = await session.publish()
    if isinstance(ack, ErrorDetail):
        return {"error": {"stage": ack.stage.value, "message": ack.message}}, False
    return ack, True


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build session -> extract -> report.

    Exits with 2 when a provider credential or URL is missing.
    """
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        return asyncio.run(
            run(settings, args.files, extract=not args.no_extract, publish=args.publish)
        )
    except ConfigurationError as exc:
        Log.error(f"Configuration error: {exc}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
