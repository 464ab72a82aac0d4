"""Command-line summary of one QReview export.

Examples
--------
python -m qreview_reader.scripts.summarize measurement.tsv
python -m qreview_reader.scripts.summarize measurement.tsv --time-format %H:%M:%S --csv out/verticals.tsv
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from qreview_reader.exceptions import QReviewError
from qreview_reader.export.tables import export_summary
from qreview_reader.ingest.tsv_reader import QReviewTsvReader
from qreview_reader.models.config import ReaderConfig
from qreview_reader.validation.consistency import check_summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="python -m qreview_reader.scripts.summarize",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Read a QReview discharge-measurement export (tab-delimited, Windows-1252)
            and print the summary and its verticals.

            Exit status: 0 parsed, 1 not a QReview export, 2 malformed or undecodable
            export, 3 consistency findings with --strict.
            """
        ),
    )
    p.add_argument("file", help="QReview export")
    p.add_argument("--date-time-format", action="append", default=[],
                   help="strptime pattern for the start date/time (repeatable, tried in order)")
    p.add_argument("--time-format", action="append", default=[],
                   help="strptime pattern for times of day (repeatable, tried in order)")
    p.add_argument("--encoding", default="cp1252", help="Code page of the export")
    p.add_argument("--csv", default=None, help="Write the verticals table (and a JSON sidecar) here")
    p.add_argument("--strict", action="store_true", help="Treat consistency findings as errors (exit status 3)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    ns = p.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    cfg = ReaderConfig(
        date_time_formats=tuple(ns.date_time_format),
        time_formats=tuple(ns.time_format),
        encoding=ns.encoding,
    )

    try:
        summary = QReviewTsvReader(cfg).read(ns.file)
    except QReviewError as e:
        print(f"[error] {e}")
        return 2

    if summary is None:
        print(f"[info] {ns.file}: not a QReview export")
        return 1

    print(f"Station:    {summary.station_name} ({summary.station_number})")
    print(f"Period:     {summary.start_time} > {summary.end_time}")
    print(f"Units:      {'metric' if summary.is_metric else 'imperial'}")
    print(f"Discharge:  {summary.discharge}  (uncertainty {summary.uncertainty_percentage} %)")
    print(f"Verticals:  {len(summary.verticals)}")
    for v in summary.verticals:
        flags = ""
        if v.quality_issues or v.warnings:
            flags = f"  [{len(v.quality_issues)} issues, {len(v.warnings)} warnings]"
        print(f"  #{v.number:>3} at {v.position}: depth={v.depth} v={v.mean_velocity} q={v.discharge}{flags}")
    for w in summary.warnings:
        print(f"[warn] {w}")

    report = check_summary(summary, strict=ns.strict)
    for w in report.warnings:
        print(f"[warn] {w}")
    for e in report.errors:
        print(f"[error] {e}")

    if ns.csv:
        out = export_summary(summary, Path(ns.csv), metadata={"source": str(ns.file), "config": cfg.to_dict()})
        print(f"wrote: {out}")

    return 0 if report.ok else 3


if __name__ == "__main__":
    raise SystemExit(main())
