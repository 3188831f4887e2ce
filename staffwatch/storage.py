"""Saved exception reports on disk.

Layout under the artifact root::

    reports/<report_id>/report.json    full report payload
    reports/<report_id>/manifest.json  ids, range and per-kind counts
    reports/latest.json                manifest of the last saved report
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ReportStore:
    def __init__(self, artifact_root: Path):
        self.root = Path(artifact_root) / "reports"

    def _write(self, path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    @staticmethod
    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def save(self, report: dict[str, Any]) -> Path:
        report_dir = self.root / report["report_id"]
        self._write(report_dir / "report.json", report)

        manifest = {
            "report_id": report["report_id"],
            "snapshot_id": report.get("snapshot_id"),
            "generated_at": report.get("generated_at"),
            "range": report.get("range"),
            "counts": report.get("summary", {}).get("by_kind", {}),
            "path": str(report_dir.resolve()),
        }
        self._write(report_dir / "manifest.json", manifest)
        self._write(self.root / "latest.json", manifest)
        logger.debug("Stored report %s in %s", report["report_id"], report_dir)
        return report_dir

    def recent(self, limit: int = 20) -> list[dict[str, Any]]:
        """Manifests of saved reports, newest first."""
        if not self.root.is_dir():
            return []
        manifests = []
        for manifest_file in sorted(self.root.glob("*/manifest.json")):
            try:
                manifests.append(self._read(manifest_file))
            except json.JSONDecodeError:
                logger.warning("Skipping unreadable manifest %s", manifest_file)
        manifests.sort(key=lambda m: m.get("generated_at") or "", reverse=True)
        return manifests[:limit]

    def load(self, report_id: str | None = None) -> dict[str, Any]:
        """Load one report by id, or the most recently saved one."""
        pointer = self.root / report_id / "manifest.json" if report_id else self.root / "latest.json"
        if not pointer.is_file():
            raise FileNotFoundError(f"No saved report: {report_id or 'latest'}")
        rid = self._read(pointer)["report_id"]
        payload = self.root / rid / "report.json"
        if not payload.is_file():
            raise FileNotFoundError(f"Report payload missing: {rid}")
        return self._read(payload)
