"""JSON export adapter - reads tracker data from a single file."""

import json
import logging
from pathlib import Path

from cadence.core.models import Activity, ActivityLog, ConfigSnapshot, VacationDay
from cadence.core.snapshot import Snapshot

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when tracker data cannot be read."""

    pass


class JsonSnapshotStore:
    """
    JSON export storage.

    Implements SnapshotRepository protocol. The file holds one object with
    `activities`, `logs`, `vacationDays` and `configSnapshots` arrays; any
    of them may be missing. Records that fail to parse are skipped with a
    warning so one bad row does not hide the rest of the history.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def _read(self) -> dict:
        if not self.path.exists():
            logger.debug(f"No data file at {self.path}, starting empty")
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Malformed JSON in {self.path}: {e}") from e
        except OSError as e:
            raise SnapshotError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotError(f"Expected a JSON object in {self.path}")
        return data

    @staticmethod
    def _parse_all(records: list, parser, label: str) -> tuple:
        parsed = []
        for record in records or []:
            try:
                parsed.append(parser(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed {label} record: {e}")
        return tuple(parsed)

    def load(self) -> Snapshot:
        """Load a snapshot. A missing file yields an empty snapshot."""
        data = self._read()
        return Snapshot(
            activities=self._parse_all(data.get("activities"), Activity.from_dict, "activity"),
            logs=self._parse_all(data.get("logs"), ActivityLog.from_dict, "log"),
            vacation_days=self._parse_all(data.get("vacationDays"), VacationDay.from_dict, "vacation day"),
            config_snapshots=self._parse_all(
                data.get("configSnapshots"), ConfigSnapshot.from_dict, "config snapshot"
            ),
        )
