"""
Snapshot File
Whole-store JSON persistence: one file, rewritten on every mutation.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.account import Account
from ..models.activity import Activity
from ..models.call import CallRecord
from ..utils.observability import logger


class StoreSnapshot(BaseModel):
    """The serialized shape of the whole store."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    accounts: List[Account] = Field(default_factory=list)
    call_records: List[CallRecord] = Field(default_factory=list)
    activities: List[Activity] = Field(default_factory=list)


class SnapshotFile:
    """
    Reads and writes the store snapshot at a fixed path.

    Usage:
        snapshot = SnapshotFile("/tmp/pilotcrm-data.json")
        raw = snapshot.read()          # None when no file exists yet
        snapshot.write(StoreSnapshot(...))
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Optional[Dict[str, Any]]:
        """
        Load the raw snapshot document.

        Returns:
            Parsed JSON dict, or None if the file does not exist

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON object
        """
        if not self.path.exists():
            return None

        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Snapshot at {self.path} is not a JSON object")
        return raw

    def write(self, snapshot: StoreSnapshot) -> None:
        """
        Replace the snapshot file with the given store state.

        Writes a sibling temp file first and renames it over the
        target, so readers never see a half-written snapshot.

        Raises:
            OSError: If the directory is not writable
        """
        payload = snapshot.model_dump_json(by_alias=True)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(
            f"Snapshot written to {self.path}",
            extra={"bytes": len(payload)}
        )
