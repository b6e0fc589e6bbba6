"""
Output Manager — Snapshot directory for one scenario run.

Each run writes into {base_dir}/YYYYMMDD_HHMM_{run_name}, created on the first
snapshot: one JSON file per request body sent (e.g. addLineItem.json), one per
cart snapshot (e.g. cartWithAddedLineItem.json), and scenario_results.json.

Snapshots are observational only. A directory or file that cannot be written
produces a warning and the run continues.

Folders of earlier runs with the same run_name are removed once they are
older than retention_days (0 = keep all). Other folders in base_dir are
never touched.
"""

import os
import re
import json
import shutil
from datetime import datetime, timedelta
from typing import Any, Optional


class OutputManager:
    """Manages the timestamped snapshot directory of a run.

    Attributes:
        base_dir: Root output directory (default: ./dynamic).
        run_name: Used in folder naming (sanitized to alphanumeric + hyphens).
        retention_days: Delete this run_name's folders older than this many days.
        current_dir: Path to the current run's output directory (None until created).
    """

    def __init__(self, base_dir: str, run_name: str, retention_days: int = 30):
        self.base_dir = base_dir
        self.run_name = run_name
        self.retention_days = retention_days
        self.current_dir = None
        self._run_timestamp = datetime.now()

    @property
    def folder_suffix(self) -> str:
        return "".join(c if c.isalnum() or c in '-_' else '_' for c in self.run_name)

    def create_timestamped_dir(self) -> str:
        """Create {base_dir}/YYYYMMDD_HHMM_{run_name} and make it current.

        current_dir stays None if the directory cannot be created.
        """
        folder_name = f"{self._run_timestamp.strftime('%Y%m%d_%H%M')}_{self.folder_suffix}"
        path = os.path.join(self.base_dir, folder_name)
        os.makedirs(path, exist_ok=True)
        self.current_dir = path
        return path

    def cleanup_old_folders(self, debug: bool = False) -> int:
        """Remove this run_name's folders older than retention_days.

        Returns:
            The number of folders deleted.
        """
        if self.retention_days <= 0 or not os.path.isdir(self.base_dir):
            return 0

        cutoff_date = datetime.now() - timedelta(days=self.retention_days)
        pattern = re.compile(rf'^(\d{{8}}_\d{{4}})_{re.escape(self.folder_suffix)}$')
        deleted_count = 0

        for folder_name in os.listdir(self.base_dir):
            match = pattern.match(folder_name)
            folder_path = os.path.join(self.base_dir, folder_name)
            if not match or not os.path.isdir(folder_path):
                continue

            try:
                if datetime.strptime(match.group(1), "%Y%m%d_%H%M") < cutoff_date:
                    shutil.rmtree(folder_path)
                    deleted_count += 1
                    if debug:
                        print(f"  Deleted old output folder: {folder_name}")
            except (ValueError, OSError) as e:
                print(f"  Warning: Could not remove folder {folder_name}: {e}")

        return deleted_count

    def get_output_path(self, filename: str) -> str:
        """Get the full path for a file in the current output directory.

        Raises:
            RuntimeError: If create_timestamped_dir() has not been called yet.
        """
        if not self.current_dir:
            raise RuntimeError("Output directory not created. Call create_timestamped_dir() first.")
        return os.path.join(self.current_dir, filename)

    def save_json(self, name: str, data: Any) -> Optional[str]:
        """Write data as pretty-printed JSON to {current_dir}/{name}.json.

        Creates the run directory on first use. Write failures are reported
        and swallowed: snapshots never change the outcome of a run.

        Returns:
            The written path, or None if the write failed.
        """
        filename = name if name.endswith(".json") else f"{name}.json"
        try:
            if not self.current_dir:
                self.create_timestamped_dir()
            path = self.get_output_path(filename)
            with open(path, "w") as f:
                json.dump(data, f, indent=2, default=str)
        except OSError as e:
            print(f"  Warning: Could not write snapshot {filename}: {e}")
            return None
        return path
