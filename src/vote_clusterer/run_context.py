"""Structured output directory for a clustering run.

A RunContext gives each run:
  - An output tree: <results_root>/<dataset>/<date>/ with a data/ subdirectory
  - Console capture of both stdout and stderr (run_log.txt)
  - Run metadata (run_info.json): git hash, timestamps, Python version, parameters
  - A `latest` symlink pointing to the most recent run of the dataset

Usage:
    with RunContext(dataset="congress_train", params=vars(args)) as ctx:
        save_assignments(frame, ctx.data_dir)
"""

from __future__ import annotations

import io
import json
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType

from vote_clusterer.config import RESULTS_ROOT


class _TeeStream:
    """Wraps a stream to duplicate output to both the original stream and a buffer.

    Several tees may share one buffer, so stdout and stderr interleave in
    run_log.txt in the order they were written.
    """

    def __init__(self, original: io.TextIOBase, buffer: io.StringIO) -> None:
        self._original = original
        self._buffer = buffer

    def write(self, data: str) -> int:
        self._original.write(data)
        self._buffer.write(data)
        return len(data)

    def flush(self) -> None:
        self._original.flush()


def _git_commit_hash() -> str:
    """Get the current git commit hash, or 'unknown' if not in a repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return "unknown"


class RunContext:
    """Context manager that sets up structured output for a clustering run.

    Attributes:
        dataset: Name of the input data set (usually the vote file's stem).
        params: Run parameters to record in run_info.json.
        run_dir: Root of this run's output (<results_root>/<dataset>/<date>/).
        data_dir: Directory for assignment tables.
    """

    def __init__(
        self,
        dataset: str,
        params: dict | None = None,
        results_root: Path | None = None,
    ) -> None:
        self.dataset = dataset
        self.params = params or {}

        root = results_root or Path(RESULTS_ROOT)
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")

        self.run_dir = root / dataset / today
        self.data_dir = self.run_dir / "data"

        self._dataset_dir = root / dataset
        self._today = today
        self._buffer = io.StringIO()
        self._original_streams: tuple[io.TextIOBase, io.TextIOBase] | None = None
        self._start_time: datetime | None = None
        self.status = "ok"

    def __enter__(self) -> RunContext:
        self.setup()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_val is not None:
            self.status = f"failed: {exc_val}"
        self.finalize()

    def setup(self) -> None:
        """Create directories and start log capture."""
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(exist_ok=True)

        self._original_streams = (sys.stdout, sys.stderr)
        sys.stdout = _TeeStream(sys.stdout, self._buffer)  # type: ignore[assignment]
        sys.stderr = _TeeStream(sys.stderr, self._buffer)  # type: ignore[assignment]
        self._start_time = datetime.now(timezone.utc)

    def finalize(self) -> None:
        """Write run_info.json, run_log.txt, and update latest symlink."""
        # Restore streams before writing metadata (so our writes aren't captured)
        if self._original_streams is not None:
            sys.stdout, sys.stderr = self._original_streams  # type: ignore[assignment]
            self._original_streams = None

        log_path = self.run_dir / "run_log.txt"
        log_path.write_text(self._buffer.getvalue(), encoding="utf-8")

        end_time = datetime.now(timezone.utc)
        run_info = {
            "dataset": self.dataset,
            "run_date": self._today,
            "status": self.status,
            "timestamp_start": (self._start_time.isoformat() if self._start_time else None),
            "timestamp_end": end_time.isoformat(),
            "git_commit": _git_commit_hash(),
            "python_version": sys.version,
            "params": self.params,
        }
        info_path = self.run_dir / "run_info.json"
        with open(info_path, "w") as f:
            json.dump(run_info, f, indent=2, default=str)

        # Update latest symlink (relative so it's portable)
        latest = self._dataset_dir / "latest"
        if latest.is_symlink() or latest.exists():
            latest.unlink()
        latest.symlink_to(self._today)
