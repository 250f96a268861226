"""CLI driver that stresses a shared rate gate with waves of caller threads.

Usage::

    python scripts/run_demo.py
    python scripts/run_demo.py --wave 200 --wave 50 --pause 5 --limit 20 --window 1
    python scripts/run_demo.py --config client.yaml --live --document doc.json --signature <sig>
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docgate.config.profile import ClientProfile
from docgate.gate.rate_gate import RateGate
from docgate.logger import set_log_level
from docgate.schemas.documents import Document
from docgate.submit.base import BaseSubmitter
from docgate.submit.submitter import DocumentSubmitter, FakeDocumentSubmitter

app = typer.Typer(help="docgate rate gate demo driver.")
console = Console()

DEFAULT_WAVES = [1000, 1000, 100]


class _RunRecorder:
    """Thread-safe collector of completion times and failures."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.started_at = time.monotonic()
        self.completed: list[float] = []
        self.failures: list[str] = []

    def record_success(self) -> None:
        with self._lock:
            self.completed.append(time.monotonic() - self.started_at)

    def record_failure(self, exc: Exception) -> None:
        with self._lock:
            self.failures.append(f"{type(exc).__name__}: {exc}")


def _run_waves(
    submitter: BaseSubmitter,
    document: Document,
    signature: str,
    waves: list[int],
    pause: float,
    spawn_interval: float,
) -> _RunRecorder:
    """Spawn each wave of caller threads, pausing between waves.

    Args:
        submitter: Submitter every thread calls.
        document: Payload each thread submits.
        signature: Signature each thread submits.
        waves: Thread count of every wave.
        pause: Seconds to sleep between waves.
        spawn_interval: Seconds between two thread starts.

    Returns:
        Recorder holding completion times and failures.
    """
    recorder = _RunRecorder()

    def call() -> None:
        try:
            submitter.create(document, signature)
        except Exception as exc:
            recorder.record_failure(exc)
        else:
            recorder.record_success()

    threads: list[threading.Thread] = []
    for index, count in enumerate(waves):
        if index > 0 and pause > 0:
            time.sleep(pause)
        console.print(f"Wave {index + 1}/{len(waves)}: starting {count} thread(s)")
        for n in range(count):
            thread = threading.Thread(target=call, name=f"caller-{index + 1}-{n + 1}")
            thread.start()
            threads.append(thread)
            if spawn_interval > 0:
                time.sleep(spawn_interval)

    for thread in threads:
        thread.join()
    return recorder


def _print_summary(recorder: _RunRecorder, window: float, limit: int) -> None:
    """Print completions per window-sized bucket as a rich table.

    Args:
        recorder: Results of the run.
        window: Bucket width in seconds.
        limit: Gate limit, shown next to every bucket.
    """
    buckets: dict[int, int] = {}
    for elapsed in recorder.completed:
        bucket = int(elapsed // window)
        buckets[bucket] = buckets.get(bucket, 0) + 1

    table = Table(title="Completions per window")
    table.add_column("window start (s)", justify="right")
    table.add_column("completed", justify="right")
    table.add_column("limit", justify="right")
    for bucket in sorted(buckets):
        table.add_row(f"{bucket * window:.2f}", str(buckets[bucket]), str(limit))
    console.print(table)

    peak = max(buckets.values(), default=0)
    console.print(
        f"Completed: {len(recorder.completed)}, failed: {len(recorder.failures)}, "
        f"peak per window: {peak}"
    )
    for failure in recorder.failures[:10]:
        console.print(f"[red]{escape(failure)}[/red]")


@app.callback(invoke_without_command=True)
def run(
    config: Path | None = typer.Option(
        None, "--config", exists=True, help="Client profile YAML."
    ),
    wave: list[int] = typer.Option(
        [], "--wave", help="Threads per wave (repeatable). Default: 1000 1000 100."
    ),
    pause: float = typer.Option(30.0, "--pause", min=0.0, help="Seconds between waves."),
    spawn_interval: float = typer.Option(
        0.005, "--spawn-interval", min=0.0, help="Seconds between thread starts."
    ),
    task_delay: float = typer.Option(
        2.0, "--task-delay", min=0.0, help="Simulated request duration (fake mode)."
    ),
    live: bool = typer.Option(
        False, "--live/--fake", help="Send real HTTP requests instead of simulating them."
    ),
    limit: int | None = typer.Option(None, "--limit", help="Override gate.limit."),
    window: float | None = typer.Option(None, "--window", help="Override gate.window."),
    document_path: Path | None = typer.Option(
        None, "--document", exists=True, help="Document JSON to submit."
    ),
    signature: str = typer.Option("sign", "--signature", help="Detached signature."),
    log_level: str = typer.Option(
        "INFO", "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."
    ),
) -> None:
    """Run waves of concurrent document submissions through one rate gate."""
    # ---- Configure logging ----
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        console.print(f"[red]Invalid log level: {log_level}[/red]")
        raise SystemExit(1)
    set_log_level(log_level.upper())

    # ---- Eager validation ----
    try:
        profile = ClientProfile.from_yaml(config) if config else ClientProfile()
        overrides: dict[str, object] = {}
        if limit is not None:
            overrides["gate.limit"] = limit
        if window is not None:
            overrides["gate.window"] = window
        if overrides:
            profile = profile.with_overrides(overrides)
    except Exception as exc:
        console.print(f"[red]Invalid config: {escape(str(exc))}[/red]")
        raise SystemExit(1) from exc

    try:
        document = (
            Document.model_validate_json(document_path.read_text(encoding="utf-8"))
            if document_path
            else Document()
        )
    except Exception as exc:
        console.print(f"[red]Invalid document: {escape(str(exc))}[/red]")
        raise SystemExit(1) from exc

    waves = wave or DEFAULT_WAVES
    if any(count < 1 for count in waves):
        console.print("[red]Every --wave must start at least one thread.[/red]")
        raise SystemExit(1)

    # ---- Run ----
    gate = RateGate.from_config(profile.gate)
    submitter: BaseSubmitter
    if live:
        submitter = DocumentSubmitter.from_config(profile.submitter, gate)
    else:
        submitter = FakeDocumentSubmitter(gate, delay=task_delay)

    console.print(
        f"[bold]docgate demo[/bold] - "
        f"limit: {profile.gate.limit}/{profile.gate.window:g}s, "
        f"waves: {waves}, mode: {'live' if live else 'fake'}"
    )

    with gate, submitter:
        recorder = _run_waves(submitter, document, signature, waves, pause, spawn_interval)

    _print_summary(recorder, profile.gate.window, profile.gate.limit)

    if recorder.failures:
        raise SystemExit(2)


if __name__ == "__main__":
    app()
