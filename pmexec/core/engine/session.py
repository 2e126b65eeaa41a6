"""
Process session — spawn a child, tee its output, collect its status.

Lifecycle
─────────
    SPAWNING ──► RUNNING ──► COMPLETED      (exited with a code)
        │            ├─────► SIGNAL_KILLED  (terminated by a signal)
        │            └─────► FAILED         (IoFailure / WaitFailed)
        └──────────────────► SPAWN_FAILED

Thread model
────────────
Pipes have bounded OS buffers: waiting for exit before draining them
deadlocks as soon as the child fills one. So, per session:

- one reader thread per captured pipe pushes chunks into a shared
  ``queue.Queue`` — this is the merge, in host-observed arrival order;
- one waiter thread blocks on ``Popen.wait()``;
- the calling thread runs the tee over the merged queue.

The outcome is ready only once the tee and the wait both finish.
If the tee fails, the readers keep draining into the (discarded)
queue so the child can run to completion and be reaped; the wait
result is then dropped and the ``IoFailure`` re-raised.
"""

from __future__ import annotations

import concurrent.futures
import logging
import queue
import subprocess
from enum import StrEnum
from typing import IO, Generator

from pmexec.core.engine.tee import Sink, stderr_sink, stdout_sink, tee
from pmexec.core.errors import ExecError, IoFailure, SpawnFailed, WaitFailed
from pmexec.core.models.command import SpawnSpec
from pmexec.core.models.output import ExitStatus, Output

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024

# Marks the end of one reader's stream in the merge queue
_EOF = object()


class SessionState(StrEnum):
    """Process session states."""

    SPAWNING = "spawning"
    RUNNING = "running"
    COMPLETED = "completed"
    SIGNAL_KILLED = "signal_killed"
    SPAWN_FAILED = "spawn_failed"
    FAILED = "failed"


def _pump(pipe: IO[bytes], sink: queue.Queue, name: str) -> None:
    """Read ``pipe`` until EOF, pushing each chunk onto ``sink``."""
    try:
        while True:
            chunk = pipe.read1(_CHUNK_SIZE)  # type: ignore[attr-defined]
            if not chunk:
                break
            sink.put(chunk)
    except (OSError, ValueError) as e:
        sink.put(IoFailure(f"Failed to read child {name}: {e}"))
    finally:
        sink.put(_EOF)
        pipe.close()


def _merged(source: queue.Queue, streams: int) -> Generator[bytes, None, None]:
    """Yield chunks from ``streams`` readers until all of them hit EOF."""
    remaining = streams
    while remaining:
        item = source.get()
        if item is _EOF:
            remaining -= 1
            continue
        if isinstance(item, ExecError):
            raise item
        yield item


def _wait(proc: subprocess.Popen) -> int:
    return proc.wait()


class ProcessSession:
    """One execution of one spawn spec.

    Args:
        spec: Program and arguments to launch.
        collect_stderr_only: Capture stderr only; stdout is inherited
            from this process and goes straight to the terminal.
        mute: Do not echo captured output to the live sink.
        live: Live sink override (default: stdout when both streams
            are captured, stderr otherwise).
    """

    def __init__(
        self,
        spec: SpawnSpec,
        *,
        collect_stderr_only: bool = False,
        mute: bool = False,
        live: Sink | None = None,
    ) -> None:
        self.spec = spec
        self.collect_stderr_only = collect_stderr_only
        self.mute = mute
        self._live = live
        self.state = SessionState.SPAWNING
        self.status: ExitStatus | None = None

    def _spawn(self) -> subprocess.Popen:
        logger.debug("Spawning: %s", self.spec.argv)
        try:
            return subprocess.Popen(
                self.spec.argv,
                stdout=None if self.collect_stderr_only else subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            self.state = SessionState.SPAWN_FAILED
            raise SpawnFailed(f"Failed to spawn `{self.spec.program}`: {e}") from e

    def _pipes(self, proc: subprocess.Popen) -> list[tuple[str, IO[bytes]]]:
        wanted = ["stderr"] if self.collect_stderr_only else ["stdout", "stderr"]
        pipes = []
        for name in wanted:
            pipe = getattr(proc, name)
            if pipe is None:
                raise IoFailure(f"Child process did not have a handle to {name}")
            pipes.append((name, pipe))
        return pipes

    def _live_sink(self) -> Sink:
        if self._live is not None:
            return self._live
        return stderr_sink() if self.collect_stderr_only else stdout_sink()

    def run(self) -> Output:
        """Spawn the child and block until output and status are both in.

        Raises:
            SpawnFailed: The executable could not be launched.
            IoFailure: Reading the child's output or echoing it failed.
            WaitFailed: The exit status could not be obtained.
        """
        proc = self._spawn()
        self.state = SessionState.RUNNING

        try:
            pipes = self._pipes(proc)
        except IoFailure:
            proc.kill()
            proc.wait()
            self.state = SessionState.FAILED
            raise

        chunks: queue.Queue = queue.Queue()
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=len(pipes) + 1,
            thread_name_prefix="pmexec-session",
        ) as pool:
            waiter = pool.submit(_wait, proc)
            for name, pipe in pipes:
                pool.submit(_pump, pipe, chunks, name)

            try:
                contents = tee(
                    _merged(chunks, len(pipes)),
                    self._live_sink(),
                    mute=self.mute,
                )
            except ExecError:
                self.state = SessionState.FAILED
                logger.debug("Tee failed for %s, waiting for child to exit", self.spec.program)
                raise

            try:
                returncode = waiter.result()
            except OSError as e:
                self.state = SessionState.FAILED
                raise WaitFailed(f"Child process encountered an error: {e}") from e

        self.status = ExitStatus.from_returncode(returncode)
        self.state = (
            SessionState.SIGNAL_KILLED if self.status.killed else SessionState.COMPLETED
        )
        logger.debug(
            "%s finished: code=%s signal=%s, %d bytes captured",
            self.spec.program,
            self.status.code,
            self.status.signal,
            len(contents),
        )
        return Output.from_status(contents, self.status)


def run_session(
    spec: SpawnSpec,
    *,
    collect_stderr_only: bool = False,
    mute: bool = False,
    live: Sink | None = None,
) -> Output:
    """Convenience wrapper: build a ``ProcessSession`` and run it."""
    session = ProcessSession(
        spec,
        collect_stderr_only=collect_stderr_only,
        mute=mute,
        live=live,
    )
    return session.run()
