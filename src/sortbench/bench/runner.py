"""Benchmark execution engine.

Orchestrates:
1. Configuration validation
2. System profiling
3. Job generation and seeded shuffling
4. Dispatch of jobs to a pool of worker threads
5. Per-cell runtime limits
6. Aggregation of the recorded samples

The coordinator (the thread calling :meth:`BenchRunner.run`) is the
only owner of the job stack and the cell table. Workers communicate
with it purely through queues, so neither structure needs a lock.

With a single worker the same job stack and cell rules are driven
inline, without threads.
"""

from __future__ import annotations

import queue
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Sequence

from sortbench.algorithms import AlgorithmUnderTest, select_algorithms
from sortbench.bench.config import BenchConfig, check_config
from sortbench.bench.jobs import Job, generate_jobs, shuffle_jobs
from sortbench.bench.results import BenchRun, ResultTable, ScheduleSummary
from sortbench.bench.system import (
    capture_system_profile,
    default_worker_count,
    format_system_profile,
)
from sortbench.bench.timing import run_trial
from sortbench.bench.worker import (
    Closed,
    Command,
    Failed,
    Identify,
    Measured,
    Ready,
    Report,
    Work,
    Worker,
)
from sortbench.errors import BenchmarkError, CandidateCrashError, SchedulerError
from sortbench.logging import get_logger

log = get_logger("bench.runner")


# ---------------------------------------------------------------------------
# Cell table and job stack
# ---------------------------------------------------------------------------


@dataclass
class Cell:
    """Timing state of one (algorithm, size) pair."""

    samples: list[int] = field(default_factory=list)
    total_ns: int = 0
    exhausted: bool = False


class JobBoard:
    """The job stack plus the cell table, owned by the coordinator.

    Once a cell's cumulative time reaches the runtime limit it is
    exhausted for good: its remaining jobs are discarded when they reach
    the top of the stack and late results for it are dropped.
    """

    def __init__(
        self,
        jobs: list[Job],
        runtime_limit_ns: int,
        labels: Callable[[Job], str] | None = None,
    ) -> None:
        self._stack = jobs
        self.runtime_limit_ns = runtime_limit_ns
        self.cells: dict[tuple[int, int], Cell] = {job.cell: Cell() for job in jobs}
        self.summary = ScheduleSummary(jobs_generated=len(jobs))
        self._label = labels or (lambda job: f"cell {job.cell}")

    @property
    def remaining(self) -> int:
        return len(self._stack)

    def next_job(self) -> Job | None:
        """Pop the next job whose cell is still active, or None."""
        while self._stack:
            job = self._stack.pop()
            if self.cells[job.cell].exhausted:
                self.summary.jobs_discarded += 1
                continue
            return job
        return None

    def record(self, job: Job, elapsed_ns: int) -> bool:
        """Record the sample of an executed job.

        Returns False when the sample was dropped because its cell was
        exhausted while the job was in flight.
        """
        self.summary.jobs_executed += 1
        cell = self.cells[job.cell]
        if cell.exhausted:
            self.summary.samples_dropped += 1
            return False
        cell.samples.append(elapsed_ns)
        cell.total_ns += elapsed_ns
        if cell.total_ns >= self.runtime_limit_ns:
            cell.exhausted = True
            self.summary.cells_exhausted += 1
            log.info(
                "Runtime limit reached for %s after %d samples",
                self._label(job),
                len(cell.samples),
            )
        return True

    def samples(self) -> dict[tuple[int, int], list[int]]:
        return {key: list(cell.samples) for key, cell in self.cells.items()}


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback after every recorded sample."""

    algorithm: str
    size: int
    trial_index: int
    elapsed_ns: int
    jobs_done: int
    jobs_total: int
    recorded: bool = True


# Type alias for the progress callback.
ProgressCallback = Any  # Callable[[BenchProgress], None] | None


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Executes a benchmark run according to a BenchConfig.

    Usage::

        config = BenchConfig(...)
        runner = BenchRunner(config)
        run = runner.run()
    """

    def __init__(
        self,
        config: BenchConfig,
        progress_callback: ProgressCallback = None,
        *,
        algorithms: Sequence[AlgorithmUnderTest] | None = None,
        capture_system: bool = True,
    ) -> None:
        self.config = config
        self.progress: Any = progress_callback or self._default_progress
        self._algorithms = algorithms
        self.capture_system = capture_system
        self.algorithms: list[AlgorithmUnderTest] = []
        self.sizes: list[int] = []
        self.workers = 0

    def run(self) -> BenchRun:
        """Execute the full benchmark.

        Returns:
            The aggregated run.

        Raises:
            ConfigurationError: If the configuration is invalid.
            CorrectnessError: If a candidate produced wrong output.
            CandidateCrashError: If a candidate raised.
            SchedulerError: If coordinator and workers fell out of step.
        """
        # Phase 1: Validate configuration.
        if self._algorithms is None:
            check_config(self.config)
            self.algorithms = list(select_algorithms(self.config.algorithms))
        else:
            # Caller-supplied candidates bypass the registration table.
            ids = [a.id for a in self._algorithms]
            self.config = replace(self.config, algorithms=ids)
            check_config(self.config, known_algorithms=ids)
            self.algorithms = list(self._algorithms)
        self.sizes = self.config.sizes
        self.workers = self.config.workers or default_worker_count()

        # Phase 2: System profiling.
        system = None
        if self.capture_system:
            log.info("Capturing system profile...")
            system = capture_system_profile()
            log.info("\n%s", format_system_profile(system))

        # Phase 3: Jobs.
        jobs = generate_jobs(
            self.algorithms, self.sizes, self.config.trials, self.config.size_limits
        )
        shuffle_jobs(jobs, self.config.seed)
        board = JobBoard(jobs, self.config.runtime_limit_ns, labels=self._label)
        log.info(
            "Running %d jobs (%d algorithms, sizes up to %s) on %d worker%s",
            len(jobs),
            len(self.algorithms),
            f"{self.sizes[-1]:,}" if self.sizes else "-",
            self.workers,
            "" if self.workers == 1 else "s",
        )

        # Phase 4: Execute.
        start = time.monotonic()
        if self.workers == 1:
            self._run_inline(board)
        else:
            self._run_pool(board, self.workers)
        summary = board.summary
        summary.workers = self.workers
        summary.wall_time_s = time.monotonic() - start

        if summary.jobs_executed + summary.jobs_discarded != summary.jobs_generated:
            raise SchedulerError(
                "job accounting mismatch",
                generated=summary.jobs_generated,
                executed=summary.jobs_executed,
                discarded=summary.jobs_discarded,
            )
        log.info(
            "Done: %d executed, %d discarded, %d late samples dropped, %d cells exhausted",
            summary.jobs_executed,
            summary.jobs_discarded,
            summary.samples_dropped,
            summary.cells_exhausted,
        )

        # Phase 5: Aggregate.
        samples = board.samples()
        table = ResultTable.from_samples(
            self.algorithms,
            self.sizes,
            samples,
            min_acceptable=self.config.min_acceptable_tests,
            outlier_coefficient=self.config.outlier_coefficient,
        )
        return BenchRun(
            config=self.config,
            table=table,
            summary=summary,
            system=system,
            samples=samples,
        )

    # -- drivers ----------------------------------------------------------

    def _run_inline(self, board: JobBoard) -> None:
        """Single-threaded driver: same stack and cell rules, no threads."""
        while True:
            job = board.next_job()
            if job is None:
                return
            result = run_trial(
                self.algorithms[job.algorithm_index],
                self.sizes[job.size_index],
                job.trial_index,
                seed=self.config.seed,
                cooldown_s=self.config.cooldown_s,
            )
            self._record(board, job, result.elapsed_ns)

    def _run_pool(self, board: JobBoard, n_workers: int) -> None:
        """Coordinator loop over *n_workers* worker threads."""
        outbox: queue.Queue[Report] = queue.Queue()
        inboxes: list[queue.Queue[Command] | None] = []
        threads: list[Worker] = []
        assigned: dict[int, Job] = {}

        for worker_id in range(n_workers):
            inbox: queue.Queue[Command] = queue.Queue()
            worker = Worker(
                inbox,
                outbox,
                self.algorithms,
                self.sizes,
                seed=self.config.seed,
                cooldown_s=self.config.cooldown_s,
            )
            worker.start()
            inbox.put(Identify(worker_id))
            inboxes.append(inbox)
            threads.append(worker)

        open_streams = n_workers
        try:
            while open_streams:
                message = outbox.get()

                if isinstance(message, Closed):
                    if inboxes[message.worker_id] is not None:
                        raise SchedulerError(
                            "worker stream closed before its work was exhausted",
                            worker=message.worker_id,
                        )
                    open_streams -= 1
                    continue

                if isinstance(message, Failed):
                    error = message.error
                    if isinstance(error, BenchmarkError):
                        raise error
                    raise CandidateCrashError(
                        f"worker {message.worker_id} failed: {error}",
                        worker=message.worker_id,
                    ) from error

                if isinstance(message, Measured):
                    job = assigned.pop(message.worker_id, None)
                    if job is None:
                        raise SchedulerError(
                            "result from a worker with no outstanding job",
                            worker=message.worker_id,
                        )
                    self._record(board, job, message.elapsed_ns)
                elif not isinstance(message, Ready):
                    raise SchedulerError(f"unexpected message {message!r}")

                # The worker is idle: hand it the next job or tear it down.
                next_job = board.next_job()
                channel = inboxes[message.worker_id]
                assert channel is not None
                if next_job is None:
                    channel.put(None)
                    inboxes[message.worker_id] = None
                    log.debug("Worker %d torn down", message.worker_id)
                else:
                    assigned[message.worker_id] = next_job
                    log.debug("Dispatching %s to worker %d", next_job, message.worker_id)
                    channel.put(Work(next_job))
        finally:
            for i, channel in enumerate(inboxes):
                if channel is not None:
                    channel.put(None)
                    inboxes[i] = None
            for worker in threads:
                worker.join()

    def _record(self, board: JobBoard, job: Job, elapsed_ns: int) -> None:
        recorded = board.record(job, elapsed_ns)
        self.progress(
            BenchProgress(
                algorithm=self.algorithms[job.algorithm_index].id,
                size=self.sizes[job.size_index],
                trial_index=job.trial_index,
                elapsed_ns=elapsed_ns,
                jobs_done=board.summary.jobs_executed + board.summary.jobs_discarded,
                jobs_total=board.summary.jobs_generated,
                recorded=recorded,
            )
        )

    def _label(self, job: Job) -> str:
        algorithm = self.algorithms[job.algorithm_index]
        return f"{algorithm.id} @ {self.sizes[job.size_index]:,}"

    @staticmethod
    def _default_progress(progress: BenchProgress) -> None:
        """Default progress callback: log at debug level."""
        log.debug(
            "  [%d/%d] %-28s %10s  trial %-4d %10.3f ms%s",
            progress.jobs_done,
            progress.jobs_total,
            progress.algorithm,
            f"{progress.size:,}",
            progress.trial_index,
            progress.elapsed_ns / 1_000_000,
            "" if progress.recorded else "  (dropped)",
        )
