"""Worker threads and the messages they exchange with the coordinator.

Each worker owns a private inbox (one producer: the coordinator) and
shares a single outbox with every other worker (one consumer: the
coordinator). Workers never touch the job stack or the cell table;
they only turn a ``Work`` message into a ``Measured`` reply.

Message flow::

    coordinator -> worker   Identify(worker_id), then Work(job) ... None
    worker -> coordinator   Ready, Measured ..., Failed?, Closed
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Sequence, Union

from sortbench.algorithms import AlgorithmUnderTest
from sortbench.bench.jobs import Job
from sortbench.bench.timing import run_trial
from sortbench.errors import SchedulerError
from sortbench.logging import get_logger

log = get_logger("bench.worker")


# ---------------------------------------------------------------------------
# Coordinator -> worker
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Identify:
    worker_id: int


@dataclass(frozen=True)
class Work:
    job: Job


#: ``None`` on an inbox tears the worker down.
Command = Union[Identify, Work, None]


# ---------------------------------------------------------------------------
# Worker -> coordinator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ready:
    """The worker has learned its identity and awaits its first job."""

    worker_id: int


@dataclass(frozen=True)
class Measured:
    """Elapsed time of the worker's current job."""

    worker_id: int
    elapsed_ns: int


@dataclass(frozen=True)
class Failed:
    worker_id: int
    error: BaseException


@dataclass(frozen=True)
class Closed:
    """Always the last message a worker sends."""

    worker_id: int


Report = Union[Ready, Measured, Failed, Closed]


# ---------------------------------------------------------------------------
# Worker thread
# ---------------------------------------------------------------------------


class Worker(threading.Thread):
    """One long-lived worker executing a single job at a time."""

    def __init__(
        self,
        inbox: queue.Queue[Command],
        outbox: queue.Queue[Report],
        algorithms: Sequence[AlgorithmUnderTest],
        sizes: Sequence[int],
        *,
        seed: int,
        cooldown_s: float = 0.0,
    ) -> None:
        super().__init__(daemon=True)
        self.inbox = inbox
        self.outbox = outbox
        self.algorithms = algorithms
        self.sizes = sizes
        self.seed = seed
        self.cooldown_s = cooldown_s
        self.worker_id: int | None = None

    def run(self) -> None:
        worker_id = -1
        try:
            first = self.inbox.get()
            if first is None:
                return
            if not isinstance(first, Identify):
                raise SchedulerError(
                    f"worker expected Identify first, got {type(first).__name__}"
                )
            worker_id = self.worker_id = first.worker_id
            self.name = f"sortbench-worker-{worker_id}"
            self.outbox.put(Ready(worker_id))

            while True:
                command = self.inbox.get()
                if command is None:
                    break
                if not isinstance(command, Work):
                    raise SchedulerError(
                        f"worker {worker_id} got unexpected {type(command).__name__}"
                    )
                job = command.job
                result = run_trial(
                    self.algorithms[job.algorithm_index],
                    self.sizes[job.size_index],
                    job.trial_index,
                    seed=self.seed,
                    cooldown_s=self.cooldown_s,
                )
                self.outbox.put(Measured(worker_id, result.elapsed_ns))
        except Exception as exc:
            log.debug("Worker %d failed: %s", worker_id, exc)
            self.outbox.put(Failed(worker_id, exc))
        finally:
            self.outbox.put(Closed(worker_id))
