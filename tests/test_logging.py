"""Tests for sortbench.logging and the error hierarchy."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import make_algorithm, make_config

from sortbench.bench.runner import BenchRunner
from sortbench.errors import (
    BenchmarkError,
    ConfigurationError,
    CorrectnessError,
    NumericalError,
    SchedulerError,
    SeriesDivergenceError,
)
from sortbench.logging import get_logger, setup_logging


class TestSetupLogging(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("sortbench")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True

    def _console(self, logger: logging.Logger) -> logging.Handler:
        return next(h for h in logger.handlers if not isinstance(h, logging.FileHandler))

    def test_levels(self) -> None:
        self.assertEqual(self._console(setup_logging()).level, logging.INFO)
        self.assertEqual(self._console(setup_logging(verbose=True)).level, logging.DEBUG)
        self.assertEqual(self._console(setup_logging(quiet=True)).level, logging.WARNING)
        both = setup_logging(verbose=True, quiet=True)
        self.assertEqual(self._console(both).level, logging.DEBUG)

    def test_reconfigure_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)

    def test_log_file_records_debug(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.log"
            logger = setup_logging(quiet=True, log_file=path)
            get_logger("runner").debug("dispatching job 7")
            for handler in logger.handlers:
                handler.flush()
            text = path.read_text()
            self.tearDown()
        self.assertIn("dispatching job 7", text)
        self.assertIn("MainThread", text)
        self.assertIn("sortbench.runner", text)

    def test_module_loggers_reach_the_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.log"
            logger = setup_logging(quiet=True, log_file=path)
            runner = BenchRunner(
                make_config(), algorithms=[make_algorithm()], capture_system=False
            )
            runner.run()
            for handler in logger.handlers:
                handler.flush()
            text = path.read_text()
            self.tearDown()
        self.assertIn("sortbench.bench.jobs: Generated 10 jobs", text)
        self.assertIn("sortbench.bench.runner: Running 10 jobs", text)


class TestErrors(unittest.TestCase):
    def test_context_in_message(self) -> None:
        error = BenchmarkError("boom", worker=2, cell=None)
        self.assertEqual(str(error), "boom; worker=2")
        self.assertEqual(str(BenchmarkError("plain")), "plain")

    def test_correctness_fields(self) -> None:
        error = CorrectnessError("bad", algorithm="bubblesort", size=10, trial=4)
        self.assertEqual(error.algorithm, "bubblesort")
        self.assertEqual(str(error), "bad; algorithm=bubblesort; size=10; trial=4")

    def test_hierarchy(self) -> None:
        self.assertTrue(issubclass(ConfigurationError, ValueError))
        self.assertTrue(issubclass(SeriesDivergenceError, NumericalError))
        self.assertTrue(issubclass(NumericalError, ArithmeticError))
        self.assertTrue(issubclass(SchedulerError, BenchmarkError))


if __name__ == "__main__":
    unittest.main()
