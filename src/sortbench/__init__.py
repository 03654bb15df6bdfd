"""sortbench: statistically ranked benchmarks of sorting algorithms."""

__version__ = "0.1.0"
