"""Benchmarking engine for sortbench.

Schedules timing trials of candidate sorts across a pool of worker
threads under a per-cell runtime limit, then turns the samples into
ranked results (outlier rejection, confidence intervals and Welch's
t-test against the fastest candidate).
"""
