"""Measurement engine for stagebench.

Provides single timed runs, named comparable stages, checkpoint
profiling and per-operation latency tracking, plus the terminal
rendering used to report them.
"""
