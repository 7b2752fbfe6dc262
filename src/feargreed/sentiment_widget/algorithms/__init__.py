"""Algorithms behind the distribution view.

Pure numpy/pandas implementations: nearest-rank box statistics (box_stats)
and per-classification grouping (group_aggregator). No UI imports.
"""
