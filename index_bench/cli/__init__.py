r"""
Command-line interface for index-bench.

    index-bench run -s duckdb --db-dir ./data --index
    index-bench stores
"""

from index_bench.cli.main import app, main

__all__ = [
    "app",
    "main",
]
