"""
Test fixtures package for rewards engine tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_rows, make_tree

    def test_something():
        tree = make_tree(make_rows(4))
"""

from .common import (
    ADDRESS_A,
    ADDRESS_B,
    ADDRESS_C,
    make_address,
    make_rows,
    make_distribution,
    make_distribution_record,
    make_tree,
    make_tree_record,
    make_tree_records,
)

__all__ = [
    "ADDRESS_A",
    "ADDRESS_B",
    "ADDRESS_C",
    "make_address",
    "make_rows",
    "make_distribution",
    "make_distribution_record",
    "make_tree",
    "make_tree_record",
    "make_tree_records",
]
