"""
Tree Serialization
Lossless dump/load of StandardMerkleTree.

Record layout ("standard-v1", same as @openzeppelin/merkle-tree):

    {
      "format": "standard-v1",
      "leafEncoding": ["address", "uint256"],
      "tree": ["0x<root>", ..., "0x<leaf>"],
      "values": [{"value": ["0x<address>", "<amount>"], "treeIndex": 4}, ...]
    }

Loading never repairs anything. The node array is kept verbatim after it
passes every check, so roots and proofs from a reloaded tree are
byte-identical to the tree that was dumped.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.crypto.hashing import bytes32_from_hex, to_hex
from core.merkle.leaf import LeafValue
from core.merkle.standard_tree import (
    IndexedValue,
    StandardMerkleTree,
    check_tree_consistency,
)
from core.schemas.errors import (
    CorruptTreeRecordException,
    DuplicateLeafException,
    MalformedLeafException,
)
from core.schemas.rewards import TreeRecord, TreeValue
from core.schemas.versioning import (
    LEAF_ENCODING,
    TREE_FORMAT,
    UnsupportedLeafEncodingError,
    UnsupportedTreeFormatError,
    assert_supported_leaf_encoding,
    assert_supported_tree_format,
)


logger = logging.getLogger(__name__)


def dump(tree: StandardMerkleTree) -> TreeRecord:
    """
    Serialize a tree to a self-describing record.

    Values are written in caller order with their node positions.
    """
    return TreeRecord(
        format=TREE_FORMAT,
        leaf_encoding=list(LEAF_ENCODING),
        tree=[to_hex(node) for node in tree.nodes],
        values=[
            TreeValue(value=entry.value.to_list(), tree_index=entry.tree_index)
            for entry in tree.values
        ],
    )


def _parse_record(record: TreeRecord | Mapping[str, Any]) -> TreeRecord:
    if isinstance(record, TreeRecord):
        stated_format = record.format
    elif isinstance(record, Mapping):
        stated_format = record.get("format")
    else:
        raise CorruptTreeRecordException(
            f"Tree record must be a mapping, got {type(record).__name__}",
            check_id="schema",
        )

    try:
        assert_supported_tree_format(stated_format)
    except UnsupportedTreeFormatError as e:
        raise CorruptTreeRecordException(str(e), check_id="format") from e

    if isinstance(record, TreeRecord):
        return record

    try:
        return TreeRecord.model_validate(dict(record))
    except PydanticValidationError as e:
        raise CorruptTreeRecordException(
            f"Tree record failed schema validation ({e.error_count()} errors)",
            check_id="schema",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def load(record: TreeRecord | Mapping[str, Any]) -> StandardMerkleTree:
    """
    Rebuild a tree from a record produced by dump().

    Checks, in order: format version, leaf encoding, schema, node format,
    leaf tuple format, node count, tree index range and uniqueness, leaf
    hashes, internal node hashes (root included), canonical leaf order and
    duplicate leaves.

    Raises:
        CorruptTreeRecordException: If any check fails
    """
    parsed = _parse_record(record)

    try:
        assert_supported_leaf_encoding(parsed.leaf_encoding)
    except UnsupportedLeafEncodingError as e:
        raise CorruptTreeRecordException(str(e), check_id="leaf_encoding") from e

    nodes: list[bytes] = []
    for node_index, node in enumerate(parsed.tree):
        try:
            nodes.append(bytes32_from_hex(node))
        except ValueError as e:
            raise CorruptTreeRecordException(
                f"Node {node_index} is not a 32-byte hex value",
                check_id="node_format",
                details={"node_index": node_index},
            ) from e

    values: list[IndexedValue] = []
    for value_index, item in enumerate(parsed.values):
        try:
            leaf = LeafValue.from_list(item.value)
        except MalformedLeafException as e:
            raise CorruptTreeRecordException(
                f"Value {value_index} is malformed: {e.message}",
                check_id="leaf_value",
                details={"value_index": value_index},
            ) from e
        values.append(IndexedValue(value=leaf, tree_index=item.tree_index))

    check_tree_consistency(nodes, values)

    try:
        tree = StandardMerkleTree(nodes, values)
    except DuplicateLeafException as e:
        raise CorruptTreeRecordException(
            e.message, check_id="duplicate_leaf", details=e.details,
        ) from e

    logger.debug("Loaded tree %s with %d leaves", tree.root, len(tree))
    return tree


__all__ = ["dump", "load"]
