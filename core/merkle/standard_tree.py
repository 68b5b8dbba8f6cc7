"""
Standard Merkle Tree
Merkle tree over (operator, reward) leaves with lookup by leaf tuple.

This module provides:
- StandardMerkleTree.of: build a canonical tree from reward rows
- Proof generation by tuple or by value index
- Stateless verification from (root, tuple, proof) alone
- Multi-proofs over several tuples
- Self-consistency validation (used when loading serialized trees)

Canonical Tree Rules:
1. Every row is encoded and hashed with the leaf rules in leaf.py
2. Two rows with the same leaf hash abort construction (DuplicateLeaf)
3. Leaf hashes are sorted ascending before placement, so the tree is a
   function of the set of rows, not of their input order
4. The node array is built by make_merkle_tree (no padding)

Trees are immutable. Rebuild to change anything.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

from core.crypto.hashing import bytes32_from_hex, to_hex
from core.merkle.leaf import LeafValue, normalize_address
from core.merkle.merkle_tree import (
    MultiProof,
    first_invalid_node,
    get_multi_proof,
    get_proof,
    is_leaf_node,
    make_merkle_tree,
    process_multi_proof,
    verify_proof,
)
from core.schemas.errors import (
    CorruptTreeRecordException,
    DuplicateLeafException,
    EmptyInputException,
    LeafNotFoundException,
    MalformedLeafException,
)

if TYPE_CHECKING:
    from core.schemas.rewards import TreeRecord


@dataclass(frozen=True)
class IndexedValue:
    """A leaf tuple and its position in the node array."""
    value: LeafValue
    tree_index: int


@dataclass(frozen=True)
class ValueMultiProof:
    """
    Multi-proof expressed over leaf tuples instead of leaf hashes.

    Attributes:
        leaves: Tuples being proven, in verifier consumption order
        proof: Hex sibling hashes
        proof_flags: Hashing-step flags (see MultiProof)
    """
    leaves: list[LeafValue]
    proof: list[str] = field(default_factory=list)
    proof_flags: list[bool] = field(default_factory=list)


def coerce_leaf_value(item: Any) -> LeafValue:
    """
    Accept the shapes callers hand us for a reward row.

    Supported: LeafValue, objects with ``operator``/``reward`` attributes
    (OperatorReward), mappings with ``operator``/``reward`` keys and
    ``(address, amount)`` pairs.

    Raises:
        MalformedLeafException: If the row cannot be interpreted
    """
    if isinstance(item, LeafValue):
        return item
    if isinstance(item, Mapping):
        if "operator" not in item or "reward" not in item:
            raise MalformedLeafException("Row must have 'operator' and 'reward'", value=item)
        return LeafValue.parse(item["operator"], item["reward"])
    if hasattr(item, "operator") and hasattr(item, "reward"):
        return LeafValue.parse(item.operator, item.reward)
    return LeafValue.from_list(item)


def check_tree_consistency(tree: Sequence[bytes], values: Sequence[IndexedValue]) -> None:
    """
    Verify that a node array and its indexed values describe a canonical tree.

    Raises:
        CorruptTreeRecordException: On the first inconsistency found
    """
    if len(values) == 0:
        raise CorruptTreeRecordException("Tree has no values", check_id="values_non_empty")

    if len(tree) != 2 * len(values) - 1:
        raise CorruptTreeRecordException(
            f"Node count {len(tree)} does not match {len(values)} values",
            check_id="node_count",
            details={"nodes": len(tree), "values": len(values)},
        )

    seen_indices: set[int] = set()
    for value_index, entry in enumerate(values):
        if not is_leaf_node(tree, entry.tree_index):
            raise CorruptTreeRecordException(
                f"Value {value_index} points at non-leaf index {entry.tree_index}",
                check_id="tree_index_range",
                details={"value_index": value_index, "tree_index": entry.tree_index},
            )
        if entry.tree_index in seen_indices:
            raise CorruptTreeRecordException(
                f"Tree index {entry.tree_index} is used by more than one value",
                check_id="tree_index_unique",
                details={"value_index": value_index, "tree_index": entry.tree_index},
            )
        seen_indices.add(entry.tree_index)

        if entry.value.hash() != tree[entry.tree_index]:
            raise CorruptTreeRecordException(
                f"Merkle tree does not contain the expected value at index {entry.tree_index}",
                check_id="leaf_hash",
                details={"value_index": value_index, "tree_index": entry.tree_index},
            )

    bad_node = first_invalid_node(tree)
    if bad_node is not None:
        raise CorruptTreeRecordException(
            f"Merkle tree is invalid at node {bad_node}",
            check_id="node_hash",
            details={"node_index": bad_node},
        )

    # Leaves fill the tail of the array in ascending hash order, reversed
    leaf_nodes = [tree[len(tree) - 1 - k] for k in range(len(values))]
    for k in range(1, len(leaf_nodes)):
        if leaf_nodes[k - 1] >= leaf_nodes[k]:
            raise CorruptTreeRecordException(
                "Leaves are not in ascending hash order",
                check_id="leaf_order",
                details={"leaf_index": k},
            )


class StandardMerkleTree:
    """
    Immutable Merkle tree over (address, uint256) reward leaves.

    Build with ``StandardMerkleTree.of(rows)``; reload a serialized tree
    with ``StandardMerkleTree.load(record)``.

    Example:
        >>> tree = StandardMerkleTree.of([("0x" + "aa" * 20, 100), ("0x" + "bb" * 20, 200)])
        >>> proof = tree.get_proof(("0x" + "AA" * 20, 100))
        >>> StandardMerkleTree.verify(tree.root, ("0x" + "aa" * 20, 100), proof)
        True
    """

    def __init__(self, tree: Sequence[bytes], values: Sequence[IndexedValue]) -> None:
        # Callers outside this package go through of() or load()
        self._tree: tuple[bytes, ...] = tuple(tree)
        self._values: tuple[IndexedValue, ...] = tuple(values)
        self._index_by_key: dict[tuple[str, int], int] = {}
        self._indices_by_operator: dict[str, list[int]] = {}

        for value_index, entry in enumerate(self._values):
            key = entry.value.key
            if key in self._index_by_key:
                raise DuplicateLeafException(
                    f"Duplicate leaf for operator {entry.value.address} with amount {entry.value.amount}",
                    leaf_hash=to_hex(entry.value.hash()),
                    indices=(self._index_by_key[key], value_index),
                )
            self._index_by_key[key] = value_index
            self._indices_by_operator.setdefault(entry.value.operator, []).append(value_index)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def of(cls, rows: Iterable[Any]) -> "StandardMerkleTree":
        """
        Build a canonical tree from reward rows.

        Args:
            rows: Reward rows in caller order (see coerce_leaf_value)

        Returns:
            A tree whose root depends only on the set of rows

        Raises:
            EmptyInputException: If rows is empty
            MalformedLeafException: If any row is malformed
            DuplicateLeafException: If two rows encode identically
        """
        values = [coerce_leaf_value(row) for row in rows]
        if not values:
            raise EmptyInputException("Cannot build a tree from zero rows")

        hashed: list[tuple[bytes, int]] = []
        first_seen: dict[bytes, int] = {}
        for value_index, value in enumerate(values):
            digest = value.hash()
            if digest in first_seen:
                raise DuplicateLeafException(
                    f"Duplicate leaf for operator {value.address} with amount {value.amount}",
                    leaf_hash=to_hex(digest),
                    indices=(first_seen[digest], value_index),
                )
            first_seen[digest] = value_index
            hashed.append((digest, value_index))

        # Equal-width byte strings sort numerically
        hashed.sort()
        tree = make_merkle_tree([digest for digest, _ in hashed])

        tree_indices = [0] * len(values)
        for leaf_index, (_, value_index) in enumerate(hashed):
            tree_indices[value_index] = len(tree) - 1 - leaf_index

        return cls(
            tree,
            [IndexedValue(value=value, tree_index=tree_indices[i]) for i, value in enumerate(values)],
        )

    @classmethod
    def load(cls, record: "TreeRecord | Mapping[str, Any]") -> "StandardMerkleTree":
        """Reload a serialized tree (see core.merkle.serializer.load)."""
        from core.merkle.serializer import load

        return load(record)

    def dump(self) -> "TreeRecord":
        """Serialize this tree (see core.merkle.serializer.dump)."""
        from core.merkle.serializer import dump

        return dump(self)

    def validate(self) -> None:
        """
        Re-derive every leaf and internal node.

        Raises:
            CorruptTreeRecordException: If the tree is inconsistent
        """
        check_tree_consistency(self._tree, self._values)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def root(self) -> str:
        """Root hash as a 0x-prefixed hex string."""
        return to_hex(self._tree[0])

    @property
    def root_bytes(self) -> bytes:
        return self._tree[0]

    @property
    def nodes(self) -> tuple[bytes, ...]:
        """Flat node array, root first."""
        return self._tree

    @property
    def values(self) -> tuple[IndexedValue, ...]:
        """Leaf tuples in caller order with their node positions."""
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def entries(self) -> Iterator[tuple[int, LeafValue]]:
        """Iterate (value index, tuple) in caller order."""
        for value_index, entry in enumerate(self._values):
            yield value_index, entry.value

    def leaf_hash(self, row: Any) -> str:
        """Leaf hash for a row, whether or not it is in the tree."""
        return to_hex(coerce_leaf_value(row).hash())

    def leaf_lookup(self, row: Any) -> int:
        """
        Find the value index of a row.

        Address match is case-insensitive; amount match is exact.

        Raises:
            MalformedLeafException: If the row is malformed
            LeafNotFoundException: If the row is not in the tree
        """
        value = coerce_leaf_value(row)
        try:
            return self._index_by_key[value.key]
        except KeyError:
            raise LeafNotFoundException(
                f"Leaf ({value.address}, {value.amount}) is not in tree {self.root}",
                details={"operator": value.operator, "reward": str(value.amount), "root": self.root},
            ) from None

    def has_operator(self, address: Any) -> bool:
        return normalize_address(address) in self._indices_by_operator

    def values_for_operator(self, address: Any) -> list[LeafValue]:
        """All tuples held by an operator, in caller order."""
        indices = self._indices_by_operator.get(normalize_address(address), [])
        return [self._values[i].value for i in indices]

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def _value_index(self, row_or_index: Any) -> int:
        if isinstance(row_or_index, int) and not isinstance(row_or_index, bool):
            if not 0 <= row_or_index < len(self._values):
                raise IndexError(f"Value index {row_or_index} out of range")
            return row_or_index
        return self.leaf_lookup(row_or_index)

    def get_proof(self, row_or_index: Any) -> list[str]:
        """
        Inclusion proof for a row or a value index.

        Returns:
            Sibling hashes (hex), leaf to root

        Raises:
            LeafNotFoundException: If the row is not in the tree
            IndexError: If a value index is out of range
        """
        value_index = self._value_index(row_or_index)
        proof = get_proof(self._tree, self._values[value_index].tree_index)
        return [to_hex(node) for node in proof]

    def proofs_for_operator(self, address: Any) -> list[tuple[LeafValue, list[str]]]:
        """Every (tuple, proof) held by an operator, in caller order."""
        indices = self._indices_by_operator.get(normalize_address(address), [])
        return [(self._values[i].value, self.get_proof(i)) for i in indices]

    def get_multi_proof(self, rows_or_indices: Iterable[Any]) -> ValueMultiProof:
        """
        Multi-proof for several rows at once.

        Raises:
            LeafNotFoundException: If a row is not in the tree
            ValueError: If a row is repeated
        """
        tree_indices = [
            self._values[self._value_index(item)].tree_index for item in rows_or_indices
        ]
        multiproof = get_multi_proof(self._tree, tree_indices)

        value_by_tree_index = {entry.tree_index: entry.value for entry in self._values}
        ordered_tree_indices = sorted(tree_indices, reverse=True)
        return ValueMultiProof(
            leaves=[value_by_tree_index[i] for i in ordered_tree_indices],
            proof=[to_hex(node) for node in multiproof.proof],
            proof_flags=list(multiproof.proof_flags),
        )

    @staticmethod
    def verify(root: str, row: Any, proof: Sequence[str]) -> bool:
        """
        Check a row's proof against a root, without the tree.

        Malformed roots, rows or proof entries verify as False.

        Args:
            root: 0x-prefixed 32-byte root
            row: (address, amount) or any shape coerce_leaf_value accepts
            proof: Hex sibling hashes from get_proof()
        """
        try:
            root_bytes = bytes32_from_hex(root)
            leaf = coerce_leaf_value(row).hash()
            siblings = [bytes32_from_hex(node) for node in proof]
        except (MalformedLeafException, ValueError, TypeError):
            return False
        return verify_proof(root_bytes, leaf, siblings)

    @staticmethod
    def verify_multi_proof(root: str, multiproof: ValueMultiProof) -> bool:
        """Check a multi-proof against a root; malformed input verifies as False."""
        try:
            root_bytes = bytes32_from_hex(root)
            leaves = [coerce_leaf_value(row).hash() for row in multiproof.leaves]
            proof = [bytes32_from_hex(node) for node in multiproof.proof]
            implied = process_multi_proof(
                MultiProof(leaves=leaves, proof=proof, proof_flags=list(multiproof.proof_flags))
            )
        except (MalformedLeafException, ValueError, IndexError, TypeError):
            return False
        return implied == root_bytes

    def __repr__(self) -> str:
        return f"StandardMerkleTree(root={self.root!r}, leaves={len(self)})"


__all__ = [
    "IndexedValue",
    "ValueMultiProof",
    "StandardMerkleTree",
    "coerce_leaf_value",
    "check_tree_consistency",
]
