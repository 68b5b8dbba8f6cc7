"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification
over pre-hashed 32-byte leaves.

This module provides:
- Commutative pair hashing
- Flat-array complete binary tree construction
- Single-leaf proof generation and verification
- Multi-leaf proof generation and verification
- Structural validation of a node array

Canonical Commitment Rules (Hard Contracts):
1. Pair hashing: parent = keccak256(min(a, b) + max(a, b))
   - Children are ordered numerically before hashing, so
     hash_pair(a, b) == hash_pair(b, a) and proofs carry no
     left/right flags
2. Layout: a tree over N leaves is an array of 2N - 1 nodes.
   Node i has children 2i + 1 and 2i + 2; tree[0] is the root.
3. Leaf placement: leaf k is stored at tree[len(tree) - 1 - k]
4. Padding: none. The array layout is complete for every N >= 1;
   an odd count leaves the deepest level partially filled instead
   of duplicating a node.
5. Single leaf: root = leaf
6. Empty leaves: rejected with EmptyInputException

Leaf ordering is decided by the caller (StandardMerkleTree sorts leaf
hashes ascending before calling make_merkle_tree).
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import HASH_LENGTH, keccak256
from core.schemas.errors import EmptyInputException


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        tree_index: Position of the leaf in the flat node array
        siblings: Sibling hashes from the leaf up to (excluding) the root
        root: The Merkle root this proof is against
    """
    leaf: bytes
    tree_index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.tree_index < 0:
            raise ValueError(f"Tree index must be non-negative, got {self.tree_index}")


@dataclass(frozen=True)
class MultiProof:
    """
    A proof that several leaves belong to the same tree.

    Attributes:
        leaves: Leaf hashes being proven, in the order consumed by the verifier
        proof: Sibling hashes that are not derivable from the leaves
        proof_flags: For each hashing step, True to take the second operand
            from the leaves/intermediate stack, False to take it from proof
    """
    leaves: list[bytes]
    proof: list[bytes] = field(default_factory=list)
    proof_flags: list[bool] = field(default_factory=list)


def compare_bytes(a: bytes, b: bytes) -> int:
    """Compare two hashes as unsigned big-endian integers (-1, 0 or 1)."""
    x = int.from_bytes(a, "big")
    y = int.from_bytes(b, "big")
    return (x > y) - (x < y)


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    The children are concatenated in ascending numeric order, which makes
    the result independent of argument order.

    Args:
        a: Child hash (32 bytes)
        b: Child hash (32 bytes)

    Returns:
        Parent hash (32 bytes)
    """
    if compare_bytes(a, b) <= 0:
        return keccak256(a + b)
    return keccak256(b + a)


# =============================================================================
# Array layout helpers
# =============================================================================

def left_child_index(i: int) -> int:
    return 2 * i + 1


def right_child_index(i: int) -> int:
    return 2 * i + 2


def parent_index(i: int) -> int:
    if i <= 0:
        raise ValueError("Root has no parent")
    return (i - 1) // 2


def sibling_index(i: int) -> int:
    if i <= 0:
        raise ValueError("Root has no siblings")
    # Left children sit at odd indices
    return i + 1 if i % 2 == 1 else i - 1


def is_tree_node(tree: Sequence[bytes], i: int) -> bool:
    return 0 <= i < len(tree)


def is_internal_node(tree: Sequence[bytes], i: int) -> bool:
    return is_tree_node(tree, left_child_index(i))


def is_leaf_node(tree: Sequence[bytes], i: int) -> bool:
    return is_tree_node(tree, i) and not is_internal_node(tree, i)


def is_valid_merkle_node(node: object) -> bool:
    return isinstance(node, bytes) and len(node) == HASH_LENGTH


def _check_valid_merkle_node(node: object) -> None:
    if not is_valid_merkle_node(node):
        raise ValueError("Merkle tree nodes must be 32-byte values")


def _check_leaf_node(tree: Sequence[bytes], i: int) -> None:
    if not is_leaf_node(tree, i):
        raise IndexError(f"Index {i} is not a leaf of a tree with {len(tree)} nodes")


# =============================================================================
# Construction
# =============================================================================

def make_merkle_tree(leaves: Sequence[bytes]) -> list[bytes]:
    """
    Build the flat node array for a sequence of leaf hashes.

    Algorithm:
    1. Allocate 2N - 1 slots
    2. Place leaf k at slot len - 1 - k (leaves fill the tail, reversed)
    3. Fill internal slots from the last one down to 0 with
       hash_pair(left child, right child)

    Example (3 leaves a, b, c):
        tree = [root, hash_pair(b, a), c, b, a]
        root = hash_pair(hash_pair(b, a), c)

    Args:
        leaves: Leaf hashes (32 bytes each) in the order to place them

    Returns:
        Node array, root first

    Raises:
        EmptyInputException: If leaves is empty
        ValueError: If any leaf is not a 32-byte value
    """
    for leaf in leaves:
        _check_valid_merkle_node(leaf)

    if len(leaves) == 0:
        raise EmptyInputException("Expected non-zero number of leaves")

    tree: list[bytes] = [b""] * (2 * len(leaves) - 1)

    for i, leaf in enumerate(leaves):
        tree[len(tree) - 1 - i] = leaf

    for i in range(len(tree) - 1 - len(leaves), -1, -1):
        tree[i] = hash_pair(tree[left_child_index(i)], tree[right_child_index(i)])

    return tree


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """Compute the root for a sequence of leaf hashes."""
    return make_merkle_tree(leaves)[0]


# =============================================================================
# Single proofs
# =============================================================================

def get_proof(tree: Sequence[bytes], index: int) -> list[bytes]:
    """
    Collect the sibling hashes from a leaf up to the root.

    Args:
        tree: Node array from make_merkle_tree()
        index: Position of the leaf in the node array

    Returns:
        Sibling hashes, bottom-up

    Raises:
        IndexError: If index is not a leaf position
    """
    _check_leaf_node(tree, index)

    proof: list[bytes] = []
    while index > 0:
        proof.append(tree[sibling_index(index)])
        index = parent_index(index)
    return proof


def build_merkle_proof(tree: Sequence[bytes], index: int) -> MerkleProof:
    """Generate a MerkleProof (leaf, siblings and root) for a leaf position."""
    siblings = get_proof(tree, index)
    return MerkleProof(
        leaf=tree[index],
        tree_index=index,
        siblings=siblings,
        root=tree[0],
    )


def process_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Fold a proof into the root it implies.

    Raises:
        ValueError: If the leaf or any proof entry is not a 32-byte value
    """
    _check_valid_merkle_node(leaf)
    for node in proof:
        _check_valid_merkle_node(node)

    current = leaf
    for sibling in proof:
        current = hash_pair(current, sibling)
    return current


def verify_proof(root: bytes, leaf: bytes, proof: Sequence[bytes]) -> bool:
    """
    Check that a leaf and its proof fold to the given root.

    Malformed input verifies as False rather than raising.
    """
    if not is_valid_merkle_node(root):
        return False
    try:
        return process_proof(leaf, proof) == root
    except ValueError:
        return False


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """Verify a MerkleProof against its own claimed root."""
    return verify_proof(proof.root, proof.leaf, proof.siblings)


# =============================================================================
# Multi proofs
# =============================================================================

def get_multi_proof(tree: Sequence[bytes], indices: Sequence[int]) -> MultiProof:
    """
    Build a proof for several leaves at once.

    Leaves are returned in descending tree-index order, which is the order
    OpenZeppelin's MerkleProof.multiProofVerify consumes them in.

    Raises:
        IndexError: If any index is not a leaf position
        ValueError: If an index is repeated
    """
    for i in indices:
        _check_leaf_node(tree, i)

    ordered = sorted(indices, reverse=True)
    if any(ordered[p] == ordered[p + 1] for p in range(len(ordered) - 1)):
        raise ValueError("Cannot prove duplicated index")

    stack = deque(ordered)
    proof: list[bytes] = []
    proof_flags: list[bool] = []

    while stack and stack[0] > 0:
        j = stack.popleft()
        s = sibling_index(j)
        p = parent_index(j)

        if stack and s == stack[0]:
            proof_flags.append(True)
            stack.popleft()
        else:
            proof_flags.append(False)
            proof.append(tree[s])
        stack.append(p)

    if not ordered:
        proof.append(tree[0])

    return MultiProof(
        leaves=[tree[i] for i in ordered],
        proof=proof,
        proof_flags=proof_flags,
    )


def process_multi_proof(multiproof: MultiProof) -> bytes:
    """
    Fold a multi-proof into the root it implies.

    Raises:
        ValueError: If the proof is structurally inconsistent
    """
    for node in multiproof.leaves:
        _check_valid_merkle_node(node)
    for node in multiproof.proof:
        _check_valid_merkle_node(node)

    if len(multiproof.proof) < sum(1 for flag in multiproof.proof_flags if not flag):
        raise ValueError("Invalid multiproof format")

    if len(multiproof.leaves) + len(multiproof.proof) != len(multiproof.proof_flags) + 1:
        raise ValueError("Provided leaves and multiproof are not compatible")

    stack = deque(multiproof.leaves)
    proof = deque(multiproof.proof)

    for flag in multiproof.proof_flags:
        a = stack.popleft()
        b = stack.popleft() if flag else proof.popleft()
        stack.append(hash_pair(a, b))

    if len(stack) + len(proof) != 1:
        raise ValueError("Broken invariant")

    return stack.pop() if stack else proof.popleft()


def verify_multi_proof(root: bytes, multiproof: MultiProof) -> bool:
    """Check a multi-proof against a root; malformed proofs verify as False."""
    if not is_valid_merkle_node(root):
        return False
    try:
        return process_multi_proof(multiproof) == root
    except (ValueError, IndexError):
        return False


# =============================================================================
# Validation
# =============================================================================

def first_invalid_node(tree: Sequence[bytes]) -> int | None:
    """
    Return the index of the first node that breaks the tree invariants.

    A node is invalid if it is not a 32-byte value, if it has a left child
    but no right child, or if it differs from the hash of its children.
    """
    for i, node in enumerate(tree):
        if not is_valid_merkle_node(node):
            return i

        left = left_child_index(i)
        right = right_child_index(i)

        if right >= len(tree):
            if left < len(tree):
                return i
        elif node != hash_pair(tree[left], tree[right]):
            return i

    return None


def is_valid_merkle_tree(tree: Sequence[bytes]) -> bool:
    """Check that every internal node equals the hash of its children."""
    return len(tree) > 0 and first_invalid_node(tree) is None


__all__ = [
    "MerkleProof",
    "MultiProof",
    "compare_bytes",
    "hash_pair",
    "left_child_index",
    "right_child_index",
    "parent_index",
    "sibling_index",
    "is_leaf_node",
    "is_valid_merkle_node",
    "make_merkle_tree",
    "build_merkle_root",
    "get_proof",
    "build_merkle_proof",
    "process_proof",
    "verify_proof",
    "verify_merkle_proof",
    "get_multi_proof",
    "process_multi_proof",
    "verify_multi_proof",
    "first_invalid_node",
    "is_valid_merkle_tree",
]
