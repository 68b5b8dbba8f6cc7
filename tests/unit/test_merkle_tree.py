"""
Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py

Tests:
1. Pair hashing - sorted concatenation, commutative
2. Array layout - manual recomputation for small trees
3. Proof generation/verification for every leaf position
4. Tamper detection - tampered sibling/leaf/root fails verification
5. Empty leaves rejected, single leaf root equals the leaf
6. Multi-proofs
7. Structural validation
"""
import pytest

from core.crypto.hashing import keccak256
from core.merkle.merkle_tree import (
    MerkleProof,
    MultiProof,
    build_merkle_proof,
    build_merkle_root,
    compare_bytes,
    first_invalid_node,
    get_multi_proof,
    get_proof,
    hash_pair,
    is_leaf_node,
    is_valid_merkle_tree,
    make_merkle_tree,
    parent_index,
    process_multi_proof,
    process_proof,
    sibling_index,
    verify_merkle_proof,
    verify_multi_proof,
    verify_proof,
)
from core.schemas.errors import EmptyInputException


def _leaves(n: int) -> list[bytes]:
    return [keccak256(f"leaf-{i}".encode()) for i in range(n)]


class TestHashPair:
    """Tests for hash_pair()."""

    def test_commutative(self):
        a, b = _leaves(2)
        assert hash_pair(a, b) == hash_pair(b, a)

    def test_sorted_concatenation(self):
        low = bytes(31) + b"\x01"
        high = b"\xff" * 32
        assert hash_pair(high, low) == keccak256(low + high)

    def test_compare_bytes(self):
        assert compare_bytes(b"\x00" * 32, b"\x01" * 32) == -1
        assert compare_bytes(b"\x01" * 32, b"\x00" * 32) == 1
        assert compare_bytes(b"\x05" * 32, b"\x05" * 32) == 0


class TestEmptyTree:
    """Tests for empty tree behavior."""

    def test_empty_leaves_rejected(self):
        with pytest.raises(EmptyInputException):
            make_merkle_tree([])

    def test_build_root_empty_rejected(self):
        with pytest.raises(EmptyInputException):
            build_merkle_root([])


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        leaf = keccak256(b"single leaf")
        assert make_merkle_tree([leaf]) == [leaf]
        assert build_merkle_root([leaf]) == leaf

    def test_single_leaf_proof_no_siblings(self):
        leaf = keccak256(b"only one")
        proof = build_merkle_proof([leaf], 0)

        assert proof.leaf == leaf
        assert proof.tree_index == 0
        assert proof.siblings == []
        assert proof.root == leaf
        assert verify_merkle_proof(proof)


class TestArrayLayout:
    """Manual recomputation of the flat node array."""

    def test_node_count(self):
        for n in range(1, 10):
            assert len(make_merkle_tree(_leaves(n))) == 2 * n - 1

    def test_two_leaves(self):
        a, b = _leaves(2)
        assert make_merkle_tree([a, b]) == [hash_pair(a, b), b, a]

    def test_three_leaves(self):
        """Odd count: no padding, the deepest level is partially filled."""
        a, b, c = _leaves(3)
        ab = hash_pair(b, a)
        assert make_merkle_tree([a, b, c]) == [hash_pair(ab, c), ab, c, b, a]

    def test_four_leaves(self):
        a, b, c, d = _leaves(4)
        left = hash_pair(d, c)
        right = hash_pair(b, a)
        assert make_merkle_tree([a, b, c, d]) == [hash_pair(left, right), left, right, d, c, b, a]

    def test_leaf_k_at_tail(self):
        leaves = _leaves(6)
        tree = make_merkle_tree(leaves)
        for k, leaf in enumerate(leaves):
            assert tree[len(tree) - 1 - k] == leaf

    def test_rejects_wrong_width_leaf(self):
        with pytest.raises(ValueError, match="32-byte"):
            make_merkle_tree([b"short"])

    def test_index_helpers(self):
        assert parent_index(1) == 0
        assert parent_index(2) == 0
        assert parent_index(6) == 2
        assert sibling_index(1) == 2
        assert sibling_index(2) == 1
        assert sibling_index(5) == 6
        with pytest.raises(ValueError):
            parent_index(0)
        with pytest.raises(ValueError):
            sibling_index(0)


class TestProofs:
    """Proof generation and verification."""

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 7, 8, 13])
    def test_every_leaf_verifies(self, n):
        tree = make_merkle_tree(_leaves(n))
        root = tree[0]
        for index in range(len(tree)):
            if not is_leaf_node(tree, index):
                continue
            proof = get_proof(tree, index)
            assert process_proof(tree[index], proof) == root
            assert verify_proof(root, tree[index], proof)

    def test_proof_length_is_depth(self):
        tree = make_merkle_tree(_leaves(8))
        assert len(get_proof(tree, len(tree) - 1)) == 3

    def test_internal_node_index_rejected(self):
        tree = make_merkle_tree(_leaves(4))
        with pytest.raises(IndexError):
            get_proof(tree, 0)
        with pytest.raises(IndexError):
            get_proof(tree, 1)

    def test_out_of_range_index_rejected(self):
        tree = make_merkle_tree(_leaves(4))
        with pytest.raises(IndexError):
            build_merkle_proof(tree, 99)

    def test_negative_tree_index_rejected(self):
        leaf = keccak256(b"x")
        with pytest.raises(ValueError):
            MerkleProof(leaf=leaf, tree_index=-1, siblings=[], root=leaf)


class TestTamperDetection:
    """Tampered proofs fail verification."""

    def setup_method(self):
        self.tree = make_merkle_tree(_leaves(5))
        self.index = len(self.tree) - 1
        self.proof = get_proof(self.tree, self.index)

    def test_tampered_sibling(self):
        tampered = list(self.proof)
        tampered[0] = keccak256(b"evil")
        assert not verify_proof(self.tree[0], self.tree[self.index], tampered)

    def test_tampered_leaf(self):
        assert not verify_proof(self.tree[0], keccak256(b"evil"), self.proof)

    def test_tampered_root(self):
        assert not verify_proof(keccak256(b"evil"), self.tree[self.index], self.proof)

    def test_truncated_proof(self):
        assert not verify_proof(self.tree[0], self.tree[self.index], self.proof[:-1])

    def test_malformed_inputs_verify_false(self):
        leaf = self.tree[self.index]
        assert not verify_proof(b"short", leaf, self.proof)
        assert not verify_proof(self.tree[0], b"short", self.proof)
        assert not verify_proof(self.tree[0], leaf, [b"short"])


class TestMultiProof:
    """Multi-proof generation and verification."""

    @pytest.mark.parametrize("n,picks", [
        (1, [0]),
        (4, [0, 3]),
        (5, [1, 2, 4]),
        (8, [0, 1, 2, 3, 4, 5, 6, 7]),
        (7, [6]),
    ])
    def test_multi_proof_verifies(self, n, picks):
        tree = make_merkle_tree(_leaves(n))
        indices = [len(tree) - 1 - k for k in picks]
        multiproof = get_multi_proof(tree, indices)

        assert process_multi_proof(multiproof) == tree[0]
        assert verify_multi_proof(tree[0], multiproof)

    def test_leaves_in_descending_index_order(self):
        tree = make_merkle_tree(_leaves(6))
        multiproof = get_multi_proof(tree, [6, 10, 8])
        assert multiproof.leaves == [tree[10], tree[8], tree[6]]

    def test_empty_selection_proves_root(self):
        tree = make_merkle_tree(_leaves(3))
        multiproof = get_multi_proof(tree, [])
        assert multiproof.proof == [tree[0]]
        assert verify_multi_proof(tree[0], multiproof)

    def test_duplicate_index_rejected(self):
        tree = make_merkle_tree(_leaves(4))
        with pytest.raises(ValueError, match="duplicated"):
            get_multi_proof(tree, [6, 6])

    def test_non_leaf_index_rejected(self):
        tree = make_merkle_tree(_leaves(4))
        with pytest.raises(IndexError):
            get_multi_proof(tree, [0])

    def test_tampered_multi_proof(self):
        tree = make_merkle_tree(_leaves(5))
        multiproof = get_multi_proof(tree, [8, 5])
        tampered = MultiProof(
            leaves=[keccak256(b"evil"), multiproof.leaves[1]],
            proof=multiproof.proof,
            proof_flags=multiproof.proof_flags,
        )
        assert not verify_multi_proof(tree[0], tampered)

    def test_inconsistent_flags_verify_false(self):
        tree = make_merkle_tree(_leaves(4))
        multiproof = get_multi_proof(tree, [6])
        broken = MultiProof(
            leaves=multiproof.leaves,
            proof=multiproof.proof,
            proof_flags=multiproof.proof_flags + [True],
        )
        assert not verify_multi_proof(tree[0], broken)


class TestValidation:
    """Structural validation of node arrays."""

    def test_valid_tree(self):
        assert is_valid_merkle_tree(make_merkle_tree(_leaves(5)))
        assert first_invalid_node(make_merkle_tree(_leaves(5))) is None

    def test_empty_tree_invalid(self):
        assert not is_valid_merkle_tree([])

    def test_tampered_internal_node(self):
        tree = make_merkle_tree(_leaves(5))
        tree[1] = keccak256(b"evil")
        assert first_invalid_node(tree) == 0

    def test_tampered_leaf_breaks_parent(self):
        tree = make_merkle_tree(_leaves(4))
        tree[6] = keccak256(b"evil")
        assert first_invalid_node(tree) == 2

    def test_even_length_array_invalid(self):
        tree = make_merkle_tree(_leaves(3))
        assert not is_valid_merkle_tree(tree[:4])
