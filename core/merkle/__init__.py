"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification
for (operator, reward) leaves.

This module provides:
- LeafValue / encode_leaf / hash_leaf: canonical leaf encoding
- hash_pair: commutative parent hashing
- make_merkle_tree / get_proof / verify_proof: node-array primitives
- StandardMerkleTree: tree over reward rows with lookup and proofs
- dump / load: lossless "standard-v1" serialization

Canonical Commitment Rules:
1. Leaf hashing: keccak256(keccak256(abi.encode(address, uint256)))
2. Parent hashing: keccak256(sorted(a, b))
3. Leaf order: ascending leaf hash
4. Layout: flat array of 2N - 1 nodes, no padding
5. Single leaf: root = leaf

Usage:
    from core.merkle import StandardMerkleTree

    tree = StandardMerkleTree.of([(operator, 100), (other, 200)])
    proof = tree.get_proof((operator, 100))
    assert StandardMerkleTree.verify(tree.root, (operator, 100), proof)

    record = tree.dump()
    assert StandardMerkleTree.load(record).root == tree.root
"""
from .leaf import (
    UINT256_MAX,
    LeafValue,
    normalize_address,
    parse_amount,
    encode_leaf,
    hash_leaf,
    leaf_hash,
)

from .merkle_tree import (
    MerkleProof,
    MultiProof,
    hash_pair,
    make_merkle_tree,
    build_merkle_root,
    get_proof,
    build_merkle_proof,
    process_proof,
    verify_proof,
    verify_merkle_proof,
    get_multi_proof,
    process_multi_proof,
    verify_multi_proof,
    is_valid_merkle_tree,
)

from .standard_tree import (
    IndexedValue,
    ValueMultiProof,
    StandardMerkleTree,
    coerce_leaf_value,
)

from .serializer import dump, load


__all__ = [
    # Leaves
    "UINT256_MAX",
    "LeafValue",
    "normalize_address",
    "parse_amount",
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
    # Core types
    "MerkleProof",
    "MultiProof",
    # Core functions
    "hash_pair",
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
    "is_valid_merkle_tree",
    # Trees
    "IndexedValue",
    "ValueMultiProof",
    "StandardMerkleTree",
    "coerce_leaf_value",
    # Serialization
    "dump",
    "load",
]
