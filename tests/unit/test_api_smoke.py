"""
API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /trees returns per-token records and failures
3. POST /roots from a distribution or from serialized trees
4. POST /proofs returns verifiable proofs and missing tokens
5. POST /verify accepts valid proofs and rejects tampered ones
6. Invalid bodies use the error envelope
"""

import pytest
from fastapi.testclient import TestClient

from core.merkle.standard_tree import StandardMerkleTree

from api.app import app

from fixtures.common import ADDRESS_A, ADDRESS_B, make_distribution, make_tree_records


# Create test client
client = TestClient(app)


class TestHealth:
    """GET /health."""

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "service": "operator-rewards-api", "version": "v1"}

    def test_root_alias(self):
        assert client.get("/").json()["ok"] is True


class TestTreesEndpoint:
    """POST /trees."""

    def test_builds_trees(self):
        response = client.post("/trees", json={"distribution": make_distribution()})

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert [t["token"] for t in body["trees"]] == ["token-x", "token-y"]
        assert body["trees"][0]["tree"]["format"] == "standard-v1"
        assert "treeIndex" in body["trees"][0]["tree"]["values"][0]
        assert body["failures"] == []

    def test_trees_reload(self):
        body = client.post("/trees", json={"distribution": make_distribution()}).json()
        for item in body["trees"]:
            StandardMerkleTree.load(item["tree"])

    def test_partial_failure(self):
        distribution = make_distribution({"good": [(ADDRESS_A, 1)], "empty": []})
        body = client.post("/trees", json={"distribution": distribution}).json()

        assert body["ok"] is False
        assert [t["token"] for t in body["trees"]] == ["good"]
        assert body["failures"][0]["token"] == "empty"
        assert body["failures"][0]["error"]["code"] == "EMPTY_INPUT"

    @pytest.mark.parametrize("reward", [1.5, None])
    def test_malformed_row_fails_only_its_token(self, reward):
        distribution = [
            {"token": "good", "operators": [{"operator": ADDRESS_A, "reward": "1"}]},
            {"token": "bad", "operators": [{"operator": ADDRESS_B, "reward": reward}]},
        ]
        response = client.post("/trees", json={"distribution": distribution})

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is False
        assert [t["token"] for t in body["trees"]] == ["good"]
        assert body["failures"][0]["token"] == "bad"
        assert body["failures"][0]["error"]["code"] == "MALFORMED_LEAF"

    def test_missing_body_field(self):
        response = client.post("/trees", json={})
        assert response.status_code == 422
        body = response.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "SCHEMA_VALIDATION_ERROR"


class TestRootsEndpoint:
    """POST /roots."""

    def test_roots_from_either_source(self):
        from_distribution = client.post("/roots", json={"distribution": make_distribution()}).json()
        from_trees = client.post("/roots", json={"trees": make_tree_records()}).json()

        assert from_distribution["ok"] is True
        assert from_distribution["roots"] == from_trees["roots"]

    def test_requires_exactly_one_source(self):
        response = client.post("/roots", json={})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "SCHEMA_VALIDATION_ERROR"

        response = client.post(
            "/roots",
            json={"distribution": make_distribution(), "trees": make_tree_records()},
        )
        assert response.status_code == 422

    def test_corrupt_tree_reported(self):
        records = make_tree_records()
        records[0]["tree"]["format"] = "standard-v9"
        body = client.post("/roots", json={"trees": records}).json()

        assert body["ok"] is False
        assert [r["token"] for r in body["roots"]] == ["token-y"]
        assert body["failures"][0]["error"]["code"] == "CORRUPT_TREE_RECORD"


class TestProofsEndpoint:
    """POST /proofs."""

    def test_proofs_verify(self):
        roots = {
            r["token"]: r["root"]
            for r in client.post("/roots", json={"distribution": make_distribution()}).json()["roots"]
        }
        body = client.post(
            "/proofs",
            json={"distribution": make_distribution(), "operator": ADDRESS_A},
        ).json()

        assert body["operator"] == ADDRESS_A.lower()
        assert body["missing_tokens"] == ["token-y"]
        proof = body["proofs"][0]
        assert StandardMerkleTree.verify(roots[proof["token"]], (proof["operator"], proof["reward"]), proof["proof"])

    def test_exact_reward(self):
        body = client.post(
            "/proofs",
            json={"trees": make_tree_records(), "operator": ADDRESS_B, "reward": 50},
        ).json()
        assert [p["token"] for p in body["proofs"]] == ["token-y"]

    def test_malformed_operator(self):
        response = client.post(
            "/proofs",
            json={"distribution": make_distribution(), "operator": "0xnope"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MALFORMED_LEAF"


class TestVerifyEndpoint:
    """POST /verify."""

    def setup_method(self):
        self.tree = StandardMerkleTree.of([(ADDRESS_A, 100), (ADDRESS_B, 200)])
        self.proof = self.tree.get_proof((ADDRESS_A, 100))

    @pytest.mark.parametrize("reward,expected", [(100, True), ("100", True), (101, False)])
    def test_verify(self, reward, expected):
        response = client.post("/verify", json={
            "root": self.tree.root,
            "operator": ADDRESS_A,
            "reward": reward,
            "proof": self.proof,
        })
        assert response.status_code == 200
        assert response.json() == {"ok": True, "valid": expected}

    def test_malformed_proof_is_false(self):
        response = client.post("/verify", json={
            "root": self.tree.root,
            "operator": ADDRESS_A,
            "reward": 100,
            "proof": ["0xdead"],
        })
        assert response.json()["valid"] is False

    def test_missing_fields(self):
        response = client.post("/verify", json={"root": self.tree.root})
        assert response.status_code == 422
        assert response.json()["ok"] is False
