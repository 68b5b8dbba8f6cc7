"""
Record IO Tests
Tests for orchestrator/artifacts/io.py

Tests:
- Distribution and tree record save/load round trip
- JSON formatting (2-space indent, trailing newline, camelCase tree keys)
- RecordIOError on missing files, invalid JSON and schema errors
"""
import json

import pytest

from orchestrator.artifacts.io import (
    RecordIOError,
    dump_json,
    load_distribution,
    load_tree_records,
    save_distribution,
    save_tree_records,
)
from core.schemas.rewards import DistributionRecord, TreeRecordList

from fixtures.common import make_distribution, make_distribution_record, make_tree_records


class TestDistributionIO:
    """Distribution record files."""

    def test_round_trip(self, tmp_path):
        record = make_distribution_record()
        path = save_distribution(record, tmp_path / "distribution.json")

        assert load_distribution(path) == record

    def test_creates_parent_dirs(self, tmp_path):
        path = save_distribution(make_distribution_record(), tmp_path / "a" / "b" / "d.json")
        assert path.exists()

    def test_written_format(self, tmp_path):
        path = save_distribution(make_distribution_record(), tmp_path / "d.json")
        text = path.read_text(encoding="utf-8")

        assert text.endswith("\n")
        assert text.startswith("[\n  {")
        assert json.loads(text) == make_distribution()

    def test_numeric_rewards_accepted(self, tmp_path):
        path = tmp_path / "d.json"
        path.write_text(json.dumps([
            {"token": "t", "operators": [{"operator": "0x" + "11" * 20, "reward": 5}]}
        ]))
        record = load_distribution(path)
        assert record.root[0].operators[0].reward == "5"

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordIOError, match="not found") as exc_info:
            load_distribution(tmp_path / "missing.json")
        assert exc_info.value.path.endswith("missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "d.json"
        path.write_text("{not json")
        with pytest.raises(RecordIOError, match="Invalid JSON"):
            load_distribution(path)

    def test_malformed_rows_load_as_supplied(self, tmp_path):
        """Leaf problems are left for the per-token build."""
        path = tmp_path / "d.json"
        path.write_text(json.dumps([{"token": "t", "operators": [{"operator": 7, "reward": 1.5}]}]))
        row = load_distribution(path).root[0].operators[0]
        assert row.operator == 7
        assert row.reward == 1.5

    def test_schema_error(self, tmp_path):
        path = tmp_path / "d.json"
        path.write_text(json.dumps([{"operators": [{"operator": "0x", "reward": "1"}]}]))
        with pytest.raises(RecordIOError, match="Invalid distribution"):
            load_distribution(path)


class TestTreeRecordIO:
    """Tree record files."""

    def test_round_trip(self, tmp_path):
        records = TreeRecordList.model_validate(make_tree_records())
        path = save_tree_records(records, tmp_path / "trees.json")

        assert load_tree_records(path) == records

    def test_camel_case_keys(self, tmp_path):
        records = TreeRecordList.model_validate(make_tree_records())
        path = save_tree_records(records, tmp_path / "trees.json")
        data = json.loads(path.read_text(encoding="utf-8"))

        assert "leafEncoding" in data[0]["tree"]
        assert "treeIndex" in data[0]["tree"]["values"][0]

    def test_tree_contents_not_validated_here(self, tmp_path):
        """Corrupt trees load as records; StandardMerkleTree.load rejects them per token."""
        path = tmp_path / "trees.json"
        path.write_text(json.dumps([{"token": "t", "tree": {"format": "bogus"}}]))
        assert load_tree_records(path).tokens() == ["t"]

    def test_schema_error(self, tmp_path):
        path = tmp_path / "trees.json"
        path.write_text(json.dumps({"token": "t"}))
        with pytest.raises(RecordIOError, match="Invalid tree record list"):
            load_tree_records(path)


class TestDumpJson:
    """dump_json()."""

    def test_plain_data(self):
        assert dump_json({"a": 1}) == '{\n  "a": 1\n}\n'

    def test_model(self):
        record = DistributionRecord.model_validate([])
        assert dump_json(record) == "[]\n"
