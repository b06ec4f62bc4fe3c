"""
CLI Unit Tests
Tests for merkle_arena_cli: root, prove, verify, bench and config commands.
"""
import json
import logging

import pytest

from fixtures import SAMPLE, EXPECTED_ROOT_HEX
from merkle_arena_cli.commands.bench import parse_sizes
from merkle_arena_cli.io import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    LeafInputError,
    read_leaf_file,
)
from merkle_arena_cli.main import main


SAMPLE_ARGS = [leaf.decode("utf-8") for leaf in SAMPLE]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _prove_json(capsys, index):
    assert main(["prove", str(index), *SAMPLE_ARGS, "--json"]) == EXIT_SUCCESS
    return json.loads(capsys.readouterr().out)


class TestRootCommand:
    """Tests for `merkle-arena root`."""

    def test_root_text(self, capsys):
        assert main(["root", *SAMPLE_ARGS]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"root: 0x{EXPECTED_ROOT_HEX}" in out
        assert "height: 4" in out

    def test_root_json(self, capsys):
        assert main(["root", *SAMPLE_ARGS, "--json"]) == EXIT_SUCCESS

        payload = json.loads(capsys.readouterr().out)
        assert payload["root"] == f"0x{EXPECTED_ROOT_HEX}"
        assert payload["leaf_count"] == 10

    def test_root_from_file(self, capsys, tmp_path):
        path = tmp_path / "leaves.txt"
        path.write_bytes(b"\n".join(SAMPLE) + b"\n")

        assert main(["root", "--file", str(path), "--json"]) == EXIT_SUCCESS

        assert json.loads(capsys.readouterr().out)["root"] == f"0x{EXPECTED_ROOT_HEX}"

    def test_root_of_nothing(self, capsys):
        assert main(["root"]) == EXIT_SUCCESS

        assert "(empty tree)" in capsys.readouterr().out

    def test_other_algorithm_changes_root(self, capsys):
        assert main(["--algorithm", "sha3_256", "root", *SAMPLE_ARGS, "--json"]) == EXIT_SUCCESS

        payload = json.loads(capsys.readouterr().out)
        assert payload["algorithm"] == "sha3_256"
        assert payload["root"] != f"0x{EXPECTED_ROOT_HEX}"

    def test_file_and_arguments_conflict(self, capsys, tmp_path):
        path = tmp_path / "leaves.txt"
        path.write_text("a\n")

        assert main(["root", "a", "--file", str(path)]) == EXIT_RUNTIME_ERROR


class TestProveAndVerify:
    """Round trip through `prove` and `verify`."""

    def test_prove_then_verify(self, capsys):
        proof = _prove_json(capsys, 9)

        assert proof["root"] == f"0x{EXPECTED_ROOT_HEX}"
        assert len(proof["opening"]) == 4

        code = main(["verify", "9", proof["root"], *proof["opening"], "--leaf-count", "10", "--leaf", "iaculis"])

        assert code == EXIT_SUCCESS
        assert "valid: true" in capsys.readouterr().out

    def test_verify_with_leaf_hash(self, capsys):
        proof = _prove_json(capsys, 4)

        code = main(["verify", "4", proof["root"], *proof["opening"], "--leaf-count", "10", "--leaf-hash", proof["leaf"]])

        assert code == EXIT_SUCCESS

    def test_verify_wrong_root(self, capsys):
        proof = _prove_json(capsys, 9)
        wrong_root = "0x" + "00" * 32

        code = main(["verify", "9", wrong_root, *proof["opening"], "--leaf-count", "10", "--leaf", "iaculis"])

        assert code == EXIT_VERIFICATION_FAILED
        assert "valid: false" in capsys.readouterr().out

    def test_verify_wrong_index(self, capsys):
        proof = _prove_json(capsys, 9)

        code = main(["verify", "8", proof["root"], *proof["opening"], "--leaf-count", "10", "--leaf", "iaculis"])

        assert code == EXIT_VERIFICATION_FAILED

    def test_verify_index_past_last_leaf(self, capsys):
        """Index 11 folds like index 9 through the self-paired nodes."""
        proof = _prove_json(capsys, 9)

        code = main(["verify", "11", proof["root"], *proof["opening"], "--leaf-count", "10", "--leaf", "iaculis"])

        assert code == EXIT_VERIFICATION_FAILED

    def test_verify_failure_json_reports_code(self, capsys):
        proof = _prove_json(capsys, 9)
        assert proof["leaf_count"] == 10

        code = main([
            "verify", "8", proof["root"], *proof["opening"],
            "--leaf-count", "10", "--leaf", "iaculis", "--json",
        ])

        assert code == EXIT_VERIFICATION_FAILED
        payload = json.loads(capsys.readouterr().out)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "MERKLE_PROOF_INVALID"

    def test_verify_requires_leaf_count(self, capsys):
        with pytest.raises(SystemExit):
            main(["verify", "0", "0x00", "--leaf", "lorem"])

    def test_verify_malformed_hex(self, capsys):
        code = main(["verify", "0", "not-hex", "--leaf-count", "10", "--leaf", "lorem"])

        assert code == EXIT_RUNTIME_ERROR

    def test_prove_index_out_of_range(self, capsys):
        code = main(["prove", "10", *SAMPLE_ARGS, "--json"])

        assert code == EXIT_RUNTIME_ERROR
        payload = json.loads(capsys.readouterr().out)
        assert payload["error"]["code"] == "LEAF_INDEX_OUT_OF_BOUNDS"


class TestConfigCommand:
    """Tests for `merkle-arena config`."""

    def test_show(self, capsys):
        assert main(["--workers", "3", "config", "--show"]) == EXIT_SUCCESS

        shown = json.loads(capsys.readouterr().out)
        assert shown["max_workers"] == 3
        assert shown["hash_algorithm"] == "sha256"

    def test_yaml_config(self, capsys, tmp_path):
        path = tmp_path / "merkle.yaml"
        path.write_text("merkle:\n  hash_algorithm: blake2b\n")

        assert main(["--config", str(path), "config", "--show"]) == EXIT_SUCCESS

        assert json.loads(capsys.readouterr().out)["hash_algorithm"] == "blake2b"

    def test_invalid_workers(self, capsys):
        assert main(["--workers", "0", "config", "--show"]) == EXIT_RUNTIME_ERROR

        assert "max_workers" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR


class TestBenchCommand:
    """Tests for `merkle-arena bench`."""

    def test_bench_json(self, capsys):
        code = main(["bench", "--sizes", "3,8", "--repeat", "1", "--json"])

        assert code == EXIT_SUCCESS
        payload = json.loads(capsys.readouterr().out)
        assert [r["leaf_count"] for r in payload["results"]] == [3, 8]

    def test_parse_sizes(self):
        assert parse_sizes("1024, 16,") == [1024, 16]

    def test_parse_sizes_rejects_zero(self):
        with pytest.raises(ValueError):
            parse_sizes("0")

    def test_bad_repeat(self, capsys):
        assert main(["bench", "--sizes", "4", "--repeat", "0"]) == EXIT_RUNTIME_ERROR


class TestLeafFile:
    """Tests for read_leaf_file()."""

    def test_crlf_and_blank_lines(self, tmp_path):
        path = tmp_path / "leaves.txt"
        path.write_bytes(b"a\r\n\r\nb\r\n")

        assert read_leaf_file(path) == [b"a", b"", b"b"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(LeafInputError):
            read_leaf_file(tmp_path / "missing.txt")
