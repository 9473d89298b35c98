"""
Module 03 - Merkle Sum Proof Unit Tests
Tests for core/merkle/proofs.py, core/merkle/merkle_proofs.py and
core/schemas/proof.py

Tests:
1. Path bits and siblings extracted per level
2. compute_proof_root reproduces the tree root
3. Wire format: camelCase keys, integers as decimal strings
4. JSON round trip preserves verification
5. Malformed proofs raise ProofFormatException
6. MerkleSumVerifier against a published commitment
"""
import json

import pytest
from pydantic import ValidationError

from core.crypto.hashing import blake2b_field_hash, sha256_field_hash
from core.merkle.merkle_proofs import MerkleSumVerifier
from core.merkle.proofs import compute_proof_root, create_proof, verify_proof
from core.schemas.errors import ConstructionException, LeafNotFoundException, ProofFormatException
from core.schemas.proof import MerkleProof, ProofEntry


def _proof_dict(depth=2):
    """A well-shaped (not necessarily valid) proof dictionary."""
    return {
        "entry": {"value": "1", "sum": "2"},
        "siblingsHashes": ["3"] * depth,
        "siblingsSums": ["4"] * depth,
        "pathIndices": [0] * depth,
        "rootHash": "5",
        "rootSum": "6",
    }


class TestCreateProof:
    """Tests for create_proof()."""

    def test_path_bits_are_index_bits(self, sample_tree):
        proof = sample_tree.create_proof(11)  # 0b1011

        assert proof.path_indices == (1, 1, 0, 1)
        assert proof.leaf_index == 11

    def test_siblings_per_level(self, sample_tree):
        proof = sample_tree.create_proof(5)
        nodes = sample_tree.nodes

        expected = [nodes[0][4], nodes[1][3], nodes[2][0], nodes[3][1]]
        assert list(proof.siblings_hashes) == [n.hash for n in expected]
        assert list(proof.siblings_sums) == [n.sum for n in expected]

    def test_direct_call(self, sample_tree):
        proof = create_proof(
            0,
            sample_tree.entries,
            sample_tree.nodes,
            sample_tree.root,
            sample_tree.depth,
        )

        assert proof == sample_tree.create_proof(0)

    def test_index_beyond_entries(self, sample_tree):
        with pytest.raises(LeafNotFoundException) as exc_info:
            create_proof(20, sample_tree.entries, sample_tree.nodes, sample_tree.root, sample_tree.depth)

        assert exc_info.value.details["leaf_index"] == 20


class TestComputeProofRoot:
    """Tests for compute_proof_root()."""

    def test_reproduces_root(self, sample_tree):
        for i in (0, 7, 15):
            assert compute_proof_root(sample_tree.create_proof(i), sha256_field_hash) == sample_tree.root

    def test_rejects_oversize_element(self, sample_tree):
        proof = sample_tree.create_proof(0)
        forged = proof.model_copy(update={"root_hash": 0, "siblings_sums": (2**256,) * 4})

        with pytest.raises(ValueError):
            compute_proof_root(forged, sha256_field_hash)


class TestWireFormat:
    """Tests for MerkleProof serialization."""

    def test_camel_case_keys(self, sample_tree):
        data = sample_tree.create_proof(0).to_dict()

        assert set(data) == {
            "entry", "siblingsHashes", "siblingsSums", "pathIndices", "rootHash", "rootSum",
        }

    def test_integers_as_strings(self, sample_tree):
        data = sample_tree.create_proof(0).to_dict()

        assert data["rootSum"] == "84359"
        assert data["entry"] == {
            "value": str(int.from_bytes(b"gAdsIaKy", "big")),
            "sum": "7534",
            "username": "gAdsIaKy",
        }
        assert all(isinstance(h, str) for h in data["siblingsHashes"])
        assert all(isinstance(b, int) for b in data["pathIndices"])

    def test_username_omitted_when_absent(self):
        proof = MerkleProof.from_dict(_proof_dict())

        assert "username" not in proof.to_dict()["entry"]

    def test_canonical_json(self, sample_tree):
        text = sample_tree.create_proof(3).to_json()

        assert " " not in text
        assert text.startswith('{"entry":')
        assert list(json.loads(text)) == sorted(json.loads(text))

    def test_json_round_trip(self, sample_tree):
        proof = sample_tree.create_proof(9)

        parsed = MerkleProof.from_json(proof.to_json())

        assert parsed == proof
        assert verify_proof(parsed, sha256_field_hash)

    def test_dict_round_trip(self, sample_tree):
        proof = sample_tree.create_proof(9)

        assert MerkleProof.from_dict(proof.to_dict()) == proof

    def test_accepts_plain_ints(self):
        data = _proof_dict()
        data["rootSum"] = 6
        data["siblingsHashes"] = [3, 3]

        proof = MerkleProof.from_dict(data)

        assert proof.root_sum == 6
        assert proof.siblings_hashes == (3, 3)

    def test_accepts_field_names(self):
        proof = MerkleProof(
            entry=ProofEntry(value=1, sum=2),
            siblings_hashes=[3],
            siblings_sums=[4],
            path_indices=[1],
            root_hash=5,
            root_sum=6,
        )

        assert proof.depth == 1
        assert proof.leaf_index == 1

    def test_large_field_element_survives(self, sample_tree):
        proof = sample_tree.create_proof(0)
        data = json.loads(proof.to_json())

        assert int(data["rootHash"]) == proof.root_hash

    def test_frozen(self, sample_tree):
        proof = sample_tree.create_proof(0)

        with pytest.raises(ValidationError):
            proof.root_sum = 0


class TestMalformedProofs:
    """Proofs of the wrong shape raise ProofFormatException."""

    def test_invalid_json(self):
        with pytest.raises(ProofFormatException, match="not valid JSON"):
            MerkleProof.from_json("{not json")

    def test_not_an_object(self):
        with pytest.raises(ProofFormatException):
            MerkleProof.from_json("[1, 2]")

    def test_missing_field(self):
        data = _proof_dict()
        del data["rootHash"]

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_length_mismatch(self):
        data = _proof_dict()
        data["siblingsSums"] = ["4"]

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    @pytest.mark.parametrize("bit", [2, -1])
    def test_bad_path_bit(self, bit):
        data = _proof_dict()
        data["pathIndices"] = [0, bit]

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_negative_sum(self):
        data = _proof_dict()
        data["siblingsSums"] = ["4", "-4"]

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_non_numeric_string(self):
        data = _proof_dict()
        data["rootSum"] = "lots"

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_boolean_rejected(self):
        data = _proof_dict()
        data["entry"]["sum"] = True

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    @pytest.mark.parametrize("field", ["rootHash", "rootSum"])
    def test_element_wider_than_32_bytes(self, field):
        data = _proof_dict()
        data[field] = str(2**256)

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_oversized_sibling_rejected(self):
        data = _proof_dict()
        data["siblingsHashes"] = ["3", str(2**300)]

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_widest_element_accepted(self):
        data = _proof_dict()
        data["rootHash"] = str(2**256 - 1)

        assert MerkleProof.from_dict(data).root_hash == 2**256 - 1

    @pytest.mark.parametrize("value", [12.0, 12.5, "12.0", " 12", "0x0c", "1_2"])
    def test_non_integer_number_rejected(self, value):
        data = _proof_dict()
        data["rootSum"] = value

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_float_in_json_rejected(self):
        text = json.dumps(_proof_dict()).replace('"rootSum": "6"', '"rootSum": 6.0')

        with pytest.raises(ProofFormatException):
            MerkleProof.from_json(text)

    @pytest.mark.parametrize("bit", [1.0, True, "1"])
    def test_path_bit_must_be_int(self, bit):
        data = _proof_dict()
        data["pathIndices"] = [0, bit]

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_undecodable_bytes(self):
        with pytest.raises(ProofFormatException, match="not valid JSON"):
            MerkleProof.from_json(b'\xff\xfe{"a":1}')

    def test_invalid_utf8(self):
        with pytest.raises(ProofFormatException):
            MerkleProof.from_json(b'{"entry": "\xc3\x28"}')

    def test_empty_path(self):
        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(_proof_dict(depth=0))

    def test_depth_above_max(self):
        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(_proof_dict(depth=33))

    def test_max_depth_accepted(self):
        assert MerkleProof.from_dict(_proof_dict(depth=32)).depth == 32

    def test_unknown_key(self):
        data = _proof_dict()
        data["leafIndex"] = 0

        with pytest.raises(ProofFormatException):
            MerkleProof.from_dict(data)

    def test_error_details(self):
        data = _proof_dict()
        del data["rootSum"]

        with pytest.raises(ProofFormatException) as exc_info:
            MerkleProof.from_dict(data)

        assert exc_info.value.code == "PROOF_FORMAT_INVALID"
        assert exc_info.value.details["errors"]


class TestMerkleSumVerifier:
    """Tests for MerkleSumVerifier."""

    def test_verify(self, sample_tree):
        verifier = MerkleSumVerifier()

        assert verifier.hash_function is sha256_field_hash
        assert verifier.verify(sample_tree.create_proof(4))

    def test_verify_against_published_root(self, sample_tree):
        verifier = MerkleSumVerifier()
        proof = sample_tree.create_proof(4)

        assert verifier.verify_against_root(proof, sample_tree.root.hash, sample_tree.root.sum)

    def test_other_root_rejected(self, sample_tree):
        verifier = MerkleSumVerifier()
        proof = sample_tree.create_proof(4)

        assert not verifier.verify_against_root(proof, sample_tree.root.hash, sample_tree.root.sum - 1)
        assert not verifier.verify_against_root(proof, sample_tree.root.hash ^ 1, sample_tree.root.sum)

    def test_verify_json(self, sample_tree):
        text = sample_tree.create_proof(12).to_json()

        assert MerkleSumVerifier().verify_json(text)

    def test_verify_json_malformed(self):
        with pytest.raises(ProofFormatException):
            MerkleSumVerifier().verify_json('{"entry": {}}')

    def test_verify_json_bytes(self, sample_tree):
        data = sample_tree.create_proof(12).to_json().encode("utf-8")

        assert MerkleSumVerifier().verify_json(data)
        with pytest.raises(ProofFormatException):
            MerkleSumVerifier().verify_json(b"\xff\xfe\x00")

    def test_for_algorithm(self, sample_tree):
        proof = sample_tree.create_proof(2)

        assert MerkleSumVerifier.for_algorithm("sha256").verify(proof)
        assert not MerkleSumVerifier.for_algorithm("blake2b").verify(proof)
        assert MerkleSumVerifier.for_algorithm("blake2b").hash_function is blake2b_field_hash

    def test_unknown_algorithm(self):
        with pytest.raises(ConstructionException):
            MerkleSumVerifier.for_algorithm("keccak")
