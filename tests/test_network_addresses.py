from __future__ import annotations

import pytest

from deployment_tools.errors import InvalidChainId, MalformedRecord
from deployment_tools.network_addresses import (
    Multiple,
    NetworkAddresses,
    Single,
    chain_id_key,
    insert_chain_id,
    validate_chain_id,
)


def _insert(raw: dict, chain_id: str, deployment_type: str) -> dict:
    return insert_chain_id(NetworkAddresses.from_json(raw), chain_id, deployment_type).to_json()


def test_new_chain_is_appended_after_smaller_ids() -> None:
    result = _insert({"1": "canonical", "10": "canonical"}, "988", "eip155")
    assert result == {"1": "canonical", "10": "canonical", "988": "eip155"}
    assert list(result) == ["1", "10", "988"]


def test_existing_chain_with_other_type_becomes_list() -> None:
    assert _insert({"1": "canonical"}, "1", "eip155") == {"1": ["canonical", "eip155"]}


def test_existing_chain_with_same_type_is_unchanged() -> None:
    assert _insert({"1": "canonical"}, "1", "canonical") == {"1": "canonical"}


def test_list_value_gains_new_type_at_the_end() -> None:
    result = _insert({"1": ["canonical", "eip155"]}, "1", "zksync")
    assert result == {"1": ["canonical", "eip155", "zksync"]}


def test_list_value_ignores_duplicate_type() -> None:
    assert _insert({"1": ["canonical", "eip155"]}, "1", "canonical") == {"1": ["canonical", "eip155"]}


def test_smaller_chain_goes_first_and_larger_goes_last() -> None:
    raw = {"10": "canonical", "100": "canonical"}
    assert list(_insert(raw, "5", "canonical")) == ["5", "10", "100"]
    assert list(_insert(raw, "1000", "canonical")) == ["10", "100", "1000"]


def test_insertion_into_empty_mapping() -> None:
    assert _insert({}, "137", "zksync") == {"137": "zksync"}


def test_new_chain_resorts_numerically_not_lexicographically() -> None:
    raw = {"137": "canonical", "10": "canonical", "2": "eip155", "1": "canonical"}
    assert list(_insert(raw, "56", "canonical")) == ["1", "2", "10", "56", "137"]


def test_existing_chain_keeps_position_without_resorting() -> None:
    raw = {"137": "canonical", "10": "canonical"}
    result = _insert(raw, "137", "eip155")
    assert list(result) == ["137", "10"]
    assert result["137"] == ["canonical", "eip155"]


def test_insert_does_not_mutate_input() -> None:
    original = NetworkAddresses.from_json({"1": "canonical"})
    insert_chain_id(original, "1", "eip155")
    insert_chain_id(original, "2", "eip155")
    assert original.to_json() == {"1": "canonical"}


@pytest.mark.parametrize("chain_id", ["", "abc", "-1", "1.5", "0x10", " 1", "1\n", "１"])
def test_invalid_chain_id_is_rejected(chain_id: str) -> None:
    with pytest.raises(InvalidChainId):
        insert_chain_id(NetworkAddresses.from_json({"1": "canonical"}), chain_id, "canonical")


def test_validate_chain_id_accepts_zero() -> None:
    assert validate_chain_id("0") == "0"


def test_values_are_modelled_as_single_or_multiple() -> None:
    mapping = NetworkAddresses.from_json({"1": "canonical", "10": ["canonical", "zksync"]})
    assert mapping.get("1") == Single("canonical")
    assert mapping.get("10") == Multiple(("canonical", "zksync"))
    assert mapping.get("5") is None


def test_single_merge_rules() -> None:
    assert Single("canonical").merge("canonical") == Single("canonical")
    assert Single("canonical").merge("zksync") == Multiple(("canonical", "zksync"))


def test_multiple_merge_rules() -> None:
    tags = Multiple(("canonical", "eip155"))
    assert tags.merge("eip155") is tags
    assert tags.merge("zksync") == Multiple(("canonical", "eip155", "zksync"))


@pytest.mark.parametrize(
    "raw",
    [
        None,
        ["1"],
        {"mainnet": "canonical"},
        {"1": 5},
        {"1": ["canonical", 1]},
        {"1": {"type": "canonical"}},
    ],
)
def test_malformed_mapping_is_rejected(raw: object) -> None:
    with pytest.raises(MalformedRecord):
        NetworkAddresses.from_json(raw)


def test_chain_id_key_orders_by_numeric_value() -> None:
    ids = ["10", "9", "0", "010", "00", "100", "11"]
    assert sorted(ids, key=chain_id_key) == ["0", "00", "9", "10", "010", "11", "100"]


def test_chain_ids_longer_than_int_conversion_limit() -> None:
    huge = "1" * 5000
    bigger = "2" + "0" * 4999
    mapping = NetworkAddresses.from_json({bigger: "canonical", "1": "canonical"})
    result = insert_chain_id(mapping, huge, "eip155")
    assert list(result.to_json()) == ["1", huge, bigger]
    assert validate_chain_id(huge) == huge


def test_existing_chain_is_matched_by_numeric_value() -> None:
    result = _insert({"1": "canonical", "0988": "canonical"}, "988", "eip155")
    assert result == {"1": "canonical", "0988": ["canonical", "eip155"]}
    assert list(result) == ["1", "0988"]
