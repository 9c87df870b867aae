import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from deployment_tools.errors import InvalidChainId, MalformedRecord
from deployment_tools.types import NetworkAddressesJSON

CHAIN_ID_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Single:
    """A chain deployed with exactly one deployment type, stored as a bare string."""
    tag: str

    def merge(self, variant: str) -> "ChainValue":
        if variant == self.tag:
            return self
        return Multiple((self.tag, variant))

    def to_json(self) -> str:
        return self.tag


@dataclass(frozen=True)
class Multiple:
    """A chain deployed with several deployment types, stored as an array."""
    tags: Tuple[str, ...]

    def merge(self, variant: str) -> "ChainValue":
        if variant in self.tags:
            return self
        return Multiple(self.tags + (variant,))

    def to_json(self) -> List[str]:
        return list(self.tags)


ChainValue = Union[Single, Multiple]


def validate_chain_id(chain_id: str) -> str:
    """
    Check that chain_id is a decimal string. Signs, whitespace and hex are rejected.
    """
    if not isinstance(chain_id, str) or not CHAIN_ID_RE.fullmatch(chain_id):
        raise InvalidChainId(f"Invalid chain ID: {chain_id}")
    return chain_id


def chain_id_key(chain_id: str) -> Tuple[int, str]:
    """
    Sort key ordering decimal strings by numeric value. Comparing (length, digits)
    avoids int(), which refuses strings past sys.get_int_max_str_digits().
    """
    digits = chain_id.lstrip("0") or "0"
    return (len(digits), digits)


def value_from_json(chain_id: str, raw) -> ChainValue:
    if isinstance(raw, str):
        return Single(raw)
    if isinstance(raw, list) and all(isinstance(tag, str) for tag in raw):
        return Multiple(tuple(raw))
    raise MalformedRecord(
        f"networkAddresses[{chain_id!r}] must be a deployment type or a list of them, got {raw!r}"
    )


class NetworkAddresses:
    """
    The networkAddresses field of a deployment record as an ordered list of
    (chain_id, value) pairs. Order is exactly the order written to disk.
    Lookups match keys by numeric value, so "0988" and "988" are the same chain.
    """

    def __init__(self, entries=()):
        self._entries: List[Tuple[str, ChainValue]] = list(entries)

    @classmethod
    def from_json(cls, raw) -> "NetworkAddresses":
        if not isinstance(raw, dict):
            raise MalformedRecord(f"networkAddresses must be an object, got {type(raw).__name__}")
        entries = []
        for chain_id, value in raw.items():
            if not CHAIN_ID_RE.fullmatch(chain_id):
                raise MalformedRecord(f"networkAddresses key {chain_id!r} is not a decimal chain ID")
            entries.append((chain_id, value_from_json(chain_id, value)))
        return cls(entries)

    def to_json(self) -> NetworkAddressesJSON:
        return {chain_id: value.to_json() for chain_id, value in self._entries}

    def find(self, chain_id: str) -> Optional[str]:
        """Return the stored key numerically equal to chain_id, if any."""
        wanted = chain_id_key(chain_id)
        for key, _ in self._entries:
            if chain_id_key(key) == wanted:
                return key
        return None

    def get(self, chain_id: str) -> Optional[ChainValue]:
        wanted = chain_id_key(chain_id)
        for key, value in self._entries:
            if chain_id_key(key) == wanted:
                return value
        return None

    def sorted(self) -> "NetworkAddresses":
        # stable, so numerically equal keys such as "1" and "01" keep their order
        return NetworkAddresses(sorted(self._entries, key=lambda entry: chain_id_key(entry[0])))

    def __contains__(self, chain_id) -> bool:
        return self.find(chain_id) is not None

    def __iter__(self) -> Iterator[Tuple[str, ChainValue]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, NetworkAddresses):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"NetworkAddresses({self._entries!r})"


def insert_chain_id(network_addresses: NetworkAddresses, chain_id: str, deployment_type: str) -> NetworkAddresses:
    """
    Insert chain_id with deployment_type, returning a new mapping.

    An existing chain keeps its key spelling and position and has the
    deployment type merged into its value. A new chain triggers a full numeric
    re-sort of the existing entries and is placed before the first larger chain ID.
    """
    validate_chain_id(chain_id)

    existing_key = network_addresses.find(chain_id)
    if existing_key is not None:
        return NetworkAddresses(
            (key, value.merge(deployment_type) if key == existing_key else value)
            for key, value in network_addresses
        )

    entries = list(network_addresses.sorted())
    keys = [chain_id_key(key) for key, _ in entries]
    insert_index = bisect_right(keys, chain_id_key(chain_id))
    entries.insert(insert_index, (chain_id, Single(deployment_type)))
    return NetworkAddresses(entries)
