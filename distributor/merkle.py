import hashlib
import json
import os
from dataclasses import dataclass
from itertools import zip_longest
from typing import Iterable, List, Optional, Tuple, Union
from eth_utils import decode_hex, encode_hex
from eth_abi.packed import encode_packed
from config import Config

HASH_BYTES = Config.HASH_BYTES
MAX_AMOUNT = 2 ** (8 * Config.AMOUNT_BYTES) - 1
ZERO_HASH = b"\x00" * HASH_BYTES

Bytes32Like = Union[bytes, bytearray, str]


def hashv(*parts):
    return hashlib.sha256(b"".join(parts)).digest()


def to_bytes32(value: Bytes32Like) -> bytes:
    """Normalize a 32-byte value given as raw bytes or a hex string."""
    if isinstance(value, str):
        value = decode_hex(value)
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"expected bytes or hex string, got {type(value).__name__}")
    if len(value) != HASH_BYTES:
        raise ValueError(f"expected {HASH_BYTES} bytes, got {len(value)}")
    return bytes(value)


def encode_leaf(claimant: Bytes32Like, amount: int) -> bytes:
    """
    Commit to a (claimant, cumulative amount) pair.

    The packed claimant ‖ big-endian u64 amount is hashed, and the digest is
    hashed a second time so a leaf can never collide with an internal node.
    """
    claimant = to_bytes32(claimant)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"amount must be an int, got {type(amount).__name__}")
    if not 0 <= amount <= MAX_AMOUNT:
        raise ValueError(f"amount {amount} does not fit in an unsigned 64-bit integer")
    inner = hashv(encode_packed(["bytes32", "uint64"], [claimant, amount]))
    return hashv(inner)


@dataclass(frozen=True)
class Leaf:
    claimant: bytes
    amount: int

    def __post_init__(self):
        object.__setattr__(self, "claimant", to_bytes32(self.claimant))

    @property
    def commitment(self):
        return encode_leaf(self.claimant, self.amount)


class MerkleTree:
    def __init__(self, elements):
        # Leaf order is significant: no sorting and no deduplication.
        self.elements = [to_bytes32(el) for el in elements]
        if not self.elements:
            raise ValueError("cannot build a merkle tree with no leaves")
        self.layers = MerkleTree.get_layers(self.elements)

    @property
    def root(self):
        return self.layers[-1][0]

    @property
    def depth(self):
        return len(self.layers) - 1

    def index_of(self, el):
        return self.elements.index(to_bytes32(el))

    def get_proof(self, idx):
        if not 0 <= idx < len(self.elements):
            raise IndexError(f"leaf index {idx} out of range for {len(self.elements)} leaves")
        proof = []
        for layer in self.layers[:-1]:
            pair_idx = idx + 1 if idx % 2 == 0 else idx - 1
            # A promoted odd tail has no sibling on this layer
            if pair_idx < len(layer):
                proof.append(layer[pair_idx])
            idx //= 2
        return proof

    @staticmethod
    def get_layers(elements):
        layers = [elements]
        while len(layers[-1]) > 1:
            layers.append(MerkleTree.get_next_layer(layers[-1]))
        return layers

    @staticmethod
    def get_next_layer(elements):
        return [
            MerkleTree.combined_hash(a, b) for a, b in zip_longest(elements[::2], elements[1::2])
        ]

    @staticmethod
    def combined_hash(a, b):
        if a is None:
            return b
        if b is None:
            return a
        return hashv(*sorted([a, b]))


def verify_proof(leaf: Bytes32Like, proof: Iterable[Bytes32Like], root: Bytes32Like) -> bool:
    """Fold ``proof`` into ``leaf`` and compare the result with ``root``."""
    computed = to_bytes32(leaf)
    for sibling in proof:
        computed = MerkleTree.combined_hash(computed, to_bytes32(sibling))
    return computed == to_bytes32(root)


def verify_claim(claimant: Bytes32Like, amount: int, proof: Iterable[Bytes32Like], root: Bytes32Like) -> bool:
    return verify_proof(encode_leaf(claimant, amount), proof, root)


def get_merkle_root(leaves):
    return MerkleTree([leaf.commitment for leaf in leaves]).root


def get_proof_for_claimant(leaves: List[Leaf], claimant: Bytes32Like) -> Optional[Tuple[int, List[bytes]]]:
    """
    Returns (amount, proof) for the first leaf belonging to ``claimant``,
    or None when the claimant has no leaf.
    """
    claimant = to_bytes32(claimant)
    for idx, leaf in enumerate(leaves):
        if leaf.claimant == claimant:
            tree = MerkleTree([el.commitment for el in leaves])
            return leaf.amount, tree.get_proof(idx)
    return None


def parse_amount(value):
    """
    Accept an int or a base-10 digit string that fits in u64.

    Floats and booleans are rejected rather than truncated.
    """
    if isinstance(value, bool):
        raise ValueError(f"amount must be an integer, got {value!r}")
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    if not isinstance(value, int):
        raise ValueError(f"amount must be an integer or digit string, got {value!r}")
    if not 0 <= value <= MAX_AMOUNT:
        raise ValueError(f"amount {value} does not fit in an unsigned 64-bit integer")
    return value


def parse_leaves(user_amount_data) -> List[Leaf]:
    """Build leaves from a ``{claimant_hex: amount}`` mapping, keeping its order."""
    if not isinstance(user_amount_data, dict):
        raise ValueError(f"leaves must be a JSON object, got {type(user_amount_data).__name__}")
    return [Leaf(to_bytes32(claimant), parse_amount(amount)) for claimant, amount in user_amount_data.items()]


def build_distribution(leaves, description=''):
    seen = set()
    for leaf in leaves:
        if leaf.claimant in seen:
            raise ValueError(f"duplicate claimant {encode_hex(leaf.claimant)}")
        seen.add(leaf.claimant)

    tree = MerkleTree([leaf.commitment for leaf in leaves])
    return {
        "description": description,
        "merkle_root": encode_hex(tree.root),
        "token_total": str(sum(leaf.amount for leaf in leaves)),
        "num_recipients": len(leaves),
        "claims": {
            encode_hex(leaf.claimant): {
                "index": index,
                "amount": str(leaf.amount),
                "proof": [encode_hex(node) for node in tree.get_proof(index)],
            }
            for index, leaf in enumerate(leaves)
        },
    }


def create_merkle(leaves: List[Leaf], name: str, description: str = '', output_path: Optional[str] = None) -> dict:
    distribution = build_distribution(leaves, description)

    output_path = output_path or Config.get_merkle_file(name)
    os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
    with open(output_path, 'w') as json_file:
        json.dump(distribution, json_file, indent=4)
    print(f'Distribution successfully written for {len(distribution["claims"])} users')
    print(f"base merkle root: {distribution['merkle_root']}")
    return distribution


def load_distribution(path):
    with open(path, 'r') as f:
        return json.load(f)


def claim_from_distribution(distribution: dict, claimant: Bytes32Like) -> Optional[Tuple[int, List[bytes]]]:
    """Look up a claimant's (amount, proof) in a loaded distribution file."""
    key = encode_hex(to_bytes32(claimant))
    try:
        claims = {k.lower(): v for k, v in distribution["claims"].items()}
    except (AttributeError, KeyError, TypeError) as e:
        raise ValueError(f"malformed distribution: {e!r}") from e
    claim = claims.get(key)
    if claim is None:
        return None
    try:
        return parse_amount(claim["amount"]), [to_bytes32(node) for node in claim["proof"]]
    except (KeyError, TypeError) as e:
        raise ValueError(f"malformed claim entry: {e!r}") from e
