import pytest
from distributor.ledger import Distributor, TokenVault
from distributor.merkle import Leaf, MerkleTree


@pytest.fixture
def accounts():
    # Deterministic 32-byte identities: 0x0101..01, 0x0202..02, ...
    yield [bytes([i + 1]) * 32 for i in range(10)]


@pytest.fixture
def admin(accounts):
    yield accounts[0]


@pytest.fixture
def mint():
    yield b"\xaa" * 32


@pytest.fixture
def vault(mint):
    yield TokenVault(b"\xbb" * 32, mint, balance=10_000)


@pytest.fixture
def distributor(vault, mint, admin):
    distributor = Distributor(vault)
    distributor.initialize(mint, admin)
    yield distributor


@pytest.fixture
def build_tree():
    """
    Factory returning (tree, leaves) for a list of (claimant, amount) pairs.

    Usage: tree, leaves = build_tree([(accounts[1], 1500), (accounts[2], 2500)])
    """
    def _build_tree(pairs):
        leaves = [Leaf(claimant, amount) for claimant, amount in pairs]
        tree = MerkleTree([leaf.commitment for leaf in leaves])
        return tree, leaves

    return _build_tree


@pytest.fixture
def publish_root(distributor, admin, build_tree):
    """
    Factory that builds a tree and rotates the distributor onto its root.

    Usage: tree, leaves = publish_root([(accounts[1], 1500)])
    """
    def _publish_root(pairs):
        tree, leaves = build_tree(pairs)
        distributor.update_root(admin, tree.root)
        return tree, leaves

    return _publish_root


@pytest.fixture
def fixed_vectors():
    """Known-answer vectors for SHA-256 leaves and the three-leaf tree."""
    l0, l1, l2 = b"\x11" * 32, b"\x22" * 32, b"\x33" * 32
    node01 = bytes.fromhex("5189c77d29fe5d546a045ec46986852785fea5c13ac7da9c115ff5fb6edf817c")
    yield {
        "leaf_claimant": b"\x01" * 32,
        "leaf_amount": 1500,
        "leaf_inner": bytes.fromhex("d01a3562efff5a153a5bcf82c150783973e02c8cac4eaf4eb4b7fc538a30c828"),
        "leaf": bytes.fromhex("cb966672f99d2068c5831edfa8473f40bcf853ecc3508a9e0d526fe1c4ed7570"),
        "tree_leaves": [l0, l1, l2],
        "tree_level1": [node01, l2],
        "tree_root": bytes.fromhex("277b6f43115f5bfd44a875c69575ec332ca5cae7eb76566270a122038611e48f"),
        "tree_proofs": [[l1, l2], [l0, l2], [node01]],
    }
