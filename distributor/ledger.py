import threading
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, List, Optional
from eth_utils import encode_hex
from distributor.errors import (
    AlreadyClaimed,
    AlreadyInitialized,
    InsufficientBalance,
    InvalidProof,
    NotInitialized,
    SameValue,
    Shutdown,
    Unauthorized,
)
from distributor.merkle import ZERO_HASH, Bytes32Like, to_bytes32, verify_claim


@dataclass(frozen=True)
class DistributorConfig:
    root: bytes
    mint: bytes
    vault: bytes
    admin: bytes
    shutdown: bool = False


@dataclass(frozen=True)
class ClaimRecord:
    claimant: bytes
    claimed: int = 0


class TokenVault:
    """
    Token account claims are paid from.

    Holds the vault balance and the balances it has paid out, keyed by
    recipient identity.
    """

    def __init__(self, address: Bytes32Like, mint: Bytes32Like, balance: int = 0):
        self.address = to_bytes32(address)
        self.mint = to_bytes32(mint)
        self.balance = balance
        self.balances = defaultdict(int)

    def deposit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("deposit amount must be non-negative")
        self.balance += amount

    def transfer(self, recipient: bytes, amount: int) -> None:
        if amount > self.balance:
            raise InsufficientBalance(
                f"vault holds {self.balance}, cannot transfer {amount}"
            )
        self.balance -= amount
        self.balances[recipient] += amount


def evaluate_claim(config: DistributorConfig, claimed: int, claimant: Bytes32Like, amount: int,
                   proof: List[Bytes32Like]) -> int:
    """
    Validate a claim against a config snapshot and return the delta owed.

    Pure: reads ``config`` and the claimant's current ``claimed`` total and
    either raises or returns ``amount - claimed``.
    """
    if config.shutdown:
        raise Shutdown()
    try:
        valid = verify_claim(claimant, amount, proof, config.root)
    except (TypeError, ValueError) as e:
        raise InvalidProof(f"malformed claim: {e}") from e
    if not valid:
        raise InvalidProof()
    if amount <= claimed:
        raise AlreadyClaimed(f"amount {amount} is not above already claimed {claimed}")
    return amount - claimed


class Distributor:
    """
    One distribution: its config, the per-claimant claim records and the
    vault that pays them.

    Every mutating operation runs under a single lock, so a claim's
    verification and its record update are applied as one unit.
    """

    def __init__(self, vault: TokenVault):
        self.vault = vault
        self.config: Optional[DistributorConfig] = None
        self.records: Dict[bytes, ClaimRecord] = {}
        self._lock = threading.Lock()

    def _require_config(self) -> DistributorConfig:
        if self.config is None:
            raise NotInitialized()
        return self.config

    def _require_admin(self, caller: Bytes32Like) -> DistributorConfig:
        config = self._require_config()
        if to_bytes32(caller) != config.admin:
            raise Unauthorized(f"{encode_hex(to_bytes32(caller))} is not the admin")
        return config

    @staticmethod
    def _claimant_key(config, claimant):
        if config.shutdown:
            raise Shutdown()
        try:
            return to_bytes32(claimant)
        except (TypeError, ValueError) as e:
            raise InvalidProof(f"malformed claimant: {e}") from e

    def initialize(self, mint: Bytes32Like, admin: Bytes32Like) -> DistributorConfig:
        mint = to_bytes32(mint)
        with self._lock:
            if self.config is not None:
                raise AlreadyInitialized()
            if mint != self.vault.mint:
                raise ValueError("vault does not hold the distribution mint")
            self.config = DistributorConfig(
                root=ZERO_HASH,
                mint=mint,
                vault=self.vault.address,
                admin=to_bytes32(admin),
            )
            return self.config

    def update_root(self, caller: Bytes32Like, new_root: Bytes32Like) -> DistributorConfig:
        new_root = to_bytes32(new_root)
        with self._lock:
            config = self._require_admin(caller)
            if new_root == config.root:
                raise SameValue("root unchanged")
            # Claim records are kept so claiming carries across rotations
            self.config = replace(config, root=new_root)
            return self.config

    def set_admin(self, caller: Bytes32Like, new_admin: Bytes32Like) -> DistributorConfig:
        new_admin = to_bytes32(new_admin)
        with self._lock:
            config = self._require_admin(caller)
            if new_admin == config.admin:
                raise SameValue("admin unchanged")
            self.config = replace(config, admin=new_admin)
            return self.config

    def shutdown(self, caller: Bytes32Like) -> int:
        """Stop accepting claims and return the drained vault balance to the admin."""
        with self._lock:
            config = self._require_admin(caller)
            if config.shutdown:
                raise Shutdown()
            drained = self.vault.balance
            self.vault.transfer(config.admin, drained)
            self.config = replace(config, shutdown=True)
            return drained

    def claimed(self, claimant: Bytes32Like) -> int:
        record = self.records.get(to_bytes32(claimant))
        return record.claimed if record else 0

    def claimable(self, claimant: Bytes32Like, amount: int, proof: List[Bytes32Like]) -> int:
        """Delta a claim would pay right now. Raises like ``claim`` but never mutates."""
        with self._lock:
            config = self._require_config()
            claimant = self._claimant_key(config, claimant)
            return evaluate_claim(config, self.claimed(claimant), claimant, amount, proof)

    def claim(self, claimant: Bytes32Like, amount: int, proof: List[Bytes32Like]) -> int:
        with self._lock:
            config = self._require_config()
            claimant = self._claimant_key(config, claimant)
            delta = evaluate_claim(config, self.claimed(claimant), claimant, amount, proof)
            self.vault.transfer(claimant, delta)
            self.records[claimant] = ClaimRecord(claimant, amount)
            return delta
