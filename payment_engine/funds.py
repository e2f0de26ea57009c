"""
Client Funds Module

Per-client balances and the Valid/Disputed/Frozen state machine. Funds are
immutable: every transition returns a new Funds value and the caller writes
it back. Total is always derived from available and held, never stored.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Mapping, Optional

from .amount import Amount
from .records import TxId


class FundingState(Enum):
    """Funds lifecycle states"""
    VALID = "valid"          # Normal operation
    DISPUTED = "disputed"    # Some funds are held by an open dispute
    FROZEN = "frozen"        # Charged back; terminal, nothing changes afterwards


@dataclass(frozen=True)
class Funds:
    """
    Available and held balances for one client
    
    ``disputed`` maps each transaction id with an open dispute to the amount
    held when that dispute was opened. It is non-empty only while the state
    is DISPUTED and is never mutated in place.
    """
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    state: FundingState = FundingState.VALID
    disputed: Mapping[TxId, Amount] = field(default_factory=dict)
    
    @classmethod
    def opened_with(cls, amount: Amount) -> 'Funds':
        """Funds for a client whose first transaction is a deposit of ``amount``"""
        return cls(available=amount)
    
    @property
    def total(self) -> Amount:
        """Available plus held"""
        return self.available + self.held
    
    @property
    def is_frozen(self) -> bool:
        return self.state == FundingState.FROZEN
    
    @property
    def is_disputed(self) -> bool:
        return self.state == FundingState.DISPUTED
    
    @property
    def locked(self) -> bool:
        """Check if the account is locked (frozen by a chargeback)"""
        return self.is_frozen
    
    def has_open_dispute(self, tx: TxId) -> bool:
        """Check if ``tx`` is currently under dispute"""
        return tx in self.disputed
    
    def held_for(self, tx: TxId) -> Optional[Amount]:
        """Amount held by the open dispute on ``tx``, None if there is none"""
        return self.disputed.get(tx)
    
    def _settle(self, available: Amount, held: Amount, disputed: Dict[TxId, Amount]) -> 'Funds':
        """Recompute the state from held: DISPUTED while anything is held"""
        if held.is_zero():
            return replace(self, available=available, held=held,
                           state=FundingState.VALID, disputed={})
        return replace(self, available=available, held=held,
                       state=FundingState.DISPUTED, disputed=disputed)
    
    def _without(self, tx: TxId) -> Dict[TxId, Amount]:
        return {key: value for key, value in self.disputed.items() if key != tx}
    
    def deposit(self, amount: Amount) -> 'Funds':
        """Credit available funds"""
        if self.is_frozen:
            return self
        return replace(self, available=self.available + amount)
    
    def withdraw(self, amount: Amount) -> 'Funds':
        """Debit available funds; a withdrawal larger than available is a no-op"""
        if self.is_frozen:
            return self
        return replace(self, available=self.available - amount)
    
    def dispute(self, amount: Amount, tx: TxId) -> 'Funds':
        """Move ``amount`` from available to held under a dispute on ``tx``"""
        if self.is_frozen or self.has_open_dispute(tx):
            return self
        return self._settle(
            available=self.available - amount,
            held=self.held + amount,
            disputed={**self.disputed, tx: amount},
        )
    
    def resolve(self, tx: TxId) -> 'Funds':
        """Release the amount held for ``tx`` back to available, closing its dispute"""
        amount = self.held_for(tx)
        if not self.is_disputed or amount is None:
            return self
        return self._settle(
            available=self.available + amount,
            held=self.held - amount,
            disputed=self._without(tx),
        )
    
    def chargeback(self, tx: TxId) -> 'Funds':
        """Remove the amount held for ``tx`` and freeze the account, whatever remains held"""
        amount = self.held_for(tx)
        if not self.is_disputed or amount is None:
            return self
        return replace(
            self,
            held=self.held - amount,
            state=FundingState.FROZEN,
            disputed=self._without(tx),
        )
