"""
Transaction Record Module

Normalizes raw input rows into immutable transaction records. A row carries
its type tag, client id, transaction id and an optional amount; dispute,
resolve and chargeback rows only reference an earlier transaction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .amount import Amount, AmountError
from .logging_config import get_logger

ClientId = int
TxId = int

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TX_ID = 2 ** 32 - 1

# Amount values meaning "no amount"
NULL_AMOUNTS = frozenset({"", "null"})

logger = get_logger("payment_engine.records")


class RecordFormatError(ValueError):
    """Row cannot be normalized into a transaction record"""


class TransactionType(Enum):
    """Types of input transactions"""
    DEPOSIT = "deposit"          # Credit to available funds
    WITHDRAWAL = "withdrawal"    # Debit from available funds
    DISPUTE = "dispute"          # Claim against an earlier transaction
    RESOLVE = "resolve"          # Dispute settled in the client's favour
    CHARGEBACK = "chargeback"    # Dispute settled by reversing the transaction
    
    @classmethod
    def parse(cls, text: str) -> 'TransactionType':
        """Case-insensitive lookup of a type tag"""
        try:
            return cls(text.strip().lower())
        except (AttributeError, ValueError):
            raise RecordFormatError(f"Unknown transaction type: {text!r}")
    
    @property
    def is_original(self) -> bool:
        """Deposits and withdrawals are the only transactions kept in the ledger"""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)
    
    @property
    def references_original(self) -> bool:
        """Check if this type points back at an earlier transaction"""
        return not self.is_original


class RowRecord(BaseModel):
    """
    One raw input row, as read from the source
    Field order is fixed: type, client, tx, amount
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)
    
    type: str
    client: str
    tx: str
    amount: Optional[str] = Field(default=None, description="Decimal text, empty or 'null' when absent")
    
    @field_validator("amount", mode="before")
    @classmethod
    def _blank_amount(cls, value):
        if value is None:
            return None
        return str(value)
    
    @field_validator("client", "tx", mode="before")
    @classmethod
    def _id_text(cls, value):
        return str(value)


def _parse_id(text: str, name: str, upper: int) -> int:
    if not text.isascii() or not text.isdigit():
        raise RecordFormatError(f"{name} must be a non-negative integer, got {text!r}")
    value = int(text)
    if value > upper:
        raise RecordFormatError(f"{name} {value} out of range (max {upper})")
    return value


def parse_optional_amount(text: Optional[str], strict: bool = False) -> Optional[Amount]:
    """
    Turn amount text into an Amount, or None when absent
    
    Sentinel values (empty, "null") are absent. Malformed text is coerced to
    absent unless ``strict`` is set, in which case the AmountError propagates.
    """
    if text is None:
        return None
    value = text.strip()
    if value.lower() in NULL_AMOUNTS:
        return None
    try:
        return Amount.parse(value)
    except AmountError as e:
        if strict:
            raise
        logger.debug(f"Treating malformed amount {text!r} as absent: {e}")
        return None


@dataclass(frozen=True)
class TransactionRecord:
    """
    Normalized, immutable representation of one input row
    """
    type: TransactionType
    client: ClientId
    tx: TxId
    amount: Optional[Amount] = None
    
    @classmethod
    def from_row(cls, row: RowRecord, strict: bool = False) -> 'TransactionRecord':
        """
        Normalize a raw row
        
        Args:
            row: Raw input row
            strict: Raise on malformed amount text instead of treating it as absent
            
        Returns:
            TransactionRecord
            
        Raises:
            RecordFormatError: If type, client or tx cannot be parsed
            AmountError: If ``strict`` and the amount text is malformed
        """
        return cls(
            type=TransactionType.parse(row.type),
            client=_parse_id(row.client, "client", MAX_CLIENT_ID),
            tx=_parse_id(row.tx, "tx", MAX_TX_ID),
            amount=parse_optional_amount(row.amount, strict=strict),
        )
    
    @property
    def is_original(self) -> bool:
        """Check if this record belongs in the ledger"""
        return self.type.is_original
    
    @property
    def has_amount(self) -> bool:
        return self.amount is not None
