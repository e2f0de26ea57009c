"""
Transaction Ledger

Keeps the last deposit or withdrawal seen for every transaction id so that
later disputes, resolves and chargebacks can be checked against the original.
Records referencing an earlier transaction never become originals themselves.
"""

from typing import Dict, Iterator, Optional

from .records import TransactionRecord, TxId


class TransactionLedger:
    """
    Mapping of transaction id to the original deposit/withdrawal record
    Owned by a single engine for the duration of one run
    """
    
    def __init__(self):
        self._entries: Dict[TxId, TransactionRecord] = {}
    
    def record(self, record: TransactionRecord) -> None:
        """
        Insert or overwrite the entry for ``record.tx``
        
        Raises:
            ValueError: If the record is not a deposit or withdrawal
        """
        if not record.is_original:
            raise ValueError(
                f"Only deposits and withdrawals are kept in the ledger, got {record.type.value}"
            )
        self._entries[record.tx] = record
    
    def get(self, tx: TxId) -> Optional[TransactionRecord]:
        """Get the original record for ``tx`` regardless of client"""
        return self._entries.get(tx)
    
    def __contains__(self, tx: TxId) -> bool:
        return tx in self._entries
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self._entries.values())
