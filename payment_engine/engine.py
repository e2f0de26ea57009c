"""
Transaction Processing Engine

Folds an ordered stream of rows into per-client funds. Each row is
normalized, checked against the client's funds and the transaction ledger,
and then either applied or dropped. A bad row never aborts the run unless
strict mode is requested; processing is a strict left-to-right fold with no
rollback and no reordering.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from .amount import Amount, AmountError
from .funds import Funds
from .ledger import TransactionLedger
from .records import (
    ClientId, RecordFormatError, RowRecord, TransactionRecord, TransactionType
)
from .validation import RejectionReason, validate
from .logging_config import get_logger, log_action


class Outcome(Enum):
    """What happened to a single row"""
    APPLIED = "applied"        # Validated and applied (may still be a balance no-op)
    REJECTED = "rejected"      # Failed cross-reference validation, dropped
    MALFORMED = "malformed"    # Could not be normalized, dropped


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of processing one row"""
    outcome: Outcome
    record: Optional[TransactionRecord] = None
    reason: Optional[RejectionReason] = None
    error: Optional[str] = None
    
    @property
    def applied(self) -> bool:
        return self.outcome == Outcome.APPLIED


@dataclass
class ProcessingStats:
    """Counters for one engine run"""
    processed: int = 0
    applied: int = 0
    rejected: int = 0
    malformed: int = 0
    rejections: Dict[RejectionReason, int] = field(default_factory=dict)
    
    def record(self, result: ProcessingResult) -> None:
        self.processed += 1
        if result.outcome == Outcome.APPLIED:
            self.applied += 1
        elif result.outcome == Outcome.REJECTED:
            self.rejected += 1
            self.rejections[result.reason] = self.rejections.get(result.reason, 0) + 1
        else:
            self.malformed += 1
    
    def to_dict(self) -> Dict[str, object]:
        return {
            "processed": self.processed,
            "applied": self.applied,
            "rejected": self.rejected,
            "malformed": self.malformed,
            "rejections": {reason.value: count for reason, count in self.rejections.items()},
        }


@dataclass(frozen=True)
class ClientSnapshot:
    """
    Final balances for one client
    Total is derived from available and held
    """
    client: ClientId
    available: Amount
    held: Amount
    locked: bool
    
    @property
    def total(self) -> Amount:
        return self.available + self.held
    
    @classmethod
    def from_funds(cls, client: ClientId, funds: Funds) -> 'ClientSnapshot':
        return cls(
            client=client,
            available=funds.available,
            held=funds.held,
            locked=funds.locked,
        )
    
    def to_dict(self) -> Dict[str, str]:
        """Output record with four-digit amounts and a lowercase boolean"""
        return {
            "client": str(self.client),
            "available": self.available.to_string(),
            "held": self.held.to_string(),
            "total": self.total.to_string(),
            "locked": "true" if self.locked else "false",
        }


class PaymentEngine:
    """
    Replays transaction rows against per-client funds
    
    The funds table and the ledger are owned by the engine instance; one
    instance corresponds to one run.
    """
    
    def __init__(self, strict: bool = False):
        self.strict = strict
        self.funds: Dict[ClientId, Funds] = {}
        self.ledger = TransactionLedger()
        self.stats = ProcessingStats()
        self.logger = get_logger("payment_engine.engine")
    
    def funds_for(self, client: ClientId) -> Optional[Funds]:
        """Get current funds for a client, None if the client has none"""
        return self.funds.get(client)
    
    def _transition(self, record: TransactionRecord, funds: Optional[Funds],
                    original: Optional[TransactionRecord]) -> Funds:
        """Apply the state machine transition for an already validated record"""
        kind = record.type
        if kind == TransactionType.DEPOSIT:
            if funds is None:
                return Funds.opened_with(record.amount)
            return funds.deposit(record.amount)
        if kind == TransactionType.WITHDRAWAL:
            return funds.withdraw(record.amount)
        # A dispute holds the original's amount, never a value on the referencing row;
        # resolve and chargeback release exactly what that dispute held
        if kind == TransactionType.DISPUTE:
            return funds.dispute(original.amount, record.tx)
        if kind == TransactionType.RESOLVE:
            return funds.resolve(record.tx)
        return funds.chargeback(record.tx)
    
    def apply(self, record: TransactionRecord) -> ProcessingResult:
        """
        Validate and apply one normalized record
        
        Args:
            record: Normalized transaction record
            
        Returns:
            ProcessingResult with outcome APPLIED or REJECTED
        """
        funds = self.funds.get(record.client)
        original = None
        if record.type.references_original:
            original = self.ledger.get(record.tx)
        
        reason = validate(record, funds, original)
        if reason is not None:
            log_action(
                self.logger, "debug", f"Dropped {record.type.value}: {reason.value}",
                client_id=record.client, tx_id=record.tx,
                action=record.type.value, outcome=Outcome.REJECTED.value
            )
            result = ProcessingResult(Outcome.REJECTED, record=record, reason=reason)
            self.stats.record(result)
            return result
        
        updated = self._transition(record, funds, original)
        self.funds[record.client] = updated
        if record.is_original:
            self.ledger.record(record)
        
        if updated.is_frozen and (funds is None or not funds.is_frozen):
            log_action(
                self.logger, "info", f"Client {record.client} frozen by chargeback",
                client_id=record.client, tx_id=record.tx,
                action=record.type.value, outcome=Outcome.APPLIED.value
            )
        
        result = ProcessingResult(Outcome.APPLIED, record=record)
        self.stats.record(result)
        return result
    
    def process_row(self, row: RowRecord) -> ProcessingResult:
        """
        Normalize and apply one raw row
        
        Raises:
            RecordFormatError, AmountError: Only in strict mode, for malformed rows
        """
        try:
            record = TransactionRecord.from_row(row, strict=self.strict)
        except (RecordFormatError, AmountError) as e:
            if self.strict:
                raise
            log_action(
                self.logger, "debug", f"Dropped malformed row: {e}",
                outcome=Outcome.MALFORMED.value, extra=row.model_dump()
            )
            result = ProcessingResult(Outcome.MALFORMED, error=str(e))
            self.stats.record(result)
            return result
        return self.apply(record)
    
    def process(self, rows: Iterable[Union[RowRecord, TransactionRecord]]) -> Dict[ClientId, ClientSnapshot]:
        """
        Fold the whole input in arrival order and return final snapshots
        
        Args:
            rows: Raw rows or already normalized records, consumed once
            
        Returns:
            Mapping of client id to ClientSnapshot for every client with funds
        """
        for row in rows:
            if isinstance(row, TransactionRecord):
                self.apply(row)
            else:
                self.process_row(row)
        
        log_action(
            self.logger, "info", "Run complete",
            extra={**self.stats.to_dict(), "clients": len(self.funds)}
        )
        return self.snapshots()
    
    def snapshots(self, sort: bool = True) -> Dict[ClientId, ClientSnapshot]:
        """Current snapshots for every client with funds"""
        clients = sorted(self.funds) if sort else list(self.funds)
        return {
            client: ClientSnapshot.from_funds(client, self.funds[client])
            for client in clients
        }
    
    def results(self, rows: Iterable[RowRecord]) -> List[ProcessingResult]:
        """Process rows and return the per-row results, in order"""
        return [self.process_row(row) for row in rows]


def process(rows: Iterable[Union[RowRecord, TransactionRecord]],
            strict: bool = False) -> Dict[ClientId, ClientSnapshot]:
    """Run a fresh engine over ``rows`` and return the final snapshots"""
    return PaymentEngine(strict=strict).process(rows)
