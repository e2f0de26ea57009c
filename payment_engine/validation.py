"""
Cross-Reference Validation

Decides whether a record may be applied, given the client's current funds
and the ledger entry it references. Nothing here mutates state; a failed
check is reported as a RejectionReason, never raised.
"""

from enum import Enum
from typing import Optional

from .funds import Funds
from .records import TransactionRecord, TransactionType


class RejectionReason(Enum):
    """Why a record was dropped"""
    MISSING_AMOUNT = "missing_amount"              # Deposit/withdrawal without a usable amount
    NO_ACCOUNT = "no_account"                      # Client has no funds yet
    ACCOUNT_FROZEN = "account_frozen"              # Client was charged back
    UNKNOWN_TRANSACTION = "unknown_transaction"    # Referenced tx not in the ledger
    CLIENT_MISMATCH = "client_mismatch"            # Referenced tx belongs to another client
    ALREADY_DISPUTED = "already_disputed"          # Referenced tx is already under dispute
    NOT_DISPUTED = "not_disputed"                  # Client has no open dispute
    NOT_UNDER_DISPUTE = "not_under_dispute"        # Referenced tx is not among the open disputes


def _check_reference(
    record: TransactionRecord,
    original: Optional[TransactionRecord],
) -> Optional[RejectionReason]:
    if original is None:
        return RejectionReason.UNKNOWN_TRANSACTION
    if original.client != record.client:
        return RejectionReason.CLIENT_MISMATCH
    return None


def validate(
    record: TransactionRecord,
    funds: Optional[Funds],
    original: Optional[TransactionRecord] = None,
) -> Optional[RejectionReason]:
    """
    Check a record against the client's funds and the referenced original
    
    Args:
        record: Normalized record to check
        funds: Current funds for ``record.client``, None if the client has none
        original: Ledger entry for ``record.tx`` (dispute/resolve/chargeback only)
        
    Returns:
        None if the record may be applied, otherwise the reason it is dropped
    """
    kind = record.type
    
    if kind == TransactionType.DEPOSIT:
        if not record.has_amount:
            return RejectionReason.MISSING_AMOUNT
        if funds is not None and funds.is_frozen:
            return RejectionReason.ACCOUNT_FROZEN
        return None
    
    if kind == TransactionType.WITHDRAWAL:
        if not record.has_amount:
            return RejectionReason.MISSING_AMOUNT
        if funds is None:
            return RejectionReason.NO_ACCOUNT
        if funds.is_frozen:
            return RejectionReason.ACCOUNT_FROZEN
        return None
    
    # Dispute, resolve and chargeback all need an account and a matching original
    if funds is None:
        return RejectionReason.NO_ACCOUNT
    if funds.is_frozen:
        return RejectionReason.ACCOUNT_FROZEN
    
    reference_error = _check_reference(record, original)
    if reference_error is not None:
        return reference_error
    
    if kind == TransactionType.DISPUTE:
        if funds.has_open_dispute(record.tx):
            return RejectionReason.ALREADY_DISPUTED
        return None
    
    # Resolve and chargeback
    if not funds.is_disputed:
        return RejectionReason.NOT_DISPUTED
    if not funds.has_open_dispute(record.tx):
        return RejectionReason.NOT_UNDER_DISPUTE
    return None

