# services/ledger_service.py
"""
Ledger Service - append-only financial transactions with a running balance.

Each new row stores balance = previous row's balance + amount, so the ledger
can be audited by replaying it in id order:

1. get_previous_balance() reads the latest row (locked FOR UPDATE)
2. append_transaction() writes the new row inside the caller's transaction
3. verify_running_balance() replays the chain and reports the first break

Rows are never updated or deleted by this module.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models import Lease, Transaction, TransactionType

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def get_previous_balance(db: Session) -> Decimal:
     """Balance of the most recent ledger row, or 0 for an empty ledger."""
     last = (
          db.query(Transaction)
          .order_by(desc(Transaction.id))
          .limit(1)
          .with_for_update()
          .first()
     )
     if last is None:
          return ZERO
     return Decimal(last.balance)


def append_transaction(
     db: Session,
     description: str,
     type: TransactionType,
     amount: Decimal,
     lease_id: Optional[int] = None,
     invoice_id: Optional[int] = None,
     timestamp: Optional[datetime] = None,
) -> Transaction:
     """
     Append one ledger row with its running balance.

     Without a timestamp the database stamps the row (server default).
     """
     amount = Decimal(amount)
     entry = Transaction(
          description=description,
          type=type,
          amount=amount,
          balance=get_previous_balance(db) + amount,
          status="Completed",
          lease_id=lease_id,
          invoice_id=invoice_id,
     )
     if timestamp is not None:
          entry.date = timestamp
     db.add(entry)
     db.flush()
     return entry


def record_security_deposit(db: Session, lease: Lease, amount: Decimal) -> Optional[Transaction]:
     """
     Record a received security deposit as a Liability for audit.

     Nothing is written for a zero or missing deposit, or when the lease's
     deposit is already on the ledger.
     """
     if amount is None or Decimal(amount) <= ZERO:
          return None

     booked = (
          db.query(Transaction)
          .filter(Transaction.lease_id == lease.id, Transaction.type == TransactionType.LIABILITY)
          .first()
     )
     if booked is not None:
          logger.info("Security deposit for lease %s already booked as transaction %s", lease.id, booked.id)
          return booked

     entry = append_transaction(
          db,
          description=f"Security Deposit Received - Lease {lease.id}",
          type=TransactionType.LIABILITY,
          amount=amount,
          lease_id=lease.id,
     )
     logger.info("Recorded security deposit %s for lease %s (balance %s)", amount, lease.id, entry.balance)
     return entry


def verify_running_balance(db: Session) -> Tuple[bool, str, int]:
     """
     Replay the ledger from the first row and check every running balance.

     Returns:
          (all_valid: bool, message: str, entries_checked: int)
     """
     entries = db.query(Transaction).order_by(Transaction.id).all()
     if not entries:
          return True, "Ledger is empty (no entries)", 0

     balance = ZERO
     checked = 0
     for entry in entries:
          balance += Decimal(entry.amount)
          if Decimal(entry.balance) != balance:
               return False, f"Balance mismatch at transaction id={entry.id}", checked
          checked += 1

     return True, "Running balance verified", checked
