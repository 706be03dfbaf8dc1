# services/lease_state.py
"""
Lease state machine.

The whole lifecycle lives in one transition table: (current status, action)
maps to the next status, or to None when the action removes the row. Any
pair that is not in the table is an illegal transition.

     create   ->  DRAFT (reservation) or Active (dates and rent supplied)
     DRAFT    --activate-->  Active
     DRAFT    --relocate-->  DRAFT  (updated in place)
     Active   --relocate-->  MOVED  (a fresh Active lease is opened elsewhere)
     Active   --update_rent-->  Active
     DRAFT    --update_rent-->  DRAFT
     DRAFT | Active | MOVED  --delete-->  (row removed)
"""
import enum
from typing import Optional

from models.enums import LeaseStatus
from .exceptions import InvalidTransitionError


class LeaseAction(str, enum.Enum):
     ACTIVATE = "ACTIVATE"
     UPDATE_RENT = "UPDATE_RENT"
     RELOCATE = "RELOCATE"
     DELETE = "DELETE"


TRANSITIONS = {
     (LeaseStatus.DRAFT, LeaseAction.ACTIVATE): LeaseStatus.ACTIVE,
     (LeaseStatus.DRAFT, LeaseAction.UPDATE_RENT): LeaseStatus.DRAFT,
     (LeaseStatus.DRAFT, LeaseAction.RELOCATE): LeaseStatus.DRAFT,
     (LeaseStatus.DRAFT, LeaseAction.DELETE): None,
     (LeaseStatus.ACTIVE, LeaseAction.UPDATE_RENT): LeaseStatus.ACTIVE,
     (LeaseStatus.ACTIVE, LeaseAction.RELOCATE): LeaseStatus.MOVED,
     (LeaseStatus.ACTIVE, LeaseAction.DELETE): None,
     (LeaseStatus.MOVED, LeaseAction.DELETE): None,
}

# Statuses that hold or reserve a unit/bedroom
CURRENT_STATUSES = (LeaseStatus.ACTIVE, LeaseStatus.DRAFT)


def can_transition(status: LeaseStatus, action: LeaseAction) -> bool:
     return (status, action) in TRANSITIONS


def next_status(lease_id, status: LeaseStatus, action: LeaseAction) -> Optional[LeaseStatus]:
     """
     Return the status a lease moves to, or None if the action deletes it.

     Raises:
          InvalidTransitionError: if the action is not allowed from ``status``.
     """
     if not can_transition(status, action):
          raise InvalidTransitionError(lease_id, status, action)
     return TRANSITIONS[(status, action)]
