# services/exceptions.py
"""
Errors raised by the leasing services.

All of them derive from ValueError, so callers that only care about "the
operation was rejected" can keep catching ValueError. Routers map them onto
HTTP status codes.
"""
from typing import Optional


class LeaseError(ValueError):
     """Base class for rejected lease/occupancy operations."""


class LeaseValidationError(LeaseError):
     """Missing or malformed input; raised before anything is written."""


class NotFoundError(LeaseError):
     """A lease, unit, bedroom, tenant or property id did not resolve."""

     def __init__(self, entity: str, entity_id):
          self.entity = entity
          self.entity_id = entity_id
          super().__init__(f"{entity} with ID {entity_id} not found")


class OccupancyConflictError(LeaseError):
     """
     The unit or bedroom cannot take the requested lease.

     ``scope`` is "unit" for full-unit conflicts and "bedroom" for
     bedroom-level ones; the message always says what is in the way.
     """

     def __init__(self, message: str, scope: str = "unit", conflicting_lease_id: Optional[int] = None):
          self.scope = scope
          self.conflicting_lease_id = conflicting_lease_id
          super().__init__(message)


class InvalidTransitionError(LeaseError):
     """The lease state machine does not allow this action from the current status."""

     def __init__(self, lease_id, status, action):
          self.lease_id = lease_id
          self.status = status
          self.action = action
          super().__init__(
               f"Lease {lease_id} cannot {action.value.lower()} from status {status.value}"
          )


class UnitInUseError(LeaseError):
     """An inventory change is blocked by an Active lease."""
