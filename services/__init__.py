# services/__init__.py
from .exceptions import (
     LeaseError,
     LeaseValidationError,
     NotFoundError,
     OccupancyConflictError,
     InvalidTransitionError,
     UnitInUseError,
)
from .lease_state import LeaseAction, TRANSITIONS, can_transition, next_status
from .invoice_service import InvoiceService
from .inventory_service import InventoryService
from .lease_service import LeaseService
from .ledger_service import (
     get_previous_balance,
     append_transaction,
     record_security_deposit,
     verify_running_balance,
)
from .occupancy_service import change_rental_mode
from .reassignment_service import update_tenant_assignment
from .tenant_cache import refresh_tenant_cache

__all__ = [
     "LeaseError",
     "LeaseValidationError",
     "NotFoundError",
     "OccupancyConflictError",
     "InvalidTransitionError",
     "UnitInUseError",
     "LeaseAction",
     "TRANSITIONS",
     "can_transition",
     "next_status",
     "InvoiceService",
     "InventoryService",
     "LeaseService",
     "get_previous_balance",
     "append_transaction",
     "record_security_deposit",
     "verify_running_balance",
     "change_rental_mode",
     "update_tenant_assignment",
     "refresh_tenant_cache",
]
