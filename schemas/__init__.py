# schemas/__init__.py
from .invoice import (
     InvoiceResponse,
     MonthlyInvoiceRunRequest,
     MonthlyInvoiceRunResponse,
)
from .lease import (
     LeaseCreate,
     LeaseRentUpdate,
     LeaseResponse,
     LeaseDetailResponse,
     LeaseDeleteResponse,
     LeaseHistoryItem,
     CurrentLeaseResponse,
     UnitWithTenant,
)
from .tenant import TenantAssignmentUpdate
from .unit import (
     BedroomResponse,
     UnitDetailResponse,
     VacantBedroomResponse,
     RentalModeUpdate,
     UnitRentalModeResponse,
     InventoryDeleteResponse,
)

__all__ = [
     "InvoiceResponse",
     "MonthlyInvoiceRunRequest",
     "MonthlyInvoiceRunResponse",
     "LeaseCreate",
     "LeaseRentUpdate",
     "LeaseResponse",
     "LeaseDetailResponse",
     "LeaseDeleteResponse",
     "LeaseHistoryItem",
     "CurrentLeaseResponse",
     "UnitWithTenant",
     "TenantAssignmentUpdate",
     "BedroomResponse",
     "UnitDetailResponse",
     "VacantBedroomResponse",
     "RentalModeUpdate",
     "UnitRentalModeResponse",
     "InventoryDeleteResponse",
]
