from ticketdesk.inventory.booking import BookingEngine
from ticketdesk.inventory.catalog import EventListing, InventoryCatalog
from ticketdesk.inventory.payment import AlwaysApprovePayments, PaymentGateway

__all__ = [
    "InventoryCatalog",
    "EventListing",
    "BookingEngine",
    "PaymentGateway",
    "AlwaysApprovePayments",
]
