"""API router package — every /api/* endpoint lives here.

Files:
  vendors.py        — REFERENCE router pattern
  tenders.py, bids.py, payments.py (+ invoices, payment schedules),
  notifications.py, users.py, reports.py

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to procurement/services/.
"""

from procurement.routers.v1.bids import router as bids_router
from procurement.routers.v1.notifications import router as notifications_router
from procurement.routers.v1.payments import invoices_router, schedules_router
from procurement.routers.v1.payments import router as payments_router
from procurement.routers.v1.reports import router as reports_router
from procurement.routers.v1.tenders import router as tenders_router
from procurement.routers.v1.users import router as users_router
from procurement.routers.v1.vendors import router as vendors_router

api_routers = [
    users_router,
    vendors_router,
    tenders_router,
    bids_router,
    payments_router,
    invoices_router,
    schedules_router,
    notifications_router,
    reports_router,
]
