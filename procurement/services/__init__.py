"""Services package — all business logic lives here, never in routers.

Files:
  vendor.py        — REFERENCE service pattern (session + Actor in the constructor)
  tender.py        — tenders, cascading soft delete of bids
  bid.py           — bid submission and evaluation, per-vendor ownership
  payment.py       — payments, invoices, payment schedules
  notification.py  — viewer-scoped notification feed
  user.py          — registration, login, role changes
  report.py        — procurement, vendor and payment reports, dashboard metrics
  idempotency.py   — replay protection for create operations

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
