"""Pydantic schemas package.

Folder intent:
  common.py        — CamelModel / PatchModel bases, embedded *Ref models, HealthResponse
  vendor.py        — REFERENCE pattern (Create / Update / Out per entity)
  tender.py, bid.py, payment.py, notification.py, user.py, report.py
"""
