"""Routers package — HTTP endpoint definitions.

Files:
  v1/   — API routes, mounted under /api
"""
