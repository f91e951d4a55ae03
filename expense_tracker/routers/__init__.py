"""HTTP routers, one per resource, mounted under ``/api``."""

from . import auth, categories, expenses, summaries, users

__all__ = ["auth", "categories", "expenses", "summaries", "users"]
