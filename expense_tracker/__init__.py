"""Expense tracking REST backend: auth, categories, expenses and summaries."""

__all__ = [
    "client",
    "config",
    "crud",
    "database",
    "deps",
    "errors",
    "log",
    "models",
    "routers",
    "schemas",
    "security",
    "server",
    "summaries",
    "validation",
]
