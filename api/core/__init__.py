"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks (DB wiring, settings, logging). Keep
record-specific SQL and business logic in the `records/` package.
"""
