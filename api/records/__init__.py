"""
Person records: one table, five endpoints.
"""
