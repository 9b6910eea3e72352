"""Rentals app package.

Mietfächer (rentable shelves, cooling units, tables and shop windows),
the contracts (Verträge) that assign them to vendors, and the package
tracking for storage and shipping add-ons. Contract creation runs the
availability check and the write in one transaction with the affected
Mietfach rows locked, so a space can never be handed out twice for
overlapping periods.
"""
