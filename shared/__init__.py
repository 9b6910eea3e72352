"""
Shared Kernel

Value objects, date helpers and API infrastructure shared across all apps.
"""
