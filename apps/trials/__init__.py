"""Trials app package.

Store opening settings and the 30-day trial (Probemonat) lifecycle:
pre-registered vendors are activated when the store opens, trials are
warned about and expired by a daily job, and trial bookings can be
cancelled free of charge while the trial month runs.
"""
