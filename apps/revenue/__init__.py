"""Revenue app package.

Monthly revenue per Mietfach from the contracts (actual months are stored,
future months are projected) and the admin dashboard overview.
"""
