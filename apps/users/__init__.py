"""Users app package.

Vendor (Direktvermarkter) and administrator accounts, their addresses and
public vendor profiles, and the package bookings waiting for an admin to
assign Mietfächer. Registration, e-mail confirmation and login live here
too. Use ``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project.
"""
