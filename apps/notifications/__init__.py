"""Notifications app package.

Owns the admin-editable email templates and the services that render and
send every transactional email (registration confirmation, booking
confirmation, trial lifecycle). Sending never raises: failures are logged
and reported as ``False`` so the triggering database write stands.
"""
