"""Pricing app package.

Holds the immutable package catalog (rentable space options, provision
tiers, Zusatzleistungen) and the pure price calculation that turns a
package selection into a cost breakdown. The app has no database models.
"""
