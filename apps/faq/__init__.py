"""Frequently asked questions shown on the public FAQ page."""
