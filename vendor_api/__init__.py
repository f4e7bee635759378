"""Vendor registration API."""
