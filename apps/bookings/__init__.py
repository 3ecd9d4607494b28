"""Bookings app package.

This app encapsulates the booking engine: the slot calculator, the
reservation store with its per-unit occupancy constraint, the command
handlers that create and cancel bookings, hold expiration and the read
projections used by customers and operators.
"""
