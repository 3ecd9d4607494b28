"""Finances app package.

This app applies the payment gateway's verdict to bookings: it verifies
the gateway signature, records the payment once per booking, keeps an
audit trail of every confirmation attempt and hands refunds of cancelled
paid bookings back to the gateway.
"""
