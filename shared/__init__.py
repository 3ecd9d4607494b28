"""
Shared Kernel

Base classes and utilities shared by every bounded context of the booking
engine: domain building blocks, the error taxonomy, the unit of work and the
in-process message bus.
"""
