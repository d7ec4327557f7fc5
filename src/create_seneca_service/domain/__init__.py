"""Domain layer — pure string and data rules, no I/O.

Domain modules must never import from infrastructure, services, or commands.
"""
