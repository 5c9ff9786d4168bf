"""
State machine enums for escrow models.

This module defines the state enums used by escrow models with django-fsm.
"""

from payments.state_machines.states import EscrowState

__all__ = [
    "EscrowState",
]
