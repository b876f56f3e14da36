"""
App lock behind a four-digit PIN.
"""

from .pin_gate import GateState, SecurityGate

__all__ = ["GateState", "SecurityGate"]
