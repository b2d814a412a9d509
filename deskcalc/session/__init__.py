"""Session files and their reconciliation with live state.

A session is a snapshot of the calculation log and the user variables that
can be saved to a ``.sch`` file and loaded back, merging with or replacing
whatever the calculator currently holds.
"""

from .codec import (
    FILE_SUFFIX,
    FORMAT_VERSION,
    FormatError,
    SessionError,
    SessionIOError,
    decode_session,
    encode_session,
    encode_session_text,
    load_session_file,
    save_session_file,
)
from .model import RESERVED_NAMES, Calculation, CalculationLog, Session, VariableBinding
from .reconcile import ReconcilePolicy, reconcile, snapshot_session

__all__ = [
    "FILE_SUFFIX",
    "FORMAT_VERSION",
    "RESERVED_NAMES",
    "Calculation",
    "CalculationLog",
    "FormatError",
    "ReconcilePolicy",
    "Session",
    "SessionError",
    "SessionIOError",
    "VariableBinding",
    "decode_session",
    "encode_session",
    "encode_session_text",
    "load_session_file",
    "reconcile",
    "save_session_file",
    "snapshot_session",
]
