"""Apply a decoded session to the live calculation log and variable table."""

from __future__ import annotations

import enum
import logging
from typing import List

from .model import CalculationLog, Session, VariableBinding

logger = logging.getLogger(__name__)


class ReconcilePolicy(str, enum.Enum):
    MERGE = "merge"
    REPLACE = "replace"
    CANCEL = "cancel"


def _assignable(session: Session, evaluator) -> List[VariableBinding]:
    out = []
    for binding in session.variables:
        if evaluator.is_assignable(binding.name):
            out.append(binding)
        else:
            logger.warning("Ignoring session variable %r: name cannot be assigned", binding.name)
    return out


def reconcile(session: Session, policy: ReconcilePolicy, log: CalculationLog, evaluator) -> bool:
    """Install *session* into *log* and *evaluator* according to *policy*.

    ``MERGE`` appends the session's calculations after the existing ones and
    assigns its variables on top of the current ones (session values win on a
    name collision). ``REPLACE`` clears the log and every user variable first.
    ``CANCEL`` leaves everything untouched.

    Calculations are installed with their stored outcome; they are not
    re-evaluated. Variables go through ``evaluator.assign``.

    Returns True if live state was changed.
    """
    policy = ReconcilePolicy(policy)
    if policy is ReconcilePolicy.CANCEL:
        logger.info("Session load cancelled")
        return False

    bindings = _assignable(session, evaluator)

    if policy is ReconcilePolicy.REPLACE:
        log.clear()
        evaluator.clear_all_variables()

    log.extend(session.calculations)
    for binding in bindings:
        evaluator.assign(binding.name, binding.value)

    logger.info(
        "Session %s: %d calculations, %d variables",
        "replaced" if policy is ReconcilePolicy.REPLACE else "merged",
        len(session.calculations),
        len(bindings),
    )
    return True


def snapshot_session(log: CalculationLog, evaluator) -> Session:
    """Build a session from live state (reserved constants excluded)."""
    return Session(calculations=log.entries(), variables=list(evaluator.current_bindings()))


__all__ = ["ReconcilePolicy", "reconcile", "snapshot_session"]
