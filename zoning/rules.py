"""
zoning/rules.py

Fixed structural rules for per-fabric path counts.

Accepted shapes per fabric
--------------------------
2 logged in + 2 not logged in   four-path hosts (AIX, NPIV standby pairs)
1 logged in + 0 not logged in   single-path hosts (ESXi / RHEL)

Every other combination is an error, including a fabric with no paths.
"""

from __future__ import annotations

from typing import Final

from zoning.models import FinalValidation, Verdict

VALID_PATH_SHAPES: Final[frozenset[tuple[int, int]]] = frozenset({(2, 2), (1, 0)})

_FINAL_BY_VERDICTS: Final[dict[tuple[Verdict, Verdict], FinalValidation]] = {
    (Verdict.OK, Verdict.OK): FinalValidation.GOOD,
    (Verdict.ERROR, Verdict.OK): FinalValidation.FAB_A_BAD,
    (Verdict.OK, Verdict.ERROR): FinalValidation.FAB_B_BAD,
    (Verdict.ERROR, Verdict.ERROR): FinalValidation.BOTH_BAD,
}


def check_fabric(logged_in: int, not_logged_in: int) -> Verdict:
    if (logged_in, not_logged_in) in VALID_PATH_SHAPES:
        return Verdict.OK
    return Verdict.ERROR


def combine_verdicts(validation_a: Verdict, validation_b: Verdict) -> FinalValidation:
    """
    Collapse the two fabric verdicts into the host's final status.
    """

    return _FINAL_BY_VERDICTS[(Verdict(validation_a), Verdict(validation_b))]
