# mini_truss/v3d/elements.py
"""
3D TRUSS ELEMENT: Stiffness Matrix from Direction Cosines
=========================================================

ENGINEERING DERIVATION:
-----------------------
A pin-jointed bar only resists stretching along its own axis. Along that
axis (local x') the stiffness is

    k_local = (EA/L) × [ 1  -1 ]
                       [-1   1 ]

With direction cosines

    cx = (xB - xA) / L
    cy = (yB - yA) / L
    cz = (zB - zA) / L

the 6×6 stiffness over [uxA, uyA, uzA, uxB, uyB, uzB] becomes

    ke = (EA/L) × [  B  -B ]        B = c cᵀ = [ cx²   cxcy  cxcz ]
                  [ -B   B ]                   [ cxcy  cy²   cycz ]
                                               [ cxcz  cycz  cz²  ]

ke has rank 1: the only deformation it resists is a change of length.
Motion perpendicular to the member costs nothing.

AXIAL FORCE:
------------
    N = (EA/L) × c · (uB - uA)

Positive N = tension (member lengthens), negative N = compression.
"""

import warnings
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..kernel.dof import DOFManager, DOF_3D_TRUSS
from ..kernel.matrix import DenseMatrix

MIN_LENGTH = 1e-6


class DegenerateMemberWarning(UserWarning):
    """A member shorter than the minimum length was clamped."""
    pass


@dataclass(frozen=True)
class MemberProperty:
    """
    Derived geometry of one member, recomputed every analysis run.

    a, b : int
        Local joint indices of the endpoints (within the substructure)
    length : float
        Member length (m), never below the clamping minimum
    cx, cy, cz : float
        Direction cosines from a to b
    """
    a: int
    b: int
    length: float
    cx: float
    cy: float
    cz: float

    @property
    def cosines(self) -> np.ndarray:
        return np.array([self.cx, self.cy, self.cz], dtype=float)

    def axial_stiffness(self, E: float, A: float) -> float:
        return E * A / self.length


def member_property(
    pos_a: Sequence[float],
    pos_b: Sequence[float],
    a: int,
    b: int,
    member_id: Optional[int] = None,
    min_length: float = MIN_LENGTH,
) -> MemberProperty:
    """
    Compute length and direction cosines for the member from a to b.

    A member shorter than ``min_length`` (typically two joints dropped on top
    of each other) is clamped to ``min_length`` and reported with a
    DegenerateMemberWarning; the analysis carries on.

    Example:
    --------
    >>> p = member_property((0, 0, 0), (3, 4, 0), 0, 1)
    >>> p.length, p.cx, p.cy
    (5.0, 0.6, 0.8)
    """
    delta = np.asarray(pos_b, dtype=float) - np.asarray(pos_a, dtype=float)
    length = float(np.sqrt(np.dot(delta, delta)))

    if length < min_length:
        label = f"Member {member_id}" if member_id is not None else "Member"
        warnings.warn(
            f"{label} between joints {a} and {b} has zero length "
            f"({length:.3g} m); clamped to {min_length:g} m",
            DegenerateMemberWarning,
            stacklevel=2,
        )
        length = min_length

    cx, cy, cz = (delta / length).tolist()
    return MemberProperty(a=a, b=b, length=length, cx=cx, cy=cy, cz=cz)


def truss3d_global_stiffness(prop: MemberProperty, E: float, A: float) -> DenseMatrix:
    """
    6×6 global stiffness of one member.

    DOF order: [uxA, uyA, uzA, uxB, uyB, uzB]
    """
    k = prop.axial_stiffness(E, A)
    c = prop.cosines
    B = k * np.outer(c, c)

    ke = DenseMatrix(6, 6)
    ke[0:3, 0:3] = B
    ke[0:3, 3:6] = -B
    ke[3:6, 0:3] = -B
    ke[3:6, 3:6] = B
    return ke


def truss3d_axial_force(
    prop: MemberProperty,
    d_global: np.ndarray,
    E: float,
    A: float,
    dof: DOFManager = DOF_3D_TRUSS,
) -> float:
    """
    Axial force from the global displacement vector.

    Returns:
    --------
    float
        Positive = tension, negative = compression (N)
    """
    u_a = d_global[dof.node_dofs(prop.a)]
    u_b = d_global[dof.node_dofs(prop.b)]
    elongation = float(np.dot(prop.cosines, u_b - u_a))
    return prop.axial_stiffness(E, A) * elongation
