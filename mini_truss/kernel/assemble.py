# mini_truss/kernel/assemble.py
"""
ASSEMBLY: Global Stiffness Matrix and Load Vector
=================================================

Scatter-add of member contributions into the global system.

Assembly doesn't care what produced a member matrix. It only needs, per
member, the global DOF map and the member stiffness in global coordinates:

    K = zeros(ndof × ndof)
    for each member:
        for each (a, b) in ke:
            K[dof_map[a], dof_map[b]] += ke[a, b]

USAGE:
------
    dof = DOFManager()
    contributions = [
        (dof.element_dof_map([p.a, p.b]), truss3d_global_stiffness(p, E, A))
        for p in props
    ]
    K = assemble_global_K(dof.ndof(n_joints), contributions)
    F = assemble_global_F(dof.ndof(n_joints), sub.loads, dof)
"""

from typing import Iterable, List, Mapping, Sequence, Tuple

import numpy as np

from .dof import DOFManager, DOF_3D_TRUSS
from .matrix import DenseMatrix, DimensionError


def assemble_global_K(
    ndof: int,
    contributions: Iterable[Tuple[Sequence[int], DenseMatrix]],
) -> DenseMatrix:
    """
    Assemble the global stiffness matrix from member contributions.

    Parameters:
    -----------
    ndof : int
        Total number of DOFs (3 × joints for a 3D truss)
    contributions : iterable of (dof_map, ke)
        dof_map: global DOF indices of the member, e.g. [0, 1, 2, 6, 7, 8]
        ke: member stiffness in global coordinates, len(dof_map) square

    Returns:
    --------
    DenseMatrix
        ndof × ndof global stiffness. Symmetric positive semi-definite
        (it only becomes definite once supports are applied).
    """
    K = DenseMatrix(ndof, ndof)

    for dof_map, ke in contributions:
        n = len(dof_map)
        if ke.shape != (n, n):
            raise DimensionError(
                f"Element ke shape {ke.shape} doesn't match dof_map length {n}"
            )
        for a in range(n):
            ia = dof_map[a]
            for b in range(n):
                K[ia, dof_map[b]] += ke[a, b]

    return K


def assemble_global_F(
    ndof: int,
    joint_loads: Mapping[int, Sequence[float]],
    dof: DOFManager = DOF_3D_TRUSS,
) -> np.ndarray:
    """
    Build the global load vector from summed joint loads.

    Each joint index in ``joint_loads`` places its components at its own DOF
    slots; every other entry stays zero.

    Example:
    --------
    >>> F = assemble_global_F(6, {1: [0.0, -1000.0, 0.0]})
    >>> F[4]
    -1000.0
    """
    F = np.zeros(ndof, dtype=float)
    for node_index, load in joint_loads.items():
        add_nodal_load(F, node_index, load, dof)
    return F


def add_nodal_load(
    F: np.ndarray,
    node_index: int,
    load_vector: Sequence[float],
    dof: DOFManager = DOF_3D_TRUSS,
) -> None:
    """Add a point load to F in place."""
    slots: List[int] = dof.node_dofs(node_index)
    if len(load_vector) != len(slots):
        raise DimensionError(
            f"Load vector has {len(load_vector)} components, joint has {len(slots)} DOFs"
        )
    for slot, val in zip(slots, load_vector):
        F[slot] += val
