# mini_truss/kernel/solve.py
"""Partitioned linear solve with support boundary conditions and mechanism detection."""

from typing import Iterable, List, Tuple

import numpy as np

from .linsolve import PIVOT_TOL, SingularMatrixError, solve
from .matrix import DenseMatrix, DimensionError, multiply


class MechanismError(RuntimeError):
    """Raised when the reduced stiffness matrix is singular (structure is unstable)."""
    pass


class ConstraintError(RuntimeError):
    """Raised when supports leave no free DOF to solve for."""
    pass


def partition_dofs(ndof: int, fixed_dofs: Iterable[int]) -> Tuple[List[int], List[int]]:
    """Split 0..ndof-1 into (free, fixed), both ascending."""
    fixed = sorted(set(fixed_dofs))
    fixed_set = set(fixed)
    free = [i for i in range(ndof) if i not in fixed_set]
    return free, fixed


def inactive_directions(
    K: DenseMatrix,
    F: np.ndarray,
    free: Iterable[int],
    tol: float = PIVOT_TOL,
    dof_per_node: int = 3,
) -> Tuple[np.ndarray, List[int]]:
    """
    Rotate each joint's free DOFs onto its own stiffness axes, and find the
    rotated DOFs that carry no stiffness and no load.

    For every joint, the free part of its diagonal block of K is
    eigendecomposed. An eigen-direction with a (relatively) zero eigenvalue
    is not stiffened by any member, e.g. the normal of a planar truss or the
    transverse plane of a lone bar, whatever their orientation. K is positive
    semi-definite, so such a direction also has a zero row and column in the
    rotated system. If it carries no load its displacement is arbitrary and
    is taken as zero.

    Returns:
        T: Orthogonal block-diagonal rotation (ndof x ndof), d = T · d_rot
        held: Rotated DOF indices to hold at zero
    """
    ndof = K.rows
    free_set = set(free)
    T = np.eye(ndof)
    held = []

    k_threshold = tol * K.abs_max()
    f_threshold = tol * max(1.0, float(np.max(np.abs(F))) if ndof else 0.0)

    for start in range(0, ndof, dof_per_node):
        dofs = [i for i in range(start, min(start + dof_per_node, ndof)) if i in free_set]
        if not dofs:
            continue
        w, V = np.linalg.eigh(K.data[np.ix_(dofs, dofs)])
        null = w <= k_threshold
        if null.any():
            # line the null space up with the joint load: at most one
            # null direction is then loaded
            N = V[:, null]
            p = N.T @ F[dofs]
            if np.linalg.norm(p) > f_threshold:
                Q, _ = np.linalg.qr(np.column_stack([p, np.eye(len(p))]))
                V[:, null] = N @ Q
        T[np.ix_(dofs, dofs)] = V
        load = V.T @ F[dofs]
        for k, i in enumerate(dofs):
            if null[k] and abs(load[k]) <= f_threshold:
                held.append(i)
    return T, held


def solve_linear(
    K: DenseMatrix,
    F: np.ndarray,
    fixed_dofs: Iterable[int],
    tol: float = PIVOT_TOL,
    drop_inactive: bool = True,
    scale: bool = True,
    dof_per_node: int = 3,
) -> Tuple[np.ndarray, np.ndarray, List[int]]:
    """
    Solve K·d = F with the given DOFs held at zero, by partitioning.

    Args:
        K: Global stiffness matrix (ndof x ndof)
        F: Global load vector (ndof,)
        fixed_dofs: Constrained DOF indices (displacement = 0)
        tol: Pivot tolerance handed to the elimination
        drop_inactive: Hold unloaded zero-stiffness directions of each joint
            at zero (see ``inactive_directions``)
        scale: Divide K_ff and F_f by K_ff.abs_max() before eliminating, so the
            absolute pivot tolerance is relative to member stiffness
        dof_per_node: Block size used to group DOFs by joint

    Returns:
        d: Displacement vector (ndof,), global axes
        R: Residual K·d - F (ndof,); at supports this is the reaction
        free: DOF indices that entered the reduced system. With
            ``drop_inactive`` these index each joint's rotated basis.

    Raises:
        ConstraintError: If every DOF is fixed
        MechanismError: If the reduced system is singular

    Once the supports leave at least one free DOF, holding inactive
    directions never raises: if all of them are held, d is zero and only
    the reactions to loads applied at supports remain.
    """
    ndof = K.rows
    F = np.asarray(F, dtype=float)
    if not K.is_square() or F.shape != (ndof,):
        raise DimensionError(f"K is {K.rows}x{K.cols} but F has shape {F.shape}")

    free, _ = partition_dofs(ndof, fixed_dofs)
    if not free:
        raise ConstraintError("All DOFs are constrained!")

    if drop_inactive:
        T, held = inactive_directions(K, F, free, tol, dof_per_node)
        held = set(held)
        free = [i for i in free if i not in held]
        K_sys = T.T @ K.data @ T
        F_sys = T.T @ F
    else:
        T = None
        K_sys, F_sys = K.data, F

    d_sys = np.zeros(ndof, dtype=float)

    if free:
        Kff = DenseMatrix.from_array(K_sys[np.ix_(free, free)])
        Ff = F_sys[free]

        if scale:
            s = Kff.abs_max()
            if s > 0.0:
                Kff = multiply(Kff, 1.0 / s)
                Ff = Ff / s

        try:
            df = solve(Kff, Ff, tol)
        except SingularMatrixError as e:
            raise MechanismError(
                f"Singular stiffness at free DOF {free[e.column]}. Check supports/bracing."
            ) from e

        d_sys[free] = df

    d = d_sys if T is None else T @ d_sys
    R = multiply(K, d) - F
    return d, R, free
