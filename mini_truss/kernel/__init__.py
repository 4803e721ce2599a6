# mini_truss/kernel - Matrix and stiffness-method core
"""
KERNEL: THE NUMERICAL FOUNDATION
================================

Everything in here is independent of what a "joint" or a "member" is:

    matrix.py     DenseMatrix + multiply / transpose
    linsolve.py   solve / invert / determinant (pivoted elimination)
    dof.py        (joint index, local dof) → global DOF index
    assemble.py   scatter-add of member stiffness and joint loads
    solve.py      support partitioning, reduced solve, reactions

The truss-specific pieces (member geometry, stiffness kernel) live in v3d/.
"""

from .matrix import DenseMatrix, DimensionError, multiply, transpose
from .linsolve import PIVOT_TOL, SingularMatrixError, solve, invert, determinant
from .dof import DOFManager, DOF_3D_TRUSS
from .assemble import assemble_global_K, assemble_global_F, add_nodal_load
from .solve import solve_linear, inactive_directions, MechanismError, ConstraintError

__all__ = [
    'DenseMatrix', 'DimensionError', 'multiply', 'transpose',
    'PIVOT_TOL', 'SingularMatrixError', 'solve', 'invert', 'determinant',
    'DOFManager', 'DOF_3D_TRUSS',
    'assemble_global_K', 'assemble_global_F', 'add_nodal_load',
    'solve_linear', 'inactive_directions', 'MechanismError', 'ConstraintError',
]
