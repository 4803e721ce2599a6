# mini_truss/kernel/dof.py
"""
DOF MANAGER: Joint → Global DOF Indexing
========================================

A pin-jointed 3D truss carries 3 translational DOFs per joint (ux, uy, uz)
and no rotations. Joint ``a`` therefore owns global DOFs

    3·a + 0  (ux)
    3·a + 1  (uy)
    3·a + 2  (uz)

and a member between joints a and b scatters into

    [3a, 3a+1, 3a+2, 3b, 3b+1, 3b+2]

Joint indices here are the LOCAL indices of a substructure (0..n-1),
never the editor's joint ids.
"""

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class DOFManager:
    """
    Maps (joint index, local dof) to global DOF indices.

    Examples:
    ---------
    >>> dof = DOFManager()
    >>> dof.idx(2, 1)
    7
    >>> dof.ndof(4)
    12
    >>> dof.element_dof_map([0, 2])
    [0, 1, 2, 6, 7, 8]
    """
    dof_per_node: int = 3

    def idx(self, node_index: int, local_dof: int) -> int:
        if not 0 <= local_dof < self.dof_per_node:
            raise IndexError(f"local_dof must be in [0, {self.dof_per_node}), got {local_dof}")
        return self.dof_per_node * node_index + local_dof

    def ndof(self, n_nodes: int) -> int:
        return self.dof_per_node * n_nodes

    def node_dofs(self, node_index: int) -> List[int]:
        base = self.dof_per_node * node_index
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_indices: Iterable[int]) -> List[int]:
        """Flattened global DOFs for an element touching ``node_indices`` (in order)."""
        result = []
        for node_index in node_indices:
            result.extend(self.node_dofs(node_index))
        return result

    def owner(self, dof: int) -> int:
        """Joint index owning a global DOF."""
        return dof // self.dof_per_node


DOF_3D_TRUSS = DOFManager(dof_per_node=3)   # ux, uy, uz
