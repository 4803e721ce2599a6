# mini_truss/analysis.py
"""
ANALYSIS: Direct Stiffness Method, One Substructure at a Time
=============================================================

PURPOSE:
--------
Turn a truss graph snapshot into member forces and support reactions.

PIPELINE (per substructure):
----------------------------
    Validate   → at least one support joint
    Assemble   → member geometry, 6×6 member stiffness, global K and F
    Partition  → support DOFs fixed, remaining DOFs free
    Solve      → K_ff · u_f = F_f  (pivoted Gaussian elimination)
    Recover    → member axial forces, reactions R = K·u − F at supports

Any failing step ends that substructure with an error result. The other
substructures are unaffected, and no exception from the numerical kernel
crosses ``analyze_substructure``.

USAGE:
------
    from mini_truss import analyze_truss

    for item in analyze_truss(graph, E=200e9, A=0.01):
        if item.result.ok:
            print(item.result.member_forces)
        else:
            print(item.result.error)
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np
from tqdm import tqdm

from .config import CONFIG, AnalysisConfig
from .kernel.assemble import assemble_global_F, assemble_global_K
from .kernel.dof import DOF_3D_TRUSS
from .kernel.solve import ConstraintError, MechanismError, solve_linear
from .substructure import Substructure, find_substructures
from .v3d.elements import (
    MemberProperty,
    member_property,
    truss3d_axial_force,
    truss3d_global_stiffness,
)
from .v3d.model import TrussGraph

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Why a substructure could not be analysed."""
    UNSUPPORTED = "unsupported"             # no support joints
    OVER_CONSTRAINED = "over_constrained"   # no free DOF left
    SINGULAR = "singular"                   # reduced stiffness is singular


class AnalysisCancelled(RuntimeError):
    """Raised when the cancel event is set between substructure analyses."""
    pass


MESSAGES = {
    FailureKind.UNSUPPORTED: "No support joints! Structure is unstable.",
    FailureKind.OVER_CONSTRAINED: "All DOFs are constrained!",
    FailureKind.SINGULAR: "Failed to solve system. Structure may be singular/unstable.",
}


@dataclass
class TrussAnalysisResult:
    """
    Outcome for one substructure: either results or an error, never both.

    member_forces : np.ndarray
        Axial force per member, aligned with ``Substructure.members``.
        Positive = tension, negative = compression (N)
    reactions : Dict[int, np.ndarray]
        Support local index → reaction force vector (N)
    displacements : np.ndarray
        Full displacement vector, 3 entries per joint (m)
    members : List[MemberProperty]
        Member geometry used for this run
    error : str
        Failure message (None on success)
    kind : FailureKind
        Failure category (None on success)
    """
    member_forces: Optional[np.ndarray] = None
    reactions: Optional[Dict[int, np.ndarray]] = None
    displacements: Optional[np.ndarray] = None
    members: List[MemberProperty] = field(default_factory=list)
    error: Optional[str] = None
    kind: Optional[FailureKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, kind: FailureKind, detail: str = None) -> "TrussAnalysisResult":
        message = MESSAGES[kind]
        if detail:
            message = f"{message} ({detail})"
        return cls(error=message, kind=kind)

    def joint_displacement(self, local_index: int) -> np.ndarray:
        return self.displacements[DOF_3D_TRUSS.node_dofs(local_index)]


@dataclass
class SubstructureResult:
    """A substructure paired with its analysis outcome."""
    index: int
    substructure: Substructure
    result: TrussAnalysisResult


def compute_member_properties(
    sub: Substructure,
    config: AnalysisConfig = CONFIG,
) -> List[MemberProperty]:
    props = []
    for member in sub.members:
        a, b = sub.member_indices(member)
        props.append(member_property(
            sub.position(a), sub.position(b), a, b,
            member_id=member.id, min_length=config.min_length,
        ))
    return props


def assemble_system(sub: Substructure, props: List[MemberProperty], E: float, A: float):
    """Global stiffness K (DenseMatrix) and load vector F for a substructure."""
    dof = DOF_3D_TRUSS
    ndof = dof.ndof(sub.n_joints)
    contributions = [
        (dof.element_dof_map([p.a, p.b]), truss3d_global_stiffness(p, E, A))
        for p in props
    ]
    K = assemble_global_K(ndof, contributions)
    F = assemble_global_F(ndof, sub.loads, dof)
    return K, F


def support_dofs(sub: Substructure) -> List[int]:
    """Every DOF of every support joint (pinned in x, y and z)."""
    fixed = []
    for i in sub.supports:
        fixed.extend(DOF_3D_TRUSS.node_dofs(i))
    return fixed


def analyze_substructure(
    sub: Substructure,
    E: float = None,
    A: float = None,
    config: AnalysisConfig = None,
) -> TrussAnalysisResult:
    """
    Run the stiffness method on one substructure.

    Parameters:
    -----------
    sub : Substructure
        Component from ``find_substructures``
    E, A : float, optional
        Modulus (Pa) and area (m²), default from config
    config : AnalysisConfig, optional
        Thresholds and switches, default ``CONFIG``

    Returns:
    --------
    TrussAnalysisResult
        Results on success; otherwise an error with its FailureKind
    """
    cfg = (config or CONFIG).with_material(E, A)
    E, A = cfg.E, cfg.A

    if not sub.supports:
        return TrussAnalysisResult.failure(FailureKind.UNSUPPORTED)

    ndof = DOF_3D_TRUSS.ndof(sub.n_joints)
    logger.debug(
        "Starting analysis: %d joints, %d members, %d DOFs",
        sub.n_joints, sub.n_members, ndof,
    )

    props = compute_member_properties(sub, cfg)
    K, F = assemble_system(sub, props, E, A)
    logger.debug("Global stiffness matrix assembled: %dx%d", K.rows, K.cols)

    try:
        d, R, free = solve_linear(
            K, F, support_dofs(sub),
            tol=cfg.pivot_tol,
            drop_inactive=cfg.drop_inactive_dofs,
            scale=cfg.scale_reduced_system,
            dof_per_node=DOF_3D_TRUSS.dof_per_node,
        )
    except ConstraintError:
        return TrussAnalysisResult.failure(FailureKind.OVER_CONSTRAINED)
    except MechanismError as e:
        return TrussAnalysisResult.failure(FailureKind.SINGULAR, str(e))

    logger.debug("Displacements computed for %d free DOFs", len(free))

    forces = np.array(
        [truss3d_axial_force(p, d, E, A) for p in props],
        dtype=float,
    )
    reactions = {i: R[DOF_3D_TRUSS.node_dofs(i)].copy() for i in sub.supports}

    logger.debug("Analysis complete")
    return TrussAnalysisResult(
        member_forces=forces,
        reactions=reactions,
        displacements=d,
        members=props,
    )


def analyze_truss(
    graph: TrussGraph,
    E: float = None,
    A: float = None,
    config: AnalysisConfig = None,
    workers: int = 1,
    cancel: threading.Event = None,
    progress: bool = False,
) -> List[SubstructureResult]:
    """
    Split a graph into substructures and analyse each one independently.

    Parameters:
    -----------
    graph : TrussGraph
        Immutable snapshot of joints and members
    E, A : float, optional
        Uniform modulus and area, both > 0 (ValueError otherwise)
    config : AnalysisConfig, optional
        Defaults to ``CONFIG``
    workers : int
        >1 analyses substructures on a thread pool; output order is unchanged
    cancel : threading.Event, optional
        Checked before each substructure starts; when set, AnalysisCancelled
        is raised. A substructure already being solved always finishes.
    progress : bool
        Show a tqdm progress bar

    Returns:
    --------
    List[SubstructureResult]
        One entry per substructure, in discovery order
    """
    cfg = (config or CONFIG).with_material(E, A)
    subs = find_substructures(graph, cfg.load_threshold)

    def run(indexed):
        index, sub = indexed
        if cancel is not None and cancel.is_set():
            raise AnalysisCancelled(f"Analysis cancelled before substructure {index}")
        result = analyze_substructure(sub, config=cfg)
        if not result.ok:
            logger.warning("Substructure %d failed: %s", index, result.error)
        return SubstructureResult(index=index, substructure=sub, result=result)

    jobs = list(enumerate(subs))
    bar = dict(total=len(jobs), desc="Analyzing substructures", disable=not progress)

    if workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(tqdm(pool.map(run, jobs), **bar))
    return [run(job) for job in tqdm(jobs, **bar)]
