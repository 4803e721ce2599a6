# mini_truss/substructure.py
"""
SUBSTRUCTURES: Splitting a Truss Graph into Connected Components
================================================================

Two groups of joints with no member between them share no stiffness.
Solving them as one system would be singular, so the graph is split into
maximal connected components and each one is analysed on its own.

ALGORITHM:
----------
    for each joint, in input order:
        if not yet visited:
            breadth-first search through member adjacency
            → one Substructure

Inside a component, joints are numbered 0..n-1 in BFS discovery order and
members keep their input order. Members with a missing or stale endpoint
are dropped before the search.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from .config import CONFIG
from .v3d.model import Joint, Member, TrussGraph

logger = logging.getLogger(__name__)


@dataclass
class Substructure:
    """
    One connected component of the truss graph.

    Attributes:
    -----------
    joints : List[Joint]
        Joints in local index order
    members : List[Member]
        Members with both endpoints in this component, input order
    index_of : Dict[int, int]
        Joint id → local index (bijection onto 0..n-1)
    adjacency : List[List[int]]
        Local index → neighbouring local indices
    supports : List[int]
        Local indices of support joints, ascending
    loads : Dict[int, np.ndarray]
        Local index → summed load vector, only where |load| > threshold
    """
    joints: List[Joint]
    members: List[Member]
    index_of: Dict[int, int]
    adjacency: List[List[int]] = field(default_factory=list)
    supports: List[int] = field(default_factory=list)
    loads: Dict[int, np.ndarray] = field(default_factory=dict)

    @property
    def n_joints(self) -> int:
        return len(self.joints)

    @property
    def n_members(self) -> int:
        return len(self.members)

    def member_indices(self, member: Member):
        """Local (a, b) indices of a member's endpoints."""
        return self.index_of[member.ni], self.index_of[member.nj]

    def position(self, local_index: int) -> np.ndarray:
        return self.joints[local_index].position


def build_substructure(
    joints: List[Joint],
    members: List[Member],
    load_threshold: float = CONFIG.load_threshold,
) -> Substructure:
    """
    Index a component: local numbering, adjacency, supports, summed loads.

    Members whose endpoints are not both in ``joints`` are skipped.
    """
    index_of = {}
    ordered = []
    for joint in joints:
        if joint is None or joint.id in index_of:
            continue
        index_of[joint.id] = len(ordered)
        ordered.append(joint)

    kept = []
    adjacency = [[] for _ in ordered]
    for m in members:
        if m is None or m.ni not in index_of or m.nj not in index_of:
            continue
        kept.append(m)
        a, b = index_of[m.ni], index_of[m.nj]
        adjacency[a].append(b)
        adjacency[b].append(a)

    supports = [i for i, joint in enumerate(ordered) if joint.is_support]

    loads = {}
    for i, joint in enumerate(ordered):
        total = joint.total_load
        if np.linalg.norm(total) > load_threshold:
            loads[i] = total

    return Substructure(
        joints=ordered,
        members=kept,
        index_of=index_of,
        adjacency=adjacency,
        supports=supports,
        loads=loads,
    )


def find_substructures(
    graph: TrussGraph,
    load_threshold: float = CONFIG.load_threshold,
) -> List[Substructure]:
    """
    Partition a graph into independent substructures.

    Returns:
    --------
    List[Substructure]
        One per connected component, ordered by the first joint of each
        component in the input. Isolated joints form one-joint components.

    Example:
    --------
    >>> graph = TrussGraph.build(
    ...     [Joint(0, 0, 0, 0), Joint(1, 1, 0, 0), Joint(2, 5, 0, 0)],
    ...     [Member(0, 0, 1)],
    ... )
    >>> [s.n_joints for s in find_substructures(graph)]
    [2, 1]
    """
    adjacency = graph.adjacency()
    valid_members = graph.valid_members()

    visited = set()
    substructures = []

    for start in graph.joints:
        if start.id in visited:
            continue

        component_ids = [start.id]
        visited.add(start.id)
        queue = deque([start.id])
        while queue:
            current = queue.popleft()
            for neighbour in adjacency[current]:
                if neighbour not in visited:
                    visited.add(neighbour)
                    component_ids.append(neighbour)
                    queue.append(neighbour)

        component_set = set(component_ids)
        component_members = []
        for m in valid_members:
            inside_a = m.ni in component_set
            inside_b = m.nj in component_set
            # BFS closes over adjacency, so a member is either fully in or fully out
            assert inside_a == inside_b, f"Member {m.id} crosses substructures"
            if inside_a:
                component_members.append(m)

        sub = build_substructure(
            [graph.joint(j) for j in component_ids],
            component_members,
            load_threshold,
        )
        if sub.n_joints > 0:
            substructures.append(sub)

    logger.info(
        "Found %d independent substructure(s) in %d joints / %d members",
        len(substructures), len(graph.joints), len(valid_members),
    )
    return substructures
