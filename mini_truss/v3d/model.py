# mini_truss/v3d/model.py
"""
3D MODEL DEFINITIONS: Load, Joint, Member, TrussGraph
=====================================================

PURPOSE:
--------
These are the plain, immutable records the analysis reads. An editor (or
any other producer) builds a ``TrussGraph`` snapshot at analysis time; the
solver never reaches back into the producer's own objects.

ENGINEERING CONTEXT:
--------------------
A pin-jointed truss:
- Members carry only AXIAL force (tension or compression)
- Joints are frictionless pins: 3 translational DOFs, no rotation
- A support joint is pinned in all three directions (no rollers)
- Point loads act at joints; several loads on one joint simply add up

IDENTITY:
---------
Joints and members are addressed by stable integer ids (arena handles).
A member refers to its endpoints by id, and adjacency is derived on demand,
so there are no joint ↔ member back-references to keep in sync.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

Vector3 = Tuple[float, float, float]


def _as_vector3(values: Sequence[float], what: str) -> Vector3:
    vec = tuple(float(v) for v in values)
    if len(vec) != 3:
        raise ValueError(f"{what} must have 3 components, got {len(vec)}")
    return vec


@dataclass(frozen=True)
class Load:
    """
    A point load: a direction and a non-negative magnitude.

    The direction is normalised when the force is computed, so
    ``Load((0, -2, 0), 500)`` and ``Load((0, -1, 0), 500)`` are the same force.

    Examples:
    ---------
    >>> Load((0, 0, -1), 1000.0).force
    array([    0.,     0., -1000.])
    """
    direction: Vector3 = (0.0, -1.0, 0.0)
    magnitude: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, 'direction', _as_vector3(self.direction, "Load direction"))
        if self.magnitude < 0:
            raise ValueError(f"Load magnitude must be non-negative, got {self.magnitude}")

    @property
    def force(self) -> np.ndarray:
        d = np.array(self.direction, dtype=float)
        norm = np.linalg.norm(d)
        if norm == 0.0:
            return np.zeros(3)
        return d / norm * self.magnitude


@dataclass(frozen=True)
class Joint:
    """
    A joint (node) in 3D space.

    Parameters:
    -----------
    id : int
        Stable handle, unique within a TrussGraph
    x, y, z : float
        Position in global coordinates (m)
    is_support : bool
        Pinned support (all three translations held at zero)
    loads : tuple of Load
        Applied point loads, summed by ``total_load``
    """
    id: int
    x: float
    y: float
    z: float
    is_support: bool = False
    loads: Tuple[Load, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'loads', tuple(self.loads))

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @property
    def total_load(self) -> np.ndarray:
        total = np.zeros(3)
        for load in self.loads:
            total += load.force
        return total


@dataclass(frozen=True)
class Member:
    """
    An axial-only member between joints ``ni`` and ``nj``.

    Either endpoint may be None, or name a joint that is not in the snapshot
    (a stale reference left behind by the editor). Such members are ignored
    by the analysis. Material (E, A) is analysis-wide, not per member.
    """
    id: int
    ni: Optional[int]
    nj: Optional[int]

    def endpoints(self) -> Tuple[Optional[int], Optional[int]]:
        return self.ni, self.nj


@dataclass(frozen=True)
class TrussGraph:
    """
    Immutable snapshot of joints and members, in input order.

    ``None`` entries among the joints (slots freed by the editor) are dropped.

    Raises:
    -------
    ValueError
        If two joints share an id
    """
    joints: Tuple[Joint, ...] = ()
    members: Tuple[Member, ...] = ()
    _by_id: Dict[int, Joint] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        joints = tuple(j for j in self.joints if j is not None)
        members = tuple(self.members)
        by_id = {}
        for joint in joints:
            if joint.id in by_id:
                raise ValueError(f"Duplicate joint id {joint.id}")
            by_id[joint.id] = joint
        object.__setattr__(self, 'joints', joints)
        object.__setattr__(self, 'members', members)
        object.__setattr__(self, '_by_id', by_id)

    def joint(self, joint_id: int) -> Joint:
        return self._by_id[joint_id]

    def has_joint(self, joint_id: Optional[int]) -> bool:
        return joint_id is not None and joint_id in self._by_id

    def is_valid_member(self, member: Member) -> bool:
        """Both endpoints present in this snapshot."""
        return (
            member is not None
            and self.has_joint(member.ni)
            and self.has_joint(member.nj)
        )

    def valid_members(self) -> List[Member]:
        return [m for m in self.members if self.is_valid_member(m)]

    def adjacency(self) -> Dict[int, List[int]]:
        """Joint id → neighbouring joint ids, built from valid members."""
        adj = {joint.id: [] for joint in self.joints}
        for m in self.valid_members():
            adj[m.ni].append(m.nj)
            adj[m.nj].append(m.ni)
        return adj

    @classmethod
    def build(cls, joints: Iterable[Joint], members: Iterable[Member] = ()) -> "TrussGraph":
        return cls(joints=tuple(joints), members=tuple(members))
