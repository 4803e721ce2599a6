# mini_truss/schema.py
"""
Request models for graph snapshots handed over by an editor or a client.

A snapshot arrives as a plain dict / JSON document:

    {
        "E": 200e9, "A": 0.01,
        "joints": [
            {"id": 0, "x": 0, "y": 0, "z": 0, "is_support": true},
            {"id": 1, "x": 2, "y": 0, "z": 0,
             "loads": [{"direction": [1, 0, 0], "magnitude": 1000}]}
        ],
        "members": [{"id": 0, "ni": 0, "nj": 1}]
    }

``GraphIn.to_graph()`` turns it into the immutable ``TrussGraph`` the
analysis reads.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .config import CONFIG, AnalysisConfig
from .v3d.model import Joint, Load, Member, TrussGraph


class LoadIn(BaseModel):
    """Point load on a joint."""
    direction: Tuple[float, float, float] = Field((0.0, -1.0, 0.0), description="Direction (normalised on use)")
    magnitude: float = Field(1.0, ge=0.0, description="Magnitude (N)")

    def to_load(self) -> Load:
        return Load(direction=self.direction, magnitude=self.magnitude)


class JointIn(BaseModel):
    """Joint position, support flag and loads."""
    id: int
    x: float
    y: float
    z: float
    is_support: bool = False
    loads: List[LoadIn] = Field(default_factory=list)

    def to_joint(self) -> Joint:
        return Joint(
            id=self.id, x=self.x, y=self.y, z=self.z,
            is_support=self.is_support,
            loads=tuple(load.to_load() for load in self.loads),
        )


class MemberIn(BaseModel):
    """Member endpoints; null endpoints are accepted and skipped by the analysis."""
    id: int
    ni: Optional[int] = None
    nj: Optional[int] = None

    def to_member(self) -> Member:
        return Member(id=self.id, ni=self.ni, nj=self.nj)


class GraphIn(BaseModel):
    """Complete analysis request: material plus graph."""
    E: float = Field(CONFIG.E, gt=0.0, description="Modulus of elasticity (Pa)")
    A: float = Field(CONFIG.A, gt=0.0, description="Cross-sectional area (m²)")
    joints: List[JointIn] = Field(default_factory=list)
    members: List[MemberIn] = Field(default_factory=list)

    def to_graph(self) -> TrussGraph:
        return TrussGraph.build(
            joints=[j.to_joint() for j in self.joints],
            members=[m.to_member() for m in self.members],
        )

    def to_config(self, base: AnalysisConfig = CONFIG) -> AnalysisConfig:
        return base.with_material(self.E, self.A)


def load_graph(data: Union[str, bytes, Dict[str, Any]]) -> GraphIn:
    """
    Validate a snapshot given as a JSON string or an already-parsed dict.

    Raises:
    -------
    pydantic.ValidationError
        If the document does not match the schema (e.g. E <= 0)
    """
    if isinstance(data, (str, bytes)):
        return GraphIn.model_validate_json(data)
    return GraphIn.model_validate(data)
