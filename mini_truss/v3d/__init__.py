# mini_truss/v3d - 3D truss records and member kernel
"""
V3D: 3D TRUSS MODEL AND ELEMENT
===============================

- model.py     Load, Joint, Member, TrussGraph (immutable snapshot records)
- elements.py  member geometry, 6×6 stiffness, axial force recovery

USAGE:
------
    from mini_truss.v3d import Joint, Member, Load, TrussGraph

    graph = TrussGraph.build(
        joints=[
            Joint(0, 0.0, 0.0, 0.0, is_support=True),
            Joint(1, 2.0, 0.0, 0.0, loads=(Load((1, 0, 0), 1000.0),)),
        ],
        members=[Member(0, 0, 1)],
    )
"""

from .model import Load, Joint, Member, TrussGraph
from .elements import (
    MemberProperty,
    DegenerateMemberWarning,
    member_property,
    truss3d_global_stiffness,
    truss3d_axial_force,
)

__all__ = [
    'Load', 'Joint', 'Member', 'TrussGraph',
    'MemberProperty', 'DegenerateMemberWarning', 'member_property',
    'truss3d_global_stiffness', 'truss3d_axial_force',
]
