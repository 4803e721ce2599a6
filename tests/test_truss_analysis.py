# tests/test_truss_analysis.py
"""
TRUSS ANALYSIS TESTS: Known Answers, Signs and Equilibrium
==========================================================

1. SINGLE BAR: axial load at the free end → |N| = P, reaction = -P
2. HANGING TRIANGLE: two inclined members carry P/√2 each in tension
3. TETRAHEDRON: symmetric legs in compression, equal vertical reactions
4. RIGID ROTATION: forces unchanged, reactions rotate with the truss
5. EQUILIBRIUM: ΣReactions + ΣLoads = 0 for an arbitrary 3D truss
6. FAILURES: unsupported, over-constrained and mechanism cases
"""

import numpy as np
import pytest

from mini_truss.analysis import FailureKind, analyze_substructure
from mini_truss.config import AnalysisConfig
from mini_truss.substructure import find_substructures
from mini_truss.v3d.elements import DegenerateMemberWarning
from mini_truss.v3d.model import Joint, Load, Member, TrussGraph

E = 200e9   # Pa
A = 0.01    # m²
P = 1000.0  # N


def analyze_single(graph: TrussGraph, config: AnalysisConfig = None):
    subs = find_substructures(graph)
    assert len(subs) == 1
    return subs[0], analyze_substructure(subs[0], E=E, A=A, config=config)


def single_bar(direction):
    return TrussGraph.build(
        [
            Joint(0, 0.0, 0.0, 0.0, is_support=True),
            Joint(1, 2.0, 0.0, 0.0, loads=(Load(direction, P),)),
        ],
        [Member(0, 0, 1)],
    )


def hanging_triangle(brace: bool = False):
    """
    Supports at (0,0,0) and (2,0,0); apex at (1,-1,0) loaded straight down.
    With ``brace`` the apex is also tied out of plane to a support at (1,-1,1).
    """
    joints = [
        Joint(0, 0.0, 0.0, 0.0, is_support=True),
        Joint(1, 2.0, 0.0, 0.0, is_support=True),
        Joint(2, 1.0, -1.0, 0.0, loads=(Load((0, -1, 0), P),)),
    ]
    members = [Member(0, 0, 1), Member(1, 0, 2), Member(2, 1, 2)]
    if brace:
        joints.append(Joint(3, 1.0, -1.0, 1.0, is_support=True))
        members.append(Member(3, 2, 3))
    return TrussGraph.build(joints, members)


def tetrahedron(supported=(0, 1, 2), load=10000.0):
    """Base triangle on a unit circle at z=0, apex at (0,0,1) loaded in -z."""
    joints = []
    for i, angle in enumerate([0, 2 * np.pi / 3, 4 * np.pi / 3]):
        joints.append(Joint(i, np.cos(angle), np.sin(angle), 0.0, is_support=i in supported))
    joints.append(Joint(3, 0.0, 0.0, 1.0, loads=(Load((0, 0, -1), load),)))
    members = [Member(0, 0, 1), Member(1, 1, 2), Member(2, 2, 0),
               Member(3, 0, 3), Member(4, 1, 3), Member(5, 2, 3)]
    return TrussGraph.build(joints, members)


class TestSingleBar:

    def test_tension_along_axis(self):
        sub, result = analyze_single(single_bar((1, 0, 0)))
        assert result.ok, result.error
        assert np.isclose(result.member_forces[0], P, rtol=1e-9)
        np.testing.assert_allclose(result.reactions[0], [-P, 0, 0], atol=1e-6)

    def test_compression_along_axis(self):
        _, result = analyze_single(single_bar((-1, 0, 0)))
        assert result.ok, result.error
        assert np.isclose(result.member_forces[0], -P, rtol=1e-9)
        np.testing.assert_allclose(result.reactions[0], [P, 0, 0], atol=1e-6)

    def test_elongation_matches_hand_calc(self):
        """δ = PL/EA at the free end, support stays put."""
        _, result = analyze_single(single_bar((1, 0, 0)))
        np.testing.assert_allclose(result.joint_displacement(1), [P * 2.0 / (E * A), 0, 0])
        np.testing.assert_array_equal(result.joint_displacement(0), [0, 0, 0])

    def test_unresisted_directions_singular_without_inactive_rule(self):
        """With every free DOF kept, the bar's transverse DOFs make K_ff singular."""
        cfg = AnalysisConfig(drop_inactive_dofs=False)
        _, result = analyze_single(single_bar((1, 0, 0)), config=cfg)
        assert not result.ok
        assert result.kind is FailureKind.SINGULAR

    def test_transverse_load_is_a_mechanism(self):
        """A lone bar cannot carry load perpendicular to its axis."""
        _, result = analyze_single(single_bar((0, 1, 0)))
        assert result.kind is FailureKind.SINGULAR
        assert result.member_forces is None and result.reactions is None


class TestHangingTriangle:

    @pytest.mark.parametrize("brace", [False, True])
    def test_inclined_members_in_tension(self, brace):
        _, result = analyze_single(hanging_triangle(brace))
        assert result.ok, result.error
        forces = result.member_forces
        expected = P / np.sqrt(2.0)
        assert np.isclose(forces[1], expected, rtol=1e-9)
        assert np.isclose(forces[2], expected, rtol=1e-9)
        # top chord runs between two pinned supports
        assert abs(forces[0]) < 1e-6
        if brace:
            assert abs(forces[3]) < 1e-6

    def test_braced_triangle_solves_without_inactive_rule(self):
        cfg = AnalysisConfig(drop_inactive_dofs=False)
        _, result = analyze_single(hanging_triangle(brace=True), config=cfg)
        assert result.ok, result.error
        assert np.isclose(result.member_forces[1], P / np.sqrt(2.0), rtol=1e-9)

    def test_apex_equilibrium(self):
        """Member pulls on the apex balance the applied load."""
        sub, result = analyze_single(hanging_triangle())
        apex = sub.index_of[2]
        pull = np.zeros(3)
        for member, prop, force in zip(sub.members, result.members, result.member_forces):
            if apex == prop.b:
                pull -= force * prop.cosines
            elif apex == prop.a:
                pull += force * prop.cosines
        np.testing.assert_allclose(pull + sub.loads[apex], 0.0, atol=1e-6)

    def test_reactions(self):
        sub, result = analyze_single(hanging_triangle())
        h = P / 2.0
        np.testing.assert_allclose(result.reactions[sub.index_of[0]], [-h, h, 0], atol=1e-6)
        np.testing.assert_allclose(result.reactions[sub.index_of[1]], [h, h, 0], atol=1e-6)


class TestTetrahedron:

    def test_legs_equal_and_compressed(self):
        _, result = analyze_single(tetrahedron())
        assert result.ok, result.error
        legs = result.member_forces[3:6]
        assert np.allclose(legs, legs[0], rtol=1e-6)
        assert legs[0] < 0
        np.testing.assert_allclose(result.member_forces[0:3], 0.0, atol=1e-6)

    def test_vertical_reactions_split_evenly(self):
        sub, result = analyze_single(tetrahedron(load=9000.0))
        for i in sub.supports:
            assert np.isclose(result.reactions[i][2], 3000.0, rtol=1e-6)

    def test_two_supports_is_a_mechanism(self):
        """Free to rotate about the line through the two supports."""
        _, result = analyze_single(tetrahedron(supported=(0, 1)))
        assert not result.ok
        assert result.kind is FailureKind.SINGULAR


ROTATION_AXIS = np.array([0.3, -0.8, 0.5])
ROTATION_ANGLE = 0.7  # rad


def rotation(axis=ROTATION_AXIS, angle=ROTATION_ANGLE):
    """Rodrigues rotation matrix about ``axis``."""
    k = np.asarray(axis, dtype=float)
    k = k / np.linalg.norm(k)
    Kx = np.array([[0, -k[2], k[1]], [k[2], 0, -k[0]], [-k[1], k[0], 0]])
    return np.eye(3) + np.sin(angle) * Kx + (1 - np.cos(angle)) * Kx @ Kx


def rotated(graph: TrussGraph, Rm: np.ndarray) -> TrussGraph:
    """The same truss moved rigidly: positions and load directions rotated."""
    joints = []
    for j in graph.joints:
        x, y, z = Rm @ j.position
        loads = tuple(Load(Rm @ np.array(load.direction), load.magnitude) for load in j.loads)
        joints.append(Joint(j.id, x, y, z, is_support=j.is_support, loads=loads))
    return TrussGraph.build(joints, graph.members)


class TestRigidRotation:
    """
    Member forces do not depend on how the truss sits in space, and the
    reactions turn with it.
    """

    def test_oblique_bar(self):
        graph = TrussGraph.build(
            [
                Joint(0, 0.0, 0.0, 0.0, is_support=True),
                Joint(1, 1.0, 1.0, 0.0, loads=(Load((1, 1, 0), P),)),
            ],
            [Member(0, 0, 1)],
        )
        _, result = analyze_single(graph)
        assert result.ok, result.error
        assert np.isclose(result.member_forces[0], P, rtol=1e-9)
        np.testing.assert_allclose(result.reactions[0], -P / np.sqrt(2.0) * np.array([1, 1, 0]), atol=1e-6)

    def test_triangle_tilted_about_x(self):
        """Hanging triangle turned 30° about x, apex loaded along the turned -y."""
        _, result = analyze_single(rotated(hanging_triangle(), rotation((1, 0, 0), np.pi / 6)))
        assert result.ok, result.error
        expected = P / np.sqrt(2.0)
        np.testing.assert_allclose(result.member_forces[1:3], expected, rtol=1e-9)

    @pytest.mark.parametrize("build", [
        lambda: single_bar((1, 0, 0)),
        lambda: single_bar((-1, 0, 0)),
        hanging_triangle,
        lambda: hanging_triangle(brace=True),
        tetrahedron,
    ])
    def test_forces_invariant_reactions_rotate(self, build):
        graph = build()
        Rm = rotation()
        sub, base = analyze_single(graph)
        sub_r, turned = analyze_single(rotated(graph, Rm))
        assert base.ok and turned.ok, turned.error

        np.testing.assert_allclose(turned.member_forces, base.member_forces, rtol=1e-7, atol=1e-6)
        for joint in sub.joints:
            if not joint.is_support:
                continue
            back = Rm.T @ turned.reactions[sub_r.index_of[joint.id]]
            np.testing.assert_allclose(back, base.reactions[sub.index_of[joint.id]], atol=1e-6)

    def test_transverse_load_still_a_mechanism(self):
        _, result = analyze_single(rotated(single_bar((0, 1, 0)), rotation()))
        assert result.kind is FailureKind.SINGULAR

    def test_tilted_tetrahedron_on_two_supports_is_a_mechanism(self):
        _, result = analyze_single(rotated(tetrahedron(supported=(0, 1)), rotation()))
        assert result.kind is FailureKind.SINGULAR


class TestGlobalEquilibrium:

    def test_reactions_balance_loads(self):
        """Square pyramid, 4 pinned corners, oblique loads at apex and a mid-height ring."""
        joints = [
            Joint(0, -1.0, -1.0, 0.0, is_support=True),
            Joint(1, 1.0, -1.0, 0.0, is_support=True),
            Joint(2, 1.0, 1.0, 0.0, is_support=True),
            Joint(3, -1.0, 1.0, 0.0, is_support=True),
            Joint(4, 0.0, 0.0, 1.5, loads=(Load((1, 2, -3), 5000.0), Load((0, 0, -1), 800.0))),
        ]
        members = [Member(i, i, 4) for i in range(4)]
        members += [Member(4 + i, i, (i + 1) % 4) for i in range(4)]
        sub, result = analyze_single(TrussGraph.build(joints, members))
        assert result.ok, result.error

        total_reaction = sum(result.reactions.values())
        total_load = sum(sub.loads.values())
        np.testing.assert_allclose(total_reaction + total_load, 0.0, atol=1e-6)

    def test_load_on_support_goes_straight_to_reaction(self):
        graph = TrussGraph.build(
            [
                Joint(0, 0, 0, 0, is_support=True, loads=(Load((0, 0, -1), 250.0),)),
                Joint(1, 1, 0, 0, loads=(Load((1, 0, 0), P),)),
            ],
            [Member(0, 0, 1)],
        )
        _, result = analyze_single(graph)
        np.testing.assert_allclose(result.reactions[0], [-P, 0, 250.0], atol=1e-6)


class TestFailures:

    def test_unsupported_single_joint(self):
        _, result = analyze_single(TrussGraph.build([Joint(0, 0, 0, 0)]))
        assert result.kind is FailureKind.UNSUPPORTED
        assert "No support" in result.error
        assert result.member_forces is None

    def test_all_dofs_constrained(self):
        graph = TrussGraph.build(
            [Joint(0, 0, 0, 0, is_support=True), Joint(1, 1, 0, 0, is_support=True)],
            [Member(0, 0, 1)],
        )
        _, result = analyze_single(graph)
        assert result.kind is FailureKind.OVER_CONSTRAINED
        assert result.error == "All DOFs are constrained!"

    def test_zero_length_member_warns_and_continues(self):
        graph = TrussGraph.build(
            [Joint(0, 1, 1, 1, is_support=True), Joint(1, 1, 1, 1)],
            [Member(0, 0, 1)],
        )
        with pytest.warns(DegenerateMemberWarning):
            _, result = analyze_single(graph)
        assert result.ok, result.error
        assert result.member_forces[0] == 0.0

    def test_invalid_material_rejected(self):
        sub = find_substructures(single_bar((1, 0, 0)))[0]
        with pytest.raises(ValueError):
            analyze_substructure(sub, E=0.0, A=A)
        with pytest.raises(ValueError):
            analyze_substructure(sub, E=E, A=-1.0)
