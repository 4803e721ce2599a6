# mini_truss/report.py
"""Text summaries and tables of analysis results."""

from typing import List, Tuple

import numpy as np
import pandas as pd

from .analysis import SubstructureResult, TrussAnalysisResult

FORCE_EPS = 1e-3  # N, below this a load or force is treated as zero


def member_state(force: float) -> str:
    """'T' for tension, 'C' for compression."""
    return "T" if force > 0 else "C"


def force_extremes(result: TrussAnalysisResult) -> Tuple[float, float]:
    """
    (max tension, max compression magnitude) of a successful result.

    Both are >= 0; a failed result or a result without members gives (0, 0).
    """
    if not result.ok or result.member_forces is None or len(result.member_forces) == 0:
        return 0.0, 0.0
    forces = result.member_forces
    return float(max(forces.max(), 0.0)), float(max(-forces.min(), 0.0))


def force_scale(result: TrussAnalysisResult) -> float:
    """
    Largest member force magnitude, used to normalise force colouring.

    Falls back to 1.0 when every force is below FORCE_EPS, so an unloaded
    structure does not divide by zero.
    """
    tension, compression = force_extremes(result)
    scale = max(tension, compression)
    return scale if scale >= FORCE_EPS else 1.0


def normalized_forces(result: TrussAnalysisResult) -> np.ndarray:
    """|force| / force_scale per member, in [0, 1]; empty for a failed result."""
    if not result.ok or result.member_forces is None:
        return np.zeros(0)
    return np.abs(result.member_forces) / force_scale(result)


def _fmt_vec(v) -> str:
    return f"({v[0]:.2f}, {v[1]:.2f}, {v[2]:.2f})"


def format_report(results: List[SubstructureResult]) -> str:
    """
    Plain-text report covering every substructure.

    Successful substructures list node loads, member forces (with T/C) and
    support reactions; failed ones list only their error.
    """
    lines = ["=== STRUCTURAL ANALYSIS ===", ""]
    lines.append(f"Total Independent Structures: {len(results)}")
    lines.append("")

    for s, item in enumerate(results):
        sub, result = item.substructure, item.result
        lines.append(f"========== STRUCTURE {s + 1} ==========")
        lines.append(f"Nodes: {sub.n_joints}")
        lines.append(f"Members: {sub.n_members}")
        lines.append(f"Supports: {len(sub.supports)}")
        lines.append("")

        if not result.ok:
            lines.append(f"ERROR: {result.error}")
            lines.append("")
            continue

        lines.append("--- NODE FORCES ---")
        for i in sorted(sub.loads):
            lines.append(f"N{i}: {_fmt_vec(sub.loads[i])} N")

        lines.append("")
        lines.append("--- MEMBER FORCES ---")
        for i, force in enumerate(result.member_forces):
            lines.append(f"M{i}: {force:.2f} N ({member_state(force)})")

        lines.append("")
        lines.append("--- REACTIONS ---")
        for i, reaction in result.reactions.items():
            lines.append(f"N{i}: {_fmt_vec(reaction)} N")
        lines.append("")

    return "\n".join(lines)


def results_to_frame(results: List[SubstructureResult]) -> pd.DataFrame:
    """
    One row per member of every successful substructure.

    Columns: structure, member_id, joint_a, joint_b, length, force, state
    (joint_a / joint_b are the editor's joint ids, not local indices).
    """
    rows = []
    for item in results:
        result = item.result
        if not result.ok:
            continue
        for member, prop, force in zip(item.substructure.members, result.members, result.member_forces):
            rows.append({
                'structure': item.index,
                'member_id': member.id,
                'joint_a': member.ni,
                'joint_b': member.nj,
                'length': prop.length,
                'force': float(force),
                'state': member_state(force),
            })
    columns = ['structure', 'member_id', 'joint_a', 'joint_b', 'length', 'force', 'state']
    return pd.DataFrame(rows, columns=columns)


def reactions_to_frame(results: List[SubstructureResult]) -> pd.DataFrame:
    """One row per support joint of every successful substructure."""
    rows = []
    for item in results:
        if not item.result.ok:
            continue
        for i, reaction in item.result.reactions.items():
            rx, ry, rz = np.asarray(reaction, dtype=float)
            rows.append({
                'structure': item.index,
                'joint_id': item.substructure.joints[i].id,
                'Rx': rx, 'Ry': ry, 'Rz': rz,
            })
    return pd.DataFrame(rows, columns=['structure', 'joint_id', 'Rx', 'Ry', 'Rz'])
