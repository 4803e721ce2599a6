# mini_truss - Pin-jointed 3D truss analysis
"""
MINI-TRUSS: Direct Stiffness Analysis of 3D Trusses
===================================================

This package provides:
- A small dense-matrix library with pivoted elimination (kernel/)
- 3D truss records and the axial member kernel (v3d/)
- Splitting a joint/member graph into independent substructures
- Per-substructure analysis: displacements, member forces, reactions

ARCHITECTURE:
-------------
    kernel/           DenseMatrix, solve/invert/determinant, DOFs, assembly, partitioned solve
    v3d/              Load, Joint, Member, TrussGraph; member stiffness and forces
    substructure.py   Connected components of the graph
    analysis.py       Validate → Assemble → Partition → Solve → Recover
    config.py         Analysis-wide material and thresholds
    schema.py         pydantic models for JSON/dict graph snapshots
    report.py         Text report and pandas tables
"""

from .config import AnalysisConfig, CONFIG
from .kernel import DenseMatrix, MechanismError, SingularMatrixError, DimensionError
from .v3d import Load, Joint, Member, TrussGraph, DegenerateMemberWarning
from .substructure import Substructure, find_substructures
from .analysis import (
    FailureKind,
    AnalysisCancelled,
    TrussAnalysisResult,
    SubstructureResult,
    analyze_substructure,
    analyze_truss,
)

__version__ = "0.1.0"

__all__ = [
    'AnalysisConfig', 'CONFIG',
    'DenseMatrix', 'MechanismError', 'SingularMatrixError', 'DimensionError',
    'Load', 'Joint', 'Member', 'TrussGraph', 'DegenerateMemberWarning',
    'Substructure', 'find_substructures',
    'FailureKind', 'AnalysisCancelled', 'TrussAnalysisResult', 'SubstructureResult',
    'analyze_substructure', 'analyze_truss',
]
