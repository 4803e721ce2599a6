# mini_truss/config.py
"""
Analysis configuration and defaults.
"""

from dataclasses import dataclass, replace


@dataclass
class AnalysisConfig:
    """Analysis-wide parameters shared by every member and substructure."""

    # Material defaults (steel)
    E: float = 200e9   # Pa
    A: float = 0.01    # m^2

    # Numerical thresholds
    pivot_tol: float = 1e-10       # smallest acceptable elimination pivot
    min_length: float = 1e-6       # zero-length members are clamped to this (m)
    load_threshold: float = 1e-3   # summed joint loads at or below this are ignored (N)

    # Partitioning
    drop_inactive_dofs: bool = True     # hold unloaded zero-stiffness joint directions at zero
    scale_reduced_system: bool = True   # normalise K_ff by its largest entry before solving

    def validate(self) -> "AnalysisConfig":
        if not self.E > 0:
            raise ValueError(f"Modulus of elasticity must be positive, got E={self.E}")
        if not self.A > 0:
            raise ValueError(f"Cross-sectional area must be positive, got A={self.A}")
        if not self.pivot_tol > 0:
            raise ValueError(f"pivot_tol must be positive, got {self.pivot_tol}")
        if not self.min_length > 0:
            raise ValueError(f"min_length must be positive, got {self.min_length}")
        return self

    def with_material(self, E: float = None, A: float = None) -> "AnalysisConfig":
        """Copy of this config with E and/or A overridden."""
        return replace(
            self,
            E=self.E if E is None else E,
            A=self.A if A is None else A,
        ).validate()


# Global config instance
CONFIG = AnalysisConfig()
