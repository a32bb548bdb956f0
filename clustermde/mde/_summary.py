"""Current-design summary and key sample-size findings."""

from __future__ import annotations

from dataclasses import dataclass

from clustermde.design import (
    MeasurementModel,
    TrialDesignParameters,
    measurement_variance_multiplier,
)
from clustermde.mde._common import (
    IccValidationResult,
    RetentionResult,
    SeverityResult,
    _round_half_up,
)
from clustermde.mde._curve import evaluate_point
from clustermde.mde._retention import calc_retention_mde
from clustermde.mde._search import ExceedsRange, SearchResult, find_smallest_n_for_target
from clustermde.mde._severity import calc_severity_mde

DEFAULT_CURRENT_N = 1000
DEFAULT_TRADEOFF_TOTALS = (750, 600, 500)

# Clinically meaningful targets
SEVERITY_MID_POINTS = 2.0  # minimally important difference
SEVERITY_LARGE_POINTS = 3.0
RETENTION_TARGET_PP = 7.0

_MODEL_LABELS = {
    MeasurementModel.SUM_SCORE: "sum score",
    MeasurementModel.RASCH: "Rasch partial credit model",
    MeasurementModel.MFRM: "Rasch partial credit + many-facet Rasch model",
}


@dataclass(frozen=True)
class DesignSummary:
    """Results at the current design size plus N needed for key targets.

    ``tradeoffs`` holds ``(n, severity_mde, retention_mde)`` rows for
    smaller trials; retention MDEs are in percentage points. The
    measurement-impact properties compare the current design with the same
    design scored by sum score.
    """

    total_n: int
    severity: SeverityResult
    retention: RetentionResult
    icc_validation: IccValidationResult
    n_for_severity_mid: SearchResult
    n_for_severity_large: SearchResult
    n_for_retention_target: SearchResult
    patients_per_cluster: int
    tradeoffs: tuple[tuple[int, float, float], ...]
    measurement_model: MeasurementModel
    variance_multiplier: float

    @property
    def equivalent_sum_score_n(self) -> int:
        """Sum-score sample size with the same severity precision as ``total_n``."""
        return _round_half_up(self.total_n / self.variance_multiplier)

    @property
    def sample_size_gain_pct(self) -> float:
        """Effective sample-size increase from the measurement model, in percent."""
        return (1.0 / self.variance_multiplier - 1.0) * 100.0

    @property
    def mde_reduction_pct(self) -> float:
        """Relative shrinkage of the severity MDE versus the sum-score MDE."""
        return (1.0 - self.severity.mde / self.severity.baseline_mde) * 100.0

    def clusters_for(self, n: SearchResult) -> int | None:
        """Cluster count implied by a search result, or None if out of range."""
        if isinstance(n, ExceedsRange):
            return None
        return _round_half_up(n / self.patients_per_cluster)

    def summary(self) -> str:
        """Human-readable summary."""
        def needed(label: str, n: SearchResult) -> str:
            clusters = self.clusters_for(n)
            if clusters is None:
                return f"{label}: N {n}"
            return f"{label}: N = {n} ({clusters} clusters)"

        sev, ret, icc = self.severity, self.retention, self.icc_validation
        lines = [
            f"Design summary at N = {self.total_n}",
            "=" * 40,
            f"Severity MDE  : {sev.mde:.2f} pts (d = {sev.effect_size:.2f})",
            f"Retention MDE : {ret.mde_percentage_points:.1f} pp "
            f"({ret.treatment_rate_pct:.1f}% vs {ret.control_rate_pct:.1f}%)",
            f"Clusters      : {sev.n_clusters} "
            f"({sev.n_treatment_clusters} tx / {sev.n_control_clusters} ctrl)",
            f"ICC 95% CI    : +/-{icc.ci_half_width:.3f}, "
            f"rule out poor: {'yes' if icc.can_rule_out_poor else 'no'}",
            "",
            needed(f"{SEVERITY_MID_POINTS:g} severity points", self.n_for_severity_mid),
            needed(f"{SEVERITY_LARGE_POINTS:g} severity points", self.n_for_severity_large),
            needed(f"{RETENTION_TARGET_PP:g} pp retention", self.n_for_retention_target),
        ]

        if self.tradeoffs:
            lines += ["", "Smaller trial trade-offs:"]
            for n, severity_mde, retention_mde in self.tradeoffs:
                lines.append(
                    f"  N = {n}: MDE = {severity_mde:.2f} pts / {retention_mde:.1f} pp"
                )

        if self.measurement_model.upgrades_reliability:
            lines += [
                "",
                f"Measurement model impact ({_MODEL_LABELS[self.measurement_model]}):",
                f"  Variance reduced by {sev.variance_reduction_pct:.1f}%, "
                f"like a {self.sample_size_gain_pct:.1f}% larger sample "
                f"(N = {self.total_n} performs like N = {self.equivalent_sum_score_n} "
                f"with sum scores)",
                f"  MDE improvement: {sev.baseline_mde:.2f} -> {sev.mde:.2f} pts "
                f"({self.mde_reduction_pct:.1f}% reduction)",
            ]
        return "\n".join(lines)


def summarize_design(
    params: TrialDesignParameters,
    total_n: int = DEFAULT_CURRENT_N,
    tradeoff_totals: tuple[int, ...] = DEFAULT_TRADEOFF_TOTALS,
) -> DesignSummary:
    """Evaluate the design at *total_n* and search N for the key targets.

    Searches use the default grid (400..1300, step 10). Each entry of
    *tradeoff_totals* adds a severity/retention MDE row for that N.
    """
    point = evaluate_point(params, total_n)
    tradeoffs = tuple(
        (
            n,
            calc_severity_mde(params, n).mde,
            calc_retention_mde(params, n).mde_percentage_points,
        )
        for n in tradeoff_totals
    )
    return DesignSummary(
        total_n=total_n,
        severity=point.severity,
        retention=point.retention,
        icc_validation=point.icc_validation,
        n_for_severity_mid=find_smallest_n_for_target(
            params, SEVERITY_MID_POINTS, "severity",
        ),
        n_for_severity_large=find_smallest_n_for_target(
            params, SEVERITY_LARGE_POINTS, "severity",
        ),
        n_for_retention_target=find_smallest_n_for_target(
            params, RETENTION_TARGET_PP, "retention",
        ),
        patients_per_cluster=params.patients_per_cluster,
        tradeoffs=tradeoffs,
        measurement_model=params.measurement_model,
        variance_multiplier=measurement_variance_multiplier(params),
    )
