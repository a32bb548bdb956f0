"""Command-line front end.

Usage examples
--------------
1) Current design at N = 1000 with key sample-size findings:
   python -m clustermde --mode summary

2) Curve with a Rasch-scored severity instrument and 4:1 allocation:
   python -m clustermde --mode curve --measurement-model rasch \
     --treatment-ratio 4

3) Smallest N for a 2.5-point severity MDE, starting from stored settings:
   python -m clustermde --mode search --outcome severity --target 2.5 \
     --settings design.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from clustermde.design import (
    AlphaLevel,
    DesignValidationError,
    MeasurementModel,
    PowerLevel,
    TrialDesignParameters,
)
from clustermde.mde import (
    OUTCOMES,
    cross_check,
    design_table,
    find_smallest_n_for_target,
    generate_curve,
    summarize_design,
)
from clustermde.settings import SettingsStore

logger = logging.getLogger(__name__)

# design fields settable from the command line, with their argument types
_PARAM_FLAGS = {
    "power": float,
    "alpha": float,
    "patients_per_cluster": int,
    "cluster_size_cv": float,
    "treatment_ratio": float,
    "control_attrition": float,
    "icc_severity": float,
    "r2_severity": float,
    "measurement_model": str,
    "sum_score_reliability": float,
    "alternative_reliability": float,
    "rater_variance_proportion": float,
    "icc_retention": float,
    "r2_retention": float,
    "survival_efficiency": float,
    "target_icc": float,
    "expected_icc": float,
    "icc_cluster_correlation": float,
    "n_followups": int,
}


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="clustermde",
        description="MDE and sample-size curves for a three-outcome cluster randomized trial",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument("--mode", choices=["summary", "curve", "table", "search", "crosscheck"],
                   default="summary")
    p.add_argument("--settings", default=None,
                   help="JSON settings file to start from")
    p.add_argument("--save", action="store_true",
                   help="Write the resulting parameters back to --settings")
    p.add_argument("-v", "--verbose", action="store_true")

    g = p.add_argument_group("design")
    g.add_argument("--power", type=float, choices=[lv.value for lv in PowerLevel])
    g.add_argument("--alpha", type=float, choices=[lv.value for lv in AlphaLevel])
    g.add_argument("--measurement-model", choices=[m.value for m in MeasurementModel])
    for dest, kind in _PARAM_FLAGS.items():
        if dest in ("power", "alpha", "measurement_model"):
            continue
        g.add_argument("--" + dest.replace("_", "-"), type=kind, default=None)

    r = p.add_argument_group("range")
    r.add_argument("--n", type=int, default=1000, help="Current design size (summary)")
    r.add_argument("--n-min", type=int, default=400)
    r.add_argument("--n-max", type=int, default=1300)
    r.add_argument("--step", type=int, default=None,
                   help="Grid step (default 50 for curves, 10 for searches)")

    s = p.add_argument_group("search")
    s.add_argument("--outcome", choices=list(OUTCOMES), default="severity")
    s.add_argument("--target", type=float, default=None,
                   help="Target MDE in the outcome's units")
    return p


def _resolve_params(args: argparse.Namespace) -> tuple[TrialDesignParameters, SettingsStore | None]:
    store = SettingsStore(args.settings) if args.settings else None
    params = store.load() if store is not None else TrialDesignParameters()
    changes = {
        dest: getattr(args, dest)
        for dest in _PARAM_FLAGS
        if getattr(args, dest) is not None
    }
    if changes:
        params = params.replace(**changes)
    return params, store


def _print_curve(points) -> None:
    print(f"{'N':>6} {'clusters':>8} {'sev MDE':>8} {'base':>8} {'d':>6} "
          f"{'ret pp':>7} {'tx rate':>8} {'ICC +/-':>8} {'poor?':>6}")
    for pt in points:
        icc = pt.icc_validation
        print(f"{pt.total_n:>6} {pt.n_clusters:>8} {pt.severity_mde:>8.3f} "
              f"{pt.severity_baseline_mde:>8.3f} {pt.severity_effect_size:>6.3f} "
              f"{pt.retention_mde:>7.2f} {pt.retention_treatment_rate:>7.1f}% "
              f"{icc.ci_half_width:>8.4f} {'yes' if icc.can_rule_out_poor else 'no':>6}")


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        params, store = _resolve_params(args)
    except DesignValidationError as exc:
        logger.error("invalid design parameter %s", exc)
        return 2

    try:
        if args.mode == "summary":
            print(summarize_design(params, args.n).summary())
        elif args.mode == "curve":
            step = args.step if args.step is not None else 50
            _print_curve(generate_curve(params, args.n_min, args.n_max, step))
        elif args.mode == "table":
            _print_curve(design_table(params))
        elif args.mode == "search":
            if args.target is None:
                logger.error("--target is required for --mode search")
                return 2
            step = args.step if args.step is not None else 10
            n = find_smallest_n_for_target(
                params, args.target, args.outcome,
                n_min=args.n_min, n_max=args.n_max, step=step,
            )
            print(f"Smallest N for {args.outcome} MDE <= {args.target:g}: {n}")
        else:
            step = args.step if args.step is not None else 50
            result = cross_check(params, args.n_min, args.n_max, step)
            print(result.summary())
            if not result.passed:
                return 1
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    if args.save:
        if store is None:
            logger.error("--save requires --settings")
            return 2
        store.save(params)
    return 0


if __name__ == "__main__":
    sys.exit(main())
