"""Command-line entry point: run a complexity-selection study and print JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from polycv.config import StudyConfig
from polycv.errors import ConfigurationError

logger = logging.getLogger("polycv")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polycv",
        description="Choose polynomial degree and penalty strength by k-fold cross-validation",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--data-path", type=str, help="CSV or Parquet file with feature and target columns")
    source.add_argument("--synthetic", type=int, metavar="DAYS", help="Use a synthetic table of DAYS rows")
    parser.add_argument("--config", type=str, help="JSON config file; flags override it")
    parser.add_argument("--feature", type=str, help="Feature column (default min_temp)")
    parser.add_argument("--target", type=str, help="Target column (default trips)")
    parser.add_argument("--folds", type=int, dest="n_folds", help="Number of CV folds")
    parser.add_argument("--seed", type=int, help="Seed for fold assignment and the holdout split")
    parser.add_argument("--max-degree", type=int, help="Highest polynomial degree to compare")
    parser.add_argument("--basis-degree", type=int, help="Polynomial basis degree for ridge and lasso")
    parser.add_argument("--validation-fraction", type=float, help="Holdout fraction for the single split")
    parser.add_argument("--n-jobs", type=int, help="Parallel workers for fold evaluation")
    parser.add_argument("--plot-dir", type=str, help="Directory for figures")
    parser.add_argument(
        "--lenient", action="store_true",
        help="Keep candidates whose solver warns about convergence",
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    return parser


def config_from_args(args: argparse.Namespace) -> StudyConfig:
    overrides = {
        "data_path": args.data_path,
        "synthetic_days": args.synthetic,
        "feature": args.feature,
        "target": args.target,
        "n_folds": args.n_folds,
        "seed": args.seed,
        "max_degree": args.max_degree,
        "basis_degree": args.basis_degree,
        "validation_fraction": args.validation_fraction,
        "n_jobs": args.n_jobs,
        "plot_dir": args.plot_dir,
        "strict_convergence": False if args.lenient else None,
    }
    if args.config:
        return StudyConfig.from_file(args.config, **overrides)
    return StudyConfig.build(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    import matplotlib

    matplotlib.use("Agg")
    from polycv.study import run_study

    try:
        config = config_from_args(args)
        report = run_study(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("%s", e)
        print(json.dumps({"error": str(e)}), file=sys.stdout)
        return 2

    print(json.dumps(report, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
