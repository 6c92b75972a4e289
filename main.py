import argparse

from uniform_stock.logger import setup_logger
from uniform_stock.pipelines.inventory import InventoryStatusPipeline
from uniform_stock.pipelines.recommendations import RecommendationPipeline


def run_process(report: str = "all", offline: bool = False, test_mode: bool = False) -> bool:
    """Runs the requested report pipelines. Returns False if any of them failed."""
    setup_logger()
    ok = True

    if report in ("inventory", "all"):
        ok = InventoryStatusPipeline(offline=offline, test_mode=test_mode).run() is not None and ok

    # Recommendations only exist on the backend.
    if report in ("recommendations", "all") and not offline:
        ok = RecommendationPipeline(test_mode=test_mode).run() is not None and ok

    return ok


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Uniform stock status reports")
    parser.add_argument(
        "report",
        nargs="?",
        default="all",
        choices=["inventory", "recommendations", "all"],
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="read the newest inventory export from INPUT_DIR instead of the API",
    )
    parser.add_argument("--test", action="store_true", help="skip the webhook post")
    args = parser.parse_args(argv)

    return 0 if run_process(args.report, offline=args.offline, test_mode=args.test) else 1


if __name__ == "__main__":
    raise SystemExit(main())
