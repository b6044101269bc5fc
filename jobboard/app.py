import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional

from . import __version__
from .config import get_database_url, load_env
from .database import get_engine, init_database, transaction
from .errors import JobboardError
from .filters import CompanyFilter, JobFilter
from .logger import get_logger, reset_logger
from .repositories import companies, jobs
from .seed import seed_from_json


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _parse_data(raw: str) -> dict:
    try:
        data = json.loads(raw, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise SystemExit(f"--data is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise SystemExit("--data must be a JSON object")
    return data


def cmd_init(args: argparse.Namespace) -> None:
    engine = init_database(args.database_url)
    engine.dispose()
    print(f"Initialized {args.database_url}")


def cmd_seed(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    engine = init_database(args.database_url)
    try:
        with transaction(engine) as store:
            counts = seed_from_json(input_path, store)
    finally:
        engine.dispose()
    print(f"Done. companies={counts['companies']} jobs={counts['jobs']} skipped={counts['skipped']}")


def cmd_companies(args: argparse.Namespace, store) -> None:
    criteria = CompanyFilter(
        name=args.name,
        min_employees=args.min_employees,
        max_employees=args.max_employees,
    )
    _print_json({"companies": companies.find_all(store, criteria)})


def cmd_company(args: argparse.Namespace, store) -> None:
    _print_json({"company": companies.get(store, args.handle)})


def cmd_company_update(args: argparse.Namespace, store) -> None:
    data = _parse_data(args.data)
    _print_json({"company": companies.update(store, args.handle, data)})


def cmd_company_remove(args: argparse.Namespace, store) -> None:
    companies.remove(store, args.handle)
    _print_json({"deleted": args.handle})


def cmd_jobs(args: argparse.Namespace, store) -> None:
    criteria = JobFilter(
        title=args.title,
        min_salary=args.min_salary,
        has_equity=args.has_equity,
    )
    _print_json({"jobs": jobs.find_all(store, criteria)})


def cmd_job(args: argparse.Namespace, store) -> None:
    _print_json({"job": jobs.get(store, args.title)})


def cmd_job_update(args: argparse.Namespace, store) -> None:
    data = _parse_data(args.data)
    _print_json({"job": jobs.update(store, args.title, data)})


def cmd_job_remove(args: argparse.Namespace, store) -> None:
    jobs.remove(store, args.title)
    _print_json({"deleted": args.title})


def run_with_store(args: argparse.Namespace) -> None:
    """Run a repository command in one transaction, mapping domain errors to exit codes."""
    engine = get_engine(args.database_url)
    try:
        with transaction(engine) as store:
            args.store_func(args, store)
    except JobboardError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        raise SystemExit(4 if e.status_code == 404 else 2)
    finally:
        engine.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobboard", description="Companies and jobs store")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--database-url", help="SQLAlchemy database URL (or set DATABASE_URL)")
    parser.add_argument("--metrics", action="store_true", help="Log a summary of executed statements when done")

    subparsers = parser.add_subparsers(dest="command")

    ini = subparsers.add_parser("init", help="Create the companies and jobs tables")
    ini.set_defaults(func=cmd_init)

    sed = subparsers.add_parser("seed", help="Load companies and jobs from a JSON file")
    sed.add_argument("--input", required=True, help="Path to seed JSON")
    sed.set_defaults(func=cmd_seed)

    cos = subparsers.add_parser("companies", help="List companies")
    cos.add_argument("--name", help="Case-insensitive partial name match")
    cos.add_argument("--min-employees", type=int, help="Minimum number of employees")
    cos.add_argument("--max-employees", type=int, help="Maximum number of employees")
    cos.set_defaults(store_func=cmd_companies)

    co = subparsers.add_parser("company", help="Show a company and its jobs")
    co.add_argument("handle")
    co.set_defaults(store_func=cmd_company)

    cou = subparsers.add_parser("company-update", help="Partially update a company")
    cou.add_argument("handle")
    cou.add_argument("--data", required=True, help="JSON object of fields to change")
    cou.set_defaults(store_func=cmd_company_update)

    cor = subparsers.add_parser("company-remove", help="Delete a company")
    cor.add_argument("handle")
    cor.set_defaults(store_func=cmd_company_remove)

    jbs = subparsers.add_parser("jobs", help="List jobs")
    jbs.add_argument("--title", help="Case-insensitive partial title match")
    jbs.add_argument("--min-salary", type=int, help="Minimum salary")
    equity = jbs.add_mutually_exclusive_group()
    equity.add_argument("--has-equity", dest="has_equity", action="store_const", const=True,
                        help="Only jobs offering equity")
    equity.add_argument("--no-equity", dest="has_equity", action="store_const", const=False,
                        help="Only jobs without equity")
    jbs.set_defaults(store_func=cmd_jobs, has_equity=None)

    jb = subparsers.add_parser("job", help="Show a job")
    jb.add_argument("title")
    jb.set_defaults(store_func=cmd_job)

    jbu = subparsers.add_parser("job-update", help="Partially update a job")
    jbu.add_argument("title")
    jbu.add_argument("--data", required=True, help="JSON object of fields to change")
    jbu.set_defaults(store_func=cmd_job_update)

    jbr = subparsers.add_parser("job-remove", help="Delete a job")
    jbr.add_argument("title")
    jbr.set_defaults(store_func=cmd_job_remove)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (DATABASE_URL, JOBBOARD_LOG_LEVEL, ...)
    load_env()
    # Rebuild the logger so .env log settings apply
    reset_logger()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    args.database_url = args.database_url or get_database_url()

    if not hasattr(args, "func") and not hasattr(args, "store_func"):
        parser.print_help()
        return

    try:
        if hasattr(args, "func"):
            args.func(args)
        else:
            run_with_store(args)
    finally:
        if args.metrics:
            get_logger().log_metrics_summary()


if __name__ == "__main__":
    main()
