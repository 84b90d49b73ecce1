"""Command-line interface for the training ledger."""

import argparse
import re
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from training_ledger import __version__
from training_ledger.auth import CredentialGate
from training_ledger.config import Config, ConfigError, load_config
from training_ledger.ledger import LedgerError, TrainingLedger
from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import DateRange, PeriodSelection
from training_ledger.models.report import FinancialSummary, WorkloadLevel
from training_ledger.models.training import Session, Training
from training_ledger.processing.period_resolver import resolve_period
from training_ledger.processing.schedule_generator import (
    WEEKDAY_NAMES,
    generate_schedule_sessions,
    parse_weekdays,
)
from training_ledger.processing.withholding import next_payment_due
from training_ledger.storage.blob_store import BlobStore
from training_ledger.utils.date_utils import parse_date, parse_year_month
from training_ledger.utils.decimal_utils import ZERO, format_currency, parse_amount
from training_ledger.utils.duration_utils import format_time_range, minutes_between
from training_ledger.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

console = Console()
logger = get_logger(__name__)

DEFAULT_WORKBOOK_NAME = "training_report.xlsx"

WORKLOAD_STYLES = {
    WorkloadLevel.HIGH: "red",
    WorkloadLevel.NORMAL: "white",
    WorkloadLevel.LOW: "green",
}


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _year_month_arg(value: str) -> tuple[int, int]:
    try:
        return parse_year_month(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _amount_arg(value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _add_period_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--month",
        type=_year_month_arg,
        metavar="YYYY-MM",
        help="Single calendar month",
    )
    parser.add_argument(
        "--from",
        dest="start_month",
        type=_year_month_arg,
        metavar="YYYY-MM",
        help="First month of a custom range",
    )
    parser.add_argument(
        "--to",
        dest="end_month",
        type=_year_month_arg,
        metavar="YYYY-MM",
        help="Last month of a custom range",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="training-ledger",
        description="Track training sessions, hours and income for a freelance trainer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s login
  %(prog)s summary --month 2026-03
  %(prog)s summary --from 2026-01 --to 2026-06
  %(prog)s add-training --name "Excel Avançado" --rate 35 --start 2026-03-02 \\
      --days mon,wed --start-time 10:00 --end-time 12:00 --count 8
  %(prog)s export --output-dir reports --format both
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Configuration directory (default: ./config)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the stored ledger (overrides settings)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # Access
    login = subparsers.add_parser("login", help="Unlock the ledger")
    login.add_argument("--username", "-u", default=None)
    login.add_argument("--password", "-p", default=None)
    subparsers.add_parser("logout", help="Lock the ledger again")

    # Reports
    summary = subparsers.add_parser("summary", help="Hours and income for a period")
    _add_period_arguments(summary)
    breakdown = subparsers.add_parser(
        "breakdown", help="Per-training totals (default: year to date)"
    )
    breakdown.add_argument("--from", dest="start_month", type=_year_month_arg, metavar="YYYY-MM")
    breakdown.add_argument("--to", dest="end_month", type=_year_month_arg, metavar="YYYY-MM")
    subparsers.add_parser("withholding", help="Withholding payment schedule")
    sessions = subparsers.add_parser("sessions", help="List trainings, or one training's sessions")
    sessions.add_argument("training_id", nargs="?", default=None)

    # Trainings
    add_training = subparsers.add_parser("add-training", help="Create a training")
    add_training.add_argument("--id", default=None, help="Identifier (default: derived from name)")
    add_training.add_argument("--name", required=True)
    add_training.add_argument("--instructor", default="")
    add_training.add_argument("--rate", type=_amount_arg, default=ZERO, help="Hourly rate")
    add_training.add_argument("--color", default="")
    add_training.add_argument("--extra", type=_amount_arg, default=None, help="Flat extra value")
    add_training.add_argument("--start", type=_date_arg, default=None, help="First schedule day")
    add_training.add_argument("--days", default=None, help="Weekdays, e.g. mon,wed")
    add_training.add_argument("--start-time", default=None, metavar="HH:MM")
    add_training.add_argument("--end-time", default=None, metavar="HH:MM")
    add_training.add_argument("--count", type=int, default=0, help="Number of sessions")

    update_training = subparsers.add_parser("update-training", help="Change a training")
    update_training.add_argument("training_id")
    update_training.add_argument("--name", default=None)
    update_training.add_argument("--instructor", default=None)
    update_training.add_argument("--rate", type=_amount_arg, default=None)
    update_training.add_argument("--color", default=None)
    update_training.add_argument("--extra", type=_amount_arg, default=None)
    update_training.add_argument("--clear-extra", action="store_true", help="Remove the extra")

    delete_training = subparsers.add_parser("delete-training", help="Remove a training")
    delete_training.add_argument("training_id")

    # Sessions
    add_session = subparsers.add_parser("add-session", help="Add a session to a training")
    add_session.add_argument("training_id")
    add_session.add_argument("--date", type=_date_arg, required=True)
    add_session.add_argument("--start-time", required=True, metavar="HH:MM")
    add_session.add_argument("--end-time", required=True, metavar="HH:MM")
    add_session.add_argument("--validated", action="store_true")

    edit_session = subparsers.add_parser("edit-session", help="Move or retime a session")
    edit_session.add_argument("training_id")
    edit_session.add_argument("session_id")
    edit_session.add_argument("--date", type=_date_arg, default=None)
    edit_session.add_argument("--start-time", default=None, metavar="HH:MM")
    edit_session.add_argument("--end-time", default=None, metavar="HH:MM")

    delete_session = subparsers.add_parser("delete-session", help="Remove a session")
    delete_session.add_argument("training_id")
    delete_session.add_argument("session_id")

    validate_session = subparsers.add_parser("validate-session", help="Mark a session as held")
    validate_session.add_argument("training_id")
    validate_session.add_argument("session_id")
    validate_session.add_argument("--undo", action="store_true", help="Clear the mark instead")

    # Adjustments and settings
    add_adjustment = subparsers.add_parser("add-adjustment", help="Record an income or deduction")
    add_adjustment.add_argument("--description", required=True)
    add_adjustment.add_argument("--value", type=_amount_arg, required=True)
    add_adjustment.add_argument("--date", type=_date_arg, default=None, help="Default: today")

    delete_adjustment = subparsers.add_parser("delete-adjustment", help="Remove an adjustment")
    delete_adjustment.add_argument("adjustment_id")

    set_tax_rate = subparsers.add_parser("set-tax-rate", help="Set the withholding percentage")
    set_tax_rate.add_argument("rate", type=_amount_arg)

    set_period = subparsers.add_parser("set-period", help="Set the default analysed period")
    _add_period_arguments(set_period)

    export = subparsers.add_parser("export", help="Write CSV and/or Excel reports")
    export.add_argument("--output-dir", type=Path, default=Path("reports"))
    export.add_argument("--format", choices=["csv", "xlsx", "both"], default="both")

    reset = subparsers.add_parser("reset", help="Restore the built-in trainings")
    reset.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def validate_output_path(path: Path, base_dir: Path | None = None) -> Path:
    """Validate that output path is within allowed directory.

    Args:
        path: The path to validate.
        base_dir: Base directory to constrain paths within (default: cwd).

    Returns:
        The resolved, validated path.

    Raises:
        ValueError: If the path escapes the allowed directory.
    """
    if base_dir is None:
        base_dir = Path.cwd()

    resolved_base = base_dir.resolve()
    resolved_path = (base_dir / path).resolve()

    try:
        resolved_path.relative_to(resolved_base)
    except ValueError:
        raise ValueError(
            f"Invalid path: '{path}' escapes the allowed directory. "
            f"Paths must be within '{resolved_base}'"
        ) from None

    return resolved_path


def selection_from_args(args: argparse.Namespace) -> PeriodSelection | None:
    """Build a period selection from --month or --from/--to.

    Raises:
        ValueError: On conflicting or incomplete period options.
    """
    month = getattr(args, "month", None)
    start_month = getattr(args, "start_month", None)
    end_month = getattr(args, "end_month", None)

    if month is not None:
        if start_month is not None or end_month is not None:
            raise ValueError("Use either --month or --from/--to, not both")
        return PeriodSelection.for_month(date(month[0], month[1], 1))
    if start_month is None and end_month is None:
        return None
    if start_month is None or end_month is None:
        raise ValueError("A custom range needs both --from and --to")
    return PeriodSelection.custom(start_month, end_month)


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "training"


def _money(amount: Decimal, config: Config) -> str:
    return format_currency(
        amount, config.reporting.currency_symbol, config.reporting.decimal_places
    )


def display_summary(summary: FinancialSummary, config: Config) -> None:
    """Print the period summary, its monthly buckets and adjustments."""
    table = Table(title=f"Summary {summary.date_range.display}")
    table.add_column("Item")
    table.add_column("Value", justify="right")
    table.add_row("Hours", f"{summary.hours}h")
    table.add_row("Sessions", str(summary.session_count))
    table.add_row("Training income", _money(summary.training_income, config))
    table.add_row("Extras", _money(summary.extras_total, config))
    table.add_row("Adjustments", _money(summary.adjustments_total, config))
    table.add_row("Gross", _money(summary.gross, config))
    table.add_row(f"Tax ({summary.tax_rate_percent}%)", _money(summary.tax, config))
    table.add_row("[bold]Net[/bold]", f"[bold]{_money(summary.net, config)}[/bold]")
    console.print(table)

    if len(summary.months) > 1:
        reference_year = summary.date_range.start.year
        months = Table(title="Monthly")
        for column in ("Month", "Hours", "Sessions", "Revenue", "Workload"):
            months.add_column(column, justify="left" if column == "Month" else "right")
        for bucket in summary.months:
            level = summary.workload_level(bucket)
            months.add_row(
                bucket.label(reference_year),
                f"{bucket.hours}h",
                str(bucket.session_count),
                _money(bucket.revenue, config),
                f"[{WORKLOAD_STYLES[level]}]{level.value}[/{WORKLOAD_STYLES[level]}]",
            )
        console.print(months)
        peak = summary.peak_month
        low = summary.low_month
        best = summary.peak_revenue_month
        if peak is not None and low is not None and best is not None:
            console.print(
                f"Average {summary.average_hours_per_month:.1f}h/month, "
                f"peak {peak.label(reference_year)} ({peak.hours}h), "
                f"low {low.label(reference_year)} ({low.hours}h), "
                f"best revenue {best.label(reference_year)} ({_money(best.revenue, config)})"
            )

    if summary.adjustments:
        adjustments = Table(title="Adjustments")
        adjustments.add_column("ID", style="dim")
        adjustments.add_column("Date")
        adjustments.add_column("Description")
        adjustments.add_column("Value", justify="right")
        for adjustment in sorted(summary.adjustments, key=lambda a: a.date):
            adjustments.add_row(
                adjustment.id,
                adjustment.date.isoformat(),
                adjustment.description,
                _money(adjustment.value, config),
            )
        console.print(adjustments)


# ----------------------------------------------------------------------
# Command handlers: (args, ledger, config) -> exit code
# ----------------------------------------------------------------------


def summary_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    summary = ledger.summary(selection_from_args(args))
    display_summary(summary, config)
    return 0


def breakdown_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    date_range: DateRange | None = None
    selection = selection_from_args(args)
    if selection is not None:
        date_range = resolve_period(selection)
    rows = ledger.breakdown(date_range, today=date.today())

    table = Table(title="Revenue by training")
    table.add_column("Training")
    table.add_column("Rate", justify="right")
    table.add_column("Hours", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("Extras", justify="right")
    table.add_column("Revenue", justify="right")
    for row in rows:
        table.add_row(
            row.short_name,
            _money(row.hourly_rate, config),
            f"{row.hours}h",
            str(row.session_count),
            _money(row.extras, config),
            _money(row.revenue, config),
        )
    console.print(table)
    total = sum((row.revenue for row in rows), ZERO)
    console.print(f"Total: [bold]{_money(total, config)}[/bold]")
    return 0


def withholding_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    payments = ledger.withholding(config.withholding)

    table = Table(title=f"Withholding {config.withholding.year}")
    table.add_column("Period")
    table.add_column("Due")
    table.add_column("Revenue", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Withholding", justify="right")
    for payment in payments:
        table.add_row(
            payment.label,
            payment.due_date.isoformat(),
            _money(payment.revenue, config),
            f"{payment.tax_rate_percent}%",
            _money(payment.tax, config),
        )
    console.print(table)

    upcoming = next_payment_due(payments, date.today())
    if upcoming is not None:
        console.print(
            f"Next payment: [bold]{upcoming.label}[/bold] "
            f"{_money(upcoming.tax, config)} due {upcoming.due_date.isoformat()}"
        )
    return 0


def sessions_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    if args.training_id is None:
        table = Table(title="Trainings")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Rate", justify="right")
        table.add_column("Extra", justify="right")
        table.add_column("Sessions", justify="right")
        table.add_column("Validated", justify="right")
        for training in ledger.trainings:
            table.add_row(
                training.id,
                training.name,
                _money(training.hourly_rate, config),
                _money(training.extra_value, config) if training.has_extra else "-",
                str(len(training.sessions)),
                str(sum(1 for s in training.sessions if s.validated)),
            )
        console.print(table)
        return 0

    training = ledger.get_training(args.training_id)
    table = Table(title=training.name)
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Duration", justify="right")
    table.add_column("Validated", justify="center")
    for session in sorted(training.sessions, key=lambda s: s.date):
        table.add_row(
            session.id,
            session.date.isoformat(),
            session.time,
            session.duration_label,
            "[green]yes[/green]" if session.validated else "",
        )
    console.print(table)
    return 0


def add_training_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    training_id = args.id or slugify(args.name)

    sessions: list[Session] = []
    schedule = ""
    if args.days:
        if args.start is None or not args.start_time or not args.end_time or args.count <= 0:
            raise ValueError("--days needs --start, --start-time, --end-time and a positive --count")
        weekdays = parse_weekdays(args.days)
        sessions = generate_schedule_sessions(
            args.start, weekdays, args.start_time, args.end_time, args.count, training_id
        )
        day_names = ", ".join(WEEKDAY_NAMES[d].title() for d in sorted(weekdays))
        schedule = f"{day_names} {format_time_range(args.start_time, args.end_time)}"
        if len(sessions) < args.count:
            console.print(
                f"[yellow]Only {len(sessions)} of {args.count} sessions fit in the "
                "lookahead window[/yellow]"
            )

    training = Training(
        id=training_id,
        name=args.name,
        instructor=args.instructor,
        hourly_rate=args.rate,
        color=args.color,
        extra_value=args.extra,
        sessions=sessions,
        total_sessions=len(sessions),
        schedule=schedule,
    )
    ledger.add_training(training)
    console.print(f"[green]Added training '{training.name}' ({training.id}) with {len(sessions)} sessions[/green]")
    return 0


def update_training_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    changes: dict[str, object] = {}
    for option in ("name", "instructor", "color"):
        value = getattr(args, option)
        if value is not None:
            changes[option] = value
    if args.rate is not None:
        changes["hourly_rate"] = args.rate
    if args.clear_extra:
        changes["extra_value"] = None
    elif args.extra is not None:
        changes["extra_value"] = args.extra

    if not changes:
        console.print("[yellow]Nothing to update[/yellow]")
        return 0
    ledger.update_training(args.training_id, **changes)
    console.print(f"[green]Updated training {args.training_id}[/green]")
    return 0


def delete_training_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    training = ledger.delete_training(args.training_id)
    console.print(f"[green]Deleted training '{training.name}' and {len(training.sessions)} sessions[/green]")
    return 0


def add_session_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    training = ledger.get_training(args.training_id)
    session = Session(
        id=training.next_session_id(),
        date=args.date,
        time=format_time_range(args.start_time, args.end_time),
        duration_minutes=minutes_between(args.start_time, args.end_time),
        validated=args.validated,
    )
    ledger.add_session(training.id, session)
    console.print(f"[green]Added session {session.id} on {session.date.isoformat()} ({session.duration_label})[/green]")
    return 0


def edit_session_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    time = None
    if args.start_time or args.end_time:
        if not (args.start_time and args.end_time):
            raise ValueError("Give both --start-time and --end-time to change the time")
        time = format_time_range(args.start_time, args.end_time)
    session = ledger.update_session(args.training_id, args.session_id, session_date=args.date, time=time)
    console.print(
        f"[green]Session {session.id}: {session.date.isoformat()} {session.time} "
        f"({session.duration_label})[/green]"
    )
    return 0


def delete_session_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    session = ledger.delete_session(args.training_id, args.session_id)
    console.print(f"[green]Deleted session {session.id} on {session.date.isoformat()}[/green]")
    return 0


def validate_session_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    session = ledger.update_session(args.training_id, args.session_id, validated=not args.undo)
    state = "validated" if session.validated else "not validated"
    console.print(f"[green]Session {session.id} is {state}[/green]")
    return 0


def add_adjustment_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    adjustment = FinancialAdjustment(
        description=args.description,
        value=args.value,
        date=args.date or date.today(),
    )
    ledger.add_adjustment(adjustment)
    console.print(f"[green]Added adjustment {adjustment.id}: {_money(adjustment.value, config)}[/green]")
    return 0


def delete_adjustment_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    adjustment = ledger.delete_adjustment(args.adjustment_id)
    console.print(f"[green]Deleted adjustment '{adjustment.description}'[/green]")
    return 0


def set_tax_rate_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    rate = ledger.set_tax_rate(args.rate)
    console.print(f"[green]Tax rate set to {rate}%[/green]")
    return 0


def set_period_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    selection = selection_from_args(args)
    if selection is None:
        raise ValueError("Give --month or --from/--to")
    date_range = ledger.set_period(selection)
    if date_range.is_empty:
        console.print(
            f"[yellow]Period {selection.describe()} is inverted; reports will be empty[/yellow]"
        )
    else:
        console.print(f"[green]Period set to {selection.describe()}[/green]")
    return 0


def export_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    from training_ledger.output import CSVExporter, ExcelWriter

    output_dir = validate_output_path(args.output_dir)
    summary = ledger.summary()
    # Every file of one export covers the stored period
    breakdown = ledger.breakdown(ledger.current_range())
    withholding = ledger.withholding(config.withholding)

    if args.format in ("csv", "both"):
        files = CSVExporter(config).export(output_dir, summary, breakdown, withholding)
        console.print(f"[green]Wrote {len(files)} CSV files to {output_dir}[/green]")
    if args.format in ("xlsx", "both"):
        workbook_path = output_dir / DEFAULT_WORKBOOK_NAME
        ExcelWriter(config).write(workbook_path, summary, breakdown, withholding)
        console.print(f"[green]Wrote {workbook_path}[/green]")
    return 0


def reset_command(args: argparse.Namespace, ledger: TrainingLedger, config: Config) -> int:
    if not args.yes:
        response = console.input(
            "[bold]Replace all trainings with the built-in set and drop adjustments? [y/N][/bold] "
        ).strip().lower()
        if response not in ("y", "yes"):
            console.print("Reset cancelled")
            return 0
    ledger.reset()
    console.print(f"[green]Ledger reset: {len(ledger.trainings)} trainings[/green]")
    return 0


COMMAND_HANDLERS = {
    "summary": summary_command,
    "breakdown": breakdown_command,
    "withholding": withholding_command,
    "sessions": sessions_command,
    "add-training": add_training_command,
    "update-training": update_training_command,
    "delete-training": delete_training_command,
    "add-session": add_session_command,
    "edit-session": edit_session_command,
    "delete-session": delete_session_command,
    "validate-session": validate_session_command,
    "add-adjustment": add_adjustment_command,
    "delete-adjustment": delete_adjustment_command,
    "set-tax-rate": set_tax_rate_command,
    "set-period": set_period_command,
    "export": export_command,
    "reset": reset_command,
}


def login_command(args: argparse.Namespace, gate: CredentialGate) -> int:
    if not gate.enabled:
        console.print("[dim]Login is disabled in settings[/dim]")
        return 0
    username = args.username or console.input("Username: ")
    password = args.password if args.password is not None else console.input("Password: ", password=True)
    if not gate.login(username, password):
        console.print("[red]Invalid username or password[/red]")
        return 1
    console.print("[green]Logged in[/green]")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = get_log_level(args.verbose)

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    if args.data_dir is not None:
        config.storage.data_dir = args.data_dir

    store = BlobStore(config.storage.data_dir)
    gate = CredentialGate(config.auth, store)

    if args.command == "login":
        return login_command(args, gate)
    if args.command == "logout":
        gate.logout()
        console.print("Logged out")
        return 0
    if not gate.is_authenticated:
        console.print("[red]Not logged in. Run 'training-ledger login' first.[/red]")
        return 1

    ledger = TrainingLedger.open(store, default_tax_rate=config.tax.retention_rate)
    logger.debug(f"Running {args.command} on period {ledger.state.period.describe()}")

    handler = COMMAND_HANDLERS[args.command]
    try:
        return handler(args, ledger, config)
    except (LedgerError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
