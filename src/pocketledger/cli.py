"""Command line interface for PocketLedger."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import CsvFormatError, LedgerValidationError
from .logging_config import setup_logging
from .services import reports
from .services.export_csv import export_transactions_csv
from .services.forms import validated_goal_fields, validated_transaction_fields
from .services.importers import import_transactions_file

pass_app = click.make_pass_decorator(AppContext)


def format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _filter_options(func):
    func = click.option("--category", default="All", show_default=True, help="Category filter.")(func)
    func = click.option("--month", default="", help="Month filter as YYYY-MM.")(func)
    return func


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track transactions and savings goals."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = create_app_context(config)


@cli.command("add-tx")
@click.option("--date", "date_", default="", help="YYYY-MM-DD, defaults to today.")
@click.option("--description", default="")
@click.option("--amount", required=True, help="Positive amount.")
@click.option("--category", default="Other", show_default=True)
@click.option(
    "--type", "kind", type=click.Choice(["expense", "income"]), default="expense", show_default=True
)
@pass_app
def add_tx(app: AppContext, date_: str, description: str, amount: str, category: str, kind: str) -> None:
    """Record a transaction."""

    try:
        fields = validated_transaction_fields(
            {"date": date_, "description": description, "amount": amount, "category": category, "kind": kind}
        )
    except LedgerValidationError as exc:
        raise click.ClickException(exc.message) from exc
    tx = app.ledger.add_transaction(fields)
    click.echo(f"Added {tx.kind} {tx.id}: {format_currency(tx.amount)} {tx.category}")


@cli.command("remove-tx")
@click.argument("transaction_id")
@pass_app
def remove_tx(app: AppContext, transaction_id: str) -> None:
    """Delete a transaction by id."""

    if app.ledger.remove_transaction(transaction_id):
        click.echo(f"Removed transaction {transaction_id}")
    else:
        click.echo(f"No transaction {transaction_id}; nothing removed")


@cli.command("add-goal")
@click.option("--name", default="")
@click.option("--target", default="")
@click.option("--current", default="0", show_default=True)
@click.option("--due", default="", help="Optional YYYY-MM.")
@pass_app
def add_goal(app: AppContext, name: str, target: str, current: str, due: str) -> None:
    """Record a savings goal."""

    try:
        fields = validated_goal_fields({"name": name, "target": target, "current": current, "due": due})
    except LedgerValidationError as exc:
        raise click.ClickException(exc.message) from exc
    goal = app.ledger.add_goal(fields)
    click.echo(f"Added goal {goal.id}: {goal.name} ({format_currency(goal.target)})")


@cli.command("remove-goal")
@click.argument("goal_id")
@pass_app
def remove_goal(app: AppContext, goal_id: str) -> None:
    """Delete a goal by id."""

    if app.ledger.remove_goal(goal_id):
        click.echo(f"Removed goal {goal_id}")
    else:
        click.echo(f"No goal {goal_id}; nothing removed")


@cli.command("add-category")
@click.argument("name")
@pass_app
def add_category(app: AppContext, name: str) -> None:
    """Register a new category."""

    if app.ledger.add_category(name):
        click.echo(f"Added category {name.strip()}")
    else:
        click.echo("Category is blank or already exists")


@cli.command("categories")
@pass_app
def list_categories(app: AppContext) -> None:
    """List categories in order."""

    for name in app.ledger.categories:
        click.echo(name)


@cli.command("list")
@_filter_options
@pass_app
def list_transactions(app: AppContext, month: str, category: str) -> None:
    """Show transactions passing the filters, newest first."""

    app.view.set_month_filter(month)
    app.view.set_category_filter(category)
    rows = app.view.filtered_transactions
    click.echo(f"Transactions ({len(rows)})")
    for tx in rows:
        click.echo(f"{tx.id}  {tx.date:<10}  {tx.description:<30.30}  {tx.category:<18.18}  {format_currency(tx.amount):>12}")


@cli.command("import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict/--lenient", default=None, help="Reject rows that need default values.")
@pass_app
def import_cmd(app: AppContext, csv_path: Path, strict: Optional[bool]) -> None:
    """Import transactions from a CSV file."""

    use_strict = app.config.STRICT_CSV if strict is None else strict
    try:
        result = import_transactions_file(csv_path, app.ledger, strict=use_strict)
    except CsvFormatError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Imported {result.created} transactions")
    if result.defaulted_rows:
        click.echo(f"{len(result.defaulted_rows)} row(s) used default values")


@cli.command("export")
@click.argument("output", required=False, type=click.Path(dir_okay=False, path_type=Path))
@pass_app
def export_cmd(app: AppContext, output: Optional[Path]) -> None:
    """Export every transaction to CSV."""

    path = export_transactions_csv(
        transactions=app.ledger.transactions, output_path=output or app.config.export_path
    )
    click.echo(f"Export written: {path}")


@cli.command("summary")
@_filter_options
@pass_app
def summary(app: AppContext, month: str, category: str) -> None:
    """Income, expenses and the category breakdown for the filtered view."""

    view = app.view
    view.set_month_filter(month)
    view.set_category_filter(category)
    totals = view.summary
    target = view.implied_monthly_target
    click.echo(f"Income:    {format_currency(totals.income)}")
    click.echo(f"Expenses:  {format_currency(totals.expenses)}")
    click.echo(f"Net:       {format_currency(totals.net)}")
    marker = " (over)" if view.over_target else ""
    click.echo(f"Implied monthly target: {format_currency(target)}{marker}")
    breakdown = view.category_breakdown
    if breakdown:
        click.echo("Spending by category:")
        for entry in breakdown:
            click.echo(f"  {entry.name:<20} {format_currency(entry.amount):>12}")


@cli.command("trend")
@pass_app
def trend(app: AppContext) -> None:
    """Income and expenses per month across the whole ledger."""

    for bucket in app.view.monthly_trend:
        click.echo(
            f"{bucket.month}  income {format_currency(bucket.income):>12}"
            f"  expenses {format_currency(bucket.expense):>12}"
        )


@cli.command("goals")
@pass_app
def goals(app: AppContext) -> None:
    """Progress towards each savings goal."""

    progress = app.view.goal_progress
    if not progress:
        click.echo("No goals yet.")
        return
    for item in progress:
        due = f"  due {item.due}" if item.due else ""
        click.echo(
            f"{item.goal_id}  {item.name}: {format_currency(item.current)} / "
            f"{format_currency(item.target)} ({item.percent}%){due}"
        )


@cli.command("chart")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@_filter_options
@pass_app
def chart(app: AppContext, output: Path, month: str, category: str) -> None:
    """Render the category breakdown and monthly trend to a PNG."""

    app.view.set_month_filter(month)
    app.view.set_category_filter(category)
    path = reports.export_report_png(app.view, output)
    click.echo(f"Chart written: {path}")


@cli.command("reset")
@click.option("--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
@pass_app
def reset(app: AppContext, yes: bool) -> None:
    """Delete all transactions and goals and restore default categories."""

    if not yes and not click.confirm(
        "This will delete all transactions, goals, and categories. Continue?"
    ):
        click.echo("Reset cancelled")
        return
    app.ledger.reset_all()
    click.echo("Ledger reset")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
