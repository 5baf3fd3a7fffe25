"""Chart rendering for ledger reports."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .aggregation import CategoryTotal, LedgerView, MonthBucket

PALETTE = [
    "#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#A28CF4",
    "#F472B6", "#34D399", "#FB7185", "#60A5FA", "#F59E0B",
]
INCOME_COLOR = "#10B981"
EXPENSE_COLOR = "#EF4444"


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def draw_category_breakdown(ax: Axes, breakdown: Sequence[CategoryTotal]) -> None:
    """Draw expense totals per category as a donut on ``ax``.

    Slices keep the breakdown's own order.
    """

    sizes = [entry.amount for entry in breakdown if entry.amount > 0]
    labels = [entry.name for entry in breakdown if entry.amount > 0]
    if not sizes:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return

    total = sum(sizes)
    colors = [PALETTE[i % len(PALETTE)] for i in range(len(sizes))]
    wedges, _texts, autotexts = ax.pie(
        sizes,
        labels=None,
        autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
        wedgeprops=dict(width=0.45, edgecolor="white", linewidth=1.5),
        startangle=90,
        colors=colors,
        pctdistance=0.78,
    )
    for autotext in autotexts:
        autotext.set_fontsize(9)
        autotext.set_color("white")

    ax.text(0, 0.08, "Total Spending", ha="center", va="center", fontsize=10, color="#666")
    ax.text(0, -0.08, f"${total:,.2f}", ha="center", va="center", fontsize=14, fontweight="bold")
    ax.legend(
        wedges,
        [f"{label}: ${size:,.2f}" for label, size in zip(labels, sizes)],
        title="Categories",
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        fontsize=8,
    )
    ax.axis("equal")
    ax.set_title("Category Breakdown", fontsize=13, fontweight="bold")


def draw_monthly_trend(ax: Axes, trend: Sequence[MonthBucket]) -> None:
    """Draw income and expense bars side by side for each month."""

    if not trend:
        ax.text(0.5, 0.5, "No dated transactions", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return

    positions = list(range(len(trend)))
    width = 0.4
    ax.bar([p - width / 2 for p in positions], [b.income for b in trend], width, label="Income", color=INCOME_COLOR)
    ax.bar([p + width / 2 for p in positions], [b.expense for b in trend], width, label="Expenses", color=EXPENSE_COLOR)
    ax.set_xticks(positions)
    ax.set_xticklabels([b.month for b in trend], rotation=45, ha="right")
    ax.grid(axis="y", linestyle="--", alpha=0.5)
    ax.legend()
    ax.set_title("Monthly Trend", fontsize=13, fontweight="bold")


def build_category_chart(breakdown: Sequence[CategoryTotal]) -> Figure:
    fig = Figure(figsize=(9, 6))
    draw_category_breakdown(fig.add_subplot(1, 1, 1), breakdown)
    return fig


def build_trend_chart(trend: Sequence[MonthBucket]) -> Figure:
    fig = Figure(figsize=(9, 5))
    draw_monthly_trend(fig.add_subplot(1, 1, 1), trend)
    return fig


def build_report_figure(view: LedgerView) -> Figure:
    """Both charts for the current view on one figure."""

    fig = Figure(figsize=(16, 6))
    draw_category_breakdown(fig.add_subplot(1, 2, 1), view.category_breakdown)
    draw_monthly_trend(fig.add_subplot(1, 2, 2), view.monthly_trend)
    return fig


def export_report_png(
    view: LedgerView,
    output_path: Path,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the report charts to PNG and return the path."""

    fig = build_report_figure(view)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    return output_path
