import io

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from services.report_service import CategoryTotal
from utils.constants import CHART_COLORS
from utils.currency import format_currency
from utils.date_helpers import parse_month


class ChartService:
    """Renders report rows to PNG bytes. Uses Figure directly, never pyplot."""

    def __init__(self, currency_symbol: str = "$", dpi: int = 80):
        self._symbol = currency_symbol
        self._dpi = dpi

    def monthly_bars(self, rows: list[dict]) -> bytes:
        """Income vs expense bars from ReportService.get_monthly_trend rows."""
        fig, ax = self._new_figure(figsize=(6, 3))
        if not rows or not any(r["income"] or r["expense"] for r in rows):
            self._no_data(ax)
            return self._render(fig)

        labels = [self._short_month(r["month"]) for r in rows]
        x = list(range(len(rows)))
        w = 0.35
        ax.bar([i - w / 2 for i in x], [r["income"] for r in rows], w,
               color=CHART_COLORS["income"], label="Income")
        ax.bar([i + w / 2 for i in x], [r["expense"] for r in rows], w,
               color=CHART_COLORS["expense"], label="Expense")
        ax.set_xticks(x)
        ax.set_xticklabels(labels, rotation=45 if len(labels) > 12 else 0, ha="right")
        ax.yaxis.set_major_formatter(self._money_formatter())
        ax.legend(fontsize=8)
        return self._render(fig)

    def category_pie(self, groups: list[CategoryTotal], colors: dict[str, str] | None = None) -> bytes:
        """Pie of ReportService.group_by_category output."""
        fig, ax = self._new_figure(figsize=(4, 4))
        groups = [g for g in groups if g.total > 0]
        if not groups:
            self._no_data(ax, "No expense data")
            return self._render(fig)

        colors = colors or {}
        ax.pie(
            [g.total for g in groups],
            labels=[g.category for g in groups],
            colors=[colors.get(g.category, "#888888") for g in groups] if colors else None,
            autopct="%1.0f%%",
            textprops={"fontsize": 8},
        )
        ax.axis("equal")
        return self._render(fig)

    def net_line(self, rows: list[dict]) -> bytes:
        """Monthly net cash flow line from get_monthly_trend rows."""
        fig, ax = self._new_figure(figsize=(6, 3))
        if not rows:
            self._no_data(ax)
            return self._render(fig)

        x = list(range(len(rows)))
        ax.plot(x, [r["net"] for r in rows], marker="o", color=CHART_COLORS["net"])
        ax.axhline(0, color="gray", linewidth=0.8)
        ax.set_xticks(x)
        ax.set_xticklabels([self._short_month(r["month"]) for r in rows])
        ax.yaxis.set_major_formatter(self._money_formatter())
        return self._render(fig)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _new_figure(self, figsize):
        fig = Figure(figsize=figsize, dpi=self._dpi, tight_layout=True)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)
        ax.tick_params(labelsize=8)
        return fig, ax

    @staticmethod
    def _no_data(ax, text: str = "No data"):
        ax.text(0.5, 0.5, text, ha="center", va="center",
                transform=ax.transAxes, color="gray")
        ax.set_xticks([])
        ax.set_yticks([])

    def _money_formatter(self) -> FuncFormatter:
        return FuncFormatter(lambda v, _: format_currency(v, self._symbol))

    @staticmethod
    def _short_month(month_str: str) -> str:
        d = parse_month(month_str)
        return d.strftime("%b %y") if d else month_str

    @staticmethod
    def _render(fig: Figure) -> bytes:
        buf = io.BytesIO()
        fig.savefig(buf, format="png")
        return buf.getvalue()
