# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pure functions shaping project financials into chart series.

Projects are the loosely-typed dicts saved in snapshot payloads; every
field is optional and non-numeric amounts count as zero.
"""
import math
from collections import OrderedDict
from typing import Any, Dict, Iterable, List

CHART_PALETTE = (
    "hsl(var(--chart-1))",
    "hsl(var(--chart-2))",
    "hsl(var(--chart-3))",
    "hsl(var(--chart-4))",
    "hsl(var(--chart-5))",
)
MUTED_FILL = "hsl(var(--muted))"
LOSS_FILL = "hsl(var(--destructive))"

STATUS_FILLS = {
    "Active": CHART_PALETTE[0],
    "Planning": CHART_PALETTE[1],
    "Completed": CHART_PALETTE[2],
    "On Hold": CHART_PALETTE[3],
}

TOP_PROJECTS = 5


def _num(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    # "nan" and "inf" parse as floats but are not amounts
    return number if math.isfinite(number) else 0.0


def _items(project: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = project.get(key)
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, dict)]


def _sum(items: Iterable[Dict[str, Any]], field: str) -> float:
    return sum(_num(i.get(field)) for i in items)


def _projects(projects: Iterable[Any]) -> List[Dict[str, Any]]:
    return [p for p in projects if isinstance(p, dict)]


def profit_row(project: Dict[str, Any]) -> Dict[str, Any]:
    expenses_total = _sum(_items(project, "expensesData"), "amount")
    budget_cost = _sum(_items(project, "budgetData"), "originalBudget")
    # Actual expenses win; the planned budget stands in until there are any.
    cost = expenses_total if expenses_total > 0 else budget_cost
    revenue = _num(project.get("finalBid"))
    profit = revenue - cost
    return {
        "id": str(project.get("id", "")),
        "name": project.get("name") or "Untitled Project",
        "client": project.get("client") or "Unknown client",
        "status": project.get("status") or "Active",
        "revenue": revenue,
        "cost": cost,
        "profit": profit,
        "marginPct": (profit / revenue) * 100 if revenue > 0 else 0.0,
    }


def profit_loss(projects: Iterable[Any]) -> Dict[str, Any]:
    rows = [profit_row(p) for p in _projects(projects)]
    if rows:
        totals = {
            "totalRevenue": sum(r["revenue"] for r in rows),
            "totalCost": sum(r["cost"] for r in rows),
            "totalProfit": sum(r["profit"] for r in rows),
            "avgMargin": sum(r["marginPct"] for r in rows) / len(rows),
        }
    else:
        totals = {"totalRevenue": 0.0, "totalCost": 0.0, "totalProfit": 0.0, "avgMargin": 0.0}

    top = sorted(rows, key=lambda r: r["revenue"], reverse=True)[:TOP_PROJECTS]
    chart = [
        {"name": r["name"], "value": r["profit"],
         "fill": CHART_PALETTE[1] if r["profit"] >= 0 else LOSS_FILL}
        for r in top
    ]
    return {"rows": rows, "totals": totals, "chart": chart}


def budget_summary(projects: Iterable[Any]) -> Dict[str, Any]:
    budget_sum = final_bid_sum = spent_sum = 0.0
    by_category: Dict[str, float] = OrderedDict()

    for project in _projects(projects):
        expenses = _items(project, "expensesData")
        budget_from_table = _sum(_items(project, "budgetData"), "originalBudget")
        spent_from_table = _sum(expenses, "amount")

        budget_sum += budget_from_table or _num(project.get("budget"))
        spent_sum += spent_from_table or _num(project.get("spent"))
        final_bid_sum += _num(project.get("finalBid"))

        for expense in expenses:
            category = expense.get("category") or "Uncategorized"
            by_category[category] = by_category.get(category, 0.0) + _num(expense.get("amount"))

    ranked = sorted(by_category.items(), key=lambda kv: kv[1], reverse=True)
    distribution = [
        {"name": name, "value": value, "fill": CHART_PALETTE[i % len(CHART_PALETTE)]}
        for i, (name, value) in enumerate(ranked)
    ]
    return {
        "totals": {
            "totalBudget": budget_sum,
            "totalFinalBid": final_bid_sum,
            "totalSpent": spent_sum,
            "totalRemaining": budget_sum - spent_sum,
            "totalProfitLoss": final_bid_sum - spent_sum,
            "avgUtilization": (spent_sum / budget_sum) * 100 if budget_sum > 0 else 0.0,
        },
        "distribution": distribution,
    }


def project_status(projects: Iterable[Any]) -> List[Dict[str, Any]]:
    counts: Dict[str, int] = OrderedDict()
    for project in _projects(projects):
        status = project.get("status") or "Active"
        counts[status] = counts.get(status, 0) + 1
    return [
        {"name": status, "value": count, "fill": STATUS_FILLS.get(status, MUTED_FILL)}
        for status, count in counts.items()
    ]
