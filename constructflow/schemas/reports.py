# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Chart-ready report shapes."""
from typing import List
from pydantic import BaseModel


class ChartPoint(BaseModel):
    name: str
    value: float
    fill: str


class ProfitRow(BaseModel):
    id: str
    name: str
    client: str
    status: str
    revenue: float
    cost: float
    profit: float
    marginPct: float


class ProfitLossTotals(BaseModel):
    totalRevenue: float
    totalCost: float
    totalProfit: float
    avgMargin: float


class ProfitLossReport(BaseModel):
    rows: List[ProfitRow]
    totals: ProfitLossTotals
    chart: List[ChartPoint]


class BudgetTotals(BaseModel):
    totalBudget: float
    totalFinalBid: float
    totalSpent: float
    totalRemaining: float
    totalProfitLoss: float
    avgUtilization: float


class BudgetReport(BaseModel):
    totals: BudgetTotals
    distribution: List[ChartPoint]


class StatusReport(BaseModel):
    data: List[ChartPoint]
