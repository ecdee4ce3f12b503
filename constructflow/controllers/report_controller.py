# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: chart-ready financial reports."""
from fastapi import APIRouter, Depends

from constructflow.core.dependencies import get_report_service
from constructflow.schemas.reports import BudgetReport, ProfitLossReport, StatusReport
from constructflow.services.report_service import ReportService

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/profit-loss", response_model=ProfitLossReport)
def profit_loss_report(service: ReportService = Depends(get_report_service)):
    return service.profit_loss()


@router.get("/budget", response_model=BudgetReport)
def budget_report(service: ReportService = Depends(get_report_service)):
    return service.budget()


@router.get("/project-status", response_model=StatusReport)
def project_status_report(service: ReportService = Depends(get_report_service)):
    return StatusReport(data=service.project_status())
