from collections import Counter
from datetime import date

from recovery_desk.schemas.record import RecordStatus
from recovery_desk.services.collections import RecordCollections
from recovery_desk.services.record_view_service import get_all_records_with_status
from recovery_desk.utils.dates import parse_date


def _pct(num: float, denom: float) -> float:
    return round(num / denom * 100, 1) if denom > 0 else 0.0


def _change(current: float, previous: float) -> int:
    return round((current - previous) / previous * 100) if previous > 0 else 0


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _in_month(value: str | None, year: int, month: int) -> bool:
    d = parse_date(value)
    return d is not None and d.year == year and d.month == month


def get_dashboard_analytics(records: RecordCollections, today: date | None = None) -> dict:
    today = today or date.today()
    this_month = (today.year, today.month)
    last_month = _shift_month(today.year, today.month, -1)

    hard_disks = records.hard_disks()
    inward = records.inward()
    unified = get_all_records_with_status(records)
    invoices = records.invoices()

    total_jobs = len(hard_disks)
    by_status = Counter(r.status for r in unified)
    completed_jobs = by_status.get(RecordStatus.COMPLETED, 0)

    def inward_in(year: int, month: int) -> int:
        return sum(1 for r in inward if _in_month(r.date, year, month))

    def completed_in(year: int, month: int) -> int:
        return sum(1 for r in unified if _in_month(r.completed_date, year, month))

    def revenue_in(year: int, month: int) -> float:
        return sum(inv.grand_total or 0 for inv in invoices if _in_month(inv.generated_date, year, month))

    total_revenue = sum(inv.grand_total or 0 for inv in invoices)
    monthly_revenue = revenue_in(*this_month)
    last_month_revenue = revenue_in(*last_month)
    monthly_inward = inward_in(*this_month)
    last_month_inward = inward_in(*last_month)

    # Turnaround: whole days from receipt to completion, completed jobs only
    turnaround = []
    for r in unified:
        if r.status is not RecordStatus.COMPLETED:
            continue
        received, completed = parse_date(r.received_date), parse_date(r.completed_date)
        if received and completed:
            turnaround.append((completed - received).days)
    avg_turnaround_days = round(sum(turnaround) / len(turnaround)) if turnaround else 0

    monthly_trend = []
    for offset in range(-5, 1):
        year, month = _shift_month(today.year, today.month, offset)
        monthly_trend.append({
            "month": date(year, month, 1).strftime("%b"),
            "inward": inward_in(year, month),
            "completed": completed_in(year, month),
            "revenue": revenue_in(year, month),
        })

    jobs_per_customer = Counter(r.customer_name for r in unified)
    top_customers = [
        {"name": name, "jobs": count}
        for name, count in sorted(jobs_per_customer.items(), key=lambda kv: -kv[1])[:5]
    ]

    return {
        "total_jobs": total_jobs,
        "total_customers": len(records.master_customers()),
        "total_revenue": total_revenue,
        "monthly_revenue": monthly_revenue,
        "last_month_revenue": last_month_revenue,
        "avg_revenue_per_job": total_revenue / total_jobs if total_jobs else 0,
        "pending_jobs": by_status.get(RecordStatus.PENDING, 0),
        "in_progress_jobs": by_status.get(RecordStatus.IN_PROGRESS, 0),
        "completed_jobs": completed_jobs,
        "completion_rate": _pct(completed_jobs, total_jobs),
        "avg_turnaround_days": avg_turnaround_days,
        "monthly_inward": monthly_inward,
        "last_month_inward": last_month_inward,
        "monthly_completed": completed_in(*this_month),
        "monthly_trend": monthly_trend,
        "status_distribution": [
            {"name": status.label, "value": by_status.get(status, 0)} for status in RecordStatus
        ],
        "top_customers": top_customers,
        "inward_trend": "up" if monthly_inward >= last_month_inward else "down",
        "inward_change": _change(monthly_inward, last_month_inward),
        "revenue_trend": "up" if monthly_revenue >= last_month_revenue else "down",
        "revenue_change": _change(monthly_revenue, last_month_revenue),
    }
