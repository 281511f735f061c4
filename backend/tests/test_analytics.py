from datetime import date

from recovery_desk.schemas.document import GeneratedInvoice
from recovery_desk.schemas.record import RecordStatus
from recovery_desk.services.analytics_service import get_dashboard_analytics
from recovery_desk.services.document_service import save_generated_invoice
from recovery_desk.services.status_service import update_record_status
from recovery_desk.services.sync_service import create_job

TODAY = date(2024, 3, 20)


def _invoice(job_id, number, total, generated):
    return GeneratedInvoice(
        invoice_number=number, job_id=job_id, customer_name="Asha Rao",
        phone_number="9876543210", amount=total, grand_total=total,
        generated_date=generated,
    )


class TestDashboardAnalytics:
    def test_empty_store(self, records):
        stats = get_dashboard_analytics(records, today=TODAY)
        assert stats["total_jobs"] == 0
        assert stats["completion_rate"] == 0.0
        assert stats["avg_revenue_per_job"] == 0
        assert len(stats["monthly_trend"]) == 6

    def test_counts_revenue_and_trend(self, records, make_hard_disk):
        create_job(records, make_hard_disk("JOB001", received_date="2024-03-01"))
        create_job(records, make_hard_disk("JOB002", received_date="2024-02-10", customer_name="Vikram", phone_number="111"))
        create_job(records, make_hard_disk("JOB003", received_date="2024-03-05"))
        update_record_status(records, "JOB001", RecordStatus.COMPLETED)
        outward = records.outward()
        outward[0].completed_date = "2024-03-11"
        records.save_outward(outward)

        save_generated_invoice(records, _invoice("JOB001", "INV0001", 5900, "2024-03-12T10:00:00Z"))
        save_generated_invoice(records, _invoice("JOB002", "INV0002", 2000, "2024-02-15T10:00:00Z"))

        stats = get_dashboard_analytics(records, today=TODAY)

        assert stats["total_jobs"] == 3
        assert stats["total_customers"] == 2
        assert stats["total_revenue"] == 7900
        assert stats["monthly_revenue"] == 5900
        assert stats["last_month_revenue"] == 2000
        assert stats["revenue_trend"] == "up"
        assert stats["revenue_change"] == 195
        assert stats["completed_jobs"] == 1
        assert stats["in_progress_jobs"] == 2
        assert stats["pending_jobs"] == 0
        assert stats["completion_rate"] == 33.3
        assert stats["avg_turnaround_days"] == 10
        assert stats["monthly_inward"] == 2
        assert stats["last_month_inward"] == 1
        assert stats["monthly_completed"] == 1
        assert stats["top_customers"][0] == {"name": "Asha Rao", "jobs": 2}
        assert stats["monthly_trend"][-1] == {"month": "Mar", "inward": 2, "completed": 1, "revenue": 5900}
        assert stats["monthly_trend"][0]["month"] == "Oct"
        assert [s["name"] for s in stats["status_distribution"]] == ["Pending", "In Progress", "Completed"]
