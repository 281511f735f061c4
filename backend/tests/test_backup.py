import json

import pytest

from recovery_desk.config import settings
from recovery_desk.errors import ProtectedJobIdError
from recovery_desk.schemas.backup import FullImport
from recovery_desk.schemas.customer import CustomerUpsert
from recovery_desk.schemas.document import GeneratedInvoice
from recovery_desk.schemas.record import RecordStatus
from recovery_desk.services.backup_service import (
    add_backup_job_data,
    auto_sync_backup_job_data,
    clear_all_data,
    clear_all_records_for_fresh_start,
    clear_backup_job_data,
    clear_monthly_revenue_data,
    delete_job,
    delete_job_id_from_all_records,
    delete_selected_backup_job_data,
    export_all_data,
    export_backup_job_data,
    import_backup_job_data,
    import_data,
    open_intake,
)
from recovery_desk.services.collections import RecordCollections, StorageKeys
from recovery_desk.services.customer_service import add_or_update_master_customer
from recovery_desk.services.document_service import save_generated_invoice
from recovery_desk.services.numbering import allocate_record_id, generate_next_invoice_number
from recovery_desk.services.store import MemoryStore
from recovery_desk.services.sync_service import create_job


@pytest.fixture
def seeded(records, make_hard_disk):
    create_job(records, make_hard_disk("JOB001", estimated_amount=1500))
    create_job(records, make_hard_disk("JOB002", customer_name="Vikram", phone_number="111"))
    create_job(records, make_hard_disk("JOB003", customer_name="Leela", phone_number="222"))
    return records


class TestFreshStart:
    def test_manifest_and_wipe(self, seeded, store):
        store.set(StorageKeys.COMPANY_DETAILS, b"{}")
        generate_next_invoice_number(seeded)

        result = clear_all_records_for_fresh_start(seeded)

        assert result.success
        assert result.cleared_items == [
            "3 Hard Disk Records",
            "3 Inward Records",
            "3 Outward Records",
            "Job ID Counter Reset",
            "Invoice Counter Reset",
        ]
        assert seeded.hard_disks() == []
        assert seeded.job_counter() == 0
        assert seeded.invoice_counter().invoice == 0
        assert store.get(StorageKeys.COMPANY_DETAILS) == b"{}"

    def test_clear_all_data_removes_company_details(self, seeded, store):
        store.set(StorageKeys.COMPANY_DETAILS, b"{}")
        assert clear_all_data(seeded).success
        assert store.data == {}

    def test_open_intake_keeps_data_by_default(self, seeded):
        job_id, result = open_intake(seeded)
        assert result is None
        assert job_id == "JOB004"
        assert len(seeded.hard_disks()) == 3

    def test_open_intake_wipes_when_enabled(self, seeded, monkeypatch):
        monkeypatch.setattr(settings, "wipe_on_intake_load", True)
        job_id, result = open_intake(seeded)
        assert result.success
        assert job_id == "JOB001"
        assert seeded.hard_disks() == []


class TestDeletes:
    def test_cascade_removes_all_collections(self, seeded):
        auto_sync_backup_job_data(seeded)
        delete_job_id_from_all_records(seeded, "JOB002")
        for rows in (seeded.hard_disks(), seeded.inward(), seeded.outward(), seeded.backup_job_data()):
            assert "JOB002" not in {r.job_id for r in rows}
            assert len(rows) == 2

    def test_orphans_kept_by_default(self, seeded):
        save_generated_invoice(seeded, GeneratedInvoice(
            invoice_number="INV0001", job_id="JOB002", customer_name="Vikram",
            phone_number="111", amount=100,
        ))
        delete_job_id_from_all_records(seeded, "JOB002")
        assert len(seeded.invoices()) == 1
        assert any(c.phone_number == "111" for c in seeded.master_customers())

    def test_orphans_purged_when_asked(self, seeded):
        save_generated_invoice(seeded, GeneratedInvoice(
            invoice_number="INV0001", job_id="JOB002", customer_name="Vikram",
            phone_number="111", amount=100,
        ))
        delete_job_id_from_all_records(seeded, "JOB002", purge_orphans=True)
        assert seeded.invoices() == []
        phones = {c.phone_number for c in seeded.master_customers()}
        assert "111" not in phones
        assert "9876543210" in phones

    def test_delete_job_refuses_auto_generated(self, seeded):
        with pytest.raises(ProtectedJobIdError):
            delete_job(seeded, "JOB001")
        assert seeded.find_hard_disk("JOB001") is not None

    def test_delete_job_manual_id(self, seeded, make_hard_disk):
        create_job(seeded, make_hard_disk("WALKIN-9"))
        assert delete_job(seeded, "WALKIN-9")
        assert seeded.find_hard_disk("WALKIN-9") is None
        assert not delete_job(seeded, "WALKIN-9")

    def test_delete_selected_backup_rows(self, seeded):
        auto_sync_backup_job_data(seeded)
        rows = {r.job_id: r.id for r in seeded.backup_job_data()}
        result = delete_selected_backup_job_data(seeded, [rows["JOB001"], rows["JOB003"]])
        assert result.success
        assert result.count == 2
        assert sorted(result.deleted_job_ids) == ["JOB001", "JOB003"]
        assert [hd.job_id for hd in seeded.hard_disks()] == ["JOB002"]


class TestBackupJobData:
    def test_delete_selected_keeps_unselected_rows_of_same_job(self, seeded):
        import_backup_job_data(seeded, [{"jobId": "JOB001"}, {"jobId": "JOB001", "notes": "second visit"}])
        first, second = seeded.backup_job_data()

        result = delete_selected_backup_job_data(seeded, [first.id])

        assert result.count == 1
        assert result.deleted_job_ids == ["JOB001"]
        assert [r.id for r in seeded.backup_job_data()] == [second.id]
        assert seeded.find_hard_disk("JOB001") is None
        assert seeded.find_inward("JOB001") is None

    def test_auto_sync_adds_only_missing(self, seeded):
        first = auto_sync_backup_job_data(seeded)
        second = auto_sync_backup_job_data(seeded)
        assert (first.count, second.count) == (3, 0)
        row = next(r for r in seeded.backup_job_data() if r.job_id == "JOB001")
        assert row.device_info == "WD Blue 1TB"
        assert row.estimated_amount == 1500
        assert row.status is RecordStatus.PENDING

    def test_add_assigns_id(self, records):
        row = add_backup_job_data(records, {"id": 5, "jobId": "OLD-1", "customerName": "Nila"})
        assert row.id != 5
        assert row.created_at
        assert records.backup_job_data()[0].customer_name == "Nila"

    def test_import_applies_defaults(self, records):
        result = import_backup_job_data(records, {"backupJobData": [
            {"jobId": "OLD-1", "estimatedAmount": "2500", "status": "completed"},
            {},
        ]})
        assert result.success
        assert result.count == 2
        first, second = records.backup_job_data()
        assert first.estimated_amount == 2500
        assert first.status is RecordStatus.COMPLETED
        assert first.complaint == "No complaint specified"
        assert second.job_id.startswith("IMPORTED-")
        assert second.customer_name == "Unknown Customer"
        assert second.device_info == "Unknown Device"

    def test_import_defaults_unknown_status_and_amount(self, records):
        result = import_backup_job_data(records, [
            {"jobId": "A", "status": "Completed"},
            {"jobId": "B", "status": "archived", "estimatedAmount": "n/a", "phoneNumber": 98765},
            {},
        ])
        assert result.success
        assert result.count == 3
        a, b, c = records.backup_job_data()
        assert a.status is RecordStatus.COMPLETED
        assert b.status is RecordStatus.PENDING
        assert b.estimated_amount is None
        assert b.phone_number == "98765"
        assert c.status is RecordStatus.PENDING

    def test_import_rejects_bad_payload(self, records):
        assert not import_backup_job_data(records, "nope").success
        result = import_backup_job_data(records, [{"jobId": "A"}, "oops"])
        assert not result.success
        assert records.backup_job_data() == []

    def test_export_envelope(self, seeded):
        auto_sync_backup_job_data(seeded)
        exported = export_backup_job_data(seeded)
        assert exported.total_records == 3
        assert exported.export_date

    def test_clear_revenue_and_rows(self, seeded):
        auto_sync_backup_job_data(seeded)
        assert clear_monthly_revenue_data(seeded).count == 1
        assert all(r.estimated_amount is None for r in seeded.backup_job_data())
        clear_backup_job_data(seeded)
        assert seeded.backup_job_data() == []


class TestFullBackup:
    def test_round_trip_into_empty_store(self, seeded):
        generate_next_invoice_number(seeded)
        exported = export_all_data(seeded)

        target = RecordCollections(MemoryStore())
        payload = FullImport.model_validate(exported.model_dump(by_alias=True, mode="json"))
        assert import_data(target, payload).success

        def key(rows):
            return sorted(r.model_dump_json() for r in rows)

        assert key(target.hard_disks()) == key(seeded.hard_disks())
        assert key(target.inward()) == key(seeded.inward())
        assert key(target.outward()) == key(seeded.outward())
        assert target.job_counter() == seeded.job_counter()
        assert target.invoice_counter() == seeded.invoice_counter()

    def test_import_reserves_record_ids(self, seeded):
        exported = export_all_data(seeded)
        target = RecordCollections(MemoryStore())
        import_data(target, FullImport(inward_records=exported.inward_records))
        highest = max(r.id for r in exported.inward_records)
        assert allocate_record_id(target) > highest

    def test_full_import_replaces_unreadable_rows(self, seeded, store):
        store.set(StorageKeys.OUTWARD_RECORDS, json.dumps([{"jobId": "BROKEN"}]).encode())
        exported = export_all_data(seeded)
        import_data(seeded, FullImport(outward_records=exported.outward_records))
        stored = json.loads(store.get(StorageKeys.OUTWARD_RECORDS))
        assert stored == []

    def test_partial_import_leaves_other_collections(self, seeded):
        add_or_update_master_customer(seeded, CustomerUpsert(name="Kept", phone_number="555"))
        import_data(seeded, FullImport(outward_records=[]))
        assert seeded.outward() == []
        assert len(seeded.hard_disks()) == 3
