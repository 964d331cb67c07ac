"""
Unit tests for ImportService — bulk ingestion with partial-failure recovery.

Tests cover:
- Row numbering, outcome buckets and bucket totals
- Duplicate handling (persisted and in-batch)
- Unknown brands never reach the store
- Chunking, reconciliation and per-row fallback
- Summary broadcast only when rows were added
- Optional import lock
- CSV parsing helper

Version: 1.0.0
"""
import pytest
from unittest.mock import MagicMock

from app.core.exceptions import (
    DuplicateKeyError,
    ImportInProgressError,
    InvalidFormatError,
    PersistenceError,
    ValidationError,
)
from app.services.import_service import ImportService, chunked, rows_from_csv


pytestmark = pytest.mark.unit


@pytest.fixture
def service(mock_domain_store, mock_brand_store, mock_notifier):
    return ImportService(mock_domain_store, mock_brand_store, mock_notifier, chunk_size=50)


def _total(outcome):
    return len(outcome["success"]) + len(outcome["failed"]) + len(outcome["skipped"])


class TestImportDomains:

    @pytest.mark.asyncio
    async def test_single_row_is_normalized_and_persisted(self, service, mock_domain_store):
        outcome = await service.import_domains(
            [{"domain": "HTTPS://Example.com/Promo?x=1", "brand": "a200m"}], "user-1"
        )

        assert outcome["success"] == [{"row": 2, "domain": "example.com/promo", "brand": "a200m"}]
        assert outcome["failed"] == []
        assert outcome["skipped"] == []
        records = mock_domain_store.bulk_insert_domains.call_args[0][0]
        assert records == [{
            "domain": "example.com/promo",
            "brand_id": "brand-a200m",
            "note": "",
            "created_by": "user-1",
            "updated_by": "user-1",
        }]

    @pytest.mark.asyncio
    async def test_duplicate_in_batch(self, service):
        row = {"domain": "example.com", "brand": "A200M"}
        outcome = await service.import_domains([row, dict(row)], "user-1")

        assert [s["row"] for s in outcome["success"]] == [2]
        assert outcome["skipped"] == [{"row": 3, "domain": "example.com", "reason": "Duplicate in batch"}]

    @pytest.mark.asyncio
    async def test_already_persisted_is_skipped(self, service, mock_domain_store):
        mock_domain_store.list_domain_keys.return_value = {"example.com"}

        outcome = await service.import_domains([{"domain": "www.example.com", "brand": "A200M"}], "user-1")

        assert outcome["skipped"] == [{"row": 2, "domain": "example.com", "reason": "Already exists"}]
        assert outcome["success"] == []
        assert outcome["failed"] == []
        mock_domain_store.bulk_insert_domains.assert_not_called()

    @pytest.mark.asyncio
    async def test_row_level_failures_are_collected(self, service):
        rows = [
            {"domain": "", "brand": "A200M"},
            {"domain": "nodot", "brand": "A200M"},
            {"domain": "ok.com", "brand": ""},
            {"domain": "fine.com", "brand": "unknown"},
            {"domain": "good.com", "brand": "a-200-m"},
        ]
        outcome = await service.import_domains(rows, "user-1")

        assert outcome["failed"][0] == {"row": 2, "domain": "", "error": "Domain is required"}
        assert outcome["failed"][1] == {"row": 3, "domain": "nodot", "error": "Invalid domain format"}
        assert outcome["failed"][2] == {"row": 4, "domain": "ok.com", "error": "Brand is required"}
        assert outcome["failed"][3]["row"] == 5
        assert outcome["failed"][3]["error"].startswith("Brand 'unknown' not found")
        assert outcome["success"] == [{"row": 6, "domain": "good.com", "brand": "a-200-m"}]
        assert _total(outcome) == len(rows)

    @pytest.mark.asyncio
    async def test_persisted_key_with_unknown_brand_is_skipped(self, service, mock_domain_store):
        mock_domain_store.list_domain_keys.return_value = {"example.com"}

        outcome = await service.import_domains([{"domain": "example.com", "brand": "ghost"}], "user-1")

        assert outcome["skipped"] == [{"row": 2, "domain": "example.com", "reason": "Already exists"}]
        assert outcome["failed"] == []
        assert outcome["success"] == []

    @pytest.mark.asyncio
    async def test_unknown_brand_releases_key_for_later_row(self, service):
        rows = [
            {"domain": "fresh.com", "brand": "ghost"},
            {"domain": "fresh.com", "brand": "A200M"},
        ]
        outcome = await service.import_domains(rows, "user-1")

        assert [f["row"] for f in outcome["failed"]] == [2]
        assert outcome["success"] == [{"row": 3, "domain": "fresh.com", "brand": "A200M"}]
        assert outcome["skipped"] == []

    @pytest.mark.asyncio
    async def test_unknown_brand_never_reaches_store(self, service, mock_domain_store):
        outcome = await service.import_domains([{"domain": "a.com", "brand": "ghost"}], "user-1")

        assert len(outcome["failed"]) == 1
        mock_domain_store.bulk_insert_domains.assert_not_called()
        mock_domain_store.insert_domain.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_input_is_structural_failure(self, service):
        with pytest.raises(ValidationError):
            await service.import_domains([], "user-1")

    @pytest.mark.asyncio
    async def test_rows_are_written_in_chunks(self, mock_domain_store, mock_brand_store, mock_notifier):
        service = ImportService(mock_domain_store, mock_brand_store, mock_notifier, chunk_size=50)
        rows = [{"domain": f"site{i}.com", "brand": "A200M"} for i in range(120)]

        outcome = await service.import_domains(rows, "user-1")

        sizes = [len(call.args[0]) for call in mock_domain_store.bulk_insert_domains.call_args_list]
        assert sizes == [50, 50, 20]
        assert len(outcome["success"]) == 120
        assert [s["row"] for s in outcome["success"]] == list(range(2, 122))

    @pytest.mark.asyncio
    async def test_unconfirmed_rows_retry_individually(self, service, mock_domain_store):
        # Concurrent writer took b.com between snapshot and insert
        mock_domain_store.bulk_insert_domains.side_effect = lambda records: [
            dict(r) for r in records if r["domain"] != "b.com"
        ]
        mock_domain_store.insert_domain.side_effect = DuplicateKeyError("b.com", "Already exists")

        outcome = await service.import_domains(
            [{"domain": "a.com", "brand": "A200M"}, {"domain": "b.com", "brand": "A200M"}], "user-1"
        )

        assert [s["domain"] for s in outcome["success"]] == ["a.com"]
        assert outcome["failed"] == [{"row": 3, "domain": "b.com", "error": "Already exists"}]
        mock_domain_store.insert_domain.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unconfirmed_row_succeeding_individually(self, service, mock_domain_store):
        mock_domain_store.bulk_insert_domains.side_effect = lambda records: []

        outcome = await service.import_domains([{"domain": "a.com", "brand": "A200M"}], "user-1")

        assert outcome["success"] == [{"row": 2, "domain": "a.com", "brand": "A200M"}]

    @pytest.mark.asyncio
    async def test_bulk_fault_falls_back_to_individual_inserts(self, service, mock_domain_store):
        mock_domain_store.bulk_insert_domains.side_effect = PersistenceError("connection reset", table="domains")

        def insert(record):
            if record["domain"] == "c.com":
                raise PersistenceError("write rejected", table="domains")
            return {"id": "x", **record}

        mock_domain_store.insert_domain.side_effect = insert
        rows = [{"domain": d, "brand": "A200M"} for d in ("a.com", "b.com", "c.com")]

        outcome = await service.import_domains(rows, "user-1")

        assert [s["domain"] for s in outcome["success"]] == ["a.com", "b.com"]
        assert outcome["failed"] == [{"row": 4, "domain": "c.com", "error": "write rejected"}]
        assert mock_domain_store.insert_domain.await_count == 3
        assert _total(outcome) == 3

    @pytest.mark.asyncio
    async def test_emits_summary_when_rows_added(self, service, mock_notifier):
        await service.import_domains([{"domain": "a.com", "brand": "A200M"}], "user-1")

        mock_notifier.emit.assert_called_once_with("domains:bulk-imported", {"count": 1})

    @pytest.mark.asyncio
    async def test_no_summary_when_nothing_added(self, service, mock_notifier):
        await service.import_domains([{"domain": "", "brand": "A200M"}], "user-1")

        mock_notifier.emit.assert_not_called()


class TestImportLock:

    @pytest.mark.asyncio
    async def test_lock_acquired_and_released(self, mock_domain_store, mock_brand_store, mock_notifier):
        lock = MagicMock()
        service = ImportService(
            mock_domain_store, mock_brand_store, mock_notifier, lock_factory=lambda: lock
        )

        await service.import_domains([{"domain": "a.com", "brand": "A200M"}], "user-1")

        lock.acquire.assert_called_once_with("user-1")
        lock.release.assert_called_once()

    @pytest.mark.asyncio
    async def test_lock_held_rejects_before_any_row(self, mock_domain_store, mock_brand_store, mock_notifier):
        lock = MagicMock()
        lock.acquire.side_effect = ImportInProgressError()
        service = ImportService(
            mock_domain_store, mock_brand_store, mock_notifier, lock_factory=lambda: lock
        )

        with pytest.raises(ImportInProgressError):
            await service.import_domains([{"domain": "a.com", "brand": "A200M"}], "user-1")

        mock_domain_store.list_domain_keys.assert_not_called()
        lock.release.assert_not_called()

    @pytest.mark.asyncio
    async def test_lock_released_on_failure(self, mock_domain_store, mock_brand_store, mock_notifier):
        lock = MagicMock()
        mock_brand_store.list_brands.side_effect = PersistenceError("down", table="brands")
        service = ImportService(
            mock_domain_store, mock_brand_store, mock_notifier, lock_factory=lambda: lock
        )

        with pytest.raises(PersistenceError):
            await service.import_domains([{"domain": "a.com", "brand": "A200M"}], "user-1")

        lock.release.assert_called_once()


class TestHelpers:

    def test_chunked(self):
        assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]

    def test_rows_from_csv_case_insensitive_header(self):
        text = "Domain,BRAND,Note,Extra\nexample.com,A200M,promo,x\n\nother.com,ACMECO\n"
        assert rows_from_csv(text) == [
            {"domain": "example.com", "brand": "A200M", "note": "promo"},
            {"domain": "other.com", "brand": "ACMECO", "note": ""},
        ]

    def test_rows_from_csv_without_note_column(self):
        assert rows_from_csv("brand,domain\nA200M,a.com\n") == [
            {"domain": "a.com", "brand": "A200M", "note": ""},
        ]

    def test_rows_from_csv_strips_bom(self):
        assert rows_from_csv("\ufeffdomain,brand\na.com,A200M\n")[0]["domain"] == "a.com"

    def test_rows_from_csv_missing_column(self):
        with pytest.raises(InvalidFormatError):
            rows_from_csv("domain,note\na.com,x\n")

    def test_rows_from_csv_empty(self):
        with pytest.raises(ValidationError):
            rows_from_csv("")
