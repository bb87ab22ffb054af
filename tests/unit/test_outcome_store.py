import threading

import pytest
from sqlalchemy import text

from batch_sender.errors import StoreError
from batch_sender.models import MessageKind
from batch_sender.services.outcome_store import OutcomeStore, Summary


class TestSchema:
    """Tests for ensure_schema()."""

    @pytest.mark.unit
    def test_ensure_schema_is_idempotent(self, store):
        store.record(MessageKind.TEXT, True, 10)
        store.ensure_schema()
        store.ensure_schema()
        assert store.summarize().total == 1

    @pytest.mark.unit
    def test_creates_missing_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "messages.db"
        s = OutcomeStore.from_url(f"sqlite:///{db_path}")
        s.ensure_schema()
        s.close()
        assert db_path.exists()

    @pytest.mark.unit
    def test_records_survive_reopening(self, runtime_settings, store):
        store.record(MessageKind.MEDIA, False, 55)
        store.close()

        reopened = OutcomeStore.from_url(runtime_settings.database_url)
        reopened.ensure_schema()
        assert reopened.summarize().media_count == 1
        reopened.close()


class TestSummarize:
    """Tests for the aggregate summary."""

    @pytest.mark.unit
    def test_empty_store_returns_zero_summary(self, store):
        summary = store.summarize()
        assert summary == Summary(
            total=0,
            text_count=0,
            media_count=0,
            avg_duration_ms=0.0,
            success_rate_pct=0.0,
        )

    @pytest.mark.unit
    def test_mixed_records(self, store):
        store.record(MessageKind.TEXT, True, 100)
        store.record(MessageKind.TEXT, False, 300)
        store.record(MessageKind.MEDIA, True, 200)

        summary = store.summarize()

        assert summary.total == 3
        assert summary.text_count == 2
        assert summary.media_count == 1
        assert summary.avg_duration_ms == pytest.approx(200.00)
        assert summary.success_rate_pct == pytest.approx(66.67)

    @pytest.mark.unit
    def test_all_failed_gives_zero_success_rate(self, store):
        store.record(MessageKind.TEXT, False, 40)
        store.record(MessageKind.MEDIA, False, 60)

        summary = store.summarize()

        assert summary.success_rate_pct == 0.0
        assert summary.avg_duration_ms == pytest.approx(50.0)

    @pytest.mark.unit
    def test_summary_reflects_new_records(self, store):
        store.record(MessageKind.TEXT, True, 10)
        assert store.summarize().total == 1
        store.record(MessageKind.TEXT, True, 10)
        assert store.summarize().total == 2


class TestRecord:
    """Tests for record()."""

    @pytest.mark.unit
    def test_records_keep_insertion_order(self, store):
        store.record(MessageKind.TEXT, True, 1)
        store.record(MessageKind.TEXT, False, 2)
        store.record(MessageKind.MEDIA, True, 3)

        attempts = store.list_attempts()

        assert [(a.kind, a.succeeded, a.duration_ms) for a in attempts] == [
            (MessageKind.TEXT, True, 1),
            (MessageKind.TEXT, False, 2),
            (MessageKind.MEDIA, True, 3),
        ]
        assert all(a.created_at is not None for a in attempts)

    @pytest.mark.unit
    def test_accepts_plain_string_kind(self, store):
        store.record("media", True, 5)
        assert store.list_attempts()[0].kind is MessageKind.MEDIA

    @pytest.mark.unit
    def test_zero_duration_is_allowed(self, store):
        store.record(MessageKind.TEXT, False, 0)
        assert store.list_attempts()[0].duration_ms == 0

    @pytest.mark.unit
    def test_negative_duration_rejected(self, store):
        with pytest.raises(ValueError):
            store.record(MessageKind.TEXT, True, -1)
        assert store.summarize().total == 0

    @pytest.mark.unit
    def test_unknown_kind_rejected(self, store):
        with pytest.raises(ValueError):
            store.record("fax", True, 10)

    @pytest.mark.unit
    def test_concurrent_writers_lose_nothing(self, store):
        def writer(kind):
            for i in range(25):
                store.record(kind, i % 2 == 0, i)

        threads = [
            threading.Thread(target=writer, args=(MessageKind.TEXT,)),
            threading.Thread(target=writer, args=(MessageKind.TEXT,)),
            threading.Thread(target=writer, args=(MessageKind.MEDIA,)),
            threading.Thread(target=writer, args=(MessageKind.MEDIA,)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        summary = store.summarize()
        assert summary.total == 100
        assert summary.text_count == 50
        assert summary.media_count == 50
        assert summary.success_rate_pct == pytest.approx(52.0)


class TestFailures:
    """Underlying database failures surface as StoreError."""

    @pytest.mark.unit
    def test_record_without_table_raises_store_error(self, runtime_settings):
        s = OutcomeStore.from_url(runtime_settings.database_url)
        with pytest.raises(StoreError):
            s.record(MessageKind.TEXT, True, 10)
        s.close()

    @pytest.mark.unit
    def test_summarize_without_table_raises_store_error(self, runtime_settings):
        s = OutcomeStore.from_url(runtime_settings.database_url)
        with pytest.raises(StoreError):
            s.summarize()
        s.close()

    @pytest.mark.unit
    def test_failure_keeps_existing_records(self, runtime_settings, store):
        store.record(MessageKind.TEXT, True, 10)
        store.record(MessageKind.TEXT, True, 20)

        # reject every further insert
        with store._engine.begin() as conn:
            conn.execute(text("CREATE TRIGGER block_inserts BEFORE INSERT ON messages "
                              "BEGIN SELECT RAISE(ABORT, 'read-only'); END"))

        with pytest.raises(StoreError):
            store.record(MessageKind.MEDIA, True, 30)

        assert store.summarize().total == 2
