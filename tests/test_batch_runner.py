"""
Tests for batch.runner module.

Tests cover:
- Pagination over fetch_page until a short page
- Sentiment rescoring: updates, skips, per-record failures, throttling
- Concurrent extraction with bounded concurrency and isolated failures
- Batch identifiers derived from UTC time
"""

import threading
import time

import pytest
from freezegun import freeze_time

from citation_watcher.batch import (
    BatchRunner,
    JobOutcome,
    ResponseJob,
    StoredCitation,
)
from citation_watcher.batch import runner as runner_module
from citation_watcher.config.loader import default_rules
from citation_watcher.config.schema import EngineRules
from citation_watcher.exceptions import BatchError
from citation_watcher.extractor import Brand, Competitor


class FakeStore:
    """In-memory citation store exposing fetch_page/update_sentiment."""

    def __init__(self, texts):
        self.citations = [
            StoredCitation(id=f"c{i}", citation_text=text) for i, text in enumerate(texts)
        ]
        self.updates: dict[str, str] = {}
        self.fetch_calls: list[tuple[int, int]] = []
        self.failing_ids: set[str] = set()

    def fetch_page(self, offset, limit):
        self.fetch_calls.append((offset, limit))
        return self.citations[offset : offset + limit]

    def update_sentiment(self, citation_id, sentiment):
        if citation_id in self.failing_ids:
            raise RuntimeError("database is locked")
        self.updates[citation_id] = sentiment


@pytest.fixture
def store():
    return FakeStore(
        [
            "Acme is excellent",
            "Acme is a nice tool",
            "The support is terrible",
            None,
            "",
        ]
    )


class TestBatchRunnerInit:
    """Test suite for BatchRunner construction."""

    @pytest.mark.parametrize(
        "kwargs",
        [{"page_size": 0}, {"batch_size": 0}, {"delay_seconds": -1.0}],
    )
    def test_rejects_invalid_sizes(self, kwargs):
        with pytest.raises(ValueError):
            BatchRunner(**kwargs)

    @freeze_time("2025-11-02 08:30:45")
    def test_batch_id_from_utc_time(self):
        assert BatchRunner().batch_id == "2025-11-02T08-30-45Z"

    def test_counters_start_at_zero(self):
        runner = BatchRunner()

        assert runner.pages_fetched == 0
        assert runner.batches_processed == 0


class TestCollect:
    """Test suite for BatchRunner.collect()."""

    def test_pages_until_short_page(self):
        store = FakeStore([f"text {i}" for i in range(5)])
        runner = BatchRunner(fetch_page=store.fetch_page, page_size=2)

        citations = runner.collect()

        assert [c.id for c in citations] == ["c0", "c1", "c2", "c3", "c4"]
        assert store.fetch_calls == [(0, 2), (2, 2), (4, 2)]
        assert runner.pages_fetched == 3

    def test_exact_multiple_fetches_one_empty_page(self):
        store = FakeStore([f"text {i}" for i in range(4)])
        runner = BatchRunner(fetch_page=store.fetch_page, page_size=2)

        assert len(runner.collect()) == 4
        assert store.fetch_calls[-1] == (4, 2)

    def test_empty_store(self):
        runner = BatchRunner(fetch_page=FakeStore([]).fetch_page)

        assert runner.collect() == []

    def test_missing_fetch_page(self):
        with pytest.raises(BatchError, match="without fetch_page"):
            BatchRunner().collect()

    def test_fetch_failure_is_wrapped(self):
        def broken(offset, limit):
            raise ConnectionError("connection refused")

        with pytest.raises(BatchError, match="connection refused"):
            BatchRunner(fetch_page=broken).collect()


class TestRescoreSentiment:
    """Test suite for BatchRunner.rescore_sentiment()."""

    def test_updates_and_skips(self, store):
        runner = BatchRunner(
            fetch_page=store.fetch_page, update_sentiment=store.update_sentiment
        )

        summary = runner.rescore_sentiment()

        assert store.updates == {"c0": "positive", "c1": "neutral", "c2": "negative"}
        assert summary.total == 5
        assert summary.updated == 3
        assert summary.skipped == 2
        assert summary.failed == 0
        assert summary.sentiment_counts == {"positive": 1, "neutral": 1, "negative": 1}
        assert summary.batch_id == runner.batch_id
        assert summary.finished_at is not None

    def test_failed_update_does_not_stop_run(self, store):
        store.failing_ids = {"c1"}
        runner = BatchRunner(
            fetch_page=store.fetch_page, update_sentiment=store.update_sentiment
        )

        summary = runner.rescore_sentiment()

        assert summary.updated == 2
        assert summary.failed == 1
        assert summary.failed_ids == ["c1"]
        assert "c2" in store.updates

    def test_batches_are_counted(self, store):
        runner = BatchRunner(
            fetch_page=store.fetch_page,
            update_sentiment=store.update_sentiment,
            batch_size=2,
        )

        runner.rescore_sentiment()

        assert runner.batches_processed == 3

    def test_delay_between_batches(self, store, monkeypatch):
        sleeps = []
        monkeypatch.setattr(runner_module.time, "sleep", sleeps.append)
        runner = BatchRunner(
            fetch_page=store.fetch_page,
            update_sentiment=store.update_sentiment,
            batch_size=2,
            delay_seconds=0.5,
        )

        runner.rescore_sentiment()

        # No sleep before the first batch
        assert sleeps == [0.5, 0.5]

    def test_missing_update_sentiment(self, store):
        with pytest.raises(BatchError, match="without update_sentiment"):
            BatchRunner(fetch_page=store.fetch_page).rescore_sentiment()

    def test_custom_rules(self, store):
        data = default_rules().model_dump()
        data["sentiment"]["threshold"] = 3
        runner = BatchRunner(
            fetch_page=store.fetch_page,
            update_sentiment=store.update_sentiment,
            rules=EngineRules.model_validate(data),
        )

        runner.rescore_sentiment()

        # "excellent" (3) and "terrible" (3) still reach threshold 3
        assert store.updates["c0"] == "positive"
        assert store.updates["c2"] == "negative"


class TestRunExtractions:
    """Test suite for BatchRunner.run_extractions()."""

    @pytest.mark.asyncio
    async def test_outcomes_in_input_order(self):
        jobs = [
            ResponseJob(
                job_id=f"job-{i}",
                text=f"Answer {i}. Acme is excellent. Globex is similar to Acme.",
                brand=Brand("Acme"),
                competitors=(Competitor("Globex"),),
                citation_urls=("https://www.example.com",),
            )
            for i in range(4)
        ]

        outcomes = await BatchRunner().run_extractions(jobs, max_concurrent=2)

        assert [o.job_id for o in outcomes] == ["job-0", "job-1", "job-2", "job-3"]
        assert all(o.succeeded for o in outcomes)
        result = outcomes[0].result
        assert result.brand_citations[0].sentiment == "positive"
        assert result.brand_citations[0].cited_domain == "example.com"
        assert result.competitor_citations[0].citations[0].competitive_context == "similar"

    @pytest.mark.asyncio
    async def test_failing_job_is_isolated(self):
        jobs = [
            ResponseJob(job_id="ok", text="Acme rocks.", brand=Brand("Acme")),
            ResponseJob(job_id="bad", text="Acme rocks.", brand=Brand("  ")),
        ]

        outcomes = await BatchRunner().run_extractions(jobs)

        assert outcomes[0].succeeded
        assert outcomes[0].result.total_citations == 1
        assert outcomes[1] == JobOutcome(
            job_id="bad", error="Entity name cannot be empty or whitespace"
        )
        assert not outcomes[1].succeeded

    @pytest.mark.asyncio
    async def test_respects_max_concurrent(self, monkeypatch):
        lock = threading.Lock()
        state = {"running": 0, "peak": 0}

        def slow_process(text, brand, competitors, citation_urls, rules):
            with lock:
                state["running"] += 1
                state["peak"] = max(state["peak"], state["running"])
            time.sleep(0.05)
            with lock:
                state["running"] -= 1
            return None

        monkeypatch.setattr(runner_module, "process_response", slow_process)
        jobs = [
            ResponseJob(job_id=str(i), text="Acme.", brand=Brand("Acme"))
            for i in range(6)
        ]

        outcomes = await BatchRunner().run_extractions(jobs, max_concurrent=2)

        assert len(outcomes) == 6
        assert state["peak"] <= 2

    @pytest.mark.asyncio
    async def test_empty_jobs(self):
        assert await BatchRunner().run_extractions([]) == []

    @pytest.mark.asyncio
    async def test_rejects_non_positive_concurrency(self):
        with pytest.raises(ValueError, match="max_concurrent"):
            await BatchRunner().run_extractions([], max_concurrent=0)
