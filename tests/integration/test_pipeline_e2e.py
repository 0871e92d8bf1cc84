"""
End-to-end qualification runs with a fake browser and a mocked classification
service, writing real dataset and key-value files.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from structlog.testing import capture_logs

from sitequalifier.classifier import NO_CONTENT_REASON, Classifier
from sitequalifier.config import Config, RunInput
from sitequalifier.container import run_qualification
from sitequalifier.extractor import ContentScraper
from sitequalifier.pipeline import Pipeline
from sitequalifier.recovery import RetryExecutor
from sitequalifier.storage import FileRecordStore
from tests.helpers import EMPTY_PAGE_HTML, FakePage, FakeSession, RecordingSleep, completion


def _read_dataset(output_dir: Path, dataset_name: str = "default") -> list:
    path = output_dir / "datasets" / f"{dataset_name}.jsonl"
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def _read_output(output_dir: Path, key: str = "OUTPUT") -> dict:
    return json.loads((output_dir / "key_value_stores" / f"{key}.json").read_text(encoding="utf-8"))


@pytest.mark.integration
class TestPipelineEndToEnd:
    """Pipeline with the real scraper, classifier and file store."""

    @pytest.mark.asyncio
    async def test_unreachable_website_is_disqualified_without_classification(self, tmp_path, service):
        page = FakePage(errors={"https://badsite.invalid": Exception("net::ERR_NAME_NOT_RESOLVED")})
        session = FakeSession(page)
        store = FileRecordStore(tmp_path)
        await store.initialize()

        pipeline = Pipeline(
            ContentScraper(session),
            Classifier(service, retry=RetryExecutor(sleep=RecordingSleep())),
            store,
            delay_between_requests=0,
            sleep=RecordingSleep(),
        )
        summary = await pipeline.run(["badsite.invalid"])

        service.complete.assert_not_awaited()
        assert session.released == 1
        assert page.visited == ["https://badsite.invalid"]

        expected = {
            "url": "https://badsite.invalid",
            "verdict": "DISQUALIFY",
            "score": 0,
            "reason": f"{NO_CONTENT_REASON} Error: Scraping failed: net::ERR_NAME_NOT_RESOLVED",
        }
        assert _read_dataset(tmp_path) == [expected]
        assert _read_output(tmp_path) == {"total": 1, "qualified": 0, "disqualified": 1, "results": [expected]}
        assert summary.total == 1

    @pytest.mark.asyncio
    async def test_mixed_run_writes_records_in_input_order(self, tmp_path, service):
        page = FakePage(
            html_by_url={"https://empty.test": EMPTY_PAGE_HTML},
            errors={"https://down.test": TimeoutError("Timeout 30000ms exceeded")},
        )
        store = FileRecordStore(tmp_path)
        sleep = RecordingSleep()

        pipeline = Pipeline(
            ContentScraper(FakeSession(page), user_agent="Mozilla/5.0 (test)"),
            Classifier(service, retry=RetryExecutor(sleep=RecordingSleep())),
            store,
            delay_between_requests=2.0,
            sleep=sleep,
        )
        summary = await pipeline.run(["acme.test/", "down.test", "http://empty.test"])

        records = _read_dataset(tmp_path)
        assert [record["url"] for record in records] == ["https://acme.test", "https://down.test", "http://empty.test"]
        assert [record["verdict"] for record in records] == ["QUALIFY", "DISQUALIFY", "DISQUALIFY"]
        assert records[0]["score"] == 9
        assert "Timeout 30000ms exceeded" in records[1]["reason"]
        assert records[2]["reason"].startswith(NO_CONTENT_REASON)
        assert (summary.total, summary.qualified, summary.disqualified) == (3, 1, 2)
        assert sleep.delays == [2.0, 2.0]
        service.complete.assert_awaited_once()

        _, user_message = service.complete.await_args.args
        assert "Website URL: https://acme.test" in user_message
        assert "Send cold email that lands in the inbox" in user_message


@pytest.mark.integration
class TestRunQualification:
    """run_qualification wired through the dependency container."""

    @pytest.mark.asyncio
    async def test_full_run(self, tmp_path):
        config = Config()
        config.storage.output_dir = tmp_path / "storage"
        config.storage.dataset_name = "leads"
        run_input = RunInput.from_mapping(
            {
                "urls": ["acme.test", "badsite.invalid"],
                "openrouterApiKey": "sk-or-test",
                "delayBetweenRequests": 0,
            }
        )

        session = FakeSession(FakePage(errors={"https://badsite.invalid": Exception("net::ERR_NAME_NOT_RESOLVED")}))
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(
            return_value=completion('{"verdict": "QUALIFY", "score": 8, "reason": "Sells outbound tooling."}')
        )
        sdk.close = AsyncMock()

        with patch("sitequalifier.extractor.BrowserSession", return_value=session), patch(
            "sitequalifier.classifier.client.AsyncOpenAI", return_value=sdk
        ):
            with capture_logs() as logs:
                summary = await run_qualification(run_input, config)

        assert (summary.total, summary.qualified, summary.disqualified) == (2, 1, 1)
        assert session.user_agents == [config.scraper.user_agent] * 2
        assert session.released >= 1
        sdk.close.assert_awaited_once()

        request = sdk.chat.completions.create.await_args.kwargs
        assert request["model"] == "openai/gpt-4o-mini"
        assert request["response_format"] == {"type": "json_object"}
        assert request["messages"][0]["role"] == "system"

        output_dir = tmp_path / "storage"
        records = _read_dataset(output_dir, "leads")
        assert records[0] == {
            "url": "https://acme.test",
            "verdict": "QUALIFY",
            "score": 8,
            "reason": "Sells outbound tooling.",
        }
        assert records[1]["url"] == "https://badsite.invalid"
        assert _read_output(output_dir)["results"] == records

        stored = [log for log in logs if log["event"] == "Results stored"]
        assert stored[0]["records_written"] == 2
        assert stored[0]["dataset"] == str(output_dir / "datasets" / "leads.jsonl")
