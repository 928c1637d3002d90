import asyncio
from datetime import date, datetime
from typing import Dict, List

import httpx
import pytest

from elisia.lok import ContributionAggregator
from elisia.models import Period

THURSDAY = datetime(2024, 3, 14, 12, 0)
ENDPOINT = "https://lok.test/api/stat/land/contribution"

UPSTREAM: Dict[str, List[dict]] = {
    "100": [
        {"kingdomId": "K1", "total": 40, "name": "Alpha", "continent": 3},
        {"kingdomId": "K2", "total": 15, "name": "Beta", "continent": 4},
    ],
    "200": [
        {"kingdomId": "K1", "total": 60, "name": "Alpha", "continent": 3},
        {"kingdomId": "K3", "total": 5},
    ],
}


def upstream_handler(request: httpx.Request) -> httpx.Response:
    land_id = request.url.params["landId"]
    return httpx.Response(200, json={"contribution": UPSTREAM.get(land_id, [])})


def make_aggregator(handler, land_ids=("100", "200"), **kwargs) -> ContributionAggregator:
    return ContributionAggregator(
        land_ids,
        endpoint=ENDPOINT,
        transport=httpx.MockTransport(handler),
        clock=lambda: THURSDAY,
        **kwargs,
    )


def test_all_contributions_queries_every_land_for_each_week() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        return upstream_handler(request)

    result = asyncio.run(make_aggregator(handler).all_contributions(Period.LAST_WEEK))

    assert sorted(params["landId"] for params in seen) == ["100", "200"]
    assert all(params["from"] == "2024-03-03" and params["to"] == "2024-03-09" for params in seen)
    assert len(result.records) == 4
    assert {record.land_id for record in result.records} == {"100", "200"}
    assert all(record.date == date(2024, 3, 3) for record in result.records)
    payload = result.to_dict()
    assert (payload["from"], payload["to"]) == ("2024-03-03", "2024-03-09")
    assert payload["pairs"] == {"requested": 2, "failed": 0}


def test_custom_days_expands_to_two_windows() -> None:
    weeks = set()

    def handler(request: httpx.Request) -> httpx.Response:
        weeks.add((request.url.params["from"], request.url.params["to"]))
        return upstream_handler(request)

    result = asyncio.run(make_aggregator(handler).all_contributions("customDays", 10))

    assert weeks == {("2024-03-03", "2024-03-09"), ("2024-03-10", "2024-03-16")}
    assert result.date_range.as_strings() == ("2024-03-04", "2024-03-13")
    assert len(result.statuses) == 4
    assert len(result.records) == 8


def test_failed_pairs_do_not_abort_the_batch(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        land_id = request.url.params["landId"]
        if land_id == "down":
            raise httpx.ConnectError("connection refused", request=request)
        if land_id == "broken":
            return httpx.Response(500, text="internal error")
        return upstream_handler(request)

    aggregator = make_aggregator(handler, land_ids=("100", "down", "broken"))
    result = asyncio.run(aggregator.all_contributions(Period.LAST_WEEK))

    assert [record.kingdom_id for record in result.records] == ["K1", "K2"]
    assert result.failed_pairs == 2
    errors = {status.land_id: status.error for status in result.statuses if not status.ok}
    assert errors["broken"] == "HTTP 500"
    assert "connection refused" in errors["down"]
    assert "Error fetching data for landId down" in caplog.text


def test_malformed_json_counts_as_empty_pair(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["landId"] == "200":
            return httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})
        return upstream_handler(request)

    result = asyncio.run(make_aggregator(handler).all_contributions(Period.LAST_WEEK))

    assert {record.land_id for record in result.records} == {"100"}
    failed = [status for status in result.statuses if not status.ok]
    assert len(failed) == 1 and failed[0].error == "invalid JSON"
    assert "JSON parsing error" in caplog.text


def test_deeply_nested_body_counts_as_empty_pair() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["landId"] == "200":
            return httpx.Response(200, content=b"[" * 200000, headers={"content-type": "application/json"})
        return upstream_handler(request)

    result = asyncio.run(make_aggregator(handler).all_contributions(Period.LAST_WEEK))

    assert {record.land_id for record in result.records} == {"100"}
    assert "K1" in {record.kingdom_id for record in result.records}
    assert result.failed_pairs == 1
    assert [status.error for status in result.statuses if not status.ok] == ["invalid JSON"]


def test_unexpected_pair_error_is_isolated(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["landId"] == "200":
            raise RuntimeError("transport exploded")
        return upstream_handler(request)

    result = asyncio.run(make_aggregator(handler).all_contributions(Period.LAST_WEEK))

    assert [record.kingdom_id for record in result.records] == ["K1", "K2"]
    assert result.failed_pairs == 1
    assert [status.error for status in result.statuses if not status.ok] == ["RuntimeError"]
    assert "Unexpected error fetching landId 200" in caplog.text


def test_bad_records_are_skipped_individually() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"contribution": [{"kingdomId": "K9", "total": "lots"}, {"kingdomId": "K8", "total": 3}]},
        )

    result = asyncio.run(make_aggregator(handler, land_ids=("100",)).all_contributions(Period.LAST_WEEK))

    assert [record.kingdom_id for record in result.records] == ["K8"]
    assert result.statuses[0].ok and result.statuses[0].skipped == 1


def test_error_shape_is_an_empty_successful_pair() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"err": {"code": "no_data"}})

    result = asyncio.run(make_aggregator(handler).all_contributions(Period.LAST_WEEK))

    assert result.records == ()
    assert result.failed_pairs == 0


def test_kingdom_subset_is_a_filter_of_the_full_result() -> None:
    aggregator = make_aggregator(upstream_handler)
    everything = asyncio.run(aggregator.all_contributions(Period.LAST_WEEK))
    mine = asyncio.run(aggregator.contributions_for_kingdoms(["K1"], Period.LAST_WEEK))

    assert list(mine.records) == [record for record in everything.records if record.kingdom_id == "K1"]
    assert mine.date_range == everything.date_range
    assert sum(record.total for record in mine.records) == 100


def test_fan_out_respects_concurrency_cap() -> None:
    in_flight = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return httpx.Response(200, json={"contribution": []})

    aggregator = make_aggregator(handler, land_ids=("1", "2", "3"), max_concurrency=2)
    result = asyncio.run(aggregator.all_contributions(Period.LAST_3_WEEKS))

    assert len(result.statuses) == 12
    assert peak == 2


def test_aggregator_requires_lands_and_positive_concurrency() -> None:
    with pytest.raises(ValueError):
        ContributionAggregator(())
    with pytest.raises(ValueError):
        ContributionAggregator(("1",), max_concurrency=0)
