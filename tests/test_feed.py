"""
Tests for the NHL schedule feed using an in-process HTTP transport.
"""
import httpx
import pytest

from hockeyplots.feeds.base_feed import FeedAuthenticationError, FeedError
from hockeyplots.feeds.nhl_schedule_feed import NHLScheduleFeed

from factories import NSH, TBL, feed_game_payload


def schedule_payload(*games):
    return {"previousSeason": 20222023, "currentSeason": 20232024, "games": list(games)}


class RecordingTransport:
    """Serves canned responses by team abbreviation and records every request."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        abbrev = request.url.path.split("/")[-2]
        response = self.responses[abbrev]
        if callable(response):
            return response(request)
        return response


def make_feed(transport: RecordingTransport) -> NHLScheduleFeed:
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return NHLScheduleFeed(
        client=client, base_url="https://feed.test/v1/", season="20232024", max_concurrency=2
    )


@pytest.fixture
def tbl_and_nsh(reference):
    return [reference.team_by_api_id(TBL), reference.team_by_api_id(NSH)]


class TestScheduleUrl:
    def test_url_uses_abbrev_and_season(self, reference):
        feed = NHLScheduleFeed(client=httpx.AsyncClient(), base_url="https://feed.test/v1/")
        url = feed.schedule_url(reference.team_by_api_id(TBL))

        assert url == "https://feed.test/v1/club-schedule-season/TBL/20232024"


class TestFetchSchedules:
    """Whole-batch fetching."""

    @pytest.mark.asyncio
    async def test_batch_keyed_by_feed_id_in_team_order(self, tbl_and_nsh):
        shared = feed_game_payload(2023020001, TBL, NSH, 4, 2, "REG")
        transport = RecordingTransport(
            {
                "TBL": httpx.Response(200, json=schedule_payload(shared)),
                "NSH": httpx.Response(
                    200, json=schedule_payload(shared, feed_game_payload(2023020002, NSH, TBL))
                ),
            }
        )
        feed = make_feed(transport)

        batch = await feed.fetch_schedules(tbl_and_nsh)
        await feed.close()

        assert list(batch.schedules) == [TBL, NSH]
        assert batch.season == "20232024"
        assert batch.game_count == 3
        game = batch.schedules[NSH].games[1]
        assert game.id == 2023020002
        assert game.game_outcome is None
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_not_found_fails_without_retry(self, tbl_and_nsh):
        transport = RecordingTransport(
            {
                "TBL": httpx.Response(200, json=schedule_payload()),
                "NSH": httpx.Response(404, json={"message": "not found"}),
            }
        )
        feed = make_feed(transport)

        with pytest.raises(FeedError):
            await feed.fetch_schedules(tbl_and_nsh)
        await feed.close()

        nsh_requests = [r for r in transport.requests if "/NSH/" in r.url.path]
        assert len(nsh_requests) == 1

    @pytest.mark.asyncio
    async def test_malformed_json_abandons_batch(self, tbl_and_nsh):
        transport = RecordingTransport(
            {
                "TBL": httpx.Response(200, json=schedule_payload()),
                "NSH": httpx.Response(200, content=b"<html>maintenance</html>"),
            }
        )
        feed = make_feed(transport)

        with pytest.raises(FeedError):
            await feed.fetch_schedules(tbl_and_nsh)
        await feed.close()

    @pytest.mark.asyncio
    async def test_game_missing_required_fields_is_a_feed_error(self, reference):
        transport = RecordingTransport(
            {"TBL": httpx.Response(200, json=schedule_payload({"id": 1, "gameType": 2}))}
        )
        feed = make_feed(transport)

        with pytest.raises(FeedError):
            await feed.fetch_team_schedule(reference.team_by_api_id(TBL))
        await feed.close()

    @pytest.mark.asyncio
    async def test_authentication_failure(self, reference):
        transport = RecordingTransport({"TBL": httpx.Response(403)})
        feed = make_feed(transport)

        with pytest.raises(FeedAuthenticationError):
            await feed.fetch_team_schedule(reference.team_by_api_id(TBL))
        await feed.close()
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_transient_status_is_retried(self, reference):
        attempts = []

        def flaky(request):
            attempts.append(request)
            if len(attempts) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json=schedule_payload())

        feed = make_feed(RecordingTransport({"TBL": flaky}))

        schedule = await feed.fetch_team_schedule(reference.team_by_api_id(TBL))
        await feed.close()

        assert schedule.games == []
        assert len(attempts) == 2
