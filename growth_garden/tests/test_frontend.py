import json
from datetime import date

import pytest
import requests

from growth_garden.config.settings import AppSettings
from growth_garden.core.session_manager import GardenSession, SessionManager
from growth_garden.front_end.cache import ResponseCache
from growth_garden.front_end.api_client import (
    ApiResult,
    GardenApiClient,
    GardenApiError,
    GardenAuthError,
    call_garden_api,
)
from growth_garden.garden.models import ActionReflection, DailyHabit, GoalCreate

BASE_URL = "http://garden.test"


def make_response(status_code, body=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeHttp:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_client(*replies, token="tok"):
    settings = AppSettings(GARDEN_API_URL=BASE_URL, API_RETRY_ATTEMPTS=3, API_RETRY_WAIT_SECONDS=0)
    session = GardenSession(token=token, language="en", cache_ttl_seconds=60)
    http = FakeHttp(*replies)
    return GardenApiClient(settings, session, http=http), session, http


# --- call_garden_api ---

def test_get_success_sends_bearer_token():
    http = FakeHttp(make_response(200, [{"id": 1}]))
    result = call_garden_api("/api/goals", BASE_URL, "tok", method="GET", http=http)
    assert result == ApiResult(200, [{"id": 1}], None)
    assert result.ok
    assert http.calls[0]["url"] == "http://garden.test/api/goals"
    assert http.calls[0]["headers"]["Authorization"] == "Bearer tok"


def test_http_error_uses_error_field():
    http = FakeHttp(make_response(404, {"error": "Goal not found"}))
    result = call_garden_api("/api/goals/9", BASE_URL, None, method="DELETE", http=http)
    assert result.status_code == 404
    assert result.error == "Goal not found"
    assert "Authorization" not in http.calls[0]["headers"]


def test_http_error_prefers_detail():
    http = FakeHttp(make_response(422, {"detail": "bad date", "error": "other"}))
    assert call_garden_api("/api/daily-habits", BASE_URL, "t", method="POST", data={}, http=http).error == "bad date"


def test_success_with_non_json_body():
    http = FakeHttp(make_response(200, text="<html>oops</html>"))
    result = call_garden_api("/api/goals", BASE_URL, "t", http=http)
    assert result.status_code == 200
    assert result.data is None
    assert "decode JSON" in result.error
    assert not result.ok


def test_no_content():
    http = FakeHttp(make_response(204))
    result = call_garden_api("/api/actions/1", BASE_URL, "t", method="DELETE", http=http)
    assert result.ok
    assert result.data is None


def test_unsupported_method():
    http = FakeHttp()
    result = call_garden_api("/api/goals", BASE_URL, "t", method="TRACE", http=http)
    assert result.status_code == 405
    assert http.calls == []


def test_get_retries_connection_errors_then_maps_to_503():
    http = FakeHttp(*[requests.exceptions.ConnectionError("down")] * 3)
    result = call_garden_api("/api/goals", BASE_URL, "t", http=http, retry_attempts=3)
    assert result.status_code == 503
    assert len(http.calls) == 3


def test_get_recovers_after_transient_error():
    http = FakeHttp(requests.exceptions.Timeout("slow"), make_response(200, []))
    result = call_garden_api("/api/goals", BASE_URL, "t", http=http, retry_attempts=3)
    assert result == ApiResult(200, [], None)
    assert len(http.calls) == 2


def test_mutations_are_not_retried():
    http = FakeHttp(requests.exceptions.Timeout("slow"), make_response(200, {}))
    result = call_garden_api("/api/goals", BASE_URL, "t", method="POST", data={"name": "x"}, http=http, retry_attempts=3)
    assert result.status_code == 504
    assert len(http.calls) == 1


def test_other_request_errors_map_to_500():
    http = FakeHttp(requests.exceptions.InvalidURL("bad"))
    assert call_garden_api("/api/goals", BASE_URL, "t", http=http).status_code == 500


def test_raise_for_error():
    assert ApiResult(200, {"a": 1}).raise_for_error() == {"a": 1}
    with pytest.raises(GardenAuthError):
        ApiResult(401, None, "expired").raise_for_error()
    with pytest.raises(GardenApiError) as exc_info:
        ApiResult(503, None, "down").raise_for_error()
    assert exc_info.value.status_code == 503
    assert exc_info.value.detail == "down"


# --- GardenApiClient ---

GOALS = [{"id": 1, "name": "Garden", "plantType": "tree", "currentLevel": 2}]


def test_reads_are_cached():
    client, _, http = make_client(make_response(200, GOALS))
    first = client.list_goals()
    second = client.list_goals()
    assert first.data[0].name == "Garden"
    assert second.data == first.data
    assert len(http.calls) == 1


def test_complete_action_invalidates_affected_families():
    client, session, http = make_client(make_response(200, {"id": 5, "status": "completed"}))
    for key in [("goals",), ("actions",), ("achievements",), ("daily-habits", "2024-05-01")]:
        session.cache.set(key, [])

    assert client.complete_action("5").ok
    assert http.calls[0]["method"] == "PATCH"
    assert http.calls[0]["url"].endswith("/api/actions/5/complete")
    assert not session.cache.contains(("goals",))
    assert not session.cache.contains(("actions",))
    assert not session.cache.contains(("achievements",))
    assert session.cache.contains(("daily-habits", "2024-05-01"))


def test_reflection_only_invalidates_actions():
    client, session, http = make_client(make_response(200, {}))
    session.cache.set(("goals",), [])
    session.cache.set(("actions",), [])
    client.save_reflection("5", ActionReflection(feeling="Proud", reflection="Went well", satisfaction=5))
    assert http.calls[0]["json"] == {"feeling": "Proud", "reflection": "Went well", "difficulty": 3, "satisfaction": 5}
    assert session.cache.contains(("goals",))
    assert not session.cache.contains(("actions",))


def test_delete_goal_invalidates_goals_and_actions():
    client, session, _ = make_client(make_response(204))
    session.cache.set(("goals",), [])
    session.cache.set(("actions",), [])
    assert client.delete_goal("1").ok
    assert len(session.cache) == 0


def test_create_goal_returns_model():
    client, _, http = make_client(make_response(201, {"id": 9, "name": "Yoga", "plantType": "flower"}))
    result = client.create_goal(GoalCreate(name="Yoga", plant_type="flower"))
    assert result.data.id == "9"
    assert http.calls[0]["json"]["plantType"] == "flower"


def test_unauthorized_clears_token():
    client, session, _ = make_client(make_response(401, {"error": "Invalid token"}))
    result = client.list_actions()
    assert result.status_code == 401
    assert session.token is None


def test_invalid_payload_is_an_error_and_not_cached():
    client, session, _ = make_client(make_response(200, [{"name": "missing id"}]))
    result = client.list_goals()
    assert not result.ok
    assert "Invalid response payload" in result.error
    assert len(session.cache) == 0


def test_current_user_refreshes_token():
    client, session, _ = make_client(make_response(200, {"user": {"id": 3, "email": "a@b.c"}, "token": "fresh"}))
    result = client.get_current_user()
    assert result.data.email == "a@b.c"
    assert session.token == "fresh"
    assert session.user.id == "3"


def test_current_user_failure_clears_token():
    client, session, _ = make_client(make_response(500, {"error": "boom"}))
    assert not client.get_current_user().ok
    assert session.token is None


def test_current_user_without_token_skips_request():
    client, _, http = make_client(token=None)
    assert client.get_current_user().status_code == 401
    assert http.calls == []


def test_sign_out_always_clears_session():
    client, session, _ = make_client(requests.exceptions.ConnectionError("down"))
    result = client.sign_out()
    assert result.status_code == 503
    assert session.token is None


def test_oauth_login_url():
    client, _, _ = make_client()
    assert client.oauth_login_url("github") == "http://garden.test/api/auth/github"
    with pytest.raises(ValueError):
        client.oauth_login_url("myspace")


def test_save_new_daily_habit_posts_with_date():
    client, session, http = make_client(
        make_response(404, {"error": "Not found"}),
        make_response(201, {"date": "2024-05-01", "exercise": True}),
    )
    habit = DailyHabit(day=date(2024, 5, 1), exercise=True)
    result = client.save_daily_habit(habit)
    assert result.ok
    assert [c["method"] for c in http.calls] == ["GET", "POST"]
    assert http.calls[1]["url"].endswith("/api/daily-habits")
    assert http.calls[1]["json"]["date"] == "2024-05-01"
    assert not session.cache.contains(("daily-habits", "2024-05-01"))


def test_save_existing_daily_habit_patches_day():
    client, _, http = make_client(
        make_response(200, {"date": "2024-05-01", "eatHealthy": True}),
        make_response(200, {"date": "2024-05-01", "eatHealthy": True, "exercise": True}),
    )
    client.save_daily_habit(DailyHabit(day=date(2024, 5, 1), eat_healthy=True, exercise=True))
    assert [c["method"] for c in http.calls] == ["GET", "PATCH"]
    assert http.calls[1]["url"].endswith("/api/daily-habits/2024-05-01")
    assert "date" not in http.calls[1]["json"]


def test_historical_reports_pass_weeks():
    client, _, http = make_client(make_response(200, [{"weekStart": "2024-04-29", "weekEnd": "2024-05-05"}]))
    result = client.get_historical_reports(4)
    assert result.data[0].week_start == "2024-04-29"
    assert http.calls[0]["params"] == {"weeks": 4}
    with pytest.raises(ValueError):
        client.get_historical_reports(0)


def test_regenerate_insights_invalidates_weekly_report():
    client, session, _ = make_client(make_response(200, {"ok": True}))
    session.cache.set(("weekly-report",), None)
    client.regenerate_insights()
    assert not session.cache.contains(("weekly-report",))


class TickingClock:
    """Advances 20 seconds on every reading."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        current = self.now
        self.now += 20
        return current


def test_cached_read_is_a_single_lookup():
    client, session, http = make_client()
    session.cache = ResponseCache(ttl_seconds=30, clock=TickingClock())
    session.cache.set(("goals",), ["cached goal"])
    assert client.list_goals() == ApiResult(200, ["cached goal"], None)

    session.cache = ResponseCache(ttl_seconds=30, clock=TickingClock())
    session.cache.set(("daily-habits", "2024-05-01"), "cached habit")
    assert client.get_daily_habit("2024-05-01") == ApiResult(200, "cached habit", None)
    assert http.calls == []


def test_unauthorized_session_is_replaced_on_next_request():
    manager = SessionManager()
    settings = AppSettings(GARDEN_API_URL=BASE_URL, API_RETRY_ATTEMPTS=1, API_RETRY_WAIT_SECONDS=0)
    http = FakeHttp(make_response(401, {"error": "expired"}), make_response(200, GOALS))

    first = manager.get_session("tok")
    assert GardenApiClient(settings, first, http=http).list_goals().status_code == 401
    assert len(manager) == 0

    second = manager.get_session("tok")
    assert second is not first
    assert GardenApiClient(settings, second, http=http).list_goals().ok
    assert http.calls[1]["headers"]["Authorization"] == "Bearer tok"
