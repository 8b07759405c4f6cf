# growth_garden/front_end/api_client.py
import requests
import json
import logging
from datetime import date
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Union

from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from growth_garden.config import constants
from growth_garden.core.logging_tracking import GardenActivityLogger, log_once_per_session
from growth_garden.garden.models import (
    Achievement,
    ActionCreate,
    ActionReflection,
    ActionUpdate,
    DailyHabit,
    Goal,
    GoalCreate,
    StorageStatus,
    User,
    WeeklyReport,
    parse_actions,
    parse_goals,
)

KEY_STATUS_CODE = "status_code"
KEY_ERROR = "error"
KEY_DETAIL = "detail"
KEY_DATA = "data"

SUPPORTED_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE")
RETRYABLE_EXCEPTIONS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)
LOG_TRUNCATE_CHARS = 500

# Get logger for this module
logger = logging.getLogger(__name__)

_MISSING = object()


class GardenApiError(Exception):
    """Raised by ApiResult.raise_for_error() for a failed API call."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class GardenAuthError(GardenApiError):
    """The API rejected the session's credentials (401)."""


class ApiResult(NamedTuple):
    """Outcome of one API call. Exactly one of data / error is meaningful."""
    status_code: int
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code < 400

    def raise_for_error(self) -> Any:
        """Returns data, or raises GardenApiError / GardenAuthError."""
        if self.ok:
            return self.data
        if self.status_code == 401:
            raise GardenAuthError(self.status_code, self.error or "Authentication required")
        raise GardenApiError(self.status_code, self.error or f"HTTP Error {self.status_code}")

    def as_dict(self) -> Dict[str, Any]:
        return {KEY_STATUS_CODE: self.status_code, KEY_DATA: self.data, KEY_ERROR: self.error}


def _truncate(text: str) -> str:
    return f"{text[:LOG_TRUNCATE_CHARS]}{'...' if len(text) > LOG_TRUNCATE_CHARS else ''}"


def _error_detail(response: requests.Response) -> str:
    try:
        # Prioritize 'detail', then 'error', then the raw text
        error_json = response.json()
        if isinstance(error_json, dict):
            detail = error_json.get(KEY_DETAIL, error_json.get(KEY_ERROR))
            if detail:
                return str(detail)
        return response.text or f"HTTP Error {response.status_code}"
    except ValueError:
        return response.text or f"HTTP Error {response.status_code} (non-JSON body)"


def call_garden_api(
    endpoint: str,
    backend_url: str,
    api_token: Optional[str],
    method: str = "GET",
    data: Optional[Union[Dict[str, Any], List[Any]]] = None,
    params: Optional[Dict[str, Any]] = None,
    http: Optional[Any] = None,
    timeout: float = 30.0,
    retry_attempts: int = 1,
    retry_wait: float = 0.0,
) -> ApiResult:
    """
    Calls the Growth Garden API. Never raises for transport or HTTP problems.

    Args:
        endpoint (str): API endpoint path (e.g., "/api/goals").
        backend_url (str): The base URL of the API.
        api_token (Optional[str]): Bearer token, if signed in.
        method (str): GET, POST, PATCH, PUT or DELETE.
        data (dict, optional): JSON body.
        params (dict, optional): Query parameters.
        http: Object with a requests-style `request` method (a requests.Session).
            Defaults to the requests module.
        timeout (float): Seconds before the request times out.
        retry_attempts (int): Total attempts for GET requests on connection
            errors and timeouts. Mutations are sent once.
        retry_wait (float): Seconds between attempts.

    Returns:
        ApiResult(status_code, data, error). Connection errors map to 503,
        timeouts to 504, other request failures to 500 and unsupported
        methods to 405.
    """
    headers = {"Content-Type": "application/json"}
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"

    url = f"{backend_url.rstrip('/')}{endpoint}"
    method_upper = method.upper()
    if method_upper not in SUPPORTED_METHODS:
        logger.error("Unsupported HTTP method requested: %s", method)
        return ApiResult(405, None, f"Unsupported HTTP method: {method}")

    logger.debug("Calling API: %s %s", method_upper, url)
    if data is not None:
        try:
            log_data_repr = json.dumps(data)
        except TypeError:
            log_data_repr = str(data)
        logger.debug("Payload (JSON): %s", _truncate(log_data_repr))
    if params:
        logger.debug("Params: %s", params)

    sender = http if http is not None else requests
    attempts = max(1, retry_attempts) if method_upper == "GET" else 1
    retryer = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(retry_wait),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        reraise=True,
    )

    try:
        response = retryer(
            sender.request, method_upper, url,
            json=data, headers=headers, params=params, timeout=timeout,
        )
        logger.debug("API Raw Response Status: %s", response.status_code)

        # --- Handle Non-Success Status Codes (>= 400) ---
        if not response.ok:
            error_detail = _error_detail(response)
            logger.warning("HTTP Error %s calling %s. Detail: %s", response.status_code, url, _truncate(error_detail))
            return ApiResult(response.status_code, None, error_detail)

        # --- Handle Success Cases (2xx) ---
        if response.status_code == 204 or not response.content:
            logger.debug("API Response %s with no content for %s", response.status_code, url)
            return ApiResult(response.status_code, None, None)

        try:
            response_json = response.json()
        except ValueError:
            logger.error(
                "Failed to decode JSON from SUCCESSFUL (%s) response from %s. Response text: %s",
                response.status_code, url, _truncate(response.text),
            )
            return ApiResult(
                response.status_code, None,
                "Failed to decode JSON response from server, although status was OK.",
            )
        logger.debug("API Success Response Data: %s", _truncate(str(response_json)))
        return ApiResult(response.status_code, response_json, None)

    # --- Handle Network/Request Errors ---
    except requests.exceptions.ConnectionError as conn_err:
        logger.error("Connection Error calling %s: %s", url, conn_err)
        return ApiResult(503, None, f"Connection error: Could not connect to backend at {backend_url}.")
    except requests.exceptions.Timeout as timeout_err:
        logger.error("Timeout Error calling %s: %s", url, timeout_err)
        return ApiResult(504, None, "Timeout error: The request to the backend timed out.")
    except requests.exceptions.RequestException as req_err:
        logger.error("Request Exception calling %s: %s", url, req_err)
        return ApiResult(500, None, f"Network request error: {req_err}")


def _day_key(day: Union[date, str]) -> str:
    return day.isoformat() if isinstance(day, date) else str(day)


class GardenApiClient:
    """
    Typed access to the Growth Garden API for one session.

    Reads are served from the session's cache when fresh. Every mutation
    drops the cache families it affects, so the next read refetches. A 401
    from any call signs the session out.
    """

    def __init__(self, settings, session, http: Optional[Any] = None):
        self.settings = settings
        self.session = session
        self.http = http if http is not None else requests.Session()
        self.activity = GardenActivityLogger()

    # --- plumbing ---

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        is_read = method.upper() == "GET"
        result = call_garden_api(
            endpoint,
            backend_url=self.settings.GARDEN_API_URL,
            api_token=self.session.token,
            method=method,
            data=data,
            params=params,
            http=self.http,
            timeout=self.settings.API_REQUEST_TIMEOUT if is_read else self.settings.API_MUTATION_TIMEOUT,
            retry_attempts=self.settings.API_RETRY_ATTEMPTS,
            retry_wait=self.settings.API_RETRY_WAIT_SECONDS,
        )
        if result.status_code == 401:
            logger.warning("Authentication required for %s %s; clearing session token", method, endpoint)
            self.session.clear_token()
        return result

    @staticmethod
    def _parsed(result: ApiResult, parse: Callable[[Any], Any]) -> ApiResult:
        if not result.ok:
            return result
        try:
            return ApiResult(result.status_code, parse(result.data), None)
        except ValidationError as e:
            logger.error("Invalid response payload (%d errors): %s", e.error_count(), e)
            return ApiResult(result.status_code, None, f"Invalid response payload: {e.error_count()} validation errors")

    def _cached_get(
        self,
        key: tuple,
        endpoint: str,
        parse: Callable[[Any], Any],
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResult:
        cache = self.session.cache
        cached = cache.get(key, _MISSING)
        if cached is not _MISSING:
            logger.debug("Cache hit for %s", key)
            return ApiResult(200, cached, None)
        result = self._parsed(self._request("GET", endpoint, params=params), parse)
        if result.ok:
            cache.set(key, result.data)
        return result

    def _invalidate(self, *resources: str) -> None:
        for resource in resources:
            self.session.cache.invalidate(resource)

    def _track(self, resource: str, event_type: str, resource_id: Optional[str], result: ApiResult) -> None:
        self.activity.user_id = self.session.user.id if self.session.user else None
        self.activity.log_event(
            resource, event_type, resource_id,
            succeeded=result.ok,
            event_metadata={"error": result.error} if not result.ok else None,
        )

    # --- auth ---

    def get_current_user(self) -> ApiResult:
        """Fetches the signed-in user. Refreshes the token when the API sends a new one."""
        if not self.session.token:
            return ApiResult(401, None, "Not signed in")
        result = self._request("GET", "/api/auth/me")
        if not result.ok or not isinstance(result.data, dict) or not result.data.get("user"):
            logger.info("Auth check failed (status %s); clearing session token", result.status_code)
            self.session.clear_token()
            return result if not result.ok else ApiResult(result.status_code, None, "No user in auth response")

        parsed = self._parsed(result, lambda body: User.model_validate(body["user"]))
        if not parsed.ok:
            self.session.clear_token()
            return parsed
        if result.data.get("token"):
            self.session.set_token(result.data["token"])
        self.session.user = parsed.data
        return parsed

    def sign_out(self) -> ApiResult:
        """Logs out remotely; the local session is cleared whatever the outcome."""
        try:
            result = self._request("POST", "/api/auth/logout")
            if not result.ok:
                logger.warning("Logout request failed: %s", result.error)
            return result
        finally:
            self.session.clear_token()

    def oauth_login_url(self, provider: str) -> str:
        if provider not in constants.OAUTH_PROVIDERS:
            raise ValueError(f"Unsupported OAuth provider '{provider}'. Expected one of {constants.OAUTH_PROVIDERS}.")
        return f"{self.settings.GARDEN_API_URL.rstrip('/')}/api/auth/{provider}"

    # --- goals ---

    def list_goals(self) -> ApiResult:
        return self._cached_get((constants.RESOURCE_GOALS,), "/api/goals", parse_goals)

    def create_goal(self, goal: GoalCreate) -> ApiResult:
        result = self._parsed(self._request("POST", "/api/goals", data=goal.to_payload()), Goal.model_validate)
        if result.ok:
            self._invalidate(constants.RESOURCE_GOALS)
        self._track(constants.RESOURCE_GOALS, "created", result.data.id if result.ok else None, result)
        return result

    def delete_goal(self, goal_id: str) -> ApiResult:
        result = self._request("DELETE", f"/api/goals/{goal_id}")
        if result.ok:
            self._invalidate(constants.RESOURCE_GOALS, constants.RESOURCE_ACTIONS)
        self._track(constants.RESOURCE_GOALS, "deleted", goal_id, result)
        return result

    # --- actions ---

    def list_actions(self) -> ApiResult:
        return self._cached_get((constants.RESOURCE_ACTIONS,), "/api/actions", parse_actions)

    def create_action(self, action: ActionCreate) -> ApiResult:
        result = self._request("POST", "/api/actions", data=action.to_payload())
        if result.ok:
            self._invalidate(constants.RESOURCE_ACTIONS, constants.RESOURCE_GOALS)
        self._track(constants.RESOURCE_ACTIONS, "created", None, result)
        return result

    def update_action(self, action_id: str, changes: ActionUpdate) -> ApiResult:
        result = self._request("PATCH", f"/api/actions/{action_id}", data=changes.to_payload())
        if result.ok:
            self._invalidate(constants.RESOURCE_ACTIONS, constants.RESOURCE_GOALS)
        self._track(constants.RESOURCE_ACTIONS, "updated", action_id, result)
        return result

    def delete_action(self, action_id: str) -> ApiResult:
        result = self._request("DELETE", f"/api/actions/{action_id}")
        if result.ok:
            self._invalidate(constants.RESOURCE_ACTIONS, constants.RESOURCE_GOALS)
        self._track(constants.RESOURCE_ACTIONS, "deleted", action_id, result)
        return result

    def complete_action(self, action_id: str) -> ApiResult:
        """Completing an action waters its goal and may unlock achievements."""
        result = self._request("PATCH", f"/api/actions/{action_id}/complete")
        if result.ok:
            self._invalidate(constants.RESOURCE_ACTIONS, constants.RESOURCE_GOALS, constants.RESOURCE_ACHIEVEMENTS)
        self._track(constants.RESOURCE_ACTIONS, "completed", action_id, result)
        return result

    def save_reflection(self, action_id: str, reflection: ActionReflection) -> ApiResult:
        result = self._request("PATCH", f"/api/actions/{action_id}/reflection", data=reflection.to_payload())
        if result.ok:
            self._invalidate(constants.RESOURCE_ACTIONS)
        self._track(constants.RESOURCE_ACTIONS, "reflected", action_id, result)
        return result

    # --- daily habits ---

    def get_daily_habit(self, day: Union[date, str]) -> ApiResult:
        """The habit check-in for a day; data is None when the day has none yet."""
        day_key = _day_key(day)
        key = (constants.RESOURCE_DAILY_HABITS, day_key)
        cache = self.session.cache
        cached = cache.get(key, _MISSING)
        if cached is not _MISSING:
            return ApiResult(200, cached, None)

        result = self._request("GET", f"/api/daily-habits/{day_key}")
        if result.status_code == 404:
            result = ApiResult(200, None, None)
        result = self._parsed(result, lambda body: DailyHabit.model_validate(body) if body else None)
        if result.ok:
            cache.set(key, result.data)
        return result

    def save_daily_habit(self, habit: DailyHabit) -> ApiResult:
        """Updates the day's check-in when one exists, otherwise creates it."""
        day_key = habit.day.isoformat()
        existing = self.get_daily_habit(habit.day)
        if not existing.ok:
            return existing

        payload = habit.to_payload()
        if existing.data is not None:
            payload.pop("date", None)
            result = self._request("PATCH", f"/api/daily-habits/{day_key}", data=payload)
        else:
            result = self._request("POST", "/api/daily-habits", data=payload)
        if result.ok:
            self.session.cache.invalidate(constants.RESOURCE_DAILY_HABITS, day_key)
        self._track(constants.RESOURCE_DAILY_HABITS, "saved", day_key, result)
        return self._parsed(result, lambda body: DailyHabit.model_validate(body) if body else None)

    # --- weekly reflection reports ---

    def get_weekly_report(self) -> ApiResult:
        return self._cached_get(
            (constants.RESOURCE_WEEKLY_REPORT,),
            "/api/reports/weekly-reflection",
            lambda body: WeeklyReport.model_validate(body) if body else None,
        )

    def generate_weekly_report(self) -> ApiResult:
        result = self._parsed(
            self._request("POST", "/api/reports/weekly-reflection"),
            lambda body: WeeklyReport.model_validate(body) if body else None,
        )
        if result.ok:
            self.session.cache.set((constants.RESOURCE_WEEKLY_REPORT,), result.data)
        return result

    def regenerate_insights(self) -> ApiResult:
        result = self._request("POST", "/api/reports/regenerate-insights")
        if result.ok:
            self._invalidate(constants.RESOURCE_WEEKLY_REPORT)
        return result

    def get_historical_reports(self, weeks: int = 8) -> ApiResult:
        if weeks < 1:
            raise ValueError("weeks must be at least 1")
        return self._cached_get(
            (constants.RESOURCE_HISTORICAL_REPORTS, weeks),
            "/api/reports/historical",
            lambda body: [WeeklyReport.model_validate(item) for item in body or []],
            params={"weeks": weeks},
        )

    # --- achievements & storage ---

    def list_achievements(self) -> ApiResult:
        return self._cached_get(
            (constants.RESOURCE_ACHIEVEMENTS,),
            "/api/achievements",
            lambda body: [Achievement.model_validate(item) for item in body or []],
        )

    def check_achievements(self) -> ApiResult:
        result = self._request("POST", "/api/achievements/check")
        if result.ok:
            self._invalidate(constants.RESOURCE_ACHIEVEMENTS)
        return result

    def get_storage_status(self) -> ApiResult:
        result = self._cached_get(
            (constants.RESOURCE_STORAGE_STATUS,),
            "/api/storage-status",
            StorageStatus.model_validate,
        )
        if result.ok and result.data.needs_warning:
            log_once_per_session("warning", f"Garden API storage is '{result.data.type}'; data may not persist.")
        return result
