"""
Async HTTP client for the tracker API.

Wraps the routes the web pages call and normalises every outcome into a
small result object instead of raising: a 401 becomes a "Please log in"
message, any other failure carries the `error` text from the response body.
There are no retries and nothing is cached.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from app.db.models import DECISION_STATUSES, ApplicationStatus
from app.utils.datetime_utils import utc_today
from app.utils.logging import get_logger

logger = get_logger()

DEFAULT_ITEMS_PER_PAGE = 30

# UI filter label -> inclusive range
RANKING_RANGES = {
    "Top 10": (1, 10),
    "Top 25": (1, 25),
    "Top 50": (1, 50),
    "Top 100": (1, 100),
}

ACCEPTANCE_RATE_RANGES = {
    "Under 10%": (0, 10),
    "10-25%": (10, 25),
    "25-50%": (25, 50),
    "Over 50%": (50, 100),
}

# "Show everything" labels of the filter dropdowns
ALL_LOCATIONS = "All Locations"
ALL_RANKINGS = "All Rankings"
ALL_ACCEPTANCE_RATES = "All Acceptance Rates"
ALL_MAJORS = "All Majors"


@dataclass
class ApiResult:
    data: Any = None
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ListResult:
    items: List[Any] = field(default_factory=list)
    pagination: Optional[Dict[str, Any]] = None
    unread: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _iso(value: Union[date, str, None]) -> Optional[str]:
    if isinstance(value, date):
        return value.isoformat()
    return value


def build_status_patch(
    current: Mapping[str, Any],
    new_status: Union[ApplicationStatus, str],
    submitted_date: Union[date, str, None] = None,
    decision_date: Union[date, str, None] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Body for PUT /applications/{id} when the status changes.

    `current` is the application as last fetched. Dates passed explicitly win
    over the current values; missing submission and decision dates default
    to today.
    """
    status = ApplicationStatus(new_status)
    today_iso = (today or utc_today()).isoformat()
    submitted = _iso(submitted_date) or current.get("submitted_date")
    decided = _iso(decision_date) or current.get("decision_date")

    patch: Dict[str, Any] = {"status": status.value}
    if status == ApplicationStatus.SUBMITTED:
        patch.update(
            submitted_date=submitted or today_iso,
            decision_date=None,
            decision_type=None,
        )
    elif status == ApplicationStatus.UNDER_REVIEW:
        patch.update(submitted_date=submitted, decision_date=None, decision_type=None)
    elif status in DECISION_STATUSES:
        patch.update(decision_type=status.value, decision_date=decided or today_iso)
        if current.get("submitted_date"):
            patch["submitted_date"] = current["submitted_date"]
    else:
        patch.update(submitted_date=None, decision_date=None, decision_type=None)
    return patch


def build_university_query(
    filters: Optional[Mapping[str, Any]] = None,
    page: int = 1,
    items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
) -> Dict[str, str]:
    """Map the university filter bar's selections to GET /universities query parameters"""
    filters = filters or {}
    params: Dict[str, str] = {}

    if filters.get("search"):
        params["q"] = filters["search"]

    location = filters.get("location")
    if location and location != ALL_LOCATIONS:
        params["country"] = location

    ranking = RANKING_RANGES.get(filters.get("ranking") or ALL_RANKINGS)
    if ranking:
        params["ranking_min"], params["ranking_max"] = map(str, ranking)

    acceptance_label = filters.get("acceptance_rate") or filters.get("acceptanceRate")
    acceptance = ACCEPTANCE_RATE_RANGES.get(acceptance_label or ALL_ACCEPTANCE_RATES)
    if acceptance:
        params["acceptance_rate_min"], params["acceptance_rate_max"] = map(
            str, acceptance
        )

    major = filters.get("major")
    if major and major != ALL_MAJORS:
        params["program"] = major

    items_per_page = items_per_page or DEFAULT_ITEMS_PER_PAGE
    page = max(page or 1, 1)
    params.update(
        limit=str(items_per_page),
        offset=str((page - 1) * items_per_page),
        sort_by="ranking",
        sort_order="asc",
    )
    return params


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return f"HTTP error! status: {response.status_code}"


class PortalClient:
    """
    Client for the /api/v1 routes, authenticated with the caller's access token.

    Pass `client` to reuse an existing `httpx.AsyncClient` (for example one
    mounted on the ASGI app); otherwise one is created for `base_url`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        access_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        api_prefix: str = "/api/v1",
        timeout: float = 30.0,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.api_prefix = api_prefix.rstrip("/")
        self.headers = {"Accept": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    async def __aenter__(self) -> "PortalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _request(
        self, method: str, path: str, **kwargs
    ) -> Union[httpx.Response, str]:
        """The response, or the error text when the request never completed"""
        try:
            return await self.client.request(
                method, f"{self.api_prefix}{path}", headers=self.headers, **kwargs
            )
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            return str(e) or "Network error"

    async def _call(
        self, method: str, path: str, login_message: str, **kwargs
    ) -> ApiResult:
        response = await self._request(method, path, **kwargs)
        if isinstance(response, str):
            return ApiResult(error=response)
        if response.status_code == 401:
            return ApiResult(error=login_message)
        if response.is_error:
            return ApiResult(error=_error_message(response))

        body = response.json()
        return ApiResult(data=body.get("data"), message=body.get("message"))

    async def _list(
        self, method: str, path: str, login_message: str, **kwargs
    ) -> ListResult:
        response = await self._request(method, path, **kwargs)
        if isinstance(response, str):
            return ListResult(error=response)
        if response.status_code == 401:
            return ListResult(error=login_message)
        if response.is_error:
            return ListResult(error=_error_message(response))

        body = response.json()
        return ListResult(
            items=body.get("data") or [],
            pagination=body.get("pagination"),
            unread=body.get("unread") or 0,
        )

    # Applications

    async def get_applications(self) -> ListResult:
        return await self._list(
            "GET", "/applications", "Please log in to view your applications"
        )

    async def add_to_application_list(
        self,
        university_id: str,
        application_type: Optional[str] = None,
        deadline: Union[date, str, None] = None,
        notes: Optional[str] = None,
    ) -> ApiResult:
        body = {"university_id": university_id}
        optional = {
            "application_type": application_type,
            "deadline": _iso(deadline),
            "notes": notes,
        }
        body.update({key: value for key, value in optional.items() if value is not None})
        return await self._call(
            "POST",
            "/applications",
            "Please log in to add universities to your list",
            json=body,
        )

    async def is_university_in_application_list(self, university_id: str) -> ApiResult:
        result = await self.get_applications()
        if not result.ok:
            return ApiResult(data=False, error=result.error)
        return ApiResult(
            data=any(a.get("university_id") == university_id for a in result.items)
        )

    async def get_application(self, application_id: str) -> ApiResult:
        return await self._call(
            "GET",
            f"/applications/{application_id}",
            "Please log in to view this application",
        )

    async def update_application(
        self, application_id: str, patch: Mapping[str, Any]
    ) -> ApiResult:
        return await self._call(
            "PUT",
            f"/applications/{application_id}",
            "Please log in to update your application",
            json=dict(patch),
        )

    async def update_application_status(
        self,
        application: Mapping[str, Any],
        new_status: Union[ApplicationStatus, str],
        submitted_date: Union[date, str, None] = None,
        decision_date: Union[date, str, None] = None,
    ) -> ApiResult:
        patch = build_status_patch(
            application, new_status, submitted_date, decision_date
        )
        return await self.update_application(application["id"], patch)

    # Universities and requirements

    async def fetch_universities(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
    ) -> ListResult:
        return await self._list(
            "GET",
            "/universities",
            "Please log in to search universities",
            params=build_university_query(filters, page, items_per_page),
        )

    async def fetch_requirements(
        self, university_id: str, application_id: Optional[str] = None
    ) -> ListResult:
        params = {"application_id": application_id} if application_id else None
        return await self._list(
            "GET",
            f"/universities/{university_id}/requirements",
            "Please log in to view requirements",
            params=params,
        )

    async def update_requirement_progress(
        self,
        application_id: str,
        requirement_id: str,
        status: str,
        notes: Optional[str] = None,
    ) -> ApiResult:
        body = {"status": status}
        if notes is not None:
            body["notes"] = notes
        return await self._call(
            "PUT",
            f"/applications/{application_id}/requirements/{requirement_id}",
            "Please log in to update requirements",
            json=body,
        )

    # Notifications and parent notes

    async def get_notifications(self) -> ListResult:
        return await self._list(
            "GET", "/student/notifications", "Please log in to view notifications"
        )

    async def post_parent_note(self, application_id: str, note: str) -> ApiResult:
        return await self._call(
            "POST",
            "/parent/notes",
            "Please log in to leave a note",
            json={"application_id": application_id, "note": note},
        )
