# growth_garden/core/dependencies.py

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from growth_garden.core.containers import Container
from growth_garden.core.localization import Translator
from growth_garden.core.session_manager import GardenSession
from growth_garden.front_end.api_client import ApiResult, GardenApiClient, GardenApiError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# --- Dependency Provider Functions ---

def get_container(request: Request) -> Container:
    """Dependency to get the DI container stored on app.state."""
    container: Container = getattr(request.app.state, "container", None)
    if container is None:
        logger.critical("CRITICAL: DI container not found in app.state!")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error: Core application container not available."
        )
    return container


def get_garden_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    lang: Optional[str] = Query(None, description="Response language (en or zh)"),
    container: Container = Depends(get_container),
) -> GardenSession:
    """
    The caller's session: bearer token forwarded to the Growth Garden API,
    language from the `lang` query parameter.
    """
    token = credentials.credentials if credentials else None
    return container.session_manager().get_session(token, language=lang)


def get_api_client(
    session: GardenSession = Depends(get_garden_session),
    container: Container = Depends(get_container),
) -> GardenApiClient:
    return container.api_client(session=session)


def get_translator(
    session: GardenSession = Depends(get_garden_session),
    container: Container = Depends(get_container),
) -> Translator:
    return container.translator(session=session)


def unwrap(result: ApiResult):
    """Returns the result's data, or raises an HTTPException with the upstream status."""
    try:
        return result.raise_for_error()
    except GardenApiError as e:
        logger.warning("Garden API call failed: %s", e)
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e
