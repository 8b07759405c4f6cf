# growth_garden/core/containers.py
import logging
import requests
from dependency_injector import containers, providers

from growth_garden.config.settings import settings as app_settings
from growth_garden.core.localization import Translator
from growth_garden.core.session_manager import session_manager as global_session_manager
from growth_garden.front_end.api_client import GardenApiClient

logger = logging.getLogger(__name__)


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection container for the Growth Garden service.
    Settings and the session manager are process-wide; API clients and
    translators are built per request around the caller's GardenSession.
    """
    settings = providers.Object(app_settings)

    session_manager = providers.Object(global_session_manager)

    # One pooled HTTP session shared by every API client
    http_session = providers.Singleton(requests.Session)

    # Call as container.api_client(session=garden_session)
    api_client = providers.Factory(
        GardenApiClient,
        settings=settings,
        http=http_session,
    )

    # Call as container.translator(session=garden_session)
    translator = providers.Factory(Translator)


# Create container instance at module level
container = None

def init_container() -> Container:
    """Initialize the container if it hasn't been initialized yet."""
    global container
    if container is None:
        container = Container()
        logger.info("DI Container initialized.")
    return container
