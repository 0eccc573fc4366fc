"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi.html
"""

from dependency_injector import containers, providers

from evently.platform.config.core_setting import Settings
from evently.platform.database.mongo_setting import MongoConnectionManager
from evently.service.listing.driven_adapter.repo.booking_repo_impl import BookingRepoImpl
from evently.service.listing.driven_adapter.repo.event_repo_impl import EventRepoImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database: one cached connection per process, shared by every repository
    connection_manager = providers.Singleton(
        MongoConnectionManager,
        uri=config_service.provided.MONGODB_URI.get_secret_value.call(),
        database_name=config_service.provided.MONGODB_DB,
        max_pool_size=config_service.provided.MONGODB_MAX_POOL_SIZE,
        server_selection_timeout_ms=config_service.provided.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        socket_timeout_ms=config_service.provided.MONGODB_SOCKET_TIMEOUT_MS,
    )

    # Repositories
    event_repo = providers.Singleton(EventRepoImpl, connection_manager=connection_manager)
    booking_repo = providers.Singleton(
        BookingRepoImpl,
        connection_manager=connection_manager,
        event_repo=event_repo,
    )


container = Container()