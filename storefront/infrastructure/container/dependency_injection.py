"""
Dependency Injection Container

Manages the instantiation and lifecycle of dependencies for Clean Architecture.
"""

import logging
from typing import Any, Dict, Optional

from ...application.use_cases.address_book_use_case import AddressBookUseCase
from ...application.use_cases.cart_management_use_case import CartEngine
from ...application.use_cases.customer_directory_use_case import CustomerDirectoryUseCase
from ...application.use_cases.order_creation_use_case import OrderAssembler
from ...application.use_cases.order_status_management_use_case import (
    OrderStatusManagementUseCase,
)
from ...application.use_cases.payment_verification_use_case import PaymentVerificationUseCase
from ...domain.repositories.address_repository import AddressRepository
from ...domain.repositories.cart_repository import CartRepository
from ...domain.repositories.catalog_repository import CatalogRepository
from ...domain.repositories.local_cart_store import LocalCartStore
from ...domain.repositories.order_repository import OrderRepository
from ..configuration.config import Settings, get_config
from ..repositories.session_handler import SessionFactory
from ..repositories.sqlalchemy_address_repository import SQLAlchemyAddressRepository
from ..repositories.sqlalchemy_cart_repository import SQLAlchemyCartRepository
from ..repositories.sqlalchemy_catalog_repository import SQLAlchemyCatalogRepository
from ..repositories.sqlalchemy_order_repository import SQLAlchemyOrderRepository
from ..storage.local_cart_storage import JsonFileCartStore

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container for Clean Architecture

    Manages the instantiation and lifecycle of:
    - Repositories (Infrastructure layer)
    - Use Cases (Application layer)

    Cart engines are per session and are built on demand by
    ``create_cart_engine``.
    """

    def __init__(
        self, config: Optional[Settings] = None, session_factory: Optional[SessionFactory] = None
    ):
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self._config = config or get_config()
        self._session_factory = session_factory
        self._setup_dependencies()

    @property
    def config(self) -> Settings:
        return self._config

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        # Infrastructure Layer - Repositories
        self._register_repositories()

        # Application Layer - Use Cases
        self._register_use_cases()

        self._logger.info("Dependency injection container setup complete")

    def _register_repositories(self):
        """Register repository implementations"""
        self._instances["catalog_repository"] = SQLAlchemyCatalogRepository(self._session_factory)
        self._instances["cart_repository"] = SQLAlchemyCartRepository(self._session_factory)
        self._instances["order_repository"] = SQLAlchemyOrderRepository(self._session_factory)
        self._instances["address_repository"] = SQLAlchemyAddressRepository(self._session_factory)

        self._logger.debug("Repositories registered successfully")

    def _register_use_cases(self):
        """Register use case implementations with their dependencies"""
        self._instances["order_assembler"] = OrderAssembler(
            catalog_repository=self.get_catalog_repository(),
            order_repository=self.get_order_repository(),
        )

        self._instances["order_status_management_use_case"] = OrderStatusManagementUseCase(
            order_repository=self.get_order_repository()
        )

        self._instances["payment_verification_use_case"] = PaymentVerificationUseCase(
            order_repository=self.get_order_repository(),
            cart_repository=self.get_cart_repository(),
            config=self._config,
        )

        self._instances["address_book_use_case"] = AddressBookUseCase(
            address_repository=self.get_address_repository()
        )

        self._instances["customer_directory_use_case"] = CustomerDirectoryUseCase(
            order_repository=self.get_order_repository()
        )

        self._logger.debug("Use cases registered successfully")

    def create_cart_engine(
        self, user_id: Optional[str] = None, local_store: Optional[LocalCartStore] = None
    ) -> CartEngine:
        """Build a cart engine for one session"""
        return CartEngine(
            catalog_repository=self.get_catalog_repository(),
            cart_repository=self.get_cart_repository(),
            local_store=local_store or JsonFileCartStore(self._config.local_cart_dir),
            config=self._config,
            user_id=user_id,
        )

    async def open_cart_engine(
        self, user_id: Optional[str] = None, local_store: Optional[LocalCartStore] = None
    ) -> CartEngine:
        """Build a cart engine and load the catalog entries of its restored lines"""
        engine = self.create_cart_engine(user_id=user_id, local_store=local_store)
        await engine.restore()
        return engine

    # Repository getters
    def get_catalog_repository(self) -> CatalogRepository:
        """Get catalog repository instance"""
        return self._instances["catalog_repository"]

    def get_cart_repository(self) -> CartRepository:
        """Get cart repository instance"""
        return self._instances["cart_repository"]

    def get_order_repository(self) -> OrderRepository:
        """Get order repository instance"""
        return self._instances["order_repository"]

    def get_address_repository(self) -> AddressRepository:
        """Get address repository instance"""
        return self._instances["address_repository"]

    # Use Case getters
    def get_order_assembler(self) -> OrderAssembler:
        """Get order assembler instance"""
        return self._instances["order_assembler"]

    def get_order_status_management_use_case(self) -> OrderStatusManagementUseCase:
        """Get order status management use case instance"""
        return self._instances["order_status_management_use_case"]

    def get_payment_verification_use_case(self) -> PaymentVerificationUseCase:
        """Get payment verification use case instance"""
        return self._instances["payment_verification_use_case"]

    def get_address_book_use_case(self) -> AddressBookUseCase:
        """Get address book use case instance"""
        return self._instances["address_book_use_case"]

    def get_customer_directory_use_case(self) -> CustomerDirectoryUseCase:
        """Get customer directory use case instance"""
        return self._instances["customer_directory_use_case"]

    def cleanup(self):
        """Cleanup resources when shutting down"""
        self._logger.info("Cleaning up dependency container...")
        self._instances.clear()


# Global container instance
_container: Optional[DependencyContainer] = None


def get_container(
    config: Optional[Settings] = None, session_factory: Optional[SessionFactory] = None
) -> DependencyContainer:
    """Get the global dependency container instance, building it on first use"""
    global _container
    if _container is None:
        _container = DependencyContainer(config, session_factory)
    return _container


def reset_container():
    """Reset the global container (useful for testing)"""
    global _container
    if _container:
        _container.cleanup()
    _container = None
