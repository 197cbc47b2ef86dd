"""
Context manager for handling database sessions and exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Generator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.infrastructure.database.models import Customer
from storefront.infrastructure.database.operations import get_db_session

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


@contextmanager
def managed_session(
    session_factory: Optional[SessionFactory] = None,
) -> Generator[Session, None, None]:
    """
    Context manager for handling database sessions, including commits, rollbacks,
    and exception logging.

    Args:
        session_factory: callable returning a new session; the global
            database manager is used when omitted.

    Yields:
        Session: The SQLAlchemy session object.

    Raises:
        SQLAlchemyError: If a database-related error occurs.
    """
    session = (session_factory or get_db_session)()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        logger.error("💥 DATABASE ERROR: %s", e)
        session.rollback()
        raise
    except Exception as e:
        logger.error("💥 UNEXPECTED ERROR: %s", e)
        session.rollback()
        raise
    finally:
        session.close()


def get_or_create_customer(session: Session, user_id: str) -> Customer:
    """Customer row for ``user_id``, created on first use"""
    customer = session.get(Customer, user_id)
    if customer is None:
        customer = Customer(id=user_id, cart_data={})
        session.add(customer)
        session.flush()
        logger.info("🆕 CUSTOMER CREATED: %s", user_id)
    return customer
