"""MongoDB implementation of UnitOfWork over a multi-document transaction.

Requires a replica set (or sharded cluster); standalone servers reject
transactions.
"""

from logging import getLogger
from typing import Any, Callable, TypeVar

from pymongo import MongoClient
from pymongo.errors import PyMongoError
from pymongo.read_concern import ReadConcern
from pymongo.read_preferences import ReadPreference
from pymongo.write_concern import WriteConcern

from domain.model.errors import StorageError

logger = getLogger(__name__)

T = TypeVar('T')


class MongoUnitOfWork:
    def __init__(self, client: MongoClient):
        self.client = client

    def run(self, work: Callable[[Any], T]) -> T:
        """Run work(session) in a transaction.

        The driver's with_transaction commits on return, aborts on any
        exception, and retries the whole callback on transient errors
        (write conflicts included).
        """
        try:
            with self.client.start_session() as session:
                return session.with_transaction(
                    work,
                    read_concern=ReadConcern('snapshot'),
                    write_concern=WriteConcern('majority'),
                    read_preference=ReadPreference.PRIMARY,
                )
        except PyMongoError as e:
            logger.error("Transaction aborted", extra={"error": str(e)})
            raise StorageError("Transaction aborted") from e
