import json
import logging
from typing import TYPE_CHECKING, Optional

from docodm.consistency import ScanConsistency, resolve_consistency
from docodm.query.query import Query, QueryResult
from docodm.transaction import current_transaction

if TYPE_CHECKING:
    from docodm.connection.store import DocumentStore

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Runs queries with a scan consistency chosen per call.

    The consistency given to `execute` wins over the one carried by the query;
    when neither is set the executor's `default_consistency` applies. Failures
    from the store are not retried.
    """

    def __init__(self, store: "DocumentStore", default_consistency: ScanConsistency = ScanConsistency.NOT_BOUNDED):
        self.store = store
        self.default_consistency = default_consistency
        self.last_consistency: Optional[ScanConsistency] = None

    def resolve(self, query: Query, consistency: Optional[ScanConsistency] = None) -> ScanConsistency:
        return resolve_consistency(consistency, query.consistency, default=self.default_consistency)

    async def execute(self, query: Query, consistency: Optional[ScanConsistency] = None) -> QueryResult:
        effective = self.resolve(query, consistency)
        transaction = current_transaction()
        logger.debug(
            "executing query",
            extra={
                "query": query.statement,
                "bind_vars": json.dumps(query.bind_vars, default=str),
                "consistency": effective.value,
                "transaction_id": transaction and transaction.transaction_id,
            },
        )
        self.last_consistency = effective
        try:
            rows, statistics = await self.store.query(query.statement, query.bind_vars, effective, query.options)
        except Exception:
            logger.exception("query failed", extra={"query": query.statement, "consistency": effective.value})
            raise

        return QueryResult(rows=rows, consistency=effective, statistics=statistics)
