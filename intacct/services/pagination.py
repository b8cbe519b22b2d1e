"""Read every page of a paged call.

readByQuery continues with readMore and the result id; query is re-issued
with its offset advanced by the page size. Pages are appended to the
caller's ListOf as they arrive. When the task is cancelled mid-way, the
rows already appended stay there.
"""

import logging
from typing import Union

from intacct.core.config import settings
from intacct.core.errors import ConfigurationError, PaginationError
from intacct.models.bindings import ListOf
from intacct.services.functions import PAGINATED_READS, Reader, read_more
from intacct.services.query import Query
from intacct.services.service import Service

logger = logging.getLogger(__name__)

PagedCall = Union[Reader, Query]


async def fetch_all(service: Service, call: PagedCall, into: ListOf) -> None:
    """Execute call and its continuations until nothing remains.

    A first page without result data is an empty result set. A later page
    without it, or a page reporting remaining rows without a result id to
    continue from, raises PaginationError.
    """
    if isinstance(call, Reader):
        if call.kind not in PAGINATED_READS:
            raise ConfigurationError(f"get_all not allowed on {call.kind.value}")
        current: PagedCall = call
    elif isinstance(call, Query):
        # pin the page size so offsets advance by what the gateway returns
        current = call.model_copy(update={"page_size": call.page_size or settings.page_size})
    else:
        raise ConfigurationError(f"get_all not allowed on {type(call).__name__}")

    page = 0
    while True:
        response = await service.exec(current)
        response.decode(into)

        data = response.results[0].data if response.results else None
        if data is None:
            if page == 0:
                logger.debug("First page returned no data")
                return
            raise PaginationError(f"page {page + 1} returned no result data")

        logger.debug(
            f"Page {page + 1}: {data.count} row(s), {data.num_remaining} remaining "
            f"({len(into)} collected)"
        )
        if data.num_remaining <= 0:
            return

        if isinstance(current, Query):
            current = current.model_copy(update={"offset": current.offset + current.page_size})
        else:
            if not data.result_id:
                raise PaginationError(
                    f"page {page + 1} reports {data.num_remaining} remaining but no resultId"
                )
            current = read_more(data.result_id)
        page += 1
