"""Page iteration for paged API collections."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from parlaid.exceptions import ConfigurationError, DispatchError
from parlaid.models.page import PageResult, Reducer
from parlaid.models.profile import Profile
from parlaid.output.json_writer import JsonArraySink
from parlaid.services.parler_client import ParlerClient

logger = logging.getLogger(__name__)

RequestCallback = Callable[[Profile, Optional[str]], Awaitable[PageResult]]
ResultCallback = Callable[[list[dict[str, Any]], bool, bool], Any]
DispatchCallback = Callable[[], Any]


def is_final_page(last: bool, item_count: int, is_first_page: bool, page_size: int) -> bool:
    """Decide whether a page ends the fetch.

    A page is final when the server marks it ``last``, it is not the first
    page and it is short. An empty page is always final. The first page can
    therefore only end the fetch by being empty.
    """
    if item_count == 0:
        return True
    return last is True and not is_first_page and item_count < page_size


class Pager:
    """Drives the page loop for one collection and forwards pages to a sink."""

    def __init__(self, client: ParlerClient, sink: JsonArraySink):
        self.client = client
        self.sink = sink

    async def paged_request(
        self,
        profile: Profile,
        request_cb: Optional[RequestCallback],
        reduce_cb: Reducer,
        result_cb: Optional[ResultCallback] = None,
        start_cb: Optional[DispatchCallback] = None,
        end_cb: Optional[DispatchCallback] = None,
    ) -> int:
        """Fetch every page of a collection.

        Args:
            profile: User or post the collection belongs to
            request_cb: Fetches one page given the profile and continuation key
            reduce_cb: Extracts the item list from a page
            result_cb: Receives ``(items, is_first_page, is_final_page)``;
                defaults to the sink's ``emit``
            start_cb: Called once before the first request; defaults to the
                sink's ``start``
            end_cb: Called once after the final page; defaults to the sink's
                ``end``

        Returns:
            Number of items dispatched

        Raises:
            ConfigurationError: If no request callback is given
            DispatchError: If any callback returns a falsy value
        """
        start_cb = start_cb or self.sink.start
        result_cb = result_cb or self.sink.emit
        end_cb = end_cb or self.sink.end

        next_key: Optional[str] = None
        is_first_page = True
        pages = 0
        total = 0

        try:
            if request_cb is None:
                raise ConfigurationError("Request callback required")

            if not start_cb():
                raise DispatchError("Result dispatch: start failed")

            while True:
                record = await request_cb(profile, next_key)
                items = reduce_cb(record)

                final = is_final_page(
                    record.last, len(items), is_first_page, self.client.page_size
                )

                if not result_cb(items, is_first_page, final):
                    raise DispatchError("Result dispatch failed")

                pages += 1
                total += len(items)
                logger.debug(
                    "Page %d: %d items (last=%s, final=%s)", pages, len(items), record.last, final
                )

                next_key = record.next
                is_first_page = False

                if final:
                    break
        finally:
            self.client.restore_page_size()

        if not end_cb():
            raise DispatchError("Result dispatch: completion failed")

        logger.info("Finished fetching paged results (%d pages, %d items)", pages, total)
        return total
