from typing import Any, Dict, Optional, Tuple
import logging

from .errors import FetchError, PageCeilingExceeded

logger = logging.getLogger(__name__)

MAX_PAGES = 30


def fetch_all(client: Any, repository: str, max_pages: int = MAX_PAGES) -> Tuple[Dict[str, Any], ...]:
    """
    Collect every listing entry of a repository, following continuation tokens.

    A failed request ends the pagination and whatever was gathered so far is
    returned. Needing more than ``max_pages`` requests raises PageCeilingExceeded.
    """
    entries: Tuple[Dict[str, Any], ...] = ()
    token: Optional[str] = None
    page = 0
    while True:
        page += 1
        if page > max_pages:
            raise PageCeilingExceeded(
                f"endless loop detected, more than {max_pages} pages are not realistic!"
            )
        try:
            data = client.list_components(repository, continuation_token=token)
        except FetchError as err:
            logger.error(f"{err} (page {page}); continuing with {len(entries)} component(s)")
            return entries
        items = data.get("items") or []
        entries = entries + tuple(items)
        token = data.get("continuationToken")
        logger.debug(f"page {page}: {len(items)} item(s), token = {token}")
        if not token:
            return entries
