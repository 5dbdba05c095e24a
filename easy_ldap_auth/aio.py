"""asyncio entry points that keep the event loop free while the directory answers."""

import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from .ldap import single_authentication, single_search
from .models import AuthenticationOptions, SearchOptions, UserEntry


async def single_search_async(
    options: Union[SearchOptions, Mapping[str, Any]],
    logger: Optional[logging.Logger] = None,
) -> Optional[UserEntry]:
    """Run single_search in a worker thread."""
    return await asyncio.to_thread(single_search, options, logger)


async def single_authentication_async(
    options: Union[AuthenticationOptions, Mapping[str, Any]],
    logger: Optional[logging.Logger] = None,
) -> UserEntry:
    """Run single_authentication in a worker thread."""
    return await asyncio.to_thread(single_authentication, options, logger)
