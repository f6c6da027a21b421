#!/usr/bin/env python3
"""
Place a single order against the external books API and log the response.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import httpx

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from utilities.config import OrderClientConfig
from utilities.logger import setup_logging, get_logger

logger = get_logger(__name__)


async def place_order(
    config: OrderClientConfig,
    client: Optional[httpx.AsyncClient] = None
) -> str:
    """
    POST one order and return the response body, whatever its status.

    Args:
        config: Order settings (target URL, token, payload)
        client: Optional client to send with; one is created when omitted

    Returns:
        Response body text

    Raises:
        httpx.HTTPError: On transport failures
    """
    url = config.get_order_url()

    async def _send(http: httpx.AsyncClient) -> httpx.Response:
        return await http.post(url, json=config.get_payload(), headers=config.get_headers())

    try:
        if client is not None:
            response = await _send(client)
        else:
            async with httpx.AsyncClient(timeout=config.request_timeout) as http:
                response = await _send(http)
    except httpx.HTTPError as e:
        logger.error("Order request failed", url=url, error=str(e))
        raise

    logger.info("Order request completed", url=url, status=response.status_code)
    return response.text


async def main():
    """Main function to place the order."""
    config = OrderClientConfig()
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file
    )

    try:
        body = await place_order(config)
    except httpx.HTTPError:
        sys.exit(1)

    logger.info("Order response", body=body)


if __name__ == "__main__":
    asyncio.run(main())
