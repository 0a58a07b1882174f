"""Community inventory reader over HTTP.

An ``InventorySource`` that reads the public community inventory endpoint
with the bot's web session cookies, for setups whose trade SDK does not
expose an inventory call of its own.
"""
import logging
from typing import Any, Optional
from urllib.parse import unquote

import httpx

from src.steam.exceptions import InventoryError, TransientSteamError
from src.steam.types import Item

logger = logging.getLogger(__name__)

COMMUNITY_URL = "https://steamcommunity.com"
PAGE_SIZE = 2000
_TRANSIENT_STATUS = (429, 500, 502, 503, 504)


def steam_id_from_cookies(cookies: list[str]) -> Optional[str]:
    """Extract the 64-bit SteamID carried in the steamLoginSecure cookie."""
    for cookie in cookies:
        name, _, value = cookie.partition("=")
        if name.strip() == "steamLoginSecure" and value:
            steam_id = unquote(value).split("||", 1)[0]
            if steam_id.isdigit():
                return steam_id
    return None


class CommunityInventory:
    def __init__(self, steam_id: Optional[str] = None, proxy: Optional[str] = None,
                 timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._steam_id = steam_id
        self._proxy = f"http://{proxy}" if proxy else None
        self._timeout = timeout
        self._transport = transport
        self._cookies: list[str] = []

    @property
    def steam_id(self) -> Optional[str]:
        return self._steam_id

    async def set_cookies(self, cookies: list[str]) -> None:
        self._cookies = list(cookies)
        steam_id = steam_id_from_cookies(cookies)
        if steam_id:
            self._steam_id = steam_id

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._cookies:
            headers["Cookie"] = "; ".join(self._cookies)
        return headers

    def _client(self) -> httpx.AsyncClient:
        if self._transport is not None:
            return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)
        return httpx.AsyncClient(proxy=self._proxy, timeout=self._timeout)

    async def get_inventory_contents(self, appid: int, contextid: int, tradable_only: bool = True) -> list[Item]:
        if not self._steam_id:
            raise InventoryError("SteamID unknown; log in before reading the inventory")
        url = f"{COMMUNITY_URL}/inventory/{self._steam_id}/{appid}/{contextid}"
        items: list[Item] = []
        start: Optional[str] = None
        async with self._client() as client:
            while True:
                params: dict[str, Any] = {"l": "english", "count": PAGE_SIZE}
                if start:
                    params["start_assetid"] = start
                page = await self._fetch(client, url, params)
                items.extend(_parse_page(page, tradable_only))
                if not page.get("more_items"):
                    break
                start = page.get("last_assetid")
                if not start:
                    break
        logger.debug("Read %d items from %s", len(items), url)
        return items

    async def _fetch(self, client: httpx.AsyncClient, url: str, params: dict) -> dict:
        try:
            resp = await client.get(url, params=params, headers=self._headers())
        except (httpx.TimeoutException, httpx.TransportError) as e:
            raise TransientSteamError(f"Failure reading inventory: {e}") from e
        if resp.status_code in _TRANSIENT_STATUS:
            raise TransientSteamError(f"Failure reading inventory: HTTP {resp.status_code}")
        if resp.status_code >= 400:
            raise InventoryError(f"Inventory request returned HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise InventoryError(f"Inventory response is not JSON: {e}") from e
        if not data or data.get("success") != 1:
            raise InventoryError(f"Inventory request unsuccessful: {data.get('error') if data else 'empty body'}")
        return data


def _parse_page(page: dict, tradable_only: bool) -> list[Item]:
    tradable = {
        (str(d.get("classid")), str(d.get("instanceid", "0"))): bool(d.get("tradable"))
        for d in page.get("descriptions", [])
    }
    items = []
    for asset in page.get("assets", []):
        key = (str(asset.get("classid")), str(asset.get("instanceid", "0")))
        if tradable_only and not tradable.get(key, False):
            continue
        items.append(Item(appid=int(asset["appid"]), contextid=int(asset["contextid"]), assetid=str(asset["assetid"])))
    return items
