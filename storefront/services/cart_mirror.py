# storefront/services/cart_mirror.py
from decimal import Decimal
from typing import Callable, Dict, List, Optional

import requests
from requests import RequestException

from storefront.utils.logging import get_logger
from storefront.utils.retry import http_retry
from storefront.utils.settings import API_BASE_URL

logger = get_logger(__name__)


class CartMirror:
    """
    Client-side copy of one user's cart.

    Every mutation is applied to the local copy first, then sent to the API.
    If the call fails the local copy is thrown away and refetched from
    GET /cart/{user_id}, so the mirror never drifts from the server for long.
    Only the refetch is retried, mutations are not (a repeated add would
    double the increment).
    """

    def __init__(
        self,
        user_id: int,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: int = 2,
    ):
        self.user_id = user_id
        self.base_url = (API_BASE_URL if base_url is None else base_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.lines: List[Dict] = []

    # ------------------------------------------------------------------ reads
    @http_retry()
    def _fetch_lines(self) -> List[Dict]:
        url = f"{self.base_url}/cart/{self.user_id}"
        logger.info(f"CartMirror GET {url}")
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def refresh(self) -> List[Dict]:
        self.lines = [
            {
                "product_id": int(r["product_id"]),
                "name": r.get("name"),
                "price": Decimal(str(r.get("price") or 0)),
                "quantity": int(r["quantity"]),
                "image": r.get("image") or "",
            }
            for r in self._fetch_lines()
        ]
        return self.lines

    def find(self, product_id: int) -> Optional[Dict]:
        return next((line for line in self.lines if line["product_id"] == product_id), None)

    # -------------------------------------------------------------- mutations
    def add(self, product_id: int, quantity: int = 1, **display) -> bool:
        quantity = max(1, quantity)

        def local():
            line = self.find(product_id)
            if line:
                line["quantity"] += quantity
            else:
                self.lines.append({"product_id": product_id, "quantity": quantity, **display})

        return self._apply(
            local,
            lambda: self._send("post", "/cart/add", json={
                "user_id": self.user_id,
                "product_id": product_id,
                "quantity": quantity,
            }),
        )

    def change_quantity(self, product_id: int, delta: int) -> bool:
        line = self.find(product_id)
        if line is None:
            return False
        new_qty = max(1, line["quantity"] + delta)

        def local():
            line["quantity"] = new_qty

        return self._apply(
            local,
            lambda: self._send("post", "/cart/update", json={
                "user_id": self.user_id,
                "product_id": product_id,
                "quantity": new_qty,
            }),
        )

    def remove(self, product_id: int) -> bool:
        return self._apply(
            lambda: self._drop({product_id}),
            lambda: self._send("delete", f"/cart/{self.user_id}/{product_id}"),
        )

    def remove_many(self, product_ids: List[int]) -> bool:
        ids = set(product_ids)

        def remote():
            resp = self._send("post", "/cart/remove-many", json={
                "user_id": self.user_id,
                "product_ids": list(product_ids),
            })
            if resp.json().get("failed"):
                raise RequestException(f"Server could not remove {resp.json()['failed']}")

        return self._apply(lambda: self._drop(ids), remote)

    def clear(self) -> bool:
        return self._apply(
            self.lines.clear,
            lambda: self._send("delete", f"/cart/clear/{self.user_id}"),
        )

    # ---------------------------------------------------------------- helpers
    def _drop(self, ids) -> None:
        self.lines[:] = [line for line in self.lines if line["product_id"] not in ids]

    def _send(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        logger.info(f"CartMirror {method.upper()} {url}")
        resp = getattr(self.session, method)(url, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        return resp

    def _apply(self, local: Callable[[], None], remote: Callable[[], object]) -> bool:
        """Optimistic update + compensating refetch. False if the server call failed."""
        local()
        try:
            remote()
            return True
        except RequestException as e:
            logger.warning(f"Cart sync failed for user {self.user_id}, refetching: {e}")
            self.refresh()
            return False
