"""Periodic order board reload and the per-restaurant board registry."""
from __future__ import annotations

import asyncio
import contextlib
import logging

from app.core.exceptions import DatabaseException
from app.core.sentry_integration import capture_exception
from app.services.order_board import OrderBoard
from app.services.order_enrichment import OrderEnrichmentService

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30


class OrderPoller:
    """Reloads one board every ``interval`` seconds until stopped."""

    def __init__(self, board: OrderBoard, interval: float = DEFAULT_POLL_INTERVAL_SECONDS):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self.board = board
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            try:
                await self.board.refresh()
            except DatabaseException:
                # Board keeps the stale list; the error is logged by the board.
                pass
            except Exception as e:
                logger.exception(f"Order poller error for restaurant {self.board.restaurant_id}: {e}")
                capture_exception(e, poller={"restaurant_id": self.board.restaurant_id})
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"order-poller-{self.board.restaurant_id}"
        )
        logger.info(
            "Order poller started for restaurant %s (every %ss)",
            self.board.restaurant_id,
            self.interval,
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Order poller stopped for restaurant %s", self.board.restaurant_id)


class BoardRegistry:
    """Creates one board (and poller) per restaurant on first use."""

    def __init__(
        self,
        enrichment: OrderEnrichmentService,
        *,
        page_size: int,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        polling: bool = True,
    ):
        self.enrichment = enrichment
        self.page_size = page_size
        self.poll_interval = poll_interval
        self.polling = polling
        self._boards: dict[str, OrderBoard] = {}
        self._pollers: dict[str, OrderPoller] = {}
        self._started = False

    def __contains__(self, restaurant_id: str) -> bool:
        return restaurant_id in self._boards

    def get(self, restaurant_id: str) -> OrderBoard:
        board = self._boards.get(restaurant_id)
        if board is None:
            board = OrderBoard(restaurant_id, self.enrichment, page_size=self.page_size)
            self._boards[restaurant_id] = board
            if self._started and self.polling:
                self._start_poller(board)
        return board

    def _start_poller(self, board: OrderBoard) -> None:
        poller = OrderPoller(board, self.poll_interval)
        self._pollers[board.restaurant_id] = poller
        poller.start()

    def start(self) -> None:
        self._started = True
        if self.polling:
            for board in self._boards.values():
                if board.restaurant_id not in self._pollers:
                    self._start_poller(board)

    async def stop(self) -> None:
        self._started = False
        pollers = list(self._pollers.values())
        self._pollers.clear()
        await asyncio.gather(*(p.stop() for p in pollers))
