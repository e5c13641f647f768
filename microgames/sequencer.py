from __future__ import annotations

import logging
import random

from microgames.catalog import Catalog, MicrogameDescriptor
from microgames.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ShuffleSequencer:
    """Plays every microgame once per cycle in a random order.

    A new permutation is drawn whenever a cycle is exhausted. The last pick of
    one cycle may repeat as the first pick of the next.
    """

    def __init__(self, catalog: Catalog, *, rng: random.Random | None = None, seed: int | str | None = None) -> None:
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self._catalog = catalog
        self._rng = rng if rng is not None else random.Random(seed)
        self._order: list[int] = []
        self._cursor = 0
        self._cycle = 0

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def order(self) -> tuple[int, ...]:
        return tuple(self._order)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def cycle(self) -> int:
        """Number of permutations generated so far."""
        return self._cycle

    def reshuffle(self) -> None:
        n = len(self._catalog)
        if n == 0:
            raise ConfigurationError("Microgame catalog is empty; cannot start a session")

        order = list(range(n))
        for i in range(n):
            j = self._rng.randint(i, n - 1)
            order[i], order[j] = order[j], order[i]

        self._order = order
        self._cursor = 0
        self._cycle += 1
        logger.debug("Shuffled %d microgames (cycle %d)", n, self._cycle)

    def current(self) -> MicrogameDescriptor:
        if not self._order:
            self.reshuffle()
        return self._catalog[self._order[self._cursor]]

    def next(self) -> MicrogameDescriptor:
        """Return the descriptor at the cursor, then move past it."""

        descriptor = self.current()
        self._step()
        return descriptor

    def advance(self) -> MicrogameDescriptor:
        """Move past the current descriptor and return the new one."""

        if not self._order:
            self.reshuffle()
        self._step()
        return self.current()

    def _step(self) -> None:
        self._cursor += 1
        if self._cursor >= len(self._order):
            self.reshuffle()
