"""
Anti-rebond des recherches distantes par compteur de generation.

Chaque saisie incremente la generation. Une tache planifiee attend le delai
puis ne s'execute que si sa generation est toujours la plus recente. Une
recherche deja lancee n'est jamais annulee : son resultat reste valide et
sera remplace par le suivant.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

DEFAULT_DELAY = 0.25


class SearchDebouncer:
    """Planificateur de recherches distantes avec generation explicite."""

    def __init__(self, delay: float = DEFAULT_DELAY) -> None:
        self._delay = delay
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    def next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        """True si aucune saisie plus recente n'a ete planifiee."""
        return generation == self._generation

    async def _run(
        self,
        generation: int,
        query: str,
        callback: Callable[[str], Awaitable[Any]],
    ) -> Optional[Any]:
        await asyncio.sleep(self._delay)
        if not self.is_current(generation):
            logger.debug("Recherche remplacee", query=query, generation=generation)
            return None
        return await callback(query)

    def schedule(
        self, query: str, callback: Callable[[str], Awaitable[Any]]
    ) -> asyncio.Task:
        """
        Planifie callback(query) apres le delai.

        Doit etre appele depuis une boucle asyncio en cours.
        """
        generation = self.next_generation()
        task = asyncio.create_task(self._run(generation, query, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Attend la fin des taches planifiees."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
