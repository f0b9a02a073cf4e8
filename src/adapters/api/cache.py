"""
Cache disque des recherches plein texte envoyees aux fournisseurs.

Le cache utilise diskcache pour la persistence sur disque. Seules les
recherches sont mises en cache (24 heures) : les details et les tendances
interrogent toujours le reseau, le cache local SQLite faisant foi pour
les enregistrements de titres.
"""

import asyncio
from functools import partial
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les recherches.

    Utilise diskcache pour la persistence et run_in_executor pour
    les operations asynchrones non-bloquantes.

    Attributes:
        SEARCH_TTL: Duree de vie des resultats de recherche (24h)

    Example:
        cache = APICache(cache_dir=".cache/api")
        await cache.set_search(APICache.search_key("tmdb", "Inception"), results)
        data = await cache.get(APICache.search_key("tmdb", "inception"))
    """

    SEARCH_TTL = 24 * 60 * 60  # 24 heures en secondes (86400)

    def __init__(self, cache_dir: str = ".cache/api") -> None:
        """
        Initialise le cache avec un repertoire de stockage.

        Args:
            cache_dir: Chemin vers le repertoire du cache (cree si inexistant)
        """
        self._cache = Cache(str(cache_dir))

    @staticmethod
    def search_key(provider: str, query: str) -> str:
        """Cle de cache d'une recherche (insensible a la casse et aux espaces)."""
        normalized = " ".join(query.lower().split())
        return f"{provider}:search:{normalized}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur dans le cache avec un TTL en secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_search(self, key: str, value: Any) -> None:
        """Stocke un resultat de recherche (TTL de 24h)."""
        await self.set(key, value, self.SEARCH_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
