"""
Validation des cles API des deux fournisseurs.

La recherche exige deux cles valides. Chaque fournisseur recoit son propre
message d'erreur ; aucune erreur reseau ne remonte sous forme d'exception.
"""

import asyncio

from loguru import logger

from src.core.entities.title import ApiKeys, KeyValidationResult
from src.core.ports.api_clients import ICatalogProvider, IRatingsProvider
from src.utils.constants import (
    ERROR_OMDB_KEY_INVALID,
    ERROR_OMDB_KEY_REQUIRED,
    ERROR_TMDB_KEY_INVALID,
    ERROR_TMDB_KEY_REQUIRED,
)


class KeyValidationService:
    """Teste les cles OMDb et TMDB aupres des fournisseurs."""

    def __init__(
        self,
        ratings_provider: IRatingsProvider,
        catalog_provider: ICatalogProvider,
    ) -> None:
        self._ratings = ratings_provider
        self._catalog = catalog_provider

    async def test_keys(self, keys: ApiKeys) -> KeyValidationResult:
        """
        Valide les deux cles.

        Les cles manquantes sont signalees sans appel reseau ; sinon les
        deux validations sont lancees en parallele.
        """
        omdb_error = None if keys.omdb_key else ERROR_OMDB_KEY_REQUIRED
        tmdb_error = None if keys.tmdb_key else ERROR_TMDB_KEY_REQUIRED
        if omdb_error or tmdb_error:
            return KeyValidationResult(omdb_error=omdb_error, tmdb_error=tmdb_error)

        omdb_status, tmdb_status = await asyncio.gather(
            self._ratings.validate_key(keys.omdb_key),
            self._catalog.validate_key(keys.tmdb_key),
        )
        if not omdb_status.ok:
            omdb_error = omdb_status.error or ERROR_OMDB_KEY_INVALID
        if not tmdb_status.ok:
            tmdb_error = tmdb_status.error or ERROR_TMDB_KEY_INVALID

        result = KeyValidationResult(omdb_error=omdb_error, tmdb_error=tmdb_error)
        if not result.ok:
            logger.warning("Validation des cles en echec", omdb=omdb_error, tmdb=tmdb_error)
        return result
