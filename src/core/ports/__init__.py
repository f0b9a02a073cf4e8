"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats du cache local
- ITitleRepository : Enregistrements de titres
- ITrendingRepository : Tendances (remplacées en bloc)
- ISettingsRepository : Réglages clé/valeur
- IRecentSearchRepository : Recherches récentes

Ports client API : Contrats pour les fournisseurs externes
- IRatingsProvider : Fournisseur de notes (OMDb)
- ICatalogProvider : Fournisseur de catalogue (TMDB)
- ProviderResult : Résultat étiqueté succès/échec

Port stockage des clés :
- IKeyStore : Lecture, écriture et effacement des clés API
"""

from src.core.ports.api_clients import (
    CatalogDetail,
    ICatalogProvider,
    IRatingsProvider,
    ProviderResult,
    RatingsDetail,
)
from src.core.ports.key_store import IKeyStore
from src.core.ports.repositories import (
    IRecentSearchRepository,
    ISettingsRepository,
    ITitleRepository,
    ITrendingRepository,
)

__all__ = [
    # Repositories
    "ITitleRepository",
    "ITrendingRepository",
    "ISettingsRepository",
    "IRecentSearchRepository",
    # Clients API
    "IRatingsProvider",
    "ICatalogProvider",
    "ProviderResult",
    "RatingsDetail",
    "CatalogDetail",
    # Cles
    "IKeyStore",
]
