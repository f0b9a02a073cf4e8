"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : lisible par l'humain, colorée, sans le trafic fournisseur de bas niveau
- Sortie fichier : sérialisée en JSON, avec rotation, pour l'analyse historique
- Sortie fichier fournisseurs : chaque requête OMDb/TMDB (niveau DEBUG), à part

Les traces DEBUG des adaptateurs API (src.adapters.api) sont volumineuses :
elles ne vont que dans le fichier fournisseurs. Leurs avertissements et
erreurs restent visibles dans les deux autres sorties.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

PROVIDER_LOGGER_PREFIX = "src.adapters.api"

_INFO_LEVEL_NO = logger.level("INFO").no


def is_provider_record(record: dict) -> bool:
    """True pour un enregistrement émis par un adaptateur API."""
    return (record["name"] or "").startswith(PROVIDER_LOGGER_PREFIX)


def is_provider_traffic(record: dict) -> bool:
    """True pour une trace fournisseur sous le niveau INFO."""
    return is_provider_record(record) and record["level"].no < _INFO_LEVEL_NO


def _application_filter(record: dict) -> bool:
    return not is_provider_traffic(record)


def provider_log_path(log_file: Path) -> Path:
    """Fichier des fournisseurs à côté du fichier principal (mediapedia-providers.log)."""
    return log_file.with_name(f"{log_file.stem}-providers{log_file.suffix}")


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/mediapedia.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    provider_log_file: Optional[Path] = None,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB", "1 GB")
        retention_count : Nombre de fichiers rotatifs à conserver
        provider_log_file : Fichier du trafic fournisseurs (défaut : dérivé de log_file)
    """
    # Supprime le handler par défaut
    logger.remove()

    # Handler console - lisible par l'humain
    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
        filter=_application_filter,
    )

    # Handler fichier - JSON pour l'analyse
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
        filter=_application_filter,
    )

    # Handler fichier fournisseurs - une ligne JSON par requête OMDb/TMDB
    provider_file = provider_log_file or provider_log_path(log_file)
    provider_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        provider_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
        filter=is_provider_record,
    )

    logger.debug(
        "Logging configuré",
        log_file=str(log_file),
        provider_log_file=str(provider_file),
        rotation=rotation_size,
    )
