"""
Utilitaires partages pour les commandes CLI de Mediapedia.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- suggestions_table / detail_panel : rendus Rich des suggestions et du detail
  (offres de streaming comprises)
"""

from contextlib import contextmanager
from functools import wraps
from typing import Optional

from loguru import logger as loguru_logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.container import Container
from src.core.entities.title import Suggestion, TitleRecord
from src.utils.helpers import format_runtime, format_year
from src.utils.links import trailer_url, wikipedia_url

# Console globale pour tous les affichages
console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("src")
    try:
        yield
    finally:
        loguru_logger.enable("src")


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), initialise la base de donnees.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.omdb_client().close()
                await container.tmdb_client().close()
        return wrapper
    return decorator


def suggestions_table(suggestions: list[Suggestion], title: Optional[str] = None) -> Table:
    """Table Rich d'une liste de suggestions."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Titre", style="bold")
    table.add_column("Annee")
    table.add_column("Type")
    table.add_column("Duree")
    table.add_column("Note", justify="right")
    table.add_column("Tendance", justify="right")
    for position, suggestion in enumerate(suggestions, start=1):
        table.add_row(
            str(position),
            suggestion.id,
            suggestion.title,
            format_year(suggestion.year),
            suggestion.type.value,
            format_runtime(suggestion.runtime),
            suggestion.rating or "",
            str(suggestion.tmdb_rank) if suggestion.tmdb_rank else "",
        )
    return table


def detail_panel(record: TitleRecord) -> Panel:
    """Panneau Rich du detail d'un titre."""
    lines = []
    header = f"[bold]{record.title}[/bold]"
    if record.year:
        header += f" ({record.year})"
    lines.append(header)
    lines.append(f"[dim]{record.type.value}  {format_runtime(record.runtime)}[/dim]")
    if record.genres:
        lines.append(", ".join(record.genres))
    ratings = []
    if record.rating:
        votes = f" ({record.votes:,} votes)" if record.votes else ""
        ratings.append(f"IMDb {record.rating}{votes}")
    if record.rotten_tomatoes_score:
        ratings.append(f"Rotten Tomatoes {record.rotten_tomatoes_score}")
    if record.metacritic_score:
        ratings.append(f"Metacritic {record.metacritic_score}")
    if ratings:
        lines.append("  ".join(ratings))
    if record.director:
        lines.append(f"Realisation : {record.director}")
    if record.cast:
        lines.append(f"Distribution : {record.cast}")
    if record.country or record.language:
        lines.append(" / ".join(v for v in (record.country, record.language) if v))
    if record.plot:
        lines.append("")
        lines.append(record.plot)
    offers = record.watch_providers
    if offers is not None:
        lines.append("")
        if offers.is_empty:
            lines.append(f"[dim]Aucune offre de streaming ({offers.region})[/dim]")
        for label, names in (
            ("Abonnement", offers.flatrate),
            ("Location", offers.rent),
            ("Achat", offers.buy),
        ):
            if names:
                lines.append(f"{label} ({offers.region}) : {', '.join(names)}")
    lines.append("")
    lines.append(f"[dim]Wikipedia : {wikipedia_url(record.title, record.year)}[/dim]")
    lines.append(f"[dim]Bande-annonce : {trailer_url(record.title, record.year)}[/dim]")
    if record.fallback_label:
        lines.append("")
        lines.append(f"[yellow]{record.fallback_label}[/yellow]")

    subtitle = record.id
    if record.source:
        subtitle += f"  source: {record.source.value}"
    return Panel("\n".join(lines), subtitle=subtitle, expand=False)
