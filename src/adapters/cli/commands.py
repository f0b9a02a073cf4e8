"""
Commandes Typer du launcher Mediapedia.

Ce module fournit les commandes CLI:
- search: Suggestions locales (et distantes avec --remote) pour une saisie
- show: Detail reconcilie d'un titre (cache + OMDb + TMDB)
- trending: Tendances du jour (--refresh pour forcer le rafraichissement)
- recent: Recherches recentes
- link: Lien vers la page de metadonnees d'un titre
- region: Pays des offres de streaming affichees dans le detail
- keys set / keys test / keys reset: Gestion des cles API
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.status import Status

from src.adapters.cli.helpers import (
    console,
    detail_panel,
    suggestions_table,
    suppress_loguru,
    with_container,
)
from src.core.entities.title import ApiKeys, KeyValidationResult
from src.utils.constants import LINK_TARGETS

# Application Typer pour les commandes de cles
keys_app = typer.Typer(
    name="keys",
    help="Gestion des cles API OMDb et TMDB",
    rich_markup_mode="rich",
)


def _print_key_errors(result: Optional[KeyValidationResult]) -> None:
    if result is None:
        return
    if result.omdb_error:
        console.print(f"[red]OMDb :[/red] {result.omdb_error}")
    if result.tmdb_error:
        console.print(f"[red]TMDB :[/red] {result.tmdb_error}")


def search(
    query: Annotated[str, typer.Argument(help="Saisie (operateurs type:, year:, country:, lang:)")],
    limit: Annotated[int, typer.Option("--limit", "-n", help="Nombre de suggestions")] = 5,
    remote: Annotated[
        bool, typer.Option("--remote", "-r", help="Interroger aussi OMDb et TMDB")
    ] = False,
) -> None:
    """Affiche les suggestions pour une saisie."""
    asyncio.run(_search_async(query, limit, remote))


@with_container()
async def _search_async(container, query: str, limit: int, remote: bool) -> None:
    """Implementation async de la commande search."""
    session = container.launcher_session(suggestion_limit=limit)
    with suppress_loguru():
        await session.init()
        session.set_query(query)
        if remote:
            if not session.keys_valid:
                _print_key_errors(session.keys_error)
                console.print("[yellow]Recherche distante indisponible sans cles valides.[/yellow]")
            else:
                with Status("[cyan]Recherche distante...", console=console):
                    await session.fetch_remote_suggestions()

    if not session.suggestions:
        console.print("[yellow]Aucune suggestion.[/yellow]")
        return
    console.print(suggestions_table(session.suggestions, title=f"Suggestions : {query}"))


def show(
    title_id: Annotated[str, typer.Argument(help="ID IMDb (tt...) ou synthetique (tmdb:<n>)")],
) -> None:
    """Affiche le detail reconcilie d'un titre."""
    asyncio.run(_show_async(title_id))


@with_container()
async def _show_async(container, title_id: str) -> None:
    """Implementation async de la commande show."""
    session = container.launcher_session()
    with suppress_loguru():
        await session.init()
        if not session.keys.complete:
            # Sans cles, seul le cache local est disponible
            cached = container.reconciler_service().load_cached(title_id)
            if cached is None:
                console.print("[red]Cles API manquantes et titre absent du cache.[/red]")
                raise typer.Exit(code=1)
            console.print(detail_panel(cached))
            return

        with Status("[cyan]Chargement du detail...", console=console):
            await session.select_suggestion(title_id)

    if session.error_message or session.detail is None:
        console.print(f"[red]{session.error_message}[/red]")
        raise typer.Exit(code=1)
    console.print(detail_panel(session.detail))


def trending(
    refresh: Annotated[
        bool, typer.Option("--refresh", help="Forcer le rafraichissement depuis TMDB")
    ] = False,
) -> None:
    """Affiche les tendances du jour."""
    asyncio.run(_trending_async(refresh))


@with_container()
async def _trending_async(container, refresh: bool) -> None:
    """Implementation async de la commande trending."""
    session = container.launcher_session()
    with suppress_loguru():
        await session.init()
        if refresh:
            with Status("[cyan]Rafraichissement des tendances...", console=console):
                await session.refresh_trending()

    items = session.trending_suggestions
    if not items:
        console.print("[yellow]Aucune tendance (cle TMDB requise).[/yellow]")
        return
    console.print(suggestions_table(items, title="Tendances"))


def recent() -> None:
    """Affiche les recherches recentes."""
    asyncio.run(_recent_async())


@with_container()
async def _recent_async(container) -> None:
    searches = container.recent_search_repository().list_recent()
    if not searches:
        console.print("[dim]Aucune recherche recente.[/dim]")
        return
    for position, query in enumerate(searches, start=1):
        console.print(f"[dim]{position:>2}.[/dim] {query}")


def link(
    title_id: Annotated[str, typer.Argument(help="ID du titre")],
    target: Annotated[
        Optional[str],
        typer.Option("--target", "-t", help="imdb, rotten ou metacritic (enregistre)"),
    ] = None,
) -> None:
    """Affiche le lien vers la page de metadonnees d'un titre."""
    if target is not None and target not in LINK_TARGETS:
        console.print(f"[red]Cible inconnue : {target}[/red]")
        raise typer.Exit(code=1)
    asyncio.run(_link_async(title_id, target))


@with_container()
async def _link_async(container, title_id: str, target: Optional[str]) -> None:
    """Implementation async de la commande link (cache local uniquement)."""
    session = container.launcher_session()
    with suppress_loguru():
        await session.init()
        if target is not None:
            session.set_metadata_link_target(target)
        url = session.metadata_link_for(title_id)

    if url is None:
        console.print("[yellow]Aucun lien disponible.[/yellow]")
        raise typer.Exit(code=1)
    console.print(url)


def region(
    code: Annotated[
        Optional[str], typer.Argument(help="Code pays sur deux lettres (FR, US, ...)")
    ] = None,
) -> None:
    """Affiche ou change le pays des offres de streaming."""
    asyncio.run(_region_async(code))


@with_container()
async def _region_async(container, code: Optional[str]) -> None:
    session = container.launcher_session()
    with suppress_loguru():
        await session.init()
        if code is not None:
            await session.set_watch_region(code)
    console.print(f"Pays des offres : [bold]{session.watch_region}[/bold]")


@keys_app.command("set")
def keys_set(
    omdb_key: Annotated[str, typer.Option("--omdb", prompt=True, hide_input=True, help="Cle OMDb")],
    tmdb_key: Annotated[str, typer.Option("--tmdb", prompt=True, hide_input=True, help="Cle TMDB")],
) -> None:
    """Valide puis enregistre les cles API."""
    asyncio.run(_keys_set_async(omdb_key, tmdb_key))


@with_container()
async def _keys_set_async(container, omdb_key: str, tmdb_key: str) -> None:
    session = container.launcher_session()
    with suppress_loguru():
        with Status("[cyan]Validation des cles...", console=console):
            saved = await session.save_keys(ApiKeys(omdb_key=omdb_key, tmdb_key=tmdb_key))
    if not saved:
        _print_key_errors(session.keys_error)
        raise typer.Exit(code=1)
    console.print("[green]Cles enregistrees.[/green]")


@keys_app.command("test")
def keys_test() -> None:
    """Teste les cles enregistrees (ou definies dans l'environnement)."""
    asyncio.run(_keys_test_async())


@with_container()
async def _keys_test_async(container) -> None:
    session = container.launcher_session()
    keys = container.key_store().get_keys()
    with suppress_loguru():
        valid = await session.test_keys(keys)
    if not valid:
        _print_key_errors(session.keys_error)
        raise typer.Exit(code=1)
    console.print("[green]Cles valides.[/green]")


@keys_app.command("reset")
def keys_reset() -> None:
    """Efface les cles enregistrees."""
    asyncio.run(_keys_reset_async())


@with_container()
async def _keys_reset_async(container) -> None:
    container.launcher_session().reset_keys()
    console.print("[green]Cles effacees.[/green]")
