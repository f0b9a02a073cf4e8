"""
Point d'entrée CLI de Mediapedia.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import keys_app, link, recent, region, search, show, trending
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="mediapedia",
    help="Recherche rapide de films et séries (OMDb + TMDB)",
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv, -vvv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Mediapedia - Recherche de films et séries."""
    if quiet:
        state["quiet"] = True
    else:
        state["verbose"] = verbose


# Monter les commandes depuis commands.py
app.command()(search)
app.command()(show)
app.command()(trending)
app.command()(recent)
app.command()(link)
app.command()(region)

# Monter keys_app comme sous-commande
app.add_typer(keys_app, name="keys")


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Mediapedia")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Cache API : {config.api_cache_dir}")
    typer.echo(f"API OMDb (environnement) : {'activée' if config.omdb_enabled else 'désactivée'}")
    typer.echo(f"API TMDB (environnement) : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"Expiration du cache : {config.cache_expiry_days} jours")
    typer.echo(f"Rafraîchissement des tendances : {config.trending_refresh_hours} h")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo("Mediapedia v0.1.0")


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.info("Démarrage de Mediapedia", version="0.1.0")

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
