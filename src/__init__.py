"""
Mediapedia - Recherche rapide de films et séries.

Ce package fournit un launcher de recherche appuyé sur un cache local,
enrichi par les métadonnées OMDb (notes) et TMDB (catalogue, tendances).

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (cas d'utilisation, orchestration)
- adapters/ : Couche infrastructure (CLI, clients API)
- infrastructure/ : Persistance (SQLModel + SQLite)
"""
