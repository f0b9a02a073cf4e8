"""
Couche services (cas d'utilisation).

Les services orchestrent la logique du domaine : analyse de la saisie,
index flou, classement, fusion des fiches, réconciliation OMDb/TMDB,
tendances, recherche distante et session du launcher.
"""
