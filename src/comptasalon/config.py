"""Configuration de ComptaSalon.

Les valeurs viennent de l'environnement (fichier .env accepte); les options
de la ligne de commande ont priorite.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel

from comptasalon.models.paie import ModePaiement

CHEMIN_DONNEES_DEFAUT = "data/comptasalon.yaml"


class Configuration(BaseModel):
    """Parametres d'execution."""

    chemin_donnees: Path = Path(CHEMIN_DONNEES_DEFAUT)
    devise: str = "EUR"
    mode_paiement_defaut: ModePaiement = ModePaiement.VIREMENT


def charger_configuration(**surcharges: object) -> Configuration:
    """Construit la configuration depuis l'environnement.

    Variables: COMPTASALON_DONNEES, COMPTASALON_DEVISE, COMPTASALON_MODE_PAIEMENT.
    Les surcharges a None sont ignorees.
    """
    load_dotenv(find_dotenv(usecwd=True))
    valeurs: dict[str, object] = {
        "chemin_donnees": os.environ.get("COMPTASALON_DONNEES", CHEMIN_DONNEES_DEFAUT),
        "devise": os.environ.get("COMPTASALON_DEVISE", "EUR"),
        "mode_paiement_defaut": os.environ.get("COMPTASALON_MODE_PAIEMENT", "virement"),
    }
    valeurs.update({cle: v for cle, v in surcharges.items() if v is not None})
    return Configuration.model_validate(valeurs)
