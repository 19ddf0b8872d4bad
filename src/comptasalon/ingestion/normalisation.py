"""Utilitaires de normalisation pour l'import des fichiers de paie."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from pathlib import Path

from comptasalon.erreurs import MontantInvalide
from comptasalon.models.monnaie import ZERO, arrondir

# \s couvre aussi les espaces insecables (U+00A0, U+202F)
_BRUIT_MONTANT = re.compile(r"[\s€]")


def normaliser_montant(brut: str) -> Decimal:
    """Convertit un montant au format francais en Decimal.

    - "1 234,56" -> Decimal("1234.56")
    - "1.234,56" -> Decimal("1234.56") (le point est alors un separateur de milliers)
    - "" -> Decimal("0.00")

    Raises:
        MontantInvalide: Si le texte n'est pas un nombre.
    """
    texte = _BRUIT_MONTANT.sub("", brut or "")
    if not texte:
        return ZERO
    if "," in texte:
        texte = texte.replace(".", "").replace(",", ".")
    try:
        valeur = Decimal(texte)
    except InvalidOperation as e:
        raise MontantInvalide(f"Montant illisible: {brut!r}") from e
    if not valeur.is_finite():
        raise MontantInvalide(f"Montant illisible: {brut!r}")
    return arrondir(valeur)


def detecter_encodage(chemin: Path) -> str:
    """Detecte l'encodage d'un fichier texte.

    Essaie UTF-8 (avec ou sans BOM), puis Windows-1252, puis Latin-1.

    Raises:
        ValueError: Si aucun encodage ne fonctionne.
    """
    for encodage in ("utf-8-sig", "windows-1252", "latin-1"):
        try:
            chemin.read_text(encoding=encodage)
            return encodage
        except (UnicodeDecodeError, UnicodeError):
            continue
    raise ValueError(f"Impossible de decoder le fichier {chemin}")


def detecter_separateur(entete: str) -> str:
    """Separateur de colonnes: point-virgule, sinon virgule, sinon tabulation."""
    if ";" in entete:
        return ";"
    if "," in entete and "\t" not in entete:
        return ","
    return "\t"
