"""Etat et utilitaires partages par les commandes CLI."""

from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from comptasalon.config import Configuration, charger_configuration
from comptasalon.models.monnaie import formater_montant
from comptasalon.models.periode import Mois
from comptasalon.stockage import Stockage

console = Console()

# Option globale stockee via le callback de l'application
_chemin_donnees: Optional[Path] = None


def definir_chemin_donnees(chemin: Optional[Path]) -> None:
    global _chemin_donnees
    _chemin_donnees = chemin


def get_configuration() -> Configuration:
    return charger_configuration(chemin_donnees=_chemin_donnees)


def get_stockage() -> Stockage:
    """Ouvre le stockage YAML designe par la configuration."""
    return Stockage(get_configuration().chemin_donnees)


def lire_mois(texte: Optional[str]) -> Mois:
    """Mois YYYY-MM; le mois courant si absent."""
    if not texte:
        return Mois.courant()
    try:
        return Mois.lire(texte)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def lire_date(texte: Optional[str]) -> datetime.date:
    """Date YYYY-MM-DD; aujourd'hui si absente."""
    if not texte:
        return datetime.date.today()
    try:
        return datetime.date.fromisoformat(texte)
    except ValueError as e:
        raise typer.BadParameter(f"Date invalide: {texte} (format YYYY-MM-DD)") from e


def lire_montant(texte: str) -> Decimal:
    """Montant saisi en ligne de commande (point ou virgule decimale)."""
    try:
        return Decimal(texte.replace(" ", "").replace(",", "."))
    except InvalidOperation as e:
        raise typer.BadParameter(f"Montant invalide: {texte}") from e


def fmt(montant: Decimal) -> str:
    return formater_montant(montant, get_configuration().devise)


def echouer(erreur: Exception) -> NoReturn:
    """Affiche l'erreur en rouge et termine avec le code 1."""
    console.print(f"[red]Erreur: {erreur}[/red]")
    raise typer.Exit(code=1)
