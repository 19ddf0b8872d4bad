"""Commandes CLI pour l'annuaire des employes."""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from comptasalon.cli.commun import console, echouer, get_stockage, lire_montant
from comptasalon.erreurs import ErreurComptaSalon
from comptasalon.paie.employes import AnnuaireEmployes

employe_app = typer.Typer(no_args_is_help=True)


@employe_app.command("ajouter")
def ajouter(
    nom: str = typer.Argument(..., help="Nom de famille"),
    prenom: str = typer.Argument(..., help="Prenom"),
    taxe: str = typer.Option("0", "--taxe", "-t", help="Pourcentage de taxe pris en charge (0-100)"),
    matricule: str = typer.Option("", "--matricule", help="Matricule de paie"),
    salon: Optional[str] = typer.Option(None, "--salon", "-s", help="Salon de rattachement"),
) -> None:
    """Ajouter une fiche employe."""
    try:
        employe = AnnuaireEmployes(get_stockage()).ajouter(
            nom, prenom, lire_montant(taxe), matricule=matricule, salon_id=salon,
        )
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(f"[green]Employe ajoute: {employe.nom_complet} ({employe.id})[/green]")


@employe_app.command("lister")
def lister() -> None:
    """Lister les fiches employes."""
    employes = AnnuaireEmployes(get_stockage()).lister()
    if not employes:
        console.print("[yellow]Aucun employe.[/yellow]")
        return

    table = Table(title="Employes", show_header=True, header_style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Nom", style="cyan")
    table.add_column("Prenom")
    table.add_column("Matricule")
    table.add_column("Salon")
    table.add_column("Taxe %", justify="right")
    for employe in employes:
        table.add_row(
            employe.id,
            employe.nom,
            employe.prenom,
            employe.matricule,
            employe.salon_id or "",
            str(employe.pourcentage_taxe),
        )
    console.print(table)
