"""Commandes CLI pour les couts salariaux mensuels.

Usage:
    csal salaires importer paie-2026-03.csv --mois 2026-03
    csal salaires lister --mois 2026-03
    csal salaires supprimer-mois 2026-03 --oui
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.table import Table

from comptasalon.cli.commun import (
    console,
    echouer,
    fmt,
    get_stockage,
    lire_montant,
    lire_mois,
)
from comptasalon.erreurs import ErreurComptaSalon
from comptasalon.ingestion.csv_salaires import lire_csv_salaires
from comptasalon.models.monnaie import en_decimal
from comptasalon.paie.couts import RegistreCouts
from comptasalon.paie.employes import AnnuaireEmployes
from comptasalon.paie.importation import importer_couts_mois
from comptasalon.paie.reconciliation import StatutReglement, reglements_du_mois
from comptasalon.paie.sommaire import sommaire_mois

salaires_app = typer.Typer(no_args_is_help=True)

STYLES_STATUT = {
    StatutReglement.PAYE: "green",
    StatutReglement.PARTIEL: "yellow",
    StatutReglement.EN_ATTENTE: "red",
    StatutReglement.TROP_PERCU: "magenta",
}


def _charger_revenus(chemin: Path) -> dict[str, Decimal]:
    """Revenus generes par employe: fichier YAML {employe_id: montant}."""
    with open(chemin, encoding="utf-8") as f:
        donnees = yaml.safe_load(f) or {}
    if not isinstance(donnees, dict):
        raise typer.BadParameter(f"Format de revenus inattendu dans {chemin}")
    return {str(cle): en_decimal(str(valeur)) for cle, valeur in donnees.items()}


@salaires_app.command("importer")
def importer(
    fichier: Path = typer.Argument(..., help="Export CSV de paie", exists=True, dir_okay=False),
    mois: str = typer.Option(..., "--mois", "-m", help="Mois des couts (YYYY-MM)"),
    revenus: Optional[Path] = typer.Option(
        None, "--revenus", help="Fichier YAML des revenus generes par employe",
        exists=True, dir_okay=False,
    ),
) -> None:
    """Importer les couts salariaux d'un mois (remplace l'import precedent)."""
    cible = lire_mois(mois)
    lecture = lire_csv_salaires(fichier)
    for lineno, message in lecture.erreurs:
        console.print(f"[yellow]Ligne {lineno} ignoree: {message}[/yellow]")
    if not lecture.lignes:
        console.print("[yellow]Aucune ligne exploitable dans le fichier.[/yellow]")
        raise typer.Exit(code=1)

    try:
        montants_revenus = _charger_revenus(revenus) if revenus else None
    except ErreurComptaSalon as e:
        echouer(e)

    stockage = get_stockage()
    resultat = importer_couts_mois(
        stockage,
        cible,
        lecture.lignes,
        annuaire=AnnuaireEmployes(stockage),
        revenus=montants_revenus,
    )

    console.print(
        f"[green]{resultat.nb_importes} couts importes pour {cible}[/green]"
        f" ({resultat.remplaces} remplaces)"
    )
    for erreur in resultat.erreurs:
        console.print(
            f"[red]Ligne {erreur.numero} refusee ({erreur.ligne.prenom} "
            f"{erreur.ligne.nom}): {erreur.message}[/red]"
        )


@salaires_app.command("lister")
def lister(
    mois: Optional[str] = typer.Option(None, "--mois", "-m", help="Mois (YYYY-MM)"),
) -> None:
    """Afficher les couts d'un mois avec leur reste a payer."""
    cible = lire_mois(mois)
    lignes = reglements_du_mois(get_stockage(), cible)
    if not lignes:
        console.print(f"[yellow]Aucun cout salarial pour {cible}.[/yellow]")
        return

    table = Table(title=f"Salaires {cible}", show_header=True, header_style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Employe", style="cyan")
    table.add_column("Net", justify="right")
    table.add_column("Charge tech.", justify="right")
    table.add_column("Paye", justify="right")
    table.add_column("Reste", justify="right")
    table.add_column("Statut")
    for ligne in lignes:
        statut = ligne.etat.statut
        table.add_row(
            ligne.cout.id,
            ligne.cout.nom_complet,
            fmt(ligne.cout.salaire_net),
            fmt(ligne.etat.charge_technicien),
            fmt(ligne.etat.total_paye),
            fmt(ligne.etat.reste_a_payer),
            f"[{STYLES_STATUT[statut]}]{statut.value}[/{STYLES_STATUT[statut]}]",
        )
    console.print(table)


@salaires_app.command("sommaire")
def sommaire(
    mois: Optional[str] = typer.Option(None, "--mois", "-m", help="Mois (YYYY-MM)"),
) -> None:
    """Totaux d'un mois de paie."""
    cible = lire_mois(mois)
    resume = sommaire_mois(reglements_du_mois(get_stockage(), cible))

    table = Table(title=f"Sommaire paie {cible}", show_header=False)
    table.add_column("Poste", style="cyan")
    table.add_column("Valeur", justify="right")
    table.add_row("Employes", str(resume.nb_employes))
    table.add_row("Salaires nets", fmt(resume.total_net))
    table.add_row("Salaires bruts", fmt(resume.total_brut))
    table.add_row("Cout total", fmt(resume.total_cout))
    table.add_row("Charges", fmt(resume.total_charges))
    table.add_row("Charge technicien", fmt(resume.total_charge_technicien))
    table.add_row("Deja paye", fmt(resume.total_paye))
    table.add_row("[bold]Reste a payer[/bold]", f"[bold]{fmt(resume.total_reste_a_payer)}[/bold]")
    table.add_section()
    for statut, nombre in resume.nb_par_statut.items():
        table.add_row(statut.value, str(nombre))
    console.print(table)


@salaires_app.command("mois")
def mois_disponibles() -> None:
    """Lister les mois ayant des couts importes."""
    disponibles = RegistreCouts(get_stockage()).mois_disponibles()
    if not disponibles:
        console.print("[yellow]Aucun mois importe.[/yellow]")
        return
    for mois in disponibles:
        console.print(str(mois))


@salaires_app.command("corriger")
def corriger(
    cout_id: str = typer.Argument(..., help="Identifiant du cout salarial"),
    revenus: Optional[str] = typer.Option(None, "--revenus", help="Revenus generes"),
    net: Optional[str] = typer.Option(None, "--net", help="Salaire net"),
    brut: Optional[str] = typer.Option(None, "--brut", help="Salaire brut"),
    cout_total: Optional[str] = typer.Option(None, "--cout-total", help="Cout total"),
    charges: Optional[str] = typer.Option(None, "--charges", help="Charges"),
    taxe: Optional[str] = typer.Option(None, "--taxe", help="Pourcentage de taxe (0-100)"),
) -> None:
    """Corriger les montants d'un cout salarial."""
    saisies = {
        "revenus_generes": revenus,
        "salaire_net": net,
        "salaire_brut": brut,
        "cout_total": cout_total,
        "charges": charges,
        "pourcentage_taxe": taxe,
    }
    montants = {champ: lire_montant(v) for champ, v in saisies.items() if v is not None}
    if not montants:
        console.print("[yellow]Aucune correction demandee.[/yellow]")
        raise typer.Exit(code=1)

    try:
        cout = RegistreCouts(get_stockage()).corriger_montants(cout_id, **montants)
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(f"[green]Cout corrige: {cout.nom_complet} ({cout.periode})[/green]")


@salaires_app.command("supprimer-mois")
def supprimer_mois(
    mois: str = typer.Argument(..., help="Mois a supprimer (YYYY-MM)"),
    oui: bool = typer.Option(False, "--oui", help="Ne pas demander de confirmation"),
) -> None:
    """Supprimer tous les couts d'un mois et leurs paiements."""
    cible = lire_mois(mois)
    if not oui:
        typer.confirm(
            f"Supprimer les couts salariaux de {cible} et leurs paiements?",
            abort=True,
        )
    nombre = RegistreCouts(get_stockage()).supprimer_mois(cible)
    console.print(f"[yellow]{nombre} couts supprimes pour {cible}[/yellow]")
