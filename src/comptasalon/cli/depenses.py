"""Commandes CLI pour les depenses fixes et variables.

Usage:
    csal depense creer salon-1 Loyer 1200 --depuis 2026-01 --categorie loyer
    csal depense montant <id> 1250 --depuis 2026-04
    csal depense total --mois 2026-04 --salon salon-1
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from comptasalon.cli.commun import (
    console,
    echouer,
    fmt,
    get_stockage,
    lire_date,
    lire_montant,
    lire_mois,
)
from comptasalon.depenses.agregation import ventiler_depuis_stockage
from comptasalon.depenses.echeancier import EcheancierTaux
from comptasalon.depenses.variables import ajouter_depense_variable
from comptasalon.erreurs import ErreurComptaSalon
from comptasalon.models.depenses import CategorieDepense

depense_app = typer.Typer(no_args_is_help=True)


@depense_app.command("creer")
def creer(
    salon: str = typer.Argument(..., help="Identifiant du salon"),
    nom: str = typer.Argument(..., help="Nom de la depense (ex: Loyer rue Victor Hugo)"),
    montant: str = typer.Argument(..., help="Montant mensuel"),
    depuis: Optional[str] = typer.Option(
        None, "--depuis", "-d", help="Premier mois applicable (YYYY-MM, defaut: mois courant)",
    ),
    categorie: CategorieDepense = typer.Option(
        CategorieDepense.AUTRE, "--categorie", "-c", help="Categorie de depense",
    ),
    description: str = typer.Option("", "--description", help="Description libre"),
) -> None:
    """Creer une depense fixe avec son premier montant."""
    echeancier = EcheancierTaux(get_stockage())
    try:
        depense = echeancier.creer_depense_fixe(
            salon_id=salon,
            nom=nom,
            montant=lire_montant(montant),
            effectif_depuis=lire_mois(depuis),
            categorie=categorie,
            description=description,
        )
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(f"[green]Depense fixe creee: {depense.nom} ({depense.id})[/green]")


@depense_app.command("montant")
def montant(
    definition_id: str = typer.Argument(..., help="Identifiant de la depense fixe"),
    nouveau_montant: str = typer.Argument(..., help="Nouveau montant mensuel"),
    depuis: str = typer.Option(..., "--depuis", "-d", help="Premier mois applicable (YYYY-MM)"),
) -> None:
    """Changer le montant d'une depense fixe a partir d'un mois."""
    echeancier = EcheancierTaux(get_stockage())
    try:
        entree = echeancier.fixer_montant(
            definition_id, lire_montant(nouveau_montant), lire_mois(depuis),
        )
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(
        f"[green]Montant {fmt(entree.montant)} applicable a partir de "
        f"{entree.effectif_depuis}[/green]"
    )


@depense_app.command("historique")
def historique(
    definition_id: str = typer.Argument(..., help="Identifiant de la depense fixe"),
) -> None:
    """Afficher l'historique des montants d'une depense fixe."""
    echeancier = EcheancierTaux(get_stockage())
    try:
        depense = echeancier.obtenir(definition_id)
        entrees = list(echeancier.historique(definition_id))
    except ErreurComptaSalon as e:
        echouer(e)

    table = Table(title=f"Historique - {depense.nom}", show_header=True, header_style="bold")
    table.add_column("A partir de", style="cyan")
    table.add_column("Montant", justify="right")
    table.add_column("En vigueur")
    for item in entrees:
        table.add_row(
            str(item.effectif_depuis),
            fmt(item.montant),
            "[green]oui[/green]" if item.en_vigueur else "",
        )
    console.print(table)


@depense_app.command("desactiver")
def desactiver(
    definition_id: str = typer.Argument(..., help="Identifiant de la depense fixe"),
) -> None:
    """Desactiver une depense fixe (l'historique est conserve)."""
    try:
        depense = EcheancierTaux(get_stockage()).desactiver(definition_id)
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(f"[yellow]Depense fixe desactivee: {depense.nom}[/yellow]")


@depense_app.command("lister")
def lister(
    mois: Optional[str] = typer.Option(None, "--mois", "-m", help="Mois (YYYY-MM)"),
    salon: Optional[str] = typer.Option(None, "--salon", "-s", help="Filtrer par salon"),
) -> None:
    """Lister les depenses fixes actives avec leur montant du mois."""
    cible = lire_mois(mois)
    lignes = EcheancierTaux(get_stockage()).depenses_fixes_du_mois(cible, salon)
    if not lignes:
        console.print("[yellow]Aucune depense fixe active.[/yellow]")
        return

    table = Table(title=f"Depenses fixes - {cible}", show_header=True, header_style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Salon")
    table.add_column("Categorie", style="cyan")
    table.add_column("Nom")
    table.add_column("Montant", justify="right")
    for ligne in lignes:
        montant_affiche = (
            fmt(ligne.montant) if ligne.applicable else "[dim]pas encore applicable[/dim]"
        )
        table.add_row(
            ligne.depense.id,
            ligne.depense.salon_id,
            ligne.depense.categorie.libelle,
            ligne.depense.nom,
            montant_affiche,
        )
    console.print(table)


@depense_app.command("variable")
def variable(
    salon: str = typer.Argument(..., help="Identifiant du salon"),
    montant: str = typer.Argument(..., help="Montant de la depense"),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD, defaut: aujourd'hui)"),
    categorie: CategorieDepense = typer.Option(
        CategorieDepense.AUTRE, "--categorie", "-c", help="Categorie de depense",
    ),
    description: str = typer.Option("", "--description", help="Description libre"),
) -> None:
    """Enregistrer une depense variable."""
    if categorie.est_fixe:
        console.print(
            f"[yellow]{categorie.libelle} est habituellement une depense fixe: "
            f"voir `csal depense creer`.[/yellow]"
        )
    try:
        depense = ajouter_depense_variable(
            get_stockage(),
            salon_id=salon,
            montant=lire_montant(montant),
            date=lire_date(date),
            categorie=categorie,
            description=description,
        )
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(f"[green]Depense enregistree: {fmt(depense.montant)} le {depense.date}[/green]")


@depense_app.command("total")
def total(
    mois: Optional[str] = typer.Option(None, "--mois", "-m", help="Mois (YYYY-MM)"),
    salon: Optional[str] = typer.Option(None, "--salon", "-s", help="Filtrer par salon"),
) -> None:
    """Total des depenses fixes et variables d'un mois."""
    cible = lire_mois(mois)
    stockage = get_stockage()
    ventilation = ventiler_depuis_stockage(stockage, cible, salon)
    mois_precedent = cible.decaler(-1)
    precedent = ventiler_depuis_stockage(stockage, mois_precedent, salon)

    table = Table(
        title=f"Depenses {cible}" + (f" - salon {salon}" if salon else ""),
        show_header=True,
        header_style="bold",
    )
    table.add_column("Poste", style="cyan")
    table.add_column("Montant", justify="right")
    for categorie, valeur in sorted(ventilation.par_categorie.items(), key=lambda kv: kv[0].value):
        table.add_row(f"  {categorie.libelle}", fmt(valeur))
    table.add_section()
    table.add_row("Depenses fixes", fmt(ventilation.total_fixes))
    table.add_row("Depenses variables", fmt(ventilation.total_variables))
    table.add_row("[bold]Total[/bold]", f"[bold]{fmt(ventilation.total)}[/bold]")
    table.add_row(f"[dim]Total {mois_precedent}[/dim]", f"[dim]{fmt(precedent.total)}[/dim]")
    console.print(table)

    for depense in ventilation.non_applicables:
        console.print(
            f"[yellow]{depense.nom}: pas encore applicable en {cible} "
            f"(non compte)[/yellow]"
        )
