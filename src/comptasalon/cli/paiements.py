"""Commandes CLI pour les paiements aux employes.

Usage:
    csal paiement ajouter <cout_id> 800 --date 2026-04-05 --mode virement
    csal paiement historique <cout_id>
    csal paiement exporter --mois 2026-03 > paie-2026-03.beancount
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from comptasalon.cli.commun import (
    console,
    echouer,
    fmt,
    get_configuration,
    get_stockage,
    lire_date,
    lire_montant,
    lire_mois,
)
from comptasalon.erreurs import ErreurComptaSalon
from comptasalon.journal import formater_transactions, generer_transactions_mois
from comptasalon.models.paie import ModePaiement
from comptasalon.paie.couts import RegistreCouts
from comptasalon.paie.paiements import RegistrePaiements
from comptasalon.paie.reconciliation import reconcilier

paiement_app = typer.Typer(no_args_is_help=True)


@paiement_app.command("ajouter")
def ajouter(
    cout_id: str = typer.Argument(..., help="Identifiant du cout salarial"),
    montant: str = typer.Argument(..., help="Montant verse"),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD, defaut: aujourd'hui)"),
    mode: Optional[ModePaiement] = typer.Option(
        None, "--mode", help="Mode de paiement (defaut: configuration)",
    ),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes libres"),
) -> None:
    """Enregistrer un paiement et afficher le nouveau reste a payer."""
    stockage = get_stockage()
    registre = RegistrePaiements(stockage)
    try:
        paiement = registre.enregistrer(
            cout_id,
            lire_montant(montant),
            lire_date(date),
            mode=mode or get_configuration().mode_paiement_defaut,
            notes=notes,
        )
        etat = reconcilier(RegistreCouts(stockage).obtenir(cout_id), registre.total_paye(cout_id))
    except ErreurComptaSalon as e:
        echouer(e)

    console.print(f"[green]Paiement enregistre: {fmt(paiement.montant)} ({paiement.id})[/green]")
    console.print(f"Reste a payer: {fmt(etat.reste_a_payer)} ({etat.statut.value})")
    if etat.trop_percu:
        console.print(f"[magenta]Trop-percu: {fmt(etat.trop_percu)}[/magenta]")


@paiement_app.command("supprimer")
def supprimer(
    paiement_id: str = typer.Argument(..., help="Identifiant du paiement"),
) -> None:
    """Supprimer un paiement saisi par erreur."""
    try:
        paiement = RegistrePaiements(get_stockage()).supprimer(paiement_id)
    except ErreurComptaSalon as e:
        echouer(e)
    console.print(f"[yellow]Paiement supprime: {fmt(paiement.montant)}[/yellow]")


@paiement_app.command("historique")
def historique(
    cout_id: str = typer.Argument(..., help="Identifiant du cout salarial"),
) -> None:
    """Historique des paiements d'un cout salarial, les plus recents d'abord."""
    stockage = get_stockage()
    try:
        cout = RegistreCouts(stockage).obtenir(cout_id)
    except ErreurComptaSalon as e:
        echouer(e)

    registre = RegistrePaiements(stockage)
    paiements = registre.lister(cout_id)
    etat = reconcilier(cout, registre.total_paye(cout_id))

    table = Table(
        title=f"Paiements - {cout.nom_complet} ({cout.periode})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Date", style="cyan")
    table.add_column("Montant", justify="right")
    table.add_column("Mode")
    table.add_column("Notes")
    table.add_column("Id", style="dim")
    for paiement in paiements:
        table.add_row(
            str(paiement.date_paiement),
            fmt(paiement.montant),
            paiement.mode.value,
            paiement.notes or "",
            paiement.id,
        )
    console.print(table)
    console.print(
        f"Total paye: {fmt(etat.total_paye)} | Reste a payer: {fmt(etat.reste_a_payer)}"
    )


@paiement_app.command("exporter")
def exporter(
    mois: Optional[str] = typer.Option(None, "--mois", "-m", help="Mois des couts (YYYY-MM)"),
    sortie: Optional[Path] = typer.Option(
        None, "--sortie", "-o", help="Fichier .beancount (defaut: sortie standard)",
    ),
) -> None:
    """Exporter les paiements d'un mois en transactions Beancount."""
    cible = lire_mois(mois)
    transactions = generer_transactions_mois(
        get_stockage(), cible, get_configuration().devise
    )
    if not transactions:
        console.print(f"[yellow]Aucun paiement pour {cible}.[/yellow]")
        return

    texte = formater_transactions(transactions)
    if sortie is None:
        typer.echo(texte)
        return
    sortie.parent.mkdir(parents=True, exist_ok=True)
    sortie.write_text(texte, encoding="utf-8")
    console.print(f"[green]{len(transactions)} transactions ecrites dans {sortie}[/green]")
