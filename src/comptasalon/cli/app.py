"""Application CLI principale ComptaSalon."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

import comptasalon
from comptasalon.cli.commun import console, definir_chemin_donnees

app = typer.Typer(
    name="csal",
    help="ComptaSalon - Depenses et salaires d'un reseau de salons",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ComptaSalon version {comptasalon.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    donnees: Optional[str] = typer.Option(
        None,
        "--donnees",
        "-d",
        help="Fichier YAML des donnees (defaut: $COMPTASALON_DONNEES)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Afficher le journal detaille",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Afficher la version de ComptaSalon",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ComptaSalon - Suivi des depenses et de la paie de plusieurs salons."""
    definir_chemin_donnees(Path(donnees) if donnees else None)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# Import et enregistrement des sous-commandes
from comptasalon.cli.depenses import depense_app  # noqa: E402
from comptasalon.cli.employes import employe_app  # noqa: E402
from comptasalon.cli.paiements import paiement_app  # noqa: E402
from comptasalon.cli.salaires import salaires_app  # noqa: E402

app.add_typer(depense_app, name="depense", help="Depenses fixes et variables")
app.add_typer(salaires_app, name="salaires", help="Couts salariaux mensuels")
app.add_typer(paiement_app, name="paiement", help="Paiements aux employes")
app.add_typer(employe_app, name="employe", help="Annuaire des employes")
