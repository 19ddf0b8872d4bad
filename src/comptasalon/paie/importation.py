"""Import mensuel des couts salariaux.

Un import remplace, il n'accumule pas: pour chaque identite (fiche employe
si la ligne est rattachee, sinon nom + prenom) et chaque mois, le cout
precedent est remplace par la nouvelle ligne dans une seule transaction.
Le cout remplace garde son identifiant pour que ses paiements restent
attaches.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from pydantic import BaseModel, ValidationError

from comptasalon.erreurs import ErreurComptaSalon, IdentiteAmbigue
from comptasalon.models.monnaie import ZERO, Montant, arrondir
from comptasalon.models.paie import CoutSalarial, Employe
from comptasalon.models.periode import Mois
from comptasalon.paie.employes import AnnuaireEmployes, normaliser_nom, premier_prenom
from comptasalon.stockage import COUTS_SALARIAUX, Stockage

logger = logging.getLogger(__name__)


class LigneImport(BaseModel):
    """Ligne de paie deja normalisee (montants en Decimal)."""

    nom: str
    prenom: str
    salaire_net: Montant = ZERO
    salaire_brut: Montant = ZERO
    cout_total: Montant = ZERO
    charges: Montant = ZERO


@dataclass
class ErreurLigne:
    """Ligne refusee lors d'un import."""

    numero: int
    ligne: LigneImport
    message: str


@dataclass
class ResultatImport:
    """Bilan d'un import mensuel."""

    mois: Mois
    importes: list[CoutSalarial] = field(default_factory=list)
    remplaces: int = 0
    erreurs: list[ErreurLigne] = field(default_factory=list)

    @property
    def nb_importes(self) -> int:
        return len(self.importes)


def _meme_identite(existant: CoutSalarial, employe: Employe | None, ligne: LigneImport) -> bool:
    if employe is not None and existant.employe_id == employe.id:
        return True
    if employe is not None and existant.employe_id is not None:
        return False
    return (
        normaliser_nom(existant.nom) == normaliser_nom(ligne.nom)
        and normaliser_nom(premier_prenom(existant.prenom))
        == normaliser_nom(premier_prenom(ligne.prenom))
    )


def _cles_identite(ligne: LigneImport, employe: Employe | None) -> set[tuple[str, ...]]:
    """Cles sous lesquelles une ligne ecrit son cout pour le mois."""
    cles: set[tuple[str, ...]] = {
        ("nom", normaliser_nom(ligne.nom), normaliser_nom(premier_prenom(ligne.prenom))),
    }
    if employe is not None:
        cles.add(("employe", employe.id))
    return cles


def _remplacer_ou_inserer(
    stockage: Stockage,
    mois: Mois,
    ligne: LigneImport,
    employe: Employe | None,
    revenus: Mapping[str, Decimal],
) -> tuple[CoutSalarial, bool]:
    """Remplace le cout de la meme identite pour le mois, ou en insere un.

    Une ligne non rattachee qui remplace un cout rattache a une fiche garde
    le rattachement, le pourcentage de taxe et les revenus de ce cout.
    """
    with stockage.transaction():
        existants = stockage.lister(
            COUTS_SALARIAUX,
            lambda c: c.annee == mois.annee
            and c.mois == mois.mois
            and _meme_identite(c, employe, ligne),
        )
        cout = CoutSalarial(
            employe_id=employe.id if employe else None,
            nom=ligne.nom.strip(),
            prenom=ligne.prenom.strip(),
            mois=mois.mois,
            annee=mois.annee,
            revenus_generes=arrondir(revenus.get(employe.id, ZERO) if employe else ZERO),
            salaire_net=arrondir(ligne.salaire_net),
            salaire_brut=arrondir(ligne.salaire_brut),
            cout_total=arrondir(ligne.cout_total),
            charges=arrondir(ligne.charges),
            pourcentage_taxe=employe.pourcentage_taxe if employe else Decimal("0"),
        )
        if not existants:
            stockage.ajouter(COUTS_SALARIAUX, cout)
            return cout, False

        # Le cout rattache l'emporte sur un homonyme non rattache.
        conserve, *doublons = sorted(
            existants, key=lambda c: (c.employe_id is None, c.cree_le)
        )
        for doublon in doublons:
            stockage.supprimer(COUTS_SALARIAUX, doublon.id)
        mise_a_jour = {
            "id": conserve.id,
            "cree_le": conserve.cree_le,
            "modifie_le": datetime.datetime.now(),
        }
        if employe is None and conserve.employe_id is not None:
            mise_a_jour.update(
                employe_id=conserve.employe_id,
                pourcentage_taxe=conserve.pourcentage_taxe,
                revenus_generes=arrondir(
                    revenus.get(conserve.employe_id, conserve.revenus_generes)
                ),
            )
        cout = cout.model_copy(update=mise_a_jour)
        stockage.remplacer(COUTS_SALARIAUX, cout)
        return cout, True


def importer_couts_mois(
    stockage: Stockage,
    mois: Mois,
    lignes: Iterable[LigneImport],
    annuaire: AnnuaireEmployes | None = None,
    revenus: Mapping[str, Decimal] | None = None,
) -> ResultatImport:
    """Importe les couts salariaux d'un mois.

    Args:
        stockage: Stockage cible.
        mois: Mois des lignes importees.
        lignes: Lignes normalisees.
        annuaire: Annuaire pour rattacher les lignes aux fiches employes.
            Sans annuaire, toutes les lignes restent non rattachees.
        revenus: Revenus generes par identifiant d'employe, pour le mois.

    Returns:
        ResultatImport avec les couts importes et les lignes refusees.
        Une ligne ambigue est refusee sans bloquer les autres, de meme qu'une
        ligne qui viserait une identite deja importee plus haut dans le fichier.
    """
    resultat = ResultatImport(mois=mois)
    revenus = revenus or {}
    deja_importes: dict[tuple[str, ...], tuple[int, str]] = {}

    for numero, ligne in enumerate(lignes, start=1):
        try:
            employe = annuaire.identifier(ligne.nom, ligne.prenom) if annuaire else None
            cles = _cles_identite(ligne, employe)
            collisions = sorted(deja_importes[c] for c in cles if c in deja_importes)
            if collisions:
                precedente, cout_id = collisions[0]
                raise IdentiteAmbigue(
                    ligne.nom, ligne.prenom, [cout_id],
                    message=(
                        f"{ligne.prenom} {ligne.nom} deja importe ligne {precedente} "
                        f"(cout {cout_id}); ligne refusee pour ne pas l'ecraser"
                    ),
                )
            cout, remplace = _remplacer_ou_inserer(stockage, mois, ligne, employe, revenus)
        except (ErreurComptaSalon, ValidationError) as e:
            logger.warning("Ligne %d refusee (%s %s): %s", numero, ligne.prenom, ligne.nom, e)
            resultat.erreurs.append(ErreurLigne(numero=numero, ligne=ligne, message=str(e)))
            continue

        for cle in cles:
            deja_importes[cle] = (numero, cout.id)
        resultat.importes.append(cout)
        if remplace:
            resultat.remplaces += 1

    logger.info(
        "Import %s: %d lignes importees (%d remplacees), %d refusees",
        mois, resultat.nb_importes, resultat.remplaces, len(resultat.erreurs),
    )
    return resultat
