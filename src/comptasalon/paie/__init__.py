# comptasalon.paie - Reconciliation des couts salariaux
#
# Modules:
#   charges.py        - Part des charges supportee par le technicien
#   paiements.py      - Registre des paiements (ajout, suppression, totaux)
#   reconciliation.py - Reste a payer et statut par employe et par mois
#   employes.py       - Annuaire et rattachement des lignes par nom
#   couts.py          - Couts salariaux: lecture, correction, suppression par mois
#   importation.py    - Import mensuel avec remplacement par identite
#   sommaire.py       - Totaux mensuels

from comptasalon.paie.charges import calculer_charge_technicien
from comptasalon.paie.couts import RegistreCouts
from comptasalon.paie.employes import AnnuaireEmployes
from comptasalon.paie.importation import LigneImport, ResultatImport, importer_couts_mois
from comptasalon.paie.paiements import RegistrePaiements
from comptasalon.paie.reconciliation import (
    EtatReglement,
    LigneReglement,
    StatutReglement,
    reconcilier,
    reconcilier_mois,
    reglements_du_mois,
)
from comptasalon.paie.sommaire import SommaireMois, sommaire_mois

__all__ = [
    "AnnuaireEmployes",
    "EtatReglement",
    "LigneImport",
    "LigneReglement",
    "RegistreCouts",
    "RegistrePaiements",
    "ResultatImport",
    "SommaireMois",
    "StatutReglement",
    "calculer_charge_technicien",
    "importer_couts_mois",
    "reconcilier",
    "reconcilier_mois",
    "reglements_du_mois",
    "sommaire_mois",
]
