# comptasalon.depenses - Depenses fixes (echeancier de taux) et variables
#
# Modules:
#   echeancier.py - Historique des montants par depense fixe (ajout seulement)
#   variables.py  - Depenses ponctuelles datees
#   agregation.py - Total mensuel fixe + variable par salon

from comptasalon.depenses.agregation import (
    VentilationDepenses,
    total_depenses_mois,
    ventiler_depenses_mois,
    ventiler_depuis_stockage,
)
from comptasalon.depenses.echeancier import (
    DepenseFixeDuMois,
    EcheancierTaux,
    EntreeHistorique,
    resoudre_montant,
)
from comptasalon.depenses.variables import (
    ajouter_depense_variable,
    lister_depenses_variables,
    supprimer_depense_variable,
)

__all__ = [
    "DepenseFixeDuMois",
    "EcheancierTaux",
    "EntreeHistorique",
    "VentilationDepenses",
    "ajouter_depense_variable",
    "lister_depenses_variables",
    "resoudre_montant",
    "supprimer_depense_variable",
    "total_depenses_mois",
    "ventiler_depenses_mois",
    "ventiler_depuis_stockage",
]
