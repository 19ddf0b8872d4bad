"""Erreurs du moteur de reconciliation.

Toutes heritent de ValueError: ce sont des refus de donnees, leves avant
toute ecriture.
"""

from __future__ import annotations


class ErreurComptaSalon(ValueError):
    """Erreur de base pour ComptaSalon."""


class MontantInvalide(ErreurComptaSalon):
    """Montant non positif ou mal forme."""


class PourcentageTaxeInvalide(ErreurComptaSalon):
    """Pourcentage de taxe hors de l'intervalle [0, 100]."""


class DateEffetInvalide(ErreurComptaSalon):
    """Modification retroactive d'un echeancier de taux."""


class AucunTauxApplicable(ErreurComptaSalon):
    """Le mois demande precede la premiere entree de l'echeancier.

    Ce n'est pas un zero: la depense n'existait pas encore ce mois-la.
    Egalement levee pour une depense desactivee.
    """

    def __init__(self, definition_id: str, mois: object, message: str | None = None) -> None:
        self.definition_id = definition_id
        self.mois = mois
        super().__init__(
            message or f"Aucun montant applicable pour la depense {definition_id} en {mois}"
        )


class IdentiteAmbigue(ErreurComptaSalon):
    """Une ligne d'import correspond a plusieurs employes.

    Aussi levee quand deux lignes d'un meme import visent la meme identite.
    """

    def __init__(
        self, nom: str, prenom: str, candidats: list[str], message: str | None = None
    ) -> None:
        self.nom = nom
        self.prenom = prenom
        self.candidats = candidats
        super().__init__(
            message
            or f"{prenom} {nom} correspond a {len(candidats)} employes "
            f"({', '.join(candidats)}); import de la ligne interrompu"
        )


class ElementIntrouvable(ErreurComptaSalon, LookupError):
    """Identifiant inconnu du stockage."""


class DefinitionIntrouvable(ElementIntrouvable):
    """Depense fixe inconnue."""


class CoutIntrouvable(ElementIntrouvable):
    """Cout salarial inconnu."""


class PaiementIntrouvable(ElementIntrouvable):
    """Paiement inconnu."""
