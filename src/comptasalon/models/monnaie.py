"""Type monetaire partage.

Tous les montants sont des Decimal a deux decimales -- jamais de float.
L'arrondi au centime se fait au pair le plus proche (ROUND_HALF_EVEN).
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator

from comptasalon.erreurs import MontantInvalide

CENTIME = Decimal("0.01")
ZERO = Decimal("0.00")


def arrondir(montant: Decimal) -> Decimal:
    """Arrondit au centime (ROUND_HALF_EVEN)."""
    return montant.quantize(CENTIME, rounding=ROUND_HALF_EVEN)


def en_decimal(valeur: Any) -> Decimal:
    """Convertit une valeur (Decimal, int, str) en Decimal.

    Raises:
        MontantInvalide: Pour un float, un booleen ou une chaine non numerique.
    """
    if isinstance(valeur, Decimal):
        resultat = valeur
    elif isinstance(valeur, float) or isinstance(valeur, bool):
        raise MontantInvalide(
            "Les montants doivent etre Decimal, int ou str, jamais float. "
            "Utilisez Decimal('100.00') ou '100.00'."
        )
    elif isinstance(valeur, (int, str)):
        try:
            resultat = Decimal(str(valeur).strip())
        except InvalidOperation as e:
            raise MontantInvalide(f"Montant illisible: {valeur!r}") from e
    else:
        raise MontantInvalide(f"Type de montant non supporte: {type(valeur).__name__}")

    if not resultat.is_finite():
        raise MontantInvalide(f"Montant non fini: {valeur!r}")
    return resultat


def _rejeter_float(v: Any) -> Any:
    """Refuse les float pour forcer l'utilisation de Decimal ou str."""
    if isinstance(v, float):
        raise ValueError(
            "Les montants doivent etre Decimal ou str, jamais float. "
            "Utilisez Decimal('100.00') ou '100.00'."
        )
    return v


Montant = Annotated[Decimal, BeforeValidator(_rejeter_float)]


def somme(montants: Iterable[Decimal]) -> Decimal:
    """Somme commutative de montants, arrondie au centime."""
    return arrondir(sum(montants, ZERO))


def formater_montant(montant: Decimal, devise: str = "EUR") -> str:
    """Formate un montant avec separateur de milliers et devise."""
    return f"{montant:,.2f} {devise}".replace(",", " ")
