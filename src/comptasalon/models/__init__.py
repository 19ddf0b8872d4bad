"""Modeles de donnees ComptaSalon (montants, mois, depenses, paie)."""
