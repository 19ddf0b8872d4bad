"""Interface en ligne de commande ComptaSalon (csal)."""
