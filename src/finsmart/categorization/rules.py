"""Keyword-based transaction categorization.

Users type free-text descriptions ("almuerzo con clientes", "recarga de
gasolina"). When no category is supplied we infer one by substring matching
against fixed Spanish keyword lists.

Categories are not mutually exclusive by keyword ("agua" is both a drink and a
utility bill), so the declared order below is part of the contract: the first
category with a matching keyword wins.
"""

from __future__ import annotations

OTHER = "otros"

# Ordering matters: earlier matches win.
_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "alimentación",
        (
            "comida", "restaurante", "supermercado", "mercado", "pizza", "hamburguesa",
            "café", "desayuno", "almuerzo", "cena", "bebida", "coca cola", "agua",
            "pan", "panadería", "carnicería", "verdulería", "sushi", "delivery",
        ),
    ),
    (
        "transporte",
        (
            "transporte", "uber", "taxi", "bus", "metro", "gasolina", "combustible",
            "peaje", "parking", "estacionamiento", "motocicleta", "bicicleta",
            "avión", "vuelo", "tren", "barco",
        ),
    ),
    (
        "entretenimiento",
        (
            "cine", "ocio", "película", "teatro", "concierto", "bar", "discoteca",
            "videojuego", "netflix", "spotify", "streaming", "parque", "diversión",
            "gimnasio", "deporte", "futbol", "basquet",
        ),
    ),
    (
        "servicios",
        (
            "luz", "agua", "internet", "teléfono", "gas", "electricidad",
            "cable", "seguro", "banco", "notaría", "abogado", "contador",
            "limpieza", "jardinería", "reparación",
        ),
    ),
    (
        "salud",
        (
            "salud", "medicina", "doctor", "médico", "hospital", "clínica",
            "farmacia", "pastillas", "vitaminas", "dentista", "oftalmólogo",
            "laboratorio", "rayos x", "consulta",
        ),
    ),
    (
        "ropa",
        (
            "ropa", "zapato", "camisa", "pantalón", "vestido", "tienda",
            "boutique", "zapatería", "moda", "accesorios", "bolso", "cartera",
        ),
    ),
    (
        "educación",
        (
            "educación", "colegio", "universidad", "curso", "libro", "cuaderno",
            "lápiz", "material", "matrícula", "pensión", "tutoría",
        ),
    ),
    (
        "hogar",
        (
            "hogar", "casa", "mueble", "electrodoméstico", "decoración",
            "herramienta", "pintura", "construcción", "alquiler", "hipoteca",
        ),
    ),
)

# Public taxonomy, in matching order, with the fallback last.
CATEGORIES: tuple[str, ...] = tuple(category for category, _ in _RULES) + (OTHER,)


def _norm(text: str | None) -> str:
    return (text or "").strip().lower()


def classify(description: str | None) -> str:
    """Infer a category from a transaction description.

    Args:
        description: Free-text description as entered by the user.

    Returns:
        One of CATEGORIES. Never raises; empty input yields OTHER.
    """
    text = _norm(description)
    if not text:
        return OTHER

    for category, keywords in _RULES:
        if any(keyword in text for keyword in keywords):
            return category

    return OTHER
