import pytest

from finsmart.categorization.rules import CATEGORIES, OTHER, classify


def test_classify_restaurant_to_food() -> None:
    assert classify("restaurante") == "alimentación"


def test_classify_dinner_sentence_to_food() -> None:
    assert classify("Cena en restaurante italiano") == "alimentación"


def test_classify_is_case_insensitive() -> None:
    assert classify("  RESTAURANTE  ") == "alimentación"


def test_classify_fuel_to_transport() -> None:
    assert classify("Recarga de gasolina") == "transporte"


def test_classify_streaming_to_entertainment() -> None:
    assert classify("Netflix mensual") == "entretenimiento"


def test_classify_internet_to_services() -> None:
    assert classify("Internet fibra") == "servicios"


def test_classify_dentist_to_health() -> None:
    assert classify("Consulta con el dentista") == "salud"


def test_classify_shirt_to_clothing() -> None:
    assert classify("Camisa azul") == "ropa"


def test_classify_tuition_to_education() -> None:
    assert classify("Matrícula universidad") == "educación"


def test_classify_rent_to_home() -> None:
    assert classify("Alquiler del mes") == "hogar"


def test_classify_empty() -> None:
    assert classify("") == OTHER
    assert classify(None) == OTHER
    assert classify("   ") == OTHER


def test_classify_unknown_to_other() -> None:
    assert classify("xyz 123") == "otros"


def test_overlapping_keyword_resolved_by_order() -> None:
    # "agua" is both a drink and a utility bill; food is declared first.
    assert classify("Factura de agua") == "alimentación"


def test_categories_taxonomy() -> None:
    assert CATEGORIES == (
        "alimentación",
        "transporte",
        "entretenimiento",
        "servicios",
        "salud",
        "ropa",
        "educación",
        "hogar",
        "otros",
    )
    assert CATEGORIES[-1] == OTHER


@pytest.mark.parametrize(
    "description",
    ["", "restaurante", "Factura de luz", "???", "a" * 500, "Pago 4532 0151 1283 0366"],
)
def test_classify_is_total_and_deterministic(description: str) -> None:
    first = classify(description)
    assert first in CATEGORIES
    assert classify(description) == first
