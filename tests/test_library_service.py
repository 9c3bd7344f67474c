"""Tests for library service."""

import pytest

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.models import UnitBasis, WeightBasis
from nutriplan.services.ledger import LedgerService
from nutriplan.services.library import LibraryService
from tests.conftest import APPLE, CHICKEN, TODAY


def test_add_template_parses_measure_basis(library: LibraryService) -> None:
    chicken = library.add_template(CHICKEN)
    apple = library.add_template(APPLE)

    assert chicken.message == "Chicken Breast saved to library!"
    assert chicken.value.basis == WeightBasis()
    assert apple.value.basis == UnitBasis(unit_label="apple")
    assert library.list_templates() == [chicken.value, apple.value]


def test_unit_template_without_label_uses_unit(library: LibraryService) -> None:
    template = library.add_template({**APPLE, "unit_label": "  "}).value

    assert template.unit_label == "unit"


def test_add_template_rejects_unknown_measure_type(library: LibraryService) -> None:
    with pytest.raises(ValidationError):
        library.add_template({**CHICKEN, "measure_type": "cup"})

    assert library.list_templates() == []


def test_update_template_merges_payload(library: LibraryService) -> None:
    template = library.add_template(CHICKEN).value

    outcome = library.update_template(template.id, {"calories": 170})

    updated = library.get_template(template.id)
    assert outcome.message == "Food updated in library!"
    assert updated.calories == 170
    assert updated.protein_g == 31
    assert updated.name == "Chicken Breast"


def test_update_template_can_switch_to_unit(library: LibraryService) -> None:
    template = library.add_template(CHICKEN).value

    library.update_template(template.id, {"measure_type": "unit"})

    assert library.get_template(template.id).basis == UnitBasis(unit_label="unit")


def test_update_unknown_template_is_noop(library: LibraryService) -> None:
    outcome = library.update_template("missing", {"calories": 1})

    assert not outcome.changed


def test_search_is_case_insensitive_substring(library: LibraryService) -> None:
    library.add_template(CHICKEN)
    library.add_template(APPLE)
    library.add_template({**CHICKEN, "name": "Chicken Thigh"})

    results = library.search_templates("CHICK")

    assert [item.name for item in results] == ["Chicken Breast", "Chicken Thigh"]


def test_empty_search_returns_bounded_preview(store) -> None:
    library = LibraryService(store, preview_limit=10)
    for index in range(15):
        library.add_template({**CHICKEN, "name": f"Food {index}"})

    preview = library.search_templates("")

    assert len(preview) == 10
    assert preview[0].name == "Food 0"
    assert len(library.list_templates("")) == 15


def test_delete_template_keeps_logged_entries(
    library: LibraryService, ledger: LedgerService
) -> None:
    template = library.add_template(CHICKEN).value
    entry = ledger.add_entry(
        TODAY,
        {
            "name": template.name,
            "calories": 248,
            "protein_g": 46.5,
            "template_id": template.id,
            "quantity": 150,
        },
    ).value

    outcome = library.delete_template(template.id)

    assert outcome.message == "Removed from library"
    assert library.get_template(template.id) is None
    assert ledger.get_entry(TODAY, entry.id) == entry


def test_delete_unknown_template_is_noop(library: LibraryService) -> None:
    library.add_template(CHICKEN)

    outcome = library.delete_template("missing")

    assert not outcome.changed
    assert len(library.list_templates()) == 1


def test_add_template_rejects_negative_nutrition(library: LibraryService) -> None:
    with pytest.raises(ValidationError) as excinfo:
        library.add_template({**CHICKEN, "protein_g": -31})

    assert excinfo.value.message == "protein_g must not be negative"
    assert library.list_templates() == []
