from bulk_lister.schema.mapping.loader import (
    field_for_column,
    is_known_column,
    load_mapping,
    template_columns,
)


def test_template_columns_cover_the_six_known_headers():
    cols = template_columns()
    assert set(cols) == {"title", "price", "condition", "description", "category", "offer shipping"}
    assert cols["condition"]["default"] == "New"
    assert cols["offer shipping"]["default"] == "No"
    assert cols["price"]["type"] == "number"


def test_column_lookup_is_trimmed_and_case_insensitive():
    assert field_for_column("  OFFER SHIPPING ") == "offer_shipping"
    assert field_for_column("Title") == "title"
    assert field_for_column("SKU") is None
    assert is_known_column("Price")
    assert not is_known_column("brand")


def test_unknown_mapping_name_lists_available_files():
    try:
        load_mapping("nope")
    except FileNotFoundError as e:
        assert "marketplace.yaml" in str(e)
    else:
        raise AssertionError("expected FileNotFoundError")
