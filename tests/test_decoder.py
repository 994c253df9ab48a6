import pytest

from bulk_lister.errors import MalformedTemplate
from bulk_lister.sheets.decoder import decode_grid, find_header_row, to_price

HEADER = ["TITLE", "PRICE", "CONDITION", "DESCRIPTION", "CATEGORY", "OFFER SHIPPING", "SKU"]


def test_decode_template_with_metadata_and_extra_column():
    grid = [
        ["Facebook Marketplace Bulk Upload Template"],
        ["You can create up to 50 listings at once."],
        HEADER,
        ["Bike", 100, "New", "desc", "Sports", "Yes", "ABC123"],
    ]
    sheet = decode_grid(grid)

    assert len(sheet.listings) == 1
    bike = sheet.listings[0]
    assert bike.title == "Bike"
    assert bike.price == 100
    assert bike.offer_shipping == "Yes"
    assert bike.other_fields == {"SKU": "ABC123"}
    assert sheet.header_row == HEADER
    assert len(sheet.pre_header_rows) == 2


def test_header_detection_is_case_insensitive_and_trimmed():
    grid = [["banner"], [], [" Title ", "pRiCe"], ["Lamp", "12.5"]]
    assert find_header_row(grid) == 2
    sheet = decode_grid(grid)
    assert sheet.header_row == [" Title ", "pRiCe"]
    assert sheet.pre_header_rows == [["banner"], []]
    assert sheet.listings[0].price == 12.5


def test_first_matching_header_row_wins():
    grid = [["title", "price"], ["TITLE", "PRICE"], ["Chair", 5]]
    sheet = decode_grid(grid)
    assert sheet.header_row == ["title", "price"]
    # the second header-looking row is data
    assert [l.title for l in sheet.listings] == ["TITLE", "Chair"]


def test_missing_header_raises_malformed_template():
    grid = [["just", "some", "rows"]] * 25 + [["title", "price"], ["x", 1]]
    with pytest.raises(MalformedTemplate, match="no title/price header found in first 20 rows"):
        decode_grid(grid)


def test_header_only_title_is_not_enough():
    with pytest.raises(MalformedTemplate):
        decode_grid([["title", "cost"], ["Bike", 1]])


def test_empty_grid_is_malformed():
    with pytest.raises(MalformedTemplate):
        decode_grid([])


def test_blank_rows_are_skipped():
    grid = [
        ["TITLE", "PRICE", "SKU"],
        ["Desk", 40, "D1"],
        [],
        [None, None, "orphan"],
        ["   ", "", "ws"],
        [None, 0, "zero price still counts"],
    ]
    sheet = decode_grid(grid)
    assert [l.other_fields["SKU"] for l in sheet.listings] == ["D1", "zero price still counts"]


def test_defaults_for_absent_known_columns():
    sheet = decode_grid([["Title", "Price"], ["Sofa", "abc"]])
    sofa = sheet.listings[0]
    assert sofa.price == 0
    assert sofa.condition == "New"
    assert sofa.category == ""
    assert sofa.description == ""
    assert sofa.offer_shipping == "No"
    assert sofa.other_fields == {}


def test_empty_known_cells_fall_back_to_defaults():
    sheet = decode_grid([["TITLE", "PRICE", "CONDITION", "OFFER SHIPPING"], ["Sofa", 3, None, ""]])
    assert sheet.listings[0].condition == "New"
    assert sheet.listings[0].offer_shipping == "No"


def test_other_fields_keep_raw_values_and_header_case():
    grid = [
        ["TITLE", "PRICE", "Brand", "Notes", "In Stock", "Empty"],
        ["Guitar", 250, "Fender", "  spaced  ", True, None],
    ]
    other = decode_grid(grid).listings[0].other_fields
    assert other == {"Brand": "Fender", "Notes": "  spaced  ", "In Stock": True}


def test_duplicate_headers_first_occurrence_wins():
    grid = [
        ["TITLE", "PRICE", "title", "SKU", "SKU"],
        ["First", 1, "Second", "A", "B"],
    ]
    listing = decode_grid(grid).listings[0]
    assert listing.title == "First"
    assert listing.other_fields == {"SKU": "A"}


def test_duplicate_header_with_blank_first_cell_stays_empty():
    grid = [["TITLE", "PRICE", "SKU", "SKU"], ["Bike", 1, None, "B"]]
    assert decode_grid(grid).listings[0].other_fields == {}


def test_every_listing_gets_a_fresh_id():
    sheet = decode_grid([["title", "price"], ["a", 1], ["b", 2], ["c", 3]])
    ids = [l.id for l in sheet.listings]
    assert len(set(ids)) == 3


def test_short_rows_and_header_blank_columns():
    sheet = decode_grid([["TITLE", "PRICE", "", "Color"], ["Vase"]])
    vase = sheet.listings[0]
    assert vase.price == 0
    assert vase.other_fields == {}


@pytest.mark.parametrize("cell,expected", [
    (None, 0.0), ("", 0.0), (" 12 ", 12.0), ("12abc", 0.0), (True, 1.0),
    (7, 7.0), (float("nan"), 0.0), ("inf", 0.0),
])
def test_price_coercion(cell, expected):
    assert to_price(cell) == expected
