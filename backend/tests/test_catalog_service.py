import asyncio
import uuid
from decimal import Decimal

import pytest

from fakes import InMemoryCatalogRepository, make_batch, make_unit
from stockpoint.services.catalog_service import CatalogPage, CatalogService


def list_units(repo, shop_ids, **kwargs) -> CatalogPage:
    return asyncio.run(CatalogService.list_units(repo, shop_ids, **kwargs))


def list_batches(repo, shop_ids, **kwargs) -> CatalogPage:
    return asyncio.run(CatalogService.list_batches(repo, shop_ids, **kwargs))


def test_requested_shop_in_scope_limits_rows_to_that_shop(catalog, shop_a, shop_b):
    variant = catalog.add_variant()
    units = [make_unit(shop_a, variant) for _ in range(2)] + [make_unit(shop_b, variant) for _ in range(3)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    page = list_units(repo, [shop_a, shop_b], shop_id=shop_b)

    assert page.total == 3
    assert {item["shop_id"] for item in page.items} == {shop_b}


def test_requested_shop_out_of_scope_falls_back_to_all_authorized(catalog, shop_a, shop_b):
    variant = catalog.add_variant()
    foreign = uuid.uuid4()
    units = [make_unit(shop_a, variant), make_unit(shop_b, variant), make_unit(foreign, variant)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    page = list_units(repo, [shop_a, shop_b], shop_id=foreign)

    assert page.total == 2
    assert {item["shop_id"] for item in page.items} == {shop_a, shop_b}


def test_inactive_units_are_never_listed(catalog, shop_a):
    variant = catalog.add_variant()
    repo = InMemoryCatalogRepository(
        catalog, units=[make_unit(shop_a, variant), make_unit(shop_a, variant, is_active=False)],
    )
    assert list_units(repo, [shop_a]).total == 1


def test_page_and_count_receive_the_same_query(catalog, shop_a):
    variant = catalog.add_variant()
    repo = InMemoryCatalogRepository(catalog, units=[make_unit(shop_a, variant)])

    list_units(repo, [shop_a], search="galaxy", low_stock=True, offset=0, limit=10)

    (_, page_query, offset, limit), (_, count_query) = repo.calls
    assert page_query is count_query
    assert (offset, limit) == (0, 10)


def test_last_page_returns_remainder_and_full_total(catalog, shop_a):
    variant = catalog.add_variant()
    repo = InMemoryCatalogRepository(catalog, units=[make_unit(shop_a, variant) for _ in range(15)])

    page = list_units(repo, [shop_a], offset=10, limit=10)

    assert len(page.items) == 5
    assert page.total == 15


def test_total_matches_unpaginated_listing(catalog, shop_a, shop_b):
    v1 = catalog.add_variant(variant_name="iPhone 15 Blue", product_name="iPhone 15", brand_name="Apple")
    v2 = catalog.add_variant()
    units = [make_unit(shop_a, v1) for _ in range(7)] + [make_unit(shop_b, v2) for _ in range(4)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    first = list_units(repo, [shop_a, shop_b], search="apple", limit=3)
    everything = list_units(repo, [shop_a, shop_b], search="apple", offset=0, limit=first.total)

    assert first.total == 7
    assert len(everything.items) == first.total


def test_repeated_listing_is_idempotent(catalog, shop_a):
    variant = catalog.add_variant()
    repo = InMemoryCatalogRepository(catalog, units=[make_unit(shop_a, variant) for _ in range(4)])

    assert list_units(repo, [shop_a], limit=3) == list_units(repo, [shop_a], limit=3)


def test_items_are_ordered_most_recent_first(catalog, shop_a):
    variant = catalog.add_variant()
    older, newer = make_unit(shop_a, variant), make_unit(shop_a, variant)
    repo = InMemoryCatalogRepository(catalog, units=[older, newer])

    page = list_units(repo, [shop_a])

    assert [item["id"] for item in page.items] == [newer["id"], older["id"]]


def test_search_is_case_insensitive_substring(catalog, shop_a):
    variant = catalog.add_variant()
    hit = make_unit(shop_a, variant, barcode="ABC123")
    repo = InMemoryCatalogRepository(catalog, units=[hit, make_unit(shop_a, variant, barcode="XYZ999")])

    page = list_units(repo, [shop_a], search="abc")

    assert [item["id"] for item in page.items] == [hit["id"]]


@pytest.mark.parametrize("field", ["primary_imei", "secondary_imei", "serial_number"])
def test_search_matches_unit_device_ids(catalog, shop_a, field):
    variant = catalog.add_variant(variant_name="V", product_name="P", brand_name="B")
    hit = make_unit(shop_a, variant, **{field: "356938035643809"})
    repo = InMemoryCatalogRepository(catalog, units=[hit, make_unit(shop_a, variant)])

    page = list_units(repo, [shop_a], search="035643")

    assert page.total == 1
    assert page.items[0]["id"] == hit["id"]


def test_search_matches_product_and_brand_names(catalog, shop_a):
    pixel = catalog.add_variant(variant_name="Pixel 8 Obsidian", product_name="Pixel 8", brand_name="Google")
    galaxy = catalog.add_variant()
    repo = InMemoryCatalogRepository(catalog, units=[make_unit(shop_a, pixel), make_unit(shop_a, galaxy)])

    assert list_units(repo, [shop_a], search="GOOGLE").total == 1
    assert list_units(repo, [shop_a], search="pixel 8").total == 1


def test_search_tolerates_missing_dimensions(shop_a):
    repo = InMemoryCatalogRepository(units=[make_unit(shop_a, uuid.uuid4(), barcode="LOOSE-1")])

    assert list_units(repo, [shop_a], search="loose").total == 1
    assert list_units(repo, [shop_a], search="samsung").total == 0


def test_dangling_variant_is_listed_with_null_dimensions(shop_a):
    orphan = make_unit(shop_a, uuid.uuid4())
    repo = InMemoryCatalogRepository(units=[orphan])

    page = list_units(repo, [shop_a])

    assert page.total == 1
    item = page.items[0]
    assert item["id"] == orphan["id"]
    assert item["variant"] is None
    assert item["product"] is None
    assert item["brand"] is None
    assert item["category"] is None


def test_rows_carry_nested_dimensions(catalog, shop_a):
    variant = catalog.add_variant(variant_name="Galaxy S24 Gray", product_name="Galaxy S24", brand_name="Samsung",
                                  category_name="Smartphones")
    repo = InMemoryCatalogRepository(catalog, units=[make_unit(shop_a, variant)])

    item = list_units(repo, [shop_a]).items[0]

    assert item["variant"]["variant_name"] == "Galaxy S24 Gray"
    assert item["product"]["name"] == "Galaxy S24"
    assert item["brand"]["name"] == "Samsung"
    assert item["category"]["name"] == "Smartphones"


@pytest.mark.parametrize("units,threshold,expected", [(3, None, 3), (3, Decimal("5"), 3), (6, None, 0), (6, Decimal("5"), 0)])
def test_unit_low_stock_counts_units_per_variant(catalog, shop_a, units, threshold, expected):
    variant = catalog.add_variant()
    repo = InMemoryCatalogRepository(
        catalog, units=[make_unit(shop_a, variant, low_stock_threshold=threshold) for _ in range(units)],
    )
    assert list_units(repo, [shop_a], low_stock=True).total == expected


def test_unit_low_stock_uses_smallest_configured_threshold(catalog, shop_a):
    variant = catalog.add_variant()
    units = [make_unit(shop_a, variant, low_stock_threshold=Decimal("10")) for _ in range(2)]
    units += [make_unit(shop_a, variant, low_stock_threshold=Decimal("2")) for _ in range(1)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    # 3 available units, min threshold 2
    assert list_units(repo, [shop_a], low_stock=True).total == 0


def test_sold_units_do_not_count_toward_available_stock(catalog, shop_a):
    variant = catalog.add_variant()
    units = [make_unit(shop_a, variant) for _ in range(3)]
    units += [make_unit(shop_a, variant, is_sold=True, stock_status="sold") for _ in range(5)]
    units += [make_unit(shop_a, variant, stock_status="sold") for _ in range(2)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    page = list_units(repo, [shop_a], low_stock=True)

    # variant is low (3 available); every active row of that variant is listed
    assert page.total == 10


def test_low_stock_scenario_across_two_shops(catalog, shop_a, shop_b):
    v1 = catalog.add_variant(variant_name="V1")
    v2 = catalog.add_variant(variant_name="V2")
    units = [make_unit(shop_a, v1, low_stock_threshold=Decimal("5")) for _ in range(2)]
    units += [make_unit(shop_b, v2) for _ in range(10)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    page = list_units(repo, [shop_a], low_stock=True)

    assert page.total == 2
    assert {item["shop_id"] for item in page.items} == {shop_a}


def test_unit_low_stock_counts_only_within_scope(catalog, shop_a, shop_b):
    variant = catalog.add_variant()
    units = [make_unit(shop_a, variant) for _ in range(3)] + [make_unit(shop_b, variant) for _ in range(4)]
    repo = InMemoryCatalogRepository(catalog, units=units)

    assert list_units(repo, [shop_a, shop_b], shop_id=shop_a, low_stock=True).total == 3
    assert list_units(repo, [shop_a, shop_b], low_stock=True).total == 0


def test_unit_filters_combine_with_and(catalog, shop_a):
    variant = catalog.add_variant()
    used = make_unit(shop_a, variant, condition="used", barcode="U-1")
    repo = InMemoryCatalogRepository(
        catalog, units=[used, make_unit(shop_a, variant, barcode="U-2"), make_unit(shop_a, variant, condition="used")],
    )

    page = list_units(repo, [shop_a], condition="used", search="u-")

    assert [item["id"] for item in page.items] == [used["id"]]


def test_no_matches_gives_empty_page(shop_a):
    page = list_units(InMemoryCatalogRepository(), [shop_a], search="nothing")
    assert page.items == []
    assert page.total == 0


@pytest.mark.parametrize("quantity,expected", [(5, 1), (6, 0), (0, 1)])
def test_batch_low_stock_is_row_level(catalog, shop_a, quantity, expected):
    variant = catalog.add_variant(variant_name="USB-C Cable 1m", product_name="USB-C Cable")
    repo = InMemoryCatalogRepository(
        catalog, batches=[make_batch(shop_a, variant, quantity=quantity, low_stock_threshold=5)],
    )
    assert list_batches(repo, [shop_a], low_stock=True).total == expected


def test_batch_listing_scopes_and_searches(catalog, shop_a, shop_b):
    cable = catalog.add_variant(variant_name="USB-C Cable 1m", product_name="USB-C Cable", brand_name="Anker")
    case = catalog.add_variant(variant_name="Clear Case", product_name="Phone Case", brand_name="Spigen")
    batches = [
        make_batch(shop_a, cable),
        make_batch(shop_a, case),
        make_batch(shop_b, cable),
        make_batch(shop_a, cable, is_active=False),
    ]
    repo = InMemoryCatalogRepository(catalog, batches=batches)

    page = list_batches(repo, [shop_a], shop_id=shop_b, search="anker")

    assert page.total == 1
    assert page.items[0]["shop_id"] == shop_a
    assert page.items[0]["quantity"] == 10


def test_repository_errors_propagate(shop_a):
    class BrokenRepository:
        async def fetch_page(self, query, offset, limit):
            raise ConnectionError("db down")

        async def count(self, query):
            raise AssertionError("not reached")

    with pytest.raises(ConnectionError):
        list_units(BrokenRepository(), [shop_a])
