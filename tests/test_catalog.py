from storefront.catalog import CATEGORIES, InMemoryCatalog


def names(products):
    return [p.name for p in products]


def test_all_products_in_order():
    catalog = InMemoryCatalog()
    assert [p.id for p in catalog.list_products()] == [1, 2, 3, 4, 5, 6]
    assert catalog.list_products(category="all") == catalog.list_products()


def test_category_filter():
    catalog = InMemoryCatalog()
    assert names(catalog.list_products(category="gloves")) == ["Thermal Gloves"]
    assert catalog.list_products(category="boots") == []


def test_search_is_case_insensitive_on_name():
    catalog = InMemoryCatalog()
    assert names(catalog.list_products(search="HEATED")) == ["Heated Jacket Pro", "Heated Vest", "Heated Hoodie"]
    # descriptions are not searched
    assert catalog.list_products(search="battery") == []


def test_filters_combine():
    catalog = InMemoryCatalog()
    assert names(catalog.list_products(category="vests", search="heated")) == ["Heated Vest"]
    assert catalog.list_products(category="socks", search="heated") == []


def test_lookup_and_featured():
    catalog = InMemoryCatalog()
    assert catalog.get_product(2).name == "Thermal Gloves"
    assert catalog.get_product(999) is None
    assert [p.id for p in catalog.featured()] == [1, 2, 3]
    assert catalog.categories() == CATEGORIES
