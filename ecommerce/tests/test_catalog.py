# ecommerce/tests/test_catalog.py
from django.test import SimpleTestCase

from ecommerce import catalog

TREE = [
    {"id": 1, "name": "Footwear", "subcategories": [
        {"id": 2, "name": "Running Shoes", "subcategories": []},
        {"id": 3, "name": "Sandals"},
    ]},
    {"id": 4, "name": "Hats"},
]


class CategoryTreeTests(SimpleTestCase):
    def test_collapsed_tree_shows_top_level_only(self):
        rows = catalog.flatten_categories(TREE, set())
        self.assertEqual([r["category"]["id"] for r in rows], [1, 4])
        self.assertTrue(rows[0]["has_children"])
        self.assertFalse(rows[1]["has_children"])

    def test_expanded_branch_is_listed_depth_first(self):
        rows = catalog.flatten_categories(TREE, {1})
        self.assertEqual([(r["category"]["id"], r["depth"]) for r in rows], [(1, 0), (2, 1), (3, 1), (4, 0)])
        self.assertTrue(rows[0]["expanded"])

    def test_filter_keeps_parents_of_matching_children_and_opens_them(self):
        rows = catalog.filter_categories(TREE, "  running ", set())
        self.assertEqual([r["category"]["id"] for r in rows], [1, 2, 3])

    def test_blank_filter_falls_back_to_plain_tree(self):
        self.assertEqual(len(catalog.filter_categories(TREE, "", set())), 2)

    def test_parse_and_toggle_expanded(self):
        self.assertEqual(catalog.parse_expanded("1, 4,x,,9"), {1, 4, 9})
        self.assertEqual(catalog.toggle_expanded("1,4", 4), "1")
        self.assertEqual(catalog.toggle_expanded("", 4), "4")

    def test_find_category_searches_subcategories(self):
        self.assertEqual(catalog.find_category(TREE, 3)["name"], "Sandals")
        self.assertIsNone(catalog.find_category(TREE, 99))


class CategorySlugTests(SimpleTestCase):
    def test_slug_and_back(self):
        slug = catalog.category_slug({"id": 2, "name": "Running Shoes"})
        self.assertEqual(slug, "running-shoes-2")
        self.assertEqual(catalog.category_id_from_slug(slug), 2)
        self.assertEqual(catalog.category_id_from_slug("12"), 12)
        self.assertIsNone(catalog.category_id_from_slug("shoes"))

    def test_with_slugs_does_not_mutate_input(self):
        tree = catalog.with_slugs(TREE)
        self.assertEqual(tree[0]["subcategories"][0]["slug"], "running-shoes-2")
        self.assertNotIn("slug", TREE[0])


class ProductListTests(SimpleTestCase):
    products = [
        {"id": 1, "discountedPrice": "500", "avg_rating": 3},
        {"id": 2, "discountedPrice": "150.5", "avg_rating": 5},
        {"id": 3, "discountedPrice": "900", "rating": 4},
    ]

    def ids(self, products):
        return [p["id"] for p in products]

    def test_sort_options(self):
        self.assertEqual(self.ids(catalog.sort_products(self.products, catalog.SORT_PRICE_LOW)), [2, 1, 3])
        self.assertEqual(self.ids(catalog.sort_products(self.products, catalog.SORT_PRICE_HIGH)), [3, 1, 2])
        self.assertEqual(self.ids(catalog.sort_products(self.products, catalog.SORT_RATING)), [2, 3, 1])
        self.assertEqual(self.ids(catalog.sort_products(self.products, "unknown")), [1, 2, 3])

    def test_paginate_clamps_bad_pages(self):
        items = list(range(25))
        self.assertEqual(list(catalog.paginate(items, "2", 12).object_list), list(range(12, 24)))
        self.assertEqual(catalog.paginate(items, "99", 12).number, 3)
        self.assertEqual(catalog.paginate(items, "abc", 12).number, 1)

    def test_page_count(self):
        self.assertEqual(catalog.page_count(21, 10), 3)
        self.assertEqual(catalog.page_count(0, 10), 0)
