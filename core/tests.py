# core/tests.py
from unittest import mock

from django.test import TestCase
from django.urls import reverse

from ecommerce.actions import ActionResponse

SIDEBAR_AD = {"id": 1, "title": "Monsoon Sale", "link": "https://shop.example/sale", "image": "/m/sale.png",
              "position": "sidebar"}
FOOTER_AD = {"id": 2, "title": "Trekking Gear", "link": "https://shop.example/trek", "image": "/m/trek.png",
             "position": "footer"}
MIDDLE_AD = {"id": 3, "title": "New Phones", "link": "https://shop.example/phones", "image": "/m/phones.png",
             "position": "homepage_middle"}


def ads_for(request, position):
    return ActionResponse(data={"sidebar": [SIDEBAR_AD], "footer": [FOOTER_AD]}.get(position, []), status=200)


class BaseSetup(TestCase):
    def setUp(self):
        patcher = mock.patch("ecommerce.middleware.cached_user", return_value=None)
        patcher.start()
        self.addCleanup(patcher.stop)

    def patch(self, target, **kwargs):
        patcher = mock.patch(f"ecommerce.actions.{target}", **kwargs)
        mocked = patcher.start()
        self.addCleanup(patcher.stop)
        return mocked


class HomeViewTests(BaseSetup):
    def setUp(self):
        super().setUp()
        self.patch("categories.get_active_categories",
                   return_value=ActionResponse(data=[{"id": 4, "name": "Shoes", "subcategories": []}], status=200))
        self.patch("products.get_active_products", return_value=ActionResponse(data=[], status=200))
        self.patch("advertisements.get_active_ads", return_value=ActionResponse(data=[MIDDLE_AD], status=200))
        self.by_position = self.patch("advertisements.get_ads_by_position", side_effect=ads_for)

    def test_sidebar_and_footer_ads_are_loaded_by_position(self):
        resp = self.client.get(reverse("core:home"))

        self.assertEqual(resp.status_code, 200)
        positions = [c.args[1] for c in self.by_position.call_args_list]
        self.assertEqual(sorted(positions), ["footer", "sidebar"])
        self.assertEqual(resp.context["ads_sidebar"], [SIDEBAR_AD])
        self.assertEqual(resp.context["ads_footer"], [FOOTER_AD])
        self.assertContains(resp, "https://shop.example/sale")
        self.assertContains(resp, "Trekking Gear")
        self.assertContains(resp, "Sponsored")

    def test_active_ads_are_split_by_position(self):
        resp = self.client.get(reverse("core:home"))
        self.assertEqual(resp.context["ads_middle"], [MIDDLE_AD])
        self.assertEqual(resp.context["ads_bottom"], [])

    def test_failed_ad_fetch_leaves_the_page_up(self):
        self.by_position.side_effect = None
        self.by_position.return_value = ActionResponse(error="An error occurred", status=500)

        resp = self.client.get(reverse("core:home"))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context["ads_footer"], [])
        self.assertNotContains(resp, "Sponsored")


class FAQViewTests(BaseSetup):
    def test_lists_faqs(self):
        self.patch("faqs.get_all_faqs", return_value=ActionResponse(
            data=[{"id": 1, "question": "Shipping?", "answer": "3 days."}], status=200))
        resp = self.client.get(reverse("core:faq"))
        self.assertContains(resp, "Shipping?")
