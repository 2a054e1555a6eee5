from django.views.generic import TemplateView

from ecommerce import catalog
from ecommerce.actions import advertisements as ad_actions
from ecommerce.actions import categories as category_actions
from ecommerce.actions import faqs as faq_actions
from ecommerce.actions import products as product_actions

HOME_PRODUCT_COUNT = 8


def _list(res) -> list:
    data = res.data if res.ok else None
    if isinstance(data, dict):
        data = data.get("data") or data.get("results")
    return data if isinstance(data, list) else []


class HomeView(TemplateView):
    """Landing page: categories, the newest products, the active ads plus the
    sidebar banner and the sponsored footer ads."""
    template_name = "core/home.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        request = self.request
        ads = _list(ad_actions.get_active_ads(request))
        ctx["categories"] = catalog.with_slugs(_list(category_actions.get_active_categories(request)))
        ctx["products"] = _list(product_actions.get_active_products(request))[:HOME_PRODUCT_COUNT]
        ctx["ads_middle"] = [a for a in ads if a.get("position") == "homepage_middle"]
        ctx["ads_bottom"] = [a for a in ads if a.get("position") == "homepage_bottom"]
        ctx["ads_navbar"] = [a for a in ads if a.get("position") == "above_navbar"]
        ctx["ads_sidebar"] = _list(ad_actions.get_ads_by_position(request, "sidebar"))
        ctx["ads_footer"] = _list(ad_actions.get_ads_by_position(request, "footer"))
        return ctx


class FAQView(TemplateView):
    template_name = "core/faq.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["faqs"] = _list(faq_actions.get_all_faqs(self.request))
        return ctx


class AboutView(TemplateView):
    template_name = "core/about.html"


class ContactView(TemplateView):
    template_name = "core/contact.html"


class PrivacyView(TemplateView):
    template_name = "core/privacy.html"
