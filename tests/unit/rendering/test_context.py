import pytest

from viewkit.components import Navigation, NavigationLink, Page, PartialView, View
from viewkit.rendering import PageContextBuilder, PartialContextBuilder, ViewContextBuilder


@pytest.fixture
def navigation():
    return Navigation(links=(NavigationLink(label="Home", url="/"),))


def test_view_context_uses_own_data_and_partials():
    sidebar = PartialView(template_id="partial/sidebar")
    view = View(template_id="home", data={"a": 1}, partials={"sidebar": sidebar})

    context = ViewContextBuilder().build(view)

    assert context.data == {"a": 1}
    assert dict(context.partials) == {"sidebar": sidebar}


def test_partial_context_exposes_partial_and_links(navigation):
    context = PartialContextBuilder().build(navigation)

    assert context.data["partial"] is navigation
    assert context.data["links"] == list(navigation.links)


def test_page_context_binds_page_partials(navigation):
    view_partial = PartialView(template_id="partial/view-only")
    page_partial = PartialView(template_id="partial/page-only")
    page = Page(
        view=View(template_id="home", partials={"view_only": view_partial}),
        navigation=navigation,
        partials={"sidebar": page_partial},
    )

    context = PageContextBuilder().build(page)

    assert set(context.partials) == {"navigation", "sidebar"}
    assert context.partials["navigation"] is navigation
    assert context.data["page"] is page


def test_explicit_page_partial_overrides_navigation(navigation):
    replacement = PartialView(template_id="partial/menu")
    page = Page(
        view=View(template_id="home"),
        navigation=navigation,
        partials={"navigation": replacement},
    )

    assert PageContextBuilder().build(page).partials["navigation"] is replacement


def test_page_context_builder_rejects_other_renderables():
    with pytest.raises(TypeError):
        PageContextBuilder().build(View(template_id="home"))
