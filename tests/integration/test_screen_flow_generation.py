"""
End-to-end tests: notation in, diagram out.

These run the full pipeline (parse, validate, layout, build) on realistic
documents, including half-written ones.
"""

import asyncio

import pytest

from screenflow import (
    Component,
    ComponentKind,
    FlowHost,
    RequirementCategory,
    ScreenFlowGenerator,
    TextDiagramBuilder,
    Transition,
    parse_screens,
    render_graph,
    validate_graph,
)

SHOP_FLOW = """
[Catalog]
// P: first page under 1s
T Featured products
O Banner
E Search
--
A View item => Product
=> Cart

[Product]
T Title
T Price
B Add to wishlist
--
A Add to cart => Cart
A Back => Catalog

[Cart]
// S: prices verified server-side
T Line items
={empty}=> Catalog
A Checkout => Payment

[Payment]
// S: PCI DSS
// A: 99.95%
E Card number
E Expiry
A Pay => Receipt
={declined}=> Payment
"""


class TestShopFlow:
    """A four screen shop with one dangling target (Receipt)."""

    @pytest.fixture
    def graph(self):
        return parse_screens(SHOP_FLOW)

    def test_screens(self, graph):
        assert graph.names() == ["Catalog", "Product", "Cart", "Payment"]

    def test_catalog_screen(self, graph):
        catalog = graph[0]
        assert catalog.components == (
            Component(ComponentKind.TEXT, "Featured products"),
            Component(ComponentKind.OTHER, "Banner"),
            Component(ComponentKind.FIELD, "Search"),
            Component(ComponentKind.ACTION, "View item"),
        )
        assert catalog.transitions == (
            Transition(target="Product", source_label="View item"),
            Transition(target="Cart"),
        )
        assert catalog.requirements[RequirementCategory.PERFORMANCE] == (
            "first page under 1s"
        )

    def test_payment_requirements(self, graph):
        payment = graph.resolve("Payment")
        assert dict(payment.requirements) == {
            RequirementCategory.SECURITY: "PCI DSS",
            RequirementCategory.AVAILABILITY: "99.95%",
        }

    def test_validation(self, graph):
        report = validate_graph(graph)
        assert report.duplicate_names == {}
        assert [t.target for _, t in report.unresolved] == ["Receipt"]
        assert report.unreachable == []

    def test_render_text(self, graph):
        summary = asyncio.run(render_graph(graph, TextDiagramBuilder()))
        assert summary.placed == 4
        # 8 transitions, Receipt is undefined
        assert summary.connected == 7
        assert [t.target for _, t in summary.skipped] == ["Receipt"]
        output = summary.artifact
        for name in ("[Catalog]", "[Product]", "[Cart]", "[Payment]"):
            assert name in output
        assert "[Cart] ──empty──► [Catalog]" in output
        assert "[Payment] ──declined──► [Payment]" in output

    def test_render_is_deterministic(self):
        gen = ScreenFlowGenerator()
        assert gen.generate(SHOP_FLOW) == gen.generate(SHOP_FLOW)


class TestWorkInProgressDocuments:
    """Half-written documents still render what is well formed."""

    def test_typos_and_prose(self):
        text = """
        Notes from the design review, to be cleaned up
        [Login]
        E Email
        E Pasword
        A Sign in =>
        A Sign in => Home
        ={ => Broken
        // Q: unknown category
        [Home
        [Home]
        T Welcome
        """
        graph = parse_screens(text)
        assert graph.names() == ["Login", "Home"]
        assert graph[0].transitions == (
            Transition(target="Home", source_label="Sign in"),
        )
        assert [c.name for c in graph[0].components] == ["Email", "Pasword", "Sign in"]
        output = ScreenFlowGenerator().generate(text)
        assert "[Login] ──Sign in──► [Home]" in output

    def test_host_round_trip(self):
        notifications = []
        host = FlowHost(TextDiagramBuilder, notifications.append)
        summary = asyncio.run(
            host.handle({"command": "generate", "text": SHOP_FLOW})
        )
        assert summary.connected == 7
        assert notifications[0].message == "Screen flow generated successfully!"
