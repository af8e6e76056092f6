from __future__ import annotations

import pytest
from sqlalchemy import func, select

from common.db.models import Design, ProductDesignPosition, VendorProduct
from personalization.errors import Forbidden, NotFound
from personalization.catalog import CatalogLookup
from personalization.placements import PlacementStore
from personalization.placements.transforms import resolve_design

from conftest import DESIGN_URL, VENDOR_A, VENDOR_B


@pytest.fixture
def store(seeded) -> PlacementStore:
    return PlacementStore(seeded)


def _row_count(session) -> int:
    return session.scalar(select(func.count()).select_from(ProductDesignPosition))


def test_upsert_normalizes_and_persists(store):
    placement = store.upsert(VENDOR_A, 8, 1, {"x": 12, "designWidth": 240})

    assert placement.position.x == 12
    assert placement.position.rendered_width == 240
    assert placement.position.rendered_height == 100

    stored = store.get(8, 1)
    assert stored.position.to_json() == placement.position.to_json()


def test_upsert_is_idempotent(store, seeded):
    positioning = {"x": 10, "y": 20, "scale": 0.8, "rotation": 15}
    first = store.upsert(VENDOR_A, 8, 1, positioning)
    second = store.upsert(VENDOR_A, 8, 1, positioning)

    assert first.position == second.position
    assert store.get(8, 1).position == first.position
    assert _row_count(seeded) == 1


def test_upsert_replaces_previous_placement(store, seeded):
    store.upsert(VENDOR_A, 8, 1, {"x": 10, "constraints": {"snap": True}})
    store.upsert(VENDOR_A, 8, 1, {"x": 30})

    stored = store.get(8, 1)
    assert stored.position.x == 30
    assert stored.position.constraints == {}
    assert _row_count(seeded) == 1


def test_upsert_on_other_vendors_product_is_forbidden(store, seeded):
    with pytest.raises(Forbidden):
        store.upsert(VENDOR_B, 8, 1, {"x": 1})
    assert _row_count(seeded) == 0


def test_upsert_missing_product_or_design_is_not_found(store):
    with pytest.raises(NotFound):
        store.upsert(VENDOR_A, 404, 1, {})
    with pytest.raises(NotFound):
        store.upsert(VENDOR_A, 8, 404, {})


def test_private_design_of_another_vendor_is_forbidden(store):
    with pytest.raises(Forbidden):
        store.upsert(VENDOR_A, 8, 2, {})


def test_published_design_of_another_vendor_is_allowed(store):
    placement = store.upsert(VENDOR_A, 8, 3, {"x": 5})
    assert placement.design_id == 3


def test_get_missing_placement_raises_not_found(store):
    with pytest.raises(NotFound):
        store.get(8, 1)


def test_get_for_owner_checks_ownership(store):
    store.upsert(VENDOR_A, 8, 1, {"x": 5})
    assert store.get_for_owner(VENDOR_A, 8, 1).position.x == 5
    with pytest.raises(Forbidden):
        store.get_for_owner(VENDOR_B, 8, 1)


def test_delete_is_idempotent_and_ownership_checked(store, seeded):
    store.upsert(VENDOR_A, 8, 1, {"x": 5})

    with pytest.raises(Forbidden):
        store.delete(VENDOR_B, 8, 1)
    assert _row_count(seeded) == 1

    store.delete(VENDOR_A, 8, 1)
    store.delete(VENDOR_A, 8, 1)
    assert _row_count(seeded) == 0


def test_list_for_product(store):
    store.upsert(VENDOR_A, 8, 3, {"x": 3})
    store.upsert(VENDOR_A, 8, 1, {"x": 1})

    placements = store.list_for_product(8)
    assert [p.design_id for p in placements] == [1, 3]
    assert store.list_for_product(7) == []
    assert store.count_for_product(8) == 2


def test_deleting_product_or_design_cascades_to_placements(store, seeded):
    store.upsert(VENDOR_A, 8, 1, {"x": 1})
    store.upsert(VENDOR_A, 8, 3, {"x": 3})
    store.upsert(VENDOR_A, 7, 3, {"x": 7})

    seeded.delete(seeded.get(Design, 3))
    seeded.commit()
    assert _row_count(seeded) == 1

    seeded.delete(seeded.get(VendorProduct, 8))
    seeded.commit()
    assert _row_count(seeded) == 0
    # Parents are never removed by placement deletion
    assert seeded.get(Design, 1) is not None


class TestTransformDerivation:
    def test_resolves_design_by_id(self, store):
        placement = store.derive_from_transform_event(
            VENDOR_A, 8, 1, {"positioning": {"x": 11, "y": 22, "scale": 0.5}}
        )
        assert placement is not None
        assert store.get(8, 1).position.scale == 0.5

    def test_resolves_design_by_url(self, store):
        placement = store.derive_from_transform_event(
            VENDOR_A, 8, DESIGN_URL, {"position": {"x": 1, "y": 2}}
        )
        assert placement.design_id == 1

    def test_resolves_design_by_storage_id(self, store):
        resized_url = "https://cdn.example.com/podmarket/w_400/abc123.webp"
        placement = store.derive_from_transform_event(
            VENDOR_A, 8, resized_url, {"0": {"x": 1, "y": 2}}
        )
        assert placement.design_id == 1

    def test_unknown_design_is_dropped(self, store, seeded):
        result = store.derive_from_transform_event(
            VENDOR_A, 8, "https://elsewhere.example.com/missing.png", {"positioning": {"x": 1, "y": 2}}
        )
        assert result is None
        assert _row_count(seeded) == 0

    def test_missing_positioning_is_dropped(self, store, seeded):
        assert store.derive_from_transform_event(VENDOR_A, 8, 1, {"filters": ["sepia"]}) is None
        assert _row_count(seeded) == 0

    def test_permission_failure_is_dropped_not_raised(self, store, seeded):
        result = store.derive_from_transform_event(VENDOR_B, 8, 1, {"positioning": {"x": 1, "y": 2}})
        assert result is None
        assert _row_count(seeded) == 0


SHARED_URL = "https://cdn.example.com/podmarket/designs/shared.png"
OUTSIDER = 30


class TestDesignResolutionOrder:
    @pytest.fixture
    def catalog(self, seeded) -> CatalogLookup:
        # Design 3 (vendor B, published) and design 5 (vendor A) share one URL.
        shared = seeded.get(Design, 3)
        shared.image_url = SHARED_URL
        seeded.add_all(
            [
                Design(id=5, vendor_id=VENDOR_A, name="Copy", image_url=SHARED_URL),
                Design(id=6, vendor_id=VENDOR_B, name="Numbered", storage_public_id="777"),
            ]
        )
        seeded.commit()
        return CatalogLookup(seeded)

    def test_vendor_scoped_url_wins(self, catalog):
        assert resolve_design(catalog, VENDOR_A, SHARED_URL).id == 5
        assert resolve_design(catalog, VENDOR_B, SHARED_URL).id == 3

    def test_unscoped_url_when_caller_owns_no_match(self, catalog):
        assert resolve_design(catalog, OUTSIDER, SHARED_URL).id == 3

    def test_unknown_integer_id_falls_through_to_storage_id(self, catalog):
        assert resolve_design(catalog, VENDOR_A, 777).id == 6

    def test_existing_id_wins_over_url_lookups(self, catalog):
        assert resolve_design(catalog, VENDOR_A, 3).id == 3

    def test_transform_saves_published_design_found_outside_scope(self, catalog, seeded):
        store = PlacementStore(seeded, catalog=catalog)
        seeded.get(Design, 5).image_url = "https://cdn.example.com/podmarket/designs/other.png"
        seeded.commit()

        placement = store.derive_from_transform_event(
            VENDOR_A, 8, SHARED_URL, {"positioning": {"x": 4, "y": 5}}
        )

        assert placement.design_id == 3


class TestProductSuggestion:
    def test_classifies_base_product_name(self, store):
        suggestion = store.suggest_for_product(VENDOR_A, 7)

        assert suggestion["productType"] == "TSHIRT"
        assert suggestion["source"] == "classifier"
        assert suggestion["savedPosition"] is None
        assert suggestion["presets"]["center"] == suggestion["defaultPosition"]

    def test_saved_placement_is_preferred(self, store):
        store.upsert(VENDOR_A, 8, 1, {"x": 42, "y": 7})

        suggestion = store.suggest_for_product(VENDOR_A, 8, design_id=1)

        assert suggestion["productType"] == "MUG"
        assert suggestion["source"] == "saved"
        assert (suggestion["savedPosition"]["x"], suggestion["savedPosition"]["y"]) == (42, 7)

    def test_design_without_placement_falls_back(self, store):
        assert store.suggest_for_product(VENDOR_A, 8, design_id=1)["source"] == "classifier"

    def test_product_without_base_is_default(self, store, seeded):
        seeded.get(VendorProduct, 7).base_product_id = None
        seeded.commit()
        assert store.suggest_for_product(VENDOR_A, 7)["productType"] == "DEFAULT"

    def test_other_vendor_is_forbidden(self, store):
        with pytest.raises(Forbidden):
            store.suggest_for_product(VENDOR_B, 7)

    def test_missing_product_is_not_found(self, store):
        with pytest.raises(NotFound):
            store.suggest_for_product(VENDOR_A, 404)
