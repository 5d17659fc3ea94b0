"""Tests for core/store.py commands and the InventoryStore owner."""

import pytest

from core import store as commands
from core.errors import CategoryNotFoundError, ItemNotFoundError, ValidationError
from core.models import ItemDraft, SlotPosition
from core.query import QueryCriteria
from core.store import InventoryStore


def item(state, item_id):
    return next(i for i in state.items if i.id == item_id)


class TestUpsertItem:
    def test_create_normalizes_fields(self, state, new_id):
        draft = ItemDraft(
            name="  Torx T20  ",
            category_id="c1",
            quantity="3",
            location=" Tray 2 ",
            tags=" torx, driver ,, t20 ,driver",
            notes=" spare ",
            favorite=True,
        )
        new_state, created = commands.upsert_item(state, draft, new_id)
        assert created.id == "id1"
        assert created.name == "Torx T20"
        assert created.quantity == 3
        assert created.location == "Tray 2"
        assert created.tags == ["torx", "driver", "t20", "driver"]
        assert created.notes == "spare"
        assert created.favorite is True
        assert created.pos is None
        assert new_state.items[-1] == created
        assert len(state.items) == 3

    def test_quantity_defaults_to_one_and_is_non_negative(self, state, new_id):
        _, a = commands.upsert_item(state, ItemDraft(name="a", category_id="c1"), new_id)
        _, b = commands.upsert_item(state, ItemDraft(name="b", category_id="c1", quantity=-4), new_id)
        _, c = commands.upsert_item(state, ItemDraft(name="c", category_id="c1", quantity=2.7), new_id)
        assert (a.quantity, b.quantity, c.quantity) == (1, 0, 2)

    def test_non_numeric_quantity(self, state, new_id):
        with pytest.raises(ValidationError):
            commands.upsert_item(state, ItemDraft(name="a", category_id="c1", quantity="lots"), new_id)

    @pytest.mark.parametrize("draft", [
        ItemDraft(name="", category_id="c1"),
        ItemDraft(name="   ", category_id="c1"),
        ItemDraft(category_id="c1"),
        ItemDraft(name="Hammer"),
        ItemDraft(name="Hammer", category_id=""),
    ])
    def test_create_requires_name_and_category(self, state, new_id, draft):
        with pytest.raises(ValidationError):
            commands.upsert_item(state, draft, new_id)

    def test_unknown_category_rejected(self, state, new_id):
        with pytest.raises(ValidationError):
            commands.upsert_item(state, ItemDraft(name="Hammer", category_id="c9"), new_id)

    def test_update_keeps_id_and_placement(self, state, new_id):
        new_state, updated = commands.upsert_item(state, ItemDraft(id="x", name="Phillips #1", category_id="c2"), new_id)
        assert updated.id == "x"
        assert updated.category_id == "c2"
        assert updated.pos == SlotPosition(drawer_id="d2", r=1, c=2)
        assert [i.id for i in new_state.items] == ["x", "y", "z"]

    def test_update_may_leave_item_uncategorized(self, state, new_id):
        _, updated = commands.upsert_item(state, ItemDraft(id="x", name="Phillips #2", category_id=""), new_id)
        assert updated.category_id is None

    def test_update_with_unknown_id_creates(self, state, new_id):
        new_state, created = commands.upsert_item(state, ItemDraft(id="ghost", name="Awl", category_id="c1"), new_id)
        assert created.id == "id1"
        assert len(new_state.items) == 4

    def test_draft_position_evicts_occupant(self, state, new_id):
        slot = SlotPosition(drawer_id="d2", r=1, c=2)
        new_state, created = commands.upsert_item(state, ItemDraft(name="Awl", category_id="c1", pos=slot), new_id)
        assert created.pos == slot
        assert item(new_state, "x").pos is None

    def test_invalid_draft_position_leaves_state_unchanged(self, state, new_id):
        with pytest.raises(ValidationError):
            commands.upsert_item(state, ItemDraft(id="y", name="Flathead", category_id="c1",
                                                  pos=SlotPosition(drawer_id="d1", r=4, c=4)), new_id)
        assert item(state, "y").name == "Flathead 5mm"


class TestCategories:
    def test_add_category_orders_after_last(self, state, new_id):
        new_state, category = commands.add_category(state, " Pliers ", new_id)
        assert category.name == "Pliers"
        assert category.order == 3
        assert new_state.categories[-1] == category

    def test_add_first_category(self, new_id):
        from core.models import InventoryState

        _, category = commands.add_category(InventoryState(), "Pliers", new_id)
        assert category.order == 1

    def test_add_category_requires_name(self, state, new_id):
        with pytest.raises(ValidationError):
            commands.add_category(state, "  ", new_id)

    def test_rename(self, state):
        new_state = commands.rename_category(state, "c2", "Sockets 1/2")
        assert [c.name for c in new_state.categories] == ["Drivers", "Sockets 1/2"]

    def test_rename_unknown(self, state):
        with pytest.raises(CategoryNotFoundError):
            commands.rename_category(state, "c9", "x")

    def test_delete_orphans_items(self, state):
        new_state = commands.delete_category(state, "c1")
        assert [c.id for c in new_state.categories] == ["c2"]
        assert len(new_state.items) == 3
        assert not any(i.category_id == "c1" for i in new_state.items)
        assert item(new_state, "x").category_id is None
        assert item(new_state, "y").category_id is None
        assert item(new_state, "z").category_id == "c2"
        # placement survives
        assert item(new_state, "x").pos == SlotPosition(drawer_id="d2", r=1, c=2)

    def test_ordered_categories_ignores_list_order(self, state, new_id):
        from core.models import Category

        state = state.model_copy(update={"categories": [Category(id="b", name="B", order=5),
                                                        Category(id="a", name="A", order=1),
                                                        Category(id="c", name="C", order=5)]})
        assert [c.id for c in commands.ordered_categories(state)] == ["a", "b", "c"]


class TestItems:
    def test_set_item_category_keeps_position(self, state):
        new_state = commands.set_item_category(state, "x", "c2")
        assert item(new_state, "x").category_id == "c2"
        assert item(new_state, "x").pos == item(state, "x").pos

    def test_set_item_category_errors(self, state):
        with pytest.raises(ItemNotFoundError):
            commands.set_item_category(state, "nope", "c2")
        with pytest.raises(CategoryNotFoundError):
            commands.set_item_category(state, "x", "c9")

    def test_delete_item_frees_slot(self, state):
        from core import layout

        new_state = commands.delete_item(state, "x")
        assert [i.id for i in new_state.items] == ["y", "z"]
        assert layout.item_at(new_state, "d2", 1, 2) is None

    def test_all_tags(self, state):
        assert commands.all_tags(state) == ["driver", "flat", "phillips", "socket"]

    @pytest.mark.parametrize("raw, expected", [
        (None, []),
        ("", []),
        ("a, b,,c ", ["a", "b", "c"]),
        ([" a ", "", "a"], ["a", "a"]),
    ])
    def test_split_tags(self, raw, expected):
        assert commands.split_tags(raw) == expected


class TestInventoryStore:
    def test_commands_thread_state(self, state, new_id):
        store = InventoryStore(state, new_id=new_id)
        created = store.upsert_item(ItemDraft(name="Awl", category_id="c1"))
        store.request_placement(created.id, "d1", 0, 0)
        store.set_item_category("y", "c2")
        store.delete_category("c1")

        assert store.get_item(created.id).pos == SlotPosition(drawer_id="d1", r=0, c=0)
        assert store.get_item(created.id).category_id is None
        assert [i.name for i in store.query(QueryCriteria(category_id="c2"))] == ["10mm Socket", "Flathead 5mm"]
        # the initial value is never mutated
        assert len(state.items) == 3

    def test_commit_stamps_updated_at(self, state):
        store = InventoryStore(state)
        store.rename_category("c1", "Screwdrivers")
        assert store.state.updated_at >= state.updated_at
        assert store.state is not state

    def test_failed_command_keeps_state(self, state):
        store = InventoryStore(state)
        with pytest.raises(ValidationError):
            store.upsert_item(ItemDraft(name="", category_id="c1"))
        assert store.state is state

    def test_noop_placement_keeps_state(self, state):
        store = InventoryStore(state)
        store.place_item("x", SlotPosition(drawer_id="d2", r=1, c=2))
        assert store.state is state

    def test_replace_drawers_reports_cleared(self, state):
        store = InventoryStore(state)
        adjustment = store.replace_drawers([state.drawers[0]])
        assert adjustment.cleared == ("x",)
        assert store.get_item("x").pos is None

    def test_add_drawer(self, state, new_id):
        store = InventoryStore(state, new_id=new_id)
        drawer = store.add_drawer()
        assert [d.id for d in store.state.drawers] == ["d1", "d2", "id1"]
        assert drawer.name == "Drawer 3"
