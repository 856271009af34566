"""Tests for the relationship resolver and the family tree expander."""

from datetime import date

import pytest

from family_tree.db.mongo import PERSONS, RELATIONSHIPS
from family_tree.services import tree_service
from family_tree.services.relationship_service import create_relationship
from family_tree.services.tree_service import get_family_tree, resolve_many, resolve_person


def names(persons):
    return {p["name"] for p in persons}


@pytest.mark.asyncio
async def test_resolve_nonexistent_person(db):
    assert await resolve_person(999) is None


@pytest.mark.asyncio
async def test_resolve_person_without_relationships(db, make_person):
    person = await make_person("Loner", date(1970, 3, 4))

    result = await resolve_person(person["id"])

    assert result["id"] == person["id"]
    assert result["name"] == "Loner"
    assert result["birth_date"] == date(1970, 3, 4)
    assert result["parents"] == []
    assert result["children"] == []
    assert result["spouses"] == []
    assert result["siblings"] == []


@pytest.mark.asyncio
async def test_parent_edge_is_read_by_direction(db, make_person):
    parent = await make_person("Parent")
    child = await make_person("Child")
    await create_relationship(parent["id"], child["id"], "parent")

    child_view = await resolve_person(child["id"])
    parent_view = await resolve_person(parent["id"])

    assert names(child_view["parents"]) == {"Parent"}
    assert child_view["children"] == []
    assert names(parent_view["children"]) == {"Child"}
    assert parent_view["parents"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("kind,bucket", [("spouse", "spouses"), ("sibling", "siblings")])
async def test_symmetric_kind_visible_from_both_sides_once(db, make_person, kind, bucket):
    a = await make_person("John Smith")
    b = await make_person("Jane Smith")
    await create_relationship(a["id"], b["id"], kind)

    a_view = await resolve_person(a["id"])
    b_view = await resolve_person(b["id"])

    assert [p["name"] for p in a_view[bucket]] == ["Jane Smith"]
    assert [p["name"] for p in b_view[bucket]] == ["John Smith"]
    for other in ("parents", "children", "spouses", "siblings"):
        if other != bucket:
            assert a_view[other] == []
            assert b_view[other] == []


@pytest.mark.asyncio
async def test_single_stored_spouse_row_still_resolves_both_ways(db, make_person):
    husband = await make_person("Husband")
    wife = await make_person("Wife")
    await RELATIONSHIPS().insert_one({
        "_id": 1,
        "person1_id": husband["id"],
        "person2_id": wife["id"],
        "relationship_type": "spouse",
    })

    assert names((await resolve_person(husband["id"]))["spouses"]) == {"Wife"}
    assert names((await resolve_person(wife["id"]))["spouses"]) == {"Husband"}


@pytest.mark.asyncio
async def test_same_pair_in_several_buckets(db, make_person):
    a = await make_person("A")
    b = await make_person("B")
    await create_relationship(a["id"], b["id"], "sibling")
    await create_relationship(a["id"], b["id"], "spouse")

    view = await resolve_person(a["id"])

    assert names(view["siblings"]) == {"B"}
    assert names(view["spouses"]) == {"B"}


@pytest.mark.asyncio
async def test_buckets_hold_full_person_snapshots(db, make_person):
    a = await make_person("A", date(1950, 6, 1))
    b = await make_person("B")
    await create_relationship(a["id"], b["id"], "parent")

    snapshot = (await resolve_person(b["id"]))["parents"][0]

    assert snapshot["id"] == a["id"]
    assert snapshot["birth_date"] == date(1950, 6, 1)
    assert "created_at" in snapshot and "updated_at" in snapshot
    assert "parents" not in snapshot


@pytest.mark.asyncio
async def test_self_loop_rows_are_ignored(db, make_person):
    person = await make_person("Loop")
    await RELATIONSHIPS().insert_one({
        "_id": 1,
        "person1_id": person["id"],
        "person2_id": person["id"],
        "relationship_type": "parent",
    })

    view = await resolve_person(person["id"])

    assert view["parents"] == []
    assert view["children"] == []


@pytest.mark.asyncio
async def test_edges_to_missing_persons_are_skipped(db, make_person):
    person = await make_person("Survivor")
    await RELATIONSHIPS().insert_one({
        "_id": 1,
        "person1_id": 404,
        "person2_id": person["id"],
        "relationship_type": "parent",
    })

    view = await resolve_person(person["id"])

    assert view["parents"] == []


@pytest.mark.asyncio
async def test_resolve_many_matches_individual_resolution(db, make_person):
    a = await make_person("A")
    b = await make_person("B")
    c = await make_person("C")
    await create_relationship(a["id"], b["id"], "parent")
    await create_relationship(b["id"], c["id"], "sibling")
    await create_relationship(a["id"], c["id"], "spouse")

    batch = await resolve_many([a["id"], b["id"], c["id"], 999])

    assert set(batch) == {a["id"], b["id"], c["id"]}
    for person in (a, b, c):
        assert batch[person["id"]] == await resolve_person(person["id"])


@pytest.mark.asyncio
async def test_family_tree_not_found(db):
    assert await get_family_tree(999) is None


@pytest.mark.asyncio
async def test_family_tree_three_generations(db, make_person):
    bob = await make_person("Bob")
    john = await make_person("John")
    lisa = await make_person("Lisa")
    await create_relationship(bob["id"], john["id"], "parent")
    await create_relationship(john["id"], lisa["id"], "parent")

    tree = await get_family_tree(john["id"])

    center = tree["center_person"]
    assert center["name"] == "John"
    assert names(center["parents"]) == {"Bob"}
    assert names(center["children"]) == {"Lisa"}
    assert tree["grandparents"] == [await resolve_person(bob["id"])]
    assert tree["grandchildren"] == [await resolve_person(lisa["id"])]
    # Relatives are resolved but not expanded further
    assert names(tree["grandparents"][0]["children"]) == {"John"}
    assert names(tree["grandchildren"][0]["parents"]) == {"John"}


@pytest.mark.asyncio
async def test_family_tree_includes_relatives_other_buckets(db, make_person):
    great_grandma = await make_person("Great Grandma")
    grandpa = await make_person("Grandpa")
    grandma = await make_person("Grandma")
    dad = await make_person("Dad")
    uncle = await make_person("Uncle")
    me = await make_person("Me")
    await create_relationship(great_grandma["id"], grandpa["id"], "parent")
    await create_relationship(grandpa["id"], grandma["id"], "spouse")
    await create_relationship(grandpa["id"], dad["id"], "parent")
    await create_relationship(dad["id"], uncle["id"], "sibling")
    await create_relationship(dad["id"], me["id"], "parent")

    tree = await get_family_tree(dad["id"])

    assert names(tree["center_person"]["siblings"]) == {"Uncle"}
    assert [g["name"] for g in tree["grandparents"]] == ["Grandpa"]
    grandpa_view = tree["grandparents"][0]
    assert names(grandpa_view["parents"]) == {"Great Grandma"}
    assert names(grandpa_view["spouses"]) == {"Grandma"}
    assert [g["name"] for g in tree["grandchildren"]] == ["Me"]


@pytest.mark.asyncio
async def test_family_tree_without_relatives(db, make_person):
    person = await make_person("Solo")

    tree = await get_family_tree(person["id"])

    assert tree["center_person"]["id"] == person["id"]
    assert tree["grandparents"] == []
    assert tree["grandchildren"] == []


@pytest.mark.asyncio
async def test_family_tree_skips_vanished_relative(db, make_person, monkeypatch):
    parent = await make_person("Parent")
    child = await make_person("Child")
    await create_relationship(parent["id"], child["id"], "parent")

    real_resolve_many = tree_service.resolve_many
    calls = []

    async def resolve_then_vanish(person_ids):
        calls.append(list(person_ids))
        if len(calls) == 2:
            # Parent removed between reading the center and expanding relatives
            await PERSONS().delete_one({"_id": parent["id"]})
        return await real_resolve_many(person_ids)

    monkeypatch.setattr(tree_service, "resolve_many", resolve_then_vanish)

    tree = await get_family_tree(child["id"])

    assert names(tree["center_person"]["parents"]) == {"Parent"}
    assert tree["grandparents"] == []
    assert tree["grandchildren"] == []
