import uuid
from decimal import Decimal

import pytest

from app.core.errors import SplitOverAllocated, UnknownCollaborator
from app.modules.catalog import splits
from app.modules.catalog.schemas import SplitEntry


def entry(email, pct):
    return SplitEntry(collaborator_email=email, percentage=Decimal(pct))


def test_total_allocation_accepts_exactly_one_hundred():
    assert splits.total_allocation([entry("a@snapstudio.io", "60"), entry("b@snapstudio.io", "40")]) == Decimal("100")


def test_total_allocation_rejects_over_one_hundred():
    with pytest.raises(SplitOverAllocated):
        splits.total_allocation([entry("a@snapstudio.io", "60"), entry("b@snapstudio.io", "41")])


def test_allocate_gives_creator_the_remainder_first():
    creator_id, collaborator_id = uuid.uuid4(), uuid.uuid4()
    rows = splits.allocate(creator_id, [(collaborator_id, Decimal("30"))])
    assert rows == [(creator_id, Decimal("70")), (collaborator_id, Decimal("30"))]


def test_allocate_merges_creator_listing_themselves():
    creator_id, collaborator_id = uuid.uuid4(), uuid.uuid4()
    rows = splits.allocate(creator_id, [(creator_id, Decimal("20")), (collaborator_id, Decimal("30"))])
    assert rows == [(creator_id, Decimal("70")), (collaborator_id, Decimal("30"))]


def test_allocate_drops_creator_row_when_fully_given_away():
    creator_id, collaborator_id = uuid.uuid4(), uuid.uuid4()
    rows = splits.allocate(creator_id, [(collaborator_id, Decimal("100"))])
    assert rows == [(collaborator_id, Decimal("100"))]


async def test_resolve_without_entries_is_all_creator(db, make_profile):
    creator = await make_profile()
    assert await splits.resolve_splits(db, creator, []) == [(creator.id, Decimal("100"))]


async def test_resolve_matches_emails_case_insensitively(db, make_profile):
    creator = await make_profile()
    collaborator = await make_profile(email="painter@snapstudio.io")

    rows = await splits.resolve_splits(db, creator, [entry("Painter@SnapStudio.io", "25")])

    assert rows == [(creator.id, Decimal("75")), (collaborator.id, Decimal("25"))]


async def test_resolve_rejects_unknown_collaborator(db, make_profile):
    creator = await make_profile()
    with pytest.raises(UnknownCollaborator):
        await splits.resolve_splits(db, creator, [entry("ghost@snapstudio.io", "10")])
