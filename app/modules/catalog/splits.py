"""Split configuration rules applied when a product is created.

A product's creator-side revenue is divided between the creator and any
collaborators named by email. Collaborator percentages may add up to at
most 100; whatever is left over belongs to the creator.
"""
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SplitOverAllocated, UnknownCollaborator
from app.modules.catalog import schemas
from app.modules.profiles.models import Profile

FULL_SHARE = Decimal("100")

def total_allocation(entries: Sequence[schemas.SplitEntry]) -> Decimal:
    total = sum((entry.percentage for entry in entries), Decimal("0"))
    if total > FULL_SHARE:
        raise SplitOverAllocated(f"Split percentages add up to {total}%, the maximum is 100%")
    return total

def allocate(creator_id: UUID, collaborator_shares: Sequence[Tuple[UUID, Decimal]]) -> List[Tuple[UUID, Decimal]]:
    """
    Turn resolved collaborator shares into the split rows to store.

    The creator comes first and receives 100 minus the collaborators' total,
    plus any share they assigned to themselves. Zero shares are not stored.
    """
    shares: Dict[UUID, Decimal] = {}
    for recipient_id, percentage in collaborator_shares:
        shares[recipient_id] = shares.get(recipient_id, Decimal("0")) + percentage

    collaborators_total = sum(
        (pct for recipient_id, pct in shares.items() if recipient_id != creator_id),
        Decimal("0")
    )
    if collaborators_total > FULL_SHARE:
        raise SplitOverAllocated()

    rows = []
    creator_share = FULL_SHARE - collaborators_total
    if creator_share > 0:
        rows.append((creator_id, creator_share))
    for recipient_id, percentage in shares.items():
        if recipient_id == creator_id or percentage <= 0:
            continue
        rows.append((recipient_id, percentage))
    return rows

async def resolve_splits(
    db: AsyncSession,
    creator: Profile,
    entries: Sequence[schemas.SplitEntry]
) -> List[Tuple[UUID, Decimal]]:
    """Validate and resolve a split request. Raises before anything is written."""
    if not entries:
        return [(creator.id, FULL_SHARE)]

    total_allocation(entries)

    emails = {entry.collaborator_email.lower() for entry in entries}
    result = await db.execute(
        select(Profile.id, func.lower(Profile.email)).where(func.lower(Profile.email).in_(emails))
    )
    by_email = {email: profile_id for profile_id, email in result.all()}

    collaborator_shares = []
    for entry in entries:
        recipient_id = by_email.get(entry.collaborator_email.lower())
        if recipient_id is None:
            raise UnknownCollaborator(f"Collaborator {entry.collaborator_email} not found")
        collaborator_shares.append((recipient_id, entry.percentage))

    return allocate(creator.id, collaborator_shares)
