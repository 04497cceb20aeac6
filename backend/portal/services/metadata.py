"""Shared vocabularies: interest tags (open) and affiliations (admin-curated)."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import ProblemDetailError
from portal.core.policy import Action, Actor, enforce
from portal.core.states import MetadataKey
from portal.models.metadata_document import MetadataDocument

logger = logging.getLogger(__name__)


async def get_values(db: AsyncSession, key: MetadataKey) -> list[str]:
    document = await db.get(MetadataDocument, key.value)
    return list(document.values) if document else []


async def save_values(
    db: AsyncSession, actor: Actor, key: MetadataKey, values: list[str]
) -> list[str]:
    """Replace the whole vocabulary, keeping the submitted order."""
    enforce(actor, Action.EDIT_METADATA)

    document = await db.get(MetadataDocument, key.value)
    if document is None:
        document = MetadataDocument(key=key.value, values=list(values))
        db.add(document)
    else:
        document.values = list(values)
    await db.flush()

    logger.info("Vocabulary %s replaced by %s (%d values)", key.value, actor.user_id, len(values))
    return list(document.values)


async def canonical_affiliations(db: AsyncSession, requested: list[str]) -> list[str]:
    """Map requested affiliations onto the curated vocabulary.

    Matching is case-insensitive and the vocabulary's casing wins; values
    that are not in the vocabulary are rejected.
    """
    vocabulary = {value.lower(): value for value in await get_values(db, MetadataKey.AFFILIATIONS)}

    canonical: list[str] = []
    unknown: list[str] = []
    for value in requested:
        match = vocabulary.get(value.lower())
        if match is None:
            unknown.append(value)
        elif match not in canonical:
            canonical.append(match)

    if unknown:
        raise ProblemDetailError(
            422,
            "Unknown affiliation",
            f"Affiliations must be chosen from the curated list: {', '.join(unknown)}",
        )
    return canonical
