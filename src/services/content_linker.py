"""Content ↔ vocabulary linker.

Keeps each content item's link set equal to the deduplicated tokenization
of its current text, plus every known phrase of the language that occurs in
it word for word. Vocabulary is ensured before the link transaction
starts: vocabulary rows are append-only, so a rolled-back reconcile leaves
at most unreferenced vocabulary behind, never a partial link set.
"""

import logging

from adapter.tokenizer.registry import TokenizerRegistry
from domain.model.content import ContentRef, LinkDelta
from port.content_link_repository import ContentLinkRepository
from port.unit_of_work import UnitOfWork
from port.vocabulary_repository import VocabularyRepository
from services import vocabulary_registry

logger = logging.getLogger(__name__)


def reconcile(
    content: ContentRef,
    language: str,
    raw_text: str,
    tokenizers: TokenizerRegistry,
    vocab_repo: VocabularyRepository,
    link_repo: ContentLinkRepository,
    uow: UnitOfWork,
) -> LinkDelta:
    """Bring the content's links in line with raw_text and return what changed.

    Only the difference is written: links present before and after are
    left untouched. Calling again with the same text returns an empty delta.

    Raises:
        UnsupportedLanguageError: before anything is written.
        StorageError: the transaction was rolled back; links are unchanged.
    """
    tokenizer = tokenizers.resolve(language)
    words = tokenizer.segment(raw_text)
    parsed_text = tokenizer.parse_text(raw_text)
    target = set(vocabulary_registry.ensure_batch(vocab_repo, tokenizers, language, tokenizer.dedupe(words)).values())

    # Phrases are never created from content, only linked when already known
    joined = tokenizer.separator.join(word.normalized for word in words)
    target.update(v.id for v in vocab_repo.find_phrases_in(language, joined, tokenizer.separator))

    def apply(session) -> LinkDelta:
        current = link_repo.get_vocabulary_ids(content, session=session)
        added = target - current
        removed = current - target
        if added:
            link_repo.add_links(content, language, added, session=session)
        if removed:
            link_repo.remove_links(content, removed, session=session)
        return LinkDelta(added=frozenset(added), removed=frozenset(removed), parsed_text=parsed_text)

    delta = uow.run(apply)

    logger.info("Content vocabulary reconciled", extra={
        "contentKind": content.kind.value,
        "contentId": content.id,
        "language": language,
        "linked": len(target),
        "added": len(delta.added),
        "removed": len(delta.removed),
    })
    return delta


def remove_content(content: ContentRef, link_repo: ContentLinkRepository, uow: UnitOfWork) -> int:
    """Drop every link of a deleted content item. Vocabulary rows are kept."""
    deleted = uow.run(lambda session: link_repo.delete_for_content(content, session=session))
    logger.info("Content vocabulary removed", extra={
        "contentKind": content.kind.value,
        "contentId": content.id,
        "removed": deleted,
    })
    return deleted


def get_vocabulary_ids(content: ContentRef, link_repo: ContentLinkRepository) -> set[str]:
    return link_repo.get_vocabulary_ids(content)
