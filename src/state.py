"""Editor state: the member collection, selection and language, with named mutations."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from graph import build_graph, get_subtree_ids
from models import Gender, Language, Member

logger = logging.getLogger(__name__)

Listener = Callable[["FamilyTreeState"], None]


def initial_members() -> list[Member]:
    return [
        Member(
            id="root-1",
            parent_id=None,
            name="Grandfather",
            regional_name="दादाजी",
            relation_type="Root",
            gender=Gender.MALE,
            spouse_name="Grandmother",
            spouse_regional_name="दादीजी",
        )
    ]


@dataclass(frozen=True)
class TranslationRequest:
    member_id: str
    revision: int
    language: Language
    name: str
    spouse_name: str | None
    spouse_regional_name: str | None


@dataclass(frozen=True)
class TranslationResult:
    member_id: str
    revision: int
    regional_name: str
    spouse_regional_name: str | None


async def fetch_translation(request: TranslationRequest, service) -> TranslationResult:
    """
    Translate a member's name and spouse name concurrently.

    Both calls are awaited together, so the result is only available once the
    slower one finishes.
    """
    if request.spouse_name:
        regional_name, spouse_regional_name = await asyncio.gather(
            service.translate_name(request.name, request.language),
            service.translate_name(request.spouse_name, request.language),
        )
    else:
        regional_name = await service.translate_name(request.name, request.language)
        spouse_regional_name = request.spouse_regional_name

    return TranslationResult(
        member_id=request.member_id,
        revision=request.revision,
        regional_name=regional_name,
        spouse_regional_name=spouse_regional_name,
    )


class FamilyTreeState:
    """
    Single owner of the editable tree.

    Every mutation happens through one of the named methods below and
    notifies the subscribed listeners exactly once when something changed.
    """

    def __init__(
        self,
        members: list[Member] | None = None,
        selected_id: str | None = None,
        language: Language = Language.HINDI,
    ):
        if members is None:
            members = initial_members()
            selected_id = selected_id or members[0].id
        self.members: list[Member] = list(members)
        self.selected_id = selected_id
        self.language = Language(language)
        self.story = ""
        self._listeners: list[Listener] = []
        self._revisions: dict[str, int] = {}

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    def find_member(self, member_id: str | None) -> Member | None:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    @property
    def selected_member(self) -> Member | None:
        return self.find_member(self.selected_id)

    def revision(self, member_id: str) -> int:
        return self._revisions.get(member_id, 0)

    def update_member(self, updated: Member) -> bool:
        """Replace the member with the same id. Returns False if nothing changed."""
        for i, member in enumerate(self.members):
            if member.id == updated.id:
                if member == updated:
                    return False
                self.members[i] = updated
                self._revisions[updated.id] = self.revision(updated.id) + 1
                self._notify()
                return True

        logger.warning("Cannot update unknown member %s", updated.id)
        return False

    def edit_member(self, member_id: str, **changes) -> bool:
        member = self.find_member(member_id)
        if member is None:
            logger.warning("Cannot edit unknown member %s", member_id)
            return False
        return self.update_member(replace(member, **changes))

    def _new_member_id(self) -> str:
        existing = {m.id for m in self.members}
        base = f"member-{int(time.time() * 1000)}"
        member_id, n = base, 1
        while member_id in existing:
            member_id = f"{base}-{n}"
            n += 1
        return member_id

    def add_child(self, parent_id: str) -> Member | None:
        """Append a placeholder child under ``parent_id`` and select it."""
        if self.find_member(parent_id) is None:
            logger.warning("Cannot add a child to unknown member %s", parent_id)
            return None

        child = Member(
            id=self._new_member_id(),
            parent_id=parent_id,
            name="New Member",
            regional_name="",
            relation_type="Son",
            gender=Gender.MALE,
        )
        self.members.append(child)
        self.selected_id = child.id
        self._notify()
        return child

    def delete_member(self, member_id: str) -> set[str]:
        """
        Remove a member and all of its descendants.

        The root cannot be deleted. Returns the removed member IDs.
        """
        member = self.find_member(member_id)
        if member is None:
            logger.warning("Cannot delete unknown member %s", member_id)
            return set()
        if member.parent_id is None:
            logger.warning("The root member cannot be deleted")
            return set()

        removed = get_subtree_ids(build_graph(self.members), member_id)
        self.members = [m for m in self.members if m.id not in removed]
        for removed_id in removed:
            self._revisions.pop(removed_id, None)
        self.selected_id = None
        logger.info("Deleted %d member(s) under %s", len(removed), member_id)
        self._notify()
        return removed

    def select(self, member_id: str | None):
        if member_id == self.selected_id:
            return
        self.selected_id = member_id
        self._notify()

    def set_language(self, language: Language):
        language = Language(language)
        if language == self.language:
            return
        self.language = language
        self._notify()

    def set_story(self, story: str):
        self.story = story
        self._notify()

    def begin_translation(self, member_id: str) -> TranslationRequest | None:
        """Snapshot what a translation of ``member_id`` needs, tagged with its revision."""
        member = self.find_member(member_id)
        if member is None or not member.name:
            return None
        return TranslationRequest(
            member_id=member.id,
            revision=self.revision(member.id),
            language=self.language,
            name=member.name,
            spouse_name=member.spouse_name,
            spouse_regional_name=member.spouse_regional_name,
        )

    def apply_translation(self, result: TranslationResult) -> bool:
        """
        Commit translated names unless the member was edited or deleted
        after the request was made.
        """
        member = self.find_member(result.member_id)
        if member is None:
            logger.info("Discarding translation for deleted member %s", result.member_id)
            return False
        if self.revision(member.id) != result.revision:
            logger.info("Discarding stale translation for %s", member.id)
            return False

        self.update_member(
            replace(
                member,
                regional_name=result.regional_name,
                spouse_regional_name=result.spouse_regional_name,
            )
        )
        return True

    async def translate_member(self, member_id: str, service) -> bool:
        request = self.begin_translation(member_id)
        if request is None:
            return False
        return self.apply_translation(await fetch_translation(request, service))

    async def generate_story(self, service) -> str:
        story = await service.generate_family_history(list(self.members), self.language)
        self.set_story(story)
        return story
