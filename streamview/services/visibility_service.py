"""Visibility service — staged hide/show of categories, committed when edit mode ends."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence, TypeVar

from streamview.errors import InvalidStateError, StorageError
from streamview.models.media import Category, MediaType
from streamview.services.store_service import hidden_categories_key

if TYPE_CHECKING:
    from streamview.services.store_service import StoreService

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Category)


class EditMode(str, enum.Enum):
    VIEWING = "viewing"
    EDITING = "editing"


@dataclass
class Viewing:
    mode: EditMode = field(default=EditMode.VIEWING, init=False)


@dataclass
class Editing:
    staged: list[str]
    mode: EditMode = field(default=EditMode.EDITING, init=False)


class VisibilityService:
    """Hidden categories per ``(profile, media_type)``.

    Each key is either :class:`Viewing` or :class:`Editing`.  Hides and shows
    only touch the staged list of an :class:`Editing` state; storage is
    written once, on :meth:`commit_and_exit`.  :meth:`discard` leaves edit
    mode without writing, which is what navigating away does.
    """

    def __init__(self, store: "StoreService"):
        self.store = store
        self._states: dict[tuple[str, MediaType], Viewing | Editing] = {}

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def state(self, profile: str, media_type: MediaType) -> Viewing | Editing:
        return self._states.get((profile, MediaType(media_type))) or Viewing()

    def is_editing(self, profile: str, media_type: MediaType) -> bool:
        return isinstance(self.state(profile, media_type), Editing)

    def committed(self, profile: str, media_type: MediaType) -> list[str]:
        try:
            value = self.store.get(profile, hidden_categories_key(media_type), [])
        except StorageError as e:
            logger.warning(f"Could not read hidden categories for {profile!r}, showing all: {e}")
            return []
        if not isinstance(value, list):
            return []
        return [str(v) for v in value]

    def hidden_ids(self, profile: str, media_type: MediaType) -> list[str]:
        """Staged ids while editing, committed ids otherwise."""
        state = self.state(profile, media_type)
        if isinstance(state, Editing):
            return list(state.staged)
        return self.committed(profile, media_type)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def enter_edit(self, profile: str, media_type: MediaType) -> Editing:
        key = (profile, MediaType(media_type))
        state = self._states.get(key)
        if isinstance(state, Editing):
            return state
        state = Editing(staged=self.committed(profile, media_type))
        self._states[key] = state
        return state

    def _editing(self, profile: str, media_type: MediaType) -> Editing:
        state = self._states.get((profile, MediaType(media_type)))
        if not isinstance(state, Editing):
            raise InvalidStateError(f"{MediaType(media_type).value} categories are not in edit mode")
        return state

    def hide(self, profile: str, media_type: MediaType, category_id: str) -> list[str]:
        state = self._editing(profile, media_type)
        category_id = str(category_id)
        if category_id not in state.staged:
            state.staged.append(category_id)
        return list(state.staged)

    def show(self, profile: str, media_type: MediaType, category_id: str) -> list[str]:
        state = self._editing(profile, media_type)
        state.staged = [c for c in state.staged if c != str(category_id)]
        return list(state.staged)

    def commit_and_exit(self, profile: str, media_type: MediaType) -> list[str]:
        """Persist the staged ids and return to viewing.

        On a failed write the error propagates and edit mode is kept, so the
        staged changes are not lost.
        """
        state = self._editing(profile, media_type)
        self.store.set(profile, hidden_categories_key(media_type), list(state.staged))
        self._states[(profile, MediaType(media_type))] = Viewing()
        logger.info(f"Committed {len(state.staged)} hidden {MediaType(media_type).value} categories for {profile!r}")
        return list(state.staged)

    def discard(self, profile: str, media_type: MediaType) -> None:
        key = (profile, MediaType(media_type))
        if isinstance(self._states.get(key), Editing):
            logger.info(f"Discarding staged {key[1].value} category edits for {profile!r}")
        self._states[key] = Viewing()

    def discard_profile(self, profile: str) -> None:
        """Leave edit mode for every media type of *profile*, dropping staged edits."""
        for media_type in MediaType:
            self.discard(profile, media_type)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def visible(self, profile: str, media_type: MediaType, categories: Sequence[C]) -> list[C]:
        hidden = set(self.hidden_ids(profile, media_type))
        return [c for c in categories if c.id not in hidden]

    def hidden(self, profile: str, media_type: MediaType, categories: Sequence[C]) -> list[C]:
        hidden = set(self.hidden_ids(profile, media_type))
        return [c for c in categories if c.id in hidden]
