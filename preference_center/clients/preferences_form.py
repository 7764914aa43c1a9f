# preference_center/clients/preferences_form.py
"""
Preferences form controller
~~~~~~~~~~~~~~~~~~~~~~~~~~~

Drives one page session of the preferences form:

    loading -> loaded | error
    loaded -> editing -> saving -> success | save_error
    editing -> confirm_cancel -> loading (re-fetch)
    loaded/editing -> confirm_unsubscribe -> saving_unsubscribe -> success | save_error

Every operation takes a ``FormState`` and returns a new one; nothing is kept
on the controller besides the API client and the encoded customer id. Any
front-end (the Streamlit app, tests) renders whatever state it gets back.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple

from preference_center.api.schemas import PreferencesView, Topic, TopicUpdate, UpdateRequest
from preference_center.clients.api_client import APIError, PreferencesAPI

logger = logging.getLogger(__name__)

TOAST_DURATION_SECONDS = 3.0

LOADING_TITLE = "Loading Preferences..."
ERROR_TITLE = "Error Loading Preferences"
ERROR_SUBTITLE = "Please try again later."

CANCEL_PROMPT = "Are you sure you want to cancel? Any unsaved changes will be lost."
UNSUBSCRIBE_PROMPT = "Are you sure you want to unsubscribe from all emails? This action cannot be undone."

LOAD_FAILED_TOAST = "Error loading preferences"
SAVED_TOAST = "Preferences saved successfully!"
SAVE_FAILED_TOAST = "Failed to save preferences. Please try again."
UNSUBSCRIBED_TOAST = "Successfully unsubscribed from all emails."
UNSUBSCRIBE_FAILED_TOAST = "Failed to unsubscribe. Please try again."


class Phase(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"
    EDITING = "editing"
    SAVING = "saving"
    SAVE_ERROR = "save_error"
    CONFIRM_CANCEL = "confirm_cancel"
    CONFIRM_UNSUBSCRIBE = "confirm_unsubscribe"
    SAVING_UNSUBSCRIBE = "saving_unsubscribe"
    SUCCESS = "success"


EDITABLE_PHASES = frozenset({Phase.LOADED, Phase.EDITING, Phase.SAVE_ERROR})
IN_FLIGHT_PHASES = frozenset({Phase.LOADING, Phase.SAVING, Phase.SAVING_UNSUBSCRIBE})


@dataclass(frozen=True)
class Toast:
    message: str
    kind: str = "success"
    duration: float = TOAST_DURATION_SECONDS


@dataclass(frozen=True)
class TopicRow:
    id: int
    name: str
    description: Optional[str]
    subscribed: bool

    @classmethod
    def from_topic(cls, topic: Topic) -> "TopicRow":
        # Empty descriptions are dropped so the row renders without one.
        return cls(
            id=topic.id,
            name=topic.name,
            description=topic.description or None,
            subscribed=topic.subscribed,
        )


@dataclass(frozen=True)
class FormState:
    phase: Phase = Phase.LOADING
    title: str = LOADING_TITLE
    subtitle: str = ""
    view: Optional[PreferencesView] = None
    rows: Tuple[TopicRow, ...] = ()
    toasts: Tuple[Toast, ...] = ()
    prompt: Optional[str] = None
    resume_phase: Optional[Phase] = None

    @property
    def buttons_disabled(self) -> bool:
        return self.phase in IN_FLIGHT_PHASES

    @property
    def editable(self) -> bool:
        return self.phase in EDITABLE_PHASES

    @property
    def awaiting_confirmation(self) -> bool:
        return self.phase in (Phase.CONFIRM_CANCEL, Phase.CONFIRM_UNSUBSCRIBE)

    def with_toast(self, message: str, kind: str = "success") -> "FormState":
        return replace(self, toasts=self.toasts + (Toast(message, kind),))


class PreferencesForm:
    """
    Controller for one customer's preferences form.

    ``on_transition`` is called with every intermediate state (loading,
    saving) before the matching request is sent, so a UI can show disabled
    buttons while it waits.
    """

    def __init__(
        self,
        api: PreferencesAPI,
        encoded_id: str,
        on_transition: Optional[Callable[[FormState], None]] = None,
    ):
        self.api = api
        self.encoded_id = encoded_id
        self._on_transition = on_transition

    def _enter(self, state: FormState) -> FormState:
        if self._on_transition is not None:
            self._on_transition(state)
        return state

    # ----------------------------- loading ----------------------------------

    def load(self, state: Optional[FormState] = None) -> FormState:
        toasts = state.toasts if state is not None else ()
        loading = self._enter(FormState(phase=Phase.LOADING, toasts=toasts))
        try:
            view = self.api.fetch(self.encoded_id)
        except APIError as e:
            logger.error(f"Error loading preferences: {e}")
            failed = replace(loading, phase=Phase.ERROR, title=ERROR_TITLE, subtitle=ERROR_SUBTITLE)
            return failed.with_toast(LOAD_FAILED_TOAST, "error")

        header = view.preferences.header
        return replace(
            loading,
            phase=Phase.LOADED,
            title=header.title,
            subtitle=header.subtitle,
            view=view,
            rows=tuple(TopicRow.from_topic(topic) for topic in view.preferences.topics),
        )

    # ----------------------------- editing ----------------------------------

    def toggle(self, state: FormState, topic_id: int, subscribed: Optional[bool] = None) -> FormState:
        """Set (or flip, when ``subscribed`` is None) one topic's local checkbox."""
        if not state.editable:
            return state
        if not any(row.id == topic_id for row in state.rows):
            raise ValueError(f"Unknown topic id: {topic_id}")

        rows = tuple(
            replace(row, subscribed=(not row.subscribed if subscribed is None else subscribed))
            if row.id == topic_id
            else row
            for row in state.rows
        )
        return replace(state, phase=Phase.EDITING, rows=rows)

    def build_update(self, state: FormState) -> UpdateRequest:
        # A regular save never touches the global flag, whatever it was.
        return UpdateRequest(
            globally_unsubscribed=False,
            topics=[TopicUpdate(id=row.id, subscribed=row.subscribed) for row in state.rows],
        )

    def build_unsubscribe_all(self, state: FormState) -> UpdateRequest:
        topics = state.view.preferences.topics if state.view is not None else []
        return UpdateRequest(
            globally_unsubscribed=True,
            topics=[TopicUpdate(id=topic.id, subscribed=False) for topic in topics],
        )

    def _submit(
        self,
        state: FormState,
        phase: Phase,
        update: UpdateRequest,
        success_toast: str,
        failure_toast: str,
    ) -> FormState:
        sending = self._enter(replace(state, phase=phase, prompt=None, resume_phase=None))
        try:
            self.api.submit(self.encoded_id, update)
        except APIError as e:
            logger.error(f"{failure_toast} ({e})")
            return replace(sending, phase=Phase.SAVE_ERROR).with_toast(failure_toast, "error")
        return replace(sending, phase=Phase.SUCCESS).with_toast(success_toast)

    def save(self, state: FormState) -> FormState:
        if state.view is None or not state.editable:
            return state
        return self._submit(state, Phase.SAVING, self.build_update(state), SAVED_TOAST, SAVE_FAILED_TOAST)

    # ----------------------------- confirmations ----------------------------

    def request_cancel(self, state: FormState) -> FormState:
        if not state.editable:
            return state
        return replace(state, phase=Phase.CONFIRM_CANCEL, prompt=CANCEL_PROMPT, resume_phase=state.phase)

    def request_unsubscribe_all(self, state: FormState) -> FormState:
        if state.view is None or not state.editable:
            return state
        return replace(state, phase=Phase.CONFIRM_UNSUBSCRIBE, prompt=UNSUBSCRIBE_PROMPT, resume_phase=state.phase)

    def confirm(self, state: FormState) -> FormState:
        if state.phase == Phase.CONFIRM_CANCEL:
            # Discard edits by asking the server again, not by undoing locally.
            return self.load(state)
        if state.phase == Phase.CONFIRM_UNSUBSCRIBE:
            return self._submit(
                state,
                Phase.SAVING_UNSUBSCRIBE,
                self.build_unsubscribe_all(state),
                UNSUBSCRIBED_TOAST,
                UNSUBSCRIBE_FAILED_TOAST,
            )
        return state

    def dismiss(self, state: FormState) -> FormState:
        if not state.awaiting_confirmation:
            return state
        return replace(state, phase=state.resume_phase or Phase.LOADED, prompt=None, resume_phase=None)

    def cancel(self, state: FormState, ask: Callable[[str], bool]) -> FormState:
        pending = self.request_cancel(state)
        if not pending.awaiting_confirmation:
            return state
        return self.confirm(pending) if ask(CANCEL_PROMPT) else self.dismiss(pending)

    def unsubscribe_all(self, state: FormState, ask: Callable[[str], bool]) -> FormState:
        pending = self.request_unsubscribe_all(state)
        if not pending.awaiting_confirmation:
            return state
        return self.confirm(pending) if ask(UNSUBSCRIBE_PROMPT) else self.dismiss(pending)

    # ----------------------------- toasts -----------------------------------

    @staticmethod
    def take_toasts(state: FormState) -> Tuple[Tuple[Toast, ...], FormState]:
        """Hand pending toasts to the UI, which shows and expires them."""
        return state.toasts, replace(state, toasts=())
