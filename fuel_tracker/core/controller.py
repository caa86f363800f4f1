"""
Application controller for the fuel log.

Owns the explicit application state and consumes typed commands emitted by
the presentation adapter. Every mutation recomputes the whole collection
from scratch and rewrites it to the store.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from fuel_tracker.config.loader import DEFAULT_TANK_CAPACITY
from fuel_tracker.storage.models import FuelEntry
from fuel_tracker.storage.repository import (
    LogStore,
    find_entry,
    next_entry_id,
    remove,
    upsert,
)

from .errors import SubmissionCancelled
from .recompute import recompute
from .validation import exceeds_tank_capacity, tank_capacity_warning, validate_submission

_logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Are you sure you want to delete this entry?"


@dataclass(frozen=True)
class Creating:
    """Submissions create a new entry."""
    label = "Add Entry"


@dataclass(frozen=True)
class Editing:
    """Submissions replace the entry with ``entry_id``."""
    entry_id: int
    label = "Update Entry"


Mode = Union[Creating, Editing]


@dataclass(frozen=True)
class AppState:
    """Canonical entry collection plus the current edit mode."""
    entries: List[FuelEntry] = field(default_factory=list)
    mode: Mode = Creating()
    
    @property
    def editing_entry(self) -> Optional[FuelEntry]:
        """The entry being edited, if any."""
        if isinstance(self.mode, Editing):
            return find_entry(self.entries, self.mode.entry_id)
        return None


@dataclass(frozen=True)
class Submit:
    """Create or update an entry from raw input fields."""
    date: object
    liters: object
    amount: object
    rate: object
    meter: object


@dataclass(frozen=True)
class RequestEdit:
    """Enter edit mode for ``entry_id``."""
    entry_id: int


@dataclass(frozen=True)
class RequestDelete:
    """Delete ``entry_id`` after confirmation."""
    entry_id: int


Command = Union[Submit, RequestEdit, RequestDelete]


class FuelLogController:
    """Applies commands to the application state.
    
    Confirmation gates are delegated to the ``confirm`` callback supplied by
    the presentation adapter; it receives the prompt and returns whether the
    user agreed.
    """
    
    def __init__(
        self,
        store: LogStore,
        confirm: Callable[[str], bool],
        tank_capacity: float = DEFAULT_TANK_CAPACITY,
        clock_ms: Optional[Callable[[], int]] = None
    ):
        """Initialize the controller.
        
        Args:
            store: Store the collection is loaded from and saved to
            confirm: Callback answering confirmation prompts
            tank_capacity: Liters above which a submission needs confirmation
            clock_ms: Optional millisecond clock used to allocate entry ids
        """
        self.store = store
        self.confirm = confirm
        self.tank_capacity = tank_capacity
        self.clock_ms = clock_ms
    
    def start(self) -> AppState:
        """Load the persisted collection and bring it into canonical form."""
        return AppState(entries=recompute(self.store.load()))
    
    def dispatch(self, state: AppState, command: Command) -> AppState:
        """Apply ``command`` and return the resulting state.
        
        Raises:
            InvalidEntryError: If a submission has invalid fields
            SubmissionCancelled: If the user declines a confirmation
            TypeError: If ``command`` is not a known command
        """
        if isinstance(command, Submit):
            return self._submit(state, command)
        if isinstance(command, RequestEdit):
            return self._request_edit(state, command)
        if isinstance(command, RequestDelete):
            return self._request_delete(state, command)
        raise TypeError(f"Unknown command: {command!r}")
    
    def _submit(self, state: AppState, command: Submit) -> AppState:
        submission = validate_submission(
            command.date, command.liters, command.amount, command.rate, command.meter
        )
        
        if exceeds_tank_capacity(submission.liters, self.tank_capacity):
            if not self.confirm(tank_capacity_warning(submission.liters, self.tank_capacity)):
                raise SubmissionCancelled("Submission cancelled")
        
        if isinstance(state.mode, Editing):
            entry_id = state.mode.entry_id
        else:
            now = self.clock_ms() if self.clock_ms else None
            entry_id = next_entry_id(state.entries, now)
        
        entries = upsert(state.entries, submission.to_entry(entry_id))
        _logger.debug("Submitted entry %d (%s)", entry_id, state.mode.label)
        return self._commit(entries)
    
    def _request_edit(self, state: AppState, command: RequestEdit) -> AppState:
        if find_entry(state.entries, command.entry_id) is None:
            _logger.debug("Edit requested for unknown entry %d", command.entry_id)
            return state
        return AppState(entries=state.entries, mode=Editing(command.entry_id))
    
    def _request_delete(self, state: AppState, command: RequestDelete) -> AppState:
        if not self.confirm(DELETE_CONFIRMATION):
            raise SubmissionCancelled("Delete cancelled")
        
        entries = remove(state.entries, command.entry_id)
        mode = state.mode
        if isinstance(mode, Editing) and mode.entry_id == command.entry_id:
            mode = Creating()
        _logger.debug("Deleted entry %d", command.entry_id)
        return self._commit(entries, mode)
    
    def _commit(self, entries: List[FuelEntry], mode: Mode = Creating()) -> AppState:
        canonical = recompute(entries)
        self.store.save(canonical)
        return AppState(entries=canonical, mode=mode)
