"""
ui/host.py - Mission composer host

Modal container around a MissionComposer: a sticky header with the status
chip, Save, Delete and Close, and the persistence calls behind them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union
import asyncio
import logging

from fleetops.core.enums import SaveStatus
from fleetops.errors.taxonomy import PersistenceError
from .components import ButtonComponent, StatusChip
from .composer import ComposerState, MissionComposer
from .events import EventBus, UIEvent, event_bus as default_bus

logger = logging.getLogger("ui.host")

DELETE_CONFIRMATION = "Delete this mission? This action cannot be undone."
SAVE_FAILED_LABEL = "Save failed"
DEFAULT_FOCUS_DELAY_MS = 100

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]


@dataclass
class HeaderView:
    """Snapshot of the sticky header."""
    title: str = ""
    status: str = ""
    save_enabled: bool = False
    show_delete: bool = False
    saving: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "status": self.status,
            "save_enabled": self.save_enabled,
            "show_delete": self.show_delete,
            "saving": self.saving,
            "error": self.error,
        }

    def render_ascii(self) -> str:
        parts = [
            self.title,
            StatusChip(status=self.status).render_ascii(),
            ButtonComponent(text="Save", enabled=self.save_enabled and not self.saving).render_ascii(),
        ]
        if self.show_delete:
            parts.append(ButtonComponent(text="Delete").render_ascii())
        parts.append(ButtonComponent(text="Close").render_ascii())
        line = "  ".join(parts)
        if self.error:
            line += f"\n  ! {self.error}"
        return line

    def render_html(self) -> str:
        buttons = [
            ButtonComponent(component_id="composer-save", text="Save", action="save",
                            variant="primary", enabled=self.save_enabled and not self.saving),
        ]
        if self.show_delete:
            buttons.append(ButtonComponent(component_id="composer-delete", text="Delete",
                                           action="delete", variant="danger",
                                           confirm_message=DELETE_CONFIRMATION))
        buttons.append(ButtonComponent(component_id="composer-close", text="Close", action="close"))
        html = (
            f'<header class="composer-header sticky"><h2>{self.title}</h2>'
            f'{StatusChip(status=self.status).render_html()}'
            f'{"".join(b.render_html() for b in buttons)}</header>'
        )
        return html


class MissionComposerHost:
    """
    Hosts one composer and owns its persistence.

    Save: the header emits SAVE_REQUESTED; the mounted composer answers
    through its own submit path and hands back the payload, which is then
    POSTed (new mission) or PUT (stored mission). The returned mission
    becomes the new baseline.
    """

    def __init__(
        self,
        client: Any,
        mission: Optional[Dict[str, Any]] = None,
        directory: Optional[Any] = None,
        bus: Optional[EventBus] = None,
        confirm: Optional[ConfirmCallback] = None,
        on_close: Optional[Callable[[], None]] = None,
        focus_delay_ms: int = DEFAULT_FOCUS_DELAY_MS,
        zero_capacity_unlimited: bool = False,
    ):
        """
        Initialize the host.

        Args:
            client: MissionClient (or anything with save_mission/delete_mission)
            mission: Stored mission to edit; None for a new mission
            directory: UserDirectory handed to the composer
            bus: Event bus shared with the composer
            confirm: Asked before delete; may be sync or async
            on_close: Called after the host closes
            focus_delay_ms: Delay before the initial focus request
            zero_capacity_unlimited: Read a stored crew capacity of 0 as unlimited
        """
        self.client = client
        self.bus = bus or default_bus
        self.confirm = confirm
        self.on_close = on_close
        self.focus_delay_ms = focus_delay_ms

        self.state = ComposerState()
        self.save_status = SaveStatus.IDLE
        self.last_error: Optional[str] = None
        self.is_open = False
        self._pending_payload: Optional[Dict[str, Any]] = None

        self.composer = MissionComposer(
            mission=mission,
            directory=directory,
            bus=self.bus,
            on_state=self._on_state,
            on_save=self._on_payload,
            zero_capacity_unlimited=zero_capacity_unlimited,
        )
        self._stored_id: Optional[str] = mission.get("id") if mission else None
        self.state = self.composer.state()

    # ==================== Composer callbacks ====================

    def _on_state(self, state: ComposerState) -> None:
        self.state = state

    def _on_payload(self, payload: Dict[str, Any]) -> None:
        self._pending_payload = payload

    # ==================== Header ====================

    @property
    def is_editing(self) -> bool:
        return bool(self._stored_id)

    def header(self) -> HeaderView:
        status = SAVE_FAILED_LABEL if self.save_status == SaveStatus.ERROR else self.state.status
        title = "Edit Mission" if self.is_editing else "New Mission"
        return HeaderView(
            title=title,
            status=status,
            save_enabled=self.state.can_save,
            show_delete=self.is_editing,
            saving=self.save_status == SaveStatus.SAVING,
            error=self.last_error,
        )

    # ==================== Open / close ====================

    async def open(self) -> str:
        """
        Mount the composer and, after the entrance delay, focus the first
        invalid field (or the mission name).

        Returns:
            The focus target
        """
        self.is_open = True
        self.composer.mount()
        await self.composer.load_reference_data()
        if self.focus_delay_ms > 0:
            await asyncio.sleep(self.focus_delay_ms / 1000)
        target = self.state.first_invalid_id or "mission-name"
        self.bus.emit(UIEvent.focus_requested(target, scroll=True, source="host"))
        return target

    def close(self) -> None:
        self.composer.unmount()
        self.is_open = False
        if self.on_close is not None:
            self.on_close()

    # ==================== Save ====================

    async def click_save(self) -> Optional[Dict[str, Any]]:
        """
        Header Save.

        Invalid drafts are not submitted: focus moves to the first invalid
        field instead. Persistence failures leave the draft intact and are
        reported through the header and PERSISTENCE_FAILED.

        Returns:
            The stored mission, or None if nothing was saved
        """
        if not self.state.can_save:
            self.composer.navigator.handle_rejected_save(self.composer.draft)
            return None

        self._pending_payload = None
        self.bus.emit(UIEvent.save_requested(self.composer.draft.overview.id))
        payload = self._pending_payload
        if payload is None:
            # Composer not mounted, or it rejected the save
            return None

        self.save_status = SaveStatus.SAVING
        self.last_error = None
        try:
            saved = await self.client.save_mission(payload)
        except PersistenceError as e:
            self.save_status = SaveStatus.ERROR
            self.last_error = e.message
            logger.error(f"Mission save failed: {e}")
            self.bus.emit(UIEvent.persistence_failed(e.error.to_dict(), "save"))
            return None

        saved = saved or payload
        self.save_status = SaveStatus.SAVED
        self._stored_id = saved.get("id") or self._stored_id
        self.composer.load(saved)
        self.bus.emit(UIEvent.mission_saved(saved))
        logger.info(f"Mission saved: {self._stored_id}")
        return saved

    # ==================== Delete ====================

    async def _confirmed(self) -> bool:
        if self.confirm is None:
            return False
        answer = self.confirm(DELETE_CONFIRMATION)
        if asyncio.iscoroutine(answer):
            answer = await answer
        return bool(answer)

    async def click_delete(self) -> bool:
        """
        Header Delete. Only available for stored missions and only after
        confirmation. Broadcasts MISSION_DELETED and closes on success.
        """
        if not self.is_editing:
            return False
        if not await self._confirmed():
            logger.debug("Delete cancelled")
            return False

        mission_id = self._stored_id
        try:
            await self.client.delete_mission(mission_id)
        except PersistenceError as e:
            self.last_error = e.message
            logger.error(f"Mission delete failed: {e}")
            self.bus.emit(UIEvent.persistence_failed(e.error.to_dict(), "delete"))
            return False

        self.bus.emit(UIEvent.mission_deleted(mission_id))
        logger.info(f"Mission deleted: {mission_id}")
        self.close()
        return True

    def render_ascii(self) -> str:
        return self.header().render_ascii() + "\n" + self.composer.render_ascii()

    def render_html(self) -> str:
        return f'<div class="modal">{self.header().render_html()}{self.composer.render_html()}</div>'
