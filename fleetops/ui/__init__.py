"""
ui/ - Composer user interface layer

Event channels, stage navigation, the staged vessel picker, the composer
shell, its modal host and the mission board.
"""

from .events import (
    EventType,
    UIEvent,
    EventBus,
    event_bus,
    emit_mission_deleted,
    emit_mission_saved,
)

from .components import (
    ComponentType,
    Component,
    ButtonComponent,
    AlertComponent,
    StatusChip,
    DataTable,
    AccordionSection,
)

from .stage_navigator import (
    StageInfo,
    STAGE_DEFINITIONS,
    StageNavigator,
)

from .vessel_picker import (
    PickerCandidate,
    VesselPicker,
)

from .composer import (
    ComposerState,
    MissionComposer,
)

from .host import (
    HeaderView,
    MissionComposerHost,
    DELETE_CONFIRMATION,
)

from .board import MissionBoard


__all__ = [
    # Events
    "EventType",
    "UIEvent",
    "EventBus",
    "event_bus",
    "emit_mission_deleted",
    "emit_mission_saved",
    # Components
    "ComponentType",
    "Component",
    "ButtonComponent",
    "AlertComponent",
    "StatusChip",
    "DataTable",
    "AccordionSection",
    # Navigation
    "StageInfo",
    "STAGE_DEFINITIONS",
    "StageNavigator",
    # Picker
    "PickerCandidate",
    "VesselPicker",
    # Composer
    "ComposerState",
    "MissionComposer",
    # Host
    "HeaderView",
    "MissionComposerHost",
    "DELETE_CONFIRMATION",
    # Board
    "MissionBoard",
]
