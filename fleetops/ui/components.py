"""
ui/components.py - Reusable view components

Text and HTML renderings for the composer and its host: accordion sections
with error badges, the status chip, buttons, alerts and simple tables.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from html import escape
import logging

logger = logging.getLogger("ui.components")


# =============================================================================
# COMPONENT BASE
# =============================================================================

class ComponentType(Enum):
    """Types of UI components."""
    DISPLAY = "display"
    BUTTON = "button"
    TABLE = "table"
    CONTAINER = "container"
    ALERT = "alert"
    CHIP = "chip"


@dataclass
class Component:
    """Base component class."""
    component_id: str = ""
    component_type: ComponentType = ComponentType.DISPLAY
    label: str = ""
    visible: bool = True
    enabled: bool = True
    tooltip: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.component_id,
            "type": self.component_type.value,
            "label": self.label,
            "visible": self.visible,
            "enabled": self.enabled,
            "tooltip": self.tooltip,
        }

    def render_ascii(self) -> str:
        return self.label

    def render_html(self) -> str:
        return f'<span id="{escape(self.component_id)}">{escape(self.label)}</span>'


# =============================================================================
# BUTTONS & ALERTS
# =============================================================================

@dataclass
class ButtonComponent(Component):
    """Button component."""
    text: str = ""
    action: str = ""
    variant: str = "default"
    confirm_message: str = ""

    def __post_init__(self):
        self.component_type = ComponentType.BUTTON

    def render_ascii(self) -> str:
        text = f"[{self.text}]"
        return text if self.enabled else f"({self.text})"

    def render_html(self) -> str:
        attrs = [
            f'id="{escape(self.component_id)}"',
            f'class="btn btn-{escape(self.variant)}"',
            f'data-action="{escape(self.action)}"',
        ]
        if not self.enabled:
            attrs.append("disabled")
        if self.confirm_message:
            attrs.append(f'data-confirm="{escape(self.confirm_message)}"')
        return f'<button {" ".join(attrs)}>{escape(self.text)}</button>'


@dataclass
class AlertComponent(Component):
    """Alert/notification component."""
    message: str = ""
    severity: str = "info"
    icon: str = ""

    SEVERITY_ICONS = {
        "info": "\u2139",     # ℹ
        "success": "\u2713",  # ✓
        "warning": "\u26a0",  # ⚠
        "error": "\u2717",    # ✗
    }

    def __post_init__(self):
        self.component_type = ComponentType.ALERT
        if not self.icon:
            self.icon = self.SEVERITY_ICONS.get(self.severity, "")

    def render_ascii(self) -> str:
        return f"{self.icon} [{self.severity.upper()}] {self.message}"

    def render_html(self) -> str:
        return (
            f'<div class="alert alert-{escape(self.severity)}">'
            f'<span class="icon">{self.icon}</span>'
            f'<span class="message">{escape(self.message)}</span>'
            f'</div>'
        )


# Mission status -> chip tone
STATUS_TONES = {
    "Planning": "info",
    "Briefing": "info",
    "In Progress": "active",
    "Debriefing": "active",
    "Completed": "success",
    "Archived": "muted",
    "Cancelled": "muted",
    "Save failed": "error",
}


@dataclass
class StatusChip(Component):
    """Small pill showing the mission status."""
    status: str = ""

    def __post_init__(self):
        self.component_type = ComponentType.CHIP

    @property
    def tone(self) -> str:
        return STATUS_TONES.get(self.status, "info")

    def render_ascii(self) -> str:
        return f"<{self.status}>"

    def render_html(self) -> str:
        return f'<span class="chip chip-{self.tone}">{escape(self.status)}</span>'


# =============================================================================
# TABLES
# =============================================================================

@dataclass
class DataTable(Component):
    """Plain table of rows keyed by column name."""
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    empty_text: str = "(none)"

    def __post_init__(self):
        self.component_type = ComponentType.TABLE

    def render_ascii(self) -> str:
        if not self.rows:
            return self.empty_text
        widths = {
            c: max(len(c), *(len(str(r.get(c, ""))) for r in self.rows))
            for c in self.columns
        }
        header = "  ".join(c.ljust(widths[c]) for c in self.columns)
        lines = [header, "-" * len(header)]
        for row in self.rows:
            lines.append("  ".join(str(row.get(c, "")).ljust(widths[c]) for c in self.columns))
        return "\n".join(lines)

    def render_html(self) -> str:
        if not self.rows:
            return f'<p class="empty">{escape(self.empty_text)}</p>'
        head = "".join(f"<th>{escape(c)}</th>" for c in self.columns)
        body = "".join(
            "<tr>" + "".join(f"<td>{escape(str(r.get(c, '')))}</td>" for c in self.columns) + "</tr>"
            for r in self.rows
        )
        return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


# =============================================================================
# CONTAINER COMPONENTS
# =============================================================================

@dataclass
class AccordionSection(Component):
    """
    One collapsible composer section.

    The header carries an error badge; the body is rendered only when open.
    """
    title: str = ""
    badge: int = 0
    expanded: bool = False
    content: str = ""
    children: List[Component] = field(default_factory=list)
    footer: Optional[ButtonComponent] = None

    def __post_init__(self):
        self.component_type = ComponentType.CONTAINER

    @property
    def header_id(self) -> str:
        return f"{self.component_id}-header"

    def add_child(self, component: Component) -> None:
        self.children.append(component)

    def render_ascii(self) -> str:
        marker = "\u25bc" if self.expanded else "\u25b6"  # ▼ / ▶
        badge = f" [{self.badge}]" if self.badge else ""
        lines = [f"{marker} {self.title}{badge}"]
        if not self.expanded:
            return lines[0]

        lines.append("\u2500" * 50)
        if self.content:
            lines.extend(f"  {line}" for line in self.content.split("\n"))
        for child in self.children:
            lines.extend(f"  {line}" for line in child.render_ascii().split("\n"))
        if self.footer is not None:
            lines.append(f"  {self.footer.render_ascii()}")
        return "\n".join(lines)

    def render_html(self) -> str:
        badge = f'<span class="badge">{self.badge}</span>' if self.badge else ""
        body = ""
        if self.expanded:
            inner = escape(self.content).replace("\n", "<br>") if self.content else ""
            inner += "".join(child.render_html() for child in self.children)
            if self.footer is not None:
                inner += self.footer.render_html()
            body = f'<div class="accordion-body">{inner}</div>'
        state = "open" if self.expanded else "closed"
        return (
            f'<section id="{escape(self.component_id)}" class="accordion {state}">'
            f'<h3 id="{escape(self.header_id)}" aria-expanded="{str(self.expanded).lower()}">'
            f'{escape(self.title)}{badge}</h3>{body}</section>'
        )
