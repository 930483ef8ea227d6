"""
cli/commands.py - CLI command implementations

Each command drives the open MissionComposerHost the way the modal's
controls would.
"""

from __future__ import annotations
from typing import Any, Dict, List
import argparse
import json
from pathlib import Path

from fleetops.core import rules
from fleetops.core.enums import Stage
from fleetops.errors.taxonomy import InvalidFieldError, PersistenceError
from .core import CLICommand, CLIContext, CommandResult

LIST_FIELDS = ("images", "diagramLinks", "diagram_links")


def _people_rows(people) -> List[Dict[str, Any]]:
    return [{"id": p.id, "name": p.display_name, "ships": len(p.owned_vessels)} for p in people]


class NewCommand(CLICommand):
    """Start a new mission."""

    name = "new"
    description = "Start a new mission"
    aliases = ["create"]
    requires_mission = False

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", nargs="?", default="", help="Mission name")
        parser.add_argument("--type", "-t", default=None, help="Mission type")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        host = ctx.open_mission(None)
        if args.name:
            host.composer.set_field("name", args.name)
        if args.type:
            host.composer.set_field("type", args.type)
        ctx.mission_path = ""
        draft = host.composer.draft
        return CommandResult(
            success=True,
            message=f"Started new mission: {args.name or draft.overview.id}",
            data={"id": draft.overview.id, "members": len(host.composer.members)},
        )


class LoadCommand(CLICommand):
    """Open a stored mission by id, or from a JSON file."""

    name = "load"
    description = "Open a stored mission (id or JSON file)"
    aliases = ["open"]
    requires_mission = False

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("source", help="Mission id or path to a mission JSON file")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        path = Path(args.source)
        try:
            if path.exists():
                with open(path, "r") as f:
                    mission = json.load(f)
                ctx.mission_path = str(path)
            elif ctx.client is not None:
                mission = ctx.run(ctx.client.get_mission(args.source))
                ctx.mission_path = ""
            else:
                return CommandResult(success=False, error=f"File not found: {path}", exit_code=1)
        except PersistenceError as e:
            return CommandResult(success=False, error=e.message, exit_code=1)
        except (OSError, json.JSONDecodeError) as e:
            return CommandResult(success=False, error=str(e), exit_code=1)

        host = ctx.open_mission(mission)
        draft = host.composer.draft
        return CommandResult(
            success=True,
            message=f"Loaded mission {draft.overview.name or draft.overview.id}",
            data={
                "id": draft.overview.id,
                "people": len(draft.people),
                "vessels": len(draft.vessels),
            },
        )


class ShowCommand(CLICommand):
    """Render the composer."""

    name = "show"
    description = "Render the open mission"
    aliases = ["view"]

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--html", action="store_true", help="Render HTML instead of text")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        rendered = ctx.host.render_html() if args.html else ctx.host.render_ascii()
        return CommandResult(success=True, data=rendered)


class SetCommand(CLICommand):
    """Set an overview field."""

    name = "set"
    description = "Set an overview field (e.g. name, type, scheduledDateTime)"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("field", help="Field name")
        parser.add_argument("value", nargs="?", default="", help="Value (comma separated for lists)")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        value: Any = args.value
        if args.field in LIST_FIELDS:
            value = [v.strip() for v in value.split(",") if v.strip()]
        try:
            ctx.composer.set_field(args.field, value)
        except InvalidFieldError as e:
            return CommandResult(success=False, error=e.message, exit_code=1)
        return CommandResult(
            success=True,
            message=f"Set {args.field} = {value}",
            data={"can_save": ctx.composer.can_save},
        )


class StageCommand(CLICommand):
    """Open, toggle or advance accordion stages."""

    name = "stage"
    description = "Show stages, open one, or follow 'next'"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "stage", nargs="?", default=None,
            help="overview, personnel, vessels, review or next",
        )
        parser.add_argument("--toggle", action="store_true", help="Toggle instead of open")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        navigator = ctx.composer.navigator
        if args.stage == "next":
            nxt = navigator.advance()
            if nxt is None:
                return CommandResult(success=True, message="Already at the last stage")
        elif args.stage:
            try:
                stage = Stage(args.stage.lower())
            except ValueError:
                return CommandResult(success=False, error=f"Unknown stage: {args.stage}", exit_code=1)
            if args.toggle:
                navigator.toggle(stage)
            else:
                navigator.go_to_section(stage)
        return CommandResult(
            success=True,
            message=navigator.render_ascii(ctx.composer.errors),
            data={"open": navigator.current.value if navigator.current else None},
        )


class PeopleCommand(CLICommand):
    """List directory members or the mission roster."""

    name = "people"
    description = "List directory members (or the roster with --roster)"
    aliases = ["members"]

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("search", nargs="?", default="", help="Filter by name")
        parser.add_argument("--roster", action="store_true", help="Show selected personnel")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        composer = ctx.composer
        if args.roster:
            rows = []
            for person in composer.draft.people:
                assignment = composer.draft.assignment_for(person.id)
                rows.append({
                    "id": person.id,
                    "name": person.display_name,
                    "seat": assignment.vessel_name if assignment else "",
                    "role": assignment.role if assignment else "",
                })
            return CommandResult(success=True, message=f"{len(rows)} selected", data=rows, format_hint="table")

        people = composer.search_people(args.search)
        return CommandResult(
            success=True,
            message=f"{len(people)} members",
            data=_people_rows(people),
            format_hint="table",
        )


class AddPersonCommand(CLICommand):
    name = "add-person"
    description = "Add a directory member to the mission"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("person_id", help="Member id")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        if not ctx.composer.add_person(args.person_id):
            return CommandResult(
                success=False,
                error=f"Cannot add {args.person_id} (unknown or already selected)",
                exit_code=1,
            )
        return CommandResult(success=True, message=f"Added {args.person_id}")


class RemovePersonCommand(CLICommand):
    name = "remove-person"
    description = "Remove a person and their assignment"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("person_id", help="Person id")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        if not ctx.composer.remove_person(args.person_id):
            return CommandResult(success=False, error=f"{args.person_id} is not selected", exit_code=1)
        return CommandResult(success=True, message=f"Removed {args.person_id}")


class ShipsCommand(CLICommand):
    """List pool vessels, or the mission's selected vessels with occupancy."""

    name = "ships"
    description = "List the vessel pool (or selected vessels with --selected)"
    aliases = ["vessels"]

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--selected", action="store_true", help="Show mission vessels")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        composer = ctx.composer
        if args.selected:
            rows = []
            for vessel in composer.draft.vessels:
                occ = composer.occupancy(vessel.vessel_id)
                rows.append({
                    "id": vessel.vessel_id,
                    "name": vessel.name,
                    "type": vessel.type,
                    "crew": occ.label,
                    "over": occ.is_over,
                })
            return CommandResult(success=True, message=f"{len(rows)} vessels", data=rows, format_hint="table")

        table = composer.picker.as_table(composer.draft)
        return CommandResult(success=True, message=table.render_ascii(), data=table.rows, format_hint="table")


class FilterCommand(CLICommand):
    name = "filter"
    description = "Filter the vessel pool by manufacturer and search text"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--manufacturer", "-m", default=None, help="Manufacturer (exact)")
        parser.add_argument("--search", "-s", default=None, help="Name or type contains")
        parser.add_argument("--clear", action="store_true", help="Clear filters")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        picker = ctx.composer.picker
        if args.clear:
            picker.clear_filters()
        if args.manufacturer is not None:
            picker.set_manufacturer(args.manufacturer)
        if args.search is not None:
            picker.set_search(args.search)
        return CommandResult(
            success=True,
            message=f"{len(picker.filtered())} of {len(picker.pool)} vessels match",
            data={"manufacturers": ", ".join(picker.manufacturers())},
        )


class PickCommand(CLICommand):
    name = "pick"
    description = "Toggle vessels in the pending selection"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("vessel_ids", nargs="+", help="Vessel ids")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        composer = ctx.composer
        rejected = []
        for vid in args.vessel_ids:
            if composer.picker.find(vid) is None or composer.draft.has_vessel(vid):
                rejected.append(vid)
            else:
                composer.toggle_pending(vid)
        pending = composer.picker.pending
        if rejected:
            return CommandResult(
                success=False,
                error=f"Not selectable: {', '.join(rejected)}",
                data={"pending": pending},
                exit_code=1,
            )
        return CommandResult(success=True, message=f"{len(pending)} pending", data={"pending": pending})


class AddPickedCommand(CLICommand):
    name = "add-picked"
    description = "Add all pending vessels to the mission"
    aliases = ["commit"]

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        added = ctx.composer.commit_pending()
        return CommandResult(success=True, message=f"Added {len(added)} vessels", data={"added": added})


class RemoveShipCommand(CLICommand):
    name = "remove-ship"
    description = "Remove a vessel and unassign its crew"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("vessel_id", help="Vessel id")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        if not ctx.composer.remove_vessel(args.vessel_id):
            return CommandResult(success=False, error=f"{args.vessel_id} is not in the mission", exit_code=1)
        return CommandResult(success=True, message=f"Removed {args.vessel_id}")


class AssignCommand(CLICommand):
    name = "assign"
    description = "Seat a person on a mission vessel"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("person_id", help="Person id")
        parser.add_argument("vessel_id", help="Vessel id")
        parser.add_argument("--role", "-r", default="", help="Crew role (default Crew)")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        composer = ctx.composer
        if not composer.assign(args.person_id, args.vessel_id, args.role):
            return CommandResult(
                success=False,
                error=f"Cannot assign {args.person_id} to {args.vessel_id}",
                exit_code=1,
            )
        occ = composer.occupancy(args.vessel_id)
        message = f"Assigned {args.person_id} to {args.vessel_id} ({occ.label})"
        if occ.is_over:
            message += " - over capacity"
        return CommandResult(success=True, message=message, data={"can_save": composer.can_save})


class UnassignCommand(CLICommand):
    name = "unassign"
    description = "Clear a person's assignment"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("person_id", help="Person id")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        if not ctx.composer.unassign(args.person_id):
            return CommandResult(success=False, error=f"{args.person_id} has no assignment", exit_code=1)
        return CommandResult(success=True, message=f"Unassigned {args.person_id}")


class GroundCommand(CLICommand):
    name = "ground"
    description = "Assign a person to ground support"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("person_id", help="Person id")
        parser.add_argument("--role", "-r", default="", help="Role (default Support)")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        if not ctx.composer.assign_ground_support(args.person_id, args.role):
            return CommandResult(success=False, error=f"{args.person_id} is not selected", exit_code=1)
        return CommandResult(success=True, message=f"{args.person_id} on ground support")


class StatusCommand(CLICommand):
    """Show save readiness, section errors and the summary."""

    name = "status"
    description = "Show validation status and mission summary"
    aliases = ["validate"]

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        composer = ctx.composer
        header = ctx.host.header()
        issues = composer.issues()
        lines = [f"Can save: {'yes' if composer.can_save else 'no'}"]
        if header.error:
            lines.append(f"Last error: {header.error}")
        for issue in issues:
            lines.append(f"  [{issue.stage.title}] {issue.message}")
        return CommandResult(
            success=True,
            message="\n".join(lines),
            data={
                "status": header.status,
                "errors": composer.errors.to_dict(),
                "summary": composer.summary().to_dict(),
                "issues": [i.to_error(composer.draft.overview.id).to_dict() for i in issues],
            },
        )


class SaveCommand(CLICommand):
    """Save through the host, exactly like the header Save button."""

    name = "save"
    description = "Save the mission to the persistence API"
    aliases = ["write"]

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        if ctx.client is None:
            return CommandResult(success=False, error="No persistence API configured", exit_code=1)

        host = ctx.host
        saved = ctx.run(host.click_save())
        if saved is None:
            if host.last_error:
                return CommandResult(success=False, error=f"Save failed: {host.last_error}", exit_code=1)
            issues = "; ".join(i.message for i in ctx.composer.issues())
            return CommandResult(success=False, error=f"Cannot save: {issues}", exit_code=1)
        return CommandResult(
            success=True,
            message=f"Saved mission {saved.get('id')}",
            data={"id": saved.get("id"), "updatedAt": saved.get("updatedAt")},
        )


class ExportCommand(CLICommand):
    """Write the save payload to a JSON file."""

    name = "export"
    description = "Export the mission payload as JSON"

    def configure_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("path", nargs="?", help="Output path")

    def execute(self, ctx: CLIContext, args: argparse.Namespace) -> CommandResult:
        draft = ctx.composer.draft
        path = args.path or ctx.mission_path or f"mission_{draft.overview.id}.json"
        payload = rules.build_save_payload(draft)
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(payload, f, indent=2, default=str)
        except OSError as e:
            return CommandResult(success=False, error=str(e), exit_code=1)
        ctx.mission_path = path
        return CommandResult(
            success=True,
            message=f"Exported to {path}",
            data={"path": path, "participants": len(payload["participants"])},
        )


DEFAULT_COMMANDS = [
    NewCommand,
    LoadCommand,
    ShowCommand,
    SetCommand,
    StageCommand,
    PeopleCommand,
    AddPersonCommand,
    RemovePersonCommand,
    ShipsCommand,
    FilterCommand,
    PickCommand,
    AddPickedCommand,
    RemoveShipCommand,
    AssignCommand,
    UnassignCommand,
    GroundCommand,
    StatusCommand,
    SaveCommand,
    ExportCommand,
]
