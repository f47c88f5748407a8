"""
Command-line interface for a cookbook club data file.

Every command loads the snapshot, runs one domain operation, saves the
snapshot when the operation changes it and prints the result as JSON.
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path

from pydantic_core import to_jsonable_python

from cookbook_club import __version__
from cookbook_club.core.config import settings
from cookbook_club.domain.clock import format_timestamp, utc_now
from cookbook_club.domain.roles import ClubPolicy, Role
from cookbook_club.errors import DomainError, DomainValidationError
from cookbook_club.schemas.storage import SnapshotExport, SnapshotImport, StorageInfo
from cookbook_club.services import club as club_service
from cookbook_club.services import collection as collection_service
from cookbook_club.services import cookbook as cookbook_service
from cookbook_club.services import membership as membership_service
from cookbook_club.services import meetup as meetup_service
from cookbook_club.services import notification as notification_service
from cookbook_club.services import recipe as recipe_service
from cookbook_club.services import reminder as reminder_service
from cookbook_club.services import user as user_service
from cookbook_club.storage import STORAGE_BACKENDS, SqliteStateStore, get_state_store
from cookbook_club.storage.snapshot import export_snapshot, import_snapshot

logger = logging.getLogger(__name__)

TEMPLATE_FILE_VERSION = 1


def hours_list(value: str) -> list[float]:
    """Parse `72,24,3,0` into non-negative numbers."""
    parts = [part.strip() for part in value.split(",")]
    if not parts or any(part == "" for part in parts):
        raise argparse.ArgumentTypeError(
            "Invalid hours list. Use comma-separated numbers like `72,24,3,0`."
        )
    return [non_negative_number(part) for part in parts]


def non_negative_number(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number) or number < 0:
        raise argparse.ArgumentTypeError(f"Invalid hours value: {value}")
    return number


def _read_json_file(path: str, label: str):
    absolute = Path(path).expanduser().resolve()
    if not absolute.exists():
        raise DomainValidationError(f"{label} file not found: {absolute}")
    raw = absolute.read_text(encoding="utf-8").strip()
    if not raw:
        raise DomainValidationError(f"{label} file is empty: {absolute}")
    try:
        return absolute, json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DomainValidationError(f"Invalid JSON in {label} file: {absolute} ({exc})") from exc


def _write_json_file(path: str, payload) -> Path:
    absolute = Path(path).expanduser().resolve()
    absolute.parent.mkdir(parents=True, exist_ok=True)
    absolute.write_text(_dumps(payload), encoding="utf-8")
    return absolute


def _dumps(payload) -> str:
    return json.dumps(to_jsonable_python(payload, by_alias=True), indent=2, ensure_ascii=False) + "\n"


# Handlers take the parsed arguments and the loaded snapshot.


def club_init(args, state):
    return club_service.init_club(
        state,
        club_name=args.name,
        host_name=args.host_name,
        host_email=args.host_email,
        host_phone=args.host_phone,
    )


def club_show(args, state):
    return club_service.show_club(state)


def club_set_policy(args, state):
    return club_service.set_policy(state, args.actor, args.policy)


def club_set_reminders(args, state):
    return reminder_service.set_reminder_policy(
        state,
        args.actor,
        meetup_window_hours=args.windows,
        recipe_prompt_hours=args.recipe_prompt_hours,
    )


def club_reminder_templates(args, state):
    return reminder_service.list_reminder_templates(state)


def club_set_reminder_template(args, state):
    return reminder_service.apply_reminder_template(state, args.actor, args.template)


def club_add_reminder_template(args, state):
    return reminder_service.add_reminder_template(
        state,
        args.actor,
        name=args.name,
        meetup_window_hours=args.windows,
        recipe_prompt_hours=args.recipe_prompt_hours,
    )


def club_remove_reminder_template(args, state):
    return reminder_service.remove_reminder_template(state, args.actor, args.name)


def club_export_reminder_templates(args, state):
    templates = reminder_service.export_custom_reminder_templates(state)
    exported_to = _write_json_file(
        args.out,
        {
            "version": TEMPLATE_FILE_VERSION,
            "exportedAt": format_timestamp(utc_now()),
            "templates": templates,
        },
    )
    return {"exportedTo": str(exported_to), "templateCount": len(templates)}


def club_import_reminder_templates(args, state):
    absolute, data = _read_json_file(args.source, "Template import")
    # Accept both an export file and a bare name -> policy mapping.
    templates = data.get("templates", data) if isinstance(data, dict) else data
    result = reminder_service.import_custom_reminder_templates(
        state,
        args.actor,
        templates=templates,
        overwrite=args.overwrite,
        prefix=args.prefix,
    )
    return {"importedFrom": str(absolute), **result.model_dump(by_alias=True)}


def user_add(args, state):
    return user_service.create_user(state, name=args.name, email=args.email, phone=args.phone)


def user_list(args, state):
    return user_service.list_users(state)


def member_invite(args, state):
    return membership_service.invite_member(state, args.actor, args.user, args.role)


def member_list(args, state):
    return membership_service.list_members(state)


def member_set_role(args, state):
    return membership_service.set_role(state, args.actor, args.user, args.role)


def host_show(args, state):
    return club_service.show_club(state).host


def host_set(args, state):
    return club_service.set_host(state, args.actor, args.user)


def meetup_show(args, state):
    if args.id:
        return meetup_service.get_meetup(state, args.id)
    return meetup_service.get_upcoming_meetup(state)


def meetup_list(args, state):
    return meetup_service.list_meetups(state)


def meetup_schedule(args, state):
    return meetup_service.schedule_upcoming_meetup(state, args.actor, args.at)


def meetup_set_theme(args, state):
    return meetup_service.set_meetup_theme(state, args.actor, args.theme)


def meetup_advance(args, state):
    return meetup_service.advance_meetup(state, args.actor)


def recipe_add(args, state):
    return recipe_service.add_recipe(
        state,
        args.actor,
        title=args.title,
        content=args.content,
        image_path=str(Path(args.image).expanduser().resolve()),
    )


def recipe_list(args, state):
    return recipe_service.list_meetup_recipes(state, args.actor, args.meetup)


def recipe_favorite(args, state):
    return recipe_service.favorite_recipe(state, args.actor, args.recipe)


def cookbook_personal_add(args, state):
    return collection_service.add_favorite_to_collection(
        state, args.actor, args.recipe, args.collection
    )


def cookbook_personal_list(args, state):
    return collection_service.list_personal_collections(state, args.actor)


def access_grant_past(args, state):
    return cookbook_service.grant_past_cookbook_access(
        state,
        args.actor,
        args.user,
        from_meetup_id=args.from_meetup,
        all_past=args.all,
    )


def notify_list(args, state):
    return notification_service.list_pending_notifications(state, now=args.now, user_id=args.user)


def notify_run(args, state):
    return notification_service.run_notifications(state, now=args.now)


def data_export(args, state):
    return SnapshotExport(exported_to=str(export_snapshot(args.out, state)))


# State-free handlers take the parsed arguments and the store.


def data_import(args, store):
    imported = import_snapshot(args.source)
    store.save(imported)
    return SnapshotImport(
        imported_from=str(Path(args.source).expanduser().resolve()),
        active_data_file=str(store.path),
    )


def data_info(args, store):
    if isinstance(store, SqliteStateStore):
        return store.info()
    return StorageInfo(
        file_path=str(store.path),
        storage="json",
        note="Detailed table stats are only available for --storage sqlite.",
    )


def data_doctor(args, store):
    if isinstance(store, SqliteStateStore):
        return store.repair() if args.repair else store.doctor()
    return {
        "filePath": str(store.path),
        "storage": "json",
        "note": "`data doctor` is only available for --storage sqlite.",
    }


def show_version(args, store):
    return {"version": __version__}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cookbook-club", description="Run a single cooking club from the command line."
    )
    parser.add_argument("--data", help="Data file (default: data/state.json or data/state.sqlite)")
    parser.add_argument(
        "--storage", choices=STORAGE_BACKENDS, help="Storage backend (default: COOKBOOK_STORAGE or json)"
    )
    groups = parser.add_subparsers(dest="group", metavar="<command>", required=True)

    def command(group, name, handler, summary, mutates=True, stateless=False):
        sub = group.add_parser(name, help=summary)
        sub.set_defaults(handler=handler, mutates=mutates, stateless=stateless)
        return sub

    def actor(sub):
        sub.add_argument("--actor", required=True, help="Acting user id")

    # club
    club = groups.add_parser("club", help="Club settings and reminder policy").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(club, "init", club_init, "Create the club and its host")
    sub.add_argument("--name", required=True)
    sub.add_argument("--host-name", required=True)
    sub.add_argument("--host-email")
    sub.add_argument("--host-phone")
    command(club, "show", club_show, "Show the club, host and upcoming meetup", mutates=False)
    sub = command(club, "set-policy", club_set_policy, "Open or close membership")
    actor(sub)
    sub.add_argument("--policy", required=True, choices=[p.value for p in ClubPolicy])
    sub = command(club, "set-reminders", club_set_reminders, "Replace the reminder policy")
    actor(sub)
    sub.add_argument("--windows", type=hours_list, help="Hours before the meetup, e.g. 72,24,0")
    sub.add_argument("--recipe-prompt-hours", type=non_negative_number)
    command(club, "reminder-templates", club_reminder_templates, "List reminder templates", mutates=False)
    sub = command(club, "set-reminder-template", club_set_reminder_template, "Apply a reminder template")
    actor(sub)
    sub.add_argument("--template", required=True)
    sub = command(club, "add-reminder-template", club_add_reminder_template, "Save a custom template")
    actor(sub)
    sub.add_argument("--name", required=True)
    sub.add_argument("--windows", required=True, type=hours_list)
    sub.add_argument("--recipe-prompt-hours", type=non_negative_number)
    sub = command(club, "remove-reminder-template", club_remove_reminder_template, "Delete a custom template")
    actor(sub)
    sub.add_argument("--name", required=True)
    sub = command(
        club,
        "export-reminder-templates",
        club_export_reminder_templates,
        "Write custom templates to a file",
        mutates=False,
    )
    sub.add_argument("--out", required=True)
    sub = command(
        club, "import-reminder-templates", club_import_reminder_templates, "Merge templates from a file"
    )
    actor(sub)
    sub.add_argument("--in", dest="source", required=True)
    sub.add_argument("--overwrite", action="store_true")
    sub.add_argument("--prefix")

    # user
    user = groups.add_parser("user", help="Users").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(user, "add", user_add, "Register a user")
    sub.add_argument("--name", required=True)
    sub.add_argument("--email")
    sub.add_argument("--phone")
    command(user, "list", user_list, "List users", mutates=False)

    # member
    member = groups.add_parser("member", help="Club membership").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(member, "invite", member_invite, "Add a user to the club")
    actor(sub)
    sub.add_argument("--user", required=True)
    sub.add_argument("--role", default=Role.MEMBER.value)
    command(member, "list", member_list, "List members", mutates=False)
    sub = command(member, "set-role", member_set_role, "Change a member's role")
    actor(sub)
    sub.add_argument("--user", required=True)
    sub.add_argument("--role", required=True)

    # host
    host = groups.add_parser("host", help="Club host").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    command(host, "show", host_show, "Show the current host", mutates=False)
    sub = command(host, "set", host_set, "Transfer the host role")
    actor(sub)
    sub.add_argument("--user", required=True)

    # meetup
    meetup = groups.add_parser("meetup", help="Meetups").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(meetup, "show", meetup_show, "Show the upcoming meetup or one by id", mutates=False)
    sub.add_argument("--id")
    command(meetup, "list", meetup_list, "List all meetups", mutates=False)
    sub = command(meetup, "schedule", meetup_schedule, "Date the upcoming meetup")
    actor(sub)
    sub.add_argument("--at", required=True, help="ISO 8601 date-time")
    sub = command(meetup, "set-theme", meetup_set_theme, "Set the upcoming meetup's theme")
    actor(sub)
    sub.add_argument("--theme", required=True)
    sub = command(meetup, "advance", meetup_advance, "Close the upcoming meetup and open the next")
    actor(sub)

    # recipe
    recipe = groups.add_parser("recipe", help="Recipes").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(recipe, "add", recipe_add, "Add a recipe to the upcoming meetup")
    actor(sub)
    sub.add_argument("--title", required=True)
    sub.add_argument("--content", required=True)
    sub.add_argument("--image", required=True)
    sub = command(recipe, "list", recipe_list, "List a meetup's recipes", mutates=False)
    actor(sub)
    sub.add_argument("--meetup")
    sub = command(recipe, "favorite", recipe_favorite, "Favorite a recipe")
    actor(sub)
    sub.add_argument("--recipe", required=True)

    # cookbook
    cookbook = groups.add_parser("cookbook", help="Personal cookbook").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(cookbook, "personal-add", cookbook_personal_add, "File a favorite under a collection")
    actor(sub)
    sub.add_argument("--recipe", required=True)
    sub.add_argument("--collection", required=True)
    sub = command(
        cookbook, "personal-list", cookbook_personal_list, "List collections with recipes", mutates=False
    )
    actor(sub)

    # access
    access = groups.add_parser("access", help="Past cookbook access").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(access, "grant-past", access_grant_past, "Grant access to past cookbooks")
    actor(sub)
    sub.add_argument("--user", required=True)
    scope = sub.add_mutually_exclusive_group()
    scope.add_argument("--from-meetup")
    scope.add_argument("--all", action="store_true")

    # data
    data = groups.add_parser("data", help="Data file maintenance").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(data, "export", data_export, "Write the snapshot to a JSON file", mutates=False)
    sub.add_argument("--out", required=True)
    sub = command(data, "import", data_import, "Replace the data with a JSON snapshot", stateless=True)
    sub.add_argument("--in", dest="source", required=True)
    command(data, "info", data_info, "Show storage details", stateless=True)
    sub = command(data, "doctor", data_doctor, "Check SQLite storage health", stateless=True)
    sub.add_argument("--repair", action="store_true", help="Back up, fix and compact the database")

    # notify
    notify = groups.add_parser("notify", help="Notifications").add_subparsers(
        dest="command", metavar="<subcommand>", required=True
    )
    sub = command(notify, "list", notify_list, "List undelivered notifications", mutates=False)
    sub.add_argument("--now", help="Only notifications due at this ISO time")
    sub.add_argument("--user")
    sub = command(notify, "run", notify_run, "Deliver due notifications")
    sub.add_argument("--now", help="Delivery time (default: now)")

    command(groups, "version", show_version, "Print the version", stateless=True)
    return parser


def run(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        store = get_state_store(args.storage or settings.storage, args.data)
        if args.stateless:
            result = args.handler(args, store)
        else:
            state = store.load()
            result = args.handler(args, state)
            if args.mutates:
                store.save(state)
    except DomainError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(_dumps(result))
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
