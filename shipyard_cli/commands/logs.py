from shipyard_cli.client import ApiClient
from shipyard_cli.formatter import format_datetime, table, to_json

ACTIVITY_COLUMNS = [
    ("Time", "time"),
    ("Type", "type"),
    ("Project", "projectId"),
    ("Description", "description"),
]


def list_activity(args, client: ApiClient) -> int:
    if args.project is not None:
        activities = client.get_project_activities(args.project, limit=args.limit)
    else:
        activities = client.get_activities(limit=args.limit)
    if args.json:
        print(to_json(activities))
        return 0
    if not activities:
        print("No activity yet.")
        return 0
    rows = [{**a, "time": format_datetime(a.get("createdAt"))} for a in activities]
    print(table(rows, ACTIVITY_COLUMNS))
    return 0


def register(subparsers) -> None:
    parser = subparsers.add_parser("logs", help="Show the activity timeline")
    commands = parser.add_subparsers(dest="action", required=True)

    list_parser = commands.add_parser("list", help="Recent activity, newest first")
    list_parser.add_argument("--project", "-p", type=int, help="Only activity of this project")
    list_parser.add_argument("--limit", "-l", type=int, default=10, help="Number of entries (default: 10)")
    list_parser.set_defaults(func=list_activity)
