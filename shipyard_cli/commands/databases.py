from shipyard.masking import mask_connection_string
from shipyard_cli.client import ApiClient
from shipyard_cli.formatter import details, format_datetime, table, to_json
from shipyard_cli.prompts import confirm

DATABASE_COLUMNS = [
    ("ID", "id"),
    ("Name", "name"),
    ("Type", "type"),
    ("Project", "projectId"),
    ("Created", "created"),
]


def list_databases(args, client: ApiClient) -> int:
    databases = client.get_databases(project_id=args.project, type=args.type)
    if args.json:
        print(to_json(databases))
        return 0
    if not databases:
        print("No databases yet.")
        return 0
    rows = [{**d, "created": format_datetime(d.get("createdAt"))} for d in databases]
    print(table(rows, DATABASE_COLUMNS))
    return 0


def create_database(args, client: ApiClient) -> int:
    payload = {"name": args.name, "type": args.type, "projectId": args.project}
    if args.connection_string:
        payload["connectionString"] = args.connection_string
    database = client.create_database(payload)
    if args.json:
        print(to_json(database))
        return 0
    print(f"Database {database['name']} created (id {database['id']}).")
    print(details([
        ("Type", database["type"]),
        ("Project", database.get("projectId")),
        ("Connection", database["connectionString"]),
    ]))
    return 0


def show_database(args, client: ApiClient) -> int:
    database = client.get_database(args.database_id)
    connection = database["connectionString"]
    if not args.show_credentials:
        connection = mask_connection_string(connection)
    if args.json:
        print(to_json({**database, "connectionString": connection}))
        return 0

    print(f"Database {database['name']}")
    print(details([
        ("ID", database["id"]),
        ("Type", database["type"]),
        ("Project", database.get("projectId")),
        ("Created", format_datetime(database.get("createdAt"))),
        ("Connection", connection),
    ]))
    if not args.show_credentials:
        print("\nPassword hidden. Use --show-credentials to reveal it.")
    return 0


def delete_database(args, client: ApiClient) -> int:
    if not args.yes and not confirm(f"Delete database {args.database_id}? Its data cannot be recovered."):
        print("Aborted.")
        return 1
    client.delete_database(args.database_id)
    print(f"Database {args.database_id} deleted.")
    return 0


def register(subparsers) -> None:
    parser = subparsers.add_parser("databases", help="Manage databases")
    commands = parser.add_subparsers(dest="action", required=True)

    list_parser = commands.add_parser("list", help="List databases")
    list_parser.add_argument("--project", "-p", type=int, help="Only databases of this project")
    list_parser.add_argument("--type", "-t", help="Only databases of this type, e.g. PostgreSQL")
    list_parser.set_defaults(func=list_databases)

    create_parser = commands.add_parser("create", help="Provision a database")
    create_parser.add_argument("--name", "-n", required=True)
    create_parser.add_argument("--type", "-t", required=True, help="PostgreSQL, MySQL, Redis, MongoDB, ...")
    create_parser.add_argument("--project", "-p", type=int, help="Project that owns the database")
    create_parser.add_argument("--connection-string", help="Use an existing database instead of generating credentials")
    create_parser.set_defaults(func=create_database)

    info_parser = commands.add_parser("info", help="Show one database and its connection string")
    info_parser.add_argument("database_id", type=int)
    info_parser.add_argument("--show-credentials", action="store_true", help="Print the password in plain text")
    info_parser.set_defaults(func=show_database)

    delete_parser = commands.add_parser("delete", help="Delete a database")
    delete_parser.add_argument("database_id", type=int)
    delete_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=delete_database)
