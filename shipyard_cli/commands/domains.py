from shipyard_cli.client import ApiClient
from shipyard_cli.formatter import format_datetime, table, to_json
from shipyard_cli.prompts import confirm

DOMAIN_COLUMNS = [
    ("ID", "id"),
    ("Domain", "name"),
    ("Status", "status"),
    ("Project", "projectId"),
    ("Created", "created"),
]


def list_domains(args, client: ApiClient) -> int:
    domains = client.get_domains(project_id=args.project)
    if args.json:
        print(to_json(domains))
        return 0
    if not domains:
        print("No domains configured.")
        return 0
    rows = [{**d, "created": format_datetime(d.get("createdAt"))} for d in domains]
    print(table(rows, DOMAIN_COLUMNS))
    return 0


def add_domain(args, client: ApiClient) -> int:
    domain = client.create_domain({"name": args.domain, "projectId": args.project})
    if args.json:
        print(to_json(domain))
        return 0
    print(f"Domain {domain['name']} added (id {domain['id']}, status {domain['status']}).")
    print("Point a CNAME record at your Shipyard host to activate it.")
    return 0


def assign_domain(args, client: ApiClient) -> int:
    domain = client.update_domain(args.domain_id, {"projectId": args.project_id})
    if args.json:
        print(to_json(domain))
        return 0
    print(f"Domain {domain['name']} assigned to project {domain['projectId']}.")
    return 0


def remove_domain(args, client: ApiClient) -> int:
    if not args.yes and not confirm(f"Remove domain {args.domain_id}?"):
        print("Aborted.")
        return 1
    client.delete_domain(args.domain_id)
    print(f"Domain {args.domain_id} removed.")
    return 0


def register(subparsers) -> None:
    parser = subparsers.add_parser("domains", help="Manage custom domains")
    commands = parser.add_subparsers(dest="action", required=True)

    list_parser = commands.add_parser("list", help="List domains")
    list_parser.add_argument("--project", "-p", type=int, help="Only domains of this project")
    list_parser.set_defaults(func=list_domains)

    add_parser = commands.add_parser("add", help="Add a domain")
    add_parser.add_argument("--domain", "-d", required=True, help="Domain name, e.g. example.com")
    add_parser.add_argument("--project", "-p", type=int, help="Project to attach the domain to")
    add_parser.set_defaults(func=add_domain)

    assign_parser = commands.add_parser("assign", help="Attach a domain to a project")
    assign_parser.add_argument("domain_id", type=int)
    assign_parser.add_argument("project_id", type=int)
    assign_parser.set_defaults(func=assign_domain)

    remove_parser = commands.add_parser("remove", help="Remove a domain")
    remove_parser.add_argument("domain_id", type=int)
    remove_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    remove_parser.set_defaults(func=remove_domain)
