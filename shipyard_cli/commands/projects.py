from shipyard_cli.client import ApiClient
from shipyard_cli.formatter import details, format_datetime, table, to_json
from shipyard_cli.prompts import confirm

PROJECT_COLUMNS = [
    ("ID", "id"),
    ("Name", "name"),
    ("Framework", "framework"),
    ("Status", "status"),
    ("Domain", "domain"),
    ("Updated", "updated"),
]


def list_projects(args, client: ApiClient) -> int:
    projects = client.get_projects()
    if args.json:
        print(to_json(projects))
        return 0
    if not projects:
        print("You have no projects yet.")
        print("Create one with `shipyard projects create`.")
        return 0
    rows = [{**p, "updated": format_datetime(p.get("updatedAt"))} for p in projects]
    print(table(rows, PROJECT_COLUMNS))
    return 0


def show_project(args, client: ApiClient) -> int:
    project = client.get_project(args.project_id)
    if args.json:
        print(to_json(project))
        return 0
    print(f"Project {project['name']}")
    print(details([
        ("ID", project["id"]),
        ("Framework", project["framework"]),
        ("Repository", project["repositoryUrl"]),
        ("Branch", project["branch"]),
        ("Domain", project.get("domain")),
        ("Status", project["status"]),
        ("Created", format_datetime(project.get("createdAt"))),
        ("Updated", format_datetime(project.get("updatedAt"))),
    ]))
    activities = client.get_project_activities(args.project_id, limit=5)
    if activities:
        print("\nRecent activity:")
        for activity in activities:
            print(f"  {format_datetime(activity['createdAt'])}  {activity['description']}")
    return 0


def create_project(args, client: ApiClient) -> int:
    project = client.create_project({
        "name": args.name,
        "framework": args.framework,
        "repositoryUrl": args.repo,
        "branch": args.branch,
        "domain": args.domain,
    })
    if args.json:
        print(to_json(project))
        return 0
    print(f"Project {project['name']} created (id {project['id']}).")
    print(details([
        ("Framework", project["framework"]),
        ("Repository", project["repositoryUrl"]),
        ("Branch", project["branch"]),
        ("Domain", project.get("domain")),
        ("Status", project["status"]),
    ]))
    return 0


def restart_project(args, client: ApiClient) -> int:
    project = client.update_project(args.project_id, {"status": "building"})
    if args.json:
        print(to_json(project))
        return 0
    print(f"Project {project['name']} is rebuilding (status {project['status']}).")
    print(f"Follow progress with `shipyard logs list --project {project['id']}`.")
    return 0


def delete_project(args, client: ApiClient) -> int:
    project = client.get_project(args.project_id)
    prompt = (
        f"Delete project '{project['name']}' with all of its domains and databases?"
    )
    if not args.yes and not confirm(prompt):
        print("Aborted.")
        return 1
    client.delete_project(args.project_id)
    print(f"Project {project['name']} deleted.")
    return 0


def register(subparsers) -> None:
    parser = subparsers.add_parser("projects", help="Manage your deployed projects")
    commands = parser.add_subparsers(dest="action", required=True)

    list_parser = commands.add_parser("list", help="List all projects")
    list_parser.set_defaults(func=list_projects)

    info_parser = commands.add_parser("info", help="Show one project and its recent activity")
    info_parser.add_argument("project_id", type=int)
    info_parser.set_defaults(func=show_project)

    create_parser = commands.add_parser("create", help="Create a new project")
    create_parser.add_argument("--name", "-n", required=True, help="Project name")
    create_parser.add_argument("--framework", "-f", required=True, help="React, Vue.js, Next.js, Express.js, ...")
    create_parser.add_argument("--repo", "-r", required=True, help="Git repository URL")
    create_parser.add_argument("--branch", "-b", default="main", help="Git branch to deploy (default: main)")
    create_parser.add_argument("--domain", "-d", help="Custom domain for the project")
    create_parser.set_defaults(func=create_project)

    restart_parser = commands.add_parser("restart", help="Redeploy a project")
    restart_parser.add_argument("project_id", type=int)
    restart_parser.set_defaults(func=restart_project)

    delete_parser = commands.add_parser("delete", help="Delete a project and its resources")
    delete_parser.add_argument("project_id", type=int)
    delete_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=delete_project)
