from shipyard_cli.client import ApiClient
from shipyard_cli.formatter import details, format_datetime, to_json


def _bar(percent: int, width: int = 20) -> str:
    filled = round(width * max(0, min(percent, 100)) / 100)
    return "[" + "#" * filled + "." * (width - filled) + f"] {percent}%"


def show_metrics(args, client: ApiClient) -> int:
    metrics = client.get_system_metrics()
    if args.json:
        print(to_json(metrics))
        return 0
    print(f"System metrics ({format_datetime(metrics.get('timestamp'))})")
    print(details([
        ("CPU", _bar(metrics["cpuUsage"])),
        ("Memory", _bar(metrics["memoryUsage"])),
        ("Disk", _bar(metrics["diskUsage"])),
        ("Network", f"{metrics['networkUsage']} Mbps"),
    ]))
    return 0


def register(subparsers) -> None:
    parser = subparsers.add_parser("metrics", help="Show server resource usage")
    commands = parser.add_subparsers(dest="action", required=True)

    show_parser = commands.add_parser("show", help="Latest system metrics snapshot")
    show_parser.set_defaults(func=show_metrics)
