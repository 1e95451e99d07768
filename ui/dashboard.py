"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class FetchInfo:
    """Info about a single upstream fetch."""

    def __init__(
        self,
        route: str,
        url: str,
        status: int,
        content_type: str,
        rewritten: bool,
        size: int,
        timestamp: datetime,
    ):
        self.route = route
        self.url = url[:80] + "..." if len(url) > 80 else url
        self.status = status
        self.content_type = content_type.split(";", 1)[0].strip() or "?"
        self.rewritten = rewritten
        self.size = size
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent fetches and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._fetches: list[FetchInfo] = []
        self._max_fetches = 12
        self._counts = {"rewritten": 0, "passthrough": 0, "errors": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_fetch(
        self,
        route: str,
        url: str,
        status: int,
        content_type: str,
        *,
        rewritten: bool = False,
        size: int = 0,
    ) -> None:
        """Log a successful upstream fetch."""
        with self._lock:
            self._counts["rewritten" if rewritten else "passthrough"] += 1
            info = FetchInfo(
                route=route,
                url=url,
                status=status,
                content_type=content_type,
                rewritten=rewritten,
                size=size,
                timestamp=datetime.now(),
            )
            self._fetches.insert(0, info)
            self._fetches = self._fetches[: self._max_fetches]
            self._refresh()

            write_cli_log(
                "FETCH",
                url[:200],
                route=route,
                status=status,
                type=info.content_type,
                bytes=size,
                rewritten=rewritten,
            )

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._counts["errors"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_fetches_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Frame Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Rewritten: {self._counts['rewritten']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Passthrough: {self._counts['passthrough']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Errors: {self._counts['errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_fetches_panel(self) -> Panel:
        """Build recent fetches panel."""
        if self._fetches:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Route", width=6)
            table.add_column("Status", width=6)
            table.add_column("Type", width=24)
            table.add_column("Size", justify="right", width=9)
            table.add_column("URL", ratio=1)

            for fetch in self._fetches:
                content_type = Text(fetch.content_type)
                if fetch.rewritten:
                    content_type.append(" (rw)", style="blue")
                table.add_row(
                    fetch.timestamp.strftime("%H:%M:%S"),
                    fetch.route,
                    str(fetch.status),
                    content_type,
                    _format_size(fetch.size),
                    Text(fetch.url),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Fetches[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            proxy = self.config.proxy
            content = Text(
                f"Open http://{proxy.host}:{proxy.port}{self.config.rewrite.endpoint}?url=example.com",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
