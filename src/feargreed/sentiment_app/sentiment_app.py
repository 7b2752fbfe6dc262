"""Fear & Greed app: standalone NiceGUI application for SentimentDashboardController.

Runs in web or native mode via env vars. Uses @ui.page("/") pattern; the
dataset is loaded once per page visit.

Run:
    python -m feargreed.sentiment_app.sentiment_app

Env vars:
    FEARGREED_GUI_NATIVE: 1/0 (default 0)
    FEARGREED_GUI_RELOAD: 1/0 (default 0)
    FEARGREED_DATA_SOURCE: CSV path or URL (overrides saved config)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import os
import multiprocessing as mp
from multiprocessing import freeze_support
from pathlib import Path

from nicegui import run, ui

from feargreed.errors import DataLoadError, FearGreedError, NoDataError
from feargreed.sentiment_app import header
from feargreed.sentiment_widget.dashboard_config import DashboardConfig
from feargreed.sentiment_widget.dashboard_controller import SentimentDashboardController
from feargreed.sentiment_widget.dataset import load_records
from feargreed.utils import setUpGuiDefaults
from feargreed.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

APP_TITLE = "Fear & Greed Index"
DATA_SOURCE_ENV = "FEARGREED_DATA_SOURCE"
STORAGE_SECRET = "feargreed-dashboard-session-secret"


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_data_dir() -> Path:
    """Resolve the project's data/ directory.

    Package layout: <root>/src/feargreed/sentiment_app/sentiment_app.py
    Data: <root>/data/
    """
    return Path(__file__).resolve().parent.parent.parent.parent / "data"


def resolve_data_source(configured: str) -> str:
    """Pick the dataset location: env var, else config; bare filenames resolve into data/.

    URLs and paths that exist as given are returned unchanged.
    """
    source = os.getenv(DATA_SOURCE_ENV) or configured
    if "://" in source:
        return source
    path = Path(source).expanduser()
    if path.is_absolute() or path.exists():
        return str(path)
    return str(get_data_dir() / path)


def load_error_hints(error: BaseException) -> list[str]:
    """Troubleshooting hints shown under a load error, most specific first."""
    msg = str(error)
    hints: list[str] = []
    if isinstance(error, NoDataError):
        hints.append("The file was read but no row had a numeric value and a classification.")
    elif "404" in msg or "not found" in msg.lower():
        hints.append(f"File not found. Check {DATA_SOURCE_ENV} or the data_source in the dashboard config.")
    elif any(s in msg for s in ("URLError", "HTTP Error", "Name or service", "timed out", "Connection")):
        hints.append("Network error: check your connection or use a local CSV file.")
    hints.append("The CSV needs the columns timestamp, value and classification.")
    return hints


def build_error_card(container: ui.element, error: BaseException) -> None:
    """Show a load error with hints and a Retry button (reloads the page, no automatic retry)."""
    with container:
        with ui.card().classes("w-full bg-red-50 border-2 border-red-500"):
            ui.label("Error Loading Data").classes("text-lg font-bold text-negative")
            ui.label(f"Error message: {error}").classes("font-bold")
            for hint in load_error_hints(error):
                ui.label(hint).classes("text-orange-700")
            ui.button("Retry", on_click=ui.navigate.reload).props("color=positive")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
async def home() -> None:
    """Home page: header + dashboard, or an error card if the dataset cannot be used."""

    setUpGuiDefaults('text-sm')

    ui.page_title(APP_TITLE)

    header.build_header(APP_TITLE)

    cfg = DashboardConfig.load()
    source = resolve_data_source(cfg.get_data_source())

    with ui.column().classes("w-full gap-4 p-4") as main_container:
        loading = ui.label("Loading data...").classes("text-gray-600")

    try:
        records = await run.io_bound(load_records, source, secondary_column=cfg.data.secondary_column)
        ctrl = SentimentDashboardController(records, config=cfg)
    except (DataLoadError, NoDataError) as e:
        logger.error("Failed to load %s: %s", source, e)
        loading.delete()
        build_error_card(main_container, e)
        return
    except Exception as e:
        logger.exception("Unexpected error loading %s: %s", source, e)
        loading.delete()
        build_error_card(main_container, FearGreedError(str(e)))
        return

    loading.delete()
    ctrl.build(container=main_container)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the Fear & Greed application.

    Defaults (no env vars, no args):
      - native=False
      - reload=False
    """
    native_bool = _env_bool("FEARGREED_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("FEARGREED_GUI_RELOAD", False) if reload is None else reload

    from nicegui import native as native_module
    if native_bool:
        port = _env_int("PORT", native_module.find_open_port())
    else:
        port = _env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting Fear & Greed app: host=%s port=%s reload=%s native=%s",
        host,
        port,
        reload,
        native_bool,
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "storage_secret": STORAGE_SECRET,
        "title": APP_TITLE,
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 800)
    ui.run(**run_kwargs)


if __name__ == "__main__":
    freeze_support()
    configure_logging()
    current_process = mp.current_process()
    if current_process.name == "MainProcess":
        main()
    else:
        logger.debug("Skipping GUI startup in worker process: %s", current_process.name)
