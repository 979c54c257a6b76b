"""Launcher: serve one focus panel over websocket until interrupted."""

from __future__ import annotations

import logging
import signal
import sys
import time
from pathlib import Path

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).resolve().parent))

from app_config import (
    AppConfigurationError,
    ConfigProvider,
    load_app_config,
)
from runtime import (
    ClockCommandRouter,
    FocusPanel,
    HostNotifier,
    JsonStateStore,
    RuntimeUIPublisher,
)
from server import ServerConfigurationError, UIServer, UIServerConfig
from session_clock import LoopCountdown


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("focusdev")


def main() -> int:
    """Run the panel server process until interrupted."""
    logger = setup_logging()

    try:
        app_config = load_app_config()
        server_config = UIServerConfig.from_settings(app_config.ui_server)
    except (AppConfigurationError, ServerConfigurationError) as error:
        logger.error("Configuration error: %s", error)
        return 1

    if not server_config.enabled:
        logger.info("UI server disabled via ui_server.enabled=false")
        return 0

    config_provider = ConfigProvider(app_config)
    server = UIServer(config=server_config, logger=logging.getLogger("ui_server"))
    ui = RuntimeUIPublisher(server)
    store = JsonStateStore(app_config.state.state_file)
    notifier = HostNotifier(store=store, ui=ui, config_path=app_config.source_file)

    try:
        server.start()
    except RuntimeError as error:
        logger.error("%s", error)
        return 1

    loop = server.loop
    if loop is None:
        logger.error("UI server loop unavailable after startup")
        server.stop()
        return 1

    panel = FocusPanel(
        config_provider=config_provider,
        notifier=notifier,
        store=store,
        ui=ui,
        countdown=LoopCountdown(loop),
    )
    router = ClockCommandRouter(panel=panel, ui=ui)

    try:
        server.run_sync(panel.activate)
        server.set_message_handler(router.handle_raw)
        logger.info("State file: %s", store.path)
        logger.info("Press Ctrl+C to stop.")

        shutdown = False

        def handle_signal(signum, frame) -> None:
            del frame
            nonlocal shutdown
            logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
            shutdown = True

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

        poll_seconds = app_config.state.config_poll_seconds
        next_config_poll = time.monotonic() + poll_seconds
        while not shutdown:
            time.sleep(0.2)
            if time.monotonic() >= next_config_poll:
                next_config_poll = time.monotonic() + poll_seconds
                server.call_soon(config_provider.reload_if_modified)

    except KeyboardInterrupt:
        logger.info("Stopping by user request.")
    finally:
        server.set_message_handler(None)
        try:
            server.run_sync(panel.dispose)
        except Exception as error:
            logger.error("Failed to persist panel state: %s", error)
        server.stop()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
