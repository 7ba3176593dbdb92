import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    load_app_config,
    resolve_config_path,
)
from app_config_parser import log_level_value
from completion import (
    ChimeChannel,
    CompletionSignaler,
    NotificationChannel,
    SignalChannel,
    UIFlagChannel,
)
from countdown import DeadlineClock, TimerStateMachine, resolve_time_source
from countdown.contracts import CycleStoreLike
from countdown.modes import ModeTable
from runtime import RuntimeBootstrap, RuntimeEngine
from runtime.ui import RuntimeUIPublisher
from server import ServerConfigurationError, UIServer, UIServerConfig
from storage import FileCycleStore, InMemoryCycleStore


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_chime")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logging.getLogger("pomodoro_chime").info("%s received, stopping...", signal_name)
        engine.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_ui_server(app_config: AppConfig, logger: logging.Logger) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        return None

    try:
        ui_server = UIServer(
            config=ui_server_config,
            logger=logging.getLogger("ui_server"),
        )
        logger.info("Starting UI server...")
        ui_server.start(timeout_seconds=5.0)
        logger.info(
            "UI server ready at http://%s:%d",
            ui_server.host,
            ui_server.port,
        )
        return ui_server
    except Exception as error:
        logger.error("UI server startup failed: %s", error)
        logger.warning("Continuing without UI server.")
        return None


def build_channels(
    app_config: AppConfig,
    ui: RuntimeUIPublisher,
    logger: logging.Logger,
) -> list[SignalChannel]:
    channels: list[SignalChannel] = []

    if app_config.chime.enabled:
        try:
            # PortAudio is only loaded when the chime is wanted.
            from completion.output import SoundDeviceAudioOutput

            output = SoundDeviceAudioOutput(
                output_device_index=app_config.chime.output_device,
                logger=logging.getLogger("completion.output"),
            )
            channels.append(
                ChimeChannel.from_settings(
                    app_config.chime,
                    output,
                    logger=logging.getLogger("completion.chime"),
                )
            )
            logger.info("Completion chime enabled")
        except (ImportError, OSError) as error:
            logger.warning("Completion chime disabled: %s", error)

    if app_config.notification.enabled:
        channels.append(
            NotificationChannel.from_settings(
                app_config.notification,
                logger=logging.getLogger("completion.notification"),
            )
        )
        logger.info("Desktop notifications enabled")

    channels.append(UIFlagChannel(ui))
    return channels


def build_cycle_store(app_config: AppConfig, logger: logging.Logger) -> CycleStoreLike:
    if not app_config.storage.enabled:
        logger.info("Cycle persistence disabled; counting in memory only")
        return InMemoryCycleStore()

    path = Path(app_config.storage.cycle_file) if app_config.storage.cycle_file else None
    store = FileCycleStore(path=path, logger=logging.getLogger("storage"))
    logger.info("Cycle counter file: %s", store.path)
    return store


def main() -> int:
    """Run the countdown timer with its UI server and completion signals."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config(str(config_path))
        logger.info("Loaded runtime config: %s", config_path)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(log_level_value(app_config.runtime.log_level))

    try:
        modes = ModeTable.from_settings(app_config.modes)
        time_source = resolve_time_source(
            app_config.runtime.clock,
            logger=logging.getLogger("countdown.clock"),
        )
    except ValueError as error:
        logger.error("Configuration error: %s", error)
        return 1

    ui_server = build_ui_server(app_config, logger)
    ui = RuntimeUIPublisher(ui_server)

    signaler = CompletionSignaler(
        build_channels(app_config, ui, logger),
        on_failure=ui.publish_channel_failure,
        logger=logging.getLogger("completion"),
    )
    logger.info("Completion channels: %s", ", ".join(signaler.channel_names))

    timer = TimerStateMachine(
        modes=modes,
        signaler=signaler,
        cycle_store=build_cycle_store(app_config, logger),
        clock=DeadlineClock(time_source),
        logger=logging.getLogger("countdown"),
    )

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            timer=timer,
            ui=ui,
            signaler=signaler,
            ui_server=ui_server,
        )
    )
    setup_signal_handlers(engine)
    return engine.run()


if __name__ == "__main__":
    sys.exit(main())
