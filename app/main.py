import asyncio
import signal
from typing import Optional

from dotenv import load_dotenv

from infrastructure.services import get_http_client, get_settings
from infrastructure.events import Signal
from infrastructure.logging import configure_logging, get_module_logger
from packages.ipwatch import IpWatchService

load_dotenv()

logger = get_module_logger()


def show_address(ip: str, country_code: Optional[str], isp: Optional[str]) -> None:
    """Console stand-in for the panel indicator."""
    logger.info("display_updated", ip=ip, country_code=country_code, isp=isp)


def notify(title: str, message: str) -> None:
    logger.warning("user_notification", title=title, message=message)


def list_configs():
    """List all configuration settings keys"""
    config_settings = {"settings": []}

    for key, value in get_settings().model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


async def log_detail(service: IpWatchService) -> None:
    view = await service.detail()
    logger.info("detail_view", rows=view.texts(), maps_url=view.maps_url)


def build_service(presence: Signal, network: Signal) -> IpWatchService:
    return IpWatchService(
        get_settings(),
        display_updated=show_address,
        notify_user=notify,
        presence_signal=presence,
        network_signal=network,
        http_client=get_http_client(),
    )


async def run() -> None:
    """Run the monitor until SIGINT/SIGTERM.

    SIGUSR1 reports a network reconnect, SIGHUP forces a refresh and SIGUSR2
    logs the detail view.
    """
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()

    presence = Signal("presence-status-changed")
    network = Signal("network-changed")
    service = build_service(presence, network)

    loop.add_signal_handler(signal.SIGINT, stop.set)
    loop.add_signal_handler(signal.SIGTERM, stop.set)
    loop.add_signal_handler(signal.SIGUSR1, network.emit, True)
    loop.add_signal_handler(signal.SIGHUP, service.refresh_now)
    loop.add_signal_handler(
        signal.SIGUSR2, lambda: loop.create_task(log_detail(service))
    )

    service.enable()
    try:
        await stop.wait()
    finally:
        service.disable()
        get_http_client().close()
        logger.info("application_shutdown")


def main():
    """Main function to start the application."""
    configure_logging()
    logger.info("application_startup")
    list_configs()
    asyncio.run(run())


if __name__ == "__main__":
    main()
