# main.py

import asyncio
import signal
import time

from a2s_monitor.config import Config
from a2s_monitor.events.types import ServerStatusEvent, ServersChangedEvent
from a2s_monitor.logger import Logger
from a2s_monitor.mediator.mediator import Mediator
from a2s_monitor.monitor.servers_store import ServersStore
from a2s_monitor.monitor.status_poller import StatusPoller
from a2s_monitor.monitor.uptime import format_uptime


class MainApp:
    def __init__(self):
        self.logger = None
        self.poller = None
        self.running = True
        self.shutdown_event = asyncio.Event()

    def log_status(self, event: ServerStatusEvent):
        status = event.status
        if not status.online:
            self.logger.info(f"[{status.name}] {status.address}: offline ({status.failure.value})")
            return
        info = status.info
        uptime = format_uptime(time.time() - status.online_since) if status.online_since else "N/A"
        players = ", ".join(status.players) if status.players else "-"
        self.logger.info(f"[{status.name}] {info.name} | {info.map} | {info.players}/{info.max_players} "
                         f"| uptime {uptime} | игроки: {players}")

    def log_servers_changed(self, event: ServersChangedEvent):
        self.logger.info(f"Список серверов перечитан из {event.file_path}")

    async def run(self):
        config = Config()
        self.logger = Logger(config)
        self.logger.info("Starting application...")

        mediator = Mediator(config)
        store = ServersStore(config.servers_file, self.logger)
        store.load()
        if not store.list_servers():
            self.logger.warning(f"В {config.servers_file} нет серверов. Жду изменений файла.")

        self.poller = StatusPoller(mediator, store, config=config, shutdown_event=self.shutdown_event)
        mediator.subscribe(ServerStatusEvent, self.log_status)
        mediator.subscribe(ServersChangedEvent, self.log_servers_changed)

        poller_task = asyncio.create_task(self.poller.run())
        await self.shutdown_event.wait()
        self.logger.info("Received shutdown signal. Waiting for poller...")

        try:
            await asyncio.wait_for(poller_task, timeout=config.timeout_ms / 1000 * 2 + 1)
        except asyncio.TimeoutError:
            poller_task.cancel()
            await asyncio.gather(poller_task, return_exceptions=True)
            self.logger.warning("StatusPoller отменён принудительно.")
        self.running = False
        self.logger.info("Application shutdown complete.")


async def main():
    app = MainApp()

    def handle_shutdown(signum, frame):
        if not app.running:
            return
        if app.logger:
            app.logger.info(f"Received shutdown signal {signum}. Shutting down...")
        app.shutdown_event.set()

    signal.signal(signal.SIGINT, handle_shutdown)
    signal.signal(signal.SIGTERM, handle_shutdown)

    await app.run()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
    finally:
        print("Application exited cleanly.")
