# a2s_monitor/monitor/status_poller.py
import asyncio
import os
import time

from a2s_monitor.events.types import ServerStatus, ServerStatusEvent, ServersChangedEvent, GetServerStatusQuery
from a2s_monitor.logger import LoggerMixin
from a2s_monitor.query_client.query_client import query_info_with_challenge, query_players, run_query
from a2s_monitor.utils.async_watchdog import watch_directory


class StatusPoller(LoggerMixin):
    """
    Опрашивает все серверы из ServersStore раз в POLL_INTERVAL секунд
    и публикует ServerStatusEvent для каждого через медиатор.
    """

    def __init__(self, mediator, store, config=None, shutdown_event: asyncio.Event = None,
                 info_query=query_info_with_challenge, players_query=query_players, clock=time.time):
        super().__init__()
        self.mediator = mediator
        self.store = store
        self.config = config or mediator.config
        self.shutdown_event = shutdown_event or asyncio.Event()
        self.interval = self.config.poll_interval
        self.timeout_ms = self.config.timeout_ms
        self.query_players_enabled = bool(self.config.get("A2S.QUERY_PLAYERS", True))
        self._info_query = info_query
        self._players_query = players_query
        self._clock = clock
        self.statuses = {}  # имя -> последний ServerStatus

        self.mediator.register_handler(GetServerStatusQuery, self.get_status)

    def get_status(self, query: GetServerStatusQuery):
        return self.statuses.get(query.name)

    async def poll_once(self):
        """Один цикл опроса: все серверы параллельно, без общего состояния между запросами"""
        servers = self.store.list_servers()
        if not servers:
            self.logger.debug("Нет серверов для опроса")
            return []
        results = await asyncio.gather(*(self._poll_server(name, entry) for name, entry in servers),
                                       return_exceptions=True)
        statuses = []
        for (name, _), result in zip(servers, results):
            # Ошибка одного сервера не прерывает цикл
            if isinstance(result, Exception):
                self.logger.error(f"{name}: ошибка опроса: {result!r}")
                continue
            statuses.append(result)
        for status in statuses:
            await self.mediator.publish(ServerStatusEvent(status=status))
        return statuses

    async def _poll_server(self, name, entry):
        host, port = entry["host"], int(entry["port"])
        info_outcome = await run_query(self._info_query(host, port, self.timeout_ms))

        if not info_outcome.ok:
            self.logger.warning(f"{name} ({host}:{port}): нет данных ({info_outcome.failure.value}) {info_outcome.message}")
            self.store.set_online_since(name, None)
            status = ServerStatus(name=name, host=host, port=port, online=False, failure=info_outcome.failure)
            self.statuses[name] = status
            return status

        players = []
        if self.query_players_enabled:
            players_outcome = await run_query(self._players_query(host, port, self.timeout_ms))
            if players_outcome.ok:
                players = players_outcome.value
            else:
                self.logger.debug(f"{name}: список игроков недоступен ({players_outcome.failure.value})")

        online_since = entry.get("online_since") or self._clock()
        self.store.set_online_since(name, online_since)
        info = info_outcome.value
        self.logger.info(f"{name}: {info.players}/{info.max_players} на {info.map}")
        status = ServerStatus(name=name, host=host, port=port, online=True, info=info, players=players,
                              online_since=online_since)
        self.statuses[name] = status
        return status

    async def _handle_file_change(self, file_path):
        if os.path.basename(file_path) != os.path.basename(self.store.file_path):
            return
        if not self.store.changed_on_disk():
            # Собственная запись online_since
            return
        self.logger.debug(f"Файл серверов изменён: {file_path}. Перечитываем.")
        self.store.load()
        await self.mediator.publish(ServersChangedEvent(file_path=file_path))

    async def run(self):
        """Основной цикл до сигнала остановки"""
        directory = os.path.dirname(os.path.abspath(self.store.file_path))
        os.makedirs(directory, exist_ok=True)
        loop = asyncio.get_running_loop()
        watch_task = asyncio.create_task(watch_directory(directory, self._handle_file_change, loop))
        self.logger.info(f"Опрос серверов каждые {self.interval} с (таймаут {self.timeout_ms} мс)")
        try:
            while not self.shutdown_event.is_set():
                await self.poll_once()
                try:
                    await asyncio.wait_for(self.shutdown_event.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            watch_task.cancel()
            await asyncio.gather(watch_task, return_exceptions=True)
            self.logger.info("StatusPoller остановлен.")
