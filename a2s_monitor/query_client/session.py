# a2s_monitor/query_client/session.py
import asyncio
import logging

import asyncio_dgram

from a2s_monitor.constants import DEFAULT_TIMEOUT_MS
from a2s_monitor.query_client.errors import QueryTimeoutError, TransportError
from a2s_monitor.query_client.handshake import ChallengeHandshake

logger = logging.getLogger("app.query_client")


class QuerySession:
    """
    Один UDP-сокет на один логический запрос.
    Общий дедлайн на всю сессию, включая переотправку после challenge.
    Сокет закрывается на любом выходе: ответ, таймаут, ошибка транспорта.
    """

    def __init__(self, host, port, handshake: ChallengeHandshake, timeout_ms=DEFAULT_TIMEOUT_MS, connect=None):
        """
        :param host: Адрес сервера.
        :param port: Query-порт сервера.
        :param handshake: Состояние запроса.
        :param timeout_ms: Дедлайн сессии в миллисекундах.
        :param connect: Фабрика потока датаграмов (по умолчанию asyncio_dgram.connect).
        """
        self.host = host
        self.port = int(port)
        self.handshake = handshake
        self.timeout = timeout_ms / 1000
        self._connect = connect or asyncio_dgram.connect
        self._deadline = None

    @property
    def address(self):
        return f"{self.host}:{self.port}"

    async def run(self):
        """
        Выполняет запрос до конечного состояния.
        :return: Декодированный результат рукопожатия.
        :raises QueryTimeoutError, ProtocolError, TransportError
        """
        loop = asyncio.get_running_loop()
        self._deadline = loop.time() + self.timeout
        stream = None
        try:
            stream = await self._until_deadline(self._connect((self.host, self.port)))
            request = self.handshake.initial_request()
            while request is not None:
                logger.debug(f"{self.address}: отправка {request!r}")
                await stream.send(request)
                data, _ = await self._until_deadline(self._receive(stream))
                logger.debug(f"{self.address}: получено {len(data)} байт: {data[:16]!r}")
                request = self.handshake.feed(data)
                if request is not None:
                    logger.debug(f"{self.address}: получен challenge, переотправка запроса")
            return self.handshake.result
        except (OSError, asyncio_dgram.TransportClosed) as e:
            raise TransportError(f"{self.address}: ошибка сети: {e}") from e
        finally:
            if stream is not None:
                stream.close()

    async def _receive(self, stream):
        """
        Ждёт датаграм или ошибку сокета, что придёт раньше.
        asyncio_dgram кладёт ICMP-ошибки (error_received) в очередь _excq и поднимает их
        только при следующем recv/send, поэтому уже ждущий recv() их не увидит.
        """
        recv_task = asyncio.ensure_future(stream.recv())
        error_task = asyncio.ensure_future(stream._excq.get())
        try:
            done, _ = await asyncio.wait({recv_task, error_task}, return_when=asyncio.FIRST_COMPLETED)
            if recv_task in done:
                return recv_task.result()
            raise error_task.result()
        finally:
            for task in (recv_task, error_task):
                if not task.done():
                    task.cancel()

    async def _until_deadline(self, awaitable):
        """
        Ожидает awaitable не дольше дедлайна сессии.
        Таймаут не срабатывает раньше дедлайна: при раннем пробуждении ожидание продолжается.
        """
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(awaitable)
        try:
            while True:
                remaining = self._deadline - loop.time()
                if remaining <= 0:
                    raise QueryTimeoutError(f"{self.address}: нет ответа за {self.timeout * 1000:.0f} мс")
                done, _ = await asyncio.wait({task}, timeout=remaining)
                if task in done:
                    return task.result()
        finally:
            if not task.done():
                task.cancel()
