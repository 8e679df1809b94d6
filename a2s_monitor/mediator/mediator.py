# a2s_monitor/mediator/mediator.py

import asyncio
import inspect
from collections import defaultdict
from a2s_monitor.config import Config
from a2s_monitor.logger import LoggerMixin


class Mediator(LoggerMixin):
    def __init__(self, config=None):
        super().__init__()
        self.config = config or Config()
        self._event_handlers = defaultdict(list)
        self._request_handlers = {}

    def subscribe(self, event_type, handler):
        self.logger.debug(f"Подписываем обработчик {handler.__name__} на событие {event_type.__name__}")
        self._event_handlers[event_type].append(handler)

    async def publish(self, event):
        self.logger.debug(f"Публикуем событие: {type(event).__name__}")
        tasks = []
        for handler in self._event_handlers[type(event)]:
            if inspect.iscoroutinefunction(handler):
                task = handler(event)
            else:
                task = asyncio.to_thread(handler, event)
            tasks.append(task)
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for handler, result in zip(self._event_handlers[type(event)], results):
            if isinstance(result, Exception):
                self.logger.error(f"Обработчик {handler.__name__} упал на {type(event).__name__}: {result}")

    def register_handler(self, request_type, handler):
        self.logger.debug(f"Регистрируем обработчик {handler.__name__} для запроса {request_type.__name__}")
        self._request_handlers[request_type] = handler

    def request(self, query):
        handler = self._request_handlers.get(type(query))
        if not handler:
            self.logger.error(f"Нет обработчика для запроса {type(query).__name__}")
            raise ValueError('Нет подписки на этот запрос')
        self.logger.debug(f"Передаем запрос обработчику {type(query).__name__}")
        return handler(query)
