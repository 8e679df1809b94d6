# a2s_monitor/config.py

import json
import os

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config.json")


class Config:

    def __init__(self, config_path=None):
        config_path = config_path or os.environ.get("A2S_MONITOR_CONFIG") or DEFAULT_CONFIG_PATH
        self.path = config_path
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                self._config = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Конфигурационный файл не найден: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Ошибка парсинга JSON в конфиге: {e}")

    @classmethod
    def from_dict(cls, data):
        """Конфиг без файла (используется в тестах и при встраивании)"""
        config = cls.__new__(cls)
        config.path = None
        config._config = dict(data)
        return config

    def get(self, key, default=None):
        """
        Общий безопасный доступ к любому полю.
        Поддерживает вложенные ключи через точку (например, "LOG.LEVEL_FILE_LOG").
        """
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default

    @property
    def timeout_ms(self):
        """Свойство: таймаут одного A2S-запроса в миллисекундах"""
        return int(self.get("A2S.TIMEOUT_MS", 5000))

    @property
    def poll_interval(self):
        """Свойство: интервал опроса серверов в секундах"""
        return float(self.get("POLL_INTERVAL", 60))

    @property
    def servers_file(self):
        return self.get("SERVERS_FILE", "./data/servers.json")
