# a2s_monitor/monitor/servers_store.py

import json
import os
from typing import Dict, Optional


def parse_port(value) -> int:
    """Порт из JSON: целое (или строка с целым) в диапазоне 1-65535, иначе ValueError"""
    if isinstance(value, bool):
        raise ValueError(f"Некорректный порт: {value!r}")
    port = int(value)
    if not 1 <= port <= 65535:
        raise ValueError(f"Порт вне диапазона 1-65535: {port}")
    return port


class ServersStore:
    """
    Список отслеживаемых серверов в JSON-файле:
    {"<имя>": {"host": ..., "port": ..., "message_id": ..., "online_since": ...}}
    """

    def __init__(self, file_path: str, logger):
        self.file_path = file_path
        self.logger = logger
        self.data: Dict[str, dict] = {}
        self._file_signature = None  # (mtime_ns, size) после последнего load/save

    def _read_signature(self):
        try:
            stat = os.stat(self.file_path)
        except OSError:
            return None
        return stat.st_mtime_ns, stat.st_size

    def changed_on_disk(self) -> bool:
        """Файл отличается от того, что этот экземпляр последним прочитал или записал"""
        return self._read_signature() != self._file_signature

    def _validate(self, raw_data):
        valid_data = {}
        for name, entry in raw_data.items():
            if not isinstance(entry, dict) or not isinstance(entry.get("host"), str) or "port" not in entry:
                self.logger.warning(f"Сервер {name}: нет адреса, запись пропущена")
                continue
            try:
                entry["port"] = parse_port(entry["port"])
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Сервер {name}: {e}, запись пропущена")
                continue
            valid_data[name] = entry
        return valid_data

    def load(self):
        """Загружает серверы из JSON-файла"""
        if os.path.exists(self.file_path):
            try:
                with open(self.file_path, "r", encoding="utf-8") as f:
                    raw_data = json.load(f)
                self._file_signature = self._read_signature()
                self.data = self._validate(raw_data)
                self.logger.debug(f"Загружено {len(self.data)} серверов из {self.file_path}")
            except (json.JSONDecodeError, OSError, AttributeError) as e:
                self.logger.error(f"Ошибка загрузки {self.file_path}: {e}")
                self.data = {}
        else:
            self.data = {}
            self._file_signature = None
            self.logger.debug(f"Файл {self.file_path} не найден. Список серверов пуст.")

    def save(self):
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            self._file_signature = self._read_signature()
            self.logger.debug(f"Список серверов сохранён в {self.file_path}")
        except OSError as e:
            self.logger.error(f"Ошибка сохранения {self.file_path}: {e}")

    def add_server(self, name: str, host: str, port: int):
        if name in self.data:
            raise ValueError(f"Сервер {name} уже существует")
        self.data[name] = {
            "host": host,
            "port": parse_port(port),
            "message_id": None,
            "online_since": None,
        }
        self.save()

    def remove_server(self, name: str) -> bool:
        if self.data.pop(name, None) is None:
            return False
        self.save()
        return True

    def get_server(self, name: str) -> Optional[dict]:
        return self.data.get(name)

    def list_servers(self):
        """Возвращает пары (имя, запись) в порядке добавления"""
        return list(self.data.items())

    def set_online_since(self, name: str, timestamp: Optional[float]):
        """Обновляет время выхода в онлайн; файл пишется только при изменении"""
        entry = self.data.get(name)
        if entry is None or entry.get("online_since") == timestamp:
            return False
        entry["online_since"] = timestamp
        self.save()
        return True

    def set_message_id(self, name: str, message_id):
        entry = self.data.get(name)
        if entry is None:
            return False
        entry["message_id"] = message_id
        self.save()
        return True
