# a2s_monitor/query_client/models.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class QueryKind(Enum):
    INFO = "info"
    PLAYER = "player"


@dataclass
class ServerInfo:
    name: str
    map: str
    folder: str
    game: str
    app_id: int
    players: int
    max_players: int
    bots: int
    server_type: str  # 'd' dedicated, 'l' listen, 'p' SourceTV
    environment: str  # 'l', 'w', 'm' | 'o'
    visibility: int  # 0 публичный, 1 с паролем
    vac: int
    version: str
    # Поля EDF: None, если соответствующий бит не выставлен
    port: Optional[int] = None
    steam_id: Optional[str] = None  # uint64 строкой
    keywords: Optional[str] = None
    game_id: Optional[str] = None  # uint64 строкой


@dataclass(frozen=True)
class InfoChallenge:
    """Сервер ответил на A2S_INFO challenge-пакетом вместо данных (query_info без рукопожатия)"""
    challenge: int


class FailureKind(Enum):
    TIMEOUT = "timeout"
    PROTOCOL = "protocol"
    TRANSPORT = "transport"


@dataclass
class QueryOutcome:
    """
    Результат одного запроса: либо value, либо failure.
    """
    value: Any = None
    failure: Optional[FailureKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def failed(cls, kind: FailureKind, message: str = ""):
        return cls(failure=kind, message=message)
