# a2s_monitor/events/types.py
from dataclasses import dataclass, field
from typing import List, Optional

from a2s_monitor.query_client.models import ServerInfo, FailureKind


@dataclass
class ServerStatus:
    name: str
    host: str
    port: int
    online: bool
    info: Optional[ServerInfo] = None
    players: List[str] = field(default_factory=list)
    failure: Optional[FailureKind] = None
    online_since: Optional[float] = None  # unix time

    @property
    def address(self):
        return f"{self.host}:{self.port}"


@dataclass
class ServerStatusEvent:
    status: ServerStatus


@dataclass
class ServersChangedEvent:
    file_path: str


@dataclass
class GetServerStatusQuery:
    name: str
