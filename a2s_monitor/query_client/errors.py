# a2s_monitor/query_client/errors.py
from a2s_monitor.query_client.models import FailureKind


class A2SQueryError(Exception):
    """Базовая ошибка запроса. Любая ошибка завершает сессию, в которой возникла."""
    kind: FailureKind = None


class QueryTimeoutError(A2SQueryError):
    kind = FailureKind.TIMEOUT


class ProtocolError(A2SQueryError):
    kind = FailureKind.PROTOCOL


class TransportError(A2SQueryError):
    kind = FailureKind.TRANSPORT
