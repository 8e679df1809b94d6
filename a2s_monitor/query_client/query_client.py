# a2s_monitor/query_client/query_client.py
"""
Публичный API клиента A2S. Каждый вызов - новая сессия и новый сокет.
"""
import logging
from typing import List, Union

from a2s_monitor.constants import DEFAULT_TIMEOUT_MS
from a2s_monitor.query_client.errors import A2SQueryError
from a2s_monitor.query_client.handshake import ChallengeHandshake
from a2s_monitor.query_client.models import QueryKind, ServerInfo, InfoChallenge, QueryOutcome
from a2s_monitor.query_client.session import QuerySession

logger = logging.getLogger("app.query_client")


async def query_info(host, port, timeout_ms=DEFAULT_TIMEOUT_MS, connect=None) -> Union[ServerInfo, InfoChallenge]:
    """
    A2S_INFO без рукопожатия: если сервер требует challenge, он возвращается как InfoChallenge.
    """
    handshake = ChallengeHandshake(QueryKind.INFO, allow_resend=False)
    return await QuerySession(host, port, handshake, timeout_ms, connect).run()


async def query_info_with_challenge(host, port, timeout_ms=DEFAULT_TIMEOUT_MS, connect=None) -> ServerInfo:
    """A2S_INFO с одной переотправкой после challenge."""
    handshake = ChallengeHandshake(QueryKind.INFO)
    return await QuerySession(host, port, handshake, timeout_ms, connect).run()


async def query_players(host, port, timeout_ms=DEFAULT_TIMEOUT_MS, connect=None) -> List[str]:
    """A2S_PLAYER: имена игроков в порядке сервера."""
    handshake = ChallengeHandshake(QueryKind.PLAYER)
    return await QuerySession(host, port, handshake, timeout_ms, connect).run()


async def run_query(awaitable) -> QueryOutcome:
    """
    Сводит результат запроса к QueryOutcome. Ошибки запроса не пробрасываются.
    """
    try:
        return QueryOutcome.success(await awaitable)
    except A2SQueryError as e:
        logger.debug(f"Запрос завершился ошибкой {e.kind.value}: {e}")
        return QueryOutcome.failed(e.kind, str(e))
