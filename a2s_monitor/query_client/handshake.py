# a2s_monitor/query_client/handshake.py
from enum import Enum
from typing import Optional

from a2s_monitor.query_client.errors import ProtocolError
from a2s_monitor.query_client.models import QueryKind
from a2s_monitor.query_client.query_request.challenge_query import is_challenge, extract_challenge
from a2s_monitor.query_client.query_request.info_query import build_info_request, decode_info
from a2s_monitor.query_client.query_request.player_query import build_player_request, decode_players


class HandshakeState(Enum):
    CREATED = "created"
    SENT_INITIAL = "sent_initial"
    SENT_RESEND = "sent_resend"
    DONE = "done"
    FAILED = "failed"


class ChallengeHandshake:
    """
    Состояние одного запроса: первичная отправка -> (challenge -> повторная отправка) -> ответ.
    Повторная отправка с challenge разрешена ровно один раз.
    Экземпляр принадлежит одной сессии и не переиспользуется.
    """

    def __init__(self, kind: QueryKind, allow_resend: bool = True):
        """
        :param kind: Тип запроса (INFO / PLAYER).
        :param allow_resend: False - challenge не обрабатывается, первый же ответ отдаётся декодеру
                             (для A2S_INFO это InfoChallenge).
        """
        self.kind = kind
        self.allow_resend = allow_resend
        self.state = HandshakeState.CREATED
        self.challenge: Optional[bytes] = None
        self.result = None

    @property
    def terminal(self) -> bool:
        return self.state in (HandshakeState.DONE, HandshakeState.FAILED)

    def build_request(self, challenge: Optional[bytes] = None) -> bytes:
        if self.kind is QueryKind.INFO:
            return build_info_request(challenge)
        return build_player_request(challenge)

    def initial_request(self) -> bytes:
        if self.state is not HandshakeState.CREATED:
            raise RuntimeError(f"Первичный запрос уже отправлен (состояние {self.state.value})")
        self.state = HandshakeState.SENT_INITIAL
        return self.build_request()

    def feed(self, data: bytes) -> Optional[bytes]:
        """
        Обрабатывает очередной датаграм.
        :return: Запрос для повторной отправки или None, если достигнуто конечное состояние (результат в self.result).
        :raises ProtocolError: датаграм не разбирается; состояние становится FAILED.
        """
        if self.terminal or self.state is HandshakeState.CREATED:
            raise RuntimeError(f"Датаграм в состоянии {self.state.value}")

        if is_challenge(data) and self.allow_resend:
            if self.state is HandshakeState.SENT_RESEND:
                self.state = HandshakeState.FAILED
                raise ProtocolError("Повторный challenge после переотправки запроса")
            try:
                self.challenge = extract_challenge(data)
            except ProtocolError:
                self.state = HandshakeState.FAILED
                raise
            self.state = HandshakeState.SENT_RESEND
            return self.build_request(self.challenge)

        try:
            if self.kind is QueryKind.INFO:
                self.result = decode_info(data)
            else:
                self.result = decode_players(data)
        except ProtocolError:
            self.state = HandshakeState.FAILED
            raise
        self.state = HandshakeState.DONE
        return None
