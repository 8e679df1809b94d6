# a2s_monitor/query_client/query_request/player_query.py
from typing import List, Optional

from a2s_monitor.constants import A2S_HEADER, A2S_PLAYER_REQUEST_TYPE, A2S_PLAYER_RESPONSE_TYPE, NO_CHALLENGE
from a2s_monitor.query_client.errors import ProtocolError
from a2s_monitor.query_client.query_request.info_query import read_header
from a2s_monitor.query_client.query_request.packet_reader import PacketReader


def build_player_request(challenge: Optional[bytes] = None) -> bytes:
    """
    Формирует A2S_PLAYER. Без известного challenge отправляется заглушка FF FF FF FF.
    """
    return A2S_HEADER + bytes([A2S_PLAYER_REQUEST_TYPE]) + (challenge if challenge is not None else NO_CHALLENGE)


def decode_players(data: bytes) -> List[str]:
    """
    Разбирает ответ A2S_PLAYER и возвращает имена игроков в порядке сервера.
    Счёт и время в игре отбрасываются. Пустые имена (подключающиеся игроки) пропускаются.
    Если пакет закончился раньше, чем объявлено игроков, возвращаются уже прочитанные.
    :raises ProtocolError: нет заголовка, опкод не 'D' или нет байта количества.
    """
    reader = PacketReader(data)
    read_header(reader)
    response_type = reader.read_byte("response_type")
    if response_type != A2S_PLAYER_RESPONSE_TYPE:
        raise ProtocolError(f"Ожидался ответ A2S_PLAYER (0x44), получен 0x{response_type:02X}")
    count = reader.read_byte("player_count")

    players = []
    for _ in range(count):
        if reader.remaining <= 0:
            break
        reader.offset += 1  # Индекс игрока
        name = reader.read_string("player_name", strict=False)
        reader.offset += 8  # Счёт (int32) + время (float32)
        if name:
            players.append(name)
    return players
