# a2s_monitor/query_client/query_request/challenge_query.py
import struct
from typing import Optional

from a2s_monitor.constants import A2S_CHALLENGE_RESPONSE, A2S_CHALLENGE_RESPONSE_TYPE, A2S_HEADER_SIZE
from a2s_monitor.query_client.errors import ProtocolError


def is_challenge(data: bytes) -> bool:
    """Опкод (5-й байт) равен 'A' - ответ S2C_CHALLENGE."""
    return len(data) > A2S_HEADER_SIZE and data[A2S_HEADER_SIZE] == A2S_CHALLENGE_RESPONSE_TYPE


def extract_challenge(data: bytes) -> Optional[bytes]:
    """
    Возвращает 4 байта challenge, если датаграм - ответ S2C_CHALLENGE, иначе None.
    """
    if not is_challenge(data):
        return None
    match = A2S_CHALLENGE_RESPONSE.match(data)
    if not match:
        raise ProtocolError(f"Некорректный challenge-ответ ({len(data)} байт): {data[:9].hex()}")
    return match.group(1)


def challenge_value(token: bytes) -> int:
    """Числовое значение challenge (int32, little-endian), как его видит вызывающий код."""
    return struct.unpack('<i', token)[0]
