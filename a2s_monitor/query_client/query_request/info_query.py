# a2s_monitor/query_client/query_request/info_query.py
from typing import Optional, Union

from a2s_monitor.constants import (
    A2S_HEADER, A2S_HEADER_SIZE, A2S_INFO_PAYLOAD, A2S_INFO_REQUEST_TYPE, A2S_INFO_RESPONSE_TYPE,
    EDF_PORT, EDF_STEAM_ID, EDF_SPECTATOR, EDF_KEYWORDS, EDF_GAME_ID
)
from a2s_monitor.query_client.errors import ProtocolError
from a2s_monitor.query_client.models import ServerInfo, InfoChallenge
from a2s_monitor.query_client.query_request.challenge_query import extract_challenge, challenge_value
from a2s_monitor.query_client.query_request.packet_reader import PacketReader


def build_info_request(challenge: Optional[bytes] = None) -> bytes:
    """
    Формирует A2S_INFO. challenge добавляется только при повторной отправке после S2C_CHALLENGE.
    """
    request = (
            A2S_HEADER +  # Префикс
            bytes([A2S_INFO_REQUEST_TYPE]) +  # 'T'
            A2S_INFO_PAYLOAD  # "Source Engine Query\0"
    )
    if challenge is not None:
        request += challenge
    return request


def read_header(reader: PacketReader):
    header = reader.data[:A2S_HEADER_SIZE]
    if len(header) < A2S_HEADER_SIZE:
        raise ProtocolError(f"Пакет короче заголовка: {len(reader.data)} байт")
    if header != A2S_HEADER:
        # 0xFFFFFFFE - многопакетный ответ, не поддерживается
        raise ProtocolError(f"Неизвестный заголовок пакета: {header.hex()}")
    reader.skip(A2S_HEADER_SIZE, "header")


def decode_info(data: bytes) -> Union[ServerInfo, InfoChallenge]:
    """
    Разбирает ответ A2S_INFO.
    Если вместо 'I' пришёл challenge ('A'), возвращает InfoChallenge - вызывающий код решает, что с ним делать.
    :raises ProtocolError: пакет обрезан или опкод не 'I'/'A'.
    """
    token = extract_challenge(data)
    if token is not None:
        return InfoChallenge(challenge=challenge_value(token))

    reader = PacketReader(data)
    read_header(reader)
    response_type = reader.read_byte("response_type")
    if response_type != A2S_INFO_RESPONSE_TYPE:
        raise ProtocolError(f"Ожидался ответ A2S_INFO (0x49), получен 0x{response_type:02X}")
    reader.skip(1, "protocol")  # Версия протокола не используется

    info = ServerInfo(
        name=reader.read_string("name"),
        map=reader.read_string("map"),
        folder=reader.read_string("folder"),
        game=reader.read_string("game"),
        app_id=reader.read_uint16("app_id"),
        players=reader.read_byte("players"),
        max_players=reader.read_byte("max_players"),
        bots=reader.read_byte("bots"),
        server_type=reader.read_char("server_type"),
        environment=reader.read_char("environment"),
        visibility=reader.read_byte("visibility"),
        vac=reader.read_byte("vac"),
        version=reader.read_string("version"),
    )

    # EDF отсутствует - все дополнительные поля пустые
    if reader.remaining <= 0:
        return info

    edf = reader.read_byte("edf")
    # Порядок чтения фиксирован протоколом, неизвестные биты игнорируются
    if edf & EDF_PORT:
        info.port = reader.read_uint16("port")
    if edf & EDF_STEAM_ID:
        info.steam_id = str(reader.read_uint64("steam_id"))
    if edf & EDF_SPECTATOR:
        reader.skip(2, "spectator_port")
        reader.read_string("spectator_name")
    if edf & EDF_KEYWORDS:
        info.keywords = reader.read_string("keywords")
    if edf & EDF_GAME_ID:
        info.game_id = str(reader.read_uint64("game_id"))
    return info
