# a2s_monitor/constants.py
import re

# Каждый датаграм протокола начинается с этого заголовка (одиночный пакет)
A2S_HEADER = b'\xFF\xFF\xFF\xFF'
A2S_HEADER_SIZE = len(A2S_HEADER)

# Запросы
A2S_INFO_REQUEST_TYPE = 0x54  # 'T'
A2S_PLAYER_REQUEST_TYPE = 0x55  # 'U'
A2S_INFO_PAYLOAD = b'Source Engine Query\x00'

# Ответы
A2S_INFO_RESPONSE_TYPE = 0x49  # 'I'
A2S_PLAYER_RESPONSE_TYPE = 0x44  # 'D'
A2S_CHALLENGE_RESPONSE_TYPE = 0x41  # 'A'

# Заглушка challenge для первого A2S_PLAYER
NO_CHALLENGE = b'\xFF\xFF\xFF\xFF'

# Extra Data Flags (EDF) в конце ответа A2S_INFO
EDF_PORT = 0x80
EDF_STEAM_ID = 0x10
EDF_SPECTATOR = 0x40
EDF_KEYWORDS = 0x20
EDF_GAME_ID = 0x01

A2S_CHALLENGE_RESPONSE = re.compile(rb'^\xFF\xFF\xFF\xFFA(.{4})', re.DOTALL)

DEFAULT_TIMEOUT_MS = 5000
