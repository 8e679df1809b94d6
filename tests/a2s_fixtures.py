"""
Сборка тестовых датаграмов A2S вручную, независимо от кода клиента.
"""
import asyncio
import struct

HEADER = b'\xFF\xFF\xFF\xFF'
INFO_REQUEST = HEADER + b'TSource Engine Query\x00'

EDF_FIELDS = {
    0x80: struct.pack('<H', 27015),
    0x10: struct.pack('<Q', 90263762545778710),
    0x40: struct.pack('<H', 27020) + b'SourceTV\x00',
    0x20: b'secure,tag2\x00',
    0x01: struct.pack('<Q', 730),
}
EDF_ORDER = (0x80, 0x10, 0x40, 0x20, 0x01)


def build_edf_payload(edf):
    return b''.join(EDF_FIELDS[bit] for bit in EDF_ORDER if edf & bit)


def build_info_response(name="Srv", map_name="de_test", folder="csgo", game="Counter-Strike", app_id=240,
                        players=5, max_players=10, bots=0, server_type=b'd', environment=b'l',
                        visibility=0, vac=1, version="1.0", edf=None):
    data = (
            HEADER + b'I' + b'\x11' +
            name.encode('utf-8') + b'\x00' +
            map_name.encode('utf-8') + b'\x00' +
            folder.encode('utf-8') + b'\x00' +
            game.encode('utf-8') + b'\x00' +
            struct.pack('<H', app_id) +
            bytes([players, max_players, bots]) +
            server_type + environment +
            bytes([visibility, vac]) +
            version.encode('utf-8') + b'\x00'
    )
    if edf is not None:
        data += bytes([edf]) + build_edf_payload(edf)
    return data


def build_player_record(index, name, score=0, duration=0.0):
    return bytes([index]) + name.encode('utf-8') + b'\x00' + struct.pack('<i', score) + struct.pack('<f', duration)


def build_player_response(names, count=None):
    count = len(names) if count is None else count
    return HEADER + b'D' + bytes([count]) + b''.join(
        build_player_record(i, name, score=i * 3, duration=12.5) for i, name in enumerate(names))


def build_challenge(token=b'\x11\x22\x33\x44'):
    return HEADER + b'A' + token


class FakeStream:
    """
    Поток датаграмов вместо asyncio_dgram: отдаёт заранее заданные ответы и запоминает отправленное.
    Ошибки сокета ведут себя как в asyncio_dgram: icmp_error попадает в очередь _excq после отправки,
    когда recv() уже ждёт, а recv() сам проверяет очередь только в начале вызова.
    """

    def __init__(self, datagrams=(), icmp_error=None, send_error=None):
        self.queue = asyncio.Queue()
        for datagram in datagrams:
            self.queue.put_nowait(datagram)
        self._excq = asyncio.Queue()
        self.icmp_error = icmp_error
        self.send_error = send_error
        self.sent = []
        self.closed = False

    async def send(self, data):
        if self.send_error:
            raise self.send_error
        self.sent.append(data)
        if self.icmp_error:
            asyncio.get_running_loop().call_later(0.01, self._excq.put_nowait, self.icmp_error)

    async def recv(self):
        if not self._excq.empty():
            raise self._excq.get_nowait()
        data = await self.queue.get()
        return data, ("127.0.0.1", 27015)

    def close(self):
        self.closed = True


def fake_connect(stream):
    calls = []

    async def connect(addr):
        calls.append(addr)
        return stream

    connect.calls = calls
    return connect
