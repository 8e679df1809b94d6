# a2s_monitor/query_client/query_request/packet_reader.py
import struct

from a2s_monitor.query_client.errors import ProtocolError

UINT16 = struct.Struct('<H')
UINT64 = struct.Struct('<Q')


class PacketReader:
    """
    Последовательное чтение little-endian полей из датаграма.
    Любое чтение за пределами буфера -> ProtocolError.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _require(self, size: int, field: str):
        if self.remaining < size:
            raise ProtocolError(
                f"Пакет обрезан: поле '{field}' требует {size} байт, осталось {max(self.remaining, 0)} "
                f"(смещение {self.offset})")

    def skip(self, size: int, field: str = "skip"):
        self._require(size, field)
        self.offset += size

    def read_byte(self, field: str = "byte") -> int:
        self._require(1, field)
        value = self.data[self.offset]
        self.offset += 1
        return value

    def read_char(self, field: str = "char") -> str:
        return chr(self.read_byte(field))

    def read_uint16(self, field: str = "uint16") -> int:
        self._require(UINT16.size, field)
        (value,) = UINT16.unpack_from(self.data, self.offset)
        self.offset += UINT16.size
        return value

    def read_uint64(self, field: str = "uint64") -> int:
        self._require(UINT64.size, field)
        (value,) = UINT64.unpack_from(self.data, self.offset)
        self.offset += UINT64.size
        return value

    def read_string(self, field: str = "string", strict: bool = True) -> str:
        """
        Читает строку до NUL.
        :param strict: без терминатора - ProtocolError; иначе строка берётся до конца буфера.
        """
        end = self.data.find(b'\x00', self.offset)
        if end == -1:
            if strict:
                raise ProtocolError(f"Пакет обрезан: строка '{field}' без завершающего нуля (смещение {self.offset})")
            end = len(self.data)
        value = self.data[self.offset:end].decode('utf-8', errors='replace')
        self.offset = end + 1
        return value
