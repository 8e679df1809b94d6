import json
import logging
import os
import tempfile
import unittest

from a2s_fixtures import build_info_response
from a2s_monitor.config import Config
from a2s_monitor.events.types import ServerStatusEvent, ServersChangedEvent, GetServerStatusQuery
from a2s_monitor.mediator.mediator import Mediator
from a2s_monitor.monitor.servers_store import ServersStore
from a2s_monitor.monitor.status_poller import StatusPoller
from a2s_monitor.query_client.errors import QueryTimeoutError, TransportError
from a2s_monitor.query_client.models import FailureKind
from a2s_monitor.query_client.query_request.info_query import decode_info


class StatusPollerTest(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.file_path = os.path.join(self.tmp.name, "servers.json")
        self.config = Config.from_dict({"POLL_INTERVAL": 1, "A2S": {"TIMEOUT_MS": 250}})
        self.mediator = Mediator(self.config)
        self.store = ServersStore(self.file_path, logging.getLogger("test.poller"))
        self.store.add_server("up", "10.0.0.1", 27015)
        self.store.add_server("down", "10.0.0.2", 27016)
        self.events = []

        async def on_status(event):
            self.events.append(event)

        self.mediator.subscribe(ServerStatusEvent, on_status)
        self.info_calls = []
        self.players_calls = []

    async def asyncTearDown(self):
        self.tmp.cleanup()

    async def fake_info(self, host, port, timeout_ms):
        self.info_calls.append((host, port, timeout_ms))
        if host == "10.0.0.2":
            raise QueryTimeoutError("нет ответа")
        return decode_info(build_info_response(name="Up server", players=2))

    async def fake_players(self, host, port, timeout_ms):
        self.players_calls.append((host, port, timeout_ms))
        return ["alice", "bob"]

    def make_poller(self, **kwargs):
        return StatusPoller(self.mediator, self.store, config=self.config, info_query=self.fake_info,
                            players_query=self.fake_players, clock=lambda: 1000.0, **kwargs)

    async def test_poll_once_publishes_status_per_server(self):
        poller = self.make_poller()
        await poller.poll_once()

        by_name = {event.status.name: event.status for event in self.events}
        self.assertEqual(set(by_name), {"up", "down"})
        up, down = by_name["up"], by_name["down"]
        self.assertTrue(up.online)
        self.assertEqual(up.info.name, "Up server")
        self.assertEqual(up.players, ["alice", "bob"])
        self.assertEqual(up.online_since, 1000.0)
        self.assertFalse(down.online)
        self.assertEqual(down.failure, FailureKind.TIMEOUT)
        self.assertIsNone(down.info)
        self.assertEqual(sorted(self.info_calls), [("10.0.0.1", 27015, 250), ("10.0.0.2", 27016, 250)])
        # Игроки запрашиваются только у ответившего сервера
        self.assertEqual(self.players_calls, [("10.0.0.1", 27015, 250)])

    async def test_online_since_kept_and_cleared(self):
        self.store.set_online_since("up", 500.0)
        self.store.set_online_since("down", 400.0)
        poller = self.make_poller()
        await poller.poll_once()
        self.assertEqual(self.store.get_server("up")["online_since"], 500.0)
        self.assertIsNone(self.store.get_server("down")["online_since"])

    async def test_players_failure_keeps_server_online(self):
        async def failing_players(host, port, timeout_ms):
            raise TransportError("refused")

        poller = StatusPoller(self.mediator, self.store, config=self.config, info_query=self.fake_info,
                              players_query=failing_players)
        statuses = await poller.poll_once()
        up = next(status for status in statuses if status.name == "up")
        self.assertTrue(up.online)
        self.assertEqual(up.players, [])

    async def test_players_query_can_be_disabled(self):
        self.config = Config.from_dict({"A2S": {"QUERY_PLAYERS": False}})
        poller = self.make_poller()
        await poller.poll_once()
        self.assertEqual(self.players_calls, [])

    async def test_status_query_through_mediator(self):
        poller = self.make_poller()
        self.assertIsNone(self.mediator.request(GetServerStatusQuery(name="up")))
        await poller.poll_once()
        self.assertTrue(self.mediator.request(GetServerStatusQuery(name="up")).online)

    async def test_empty_store(self):
        self.store.remove_server("up")
        self.store.remove_server("down")
        poller = self.make_poller()
        self.assertEqual(await poller.poll_once(), [])
        self.assertEqual(self.events, [])

    async def test_file_change_reloads_store(self):
        changed = []

        async def on_changed(event):
            changed.append(event.file_path)

        self.mediator.subscribe(ServersChangedEvent, on_changed)
        poller = self.make_poller()
        other = ServersStore(self.file_path, logging.getLogger("test.other"))
        other.load()
        other.add_server("new", "10.0.0.3", 27017)

        await poller._handle_file_change(os.path.join(self.tmp.name, "unrelated.txt"))
        self.assertIsNone(self.store.get_server("new"))
        await poller._handle_file_change(self.file_path)
        self.assertIsNotNone(self.store.get_server("new"))
        self.assertEqual(changed, [self.file_path])

    async def test_own_online_since_write_does_not_reload(self):
        changed = []

        async def on_changed(event):
            changed.append(event.file_path)

        self.mediator.subscribe(ServersChangedEvent, on_changed)
        poller = self.make_poller()
        await poller.poll_once()
        self.store.data["up"]["marker"] = "в памяти"
        await poller._handle_file_change(self.file_path)
        self.assertEqual(changed, [])
        # Перечитывания не было: несохранённое поле на месте
        self.assertEqual(self.store.get_server("up")["marker"], "в памяти")

    async def test_bad_entry_does_not_stop_other_servers(self):
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump({
                "up": {"host": "10.0.0.1", "port": 27015},
                "bad": {"host": "10.0.0.9", "port": "abc"},
            }, f)
        self.store.load()
        poller = self.make_poller()
        statuses = await poller.poll_once()
        self.assertEqual([status.name for status in statuses], ["up"])
        self.assertEqual([event.status.name for event in self.events], ["up"])

    async def test_unexpected_error_of_one_server_is_isolated(self):
        async def exploding_info(host, port, timeout_ms):
            if host == "10.0.0.2":
                raise RuntimeError("сбой")
            return decode_info(build_info_response())

        poller = StatusPoller(self.mediator, self.store, config=self.config, info_query=exploding_info,
                              players_query=self.fake_players)
        statuses = await poller.poll_once()
        self.assertEqual([status.name for status in statuses], ["up"])
        self.assertTrue(statuses[0].online)


if __name__ == '__main__':
    unittest.main()
