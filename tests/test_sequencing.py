import threading
import unittest

from deadstock.core.sequencing import LatestResultGate


class LatestResultGateTest(unittest.TestCase):
    def test_only_newest_ticket_commits(self):
        gate = LatestResultGate()
        applied = []
        older = gate.begin()
        newer = gate.begin()

        self.assertTrue(gate.commit(newer, lambda: applied.append("newer")))
        self.assertFalse(gate.commit(older, lambda: applied.append("older")))
        self.assertEqual(applied, ["newer"])

    def test_cancel_invalidates_outstanding_tickets(self):
        gate = LatestResultGate()
        ticket = gate.begin()
        gate.cancel()
        self.assertFalse(gate.is_current(ticket))
        self.assertFalse(gate.commit(ticket, lambda: None))

    def test_tickets_are_unique_across_threads(self):
        gate = LatestResultGate()
        tickets = []
        lock = threading.Lock()

        def take():
            for _ in range(100):
                ticket = gate.begin()
                with lock:
                    tickets.append(ticket)

        threads = [threading.Thread(target=take) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(set(tickets)), 400)
        self.assertTrue(gate.is_current(max(tickets)))


if __name__ == "__main__":
    unittest.main()
