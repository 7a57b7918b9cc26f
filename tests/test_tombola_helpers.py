import csv
import io
import random
import unittest
from datetime import datetime, timezone

from suenohincha.tombola import (
    build_draw_results,
    draw_csv_filename,
    export_draw_csv,
    initial_window,
    mask_phone,
    pick_winner,
    quick_draw,
    remaining_pool,
    reveal_frame,
    spin_frames,
    winners_to_csv,
)
from suenohincha.tombola.animation import (
    CENTER_INDEX,
    FAST_INTERVAL_MS,
    PLACEHOLDER_CODE,
    SLOW_BASE_MS,
    WINDOW_SIZE,
)
from suenohincha.types import Coupon, Winner


def make_pool(n: int) -> list[Coupon]:
    return [Coupon(code=f"C{i}") for i in range(n)]


class TestSelection(unittest.TestCase):
    def test_remaining_pool_excludes_drawn(self):
        pool = make_pool(4)
        self.assertEqual([c.code for c in remaining_pool(pool, ["C1", "C3"])], ["C0", "C2"])

    def test_pick_winner_never_returns_drawn(self):
        pool = make_pool(5)
        rng = random.Random(11)
        for _ in range(50):
            self.assertNotIn(pick_winner(pool, ["C0", "C1", "C2"], rng).code, {"C0", "C1", "C2"})

    def test_pick_winner_none_when_all_drawn(self):
        pool = make_pool(2)
        self.assertIsNone(pick_winner(pool, ["C0", "C1"]))
        self.assertIsNone(pick_winner([], []))

    def test_quick_draw_finalists_are_head_of_preselected(self):
        result = quick_draw(make_pool(30), 10, 3, random.Random(5))
        self.assertEqual(result.total_coupons, 30)
        self.assertEqual(len(result.preselected), 10)
        self.assertEqual(result.finalists, result.preselected[:3])
        self.assertEqual(len({c.code for c in result.preselected}), 10)

    def test_quick_draw_caps_counts(self):
        result = quick_draw(make_pool(4), 10, 6, random.Random(5))
        self.assertEqual(len(result.preselected), 4)
        self.assertEqual(len(result.finalists), 4)

    def test_quick_draw_rejects_empty_pool_and_bad_counts(self):
        with self.assertRaises(ValueError):
            quick_draw([], 5, 1)
        with self.assertRaises(ValueError):
            quick_draw(make_pool(3), 0, 1)

    def test_quick_draw_to_json(self):
        payload = quick_draw(make_pool(3), 2, 1, random.Random(0)).to_json()
        self.assertEqual(payload["total_coupons"], 3)
        self.assertEqual(payload["finalists"][0]["owner_type"], "BUYER")


class TestAnimation(unittest.TestCase):
    def test_frame_sequence(self):
        frames = list(spin_frames(["A", "B", "C"], random.Random(0)))
        self.assertEqual(len(frames), 35)
        self.assertTrue(all(f.delay_ms == FAST_INTERVAL_MS for f in frames[:25]))
        self.assertEqual(frames[25].delay_ms, SLOW_BASE_MS)
        delays = [f.delay_ms for f in frames[25:]]
        self.assertEqual(delays, sorted(delays))
        self.assertTrue(all(len(f.codes) == WINDOW_SIZE for f in frames))
        self.assertFalse(any(f.final for f in frames))

    def test_window_scrolls_by_one(self):
        frames = list(spin_frames(["A", "B"], random.Random(2), start=["1", "2", "3", "4", "5"]))
        self.assertEqual(frames[0].codes[:4], ("2", "3", "4", "5"))
        self.assertEqual(frames[1].codes[:4], frames[0].codes[1:])

    def test_empty_pool_shows_placeholder(self):
        self.assertEqual(initial_window([]), (PLACEHOLDER_CODE,) * WINDOW_SIZE)

    def test_reveal_highlights_winner(self):
        frame = reveal_frame(["A", "B"], "WIN", random.Random(0))
        self.assertTrue(frame.final)
        self.assertEqual(frame.codes[CENTER_INDEX], "WIN")
        self.assertEqual(frame.highlighted, "WIN")


class TestExport(unittest.TestCase):
    def setUp(self):
        self.winners = [
            Winner("BOL-2026-AAAAA", "Ana Quispe", "4567890", "La Paz", "ana@example.com", "712-345-67"),
            Winner.placeholder("BOL-2026-BBBBB"),
        ]

    def test_mask_phone(self):
        self.assertEqual(mask_phone("712-345-67"), "****4567")
        self.assertEqual(mask_phone("+591 71234567"), "****4567")
        self.assertEqual(mask_phone("12"), "12")
        self.assertEqual(mask_phone(""), "N/A")
        self.assertEqual(mask_phone(None), "N/A")
        self.assertEqual(mask_phone("N/A"), "N/A")

    def test_winners_csv(self):
        rows = list(csv.reader(io.StringIO(winners_to_csv(self.winners))))
        self.assertEqual(rows[0], ["Posición", "Código", "Nombre", "CI", "Ciudad", "Email", "Teléfono"])
        self.assertEqual(rows[1][:3], ["1", "BOL-2026-AAAAA", "Ana Quispe"])
        self.assertEqual(rows[1][6], "712-345-67")
        self.assertEqual(rows[2][:3], ["2", "BOL-2026-BBBBB", "Participante"])

    def test_winners_csv_masked(self):
        rows = list(csv.reader(io.StringIO(winners_to_csv(self.winners, mask=True))))
        self.assertEqual(rows[1][6], "****4567")
        self.assertEqual(rows[2][6], "N/A")

    def test_draw_csv(self):
        result = quick_draw(make_pool(5), 3, 1, random.Random(1))
        rows = list(csv.reader(io.StringIO(export_draw_csv(result))))
        self.assertEqual(rows[0], ["Tipo", "Código", "Categoría"])
        self.assertEqual(rows[1], ["Finalista", result.finalists[0].code, "BUYER"])
        self.assertEqual([r[0] for r in rows[2:]], ["Preseleccionado"] * 2)

    def test_filename(self):
        at = datetime(2026, 6, 14, 20, 0, tzinfo=timezone.utc)
        self.assertEqual(draw_csv_filename("Junio", at), "sorteo-Junio-2026-06-14.csv")

    def test_build_draw_results(self):
        at = datetime(2026, 6, 14, 20, 0, tzinfo=timezone.utc)
        payload = build_draw_results(self.winners, total_coupons=120, executed_at=at)
        self.assertEqual([w["position"] for w in payload["winners"]], [1, 2])
        self.assertEqual(payload["winners"][0]["full_name"], "Ana Quispe")
        self.assertEqual(
            payload["finalists"],
            [
                {"code": "BOL-2026-AAAAA", "owner_type": "BUYER"},
                {"code": "BOL-2026-BBBBB", "owner_type": "BUYER"},
            ],
        )
        self.assertEqual(payload["total_coupons"], 120)
        self.assertEqual(payload["executed_at"], "2026-06-14T20:00:00+00:00")


if __name__ == "__main__":
    unittest.main()
