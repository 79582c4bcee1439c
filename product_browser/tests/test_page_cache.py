import unittest

from ..paging.page_cache import Loaded, Pending, PageCache, assemble_visible_rows


class TestPageCache(unittest.TestCase):
    def setUp(self):
        self.cache = PageCache(page_size=10)

    def test_total_unknown_until_first_store(self):
        self.assertFalse(self.cache.total_known)
        self.assertEqual(self.cache.total_count, 0)
        self.cache.store(1, list(range(10)), 25)
        self.assertTrue(self.cache.total_known)
        self.assertEqual(self.cache.total_pages, 3)

    def test_slot_projection(self):
        self.cache.store(2, list(range(10, 20)), 25)
        self.assertEqual(self.cache.slot(0), Pending)
        self.assertEqual(self.cache.slot(15), Loaded(15))
        with self.assertRaises(IndexError):
            self.cache.slot(25)

    def test_oversized_page_is_truncated(self):
        self.cache.store(1, list(range(12)), 30)
        self.assertEqual(len(self.cache.get(1)), 10)

    def test_shrinking_total_drops_orphan_pages(self):
        self.cache.store(1, list(range(10)), 30)
        self.cache.store(3, list(range(20, 30)), 30)
        self.cache.store_total(12)
        self.assertEqual(self.cache.resident, frozenset({1}))

    def test_evict_reports_only_resident_pages(self):
        self.cache.store(1, list(range(10)), 30)
        self.assertEqual(self.cache.evict({1, 2}), frozenset({1}))
        self.assertEqual(len(self.cache), 0)

    def test_clear_forgets_total(self):
        self.cache.store(1, list(range(10)), 30)
        self.cache.clear()
        self.assertFalse(self.cache.total_known)
        self.assertEqual(self.cache.rows(), [])

    def test_rejects_non_positive_page_size(self):
        with self.assertRaises(ValueError):
            PageCache(0)


class TestAssembleVisibleRows(unittest.TestCase):
    def test_placeholders_fill_missing_pages(self):
        pages = {1: ("a", "b"), 3: ("e",)}
        slots = assemble_visible_rows(pages, 5, 2)
        self.assertEqual(slots, [Loaded("a"), Loaded("b"), Pending, Pending, Loaded("e")])

    def test_length_always_matches_total(self):
        self.assertEqual(len(assemble_visible_rows({}, 237, 50)), 237)
        self.assertEqual(assemble_visible_rows({1: (1, 2)}, 0, 50), [])

    def test_short_page_leaves_pending_tail(self):
        slots = assemble_visible_rows({1: ("a",)}, 3, 3)
        self.assertEqual(slots, [Loaded("a"), Pending, Pending])


if __name__ == "__main__":
    unittest.main()
