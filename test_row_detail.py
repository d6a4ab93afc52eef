import unittest

from row_detail import RowDetailSnapshot, RowDetailView, layout_lines, wrap_line


def _snapshot(n_fields=50, value="v"):
    columns = [f"c{i}" for i in range(n_fields)]
    row = tuple(value for _ in columns)
    return RowDetailSnapshot.capture(columns, row, 4, "Visualize")


class SnapshotTests(unittest.TestCase):
    def test_capture_renders_values(self):
        snap = RowDetailSnapshot.capture(["a", "b", "c"], (1, None, True), 0, "SQL result")
        self.assertEqual(snap.fields, (("a", "1"), ("b", "NULL"), ("c", "true")))
        self.assertEqual(snap.title, "Row 1 (SQL result)")
        self.assertEqual(snap.row_index, 0)


class ScrollTests(unittest.TestCase):
    def test_page_down_stops_at_last_page(self):
        view = RowDetailView.open(_snapshot(50), height=10, width=40)
        self.assertEqual(len(view.lines), 50)
        for _ in range(4):
            view = view.page(1)
        self.assertEqual(view.vscroll, 40)
        view = view.page(1)
        self.assertEqual(view.vscroll, 40)

    def test_scroll_up_stops_at_top(self):
        view = RowDetailView.open(_snapshot(50), height=10, width=40)
        view = view.scroll(-3)
        self.assertEqual(view.vscroll, 0)

    def test_short_content_does_not_scroll(self):
        view = RowDetailView.open(_snapshot(3), height=10, width=40)
        self.assertEqual(view.max_vscroll, 0)
        self.assertEqual(view.page(1).vscroll, 0)

    def test_horizontal_scroll_is_clamped_to_longest_line(self):
        view = RowDetailView.open(_snapshot(2, value="x" * 96), height=10, width=40)
        # "c0: " + 96 chars = 100
        self.assertEqual(view.max_hscroll, 60)
        self.assertEqual(view.scroll(0, 1000).hscroll, 60)
        self.assertEqual(view.scroll(0, -5).hscroll, 0)
        self.assertEqual(view.scroll(0, 10).visible_lines()[0], "x" * 40)

    def test_resize_reclamps_scroll(self):
        view = RowDetailView.open(_snapshot(50), height=10, width=40)
        view = view.scroll(40)
        view = view.resize(45, 40)
        self.assertEqual(view.vscroll, 5)
        self.assertEqual(len(view.visible_lines()), 45)


class LayoutTests(unittest.TestCase):
    def test_wrap_line_breaks_on_words_and_long_words(self):
        self.assertEqual(wrap_line("text: aaa bbb ccc", 8), ["text:", "aaa bbb", "ccc"])
        self.assertEqual(wrap_line("abcdefghij", 4), ["abcd", "efgh", "ij"])
        self.assertEqual(wrap_line("short", 8), ["short"])

    def test_multiline_values_are_indented_under_the_label(self):
        lines = layout_lines([("k", "a\nb")], width=40, wrap=False)
        self.assertEqual(lines, ["k: a", "   b"])

    def test_wrapped_view_has_no_horizontal_scroll(self):
        view = RowDetailView.open(_snapshot(2, value="word " * 30), height=10, width=20, wrap=True)
        self.assertEqual(view.max_hscroll, 0)
        self.assertTrue(all(len(line) <= 20 for line in view.lines))


if __name__ == "__main__":
    unittest.main()
