import unittest

from mareelog.pagination import chunk, paginate


class PaginateTests(unittest.TestCase):
    def test_two_n_plus_one_rows(self):
        n = 4
        rows = list(range(2 * n + 1))
        pages = paginate(rows, n)
        self.assertEqual(len(pages), 3)
        self.assertEqual(pages[0], [0, 1, 2, 3])
        self.assertEqual(pages[1], [3, 4, 5, 6, 7])
        self.assertEqual(pages[2], [7, 8])
        self.assertEqual(pages[1][0], pages[0][-1])
        self.assertEqual(pages[2][0], rows[2 * n - 1])

    def test_exact_multiple(self):
        pages = paginate(list(range(6)), 3)
        self.assertEqual(pages, [[0, 1, 2], [2, 3, 4, 5]])

    def test_single_page(self):
        self.assertEqual(paginate([1, 2], 10), [[1, 2]])

    def test_page_size_one(self):
        self.assertEqual(paginate(["a", "b", "c"], 1), [["a"], ["a", "b"], ["b", "c"]])

    def test_empty(self):
        self.assertEqual(paginate([], 5), [])

    def test_input_untouched(self):
        rows = [1, 2, 3]
        paginate(rows, 1)
        self.assertEqual(rows, [1, 2, 3])

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            paginate([1], 0)
        with self.assertRaises(ValueError):
            chunk([1], -1)

    def test_chunk(self):
        self.assertEqual(chunk("abcde", 2), [["a", "b"], ["c", "d"], ["e"]])


if __name__ == "__main__":
    unittest.main()
