import unittest

from kidquiz.categories import (
    CATEGORY_DISPLAY,
    Category,
    CategoryDisplay,
    category_guidance,
    display_for,
    featured_categories,
    is_comprehension,
)


class CategoryConfigTests(unittest.TestCase):
    def test_closed_set_of_topics(self) -> None:
        self.assertEqual(len(Category), 15)
        self.assertEqual(Category("Reading Adventure"), Category.COMPREHENSION)
        self.assertEqual(Category.SCIENCE.value, "Science Explorers")

    def test_display_mapping_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            CATEGORY_DISPLAY[Category.LOGOS] = CategoryDisplay("x", "#000")  # type: ignore[index]

    def test_featured_order_starts_with_animals(self) -> None:
        featured = featured_categories()
        self.assertEqual(len(featured), 12)
        self.assertEqual(featured[0], Category.ANIMALS)
        self.assertNotIn(Category.LOGOS, featured)

    def test_every_category_has_a_display(self) -> None:
        for category in Category:
            display = display_for(category)
            self.assertTrue(display.icon)
            self.assertTrue(display.color.startswith("#"))

    def test_only_reading_adventure_has_passages(self) -> None:
        self.assertTrue(is_comprehension(Category.COMPREHENSION))
        self.assertFalse(is_comprehension(Category.ANIMALS))

    def test_guidance(self) -> None:
        self.assertIn("passage", category_guidance(Category.COMPREHENSION))
        self.assertIn("Norse", category_guidance(Category.OTHER_MYTH))
        self.assertEqual(category_guidance(Category.FLAGS), "")


if __name__ == "__main__":
    unittest.main()
