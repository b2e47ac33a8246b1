"""Tests for tokenizing and stopword filtering of input text."""

import unittest

from utils.stopwords import STOPWORDS, is_stopword
from utils.tokenizer import parse_words, tokenize


class TestTokenize(unittest.TestCase):

    def test_splits_on_non_word_characters(self):
        self.assertEqual(tokenize("dog, cat; run-fast!"), ['dog', 'cat', 'run', 'fast'])

    def test_empty_text(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize("  \n\t "), [])

    def test_keeps_underscores_and_digits(self):
        self.assertEqual(tokenize("hot_dog 42"), ['hot_dog', '42'])


class TestParseWords(unittest.TestCase):

    def test_removes_stopwords_case_insensitively(self):
        self.assertEqual(parse_words("The dog and THE cat"), ['dog', 'cat'])

    def test_deduplicates_keeping_first_occurrence(self):
        self.assertEqual(parse_words("cat dog cat bird dog"), ['cat', 'dog', 'bird'])

    def test_deduplication_is_case_sensitive(self):
        self.assertEqual(parse_words("Dog dog"), ['Dog', 'dog'])

    def test_keep_stopwords(self):
        self.assertEqual(
            parse_words("the dog the", exclude_stopwords=False), ['the', 'dog'],
        )

    def test_single_letters_and_digits_are_stopwords(self):
        self.assertEqual(parse_words("a b 1 dog"), ['dog'])


class TestStopwords(unittest.TestCase):

    def test_is_stopword(self):
        self.assertTrue(is_stopword('the'))
        self.assertTrue(is_stopword('The'))
        self.assertFalse(is_stopword('dog'))

    def test_list_has_no_duplicates(self):
        self.assertEqual(len(STOPWORDS), len(set(STOPWORDS)))


if __name__ == '__main__':
    unittest.main()
