"""Tests for the poslookup command-line entry point."""

import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from adapter.external.free_dictionary import FreeDictionaryAdapter
from adapter.fake.lexicon import FakeLexiconAdapter
from adapter.wordnet.nltk_wordnet import WordNetAdapter
from cli.main import (
    build_parser,
    create_lexicon,
    main,
    parse_arguments,
    read_input,
    selected_categories,
)
from domain.model.lexicon import Category, Command, Sense


def fake_lexicon() -> FakeLexiconAdapter:
    return FakeLexiconAdapter(
        pos={Category.NOUN: {'dog', 'cat'}, Category.VERB: {'run'}},
        senses={'dog': [Sense(Category.NOUN, 'a domesticated canid')]},
        vocabulary={None: ['zebra']},
    )


class TestArgumentParsing(unittest.TestCase):

    def test_options_before_command(self):
        args = build_parser().parse_args(['-n', '-b', 'get', 'dog'])
        self.assertEqual(args.command, 'get')
        self.assertTrue(args.noun)
        self.assertTrue(args.brief)
        self.assertEqual(args.words, ['dog'])

    def test_options_after_command(self):
        args = build_parser().parse_args(['get', '-v', '-j', 'dog', 'cat'])
        self.assertTrue(args.verb)
        self.assertTrue(args.json)
        self.assertFalse(args.noun)
        self.assertEqual(args.words, ['dog', 'cat'])

    def test_options_on_both_sides_are_kept(self):
        args = build_parser().parse_args(['-n', 'get', '-v', 'dog'])
        self.assertTrue(args.noun)
        self.assertTrue(args.verb)

    def test_defaults(self):
        args = build_parser().parse_args(['rand'])
        self.assertEqual(args.num, 1)
        self.assertIsNone(args.file)
        self.assertFalse(args.with_stopwords)
        self.assertEqual(args.source, 'wordnet')

    def test_num_must_be_positive(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_parser().parse_args(['rand', '-N', '0'])

    def test_options_between_words(self):
        parser = build_parser()
        args = parse_arguments(parser, ['get', 'dog', '-n', 'cat', '-b', 'run'])
        self.assertEqual(args.words, ['dog', 'cat', 'run'])
        self.assertTrue(args.noun)
        self.assertTrue(args.brief)

    def test_unknown_option_between_words_is_rejected(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_arguments(build_parser(), ['get', 'dog', '--bogus', 'cat'])

    def test_selected_categories_in_display_order(self):
        args = build_parser().parse_args(['get', '-r', '-n', 'dog'])
        self.assertEqual(selected_categories(args), [Category.NOUN, Category.ADVERB])


class TestReadInput(unittest.TestCase):

    def test_positional_words(self):
        args = build_parser().parse_args(['get', 'dog', 'cat'])
        self.assertEqual(read_input(Command.GET, args, io.StringIO('ignored')), 'dog cat')

    def test_stdin_when_no_words(self):
        args = build_parser().parse_args(['get'])
        self.assertEqual(read_input(Command.GET, args, io.StringIO('dog\n\x04\n')), 'dog\n')

    def test_rand_never_reads_stdin(self):
        args = build_parser().parse_args(['rand'])
        self.assertEqual(read_input(Command.RAND, args, io.StringIO('dog')), '')


class TestCreateLexicon(unittest.TestCase):

    def test_sources(self):
        self.assertIsInstance(create_lexicon('wordnet'), WordNetAdapter)
        self.assertIsInstance(create_lexicon('freedictionary'), FreeDictionaryAdapter)


class TestMain(unittest.TestCase):

    def run_main(self, argv, stdin=''):
        stdout, stderr = io.StringIO(), io.StringIO()
        with patch('cli.main.create_lexicon', return_value=fake_lexicon()), \
                patch('cli.main.setup_structured_logging'), \
                patch('sys.stdin', io.StringIO(stdin)), \
                redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_no_command_prints_help(self):
        code, out, _ = self.run_main([])
        self.assertEqual(code, 0)
        self.assertIn('usage: poslookup', out)

    def test_get_brief(self):
        code, out, _ = self.run_main(['get', '-n', '-b', 'the', 'dog', 'and', 'run'])
        self.assertEqual(code, 0)
        self.assertEqual(out, 'dog \n')

    def test_get_with_option_between_words(self):
        code, out, _ = self.run_main(['get', 'dog', '-b', '-n', 'cat'])
        self.assertEqual(code, 0)
        self.assertEqual(out, 'dog cat \n')

    def test_get_count(self):
        code, out, _ = self.run_main(['-c', 'get', 'dog', 'cat', 'run'])
        self.assertEqual(out, '2 0 1 0 3\n')

    def test_def_from_stdin(self):
        code, out, _ = self.run_main(['def'], stdin='dog\n')
        self.assertEqual(out, 'dog\n  Noun: a domesticated canid\n\n')

    def test_rand_json(self):
        code, out, _ = self.run_main(['rand', '-j'])
        self.assertEqual(json.loads(out), {'': ['zebra']})

    def test_stopwords_json(self):
        code, out, _ = self.run_main(['stopwords', '-j'])
        self.assertIn('the', json.loads(out))

    def test_unreadable_file_reports_error(self):
        code, out, err = self.run_main(['get', '-i', '/nonexistent/words.txt'])
        self.assertEqual(code, 1)
        self.assertEqual(out, '')
        self.assertIn('/nonexistent/words.txt', err)


if __name__ == '__main__':
    unittest.main()
