"""Tests for compute_plan: descriptor generation and expected counts."""

import unittest

from domain.model.lexicon import Category, Command
from domain.model.plan import KeyMode, Operation, RandomQuery
from services.command_plan import compute_plan, select_categories

ALL = list(Category)


class TestSelectCategories(unittest.TestCase):

    def test_empty_selection_defaults_to_all(self):
        self.assertEqual(select_categories(Command.GET, []), tuple(ALL))
        self.assertEqual(select_categories(Command.DEF, None), tuple(ALL))

    def test_empty_selection_for_rand_is_unfiltered(self):
        self.assertEqual(select_categories(Command.RAND, []), (None,))

    def test_selection_is_deduplicated_in_display_order(self):
        selected = [Category.VERB, Category.NOUN, Category.VERB]
        self.assertEqual(
            select_categories(Command.GET, selected),
            (Category.NOUN, Category.VERB),
        )


class TestComputePlanGet(unittest.TestCase):

    def test_one_call_per_category_over_whole_word_list(self):
        """get: expected_count == |categories|, each call sees every word."""
        plan = compute_plan(Command.GET, [Category.NOUN, Category.VERB], ['dog', 'run'])

        self.assertEqual(plan.expected_count, 2)
        self.assertEqual(plan.key_mode, KeyMode.CATEGORY)
        self.assertEqual([d.category for d in plan.descriptors], [Category.NOUN, Category.VERB])
        for descriptor in plan.descriptors:
            self.assertEqual(descriptor.operation, Operation.FILTER)
            self.assertEqual(descriptor.target, ('dog', 'run'))

    def test_default_categories(self):
        plan = compute_plan(Command.GET, [], ['dog'])
        self.assertEqual(plan.expected_count, 4)
        self.assertEqual(plan.result_keys(), ['Noun', 'Adjective', 'Verb', 'Adverb'])

    def test_zero_words_yields_empty_plan(self):
        plan = compute_plan(Command.GET, [Category.NOUN], [])
        self.assertEqual(plan.expected_count, 0)
        self.assertEqual(plan.descriptors, ())


class TestComputePlanDef(unittest.TestCase):

    def test_one_call_per_word(self):
        plan = compute_plan(Command.DEF, [], ['bank', 'river'])

        self.assertEqual(plan.expected_count, 2)
        self.assertEqual(plan.key_mode, KeyMode.WORD)
        self.assertEqual([d.target for d in plan.descriptors], ['bank', 'river'])
        self.assertTrue(all(d.operation is Operation.DEFINE for d in plan.descriptors))
        self.assertEqual(plan.result_keys(), ['bank', 'river'])

    def test_categories_collapse_but_are_kept_for_filtering(self):
        plan = compute_plan(Command.DEF, [Category.VERB], ['bank'])
        self.assertEqual(plan.expected_count, 1)
        self.assertEqual(plan.categories, (Category.VERB,))

    def test_zero_words_yields_empty_plan(self):
        self.assertEqual(compute_plan(Command.DEF, [], []).expected_count, 0)


class TestComputePlanRand(unittest.TestCase):

    def test_no_words_issues_single_unfiltered_query(self):
        plan = compute_plan(Command.RAND, [], [], count=3)

        self.assertEqual(plan.expected_count, 1)
        descriptor = plan.descriptors[0]
        self.assertIsNone(descriptor.category)
        self.assertEqual(descriptor.target, RandomQuery(starts_with='', count=3))
        self.assertEqual(plan.result_keys(), [''])

    def test_one_call_per_word_without_categories(self):
        plan = compute_plan(Command.RAND, [], ['ca', 'do'])
        self.assertEqual(plan.expected_count, 2)
        self.assertEqual(
            [d.target.starts_with for d in plan.descriptors], ['ca', 'do'],
        )

    def test_categories_times_words_with_selection(self):
        plan = compute_plan(Command.RAND, [Category.NOUN, Category.VERB], ['ca', 'do'])

        self.assertEqual(plan.expected_count, 4)
        self.assertEqual(
            [(d.category, d.target.starts_with) for d in plan.descriptors],
            [
                (Category.NOUN, 'ca'), (Category.NOUN, 'do'),
                (Category.VERB, 'ca'), (Category.VERB, 'do'),
            ],
        )

    def test_count_defaults_to_one(self):
        plan = compute_plan(Command.RAND, [], [])
        self.assertEqual(plan.descriptors[0].target.count, 1)


class TestComputePlanOther(unittest.TestCase):

    def test_parse_issues_no_lookups(self):
        plan = compute_plan(Command.PARSE, [Category.NOUN], ['dog'])
        self.assertEqual(plan.expected_count, 0)
        self.assertEqual(plan.descriptors, ())

    def test_stopwords_is_not_plannable(self):
        with self.assertRaises(ValueError):
            compute_plan(Command.STOPWORDS, [], ['dog'])


if __name__ == '__main__':
    unittest.main()
