"""Unit tests for MongoContentLinkRepository with a mocked collection."""

import unittest
from unittest.mock import MagicMock

from pymongo.errors import PyMongoError

from adapter.mongodb import LEARNER_VOCABULARY_COLLECTION_NAME
from adapter.mongodb.content_link_repository import MongoContentLinkRepository, match_contents
from domain.model.content import ContentRef
from domain.model.errors import StorageError


class MongoContentLinkTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = MongoContentLinkRepository(MagicMock())
        self.collection = self.repo.collection
        self.session = object()
        self.item = ContentRef.text('t1')


class TestMatchContents(unittest.TestCase):

    def test_single_kind(self):
        stage = match_contents([ContentRef.text('b'), ContentRef.text('a')])
        self.assertEqual(stage, {'$match': {'content_kind': 'text', 'content_id': {'$in': ['a', 'b']}}})

    def test_mixed_kinds(self):
        stage = match_contents([ContentRef.text('a'), ContentRef.lesson('l')])
        self.assertEqual(stage, {'$match': {'$or': [
            {'content_kind': 'lesson', 'content_id': {'$in': ['l']}},
            {'content_kind': 'text', 'content_id': {'$in': ['a']}},
        ]}})


class TestLinkSet(MongoContentLinkTestCase):

    def test_get_vocabulary_ids_uses_session(self):
        self.collection.find.return_value = [{'vocabulary_id': 'v1'}, {'vocabulary_id': 'v2'}]

        result = self.repo.get_vocabulary_ids(self.item, session=self.session)

        self.assertEqual(result, {'v1', 'v2'})
        self.collection.find.assert_called_once_with(
            {'content_kind': 'text', 'content_id': 't1'}, {'vocabulary_id': 1}, session=self.session,
        )

    def test_add_links(self):
        self.collection.insert_many.return_value.inserted_ids = ['a', 'b']

        self.assertEqual(self.repo.add_links(self.item, 'en', {'v2', 'v1'}, session=self.session), 2)

        docs = self.collection.insert_many.call_args[0][0]
        self.assertEqual([d['vocabulary_id'] for d in docs], ['v1', 'v2'])
        self.assertTrue(all(d['content_kind'] == 'text' and d['language'] == 'en' for d in docs))
        self.assertIs(self.collection.insert_many.call_args[1]['session'], self.session)

    def test_add_nothing(self):
        self.assertEqual(self.repo.add_links(self.item, 'en', set()), 0)
        self.collection.insert_many.assert_not_called()

    def test_remove_links(self):
        self.collection.delete_many.return_value.deleted_count = 1

        self.assertEqual(self.repo.remove_links(self.item, {'v1'}, session=self.session), 1)

        self.collection.delete_many.assert_called_once_with(
            {'content_kind': 'text', 'content_id': 't1', 'vocabulary_id': {'$in': ['v1']}},
            session=self.session,
        )

    def test_transactional_writes_let_driver_errors_through(self):
        """with_transaction needs the original error to decide on a retry."""
        self.collection.delete_many.side_effect = PyMongoError("WriteConflict")
        with self.assertRaises(PyMongoError):
            self.repo.delete_for_content(self.item, session=self.session)


class TestCountByLevel(MongoContentLinkTestCase):

    def test_pipeline_and_result(self):
        self.collection.aggregate.return_value = [
            {'_id': {'content_kind': 'text', 'content_id': 't1', 'level': 0}, 'count': 3},
            {'_id': {'content_kind': 'text', 'content_id': 't1', 'level': 6}, 'count': 2},
        ]

        result = self.repo.count_by_level([self.item, ContentRef.text('t2')], 'learner-1')

        self.assertEqual(result, {self.item: {0: 3, 6: 2}})
        self.collection.aggregate.assert_called_once()
        pipeline = self.collection.aggregate.call_args[0][0]
        self.assertEqual(pipeline[0]['$match']['content_id'], {'$in': ['t1', 't2']})
        lookup = pipeline[1]['$lookup']
        self.assertEqual(lookup['from'], LEARNER_VOCABULARY_COLLECTION_NAME)
        self.assertEqual(lookup['pipeline'][0], {'$match': {'learner_id': 'learner-1'}})
        self.assertTrue(pipeline[2]['$unwind']['preserveNullAndEmptyArrays'])
        self.assertEqual(pipeline[3]['$group']['_id']['level'], {'$ifNull': ['$learner.level', 0]})

    def test_empty_input_skips_query(self):
        self.assertEqual(self.repo.count_by_level([], 'learner-1'), {})
        self.collection.aggregate.assert_not_called()

    def test_storage_error(self):
        self.collection.aggregate.side_effect = PyMongoError("down")
        with self.assertRaises(StorageError):
            self.repo.count_by_level([self.item], 'learner-1')


class TestGroupedAndContentCounts(MongoContentLinkTestCase):

    def test_grouped_counts_each_vocabulary_once_per_group(self):
        lesson = ContentRef.lesson('l1')
        self.collection.aggregate.return_value = [
            {'contents': [{'kind': 'text', 'id': 't1'}, {'kind': 'lesson', 'id': 'l1'}], 'level': 0},
            {'contents': [{'kind': 'lesson', 'id': 'l1'}], 'level': 5},
        ]

        result = self.repo.count_by_level_grouped({'g1': [self.item, lesson], 'g2': [lesson]}, 'learner-1')

        self.assertEqual(result, {'g1': {0: 1, 5: 1}, 'g2': {0: 1, 5: 1}})

    def test_count_content(self):
        self.collection.aggregate.return_value = [{'_id': 'v1', 'count': 4}]
        self.assertEqual(self.repo.count_content(['v1', 'v2']), {'v1': 4})
        pipeline = self.collection.aggregate.call_args[0][0]
        self.assertEqual(pipeline[0], {'$match': {'vocabulary_id': {'$in': ['v1', 'v2']}}})


if __name__ == '__main__':
    unittest.main()
