"""Unit tests for MongoLearnerVocabularyRepository with a mocked collection."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from pymongo import ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError

from adapter.mongodb.learner_vocabulary_repository import MongoLearnerVocabularyRepository
from domain.model.errors import StorageError
from domain.model.learner_vocabulary import LearnerVocabulary, LearnerVocabularyFilter, LearnerVocabularySort
from domain.model.vocab_level import VocabLevel
from domain.model.vocabulary import Token, Vocabulary

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _doc(row_id, vocabulary_id, level=1, learner_id='learner-1'):
    return {
        '_id': row_id,
        'learner_id': learner_id,
        'vocabulary_id': vocabulary_id,
        'language': 'de',
        'text': 'Hund',
        'is_phrase': False,
        'level': level,
        'notes': '',
        'created_at': NOW,
        'updated_at': NOW,
    }


class MongoLearnerVocabularyTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = MongoLearnerVocabularyRepository(MagicMock())
        self.collection = self.repo.collection
        self.vocab = Vocabulary.create('de', Token.of("Hund"))
        self.row = LearnerVocabulary.create('learner-1', self.vocab)


class TestGetOrCreate(MongoLearnerVocabularyTestCase):

    def test_atomic_upsert(self):
        self.collection.find_one_and_update.return_value = _doc(self.row.id, self.vocab.id)

        result = self.repo.get_or_create(self.row)

        self.assertEqual(result.id, self.row.id)
        query, update = self.collection.find_one_and_update.call_args[0]
        kwargs = self.collection.find_one_and_update.call_args[1]
        self.assertEqual(query, {'learner_id': 'learner-1', 'vocabulary_id': self.vocab.id})
        self.assertNotIn('learner_id', update['$setOnInsert'])
        self.assertEqual(update['$setOnInsert']['level'], 1)
        self.assertTrue(kwargs['upsert'])
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)

    def test_existing_row_returned_unmodified(self):
        self.collection.find_one_and_update.return_value = _doc('winner', self.vocab.id, level=6)
        result = self.repo.get_or_create(self.row)
        self.assertEqual(result.id, 'winner')
        self.assertEqual(result.level, VocabLevel.KNOWN)

    def test_lost_upsert_race_rereads(self):
        self.collection.find_one_and_update.side_effect = DuplicateKeyError("E11000")
        self.collection.find_one.return_value = _doc('winner', self.vocab.id)

        result = self.repo.get_or_create(self.row)

        self.assertEqual(result.id, 'winner')
        self.collection.find_one.assert_called_once_with(self.row.identity)

    def test_storage_error(self):
        self.collection.find_one_and_update.side_effect = PyMongoError("down")
        with self.assertRaises(StorageError):
            self.repo.get_or_create(self.row)


class TestGetOrCreateMany(MongoLearnerVocabularyTestCase):

    def test_inserts_missing_and_rereads_conflicts(self):
        other = Vocabulary.create('de', Token.of("Katze"))
        third = Vocabulary.create('de', Token.of("Maus"))
        rows = [self.row, LearnerVocabulary.create('learner-1', other), LearnerVocabulary.create('learner-1', third)]
        self.collection.find.side_effect = [
            [_doc('existing', self.vocab.id, level=4)],
            [_doc('winner', third.id)],
        ]
        self.collection.insert_many.side_effect = BulkWriteError({
            'writeErrors': [{'index': 1, 'code': 11000, 'errmsg': 'dup'}],
            'writeConcernErrors': [],
        })

        result = self.repo.get_or_create_many(rows)

        self.assertEqual([r.id for r in result], ['existing', rows[1].id, 'winner'])
        inserted = self.collection.insert_many.call_args[0][0]
        self.assertEqual([d['vocabulary_id'] for d in inserted], [other.id, third.id])

    def test_logs_created_count_at_info(self):
        self.collection.find.return_value = []

        with self.assertLogs('adapter.mongodb.learner_vocabulary_repository', level='INFO') as logs:
            result = self.repo.get_or_create_many([self.row])

        self.assertEqual([r.id for r in result], [self.row.id])
        self.assertEqual(logs.records[-1].createdCount, 1)

    def test_rows_of_several_learners_rejected(self):
        with self.assertRaises(ValueError):
            self.repo.get_or_create_many([self.row, LearnerVocabulary.create('learner-2', self.vocab)])


class TestUpdate(MongoLearnerVocabularyTestCase):

    def test_partial_update_never_upserts(self):
        self.collection.find_one_and_update.return_value = _doc(self.row.id, self.vocab.id, level=-1)

        result = self.repo.update('learner-1', self.vocab.id, level=VocabLevel.IGNORED)

        self.assertEqual(result.level, VocabLevel.IGNORED)
        update = self.collection.find_one_and_update.call_args[0][1]
        self.assertEqual(update['$set']['level'], -1)
        self.assertNotIn('notes', update['$set'])
        self.assertNotIn('upsert', self.collection.find_one_and_update.call_args[1])

    def test_missing_row(self):
        self.collection.find_one_and_update.return_value = None
        self.assertIsNone(self.repo.update('learner-1', 'v', notes="x"))


class TestFind(MongoLearnerVocabularyTestCase):

    def test_query_sort_and_page(self):
        self.collection.count_documents.return_value = 7
        cursor = self.collection.find.return_value.sort.return_value.skip.return_value.limit.return_value
        cursor.__iter__.return_value = iter([_doc('r1', 'v1')])

        rows, total = self.repo.find('learner-1', LearnerVocabularyFilter(
            language='de',
            levels=(VocabLevel.LEVEL_1, VocabLevel.KNOWN),
            is_phrase=False,
            search='a.b',
            sort_by=LearnerVocabularySort.UPDATED_AT,
            descending=True,
            skip=10,
            limit=5,
        ))

        self.assertEqual(total, 7)
        self.assertEqual([r.id for r in rows], ['r1'])
        query = self.collection.count_documents.call_args[0][0]
        self.assertEqual(query, {
            'learner_id': 'learner-1',
            'language': 'de',
            'level': {'$in': [1, 6]},
            'is_phrase': False,
            'text': {'$regex': r'a\.b', '$options': 'i'},
        })
        self.collection.find.return_value.sort.assert_called_once_with([('updated_at', -1), ('_id', 1)])
        self.collection.find.return_value.sort.return_value.skip.assert_called_once_with(10)


class TestCounts(MongoLearnerVocabularyTestCase):

    def test_count_saved_ungrouped(self):
        self.collection.aggregate.return_value = [{'_id': None, 'count': 12}]

        result = self.repo.count_saved('learner-1', levels=[VocabLevel.KNOWN], saved_from=NOW)

        self.assertEqual(result[0].count, 12)
        self.assertIsNone(result[0].language)
        pipeline = self.collection.aggregate.call_args[0][0]
        self.assertEqual(pipeline[0]['$match'], {
            'learner_id': 'learner-1', 'level': {'$in': [6]}, 'created_at': {'$gte': NOW},
        })
        self.assertIsNone(pipeline[1]['$group']['_id'])

    def test_count_saved_nothing(self):
        self.collection.aggregate.return_value = []
        self.assertEqual(self.repo.count_saved('learner-1')[0].count, 0)

    def test_count_saved_grouped(self):
        self.collection.aggregate.return_value = [{'_id': 'de', 'count': 3}, {'_id': 'fr', 'count': 1}]
        result = self.repo.count_saved('learner-1', group_by_language=True)
        self.assertEqual([(c.language, c.count) for c in result], [('de', 3), ('fr', 1)])

    def test_count_learners_excludes_ignored(self):
        self.collection.aggregate.return_value = [{'_id': 'v1', 'count': 2}]
        self.assertEqual(self.repo.count_learners(['v1']), {'v1': 2})
        match = self.collection.aggregate.call_args[0][0][0]['$match']
        self.assertEqual(match['level'], {'$ne': -1})


if __name__ == '__main__':
    unittest.main()
