"""Unit tests for FakeUnitOfWork and FakeContentLinkRepository snapshots."""

import unittest

from adapter.fake.content_link_repository import FakeContentLinkRepository
from adapter.fake.unit_of_work import FakeUnitOfWork
from domain.model.content import ContentRef


class TestFakeUnitOfWork(unittest.TestCase):

    def setUp(self):
        self.links = FakeContentLinkRepository()
        self.uow = FakeUnitOfWork(self.links)
        self.item = ContentRef.text('t1')

    def test_commit_keeps_writes(self):
        self.uow.run(lambda session: self.links.add_links(self.item, 'en', {'v1'}, session=session))
        self.assertEqual(self.links.get_vocabulary_ids(self.item), {'v1'})
        self.assertEqual(self.uow.committed, 1)

    def test_exception_restores_every_participant(self):
        self.links.add_links(self.item, 'en', {'v1'})

        def work(session):
            self.links.add_links(self.item, 'en', {'v2'}, session=session)
            self.links.remove_links(self.item, {'v1'}, session=session)
            raise RuntimeError("abort")

        with self.assertRaises(RuntimeError):
            self.uow.run(work)
        self.assertEqual(self.links.get_vocabulary_ids(self.item), {'v1'})
        self.assertEqual(self.uow.rolled_back, 1)

    def test_returns_work_result(self):
        self.assertEqual(self.uow.run(lambda session: 42), 42)


if __name__ == '__main__':
    unittest.main()
