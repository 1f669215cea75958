import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from cryptography.exceptions import InvalidTag

from credkeep.core.encryption import AES256FileBackend, PlainFileBackend, backend_for


class TestPlainFileBackend(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / 'sub' / 'accounts.txt'

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_loads_empty(self):
        self.assertEqual(PlainFileBackend().load(self.path), '')

    def test_save_and_load(self):
        backend = PlainFileBackend()
        backend.save(self.path, "naïve\tid\tpw\t2020/01/01\n")
        self.assertEqual(backend.load(self.path), "naïve\tid\tpw\t2020/01/01\n")
        self.assertEqual(stat.S_IMODE(os.stat(self.path).st_mode), 0o600)


class TestAES256FileBackend(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / 'accounts.enc'

    def tearDown(self):
        self.tmp.cleanup()

    def test_round_trip_with_store_passphrase(self):
        prompt = mock.Mock(return_value='correct horse')
        backend = AES256FileBackend(prompt)
        backend.save(self.path, 'a\tb\tc\t2020/01/01\n', 'correct horse')
        prompt.assert_not_called()
        self.assertNotIn(b'2020/01/01', self.path.read_bytes())
        self.assertEqual(backend.load(self.path), 'a\tb\tc\t2020/01/01\n')
        self.assertEqual(backend.last_passphrase, 'correct horse')

    def test_save_without_passphrase_prompts(self):
        prompt = mock.Mock(return_value='pw')
        AES256FileBackend(prompt).save(self.path, 'text')
        prompt.assert_called_once_with()
        self.assertEqual(AES256FileBackend(lambda: 'pw').load(self.path), 'text')

    def test_wrong_passphrase(self):
        AES256FileBackend(lambda: 'right').save(self.path, 'text', 'right')
        backend = AES256FileBackend(lambda: 'wrong')
        with self.assertRaises(InvalidTag):
            backend.load(self.path)
        self.assertIsNone(backend.last_passphrase)

    def test_fresh_salt_per_save(self):
        backend = AES256FileBackend(lambda: 'pw')
        backend.save(self.path, 'text', 'pw')
        first = self.path.read_bytes()
        backend.save(self.path, 'text', 'pw')
        self.assertNotEqual(first, self.path.read_bytes())

    def test_missing_file_does_not_prompt(self):
        prompt = mock.Mock()
        self.assertEqual(AES256FileBackend(prompt).load(self.path), '')
        prompt.assert_not_called()


class TestBackendFor(unittest.TestCase):
    def test_known_backends(self):
        self.assertIsInstance(backend_for('plain', lambda: ''), PlainFileBackend)
        self.assertIsInstance(backend_for('aes', lambda: ''), AES256FileBackend)

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            backend_for('rot13', lambda: '')


if __name__ == '__main__':
    unittest.main()
