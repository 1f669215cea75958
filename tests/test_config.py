import os
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from credkeep.config import DEFAULT_FILE, Settings


class TestSettings(unittest.TestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = Settings()
        self.assertEqual(settings.file_path, DEFAULT_FILE)
        self.assertEqual(settings.backend, 'aes')
        self.assertFalse(settings.show_passwords)
        self.assertEqual(settings.clipboard_timeout, 30)
        self.assertEqual(settings.password_length, 16)
        self.assertIsNone(settings.passphrase)

    @mock.patch.dict(os.environ, {
        'CREDKEEP_FILE': '/tmp/accounts.txt',
        'CREDKEEP_BACKEND': 'plain',
        'CREDKEEP_SHOW_PASSWORDS': 'yes',
        'CREDKEEP_CLIPBOARD_TIMEOUT': '0',
        'CREDKEEP_PASSWORD_LENGTH': '24',
        'CREDKEEP_PASSPHRASE': 'pw',
    }, clear=True)
    def test_from_environment(self):
        settings = Settings()
        self.assertEqual(settings.file_path, Path('/tmp/accounts.txt'))
        self.assertEqual(settings.backend, 'plain')
        self.assertTrue(settings.show_passwords)
        self.assertEqual(settings.clipboard_timeout, 0)
        self.assertEqual(settings.password_length, 24)
        self.assertEqual(settings.passphrase, 'pw')

    @mock.patch.dict(os.environ, {'CREDKEEP_PASSPHRASE': '', 'CREDKEEP_SHOW_PASSWORDS': ''}, clear=True)
    def test_empty_variables_use_defaults(self):
        settings = Settings()
        self.assertIsNone(settings.passphrase)
        self.assertFalse(settings.show_passwords)

    @mock.patch.dict(os.environ, {'CREDKEEP_FILE': '~/vault.txt'}, clear=True)
    def test_home_is_expanded(self):
        self.assertEqual(Settings().file_path, Path.home() / 'vault.txt')

    @mock.patch.dict(os.environ, {'CREDKEEP_PASSWORD_LENGTH': 'long'}, clear=True)
    def test_bad_integer(self):
        with self.assertRaises(ValidationError) as cm:
            Settings()
        self.assertIn('password_length', str(cm.exception))
        self.assertIsInstance(cm.exception, ValueError)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_overrides_skip_none(self):
        settings = Settings(backend='plain').with_overrides(file_path=Path('/x'), backend=None)
        self.assertEqual(settings.file_path, Path('/x'))
        self.assertEqual(settings.backend, 'plain')

    def test_passphrase_hidden_from_repr(self):
        self.assertNotIn('hunter2', repr(Settings(passphrase='hunter2')))


if __name__ == '__main__':
    unittest.main()
