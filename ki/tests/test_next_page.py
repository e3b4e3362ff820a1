"""Tests for :mod:`ki.next_page`."""

from unittest import TestCase

from ki.next_page import is_local_url


class TestIsLocalUrl(TestCase):
    """Only return URLs within the application are followed."""

    def test_local(self):
        """Relative paths are local."""
        for url in ['someUrl', '/', '/Home/Index', '/Account/LogOn?x=1',
                    'Account/ChangePassword']:
            self.assertTrue(is_local_url(url), f'{url} should be local')

    def test_not_local(self):
        """URLs with a scheme or host are not."""
        for url in ['', None, 'https://example.com/', 'http://localhost/',
                    '//example.com/foo', '/\\example.com',
                    'javascript:alert(1)', '/' + 'x' * 300]:
            self.assertFalse(is_local_url(url), f'{url} should not be local')
