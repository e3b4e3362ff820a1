"""End-to-end tests, via requests to the user interface."""

from unittest import TestCase, mock
from datetime import datetime, timedelta
from http import HTTPStatus
import os

from pytz import UTC
from sqlalchemy.exc import OperationalError

from ki.factory import create_web_app
from ki.services import datastore
from ki.services.datastore.models import DBPost, DBUser


class TestAccountRoutes(TestCase):
    """Register, log on, change password, log off."""

    def setUp(self):
        self.env = mock.patch.dict(os.environ, {
            'DATABASE_URI': 'sqlite:///:memory:',
            'SESSION_COOKIE_SECURE': '0',
            'MIN_REQUIRED_PASSWORD_LENGTH': '6',
            'SECRET_KEY': 'foosecret',
        })
        self.env.start()
        self.app = create_web_app()
        self.client = self.app.test_client()
        with self.app.app_context():
            datastore.create_all()

    def tearDown(self):
        with self.app.app_context():
            datastore.drop_all()
        self.env.stop()

    def _register(self, username='foouser', password='foopass1'):
        return self.client.post('/Account/Register', data={
            'username': username,
            'email': f'{username}@bar.edu',
            'password': password,
            'confirmPassword': password
        })

    def test_get_forms(self):
        """The account forms are available to anonymous users."""
        response = self.client.get('/Account/LogOn')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertEqual(response.json['view'], 'LogOn')

        response = self.client.get('/Account/Register')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        self.assertEqual(response.json['view_data'],
                         {'password_length': 6})
        self.assertEqual(response.headers['X-Frame-Options'], 'DENY')

    def test_register_and_log_on(self):
        """A new user can register, log off and log on again."""
        response = self._register()
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)
        self.assertIn(response.headers['Location'], ['/', '/Home/Index'])

        response = self.client.get('/Account/ChangePassword')
        self.assertEqual(response.status_code, HTTPStatus.OK,
                         'Registered user is logged on')

        response = self.client.get('/Account/LogOff')
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)
        response = self.client.get('/Account/LogOff')
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER,
                         'Logging off twice is harmless')

        response = self.client.get('/Account/ChangePassword')
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)
        self.assertTrue(
            response.headers['Location'].endswith('/Account/LogOn')
        )

        response = self.client.post('/Account/LogOn?returnUrl=/Home/Index',
                                    data={'username': 'foouser',
                                          'password': 'foopass1',
                                          'rememberMe': 'true,false'})
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)
        self.assertEqual(response.headers['Location'], '/Home/Index')

    def test_log_on_with_bad_password(self):
        """Wrong credentials are reported on the form."""
        self._register()
        self.client.get('/Account/LogOff')
        response = self.client.post('/Account/LogOn',
                                    data={'username': 'foouser',
                                          'password': 'nope'})
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)
        self.assertEqual(response.json['errors'], {
            '_FORM': ['The username or password provided is incorrect.']
        })

    def test_password_of_spaces(self):
        """A user who registers with a password of spaces can log on."""
        response = self._register(password='      ')
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)
        self.client.get('/Account/LogOff')
        response = self.client.post('/Account/LogOn',
                                    data={'username': 'foouser',
                                          'password': '      '})
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)

    def test_register_duplicate(self):
        """Usernames can only be registered once."""
        self._register()
        self.client.get('/Account/LogOff')
        response = self._register()
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)
        self.assertEqual(response.json['errors'], {
            '_FORM': ['Username already exists. Please enter a different'
                      ' user name.']
        })

    def test_change_password(self):
        """A logged-on user can change their password."""
        self._register()
        response = self.client.post('/Account/ChangePassword', data={
            'currentPassword': 'foopass1',
            'newPassword': 'newpass1',
            'confirmPassword': 'newpass1'
        })
        self.assertEqual(response.status_code, HTTPStatus.SEE_OTHER)
        self.assertTrue(response.headers['Location']
                        .endswith('/Account/ChangePasswordSuccess'))

        response = self.client.get('/Account/ChangePasswordSuccess')
        self.assertEqual(response.json['view'], 'ChangePasswordSuccess')

        response = self.client.post('/Account/ChangePassword', data={
            'currentPassword': 'foopass1',
            'newPassword': 'newpass2',
            'confirmPassword': 'newpass2'
        })
        self.assertEqual(response.status_code, HTTPStatus.BAD_REQUEST)
        self.assertEqual(response.json['errors'], {
            '_FORM': ['The current password is incorrect or the new'
                      ' password is invalid.']
        })

    def test_home_lists_published_posts(self):
        """The home page lists posts that are currently published."""
        self._register()
        now = datetime.now(tz=UTC)
        with self.app.app_context():
            with datastore.transaction() as session:
                user = session.query(DBUser).one()
                session.add(DBPost(title='Hello', content='First post',
                                   is_published=True,
                                   published_at=now - timedelta(hours=1),
                                   published_by=user))
                session.add(DBPost(title='Draft', is_published=False,
                                   published_by=user))
        response = self.client.get('/')
        self.assertEqual(response.status_code, HTTPStatus.OK)
        posts = response.json['view_data']['posts']
        self.assertEqual([p['title'] for p in posts], ['Hello'])
        self.assertEqual(posts[0]['published_by'], 'foouser')

    def test_database_unavailable(self):
        """A database outage is reported as such."""
        with mock.patch('ki.controllers.home.datastore'
                        '.get_published_posts') as get_posts:
            get_posts.side_effect = datastore.Unavailable('nope')
            response = self.client.get('/Home/Index')
        self.assertEqual(response.status_code,
                         HTTPStatus.SERVICE_UNAVAILABLE)

    def test_database_fails_on_commit(self):
        """A write that can't be committed is reported as an outage."""
        self._register()
        self.client.get('/Account/LogOff')
        with mock.patch.object(datastore.db.session, 'commit') as commit:
            commit.side_effect = OperationalError('COMMIT', {}, None)
            response = self.client.post('/Account/LogOn',
                                        data={'username': 'foouser',
                                              'password': 'foopass1'})
        self.assertEqual(response.status_code,
                         HTTPStatus.SERVICE_UNAVAILABLE)
