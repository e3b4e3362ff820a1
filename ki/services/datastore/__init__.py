"""
Integration with the Ki database.

Provides :class:`SqlMembershipProvider`, the default membership provider,
along with the helpers that the application uses to set up the database
and to read published posts.
"""

from typing import Generator, List, Optional, Tuple
from contextlib import contextmanager
from datetime import datetime
import logging
import uuid

from flask import Flask
from pytz import UTC
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import joinedload
from werkzeug.security import check_password_hash, generate_password_hash

from ... import config
from ...domain import CreateStatus, CreateUserResult, MembershipUser
from ..exceptions import PasswordRejected, Unavailable
from ..provider import MembershipProvider
from .models import db, DBUser, DBMembership, DBPost

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 256


def now() -> datetime:
    """Get the current time, in UTC."""
    return datetime.now(tz=UTC)


@contextmanager
def transaction() -> Generator:
    """
    Context manager for database transaction.

    Raises
    ------
    :class:`.Unavailable`
        If the database can't be reached; the transaction is rolled back.

    """
    try:
        yield db.session
        if db.session.new or db.session.dirty or db.session.deleted:
            db.session.commit()
    except OperationalError as e:
        logger.warning('Commit failed, rolling back: %s', str(e))
        db.session.rollback()
        raise Unavailable('Database is temporarily unavailable') from e
    except Exception as e:
        logger.warning('Commit failed, rolling back: %s', str(e))
        db.session.rollback()
        raise


def init_app(app: Flask) -> None:
    """Attach the database session to the application."""
    db.init_app(app)


def create_all() -> None:
    """Create all tables in the database."""
    db.create_all()


def drop_all() -> None:
    """Drop all tables in the database."""
    db.drop_all()


def application_id(application_name: str) -> str:
    """Derive a stable application ID from an application name."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL,
                          f'ki:{application_name.lower()}'))


def get_published_posts(at: Optional[datetime] = None) -> List[DBPost]:
    """
    Get the posts that are visible at a given time, newest first.

    A post is visible if it is published, its publication time has
    arrived, and it has not yet expired.
    """
    at = at if at is not None else now()
    try:
        return db.session.query(DBPost) \
            .options(joinedload(DBPost.published_by)) \
            .filter(DBPost.is_published.is_(True)) \
            .filter(or_(DBPost.published_at.is_(None),
                        DBPost.published_at <= at)) \
            .filter(or_(DBPost.expires_at.is_(None),
                        DBPost.expires_at > at)) \
            .order_by(DBPost.published_at.desc()) \
            .all()
    except OperationalError as e:
        raise Unavailable('Database is temporarily unavailable') from e


class SqlMembershipProvider(MembershipProvider):
    """
    Membership provider backed by the legacy membership tables.

    Parameters
    ----------
    application_name : str
        Members are scoped to an application.
    min_required_password_length : int
        Shortest password accepted when creating a member or changing a
        password.
    requires_unique_email : bool
        If set, each member must have a distinct e-mail address.

    """

    def __init__(self, application_name: Optional[str] = None,
                 min_required_password_length: Optional[int] = None,
                 requires_unique_email: Optional[bool] = None) -> None:
        if application_name is None:
            application_name = config.MEMBERSHIP_APPLICATION_NAME
        if min_required_password_length is None:
            min_required_password_length = config.MIN_REQUIRED_PASSWORD_LENGTH
        if requires_unique_email is None:
            requires_unique_email = config.REQUIRES_UNIQUE_EMAIL
        self.application_name = application_name
        self.application_id = application_id(application_name)
        self._min_required_password_length = min_required_password_length
        self.requires_unique_email = requires_unique_email

    @property
    def min_required_password_length(self) -> int:
        """Shortest password that this provider will accept."""
        return self._min_required_password_length

    def create_user(self, username: str, password: str,
                    email: str) -> CreateUserResult:
        """
        Add a new member.

        Returns
        -------
        :class:`.CreateUserResult`
            The new member, if :attr:`.CreateStatus.SUCCESS`.

        Raises
        ------
        :class:`.Unavailable`
            If the database can't be reached.

        """
        status = self._check_new_user(username, password, email)
        if status is not CreateStatus.SUCCESS:
            return CreateUserResult(user=None, status=status)

        created = now()
        db_user = DBUser(
            user_id=str(uuid.uuid4()),
            application_id=self.application_id,
            user_name=username,
            lowered_user_name=username.lower(),
            is_anonymous=False,
            last_activity_date=created
        )
        db_membership = DBMembership(
            user=db_user,
            application_id=self.application_id,
            password=generate_password_hash(password),
            email=email,
            lowered_email=email.lower() if email else None,
            is_approved=True,
            create_date=created,
            last_password_changed_date=created
        )
        try:
            with transaction() as session:
                session.add(db_user)
                session.add(db_membership)
        except IntegrityError as e:
            logger.debug('Integrity error creating %s: %s', username, e)
            return CreateUserResult(user=None,
                                    status=CreateStatus.DUPLICATE_USER_NAME)
        except SQLAlchemyError:
            logger.exception('Could not create user %s', username)
            return CreateUserResult(user=None,
                                    status=CreateStatus.PROVIDER_ERROR)
        logger.debug('Created user %s with id %s', username, db_user.user_id)
        return CreateUserResult(user=_to_domain(db_user, db_membership),
                                status=CreateStatus.SUCCESS)

    def validate_user(self, username: str, password: str) -> bool:
        """Check a username and password; approved members only."""
        if not username or not password:
            return False
        db_user, db_membership = self._get(username)
        if db_user is None or db_membership is None:
            logger.debug('No such user: %s', username)
            return False
        if not db_membership.is_approved:
            logger.debug('User %s is not approved', username)
            return False
        if not check_password_hash(db_membership.password, password):
            logger.debug('Incorrect password for %s', username)
            return False
        with transaction():
            db_membership.last_login_date = now()
            db_user.last_activity_date = db_membership.last_login_date
        return True

    def get_user(self, username: str,
                 user_is_online: bool = False) -> Optional[MembershipUser]:
        """
        Look up a member by username.

        If ``user_is_online`` is set, the member's last activity time is
        updated.
        """
        db_user, db_membership = self._get(username)
        if db_user is None:
            return None
        if user_is_online:
            with transaction():
                db_user.last_activity_date = now()
        return _to_domain(db_user, db_membership)

    def change_password(self, username: str, old_password: str,
                        new_password: str) -> bool:
        """
        Replace a member's password.

        Returns ``False`` if the old password is not correct.

        Raises
        ------
        :class:`.PasswordRejected`
            If the new password is too short.

        """
        db_user, db_membership = self._get(username)
        if db_membership is None \
                or not check_password_hash(db_membership.password,
                                           old_password or ''):
            return False
        if not new_password \
                or len(new_password) < self.min_required_password_length:
            raise PasswordRejected('The new password is too short')
        with transaction():
            db_membership.password = generate_password_hash(new_password)
            db_membership.last_password_changed_date = now()
            db_user.last_activity_date = \
                db_membership.last_password_changed_date
        logger.debug('Changed password for %s', username)
        return True

    def _check_new_user(self, username: str, password: str,
                        email: str) -> CreateStatus:
        if not username or username != username.strip() \
                or len(username) > MAX_USERNAME_LENGTH:
            return CreateStatus.INVALID_USER_NAME
        if not password or len(password) < self.min_required_password_length:
            return CreateStatus.INVALID_PASSWORD
        if self.requires_unique_email and not email:
            return CreateStatus.INVALID_EMAIL
        db_user, _ = self._get(username)
        if db_user is not None:
            return CreateStatus.DUPLICATE_USER_NAME
        if self.requires_unique_email and self._email_exists(email):
            return CreateStatus.DUPLICATE_EMAIL
        return CreateStatus.SUCCESS

    def _get(self, username: str) \
            -> Tuple[Optional[DBUser], Optional[DBMembership]]:
        if not username:
            return None, None
        try:
            db_user = db.session.query(DBUser) \
                .options(joinedload(DBUser.membership)) \
                .filter(DBUser.application_id == self.application_id) \
                .filter(DBUser.lowered_user_name == username.lower()) \
                .first()
        except OperationalError as e:
            raise Unavailable('Database is temporarily unavailable') from e
        if db_user is None:
            return None, None
        return db_user, db_user.membership

    def _email_exists(self, email: str) -> bool:
        try:
            data = db.session.query(DBMembership) \
                .filter(DBMembership.application_id == self.application_id) \
                .filter(DBMembership.lowered_email == email.lower()) \
                .first()
        except OperationalError as e:
            raise Unavailable('Database is temporarily unavailable') from e
        return data is not None


def _to_domain(db_user: DBUser,
               db_membership: Optional[DBMembership]) -> MembershipUser:
    if db_membership is None:
        return MembershipUser(user_id=db_user.user_id,
                              username=db_user.user_name,
                              is_approved=False,
                              last_activity=db_user.last_activity_date)
    return MembershipUser(
        user_id=db_user.user_id,
        username=db_user.user_name,
        email=db_membership.email,
        is_approved=db_membership.is_approved,
        created=db_membership.create_date,
        last_login=db_membership.last_login_date,
        last_activity=db_user.last_activity_date
    )
