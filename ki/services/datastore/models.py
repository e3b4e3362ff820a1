"""
Ki database models.

User and membership data live in tables inherited from an ASP.NET
membership database; table and column names follow that schema.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, \
    String, Text, UniqueConstraint, text
from sqlalchemy.orm import relationship, validates
from flask_sqlalchemy import SQLAlchemy

db: SQLAlchemy = SQLAlchemy()

TITLE_MAX_LENGTH = 64


class DBUser(db.Model):  # type: ignore
    """
    Legacy user table.

    +------------------+------------------+------+-----+---------+
    | Field            | Type             | Null | Key | Default |
    +------------------+------------------+------+-----+---------+
    | UserId           | uniqueidentifier | NO   | PRI | NULL    |
    | ApplicationId    | uniqueidentifier | NO   | MUL | NULL    |
    | UserName         | nvarchar(256)    | NO   |     | NULL    |
    | LoweredUserName  | nvarchar(256)    | NO   | MUL | NULL    |
    | MobileAlias      | nvarchar(16)     | YES  |     | NULL    |
    | IsAnonymous      | bit              | NO   |     | 0       |
    | LastActivityDate | datetime         | NO   |     | NULL    |
    +------------------+------------------+------+-----+---------+

    ``(ApplicationId, LoweredUserName)`` is unique.
    """

    __tablename__ = 'aspnet_Users'
    __table_args__ = (
        UniqueConstraint('ApplicationId', 'LoweredUserName',
                         name='uq_aspnet_users_application_lowered_name'),
    )

    user_id = Column('UserId', String(36), primary_key=True)
    application_id = Column('ApplicationId', String(36), nullable=False,
                            index=True)
    user_name = Column('UserName', String(256), nullable=False)
    lowered_user_name = Column('LoweredUserName', String(256),
                               nullable=False, index=True)
    mobile_alias = Column('MobileAlias', String(16))
    is_anonymous = Column('IsAnonymous', Boolean, nullable=False,
                          server_default=text('0'))
    last_activity_date = Column('LastActivityDate', DateTime, nullable=False)

    authors = relationship('DBAuthor', back_populates='user',
                           cascade='all, delete-orphan')
    membership = relationship('DBMembership', back_populates='user',
                              uselist=False, cascade='all, delete-orphan')


class DBMembership(db.Model):  # type: ignore
    """Legacy credential table; one row per user created by the provider."""

    __tablename__ = 'aspnet_Membership'

    user_id = Column('UserId', ForeignKey('aspnet_Users.UserId'),
                     primary_key=True)
    application_id = Column('ApplicationId', String(36), nullable=False)
    password = Column('Password', String(255), nullable=False)
    email = Column('Email', String(256))
    lowered_email = Column('LoweredEmail', String(256), index=True)
    is_approved = Column('IsApproved', Boolean, nullable=False,
                         server_default=text('1'))
    create_date = Column('CreateDate', DateTime, nullable=False)
    last_login_date = Column('LastLoginDate', DateTime)
    last_password_changed_date = Column('LastPasswordChangedDate', DateTime)

    user = relationship('DBUser', back_populates='membership')


class DBAuthor(db.Model):  # type: ignore
    """Links a user to the content they write."""

    __tablename__ = 'Author'

    author_id = Column('AuthorId', Integer, primary_key=True)
    user_id = Column('UserId', ForeignKey('aspnet_Users.UserId'),
                     nullable=False, index=True)
    name = Column('Name', String(256))

    user = relationship('DBUser', back_populates='authors')


class DBPost(db.Model):  # type: ignore
    """A blog post."""

    __tablename__ = 'Post'

    post_id = Column('Id', Integer, primary_key=True)
    title = Column('Title', String(TITLE_MAX_LENGTH), nullable=False)
    is_published = Column('IsPublished', Boolean, nullable=False,
                          server_default=text('0'))
    published_at = Column('PublishedAt', DateTime)
    expires_at = Column('ExpiresAt', DateTime)
    content = Column('Content', Text)
    is_comments_enabled = Column('IsCommentsEnabled', Boolean,
                                 nullable=False, server_default=text('1'))
    published_by_id = Column('PublishedBy', ForeignKey('aspnet_Users.UserId'),
                             nullable=False, index=True)

    published_by = relationship('DBUser')

    @validates('title')
    def validate_title(self, key: str, title: str) -> str:
        """Titles are required and bounded."""
        if not title:
            raise ValueError('Post title is required')
        if len(title) > TITLE_MAX_LENGTH:
            raise ValueError(f'Post title may not exceed {TITLE_MAX_LENGTH}'
                             ' characters')
        return title
