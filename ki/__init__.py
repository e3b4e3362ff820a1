"""
Ki blog application.

Ki is a small Flask application for publishing blog posts. It provides
account registration, log on and log off, and password changes for
authors, as well as a home page listing the posts that are currently
published.

Account workflows are handled by :class:`.controllers.account.AccountController`,
which validates submitted form data and then talks to a membership
service. The membership service wraps a pluggable provider; by default that
is :class:`.services.datastore.SqlMembershipProvider`, which keeps user
credentials in the legacy ``aspnet_Users`` and ``aspnet_Membership``
tables. Authenticated sessions are carried in Flask's signed session
cookie.
"""
