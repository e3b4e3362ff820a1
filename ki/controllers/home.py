"""Controller for the home page."""

from typing import Any, Dict, Optional
from datetime import datetime
import logging

from ..domain import ViewResult
from ..services import datastore
from ..services.datastore.models import DBPost

logger = logging.getLogger(__name__)


def index(now: Optional[datetime] = None) -> ViewResult:
    """List the posts that are currently published, newest first."""
    posts = datastore.get_published_posts(now)
    logger.debug('Found %i published posts', len(posts))
    return ViewResult('Index', {}, {'posts': [_summarize(p) for p in posts]})


def _summarize(post: DBPost) -> Dict[str, Any]:
    return {
        'id': post.post_id,
        'title': post.title,
        'content': post.content,
        'published_at': post.published_at.isoformat()
        if post.published_at else None,
        'published_by': post.published_by.user_name,
        'comments_enabled': post.is_comments_enabled,
    }
