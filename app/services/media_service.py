"""Media article service.

Covers press coverage, photos and documents about projects. An article's
publication state is not stored; it is derived from ``is_public`` and
``approved_by``:

    published: is_public and approved_by is set
    draft:     not is_public and approved_by is empty
    pending:   same predicate as draft
"""
from typing import Optional

from app.models import ArticleStatus, MediaType
from app.services.aggregation import count_where
from app.services.repository import (
    ErrorPolicy,
    Repository,
    check_choice,
    require_fields,
    today_iso,
)
from app.store import Filter, TableStore, eq, is_null, not_null, search

SEARCH_FIELDS = ['title', 'description', 'category']


def status_filters(status: Optional[str]) -> list[Filter]:
    """Store filters selecting articles in a derived publication state.

    Raises:
        ValueError: If status is not a known publication state.
    """
    if not status:
        return []
    check_choice(status, ArticleStatus.ALL)
    if status == ArticleStatus.PUBLISHED:
        return [eq('is_public', True), not_null('approved_by')]
    return [eq('is_public', False), is_null('approved_by')]


def is_published(article: dict) -> bool:
    return bool(article.get('is_public')) and bool(article.get('approved_by'))


def is_unapproved_draft(article: dict) -> bool:
    return not article.get('is_public') and not article.get('approved_by')


class MediaArticleService:
    """CRUD, publication workflow and counters for media articles."""

    REQUIRED_FIELDS = ['title']

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.DEFAULT):
        self.repo = Repository(store, 'media_articles', policy=policy, label='media articles')

    def list_articles(self, status: Optional[str] = None) -> list[dict]:
        """Articles newest first, optionally in one publication state."""
        return self.repo.find(status_filters(status))

    def get_article(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_articles_by_category(self, category: str) -> list[dict]:
        return self.repo.find([eq('category', category)])

    def get_articles_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_articles_by_news_channel(self, news_channel: str) -> list[dict]:
        return self.repo.find([eq('sub_category', news_channel)])

    def get_articles_by_media_type(self, media_type: str) -> list[dict]:
        return self.repo.find([eq('media_type', media_type)])

    def search_articles(self, term: str) -> list[dict]:
        """Case-insensitive substring search over title, description and category."""
        if not term or not term.strip():
            return self.repo.find()
        return self.repo.find([search(SEARCH_FIELDS, term.strip())])

    def get_popular_articles(self, limit: int = 5) -> list[dict]:
        """Most viewed public articles."""
        return self.repo.find(
            [eq('is_public', True)], order_by='views_count', descending=True, limit=limit,
        )

    def get_articles_page(self, page: int = 1, page_size: int = 10,
                          status: Optional[str] = None) -> dict:
        """One page of articles plus the total matching count.

        Returns:
            {'data': [...], 'total': n}
        """
        rows, total = self.repo.page(page, page_size, status_filters(status))
        return {'data': rows, 'total': total}

    def create_article(self, data: dict) -> Optional[dict]:
        """Create an article as an unapproved, private draft by default.

        Raises:
            ValueError: If title is missing or media_type is invalid.
        """
        require_fields(data, self.REQUIRED_FIELDS)
        if 'media_type' in data:
            check_choice(data['media_type'], MediaType.ALL, field='media_type')
        payload = {
            'is_public': False,
            'views_count': 0,
            'downloads_count': 0,
            **data,
        }
        return self.repo.create(payload)

    def update_article(self, id: str, data: dict) -> Optional[dict]:
        if 'media_type' in data:
            check_choice(data['media_type'], MediaType.ALL, field='media_type')
        return self.repo.update(id, data)

    def publish_article(self, id: str, publish: bool = True) -> bool:
        """Set or clear is_public. Returns True if the article exists."""
        return self.repo.update(id, {'is_public': publish}) is not None

    def approve_article(self, id: str, approved_by: str,
                        approval_date: Optional[str] = None) -> bool:
        """Record approval and make the article public.

        approval_date defaults to today.
        """
        return self.repo.update(id, {
            'approved_by': approved_by,
            'approval_date': approval_date or today_iso(),
            'is_public': True,
        }) is not None

    def _increment(self, id: str, field: str) -> bool:
        article = self.get_article(id)
        if article is None:
            return False
        return self.repo.update(id, {field: (article.get(field) or 0) + 1}) is not None

    def increment_views(self, id: str) -> bool:
        """Add one to views_count (read-then-write; concurrent hits may be lost)."""
        return self._increment(id, 'views_count')

    def increment_downloads(self, id: str) -> bool:
        return self._increment(id, 'downloads_count')

    def delete_article(self, id: str) -> bool:
        return self.repo.delete(id)

    def delete_articles(self, ids: list[str]) -> bool:
        """Delete several articles in one call; no per-id results."""
        if not ids:
            return True
        return self.repo.delete_many(ids)

    def get_article_stats(self, articles: list[dict] = None) -> dict:
        """Counts of articles per derived publication state.

        Draft and pending share one predicate, so they always report the
        same number.
        """
        if articles is None:
            articles = self.repo.find(columns=['id', 'is_public', 'approved_by'])
        return {
            'total': len(articles),
            'published': count_where(articles, is_published),
            'draft': count_where(articles, is_unapproved_draft),
            'pending': count_where(articles, is_unapproved_draft),
        }
