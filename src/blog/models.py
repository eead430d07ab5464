"""Data access for the article site."""

from plume.data import Model


class ArticleModel(Model):
    """Rows of ``articles``: id, title, content, created_at."""

    table = "articles"
    order_by = "id DESC"
