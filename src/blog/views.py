"""Typed template parameters, one dataclass per view."""

from dataclasses import dataclass, field

from plume.data import Row


@dataclass(frozen=True, slots=True)
class HomeView:
    title: str = "Accueil"
    article_count: int = 0


@dataclass(frozen=True, slots=True)
class ArticleIndexView:
    title: str
    articles: list[Row] = field(default_factory=list)
