"""Controllers for the article site."""

from plume import Controller, Response

from blog.models import ArticleModel
from blog.views import ArticleIndexView, HomeView


class HomeController(Controller):
    def index(self) -> Response:
        count = ArticleModel(self.db).count()
        return self.render("home/index", HomeView(article_count=count))


class ArticleController(Controller):
    def index(self) -> Response:
        """List every article, newest first."""
        articles = ArticleModel(self.db).all()
        return self.render(
            "article/index",
            ArticleIndexView(title="Liste des articles", articles=articles),
        )
