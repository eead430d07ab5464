"""Application factory for the article site.

Run it with::

    plume run blog.app:create_app
"""

import os
from pathlib import Path

from plume import App, AppConfig

from blog.controllers import ArticleController, HomeController

PACKAGE_DIR = Path(__file__).parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
MIGRATIONS_DIR = PACKAGE_DIR / "migrations"
DEFAULT_DB_URL = "sqlite:///blog.db"


def create_app(config: AppConfig | None = None, *, db_url: str | None = None) -> App:
    """Build the site: routes, templates and the articles database.

    The database URL comes from *db_url*, then ``BLOG_DATABASE_URL``,
    then ``sqlite:///blog.db`` in the working directory.
    """
    app = App(
        config or AppConfig(template_dir=TEMPLATES_DIR),
        db=db_url or os.environ.get("BLOG_DATABASE_URL", DEFAULT_DB_URL),
        migrations=MIGRATIONS_DIR,
    )
    app.get("/", HomeController, HomeController.index)
    app.get("/articles", ArticleController, ArticleController.index)
    return app
