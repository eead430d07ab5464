"""Shared fixtures: an articles database and an in-memory template set."""

import pytest
from kida import DictLoader, Environment

from plume.data import Database
from plume.templating.integration import ViewRenderer

LAYOUT = """\
<html>
<head><title>{{ title }}</title></head>
<body>
{{ content }}
</body>
</html>"""

ARTICLE_INDEX = """\
<h1>{{ title }}</h1>
<ul class="articles">
{% for article in articles %}
<li>{{ article["title"] }}</li>
{% end %}
</ul>"""

NOTE = """<div class="note">{{ note }}</div>"""

TEMPLATES = {
    "layout.html": LAYOUT,
    "article/index.html": ARTICLE_INDEX,
    "note.html": NOTE,
}


@pytest.fixture
def kida_env() -> Environment:
    """A kida Environment over the in-memory test templates."""
    return Environment(loader=DictLoader(dict(TEMPLATES)), autoescape=True)


@pytest.fixture
def views(kida_env: Environment) -> ViewRenderer:
    return ViewRenderer(kida_env, layout="layout.html")


@pytest.fixture
def db(tmp_path):
    """A connected SQLite database with an empty articles table."""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    database.connect()
    database.execute(
        "CREATE TABLE articles ("
        "  id INTEGER PRIMARY KEY AUTOINCREMENT,"
        "  title TEXT NOT NULL,"
        "  content TEXT NOT NULL DEFAULT ''"
        ")"
    )
    yield database
    database.disconnect()


@pytest.fixture
def seeded_db(db: Database) -> Database:
    """Articles database with three rows (ids 1, 2, 3)."""
    for title in ("First", "Second", "Third"):
        db.execute("INSERT INTO articles (title, content) VALUES (?, ?)", title, f"{title} body")
    return db
