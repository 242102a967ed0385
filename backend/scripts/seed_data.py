"""Seed the database with sample users, authors and content."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import timedelta
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.article import Article
from app.models.author import Author
from app.models.blog_post import BlogPost
from app.models.story import Story
from app.models.taxonomy import Category, Tag
from app.models.user import User
from app.models.wiki_page import WikiPage
from app.services.auth_service import hash_password
from app.utils.helpers import make_slug, utcnow

DEFAULT_PASSWORD = "Portal123"


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        password_hash = hash_password(DEFAULT_PASSWORD)
        users = [
            User(email="admin@portal.local", username="admin", name="Portal Admin", role="ADMIN"),
            User(email="editor@portal.local", username="editor", name="Desk Editor", role="MODERATOR"),
            User(email="reader@portal.local", username="reader", name="Curious Reader", role="USER"),
        ]
        for user in users:
            user.password_hash = password_hash
            user.email_verified = True
        db.add_all(users)
        db.flush()
        editor = users[1]

        authors = [
            Author(name="Mina Park", slug=make_slug("Mina Park"), bio="Science correspondent"),
            Author(name="Leo Grant", slug=make_slug("Leo Grant"), bio="Fiction writer"),
        ]
        db.add_all(authors)
        db.flush()

        categories = [Category(name=name, slug=make_slug(name)) for name in ("Science", "Culture", "Guides")]
        tags = [Tag(name=name, slug=make_slug(name)) for name in ("space", "history", "how-to")]
        db.add_all(categories + tags)
        db.flush()

        now = utcnow()

        def common(title, author, status="PUBLISHED"):
            return dict(
                title=title,
                slug=make_slug(title),
                status=status,
                published_at=now if status == "PUBLISHED" else None,
                author_id=author.author_id,
                user_id=editor.user_id,
            )

        article = Article(content="The probe reached orbit on schedule.", excerpt="Launch recap",
                          **common("Probe Reaches Orbit", authors[0]))
        article.categories = [categories[0]]
        article.tags = [tags[0]]
        scheduled = Article(content="Embargoed until tomorrow.", scheduled_publish_at=now + timedelta(days=1),
                            **common("Eclipse Preview", authors[0], status="SCHEDULED"))
        post = BlogPost(content="Notes from the editorial desk.", **common("Desk Notes", authors[0]))
        chapter_one = Story(content="It began at dawn.", series="The Long Road", **common("The Long Road: Dawn", authors[1]))
        chapter_two = Story(content="Night fell quickly.", series="The Long Road", **common("The Long Road: Dusk", authors[1]))
        db.add_all([article, scheduled, post, chapter_one, chapter_two])
        db.flush()

        guide = WikiPage(content="Start here.", **common("Getting Started", authors[0]))
        guide.categories = [categories[2]]
        db.add(guide)
        db.flush()
        db.add(WikiPage(content="Create an account first.", parent_id=guide.wiki_page_id, **common("Accounts", authors[0])))

        db.commit()
        print(f"Seed data inserted successfully. Login password for all users: {DEFAULT_PASSWORD}")
    except Exception as e:
        db.rollback()
        print(f"Seed failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
