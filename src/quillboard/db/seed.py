"""Demo data — three users, five posts, six comments.

Every demo account has the password "password123".
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quillboard.auth.password import hash_password
from quillboard.db.models import Comment, Post, User

logger = structlog.get_logger()

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("alice@example.com", "Alice Johnson"),
    ("bob@example.com", "Bob Smith"),
    ("charlie@example.com", "Charlie Brown"),
]

# (author email, title, content, published)
DEMO_POSTS = [
    ("alice@example.com", "My First Post",
     "This is my first blog post. Welcome to my blog!", True),
    ("alice@example.com", "Getting Started with FastAPI",
     "FastAPI is a great framework for building APIs in Python...", True),
    ("bob@example.com", "Database Design Best Practices",
     "When designing a database schema, consider these important factors...", False),
    ("charlie@example.com", "Advanced SQLAlchemy Queries",
     "Learn how to use filtering, pagination, and sorting in SQLAlchemy...", True),
    ("bob@example.com", "Authentication with JWT",
     "Implementing JWT authentication in Python web applications...", True),
]

# (author email, index into DEMO_POSTS, content)
DEMO_COMMENTS = [
    ("alice@example.com", 0, "Great post! Very informative."),
    ("bob@example.com", 0, "Thanks for sharing this knowledge!"),
    ("alice@example.com", 1, "This helped me a lot with my project."),
    ("bob@example.com", 2, "Excellent tutorial! Very well explained."),
    ("charlie@example.com", 0, "I learned a lot from this post."),
    ("alice@example.com", 3, "Can you write more about this topic?"),
]


@dataclass
class SeedResult:
    users: int
    posts: int
    comments: int


class AlreadySeededError(RuntimeError):
    """The database already has users; seeding again would collide."""


async def seed_demo_data(db: AsyncSession) -> SeedResult:
    existing = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    if existing:
        raise AlreadySeededError(f"Database already has {existing} user(s)")

    password_hash = hash_password(DEMO_PASSWORD)
    users = {
        email: User(email=email, name=name, password_hash=password_hash)
        for email, name in DEMO_USERS
    }
    db.add_all(users.values())

    posts = [
        Post(title=title, content=content, published=published, author=users[email])
        for email, title, content, published in DEMO_POSTS
    ]
    db.add_all(posts)

    comments = [
        Comment(content=content, author=users[email], post=posts[index])
        for email, index, content in DEMO_COMMENTS
    ]
    db.add_all(comments)

    await db.commit()
    result = SeedResult(users=len(users), posts=len(posts), comments=len(comments))
    logger.info("db.seeded", users=result.users, posts=result.posts, comments=result.comments)
    return result
