"""Fixture data for a freshly started platform.

Three users, three posts, three comments, three likes and three follows,
loaded through the store's own ``create_*`` operations so that ids and
timestamps are assigned exactly as for any other entity.

Example:
    >>> store = InMemoryStore()
    >>> seed_store(store)
    >>> store.counts()
    {'users': 3, 'posts': 3, 'comments': 3, 'likes': 3, 'follows': 3}
"""

from blogdb.interfaces import IEntityStore
from blogdb.logging import logger
from blogdb.types import EntityCounts, UserData

SEED_PASSWORD = "password123"

SEED_USERS: list[UserData] = [
    {
        "username": "johndoe",
        "email": "john@example.com",
        "password": SEED_PASSWORD,
        "profile_picture": "https://images.pexels.com/photos/220453/pexels-photo-220453.jpeg",
        "bio": "Tech enthusiast and coffee lover",
    },
    {
        "username": "janedoe",
        "email": "jane@example.com",
        "password": SEED_PASSWORD,
        "profile_picture": "https://images.pexels.com/photos/415829/pexels-photo-415829.jpeg",
        "bio": "Travel blogger and photographer",
    },
    {
        "username": "mikesmith",
        "email": "mike@example.com",
        "password": SEED_PASSWORD,
        "profile_picture": "https://images.pexels.com/photos/771742/pexels-photo-771742.jpeg",
        "bio": "Software developer and hiking enthusiast",
    },
]

# (author index, title, content)
SEED_POSTS: list[tuple[int, str, str]] = [
    (
        0,
        "Getting Started with React",
        "React is a JavaScript library for building user interfaces. It lets you "
        'compose complex UIs from small and isolated pieces of code called "components".',
    ),
    (
        1,
        "My Trip to the Mountains",
        "Last weekend, I took a trip to the mountains. The views were breathtaking "
        "and the experience was unforgettable. Here are some thoughts on mountain "
        "hiking and what to bring with you.",
    ),
    (
        2,
        "The Future of Web Development",
        "Web development is constantly evolving. From static HTML pages to complex "
        "web applications, the journey has been remarkable. Where are we headed next?",
    ),
]

# (author index, post index, content)
SEED_COMMENTS: list[tuple[int, int, str]] = [
    (1, 0, "Great post! I found it very helpful."),
    (0, 1, "Those views are amazing! Which mountain range was this?"),
    (0, 2, "I agree, WebAssembly will change everything!"),
]

# (user index, post index)
SEED_LIKES: list[tuple[int, int]] = [(1, 0), (2, 0), (0, 1)]

# (follower index, followed index)
SEED_FOLLOWS: list[tuple[int, int]] = [(0, 1), (0, 2), (1, 0)]


def seed_store(store: IEntityStore) -> EntityCounts:
    """Load the fixture data set into ``store``.

    The store is expected to be empty; seeding twice duplicates users and
    posts (likes and follows stay unique per pair).

    Returns:
        Entity counts after seeding
    """
    users = [store.create_user(data) for data in SEED_USERS]
    posts = [
        store.create_post({"title": title, "content": content, "author_id": users[author].id})
        for author, title, content in SEED_POSTS
    ]
    for author, post, content in SEED_COMMENTS:
        store.create_comment(
            {"content": content, "author_id": users[author].id, "post_id": posts[post].id}
        )
    for user, post in SEED_LIKES:
        store.create_like({"user_id": users[user].id, "post_id": posts[post].id})
    for follower, followed in SEED_FOLLOWS:
        store.create_follow(
            {"follower_id": users[follower].id, "followed_id": users[followed].id}
        )

    counts = store.counts()
    logger.info(f"✅ Seeded fixture data: {counts}")
    return counts
