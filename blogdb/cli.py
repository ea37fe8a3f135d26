"""Command-line interface for BlogDB.

This module provides a Typer-based CLI for inspecting a platform instance.
Every command starts a fresh platform seeded with the fixture data; nothing
survives the process.

Commands:
- status: Show configuration and entity counts
- users: List users with follower/following counts
- posts: List posts, optionally by one author
- feed: Show a user's feed
- show: Show one post with its comments

Example:
    $ blogdb status
    $ blogdb posts --author jane@example.com
    $ blogdb feed john@example.com
    $ blogdb show "My Trip to the Mountains"
"""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from blogdb.config import settings
from blogdb.logging import logger
from blogdb.models import Post
from blogdb.platform import BlogPlatform
from blogdb.utils import format_iso

# Initialize CLI app
app = typer.Typer(
    name="blogdb",
    help="In-memory social blogging platform inspector",
    add_completion=False,
)
console = Console()

VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")


# =============================================================================
# Helper Functions
# =============================================================================


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, set DEBUG level; otherwise only warnings and errors
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "{message}",
    )


@contextmanager
def open_platform() -> Iterator[BlogPlatform]:
    """Build and initialize a platform from the global settings, closing it on exit."""
    platform = BlogPlatform(settings=settings)
    try:
        platform.initialize()
        yield platform
    finally:
        platform.close()


def find_post(platform: BlogPlatform, ref: str) -> Post | None:
    """Find a post by id, id prefix or case-insensitive title."""
    post = platform.posts.get_post_by_id(ref)
    if post is not None:
        return post
    for candidate in platform.posts.get_all_posts():
        if candidate.id.startswith(ref) or candidate.title.lower() == ref.lower():
            return candidate
    return None


def posts_table(platform: BlogPlatform, posts: list[Post], title: str) -> Table:
    """Render posts with author, like and comment counts."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Author", style="yellow")
    table.add_column("Likes", justify="right", style="green")
    table.add_column("Comments", justify="right", style="green")

    for post in posts:
        author = platform.users.get_user_by_id(post.author_id)
        table.add_row(
            post.id[:8],
            post.title,
            author.username if author else "(deleted)",
            str(platform.posts.get_post_likes_count(post.id)),
            str(len(platform.posts.get_comments_by_post_id(post.id))),
        )
    return table


# =============================================================================
# CLI Commands
# =============================================================================


@app.command()
def status(verbose: bool = VerboseOption) -> None:
    """Show configuration and entity counts.

    Examples:
        $ blogdb status
    """
    setup_logging(verbose)

    console.print("📊 [bold cyan]BlogDB Status[/bold cyan]\n")

    try:
        with open_platform() as platform:
            config_table = Table(title="Configuration", show_header=False)
            config_table.add_column("Key", style="cyan")
            config_table.add_column("Value", style="yellow")

            config_table.add_row("Environment", str(settings.environment))
            config_table.add_row("Store Backend", str(settings.store_backend))
            config_table.add_row("Session Secret", settings.redact_secret())
            config_table.add_row("Session Lifetime", f"{settings.session_ttl_hours} hours")
            config_table.add_row("Fixtures", "seeded" if settings.seed_fixtures else "off")

            console.print(config_table)
            console.print()

            stats = platform.get_statistics()

            stats_table = Table(title="Entity Counts")
            stats_table.add_column("Entity", style="cyan")
            stats_table.add_column("Count", justify="right", style="green")

            for entity, count in stats.items():
                stats_table.add_row(entity.capitalize(), f"{count:,}")

            console.print(stats_table)

            if settings.uses_default_secret:
                console.print(
                    "\n⚠️  [yellow]Using the built-in development session secret[/yellow]"
                )

    except Exception as e:
        console.print(f"\n❌ [bold red]Failed to get status: {e}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def users(verbose: bool = VerboseOption) -> None:
    """List users with their follower and following counts.

    Examples:
        $ blogdb users
    """
    setup_logging(verbose)

    try:
        with open_platform() as platform:
            table = Table(title="Users")
            table.add_column("Username", style="cyan")
            table.add_column("Email", style="yellow")
            table.add_column("Followers", justify="right", style="green")
            table.add_column("Following", justify="right", style="green")
            table.add_column("Bio")

            for user in platform.users.get_all_users():
                table.add_row(
                    user.username,
                    user.email,
                    str(platform.users.get_followers_count(user.id)),
                    str(platform.users.get_following_count(user.id)),
                    user.bio or "",
                )

            console.print(table)

    except Exception as e:
        console.print(f"\n❌ [bold red]Failed to list users: {e}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def posts(
    author: Optional[str] = typer.Option(
        None,
        "--author",
        "-a",
        help="Only show posts by the user with this email",
    ),
    verbose: bool = VerboseOption,
) -> None:
    """List posts, newest first.

    Examples:
        $ blogdb posts
        $ blogdb posts --author jane@example.com
    """
    setup_logging(verbose)

    try:
        with open_platform() as platform:
            if author:
                user = platform.store.get_user_by_email(author)
                if user is None:
                    console.print(f"❌ [bold red]No user with email {author}[/bold red]")
                    raise typer.Exit(code=1)
                selected = platform.posts.get_posts_by_user_id(user.id)
                title = f"Posts by {user.username}"
            else:
                selected = platform.posts.get_all_posts()
                title = "All Posts"

            console.print(posts_table(platform, selected, title))

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n❌ [bold red]Failed to list posts: {e}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def feed(
    email: str = typer.Argument(..., help="Email of the user whose feed to show"),
    verbose: bool = VerboseOption,
) -> None:
    """Show a user's feed: their own posts and posts of users they follow.

    Examples:
        $ blogdb feed john@example.com
    """
    setup_logging(verbose)

    try:
        with open_platform() as platform:
            user = platform.store.get_user_by_email(email)
            if user is None:
                console.print(f"❌ [bold red]No user with email {email}[/bold red]")
                raise typer.Exit(code=1)

            entries = platform.posts.get_feed_posts(user.id)
            if entries:
                console.print(posts_table(platform, entries, f"Feed for {user.username}"))
            else:
                console.print(f"📭 Feed for {user.username} is empty")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n❌ [bold red]Failed to build feed: {e}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def show(
    post_ref: str = typer.Argument(..., help="Post id, id prefix or title"),
    verbose: bool = VerboseOption,
) -> None:
    """Show one post with its comments, oldest first.

    Examples:
        $ blogdb show "Getting Started with React"
    """
    setup_logging(verbose)

    try:
        with open_platform() as platform:
            post = find_post(platform, post_ref)
            if post is None:
                console.print(f"❌ [bold red]Post not found: {post_ref}[/bold red]")
                raise typer.Exit(code=1)

            author = platform.users.get_user_by_id(post.author_id)
            console.print(f"📝 [bold cyan]{post.title}[/bold cyan]")
            console.print(
                f"by [yellow]{author.username if author else '(deleted)'}[/yellow] "
                f"at {format_iso(post.created_at)}"
            )
            console.print(f"❤️  {platform.posts.get_post_likes_count(post.id)} likes\n")
            console.print(post.content)
            console.print()

            comments = platform.comments.get_comments_by_post_id(post.id)
            if not comments:
                console.print("💬 No comments yet")
            for comment in comments:
                commenter = platform.users.get_user_by_id(comment.author_id)
                name = commenter.username if commenter else "(deleted)"
                console.print(f"💬 [yellow]{name}[/yellow]: {comment.content}")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n❌ [bold red]Failed to show post: {e}[/bold red]")
        raise typer.Exit(code=1)


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
