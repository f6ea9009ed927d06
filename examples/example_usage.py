"""Example usage of the bucketlist client."""

import asyncio
from pathlib import Path

from bucketlist import get_client, load_config
from bucketlist.models import CommentMode, Order, PullRequestState, WhitespaceMode

CONFIG_PATH = Path("examples/bucketlist.yaml")


# Example 1: Walk every merged PR, oldest first
async def example_merged_prs() -> None:
    """Print every merged PR in a repository."""
    client = get_client(load_config(CONFIG_PATH))

    async with client.http_client:
        async for page in client.get_prs("PROJ", "repo", PullRequestState.MERGED, Order.OLDEST):
            for pr in page.values:
                print(f"#{pr.id} by {pr.author.name}, opened {pr.created_at:%Y-%m-%d}")


# Example 2: Count comments per PR, fetching activity for several PRs at once
async def example_comment_counts() -> None:
    """Count every comment and reply on the first page of open PRs."""
    client = get_client(load_config(CONFIG_PATH))

    async with client.http_client:
        first_page = await client.get_prs("PROJ", "repo", PullRequestState.OPEN).first()

        async def count_comments(pr_id: int) -> int:
            total = 0
            async for page in client.get_pr_activity("PROJ", "repo", pr_id):
                for activity in page.values:
                    if activity.action == "COMMENTED" and activity.comment is not None:
                        total += sum(1 for _ in activity.comment.iter_thread())
            return total

        counts = await asyncio.gather(*(count_comments(pr.id) for pr in first_page.values))
        for pr, count in zip(first_page.values, counts, strict=True):
            print(f"#{pr.id}: {count} comments")


# Example 3: Files touched by a PR
async def example_diff() -> None:
    """List the files a PR changes, ignoring whitespace."""
    client = get_client(load_config(CONFIG_PATH))

    async with client.http_client:
        diff = await client.get_pr_diff(
            "PROJ", "repo", 2, 0, WhitespaceMode.IGNORE_ALL, CommentMode.WITHOUT_COMMENTS
        ).first()
        for file_diff in diff.diffs:
            path = file_diff.destination or file_diff.source
            if path is not None:
                print(path.full_path)


if __name__ == "__main__":
    asyncio.run(example_merged_prs())
